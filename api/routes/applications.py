"""
Recruitment application endpoints.

- POST /api/applications - Submit an application (public)
- GET /api/applications - List with filters (moderator/admin)
- GET /api/applications/stats - Counts by status and position
- GET /api/applications/check/{email} - Whether an email already applied
- GET/PUT/DELETE /api/applications/{id} - By record id or applicationId
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query as QueryParam, status

from api.auth import require_admin, require_moderator_or_admin
from api.dependencies import get_application_service, get_storage
from api.schemas import ApiResponse, ApplicationCreate, ApplicationUpdate, ok
from core.entities import ApplicationStatus, Department, Position
from core.identifiers import is_application_id
from core.logging import get_logger
from core.storage import DESCENDING, Page, Query, Search, StorageContext
from services.applications import ApplicationService


logger = get_logger(__name__)
router = APIRouter(prefix="/api/applications", tags=["Applications"])

SEARCH_FIELDS = ("fullName", "email", "rollNo")


def _lookup(application_id: str) -> Query:
    if is_application_id(application_id):
        return Query(equals={"applicationId": application_id})
    return Query.by_id(application_id)


@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def submit_application(
    body: ApplicationCreate,
    service: ApplicationService = Depends(get_application_service),
) -> ApiResponse:
    application = await service.submit(body.to_document())
    return ok(
        {
            "applicationId": application["applicationId"],
            "name": application["fullName"],
            "position": application["position"],
            "submittedAt": application["submittedAt"],
        },
        message="Application submitted successfully!",
    )


@router.get("", response_model=ApiResponse)
async def list_applications(
    status_filter: Optional[ApplicationStatus] = QueryParam(default=None, alias="status"),
    position: Optional[Position] = None,
    department: Optional[Department] = None,
    search: Optional[str] = None,
    page: int = QueryParam(default=1, ge=1),
    limit: int = QueryParam(default=10, ge=1, le=100),
    _: dict[str, Any] = Depends(require_moderator_or_admin),
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    query = Query()
    if status_filter:
        query = query.where(status=status_filter.value)
    if position:
        query = query.where(position=position.value)
    if department:
        query = query.where(department=department.value)
    if search:
        query.search = Search(search, SEARCH_FIELDS)

    result = await storage.applications.find_page(
        query,
        [("submittedAt", DESCENDING)],
        Page(page, limit),
    )
    return ok({
        "applications": result.items,
        "pagination": result.pagination("totalApplications"),
    })


@router.get("/stats", response_model=ApiResponse)
async def application_stats(
    _: dict[str, Any] = Depends(require_moderator_or_admin),
    service: ApplicationService = Depends(get_application_service),
) -> ApiResponse:
    return ok(await service.stats())


@router.get("/check/{email}", response_model=ApiResponse)
async def check_application(
    email: str,
    service: ApplicationService = Depends(get_application_service),
) -> ApiResponse:
    return ok({"exists": await service.email_exists(email)})


@router.get("/{application_id}", response_model=ApiResponse)
async def get_application(
    application_id: str,
    _: dict[str, Any] = Depends(require_moderator_or_admin),
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    return ok(await storage.applications.find_one(_lookup(application_id)))


@router.put("/{application_id}", response_model=ApiResponse)
async def update_application(
    application_id: str,
    body: ApplicationUpdate,
    user: dict[str, Any] = Depends(require_moderator_or_admin),
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    application = await storage.applications.update(
        _lookup(application_id),
        body.to_document(partial=True),
    )
    logger.info(
        "Application updated",
        application_id=application["applicationId"],
        status=application.get("status"),
        reviewer_id=user["id"],
    )
    return ok(application, message="Application updated successfully")


@router.delete("/{application_id}", response_model=ApiResponse)
async def delete_application(
    application_id: str,
    admin: dict[str, Any] = Depends(require_admin),
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    application = await storage.applications.delete(_lookup(application_id))
    logger.info(
        "Application deleted",
        application_id=application["applicationId"],
        admin_id=admin["id"],
    )
    return ok(message="Application deleted successfully")
