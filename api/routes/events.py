"""
Event endpoints.

- GET /api/events - List with filters and pagination
- GET /api/events/upcoming - Next events from now
- GET /api/events/{id} - Event details
- POST /api/events - Create (moderator/admin)
- PUT /api/events/{id} - Update (moderator/admin)
- DELETE /api/events/{id} - Delete (admin)
- POST /api/events/{id}/register - Take a participant slot
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query as QueryParam, status

from api.auth import require_admin, require_moderator_or_admin
from api.dependencies import get_storage
from api.schemas import ApiResponse, EventCreate, EventRegistration, EventUpdate, ok
from core.entities import EventStatus, EventType
from core.exceptions import CapacityError
from core.identifiers import utcnow
from core.logging import get_logger
from core.storage import ASCENDING, Page, Query, Range, StorageContext


logger = get_logger(__name__)
router = APIRouter(prefix="/api/events", tags=["Events"])

BY_DATE = [("date", ASCENDING)]


@router.get("", response_model=ApiResponse)
async def list_events(
    status_filter: Optional[EventStatus] = QueryParam(default=None, alias="status"),
    event_type: Optional[EventType] = QueryParam(default=None, alias="type"),
    featured: Optional[bool] = None,
    upcoming: bool = False,
    page: int = QueryParam(default=1, ge=1),
    limit: int = QueryParam(default=10, ge=1, le=100),
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    query = Query()
    if status_filter:
        query = query.where(status=status_filter.value)
    if event_type:
        query = query.where(eventType=event_type.value)
    if featured is not None:
        query = query.where(isFeatured=featured)
    if upcoming:
        query.ranges["date"] = Range(gte=utcnow())

    result = await storage.events.find_page(query, BY_DATE, Page(page, limit))
    return ok({
        "events": result.items,
        "pagination": result.pagination("totalEvents"),
    })


@router.get("/upcoming", response_model=ApiResponse)
async def upcoming_events(
    limit: int = QueryParam(default=5, ge=1, le=50),
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    query = Query(ranges={"date": Range(gte=utcnow())})
    events = await storage.events.find_many(query, BY_DATE, Page(1, limit))
    return ok(events)


@router.get("/{event_id}", response_model=ApiResponse)
async def get_event(
    event_id: str,
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    return ok(await storage.events.find_one(Query.by_id(event_id)))


@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    body: EventCreate,
    user: dict[str, Any] = Depends(require_moderator_or_admin),
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    document = body.to_document()
    document["currentParticipants"] = 0
    document["createdBy"] = user["id"]

    event = await storage.events.insert(document)
    logger.info("Event created", event_id=event["id"], created_by=user["id"])
    return ok(event, message="Event created successfully")


@router.put("/{event_id}", response_model=ApiResponse)
async def update_event(
    event_id: str,
    body: EventUpdate,
    _: dict[str, Any] = Depends(require_moderator_or_admin),
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    event = await storage.events.update(Query.by_id(event_id), body.to_document(partial=True))
    return ok(event, message="Event updated successfully")


@router.delete("/{event_id}", response_model=ApiResponse)
async def delete_event(
    event_id: str,
    admin: dict[str, Any] = Depends(require_admin),
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    await storage.events.delete(Query.by_id(event_id))
    logger.info("Event deleted", event_id=event_id, admin_id=admin["id"])
    return ok(message="Event deleted successfully")


@router.post("/{event_id}/register", response_model=ApiResponse)
async def register_for_event(
    event_id: str,
    body: EventRegistration,
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    """
    Register one participant.

    The capacity check and the counter bump happen in a single storage
    operation, so concurrent registrations never overshoot maxParticipants.
    """
    event = await storage.events.increment(
        Query.by_id(event_id),
        "currentParticipants",
        limit_field="maxParticipants",
    )
    if event is None:
        raise CapacityError()

    logger.info(
        "Event registration",
        event_id=event_id,
        participants=event["currentParticipants"],
        email=body.email,
    )
    return ok(message="Registered successfully for the event")
