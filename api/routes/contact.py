"""
Contact form endpoints.

- POST /api/contact - Submit a message (public)
- GET /api/contact - Inbox (moderator/admin)
- GET /api/contact/{id} - Read a message, marking it read
- PUT /api/contact/{id} - Set status or reply
- DELETE /api/contact/{id} - Delete (admin)
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query as QueryParam, status

from api.auth import require_admin, require_moderator_or_admin
from api.dependencies import get_storage
from api.schemas import ApiResponse, ContactCreate, ContactUpdate, ok
from core.entities import ContactCategory, ContactStatus
from core.identifiers import utcnow
from core.logging import get_logger
from core.storage import DESCENDING, Page, Query, StorageContext


logger = get_logger(__name__)
router = APIRouter(prefix="/api/contact", tags=["Contact"])


@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def submit_contact(
    body: ContactCreate,
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    document = body.to_document()
    document["status"] = ContactStatus.NEW.value

    contact = await storage.contacts.insert(document)
    logger.info("Contact message received", contact_id=contact["id"], category=contact["category"])
    return ok(message="Thank you for contacting us! We will get back to you soon.")


@router.get("", response_model=ApiResponse)
async def list_contacts(
    status_filter: Optional[ContactStatus] = QueryParam(default=None, alias="status"),
    category: Optional[ContactCategory] = None,
    page: int = QueryParam(default=1, ge=1),
    limit: int = QueryParam(default=20, ge=1, le=100),
    _: dict[str, Any] = Depends(require_moderator_or_admin),
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    query = Query()
    if status_filter:
        query = query.where(status=status_filter.value)
    if category:
        query = query.where(category=category.value)

    result = await storage.contacts.find_page(
        query,
        [("createdAt", DESCENDING)],
        Page(page, limit),
    )
    return ok({
        "contacts": result.items,
        "pagination": result.pagination("totalMessages"),
    })


@router.get("/{contact_id}", response_model=ApiResponse)
async def get_contact(
    contact_id: str,
    _: dict[str, Any] = Depends(require_moderator_or_admin),
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    query = Query.by_id(contact_id)
    contact = await storage.contacts.find_one(query)
    if contact.get("status") == ContactStatus.NEW.value:
        contact = await storage.contacts.update(query, {"status": ContactStatus.READ.value})
    return ok(contact)


@router.put("/{contact_id}", response_model=ApiResponse)
async def update_contact(
    contact_id: str,
    body: ContactUpdate,
    user: dict[str, Any] = Depends(require_moderator_or_admin),
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    changes = body.to_document(partial=True)
    if changes.get("reply"):
        changes["status"] = ContactStatus.REPLIED.value
        changes["repliedAt"] = utcnow()

    contact = await storage.contacts.update(Query.by_id(contact_id), changes)
    logger.info("Contact updated", contact_id=contact_id, status=contact.get("status"), user_id=user["id"])
    return ok(contact, message="Contact updated successfully")


@router.delete("/{contact_id}", response_model=ApiResponse)
async def delete_contact(
    contact_id: str,
    admin: dict[str, Any] = Depends(require_admin),
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    await storage.contacts.delete(Query.by_id(contact_id))
    logger.info("Contact deleted", contact_id=contact_id, admin_id=admin["id"])
    return ok(message="Contact deleted successfully")
