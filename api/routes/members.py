"""
Chapter member endpoints.

- GET /api/members - Roster, ordered for display
- GET /api/members/teams - Active members grouped by team
- GET /api/members/{id} - Member details
- POST /api/members - Add (moderator/admin)
- PUT /api/members/{id} - Update (moderator/admin)
- DELETE /api/members/{id} - Remove (admin)
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, status

from api.auth import require_admin, require_moderator_or_admin
from api.dependencies import get_storage
from api.schemas import ApiResponse, MemberCreate, MemberUpdate, ok
from core.entities import Team
from core.identifiers import utcnow
from core.logging import get_logger
from core.storage import ASCENDING, DESCENDING, Query, StorageContext


logger = get_logger(__name__)
router = APIRouter(prefix="/api/members", tags=["Members"])

DISPLAY_ORDER = [("order", ASCENDING)]


@router.get("", response_model=ApiResponse)
async def list_members(
    team: Optional[Team] = None,
    active: bool = True,
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    query = Query()
    if active:
        query = query.where(isActive=True)
    if team:
        query = query.where(team=team.value)

    return ok(await storage.members.find_many(query, DISPLAY_ORDER))


@router.get("/teams", response_model=ApiResponse)
async def members_by_team(storage: StorageContext = Depends(get_storage)) -> ApiResponse:
    members = await storage.members.find_many(Query(equals={"isActive": True}), DISPLAY_ORDER)

    teams: dict[str, list[dict[str, Any]]] = {team.value: [] for team in Team}
    for member in members:
        if member.get("team") in teams:
            teams[member["team"]].append(member)
    return ok(teams)


@router.get("/{member_id}", response_model=ApiResponse)
async def get_member(
    member_id: str,
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    return ok(await storage.members.find_one(Query.by_id(member_id)))


@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def create_member(
    body: MemberCreate,
    user: dict[str, Any] = Depends(require_moderator_or_admin),
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    document = body.to_document()
    if document.get("order") is None:
        last = await storage.members.first(Query(), sort=[("order", DESCENDING)])
        document["order"] = ((last or {}).get("order") or 0) + 1
    document["joinedAt"] = utcnow()

    member = await storage.members.insert(document)
    logger.info("Member added", member_id=member["id"], team=member["team"], added_by=user["id"])
    return ok(member, message="Member added successfully")


@router.put("/{member_id}", response_model=ApiResponse)
async def update_member(
    member_id: str,
    body: MemberUpdate,
    _: dict[str, Any] = Depends(require_moderator_or_admin),
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    member = await storage.members.update(Query.by_id(member_id), body.to_document(partial=True))
    return ok(member, message="Member updated successfully")


@router.delete("/{member_id}", response_model=ApiResponse)
async def delete_member(
    member_id: str,
    admin: dict[str, Any] = Depends(require_admin),
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    await storage.members.delete(Query.by_id(member_id))
    logger.info("Member deleted", member_id=member_id, admin_id=admin["id"])
    return ok(message="Member deleted successfully")
