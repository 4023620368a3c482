"""
News endpoints.

- GET /api/news - Published news; staff may list drafts
- GET /api/news/featured - Published and featured
- GET /api/news/{id} - Details, counts a view
- POST /api/news - Create (moderator/admin)
- PUT /api/news/{id} - Update (moderator/admin)
- DELETE /api/news/{id} - Delete (admin)
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query as QueryParam, status

from api.auth import is_staff, optional_user, require_admin, require_moderator_or_admin
from api.dependencies import get_storage
from api.schemas import ApiResponse, NewsCreate, NewsUpdate, ok
from core.entities import NewsCategory
from core.identifiers import utcnow
from core.logging import get_logger
from core.storage import DESCENDING, Page, Query, StorageContext


logger = get_logger(__name__)
router = APIRouter(prefix="/api/news", tags=["News"])

NEWEST_FIRST = [("publishedAt", DESCENDING)]


@router.get("", response_model=ApiResponse)
async def list_news(
    category: Optional[NewsCategory] = None,
    featured: Optional[bool] = None,
    published: bool = True,
    page: int = QueryParam(default=1, ge=1),
    limit: int = QueryParam(default=10, ge=1, le=100),
    user: Optional[dict[str, Any]] = Depends(optional_user),
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    """
    List news, newest first.

    `published=false` lifts the published-only filter, but only for staff;
    everybody else always sees published items.
    """
    query = Query()
    if published or not is_staff(user):
        query = query.where(isPublished=True)
    if category:
        query = query.where(category=category.value)
    if featured is not None:
        query = query.where(isFeatured=featured)

    result = await storage.news.find_page(query, NEWEST_FIRST, Page(page, limit))
    return ok({
        "news": result.items,
        "pagination": result.pagination("totalNews"),
    })


@router.get("/featured", response_model=ApiResponse)
async def featured_news(
    limit: int = QueryParam(default=5, ge=1, le=50),
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    query = Query(equals={"isPublished": True, "isFeatured": True})
    return ok(await storage.news.find_many(query, NEWEST_FIRST, Page(1, limit)))


@router.get("/{news_id}", response_model=ApiResponse)
async def get_news(
    news_id: str,
    user: Optional[dict[str, Any]] = Depends(optional_user),
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    query = Query.by_id(news_id)
    if not is_staff(user):
        # Drafts answer 404 to the public
        query = query.where(isPublished=True)

    item = await storage.news.increment(query, "views")
    return ok(item)


@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def create_news(
    body: NewsCreate,
    user: dict[str, Any] = Depends(require_moderator_or_admin),
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    document = body.to_document()
    document["views"] = 0
    document["publishedAt"] = utcnow() if document["isPublished"] else None

    item = await storage.news.insert(document)
    logger.info("News created", news_id=item["id"], published=item["isPublished"], created_by=user["id"])
    return ok(item, message="News created successfully")


@router.put("/{news_id}", response_model=ApiResponse)
async def update_news(
    news_id: str,
    body: NewsUpdate,
    _: dict[str, Any] = Depends(require_moderator_or_admin),
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    query = Query.by_id(news_id)
    changes = body.to_document(partial=True)

    if changes.get("isPublished"):
        current = await storage.news.find_one(query)
        if not current.get("publishedAt"):
            changes["publishedAt"] = utcnow()

    item = await storage.news.update(query, changes)
    return ok(item, message="News updated successfully")


@router.delete("/{news_id}", response_model=ApiResponse)
async def delete_news(
    news_id: str,
    admin: dict[str, Any] = Depends(require_admin),
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    await storage.news.delete(Query.by_id(news_id))
    logger.info("News deleted", news_id=news_id, admin_id=admin["id"])
    return ok(message="News deleted successfully")
