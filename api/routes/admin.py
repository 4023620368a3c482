"""
Admin endpoints.

- GET /api/admin/dashboard - Record counts across all collections
"""

from typing import Any

from fastapi import APIRouter, Depends

from api.auth import require_admin
from api.dependencies import get_storage
from api.schemas import ApiResponse, ok
from core.storage import StorageContext
from services.dashboard import dashboard_stats


router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/dashboard", response_model=ApiResponse)
async def dashboard(
    _: dict[str, Any] = Depends(require_admin),
    storage: StorageContext = Depends(get_storage),
) -> ApiResponse:
    return ok(await dashboard_stats(storage))
