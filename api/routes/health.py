"""
Health check endpoints.

Provides endpoints for monitoring and load balancer health checks.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_storage
from core.identifiers import utcnow
from core.storage import StorageContext


router = APIRouter(prefix="/api", tags=["Health"])


@router.get("/health")
async def health_check(storage: StorageContext = Depends(get_storage)) -> dict:
    """
    Basic health check.

    Returns 200 while the service is running and reports which storage
    backend this process settled on at startup.
    """
    return {
        "status": "OK",
        "message": "KARE ACM SIGBED API is running",
        "storageMode": storage.mode.value,
        "timestamp": utcnow().isoformat(),
    }
