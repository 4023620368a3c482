"""
API route modules.
"""

from api.routes.admin import router as admin_router
from api.routes.applications import router as applications_router
from api.routes.auth import router as auth_router
from api.routes.contact import router as contact_router
from api.routes.events import router as events_router
from api.routes.health import router as health_router
from api.routes.members import router as members_router
from api.routes.news import router as news_router

__all__ = [
    "admin_router",
    "applications_router",
    "auth_router",
    "contact_router",
    "events_router",
    "health_router",
    "members_router",
    "news_router",
]
