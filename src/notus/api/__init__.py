"""API routers for Notus."""

from .admin import router as admin_router
from .auth import account_router
from .auth import router as auth_router
from .documents import router as documents_router
from .dossiers import router as dossiers_router
from .health import router as health_router
from .notifications import router as notifications_router
from .sharing import router as sharing_router

__all__ = [
    "account_router",
    "admin_router",
    "auth_router",
    "documents_router",
    "dossiers_router",
    "health_router",
    "notifications_router",
    "sharing_router",
]
