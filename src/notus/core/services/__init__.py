"""
Service layer interfaces and implementations.
"""

from .access_service import (
    AccessEntry,
    DocumentAccessService,
    Grantee,
    GranteeByEmail,
    GranteeById,
    SharedDocument,
)
from .admin_service import AdminService, PlatformStats
from .auth_service import AuthService
from .document_service import DocumentService
from .dossier_service import DossierService
from .email_service import EmailService
from .health_service import HealthService
from .history_service import DocumentHistoryService, HistoryEntry
from .interfaces import (
    IAuthService,
    IDocumentAccessService,
    IDocumentService,
    IDossierService,
    IEmailService,
    IHealthService,
    INotificationService,
    IShareInviteService,
)
from .invite_service import InviteIssued, ShareInviteService
from .notification_service import NotificationService

__all__ = [
    # Interfaces
    "IAuthService",
    "IDocumentAccessService",
    "IDocumentService",
    "IDossierService",
    "IEmailService",
    "IHealthService",
    "INotificationService",
    "IShareInviteService",
    # Implementations
    "AccessEntry",
    "AdminService",
    "AuthService",
    "DocumentAccessService",
    "DocumentHistoryService",
    "DocumentService",
    "DossierService",
    "EmailService",
    "Grantee",
    "GranteeByEmail",
    "GranteeById",
    "HealthService",
    "HistoryEntry",
    "InviteIssued",
    "NotificationService",
    "PlatformStats",
    "SharedDocument",
    "ShareInviteService",
]
