"""Repository layer for data access."""

from .document_repository import DocumentRepository
from .dossier_repository import DossierRepository
from .history_repository import HistoryRepository
from .notification_repository import NotificationRepository
from .settings_repository import SettingsRepository
from .share_repository import ShareRepository
from .stats_repository import StatsRepository
from .user_repository import UserRepository

__all__ = [
    "UserRepository",
    "DocumentRepository",
    "ShareRepository",
    "NotificationRepository",
    "DossierRepository",
    "HistoryRepository",
    "SettingsRepository",
    "StatsRepository",
]
