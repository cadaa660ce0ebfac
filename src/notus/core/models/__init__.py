"""
Database models for the Notus backend.

SQLAlchemy ORM models, designed for async sessions. Relations are loaded
through explicit queries in the repositories, so no model declares
``relationship()`` attributes.

Models included:
    - User: accounts, admin and banned flags
    - Document: notes with tags, favorite flag and trash timestamp
    - Share: per-email grant of read / read-write access to a document
    - Notification: JSON payload messages for a receiver
    - Dossier / DossierDocument: user folders of documents
    - DocumentHistory: saved content changes of a document
    - AppSetting: administrator-edited key/value settings
"""

from .app_setting import AppSetting
from .base import BaseModel
from .document import Document
from .dossier import Dossier, DossierDocument
from .history import DocumentHistory
from .notification import Notification
from .share import Share, SharePermission
from .user import User, normalize_email

__all__ = [
    "BaseModel",
    "User",
    "normalize_email",
    "Document",
    "Share",
    "SharePermission",
    "Notification",
    "Dossier",
    "DossierDocument",
    "DocumentHistory",
    "AppSetting",
]
