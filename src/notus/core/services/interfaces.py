"""
Service interfaces for the Notus backend.

Every operation that can fail for a business reason returns a ``Result``;
callers check ``success`` before reading ``data``.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..models.document import Document
from ..models.dossier import Dossier
from ..models.notification import Notification
from ..models.share import Share, SharePermission
from ..models.user import User
from ..result import Result


class IDocumentAccessService(ABC):
    """Who may read, write or manage shares of a document."""

    @abstractmethod
    async def owner_id_for_document(self, document_id: int) -> Result[int]:
        """Owner id, NotFoundError when the document is missing."""
        pass

    @abstractmethod
    async def is_owner(self, document_id: int, user_id: int) -> bool:
        pass

    @abstractmethod
    async def has_permission(
        self, document_id: int, user_id: int, required: SharePermission = SharePermission.READ
    ) -> bool:
        """Owner always; otherwise a share by id or email at least as strong as required."""
        pass

    @abstractmethod
    async def find_share(self, document_id: int, user_id: int) -> Result[Share]:
        pass

    @abstractmethod
    async def add_share(self, document_id: int, email: str, permission: Any) -> Result[Share]:
        """Upsert the (document, email) share."""
        pass

    @abstractmethod
    async def remove_share(self, document_id: int, email: str) -> Result[int]:
        """Idempotent delete; data is the number of rows removed."""
        pass

    @abstractmethod
    async def update_permission(self, document_id: int, user_id: int, permission: Any) -> Result[Share]:
        pass

    @abstractmethod
    async def fetch_document_access_list(self, document_id: int) -> Result[List[Any]]:
        pass


class IShareInviteService(ABC):
    """Signed, time-limited share invitations."""

    @abstractmethod
    async def create_invite(
        self,
        actor_id: int,
        document_id: int,
        grantee_email: str,
        permission: Any,
        inviter_name: Optional[str] = None,
        doc_title: Optional[str] = None,
    ) -> Result[Any]:
        pass

    @abstractmethod
    async def confirm_invite(self, token: str) -> Result[Share]:
        pass

    @abstractmethod
    async def revoke_invite(self, actor_id: int, token: str) -> Result[bool]:
        pass


class INotificationService(ABC):
    """Best-effort in-app notifications."""

    @abstractmethod
    async def send_notification(
        self,
        sender_id: Optional[int],
        payload: Dict[str, Any],
        receiver_id: Optional[int] = None,
        receiver_email: Optional[str] = None,
    ) -> Result[Notification]:
        pass

    @abstractmethod
    async def list_notifications(
        self, receiver_id: int, limit: int = 50, offset: int = 0, only_unread: bool = False
    ) -> List[Notification]:
        pass

    @abstractmethod
    async def count_unread(self, receiver_id: int) -> int:
        pass

    @abstractmethod
    async def mark_as_read(self, receiver_id: int, notification_id: int) -> Result[Notification]:
        pass

    @abstractmethod
    async def mark_all_as_read(self, receiver_id: int) -> int:
        pass

    @abstractmethod
    async def delete_notification(self, receiver_id: int, notification_id: int) -> Result[int]:
        pass


class IEmailService(ABC):

    @abstractmethod
    async def send_share_invite(
        self, email: str, link: str, inviter_name: Optional[str], doc_title: str
    ) -> Result[Any]:
        pass


class IDocumentService(ABC):
    """Document CRUD, favorites and trash."""

    @abstractmethod
    async def create_document(self, user_id: int, data: Dict[str, Any]) -> Result[Document]:
        pass

    @abstractmethod
    async def get_document(self, user_id: int, document_id: int) -> Result[Any]:
        pass

    @abstractmethod
    async def update_document(self, user_id: int, document_id: int, data: Dict[str, Any]) -> Result[Document]:
        pass

    @abstractmethod
    async def move_to_trash(self, user_id: int, document_id: int) -> Result[Document]:
        pass

    @abstractmethod
    async def restore(self, user_id: int, document_id: int) -> Result[Document]:
        pass

    @abstractmethod
    async def purge(self, user_id: int, document_id: int) -> Result[bool]:
        pass


class IDossierService(ABC):
    """User folders of documents."""

    @abstractmethod
    async def create_dossier(self, owner_id: int, name: str) -> Result[Dossier]:
        pass

    @abstractmethod
    async def delete_dossier(self, owner_id: int, dossier_id: int) -> Result[bool]:
        pass

    @abstractmethod
    async def add_documents(self, owner_id: int, dossier_id: int, document_ids: List[int]) -> Result[int]:
        pass

    @abstractmethod
    async def remove_documents(self, owner_id: int, dossier_id: int, document_ids: List[int]) -> Result[int]:
        pass


class IAuthService(ABC):
    """Accounts and bearer tokens."""

    @abstractmethod
    async def register_user(self, request: Any) -> Result[User]:
        pass

    @abstractmethod
    async def authenticate_user(self, request: Any) -> Result[Any]:
        pass

    @abstractmethod
    async def get_user(self, user_id: int) -> Optional[User]:
        pass

    @abstractmethod
    async def delete_account(self, user_id: int, password: str) -> Result[bool]:
        pass


class IHealthService(ABC):

    @abstractmethod
    async def get_health_status(self) -> Any:
        pass
