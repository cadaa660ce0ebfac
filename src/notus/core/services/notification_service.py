"""Notification relay: at-most-once, never allowed to break the caller."""

import json
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import InternalError, NotFoundError
from ..models.notification import Notification
from ..repositories.notification_repository import NotificationRepository
from ..repositories.user_repository import UserRepository
from ..result import Result
from .interfaces import INotificationService

logger = logging.getLogger("notus.notifications")

MAX_PAGE = 50


class NotificationService(INotificationService):
    def __init__(self, session: AsyncSession):
        self.session = session
        self.notification_repo = NotificationRepository(session)
        self.user_repo = UserRepository(session)

    async def send_notification(
        self,
        sender_id: Optional[int],
        payload: Dict[str, Any],
        receiver_id: Optional[int] = None,
        receiver_email: Optional[str] = None,
    ) -> Result[Notification]:
        """Store a notification when the receiver has an account.

        Failures come back as a failed Result, never as an exception.
        """
        try:
            receiver = None
            if receiver_id is not None:
                receiver = await self.user_repo.get_by_id(receiver_id)
            elif receiver_email:
                receiver = await self.user_repo.get_by_email(receiver_email)

            if receiver is None:
                logger.info(
                    "Notification skipped, receiver has no account",
                    extra={"receiver_id": receiver_id, "receiver_email": receiver_email},
                )
                return Result.fail(NotFoundError("Destinataire introuvable"))

            notification = await self.notification_repo.create_notification(
                {
                    "sender_id": sender_id,
                    "receiver_id": receiver.id,
                    "message": json.dumps(payload, ensure_ascii=False, default=str),
                }
            )
        except SQLAlchemyError as e:
            logger.warning(f"Notification insert failed: {e}")
            await self.session.rollback()
            return Result.fail(InternalError(detail=str(e)))

        return Result.ok(notification)

    async def dispatch(
        self,
        sender_id: Optional[int],
        payload: Dict[str, Any],
        receiver_id: Optional[int] = None,
        receiver_email: Optional[str] = None,
    ) -> None:
        """Fire and forget. Whatever happens is logged and discarded."""
        try:
            result = await self.send_notification(
                sender_id, payload, receiver_id=receiver_id, receiver_email=receiver_email
            )
        except Exception as e:
            logger.error(f"Notification dispatch crashed: {e}", exc_info=e)
            return
        if not result.success:
            logger.debug(
                "Notification not delivered",
                extra={"reason": result.error.code, "type": payload.get("type")},
            )

    async def list_notifications(
        self, receiver_id: int, limit: int = MAX_PAGE, offset: int = 0, only_unread: bool = False
    ) -> List[Notification]:
        limit = max(1, min(limit, MAX_PAGE))
        offset = max(0, offset)
        return await self.notification_repo.list_for_receiver(
            receiver_id, limit=limit, offset=offset, only_unread=only_unread
        )

    async def count_unread(self, receiver_id: int) -> int:
        return await self.notification_repo.count_unread(receiver_id)

    async def mark_as_read(self, receiver_id: int, notification_id: int) -> Result[Notification]:
        notification = await self.notification_repo.get_for_receiver(notification_id, receiver_id)
        if notification is None:
            return Result.fail(NotFoundError("Notification introuvable"))
        return Result.ok(await self.notification_repo.mark_read(notification))

    async def mark_all_as_read(self, receiver_id: int) -> int:
        return await self.notification_repo.mark_all_read(receiver_id)

    async def delete_notification(self, receiver_id: int, notification_id: int) -> Result[int]:
        deleted = await self.notification_repo.delete_for_receiver(notification_id, receiver_id)
        if not deleted:
            return Result.fail(NotFoundError("Notification introuvable"))
        return Result.ok(deleted)
