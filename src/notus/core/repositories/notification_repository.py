"""Notification repository for database operations."""

from typing import List, Optional

from sqlalchemy import and_, delete, desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.base import utcnow
from ..models.notification import Notification


class NotificationRepository:
    """Repository for notification database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_notification(self, notification_data: dict) -> Notification:
        notification = Notification(**notification_data)
        self.session.add(notification)
        await self.session.commit()
        await self.session.refresh(notification)
        return notification

    async def get_for_receiver(self, notification_id: int, receiver_id: int) -> Optional[Notification]:
        stmt = select(Notification).where(
            and_(Notification.id == notification_id, Notification.receiver_id == receiver_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_receiver(
        self, receiver_id: int, limit: int = 50, offset: int = 0, only_unread: bool = False
    ) -> List[Notification]:
        """Newest first."""
        stmt = select(Notification).where(Notification.receiver_id == receiver_id)
        if only_unread:
            stmt = stmt.where(Notification.read_at.is_(None))
        stmt = (
            stmt.order_by(desc(Notification.created_at), desc(Notification.id))
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars())

    async def count_unread(self, receiver_id: int) -> int:
        stmt = select(func.count(Notification.id)).where(
            and_(Notification.receiver_id == receiver_id, Notification.read_at.is_(None))
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def mark_read(self, notification: Notification) -> Notification:
        notification.mark_read()
        await self.session.commit()
        await self.session.refresh(notification)
        return notification

    async def mark_all_read(self, receiver_id: int) -> int:
        stmt = (
            update(Notification)
            .where(and_(Notification.receiver_id == receiver_id, Notification.read_at.is_(None)))
            .values(read_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount or 0

    async def delete_for_receiver(self, notification_id: int, receiver_id: int) -> int:
        stmt = delete(Notification).where(
            and_(Notification.id == notification_id, Notification.receiver_id == receiver_id)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount or 0
