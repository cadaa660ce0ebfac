"""Aggregate counts for the admin dashboard."""

from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.document import Document
from ..models.share import Share
from ..models.user import User


class StatsRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _count(self, model, *conditions) -> int:
        stmt = select(func.count(model.id))
        if conditions:
            stmt = stmt.where(*conditions)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def count_users(self, since: Optional[datetime] = None) -> int:
        return await self._count(User, *self._since(User, since))

    async def count_documents(self, since: Optional[datetime] = None) -> int:
        return await self._count(Document, *self._since(Document, since))

    async def count_shares(self, since: Optional[datetime] = None) -> int:
        return await self._count(Share, *self._since(Share, since))

    async def count_verified_users(self) -> int:
        return await self._count(User, User.is_verified.is_(True))

    async def count_banned_users(self) -> int:
        return await self._count(User, User.is_banned.is_(True))

    async def count_admin_users(self) -> int:
        return await self._count(User, User.is_admin.is_(True))

    @staticmethod
    def _since(model, since: Optional[datetime]) -> tuple:
        return (model.created_at >= since,) if since is not None else ()
