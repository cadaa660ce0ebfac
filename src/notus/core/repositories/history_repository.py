"""Document history repository."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.history import DocumentHistory
from ..models.user import User


class HistoryRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add_entry(self, entry_data: dict) -> DocumentHistory:
        entry = DocumentHistory(**entry_data)
        self.session.add(entry)
        await self.session.commit()
        await self.session.refresh(entry)
        return entry

    async def list_for_document(self, document_id: int) -> List[tuple[DocumentHistory, Optional[User]]]:
        """Entries oldest first, with the author's account when it still exists."""
        stmt = (
            select(DocumentHistory, User)
            .outerjoin(User, User.id == DocumentHistory.user_id)
            .where(DocumentHistory.document_id == document_id)
            .order_by(DocumentHistory.created_at, DocumentHistory.id)
        )
        result = await self.session.execute(stmt)
        return [(entry, user) for entry, user in result.all()]
