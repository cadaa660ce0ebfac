"""Document repository for database operations."""

from typing import List, Optional

from sqlalchemy import and_, delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.document import Document


class DocumentRepository:
    """Repository for document database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_document(self, document_data: dict) -> Document:
        """Create new document."""
        document = Document(**document_data)
        self.session.add(document)
        await self.session.commit()
        await self.session.refresh(document)
        return document

    async def get_by_id(self, document_id: int) -> Optional[Document]:
        """Get document by ID, trashed or not."""
        stmt = select(Document).where(Document.id == document_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id_and_owner(self, document_id: int, owner_id: int) -> Optional[Document]:
        """Get document by ID if owned by user."""
        stmt = select(Document).where(
            and_(Document.id == document_id, Document.owner_id == owner_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_owner_id(self, document_id: int) -> Optional[int]:
        stmt = select(Document.owner_id).where(Document.id == document_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_document(self, document: Document, update_data: dict) -> Document:
        """Apply field updates to an already loaded document."""
        for key, value in update_data.items():
            setattr(document, key, value)

        await self.session.commit()
        await self.session.refresh(document)
        return document

    async def delete_document(self, document: Document) -> None:
        """Permanently delete a document (shares and dossier links cascade)."""
        await self.session.execute(delete(Document).where(Document.id == document.id))
        await self.session.commit()

    async def list_owner_documents(
        self, owner_id: int, page: int = 1, per_page: int = 20, trashed: bool = False
    ) -> tuple[List[Document], int]:
        """List a user's documents, most recently updated first."""
        offset = (page - 1) * per_page

        trash_filter = Document.deleted_at.is_not(None) if trashed else Document.deleted_at.is_(None)
        condition = and_(Document.owner_id == owner_id, trash_filter)

        count_stmt = select(func.count(Document.id)).where(condition)
        total_result = await self.session.execute(count_stmt)
        total_count = total_result.scalar()

        order = desc(Document.deleted_at) if trashed else desc(Document.updated_at)
        stmt = (
            select(Document)
            .where(condition)
            .order_by(order, desc(Document.id))
            .offset(offset)
            .limit(per_page)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars()), total_count

    async def get_many_owned(self, owner_id: int, document_ids: List[int]) -> List[Document]:
        """Subset of ``document_ids`` that exist and belong to ``owner_id``."""
        if not document_ids:
            return []
        stmt = select(Document).where(
            and_(Document.owner_id == owner_id, Document.id.in_(document_ids))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars())
