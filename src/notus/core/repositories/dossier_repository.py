"""Dossier repository for database operations."""

from typing import List, Optional

from sqlalchemy import and_, delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.document import Document
from ..models.dossier import Dossier, DossierDocument


class DossierRepository:
    """Repository for dossier database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_dossier(self, owner_id: int, name: str) -> Dossier:
        dossier = Dossier(owner_id=owner_id, name=name)
        self.session.add(dossier)
        await self.session.commit()
        await self.session.refresh(dossier)
        return dossier

    async def get_by_id_and_owner(self, dossier_id: int, owner_id: int) -> Optional[Dossier]:
        stmt = select(Dossier).where(and_(Dossier.id == dossier_id, Dossier.owner_id == owner_id))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_with_counts(self, owner_id: int) -> List[tuple[Dossier, int]]:
        """Owner's dossiers, newest first, with their document count."""
        counts = (
            select(DossierDocument.dossier_id, func.count(DossierDocument.id).label("n"))
            .group_by(DossierDocument.dossier_id)
            .subquery()
        )
        stmt = (
            select(Dossier, func.coalesce(counts.c.n, 0))
            .outerjoin(counts, counts.c.dossier_id == Dossier.id)
            .where(Dossier.owner_id == owner_id)
            .order_by(desc(Dossier.created_at), desc(Dossier.id))
        )
        result = await self.session.execute(stmt)
        return [(row[0], int(row[1])) for row in result.all()]

    async def rename(self, dossier: Dossier, name: str) -> Dossier:
        dossier.name = name
        await self.session.commit()
        await self.session.refresh(dossier)
        return dossier

    async def delete_dossier(self, dossier: Dossier) -> None:
        """Links cascade away, documents stay."""
        await self.session.execute(
            delete(DossierDocument).where(DossierDocument.dossier_id == dossier.id)
        )
        await self.session.execute(delete(Dossier).where(Dossier.id == dossier.id))
        await self.session.commit()

    async def list_documents(self, dossier_id: int) -> List[Document]:
        stmt = (
            select(Document)
            .join(DossierDocument, DossierDocument.document_id == Document.id)
            .where(DossierDocument.dossier_id == dossier_id)
            .order_by(DossierDocument.created_at, DossierDocument.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars())

    async def linked_document_ids(self, dossier_id: int) -> set[int]:
        stmt = select(DossierDocument.document_id).where(DossierDocument.dossier_id == dossier_id)
        result = await self.session.execute(stmt)
        return set(result.scalars())

    async def add_documents(self, dossier_id: int, document_ids: List[int]) -> int:
        """Link documents not already in the dossier; returns how many were added."""
        existing = await self.linked_document_ids(dossier_id)
        added = 0
        for document_id in dict.fromkeys(document_ids):
            if document_id in existing:
                continue
            self.session.add(DossierDocument(dossier_id=dossier_id, document_id=document_id))
            added += 1
        if added:
            await self.session.commit()
        return added

    async def remove_documents(self, dossier_id: int, document_ids: List[int]) -> int:
        if not document_ids:
            return 0
        stmt = delete(DossierDocument).where(
            and_(
                DossierDocument.dossier_id == dossier_id,
                DossierDocument.document_id.in_(document_ids),
            )
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount or 0
