"""Dossier service."""

from dataclasses import dataclass
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import NotFoundError, ValidationError
from ..models.document import Document
from ..models.dossier import Dossier
from ..repositories.document_repository import DocumentRepository
from ..repositories.dossier_repository import DossierRepository
from ..result import Result
from .interfaces import IDossierService

MAX_NAME_LENGTH = 255


@dataclass(frozen=True)
class DossierSummary:
    dossier: Dossier
    document_count: int


@dataclass(frozen=True)
class DossierDetail:
    dossier: Dossier
    documents: List[Document]


def _clean_name(name) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Le nom du dossier est requis")
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(f"Nom limité à {MAX_NAME_LENGTH} caractères")
    return name


class DossierService(IDossierService):
    def __init__(self, session: AsyncSession):
        self.session = session
        self.dossier_repo = DossierRepository(session)
        self.document_repo = DocumentRepository(session)

    async def list_dossiers(self, owner_id: int) -> List[DossierSummary]:
        rows = await self.dossier_repo.list_with_counts(owner_id)
        return [DossierSummary(dossier, count) for dossier, count in rows]

    async def create_dossier(self, owner_id: int, name: str) -> Result[Dossier]:
        try:
            name = _clean_name(name)
        except ValidationError as e:
            return Result.fail(e)
        return Result.ok(await self.dossier_repo.create_dossier(owner_id, name))

    async def get_dossier(self, owner_id: int, dossier_id: int) -> Result[DossierDetail]:
        dossier = await self.dossier_repo.get_by_id_and_owner(dossier_id, owner_id)
        if dossier is None:
            return Result.fail(NotFoundError("Dossier introuvable"))
        documents = await self.dossier_repo.list_documents(dossier.id)
        return Result.ok(DossierDetail(dossier, documents))

    async def rename_dossier(self, owner_id: int, dossier_id: int, name: str) -> Result[Dossier]:
        try:
            name = _clean_name(name)
        except ValidationError as e:
            return Result.fail(e)
        dossier = await self.dossier_repo.get_by_id_and_owner(dossier_id, owner_id)
        if dossier is None:
            return Result.fail(NotFoundError("Dossier introuvable"))
        return Result.ok(await self.dossier_repo.rename(dossier, name))

    async def delete_dossier(self, owner_id: int, dossier_id: int) -> Result[bool]:
        dossier = await self.dossier_repo.get_by_id_and_owner(dossier_id, owner_id)
        if dossier is None:
            return Result.fail(NotFoundError("Dossier introuvable"))
        await self.dossier_repo.delete_dossier(dossier)
        return Result.ok(True)

    async def add_documents(self, owner_id: int, dossier_id: int, document_ids: List[int]) -> Result[int]:
        """Only the owner's own documents are linked; returns how many were new."""
        if not document_ids:
            return Result.fail(ValidationError("Aucun document fourni"))
        dossier = await self.dossier_repo.get_by_id_and_owner(dossier_id, owner_id)
        if dossier is None:
            return Result.fail(NotFoundError("Dossier introuvable"))

        owned = await self.document_repo.get_many_owned(owner_id, document_ids)
        if not owned:
            return Result.fail(ValidationError("Aucun document valide"))
        owned_ids = {d.id for d in owned}
        added = await self.dossier_repo.add_documents(
            dossier.id, [i for i in document_ids if i in owned_ids]
        )
        return Result.ok(added)

    async def remove_documents(self, owner_id: int, dossier_id: int, document_ids: List[int]) -> Result[int]:
        dossier = await self.dossier_repo.get_by_id_and_owner(dossier_id, owner_id)
        if dossier is None:
            return Result.fail(NotFoundError("Dossier introuvable"))
        return Result.ok(await self.dossier_repo.remove_documents(dossier.id, document_ids))
