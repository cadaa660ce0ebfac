"""Document service: CRUD, favorites and trash."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import Forbidden, ValidationError
from ..models.document import DEFAULT_TITLE, MAX_TAG_LENGTH, MAX_TAGS, MAX_TITLE_LENGTH, Document
from ..models.share import SharePermission
from ..repositories.document_repository import DocumentRepository
from ..repositories.share_repository import ShareRepository
from ..result import Result
from .access_service import DocumentAccessService
from .history_service import DocumentHistoryService
from .interfaces import IDocumentService

logger = logging.getLogger("notus.documents")


@dataclass(frozen=True)
class DocumentView:
    """A document as seen by one user."""

    document: Document
    is_owner: bool
    permission: SharePermission
    favorite: bool

    @classmethod
    def for_owner(cls, document: Document) -> "DocumentView":
        return cls(document, True, SharePermission.READ_WRITE, document.favorite)


def clean_title(title: Optional[str]) -> str:
    title = (title or "").strip()
    if not title:
        return DEFAULT_TITLE
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(f"Titre limité à {MAX_TITLE_LENGTH} caractères")
    return title


def clean_tags(tags: Optional[List[str]]) -> List[str]:
    """Trim, drop duplicates (first spelling wins), enforce limits."""
    cleaned: List[str] = []
    seen = set()
    for raw in tags or []:
        tag = str(raw).strip()
        if not tag:
            raise ValidationError("Tag vide")
        if len(tag) > MAX_TAG_LENGTH:
            raise ValidationError(f"Tag limité à {MAX_TAG_LENGTH} caractères")
        key = tag.lower()
        if key in seen:
            continue
        seen.add(key)
        cleaned.append(tag)
    if len(cleaned) > MAX_TAGS:
        raise ValidationError(f"{MAX_TAGS} tags maximum")
    return cleaned


class DocumentService(IDocumentService):
    def __init__(self, session: AsyncSession):
        self.session = session
        self.document_repo = DocumentRepository(session)
        self.share_repo = ShareRepository(session)
        self.access = DocumentAccessService(session)
        self.history = DocumentHistoryService(session)

    async def create_document(self, user_id: int, data: Dict[str, Any]) -> Result[Document]:
        try:
            document_data = {
                "owner_id": user_id,
                "title": clean_title(data.get("title")),
                "content": data.get("content") or "",
                "tags": clean_tags(data.get("tags")),
            }
        except ValidationError as e:
            return Result.fail(e)

        document = await self.document_repo.create_document(document_data)
        logger.info("Document created", extra={"document_id": document.id, "owner_id": user_id})
        return Result.ok(document)

    async def get_document(self, user_id: int, document_id: int) -> Result[DocumentView]:
        """Owner or any grantee. Missing and forbidden look the same to the caller."""
        document = await self.document_repo.get_by_id(document_id)
        if document is None:
            return Result.fail(Forbidden())

        if document.owner_id == user_id:
            return Result.ok(DocumentView.for_owner(document))

        if document.is_trashed:
            return Result.fail(Forbidden())
        found = await self.access.find_share(document_id, user_id)
        if not found.success:
            return Result.fail(Forbidden())
        share = found.data
        return Result.ok(DocumentView(document, False, share.level, share.favorite))

    async def list_documents(
        self, user_id: int, page: int = 1, per_page: int = 20
    ) -> tuple[List[Document], int]:
        return await self.document_repo.list_owner_documents(user_id, page, per_page)

    async def update_document(
        self, user_id: int, document_id: int, data: Dict[str, Any]
    ) -> Result[Document]:
        if not await self.access.has_permission(document_id, user_id, SharePermission.READ_WRITE):
            return Result.fail(Forbidden())

        document = await self.document_repo.get_by_id(document_id)
        if document is None:
            return Result.fail(Forbidden())
        if document.is_trashed:
            return Result.fail(ValidationError("Document dans la corbeille"))

        update_data: Dict[str, Any] = {}
        try:
            if "title" in data and data["title"] is not None:
                update_data["title"] = clean_title(data["title"])
            if "content" in data and data["content"] is not None:
                update_data["content"] = data["content"]
            if "tags" in data and data["tags"] is not None:
                update_data["tags"] = clean_tags(data["tags"])
        except ValidationError as e:
            return Result.fail(e)

        if update_data:
            previous_content = document.content
            document = await self.document_repo.update_document(document, update_data)
            if "content" in update_data:
                await self.history.record_change(document_id, user_id, previous_content, document.content)
        return Result.ok(document)

    async def set_favorite(self, user_id: int, document_id: int, favorite: bool) -> Result[bool]:
        """Owner flag lives on the document, a grantee's on their share."""
        document = await self.document_repo.get_by_id(document_id)
        if document is None:
            return Result.fail(Forbidden())

        if document.owner_id == user_id:
            await self.document_repo.update_document(document, {"favorite": favorite})
            return Result.ok(favorite)

        found = await self.access.find_share(document_id, user_id)
        if not found.success:
            return Result.fail(Forbidden())
        await self.share_repo.set_favorite(found.data, favorite)
        return Result.ok(favorite)

    async def move_to_trash(self, user_id: int, document_id: int) -> Result[Document]:
        document = await self.document_repo.get_by_id_and_owner(document_id, user_id)
        if document is None:
            return Result.fail(Forbidden())
        if not document.is_trashed:
            document.move_to_trash()
            await self.session.commit()
            await self.session.refresh(document)
            logger.info("Document trashed", extra={"document_id": document_id})
        return Result.ok(document)

    async def list_trash(self, user_id: int, page: int = 1, per_page: int = 20) -> tuple[List[Document], int]:
        return await self.document_repo.list_owner_documents(user_id, page, per_page, trashed=True)

    async def restore(self, user_id: int, document_id: int) -> Result[Document]:
        document = await self.document_repo.get_by_id_and_owner(document_id, user_id)
        if document is None:
            return Result.fail(Forbidden())
        if document.is_trashed:
            document.restore()
            await self.session.commit()
            await self.session.refresh(document)
            logger.info("Document restored", extra={"document_id": document_id})
        return Result.ok(document)

    async def purge(self, user_id: int, document_id: int) -> Result[bool]:
        """Permanent delete; shares and dossier links go with it."""
        document = await self.document_repo.get_by_id_and_owner(document_id, user_id)
        if document is None:
            return Result.fail(Forbidden())
        await self.document_repo.delete_document(document)
        logger.info("Document purged", extra={"document_id": document_id})
        return Result.ok(True)
