"""
Document access model.

Pure authorization over persisted ownership and share rows. It knows
nothing about sessions or HTTP: whether the caller may *manage* shares
(owner or admin) is decided by the route guards before calling in.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import InternalError, NotFoundError, ValidationError
from ..models.document import Document
from ..models.share import Share, SharePermission
from ..models.user import normalize_email
from ..repositories.document_repository import DocumentRepository
from ..repositories.share_repository import ShareRepository
from ..repositories.user_repository import UserRepository
from ..result import Result
from .interfaces import IDocumentAccessService

logger = logging.getLogger("notus.access")

OWNER_ALREADY_HAS_ACCESS = "Le propriétaire a déjà accès au document"


@dataclass(frozen=True)
class GranteeByEmail:
    email: str


@dataclass(frozen=True)
class GranteeById:
    user_id: int


Grantee = Union[GranteeByEmail, GranteeById]


@dataclass(frozen=True)
class AccessEntry:
    """One line of a document's access list."""

    email: str
    user_id: Optional[int]
    username: Optional[str]
    permission: Optional[SharePermission]
    is_owner: bool = False


@dataclass(frozen=True)
class SharedDocument:
    document: Document
    share: Share


def parse_permission(value) -> SharePermission:
    try:
        return SharePermission.from_value(value)
    except ValueError as exc:
        raise ValidationError("Permission invalide", detail=str(exc)) from exc


def _looks_like_email(email: str) -> bool:
    local, _, domain = email.partition("@")
    return bool(local) and "." in domain and not domain.startswith(".")


class DocumentAccessService(IDocumentAccessService):
    """Ownership and share checks plus share mutations, all returning Result."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.document_repo = DocumentRepository(session)
        self.share_repo = ShareRepository(session)
        self.user_repo = UserRepository(session)

    async def owner_id_for_document(self, document_id: int) -> Result[int]:
        try:
            owner_id = await self.document_repo.get_owner_id(document_id)
        except SQLAlchemyError as e:
            return await self._internal("owner_id_for_document", e)
        if owner_id is None:
            return Result.fail(NotFoundError("Document introuvable"))
        return Result.ok(owner_id)

    async def is_owner(self, document_id: int, user_id: int) -> bool:
        owner = await self.owner_id_for_document(document_id)
        return owner.success and owner.data == user_id

    async def has_permission(
        self, document_id: int, user_id: int, required: SharePermission = SharePermission.READ
    ) -> bool:
        try:
            document = await self.document_repo.get_by_id(document_id)
            if document is None:
                return False
            if document.owner_id == user_id:
                return True
            # the trash is private to the owner
            if document.is_trashed:
                return False
            share = await self._share_for_user(document_id, user_id)
        except SQLAlchemyError:
            logger.exception("Permission check failed", extra={"document_id": document_id, "user_id": user_id})
            return False
        return share is not None and share.grants(required)

    async def find_share(self, document_id: int, user_id: int) -> Result[Share]:
        try:
            share = await self._share_for_user(document_id, user_id)
        except SQLAlchemyError as e:
            return await self._internal("find_share", e)
        if share is None:
            return Result.fail(NotFoundError("Partage introuvable"))
        return Result.ok(share)

    async def add_share(self, document_id: int, email: str, permission) -> Result[Share]:
        try:
            level = parse_permission(permission)
        except ValidationError as e:
            return Result.fail(e)

        email = normalize_email(email)
        if not _looks_like_email(email):
            return Result.fail(ValidationError("Email invalide"))

        try:
            document = await self.document_repo.get_by_id(document_id)
            if document is None:
                return Result.fail(NotFoundError("Document introuvable"))

            grantee = await self.user_repo.get_by_email(email)
            if grantee is not None and grantee.id == document.owner_id:
                return Result.fail(ValidationError(OWNER_ALREADY_HAS_ACCESS))

            share = await self.share_repo.upsert_share(
                document_id, email, level, user_id=grantee.id if grantee else None
            )
        except SQLAlchemyError as e:
            return await self._internal("add_share", e)

        logger.info(
            "Share upserted",
            extra={"document_id": document_id, "email": email, "permission": level.value},
        )
        return Result.ok(share)

    async def remove_share(self, document_id: int, email: str) -> Result[int]:
        try:
            deleted = await self.share_repo.delete_share(document_id, email)
        except SQLAlchemyError as e:
            return await self._internal("remove_share", e)
        logger.info("Share removed", extra={"document_id": document_id, "deleted": deleted})
        return Result.ok(deleted)

    async def update_permission(self, document_id: int, user_id: int, permission) -> Result[Share]:
        try:
            level = parse_permission(permission)
        except ValidationError as e:
            return Result.fail(e)

        try:
            user = await self.user_repo.get_by_id(user_id)
            email = user.email if user else None
            touched = await self.share_repo.update_permission_for_user(document_id, user_id, email, level)
            if not touched:
                return Result.fail(NotFoundError("Partage introuvable"))
            share = await self.share_repo.find_for_user(document_id, user_id, email)
        except SQLAlchemyError as e:
            return await self._internal("update_permission", e)
        return Result.ok(share)

    async def fetch_document_access_list(self, document_id: int) -> Result[List[AccessEntry]]:
        """Owner first, then shares in creation order, one line per email."""
        try:
            document = await self.document_repo.get_by_id(document_id)
            if document is None:
                return Result.fail(NotFoundError("Document introuvable"))
            owner = await self.user_repo.get_by_id(document.owner_id)
            rows = await self.share_repo.list_for_document(document_id)
        except SQLAlchemyError as e:
            return await self._internal("fetch_document_access_list", e)

        entries: List[AccessEntry] = []
        seen = set()
        if owner is not None:
            entries.append(
                AccessEntry(
                    email=owner.email,
                    user_id=owner.id,
                    username=owner.username,
                    permission=None,
                    is_owner=True,
                )
            )
            seen.add(owner.email)

        for share, account in rows:
            if share.email in seen:
                continue
            seen.add(share.email)
            entries.append(
                AccessEntry(
                    email=share.email,
                    user_id=account.id if account else share.user_id,
                    username=account.username if account else None,
                    permission=share.level,
                )
            )
        return Result.ok(entries)

    async def apply_share_change(self, document_id: int, grantee: Grantee, permission) -> Result[Share]:
        """Grant by email (upsert) or re-level an existing share by user id."""
        if isinstance(grantee, GranteeByEmail):
            return await self.add_share(document_id, grantee.email, permission)
        if isinstance(grantee, GranteeById):
            return await self.update_permission(document_id, grantee.user_id, permission)
        raise TypeError(f"Unsupported grantee: {grantee!r}")

    async def revoke_grantee(self, document_id: int, grantee: Grantee) -> Result[int]:
        if isinstance(grantee, GranteeByEmail):
            return await self.remove_share(document_id, grantee.email)
        if isinstance(grantee, GranteeById):
            try:
                user = await self.user_repo.get_by_id(grantee.user_id)
                deleted = await self.share_repo.delete_for_user(
                    document_id, grantee.user_id, user.email if user else None
                )
            except SQLAlchemyError as e:
                return await self._internal("revoke_grantee", e)
            return Result.ok(deleted)
        raise TypeError(f"Unsupported grantee: {grantee!r}")

    async def list_shared_with(self, user_id: int) -> Result[List[SharedDocument]]:
        try:
            user = await self.user_repo.get_by_id(user_id)
            if user is None:
                return Result.fail(NotFoundError("Utilisateur introuvable"))
            pairs = await self.share_repo.list_shared_with(user.id, user.email)
        except SQLAlchemyError as e:
            return await self._internal("list_shared_with", e)
        return Result.ok([SharedDocument(document=doc, share=share) for share, doc in pairs])

    async def _share_for_user(self, document_id: int, user_id: int) -> Optional[Share]:
        user = await self.user_repo.get_by_id(user_id)
        return await self.share_repo.find_for_user(document_id, user_id, user.email if user else None)

    async def _internal(self, operation: str, error: Exception) -> Result:
        logger.error(f"{operation} failed: {error}", exc_info=error)
        await self.session.rollback()
        return Result.fail(InternalError(detail=str(error)))
