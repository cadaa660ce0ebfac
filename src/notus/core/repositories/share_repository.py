"""Share repository for database operations."""

from typing import List, Optional

from sqlalchemy import and_, delete, desc, func, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.base import utcnow
from ..models.document import Document
from ..models.share import Share, SharePermission
from ..models.user import User, normalize_email

UPSERT_INSERTS = {"postgresql": pg_insert, "sqlite": sqlite_insert}


def _grantee_condition(user_id: Optional[int], email: Optional[str]):
    """Match a share held by a user directly or through their email."""
    clauses = []
    if user_id is not None:
        clauses.append(Share.user_id == user_id)
    if email:
        clauses.append(Share.email == normalize_email(email))
    return or_(*clauses)


class ShareRepository:
    """Repository for share database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_document_and_email(self, document_id: int, email: str) -> Optional[Share]:
        stmt = (
            select(Share)
            .where(and_(Share.document_id == document_id, Share.email == normalize_email(email)))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert_share(
        self,
        document_id: int,
        email: str,
        permission: SharePermission,
        user_id: Optional[int] = None,
    ) -> Share:
        """Insert or update the single (document, email) share row.

        Uses the database's native ON CONFLICT so two concurrent calls
        cannot produce duplicates; the last committed write wins.
        """
        email = normalize_email(email)
        dialect = self.session.get_bind().dialect.name
        insert = UPSERT_INSERTS.get(dialect)

        if insert is None:
            # no native upsert on this backend, rely on the unique constraint
            share = await self.get_by_document_and_email(document_id, email)
            if share is None:
                share = Share(document_id=document_id, email=email, user_id=user_id)
                self.session.add(share)
            share.permission = permission.value
            if user_id is not None:
                share.user_id = user_id
            await self.session.commit()
            return await self.get_by_document_and_email(document_id, email)

        now = utcnow()
        stmt = insert(Share).values(
            document_id=document_id,
            email=email,
            user_id=user_id,
            permission=permission.value,
            favorite=False,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["document_id", "email"],
            set_={
                "permission": stmt.excluded.permission,
                "user_id": func.coalesce(stmt.excluded.user_id, Share.user_id),
                "updated_at": stmt.excluded.updated_at,
            },
        )
        await self.session.execute(stmt)
        await self.session.commit()
        return await self.get_by_document_and_email(document_id, email)

    async def find_for_user(
        self, document_id: int, user_id: int, email: Optional[str]
    ) -> Optional[Share]:
        """Share held by the user on the document, by id or by email.

        When both an id share and an email share exist, the stronger one wins.
        """
        stmt = (
            select(Share)
            .where(and_(Share.document_id == document_id, _grantee_condition(user_id, email)))
            .order_by(Share.created_at, Share.id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        shares = list(result.scalars())
        if not shares:
            return None
        return max(shares, key=lambda s: s.level.rank)

    async def update_permission_for_user(
        self,
        document_id: int,
        user_id: int,
        email: Optional[str],
        permission: SharePermission,
    ) -> int:
        """Conditional update of the user's shares; returns rows touched."""
        stmt = (
            update(Share)
            .where(and_(Share.document_id == document_id, _grantee_condition(user_id, email)))
            .values(permission=permission.value, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount or 0

    async def delete_share(self, document_id: int, email: str) -> int:
        """Delete the (document, email) share; returns rows deleted."""
        stmt = delete(Share).where(
            and_(Share.document_id == document_id, Share.email == normalize_email(email))
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount or 0

    async def delete_for_user(self, document_id: int, user_id: int, email: Optional[str]) -> int:
        stmt = delete(Share).where(
            and_(Share.document_id == document_id, _grantee_condition(user_id, email))
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount or 0

    async def delete_all_for_user(self, user_id: int, email: Optional[str]) -> int:
        """Drop every share held by the user, on any document."""
        result = await self.session.execute(delete(Share).where(_grantee_condition(user_id, email)))
        await self.session.commit()
        return result.rowcount or 0

    async def list_for_document(self, document_id: int) -> List[tuple[Share, Optional[User]]]:
        """Shares of a document in creation order, with the matching account if any."""
        stmt = (
            select(Share, User)
            .outerjoin(User, User.email == Share.email)
            .where(Share.document_id == document_id)
            .order_by(Share.created_at, Share.id)
        )
        result = await self.session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]

    async def list_shared_with(
        self, user_id: int, email: Optional[str]
    ) -> List[tuple[Share, Document]]:
        """Live (not trashed) documents shared with the user, newest update first."""
        stmt = (
            select(Share, Document)
            .join(Document, Document.id == Share.document_id)
            .where(
                and_(
                    _grantee_condition(user_id, email),
                    Document.deleted_at.is_(None),
                    Document.owner_id != user_id,
                )
            )
            .order_by(desc(Document.updated_at), desc(Document.id))
        )
        result = await self.session.execute(stmt)
        seen = set()
        pairs = []
        for share, document in result.all():
            if document.id in seen:
                continue
            seen.add(document.id)
            pairs.append((share, document))
        return pairs

    async def link_user(self, email: str, user_id: int) -> int:
        """Attach a new account to the email shares waiting for it."""
        stmt = (
            update(Share)
            .where(and_(Share.email == normalize_email(email), Share.user_id.is_(None)))
            .values(user_id=user_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount or 0

    async def set_favorite(self, share: Share, favorite: bool) -> Share:
        share.favorite = favorite
        await self.session.commit()
        await self.session.refresh(share)
        return share
