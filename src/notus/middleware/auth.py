"""Authentication dependencies and route guards."""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..core.errors import Forbidden, Unauthenticated
from ..core.models.user import User
from ..core.repositories.user_repository import UserRepository
from ..core.services.access_service import DocumentAccessService
from ..database import get_db_session
from ..security import get_user_id_from_token

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> User:
    """Resolve the bearer token to a live, non-banned account."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise Unauthenticated()

    user_id = get_user_id_from_token(credentials.credentials, settings)
    if user_id is None:
        raise Unauthenticated()

    user = await UserRepository(session).get_by_id(user_id)
    if user is None:
        raise Unauthenticated()
    if user.is_banned:
        raise Forbidden("Compte suspendu")
    return user


async def get_current_user_id(user: User = Depends(get_current_user)) -> int:
    return user.id


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise Forbidden()
    return user


async def ensure_can_manage_shares(access: DocumentAccessService, document_id: int, user: User) -> None:
    """Owner or administrator; anything else (including a missing document) is 403."""
    if user.is_admin:
        owner = await access.owner_id_for_document(document_id)
        if owner.success:
            return
        raise Forbidden()
    if not await access.is_owner(document_id, user.id):
        raise Forbidden()
