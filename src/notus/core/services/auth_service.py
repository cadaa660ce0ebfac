"""Authentication service implementation."""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import Settings, get_settings
from ...security import create_access_token, hash_password, verify_and_upgrade, verify_password
from ..errors import Forbidden, InternalError, NotFoundError, Unauthenticated, ValidationError
from ..models.user import User, normalize_email
from ..repositories.share_repository import ShareRepository
from ..repositories.user_repository import UserRepository
from ..result import Result
from ..schemas.auth import LoginRequest, RegisterRequest
from .interfaces import IAuthService

logger = logging.getLogger("notus.auth")


@dataclass(frozen=True)
class IssuedToken:
    access_token: str
    expires_in: int
    user: User


class AuthService(IAuthService):
    """Accounts, login and the admin flags."""

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.user_repo = UserRepository(session)
        self.share_repo = ShareRepository(session)
        self.settings = settings or get_settings()

    async def register_user(self, request: RegisterRequest) -> Result[User]:
        email = normalize_email(request.email)
        if await self.user_repo.is_email_taken(email):
            return Result.fail(ValidationError("Email déjà utilisé"))
        if await self.user_repo.is_username_taken(request.username):
            return Result.fail(ValidationError("Nom d'utilisateur déjà utilisé"))

        try:
            user = await self.user_repo.create_user(
                {
                    "email": email,
                    "username": request.username,
                    "password_hash": hash_password(request.password),
                    "first_name": request.first_name,
                    "last_name": request.last_name,
                }
            )
        except IntegrityError:
            await self.session.rollback()
            return Result.fail(ValidationError("Compte déjà existant"))

        # shares sent to this address before the account existed
        linked = await self.share_repo.link_user(user.email, user.id)
        logger.info("User registered", extra={"user_id": user.id, "linked_shares": linked})
        return Result.ok(user)

    async def authenticate_user(self, request: LoginRequest) -> Result[IssuedToken]:
        user = await self.user_repo.get_by_email(request.email)
        valid, new_hash = verify_and_upgrade(request.password, user.password_hash) if user else (False, None)
        if not valid:
            return Result.fail(Unauthenticated("Identifiants invalides"))
        if user.is_banned:
            return Result.fail(Forbidden("Compte suspendu"))
        if not user.can_login():
            return Result.fail(Unauthenticated("Compte non vérifié"))

        if new_hash:
            user = await self.user_repo.update_user(user.id, {"password_hash": new_hash})

        token = create_access_token({"sub": str(user.id)}, settings=self.settings)
        return Result.ok(
            IssuedToken(
                access_token=token,
                expires_in=self.settings.access_token_expire_minutes * 60,
                user=user,
            )
        )

    async def get_user(self, user_id: int) -> Optional[User]:
        return await self.user_repo.get_by_id(user_id)

    async def delete_account(self, user_id: int, password: str) -> Result[bool]:
        """Delete the caller's account after re-checking the password.

        Owned documents, dossiers and notifications cascade; shares held by
        the account, by id or by email, are removed too.
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            return Result.fail(NotFoundError("Utilisateur introuvable"))
        if not password or not verify_password(password, user.password_hash):
            return Result.fail(Unauthenticated("Mot de passe invalide"))

        try:
            dropped = await self.share_repo.delete_all_for_user(user.id, user.email)
            await self.user_repo.delete_user(user.id)
        except SQLAlchemyError as e:
            logger.error("Account deletion failed", extra={"user_id": user_id}, exc_info=e)
            await self.session.rollback()
            return Result.fail(InternalError(detail=str(e)))

        logger.info("Account deleted", extra={"user_id": user_id, "dropped_shares": dropped})
        return Result.ok(True)

    async def set_admin(self, user_id: int, value: bool) -> Result[User]:
        return await self._set_flag(user_id, "is_admin", value)

    async def set_banned(self, user_id: int, value: bool) -> Result[User]:
        return await self._set_flag(user_id, "is_banned", value)

    async def _set_flag(self, user_id: int, flag: str, value: bool) -> Result[User]:
        user = await self.user_repo.update_user(user_id, {flag: value})
        if user is None:
            return Result.fail(NotFoundError("Utilisateur introuvable"))
        logger.info("User flag changed", extra={"user_id": user_id, "flag": flag, "value": value})
        return Result.ok(user)
