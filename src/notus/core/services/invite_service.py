"""
Share invitation flow.

Issued -> Materialized (confirmed before expiry)
       -> Expired      (lifetime elapsed, signature check fails)
       -> Rejected     (tampered / malformed)
       -> Revoked      (jti on the Redis denylist)

Nothing is persisted when an invite is issued. The share row only appears
when the link is confirmed, through the same upsert as a direct share, so
confirming twice leaves a single row.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import InviteSettings
from ...security.invite_tokens import InviteTokenSigner
from ..errors import AuthorizationError, InternalError, InvalidTokenError, MalformedTokenError, ValidationError
from ..models.share import Share, SharePermission
from ..models.user import normalize_email
from ..redis_client import RedisClient, get_redis_client
from ..repositories.document_repository import DocumentRepository
from ..repositories.user_repository import UserRepository
from ..result import Result
from .access_service import OWNER_ALREADY_HAS_ACCESS, DocumentAccessService, parse_permission
from .email_service import DEFAULT_INVITER_NAME, EmailService
from .interfaces import IEmailService, IShareInviteService
from .notification_service import NotificationService

logger = logging.getLogger("notus.invites")


@dataclass(frozen=True)
class InviteIssued:
    token: str
    confirm_url: str
    document_id: int
    email: str
    permission: SharePermission
    expires_at: datetime
    email_simulated: bool = False


class ShareInviteService(IShareInviteService):
    def __init__(
        self,
        session: AsyncSession,
        config: InviteSettings,
        email_service: Optional[IEmailService] = None,
        redis_client: Optional[RedisClient] = None,
    ):
        self.session = session
        self.config = config
        self.signer = InviteTokenSigner(config)
        self.access = DocumentAccessService(session)
        self.notifications = NotificationService(session)
        self.document_repo = DocumentRepository(session)
        self.user_repo = UserRepository(session)
        self.email_service = email_service or EmailService()
        self.redis = redis_client or get_redis_client()

    async def create_invite(
        self,
        actor_id: int,
        document_id: int,
        grantee_email: str,
        permission,
        inviter_name: Optional[str] = None,
        doc_title: Optional[str] = None,
    ) -> Result[InviteIssued]:
        try:
            level = parse_permission(permission)
        except ValidationError as e:
            return Result.fail(e)

        email = normalize_email(grantee_email)
        if "@" not in email:
            return Result.fail(ValidationError("Email invalide"))

        if not await self.access.is_owner(document_id, actor_id):
            logger.warning("Invite refused, not the owner", extra={"document_id": document_id, "actor_id": actor_id})
            return Result.fail(AuthorizationError())

        # the link could never be confirmed
        inviter = await self.user_repo.get_by_id(actor_id)
        if inviter is not None and normalize_email(inviter.email) == email:
            return Result.fail(ValidationError(OWNER_ALREADY_HAS_ACCESS))

        if not doc_title:
            document = await self.document_repo.get_by_id(document_id)
            doc_title = document.title if document else ""

        token, claims = self.signer.issue(document_id, email, level)
        confirm_url = self.config.confirm_url(token)

        sent = await self.email_service.send_share_invite(email, confirm_url, inviter_name, doc_title)
        if not sent.success:
            logger.error("Invite email failed", extra={"document_id": document_id, "email": email})
            return Result.fail(sent.error or InternalError())

        await self.notifications.dispatch(
            actor_id,
            {
                "type": "share_invite",
                "document_id": document_id,
                "title": doc_title,
                "from": inviter_name or DEFAULT_INVITER_NAME,
                "permission": level.value,
                "url": confirm_url,
            },
            receiver_email=email,
        )

        logger.info(
            "Invite issued",
            extra={"document_id": document_id, "email": email, "jti": claims.jti},
        )
        return Result.ok(
            InviteIssued(
                token=token,
                confirm_url=confirm_url,
                document_id=document_id,
                email=email,
                permission=level,
                expires_at=claims.expires_at,
                email_simulated=bool(getattr(sent.data, "simulated", False)),
            )
        )

    async def confirm_invite(self, token: str) -> Result[Share]:
        try:
            claims = self.signer.verify(token)
        except InvalidTokenError as e:
            logger.info(f"Invite rejected: {e.detail}")
            return Result.fail(e)

        if claims.jti:
            revoked = await self.redis.is_denylisted(claims.jti)
            if revoked is None:
                logger.error("Invite confirmation refused, denylist unreachable", extra={"jti": claims.jti})
                return Result.fail(InternalError(detail="denylist lookup failed"))
            if revoked:
                logger.info("Invite rejected: revoked", extra={"jti": claims.jti})
                return Result.fail(InvalidTokenError(detail="invite revoked"))

        added = await self.access.add_share(claims.document_id, claims.email, claims.permission)
        if not added.success:
            return added

        share = added.data
        grantee_id = share.user_id
        owner = await self.access.owner_id_for_document(claims.document_id)
        owner_id = owner.data if owner.success else None
        payload = {
            "type": "share_confirmed",
            "document_id": claims.document_id,
            "email": claims.email,
            "permission": claims.permission.value,
        }
        await self.notifications.dispatch(owner_id, payload, receiver_email=claims.email)
        if owner_id is not None and grantee_id is not None:
            await self.notifications.dispatch(grantee_id, payload, receiver_id=owner_id)

        logger.info(
            "Invite confirmed",
            extra={"document_id": claims.document_id, "email": claims.email, "jti": claims.jti},
        )
        return Result.ok(share)

    async def revoke_invite(self, actor_id: int, token: str) -> Result[bool]:
        """Deny a still valid invite until its natural expiry."""
        try:
            claims = self.signer.verify(token)
        except InvalidTokenError as e:
            return Result.fail(e)

        if not await self.access.is_owner(claims.document_id, actor_id):
            return Result.fail(AuthorizationError())
        if not claims.jti:
            return Result.fail(MalformedTokenError(detail="missing jti"))

        if not await self.redis.add_to_denylist(claims.jti, claims.remaining_seconds()):
            return Result.fail(InternalError("Révocation indisponible", detail="denylist write failed"))

        logger.info("Invite revoked", extra={"document_id": claims.document_id, "jti": claims.jti})
        return Result.ok(True)
