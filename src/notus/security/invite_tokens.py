"""
Signed share invitation tokens.

An invite is a stateless capability: a JWT carrying ``id_doc``, ``email`` and
``permission`` that expires after the configured lifetime (2 days by
default). Nothing is stored when it is issued; only revocation writes the
token's ``jti`` to a denylist.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt

from ..config import InviteSettings
from ..core.errors import InvalidTokenError, MalformedTokenError
from ..core.models.share import SharePermission
from ..core.models.user import normalize_email

INVITE_TOKEN_TYPE = "share_invite"


@dataclass(frozen=True)
class InviteClaims:
    document_id: int
    email: str
    permission: SharePermission
    jti: Optional[str]
    expires_at: Optional[datetime]

    def remaining_seconds(self, now: Optional[datetime] = None) -> int:
        if self.expires_at is None:
            return 0
        now = now or datetime.now(timezone.utc)
        return max(0, int((self.expires_at - now).total_seconds()))


class InviteTokenSigner:
    """Issue and verify invite tokens with one explicitly provided configuration."""

    def __init__(self, config: InviteSettings):
        self.config = config

    def issue(
        self,
        document_id: int,
        email: str,
        permission: SharePermission,
        now: Optional[datetime] = None,
    ) -> tuple[str, InviteClaims]:
        now = now or datetime.now(timezone.utc)
        expires_at = now + self.config.lifetime
        claims = InviteClaims(
            document_id=document_id,
            email=normalize_email(email),
            permission=permission,
            jti=uuid.uuid4().hex,
            expires_at=expires_at,
        )
        payload = {
            "id_doc": claims.document_id,
            "email": claims.email,
            "permission": claims.permission.value,
            "jti": claims.jti,
            "type": INVITE_TOKEN_TYPE,
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(payload, self.config.secret, algorithm=self.config.algorithm)
        return token, claims

    def verify(self, token: str) -> InviteClaims:
        """Check signature, expiry and claims.

        Raises InvalidTokenError on bad signature, expiry or wrong token type,
        MalformedTokenError when ``id_doc`` / ``email`` are missing or unusable.
        """
        if not token:
            raise InvalidTokenError(detail="empty token")
        try:
            payload = jwt.decode(token, self.config.secret, algorithms=[self.config.algorithm])
        except ExpiredSignatureError as exc:
            raise InvalidTokenError(detail="invite expired") from exc
        except JWTError as exc:
            raise InvalidTokenError(detail=f"invite rejected: {exc}") from exc

        if payload.get("type") != INVITE_TOKEN_TYPE:
            raise InvalidTokenError(detail="not an invite token")

        raw_document_id = payload.get("id_doc")
        email = normalize_email(payload.get("email") or "")
        if raw_document_id is None or not email:
            raise MalformedTokenError(detail="missing id_doc or email")

        try:
            document_id = int(raw_document_id)
            permission = SharePermission.from_value(payload.get("permission", SharePermission.READ))
        except (TypeError, ValueError) as exc:
            raise MalformedTokenError(detail=str(exc)) from exc

        exp = payload.get("exp")
        expires_at = datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None
        return InviteClaims(
            document_id=document_id,
            email=email,
            permission=permission,
            jti=payload.get("jti"),
            expires_at=expires_at,
        )
