# Document sharing between users
from enum import Enum
from typing import Optional, Union

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class SharePermission(str, Enum):
    """Permission levels a share can grant. READ_WRITE includes READ."""

    READ = "read"
    READ_WRITE = "read-write"

    @property
    def rank(self) -> int:
        return 2 if self is SharePermission.READ_WRITE else 1

    def satisfies(self, required: "SharePermission") -> bool:
        return self.rank >= required.rank

    @classmethod
    def from_value(cls, value: Union[bool, str, "SharePermission"]) -> "SharePermission":
        """Accept the boolean form used by the web client (True = read-write) or a level name.

        Raises ValueError for anything else.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            return cls.READ_WRITE if value else cls.READ
        if isinstance(value, str):
            normalized = value.strip().lower().replace("_", "-")
            if normalized == "write":
                normalized = cls.READ_WRITE.value
            for member in cls:
                if member.value == normalized:
                    return member
        raise ValueError(f"Unknown permission: {value!r}")


class Share(BaseModel):
    """Grant of read or read-write access on one document to one email."""

    __tablename__ = "shares"

    document_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False
    )
    # stored trimmed + lower-cased, may belong to nobody yet
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    # filled in when an account with that email exists
    user_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    permission: Mapped[str] = mapped_column(
        String(20), default=SharePermission.READ.value, nullable=False
    )
    # grantee side favorite; the owner's lives on the document
    favorite: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        UniqueConstraint("document_id", "email", name="uq_shares_document_email"),
        CheckConstraint("length(permission) <= 20", name="ck_shares_permission_len"),
        Index("idx_shares_document_id", "document_id"),
        Index("idx_shares_email", "email"),
        Index("idx_shares_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<Share(document_id={self.document_id}, email='{self.email}', permission={self.permission})>"

    @property
    def level(self) -> SharePermission:
        return SharePermission.from_value(self.permission)

    def grants(self, required: SharePermission) -> bool:
        return self.level.satisfies(required)
