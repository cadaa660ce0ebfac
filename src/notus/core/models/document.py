# Documents owned by a single user
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel
from .types import TagListType

MAX_TITLE_LENGTH = 255
MAX_TAGS = 20
MAX_TAG_LENGTH = 50
DEFAULT_TITLE = "Sans titre"


class Document(BaseModel):
    """A note. ``deleted_at`` set means the document sits in the owner's trash."""

    __tablename__ = "documents"

    owner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(MAX_TITLE_LENGTH), nullable=False, default=DEFAULT_TITLE)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    tags: Mapped[List[str]] = mapped_column(TagListType, nullable=False, default=list)
    favorite: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint("length(title) <= 255", name="ck_documents_title_len"),
        Index("idx_documents_owner_id", "owner_id"),
        Index("idx_documents_owner_updated", "owner_id", "updated_at"),
        Index("idx_documents_deleted_at", "deleted_at"),
    )

    def __repr__(self) -> str:
        truncated = self.title if len(self.title) <= 30 else (self.title[:30] + "...")
        return f"<Document(title='{truncated}', owner_id={self.owner_id})>"

    @property
    def is_trashed(self) -> bool:
        return self.deleted_at is not None

    def is_owned_by(self, user_id: int) -> bool:
        return self.owner_id == user_id

    def move_to_trash(self) -> None:
        self.deleted_at = datetime.now(timezone.utc)

    def restore(self) -> None:
        self.deleted_at = None
