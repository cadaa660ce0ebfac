# Content history of documents
from typing import Optional

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class DocumentHistory(BaseModel):
    """One saved content change: full snapshots plus the changed span."""

    __tablename__ = "document_history"

    document_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False
    )
    # kept when the author's account goes away
    user_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    user_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    snapshot_before: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    snapshot_after: Mapped[str] = mapped_column(Text, nullable=False)
    diff_added: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    diff_removed: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (Index("idx_document_history_document_id", "document_id"),)

    def __repr__(self) -> str:
        return f"<DocumentHistory(document_id={self.document_id}, user_id={self.user_id})>"
