# Dossiers (folders) grouping a user's documents
from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class Dossier(BaseModel):
    """User-owned folder. Deleting one only removes its links."""

    __tablename__ = "dossiers"

    owner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    __table_args__ = (
        CheckConstraint("length(name) <= 255", name="ck_dossiers_name_len"),
        Index("idx_dossiers_owner_id", "owner_id"),
    )

    def __repr__(self) -> str:
        return f"<Dossier(name='{self.name}', owner_id={self.owner_id})>"


class DossierDocument(BaseModel):
    """Association between dossiers and documents."""

    __tablename__ = "dossier_documents"

    dossier_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("dossiers.id", ondelete="CASCADE"), nullable=False
    )
    document_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("dossier_id", "document_id", name="uq_dossier_documents_pair"),
        Index("idx_dossier_documents_dossier", "dossier_id"),
        Index("idx_dossier_documents_document", "document_id"),
    )
