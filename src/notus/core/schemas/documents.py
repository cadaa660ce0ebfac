"""
Document schemas.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.document import MAX_TITLE_LENGTH


class DocumentCreate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=MAX_TITLE_LENGTH)
    content: str = ""
    tags: List[str] = Field(default_factory=list)


class DocumentUpdate(BaseModel):
    """Only provided fields change."""

    title: Optional[str] = Field(default=None, max_length=MAX_TITLE_LENGTH)
    content: Optional[str] = None
    tags: Optional[List[str]] = None


class FavoriteRequest(BaseModel):
    favorite: bool


class DocumentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    title: str
    content: str
    tags: List[str]
    favorite: bool = False
    is_owner: bool = True
    permission: str = "read-write"
    deleted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_view(cls, view) -> "DocumentResponse":
        doc = view.document
        return cls(
            id=doc.id,
            owner_id=doc.owner_id,
            title=doc.title,
            content=doc.content,
            tags=list(doc.tags or []),
            favorite=view.favorite,
            is_owner=view.is_owner,
            permission=view.permission.value,
            deleted_at=doc.deleted_at,
            created_at=doc.created_at,
            updated_at=doc.updated_at,
        )


class DocumentListItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    tags: List[str]
    favorite: bool
    deleted_at: Optional[datetime] = None
    updated_at: datetime
