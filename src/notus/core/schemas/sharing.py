"""
Sharing schemas.

The web client sends camelCase keys (``documentId``, ``userId``,
``inviterName``...) and a boolean ``permission`` where true means
read-write; the level names ``read`` / ``read-write`` are accepted too.
"""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, PositiveInt, field_validator, model_validator

from ..models.share import SharePermission
from ..services.access_service import Grantee, GranteeByEmail, GranteeById


def _permission(value) -> SharePermission:
    # ValueError becomes a 400 through the validation handler
    return SharePermission.from_value(value)


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class InviteShareRequest(_CamelModel):
    document_id: PositiveInt = Field(alias="documentId")
    email: EmailStr
    permission: Union[bool, str] = Field(default=False, validate_default=True)
    inviter_name: Optional[str] = Field(default=None, alias="inviterName", max_length=200)
    doc_title: Optional[str] = Field(default=None, alias="docTitle", max_length=255)

    @field_validator("permission")
    @classmethod
    def validate_permission(cls, v):
        return _permission(v)


class RevokeInviteRequest(BaseModel):
    token: str = Field(min_length=1)


class ShareChangeRequest(_CamelModel):
    """PATCH /openDoc/share and DELETE /openDoc/share/delete body."""

    document_id: PositiveInt = Field(alias="documentId")
    email: Optional[EmailStr] = None
    user_id: Optional[PositiveInt] = Field(default=None, alias="userId")
    permission: Optional[Union[bool, str]] = None

    @field_validator("permission")
    @classmethod
    def validate_permission(cls, v):
        return None if v is None else _permission(v)

    @model_validator(mode="after")
    def require_grantee(self):
        if self.email is None and self.user_id is None:
            raise ValueError("email or userId is required")
        return self

    def grantee(self) -> Grantee:
        """Email wins when both are sent."""
        if self.email is not None:
            return GranteeByEmail(email=str(self.email))
        return GranteeById(user_id=self.user_id)


class InviteResponse(BaseModel):
    success: bool = True
    message: str = "Invitation envoyée !"
    expires_at: datetime


class ShareResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    document_id: int
    email: str
    user_id: Optional[int] = None
    permission: str
    created_at: datetime


class ShareMutationResponse(BaseModel):
    success: bool = True
    share: ShareResponse


class AccessEntryResponse(BaseModel):
    email: str
    user_id: Optional[int] = None
    username: Optional[str] = None
    permission: Optional[str] = None
    is_owner: bool = False


class AccessListResponse(_CamelModel):
    success: bool = True
    access_list: List[AccessEntryResponse] = Field(alias="accessList")


class SharedDocumentItem(BaseModel):
    id: int
    title: str
    owner_id: int
    permission: str
    favorite: bool
    updated_at: datetime


class SharedDocumentsResponse(BaseModel):
    success: bool = True
    documents: List[SharedDocumentItem]


class HistoryAuthor(BaseModel):
    id: int
    username: str
    email: str


class HistoryEntryResponse(BaseModel):
    id: int
    document_id: int
    user_id: Optional[int] = None
    user_email: Optional[str] = None
    snapshot_before: Optional[str] = None
    snapshot_after: str
    diff_added: Optional[str] = None
    diff_removed: Optional[str] = None
    created_at: datetime
    user: Optional[HistoryAuthor] = None


class HistoryResponse(BaseModel):
    success: bool = True
    history: List[HistoryEntryResponse]
