"""Document API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..core.models.user import User
from ..core.schemas.common import PaginatedResponse, SuccessResponse
from ..core.schemas.documents import (
    DocumentCreate,
    DocumentListItem,
    DocumentResponse,
    DocumentUpdate,
    FavoriteRequest,
)
from ..core.services import DocumentService
from ..core.services.document_service import DocumentView
from ..database import get_db_session
from ..middleware.auth import get_current_user

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("/", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def create_document(
    request: DocumentCreate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    document = (await DocumentService(session).create_document(user.id, request.model_dump())).unwrap()
    return DocumentResponse.from_view(DocumentView.for_owner(document))


@router.get("/", response_model=PaginatedResponse[DocumentListItem])
async def list_documents(
    page: int = Query(1, ge=1),
    per_page: Optional[int] = Query(None, ge=1),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    per_page = settings.page_size(per_page)
    documents, total = await DocumentService(session).list_documents(user.id, page, per_page)
    items = [DocumentListItem.model_validate(d) for d in documents]
    return PaginatedResponse[DocumentListItem].create(items, total, page, per_page)


@router.get("/trash", response_model=PaginatedResponse[DocumentListItem])
async def list_trash(
    page: int = Query(1, ge=1),
    per_page: Optional[int] = Query(None, ge=1),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    per_page = settings.page_size(per_page)
    documents, total = await DocumentService(session).list_trash(user.id, page, per_page)
    items = [DocumentListItem.model_validate(d) for d in documents]
    return PaginatedResponse[DocumentListItem].create(items, total, page, per_page)


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    view = (await DocumentService(session).get_document(user.id, document_id)).unwrap()
    return DocumentResponse.from_view(view)


@router.put("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: int,
    request: DocumentUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Owner or read-write grantee."""
    service = DocumentService(session)
    (await service.update_document(user.id, document_id, request.model_dump(exclude_unset=True))).unwrap()
    view = (await service.get_document(user.id, document_id)).unwrap()
    return DocumentResponse.from_view(view)


@router.post("/{document_id}/favorite", response_model=SuccessResponse)
async def set_favorite(
    document_id: int,
    request: FavoriteRequest,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    (await DocumentService(session).set_favorite(user.id, document_id, request.favorite)).unwrap()
    return SuccessResponse()


@router.delete("/{document_id}", response_model=SuccessResponse)
async def move_to_trash(
    document_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    (await DocumentService(session).move_to_trash(user.id, document_id)).unwrap()
    return SuccessResponse(message="Document déplacé dans la corbeille")


@router.post("/{document_id}/restore", response_model=DocumentResponse)
async def restore_document(
    document_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    document = (await DocumentService(session).restore(user.id, document_id)).unwrap()
    return DocumentResponse.from_view(DocumentView.for_owner(document))


@router.delete("/{document_id}/permanent", response_model=SuccessResponse)
async def purge_document(
    document_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    (await DocumentService(session).purge(user.id, document_id)).unwrap()
    return SuccessResponse(message="Document supprimé définitivement")
