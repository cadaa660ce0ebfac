"""Dossier API endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.models.user import User
from ..core.schemas.common import SuccessResponse
from ..core.schemas.documents import DocumentListItem
from ..core.schemas.dossiers import (
    DocumentsChangedResponse,
    DossierCreate,
    DossierDetailResponse,
    DossierDocumentsRequest,
    DossierListResponse,
    DossierResponse,
)
from ..core.services import DossierService
from ..database import get_db_session
from ..middleware.auth import get_current_user

router = APIRouter(prefix="/dossiers", tags=["dossiers"])


def _dossier(dossier, count: int = 0) -> DossierResponse:
    return DossierResponse(id=dossier.id, nom=dossier.name, document_count=count, created_at=dossier.created_at)


@router.get("/", response_model=DossierListResponse)
async def list_dossiers(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    summaries = await DossierService(session).list_dossiers(user.id)
    return DossierListResponse(dossiers=[_dossier(s.dossier, s.document_count) for s in summaries])


@router.post("/", response_model=DossierResponse, status_code=status.HTTP_201_CREATED)
async def create_dossier(
    request: DossierCreate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    dossier = (await DossierService(session).create_dossier(user.id, request.nom)).unwrap()
    return _dossier(dossier)


@router.get("/{dossier_id}", response_model=DossierDetailResponse)
async def get_dossier(
    dossier_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    detail = (await DossierService(session).get_dossier(user.id, dossier_id)).unwrap()
    return DossierDetailResponse(
        dossier=_dossier(detail.dossier, len(detail.documents)),
        documents=[DocumentListItem.model_validate(d) for d in detail.documents],
    )


@router.patch("/{dossier_id}", response_model=DossierResponse)
async def rename_dossier(
    dossier_id: int,
    request: DossierCreate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    dossier = (await DossierService(session).rename_dossier(user.id, dossier_id, request.nom)).unwrap()
    return _dossier(dossier)


@router.delete("/{dossier_id}", response_model=SuccessResponse)
async def delete_dossier(
    dossier_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Removes the dossier only; its documents stay."""
    (await DossierService(session).delete_dossier(user.id, dossier_id)).unwrap()
    return SuccessResponse(message="Dossier supprimé")


@router.post("/{dossier_id}/documents", response_model=DocumentsChangedResponse)
async def add_documents(
    dossier_id: int,
    request: DossierDocumentsRequest,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    added = (await DossierService(session).add_documents(user.id, dossier_id, request.document_ids)).unwrap()
    return DocumentsChangedResponse(count=added)


@router.delete("/{dossier_id}/documents", response_model=DocumentsChangedResponse)
async def remove_documents(
    dossier_id: int,
    request: DossierDocumentsRequest,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    removed = (await DossierService(session).remove_documents(user.id, dossier_id, request.document_ids)).unwrap()
    return DocumentsChangedResponse(count=removed)
