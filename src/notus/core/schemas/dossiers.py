"""Dossier schemas."""

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from .documents import DocumentListItem


class DossierCreate(BaseModel):
    # blank names are refused by the service with a French message
    nom: str = Field(max_length=255)


class DossierDocumentsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    document_ids: List[PositiveInt] = Field(alias="documentIds", min_length=1)


class DossierResponse(BaseModel):
    id: int
    nom: str
    document_count: int = 0
    created_at: datetime


class DossierDetailResponse(BaseModel):
    success: bool = True
    dossier: DossierResponse
    documents: List[DocumentListItem]


class DossierListResponse(BaseModel):
    success: bool = True
    dossiers: List[DossierResponse]


class DocumentsChangedResponse(BaseModel):
    success: bool = True
    count: int
