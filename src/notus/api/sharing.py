"""Sharing API endpoints (invitations and direct share management)."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..core.errors import ACCESS_DENIED, InvalidTokenError, NotFoundError, ValidationError
from ..core.models.user import User
from ..core.redis_client import RedisClient, get_redis_client
from ..core.schemas.common import SuccessResponse
from ..core.schemas.sharing import (
    AccessEntryResponse,
    AccessListResponse,
    HistoryAuthor,
    HistoryEntryResponse,
    HistoryResponse,
    InviteResponse,
    InviteShareRequest,
    RevokeInviteRequest,
    SharedDocumentItem,
    SharedDocumentsResponse,
    ShareChangeRequest,
    ShareMutationResponse,
    ShareResponse,
)
from ..core.services import DocumentAccessService, DocumentHistoryService, EmailService, ShareInviteService
from ..core.services.interfaces import IEmailService
from ..database import get_db_session
from ..middleware.auth import ensure_can_manage_shares, get_current_user

logger = logging.getLogger("notus.api.sharing")

router = APIRouter(tags=["sharing"])


def get_email_service(settings: Settings = Depends(get_settings)) -> IEmailService:
    return EmailService(settings)


def get_invite_service(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
    email_service: IEmailService = Depends(get_email_service),
    redis_client: RedisClient = Depends(get_redis_client),
) -> ShareInviteService:
    return ShareInviteService(
        session,
        settings.invite_settings(),
        email_service=email_service,
        redis_client=redis_client,
    )


def _denied(status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": ACCESS_DENIED})


@router.post("/invite-share", response_model=InviteResponse)
async def invite_share(
    request: InviteShareRequest,
    user: User = Depends(get_current_user),
    invites: ShareInviteService = Depends(get_invite_service),
):
    """Email a signed confirmation link to the invitee."""
    result = await invites.create_invite(
        user.id,
        request.document_id,
        str(request.email),
        request.permission,
        inviter_name=request.inviter_name or user.display_name,
        doc_title=request.doc_title,
    )
    issued = result.unwrap()
    return InviteResponse(expires_at=issued.expires_at)


@router.get("/confirm-share")
async def confirm_share(
    token: Optional[str] = Query(default=None),
    invites: ShareInviteService = Depends(get_invite_service),
    settings: Settings = Depends(get_settings),
):
    """Materialize the share carried by an invite link, then send the browser home."""
    if not token:
        return _denied(status.HTTP_400_BAD_REQUEST)

    result = await invites.confirm_invite(token)
    if not result.success:
        if isinstance(result.error, (InvalidTokenError, ValidationError, NotFoundError)):
            logger.info("Invite link refused", extra={"error": result.error.code, "detail": result.error.detail})
            return _denied(status.HTTP_400_BAD_REQUEST)
        logger.error("Invite confirmation failed", extra={"error": result.error.code, "detail": result.error.detail})
        return _denied(status.HTTP_500_INTERNAL_SERVER_ERROR)

    return RedirectResponse(url=f"{settings.app_base_url.rstrip('/')}/", status_code=status.HTTP_307_TEMPORARY_REDIRECT)


@router.post("/invite-share/revoke", response_model=SuccessResponse)
async def revoke_invite(
    request: RevokeInviteRequest,
    user: User = Depends(get_current_user),
    invites: ShareInviteService = Depends(get_invite_service),
):
    (await invites.revoke_invite(user.id, request.token)).unwrap()
    return SuccessResponse(message="Invitation révoquée")


@router.patch("/openDoc/share", response_model=ShareMutationResponse)
async def update_share(
    request: ShareChangeRequest,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Upsert a share by email, or re-level an existing share by user id."""
    if request.permission is None:
        raise ValidationError("Permission requise")

    access = DocumentAccessService(session)
    await ensure_can_manage_shares(access, request.document_id, user)

    share = (await access.apply_share_change(request.document_id, request.grantee(), request.permission)).unwrap()
    return ShareMutationResponse(share=ShareResponse.model_validate(share))


@router.delete("/openDoc/share/delete")
async def delete_share(
    request: ShareChangeRequest,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    access = DocumentAccessService(session)
    await ensure_can_manage_shares(access, request.document_id, user)

    deleted = (await access.revoke_grantee(request.document_id, request.grantee())).unwrap()
    return {"success": True, "deleted": deleted}


@router.get("/openDoc/accessList", response_model=AccessListResponse)
async def access_list(
    id: int = Query(gt=0),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    access = DocumentAccessService(session)
    await ensure_can_manage_shares(access, id, user)

    entries = (await access.fetch_document_access_list(id)).unwrap()
    return AccessListResponse(
        access_list=[
            AccessEntryResponse(
                email=e.email,
                user_id=e.user_id,
                username=e.username,
                permission=e.permission.value if e.permission else None,
                is_owner=e.is_owner,
            )
            for e in entries
        ]
    )


@router.get("/openDoc/shared", response_model=SharedDocumentsResponse)
async def shared_with_me(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    shared = (await DocumentAccessService(session).list_shared_with(user.id)).unwrap()
    return SharedDocumentsResponse(
        documents=[
            SharedDocumentItem(
                id=item.document.id,
                title=item.document.title,
                owner_id=item.document.owner_id,
                permission=item.share.permission,
                favorite=item.share.favorite,
                updated_at=item.document.updated_at,
            )
            for item in shared
        ]
    )


@router.get("/openDoc/history", response_model=HistoryResponse)
async def document_history(
    document_id: int = Query(alias="documentId", gt=0),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Content changes of a document, oldest first; owner or any grantee."""
    entries = (await DocumentHistoryService(session).list_history(user.id, document_id)).unwrap()
    return HistoryResponse(
        history=[
            HistoryEntryResponse(
                id=item.entry.id,
                document_id=item.entry.document_id,
                user_id=item.entry.user_id,
                user_email=item.entry.user_email,
                snapshot_before=item.entry.snapshot_before,
                snapshot_after=item.entry.snapshot_after,
                diff_added=item.entry.diff_added,
                diff_removed=item.entry.diff_removed,
                created_at=item.entry.created_at,
                user=HistoryAuthor(id=item.author.id, username=item.author.username, email=item.author.email)
                if item.author
                else None,
            )
            for item in entries
        ]
    )
