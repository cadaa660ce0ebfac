"""Notification API endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.models.user import User
from ..core.schemas.common import SuccessResponse
from ..core.schemas.notifications import NotificationListResponse, NotificationResponse, UnreadCountResponse
from ..core.services import NotificationService
from ..database import get_db_session
from ..middleware.auth import get_current_user

router = APIRouter(prefix="/notification", tags=["notifications"])


@router.get("/", response_model=NotificationListResponse)
async def list_notifications(
    limit: int = Query(50, ge=1, le=50),
    offset: int = Query(0, ge=0),
    only_unread: bool = Query(False, alias="onlyUnread"),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    notifications = await NotificationService(session).list_notifications(
        user.id, limit=limit, offset=offset, only_unread=only_unread
    )
    return NotificationListResponse(notifications=[NotificationResponse.from_model(n) for n in notifications])


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return UnreadCountResponse(count=await NotificationService(session).count_unread(user.id))


@router.post("/read-all", response_model=UnreadCountResponse)
async def mark_all_read(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """``count`` is the number of notifications that were marked."""
    return UnreadCountResponse(count=await NotificationService(session).mark_all_as_read(user.id))


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    notification = (await NotificationService(session).mark_as_read(user.id, notification_id)).unwrap()
    return NotificationResponse.from_model(notification)


@router.delete("/{notification_id}", response_model=SuccessResponse)
async def delete_notification(
    notification_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    (await NotificationService(session).delete_notification(user.id, notification_id)).unwrap()
    return SuccessResponse()
