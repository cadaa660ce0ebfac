"""Administration endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..core.errors import ValidationError
from ..core.models.user import User
from ..core.repositories.user_repository import UserRepository
from ..core.schemas.admin import (
    PeriodCountsResponse,
    SettingResponse,
    SettingSavedResponse,
    SettingsResponse,
    SettingUpdateRequest,
    StatsBody,
    StatsResponse,
    UserCountsResponse,
)
from ..core.schemas.auth import AdminFlagRequest, UserResponse
from ..core.schemas.common import PaginatedResponse
from ..core.services import AdminService, AuthService
from ..database import get_db_session
from ..middleware.auth import require_admin

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=PaginatedResponse[UserResponse])
async def list_users(
    page: int = Query(1, ge=1),
    per_page: Optional[int] = Query(None, ge=1),
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    per_page = settings.page_size(per_page)
    users, total = await UserRepository(session).list_users(page, per_page)
    items = [UserResponse.model_validate(u) for u in users]
    return PaginatedResponse[UserResponse].create(items, total, page, per_page)


@router.patch("/users/{user_id}/admin", response_model=UserResponse)
async def set_admin(
    user_id: int,
    request: AdminFlagRequest,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    if user_id == admin.id and not request.value:
        raise ValidationError("Impossible de retirer vos propres droits")
    user = (await AuthService(session).set_admin(user_id, request.value)).unwrap()
    return UserResponse.model_validate(user)


@router.patch("/users/{user_id}/ban", response_model=UserResponse)
async def set_banned(
    user_id: int,
    request: AdminFlagRequest,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    if user_id == admin.id:
        raise ValidationError("Impossible de vous bannir vous-même")
    user = (await AuthService(session).set_banned(user_id, request.value)).unwrap()
    return UserResponse.model_validate(user)


@router.get("/settings", response_model=SettingsResponse)
async def list_settings(
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    return SettingsResponse(settings=await AdminService(session).list_settings())


@router.post("/settings", response_model=SettingSavedResponse)
async def save_setting(
    request: SettingUpdateRequest,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    """Create or replace one setting."""
    setting = (await AdminService(session).save_setting(request.key, request.value, request.description)).unwrap()
    return SettingSavedResponse(
        setting=SettingResponse(key=setting.key, value=setting.public_value, description=setting.description)
    )


@router.get("/stats", response_model=StatsResponse)
async def platform_stats(
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    stats = await AdminService(session).get_stats()

    def _period(counts) -> PeriodCountsResponse:
        return PeriodCountsResponse(
            total=counts.total, last_7_days=counts.last_7_days, last_30_days=counts.last_30_days
        )

    users = stats.users
    return StatsResponse(
        stats=StatsBody(
            users=UserCountsResponse(
                total=users.total,
                last_7_days=users.last_7_days,
                last_30_days=users.last_30_days,
                verified=users.verified,
                banned=users.banned,
                admins=users.admins,
            ),
            documents=_period(stats.documents),
            shares=_period(stats.shares),
        )
    )
