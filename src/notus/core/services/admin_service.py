"""Administration: application settings and dashboard statistics."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import InternalError, ValidationError
from ..models.app_setting import MAX_SETTING_KEY_LENGTH, AppSetting
from ..models.base import utcnow
from ..repositories.settings_repository import SettingsRepository
from ..repositories.stats_repository import StatsRepository
from ..result import Result

logger = logging.getLogger("notus.admin")


@dataclass(frozen=True)
class PeriodCounts:
    total: int
    last_7_days: int
    last_30_days: int


@dataclass(frozen=True)
class UserCounts(PeriodCounts):
    verified: int = 0
    banned: int = 0
    admins: int = 0


@dataclass(frozen=True)
class PlatformStats:
    users: UserCounts
    documents: PeriodCounts
    shares: PeriodCounts


class AdminService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.settings_repo = SettingsRepository(session)
        self.stats_repo = StatsRepository(session)

    async def list_settings(self) -> Dict[str, str]:
        """Every setting by key, sensitive values masked."""
        return {s.key: s.public_value for s in await self.settings_repo.list_all()}

    async def save_setting(self, key: str, value: str, description: Optional[str] = None) -> Result[AppSetting]:
        key = (key or "").strip()
        if not key:
            return Result.fail(ValidationError("Clé requise"))
        if len(key) > MAX_SETTING_KEY_LENGTH:
            return Result.fail(ValidationError(f"Clé limitée à {MAX_SETTING_KEY_LENGTH} caractères"))
        if not isinstance(value, str):
            return Result.fail(ValidationError("Valeur invalide"))

        try:
            setting = await self.settings_repo.upsert(key, value, description)
        except SQLAlchemyError as e:
            logger.error("Setting not saved", extra={"key": key}, exc_info=e)
            await self.session.rollback()
            return Result.fail(InternalError(detail=str(e)))

        # never log the value, it may be a secret
        logger.info("Setting saved", extra={"key": key})
        return Result.ok(setting)

    async def get_stats(self, now: Optional[datetime] = None) -> PlatformStats:
        now = now or utcnow()
        week, month = now - timedelta(days=7), now - timedelta(days=30)
        repo = self.stats_repo

        users = UserCounts(
            total=await repo.count_users(),
            last_7_days=await repo.count_users(week),
            last_30_days=await repo.count_users(month),
            verified=await repo.count_verified_users(),
            banned=await repo.count_banned_users(),
            admins=await repo.count_admin_users(),
        )
        documents = PeriodCounts(
            await repo.count_documents(), await repo.count_documents(week), await repo.count_documents(month)
        )
        shares = PeriodCounts(await repo.count_shares(), await repo.count_shares(week), await repo.count_shares(month))
        return PlatformStats(users=users, documents=documents, shares=shares)
