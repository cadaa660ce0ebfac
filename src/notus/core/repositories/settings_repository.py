"""Application settings repository."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.app_setting import AppSetting
from ..models.base import utcnow
from .share_repository import UPSERT_INSERTS


class SettingsRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_key(self, key: str) -> Optional[AppSetting]:
        stmt = (
            select(AppSetting)
            .where(AppSetting.key == key)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_all(self) -> List[AppSetting]:
        result = await self.session.execute(select(AppSetting).order_by(AppSetting.key))
        return list(result.scalars())

    async def upsert(self, key: str, value: str, description: Optional[str] = None) -> AppSetting:
        """Create or replace a setting; an omitted description keeps the stored one."""
        insert = UPSERT_INSERTS.get(self.session.get_bind().dialect.name)
        if insert is None:
            setting = await self.get_by_key(key)
            if setting is None:
                setting = AppSetting(key=key)
                self.session.add(setting)
            setting.value = value
            if description is not None:
                setting.description = description
            await self.session.commit()
            return await self.get_by_key(key)

        now = utcnow()
        stmt = insert(AppSetting).values(
            key=key, value=value, description=description, created_at=now, updated_at=now
        )
        updates = {"value": stmt.excluded.value, "updated_at": stmt.excluded.updated_at}
        if description is not None:
            updates["description"] = stmt.excluded.description
        stmt = stmt.on_conflict_do_update(index_elements=["key"], set_=updates)
        await self.session.execute(stmt)
        await self.session.commit()
        return await self.get_by_key(key)
