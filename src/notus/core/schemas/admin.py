"""
Administration schemas: application settings and dashboard statistics.
"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.app_setting import MAX_SETTING_KEY_LENGTH


class SettingUpdateRequest(BaseModel):
    key: str = Field(min_length=1, max_length=MAX_SETTING_KEY_LENGTH)
    value: str
    description: Optional[str] = Field(default=None, max_length=500)


class SettingsResponse(BaseModel):
    success: bool = True
    settings: Dict[str, str]


class SettingResponse(BaseModel):
    """A saved setting; ``value`` is already masked for sensitive keys."""

    key: str
    value: str
    description: Optional[str] = None


class SettingSavedResponse(BaseModel):
    success: bool = True
    setting: SettingResponse


class PeriodCountsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total: int
    last_7_days: int = Field(alias="last7Days")
    last_30_days: int = Field(alias="last30Days")


class UserCountsResponse(PeriodCountsResponse):
    verified: int
    banned: int
    admins: int


class StatsBody(BaseModel):
    users: UserCountsResponse
    documents: PeriodCountsResponse
    shares: PeriodCountsResponse


class StatsResponse(BaseModel):
    success: bool = True
    stats: StatsBody
