# Key/value application settings edited by administrators
from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel

MAX_SETTING_KEY_LENGTH = 100

# values under these keys never leave the server
SENSITIVE_KEY_SUFFIXES = ("_token", "_secret", "_password", "_api_key")
MASK = "***"


def is_sensitive_key(key: str) -> bool:
    return key.lower().endswith(SENSITIVE_KEY_SUFFIXES)


class AppSetting(BaseModel):
    __tablename__ = "app_settings"

    key: Mapped[str] = mapped_column(String(MAX_SETTING_KEY_LENGTH), unique=True, nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<AppSetting(key='{self.key}')>"

    @property
    def public_value(self) -> str:
        """The value as shown to administrators, masked for secrets."""
        if is_sensitive_key(self.key):
            return MASK if self.value else ""
        return self.value
