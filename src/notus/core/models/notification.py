# In-app notifications
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class Notification(BaseModel):
    """Message for one receiver. ``message`` holds a JSON document."""

    __tablename__ = "notifications"

    # None for system notifications
    sender_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    receiver_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    read_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_notifications_receiver", "receiver_id"),
        Index("idx_notifications_receiver_read", "receiver_id", "read_at"),
    )

    def __repr__(self) -> str:
        return f"<Notification(receiver_id={self.receiver_id}, read={self.is_read})>"

    @property
    def is_read(self) -> bool:
        return self.read_at is not None

    @property
    def payload(self) -> Dict[str, Any]:
        try:
            data = json.loads(self.message)
        except (TypeError, ValueError):
            return {"text": self.message}
        return data if isinstance(data, dict) else {"value": data}

    def mark_read(self) -> None:
        if self.read_at is None:
            self.read_at = datetime.now(timezone.utc)
