"""Notification schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class NotificationResponse(BaseModel):
    id: int
    sender_id: Optional[int] = None
    receiver_id: int
    message: Dict[str, Any]
    read: bool
    read_at: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_model(cls, notification) -> "NotificationResponse":
        return cls(
            id=notification.id,
            sender_id=notification.sender_id,
            receiver_id=notification.receiver_id,
            message=notification.payload,
            read=notification.is_read,
            read_at=notification.read_at,
            created_at=notification.created_at,
        )


class NotificationListResponse(BaseModel):
    success: bool = True
    notifications: List[NotificationResponse]


class UnreadCountResponse(BaseModel):
    success: bool = True
    count: int
