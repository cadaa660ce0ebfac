"""
Shared response schemas - envelope, pagination, health
"""

from datetime import datetime, timezone
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SuccessResponse(BaseModel):
    """``{"success": true, ...}``"""

    success: bool = True
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    """``{"success": false, "error": "..."}``; the message never carries internals."""

    success: bool = False
    error: str = Field(description="User facing message")


class PaginatedResponse(BaseModel, Generic[T]):
    """Pagination wrapper for list endpoints"""

    success: bool = True
    items: List[T]
    total: int
    page: int
    per_page: int
    pages: int

    @classmethod
    def create(cls, items: List[T], total: int, page: int, per_page: int) -> "PaginatedResponse[T]":
        pages = (total + per_page - 1) // per_page if per_page else 0
        return cls(items=items, total=total, page=page, per_page=per_page, pages=pages)


class HealthCheckResponse(BaseModel):
    """Health check response schema."""

    status: str = Field(description="Overall health status")
    timestamp: datetime = Field(default_factory=_now)
    version: str = Field(description="Application version")
    checks: dict[str, dict[str, Any]] = Field(description="Individual component health checks")
