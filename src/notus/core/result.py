"""Discriminated result returned by every service operation."""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from .errors import NotusError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either ``success=True`` with ``data`` or ``success=False`` with ``error``.

    Callers must check ``success`` before reading ``data``.
    """

    success: bool
    data: Optional[T] = None
    error: Optional[NotusError] = None

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "Result[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: NotusError) -> "Result[T]":
        return cls(success=False, error=error)

    def unwrap(self) -> T:
        """Return data or raise the carried error (route layer only)."""
        if not self.success:
            raise self.error
        return self.data
