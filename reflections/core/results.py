"""Uniform success/failure wrapper returned by service operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """Outcome of a service call: either ``data`` or an ``error`` message."""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "ServiceResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "ServiceResult[T]":
        return cls(success=False, error=error)

    def __bool__(self) -> bool:
        return self.success


NOT_AUTHENTICATED = "User not authenticated"
NOT_FOUND = "Entry not found"
