from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from .enums import ErrorCode

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a mutating operation.

    Callers must check `success`; failures carry an `ErrorCode` and no payload.
    """

    success: bool
    message: str
    error: Optional[ErrorCode] = None
    payload: Optional[T] = None

    @classmethod
    def ok(cls, message: str, payload: Any = None) -> "Result":
        return cls(success=True, message=message, payload=payload)

    @classmethod
    def fail(cls, error: ErrorCode, message: str) -> "Result":
        return cls(success=False, message=message, error=error)

    def __bool__(self) -> bool:
        return self.success
