"""Uniform result envelope for data-access services."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

NOT_FOUND = "not_found"
DB_ERROR = "db_error"


@dataclass
class ActionState(Generic[T]):
    is_success: bool
    message: str
    data: Optional[T] = None
    error_code: Optional[str] = None

    @property
    def not_found(self) -> bool:
        return self.error_code == NOT_FOUND

    @classmethod
    def ok(cls, message: str, data: Optional[T] = None) -> "ActionState[T]":
        return cls(is_success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str, error_code: str = DB_ERROR) -> "ActionState[T]":
        return cls(is_success=False, message=message, error_code=error_code)
