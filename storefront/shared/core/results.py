"""Explicit result types returned by provider and store operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar, Union

from .errors import StorefrontError

T = TypeVar("T")
E = TypeVar("E", bound=StorefrontError)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return self.error.message


Result: TypeAlias = Union[Ok[T], Err[StorefrontError]]
