"""Tri-state setting values shared by the extension and task layers."""

from __future__ import annotations

from enum import Enum
from typing import TypeGuard, TypeVar

T = TypeVar("T")


class Unset(Enum):
    """Marker type for a setting nobody touched."""

    UNSET = "unset"

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = Unset.UNSET


def is_set(value: T | Unset) -> TypeGuard[T]:
    """Return True when the value was touched, including an explicit None."""
    return value is not UNSET
