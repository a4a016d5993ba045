"""
Result Type

Tagged outcome for per-item lookups in fan-out calls, so callers can tell
"nothing there" (Ok(None)) apart from "lookup failed" (Err).
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    reason: str


Result = Union[Ok[T], Err]


def unwrap_or_none(result: "Result[Optional[T]]") -> Optional[T]:
    """Collapse a result to its value, treating failures as absent."""
    if isinstance(result, Ok):
        return result.value
    return None
