"""Parse-with-fallback helpers for untyped submission and model output.

Every helper returns either :class:`Parsed` or :class:`Defaulted`; both
expose ``value`` so callers can use the result directly, while
``Defaulted.reason`` keeps the cause of the fallback inspectable.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")

DEFAULT_COORDINATE = 0.0
DEFAULT_SEVERITY = 5.0
SEVERITY_MIN = 1.0
SEVERITY_MAX = 10.0

# Leading decimal number, the way form fields and model replies usually start.
_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class Parsed(Generic[T]):
    value: T

    @property
    def defaulted(self) -> bool:
        return False


@dataclass(frozen=True)
class Defaulted(Generic[T]):
    value: T
    reason: str

    @property
    def defaulted(self) -> bool:
        return True


ParseResult = Union[Parsed[T], Defaulted[T]]


def _leading_float(raw: Any) -> float | None:
    """Return the number a string starts with, or None."""

    if raw is None:
        return None
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        match = _LEADING_NUMBER.match(str(raw).strip())
        if not match:
            return None
        value = float(match.group(0))
    if not math.isfinite(value):
        return None
    return value


def parse_coordinate(raw: Any) -> ParseResult[float]:
    """Parse a latitude/longitude form value, defaulting to 0."""

    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return Defaulted(DEFAULT_COORDINATE, "missing")
    value = _leading_float(raw)
    if value is None:
        return Defaulted(DEFAULT_COORDINATE, f"not a number: {raw!r}")
    return Parsed(value)


def parse_severity(raw: Any) -> ParseResult[float]:
    """Accept a model reply only when it is a number within [1, 10]."""

    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return Defaulted(DEFAULT_SEVERITY, "empty response")
    value = _leading_float(raw)
    if value is None:
        return Defaulted(DEFAULT_SEVERITY, f"not a number: {str(raw)[:40]!r}")
    if not SEVERITY_MIN <= value <= SEVERITY_MAX:
        return Defaulted(DEFAULT_SEVERITY, f"out of range: {value}")
    return Parsed(value)


__all__ = [
    "DEFAULT_COORDINATE",
    "DEFAULT_SEVERITY",
    "Defaulted",
    "ParseResult",
    "Parsed",
    "parse_coordinate",
    "parse_severity",
]
