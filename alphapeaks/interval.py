"""Intervals over a single coordinate system.

``CoordinateRange`` is an inclusive range with optional ends, tagged with the
coordinate system it applies to. A missing start behaves as 0 and a missing
end as +inf for containment and overlap tests.

Textual form
------------
``"<start><delim><end>"`` where ``<delim>`` is the first of ``' '``, ``':'``,
``'-'`` present in the text (in that priority). Either side may be empty for
an unbounded end. Text without any delimiter is a start-only range.

Examples
--------
>>> window = CoordinateRange.parse("100:200", MZ)
>>> window.contains_raw(150.0)
True
>>> CoordinateRange.parse(":20", MZ)
CoordinateRange(system=<class 'alphapeaks.coordinate.MZ'>, start=None, end=20.0)
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Generic, NamedTuple, Optional, Tuple, Type, TypeVar

from .constants import DEFAULT_RANGE_END, DEFAULT_RANGE_START, RANGE_DELIMITERS
from .coordinate import CoordinateSystem, SystemLike, as_system, coordinate

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=CoordinateSystem)

# Decimal float literal: optional sign, ASCII digits with optional fraction, optional exponent
_FLOAT_LITERAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


# =============================================================================
# Errors
# =============================================================================

class CoordinateRangeParseError(ValueError):
    """A range bound could not be parsed.

    Attributes:
        text: The full text that was being parsed
        error: The underlying numeric parse error
    """

    side = ""

    def __init__(self, text: str, error: ValueError):
        self.text = text
        self.error = error
        super().__init__(f"Failed to parse range {self.side} of {text!r}: {error}")


class MalformedStartError(CoordinateRangeParseError):
    side = "start"


class MalformedEndError(CoordinateRangeParseError):
    side = "end"


def _parse_bound(token: str) -> Optional[float]:
    if not token:
        return None
    if not _FLOAT_LITERAL.fullmatch(token):
        raise ValueError(f"invalid float literal {token!r}")
    value = float(token)
    if not math.isfinite(value):
        raise ValueError(f"{token!r} is not a finite number")
    return value


# =============================================================================
# Bounds
# =============================================================================

class Bound(NamedTuple):
    """One end of an interval. ``value=None`` means unbounded."""

    value: Optional[float] = None
    inclusive: bool = True

    @classmethod
    def included(cls, value: float) -> "Bound":
        return cls(float(value), True)

    @classmethod
    def excluded(cls, value: float) -> "Bound":
        return cls(float(value), False)

    @classmethod
    def unbounded(cls) -> "Bound":
        return cls(None, True)

    @property
    def is_unbounded(self) -> bool:
        return self.value is None


def _bound_value(bound: Any, default: float) -> float:
    # Exclusive and inclusive bounds both collapse to their value.
    if bound is None:
        return default
    if isinstance(bound, Bound):
        return default if bound.value is None else float(bound.value)
    return float(bound)


# =============================================================================
# CoordinateRange
# =============================================================================

@dataclass
class CoordinateRange(Generic[C]):
    """An inclusive interval within a single coordinate system.

    Args:
        system: Coordinate system the interval applies to
        start: Lower bound (inclusive), ``None`` if unbounded
        end: Upper bound (inclusive), ``None`` if unbounded

    ``str()`` output parses back for finite bounds and an end of +inf. Other
    non-finite bounds are rendered but rejected by ``parse``.
    """

    system: Type[C]
    start: Optional[float] = None
    end: Optional[float] = None

    def __post_init__(self):
        self.system = as_system(self.system)
        if self.start is not None:
            self.start = float(self.start)
        if self.end is not None:
            self.end = float(self.end)

    @classmethod
    def closed(cls, system: SystemLike, start: float, end: float) -> "CoordinateRange":
        """Interval bounded on both sides."""
        return cls(system, start, end)

    @classmethod
    def up_to(cls, system: SystemLike, end: float) -> "CoordinateRange":
        """Interval bounded above only."""
        return cls(system, None, end)

    @classmethod
    def parse(cls, text: str, system: SystemLike) -> "CoordinateRange":
        """Parse ``"<start><delim><end>"`` into a range over ``system``.

        Only the first occurrence of the chosen delimiter splits the text;
        any further delimiter characters stay in the end token.

        Raises:
            MalformedStartError: If the start token is not a finite number
            MalformedEndError: If the end token is not a finite number
        """
        delimiter = next((d for d in RANGE_DELIMITERS if d in text), RANGE_DELIMITERS[0])
        start_token, _, end_token = text.partition(delimiter)

        try:
            start = _parse_bound(start_token)
        except ValueError as err:
            logger.debug(f"Malformed range start in {text!r}: {err}")
            raise MalformedStartError(text, err) from err

        try:
            end = _parse_bound(end_token)
        except ValueError as err:
            logger.debug(f"Malformed range end in {text!r}: {err}")
            raise MalformedEndError(text, err) from err

        return cls(system, start, end)

    @property
    def lower(self) -> float:
        """Start, or 0 when unbounded."""
        return DEFAULT_RANGE_START if self.start is None else self.start

    @property
    def upper(self) -> float:
        """End, or +inf when unbounded."""
        return DEFAULT_RANGE_END if self.end is None else self.end

    def start_bound(self) -> Bound:
        return Bound(self.start, True)

    def end_bound(self) -> Bound:
        return Bound(self.end, True)

    def to_range(self) -> Tuple[float, float]:
        """``(start or 0, end or +inf)``."""
        return (self.lower, self.upper)

    def contains(self, point) -> bool:
        """Whether the coordinate of ``point`` in this system lies within the range.

        Raises:
            TypeError: If ``point`` has no coordinate in this system
        """
        return self.contains_raw(coordinate(point, self.system))

    def contains_raw(self, x: float) -> bool:
        """Whether the value ``x`` lies within the range."""
        return self.lower <= x <= self.upper

    def overlaps(self, other: Any) -> bool:
        """Whether this range and ``other`` share at least one point.

        ``other`` may be a ``CoordinateRange`` over the same system, any object
        with ``start_bound()`` and ``end_bound()``, or a ``(start, end)`` pair
        of ``None``, numbers or ``Bound``. Exclusive bounds are compared by
        value, so touching an exclusive bound still counts as overlap.

        Raises:
            TypeError: If ``other`` is a range over a different system
        """
        if isinstance(other, CoordinateRange) and other.system is not self.system:
            raise TypeError(
                f"Cannot compare a {self.system.__name__} range with a "
                f"{other.system.__name__} range"
            )
        if hasattr(other, "start_bound") and hasattr(other, "end_bound"):
            start_bound, end_bound = other.start_bound(), other.end_bound()
        else:
            start_bound, end_bound = other

        other_start = _bound_value(start_bound, DEFAULT_RANGE_START)
        other_end = _bound_value(end_bound, DEFAULT_RANGE_END)
        return self.upper >= other_start and other_end >= self.lower

    def __str__(self):
        # An end of +inf is written as an open end; it reads back as None.
        start = "" if self.start is None else repr(self.start)
        end = "" if self.end is None or self.end == math.inf else repr(self.end)
        return f"{start}:{end}"
