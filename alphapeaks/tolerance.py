"""Matching tolerances in ppm or Da.

Examples
--------
>>> tol = Tolerance.parse("10ppm")
>>> tol.contains(500.004, 500.0)
True
>>> low, high = Tolerance(0.02, ToleranceUnit.DA).bounds(500.0)
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .constants import DEFAULT_TOLERANCE_PPM
from .coordinate import SystemLike
from .interval import CoordinateRange

_TOLERANCE_TEXT = re.compile(
    r"\s*([+]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)\s*([A-Za-z]+)\s*", re.ASCII
)


class ToleranceUnit(Enum):
    """Units a tolerance can be expressed in."""
    PPM = "ppm"  # relative, parts per million
    DA = "da"    # absolute, Dalton


@dataclass
class Tolerance:
    """Symmetric matching tolerance around a theoretical value."""

    value: float = DEFAULT_TOLERANCE_PPM
    unit: ToleranceUnit = ToleranceUnit.PPM

    def __post_init__(self):
        if not isinstance(self.unit, ToleranceUnit):
            try:
                self.unit = ToleranceUnit(str(self.unit).lower())
            except ValueError:
                raise ValueError(f"Unknown tolerance unit: {self.unit}. Use 'ppm' or 'da'.") from None
        self.value = float(self.value)
        if self.value < 0:
            raise ValueError(f"Tolerance must be non-negative, got {self.value}")

    @classmethod
    def parse(cls, text: str) -> 'Tolerance':
        """Parse ``"10ppm"``, ``"0.02 Da"`` and the like.

        Raises:
            ValueError: If the text is not a number followed by a known unit
        """
        match = _TOLERANCE_TEXT.fullmatch(text)
        if match is None:
            raise ValueError(f"Malformed tolerance: {text!r}")
        return cls(float(match.group(1)), match.group(2))

    def error(self, observed: float, theoretical: float) -> float:
        """Signed error of ``observed`` against ``theoretical`` in this unit.

        A ppm error against a theoretical value of 0 is 0 for an exact match
        and signed infinity otherwise.
        """
        if self.unit is ToleranceUnit.PPM:
            if theoretical == 0:
                if observed == theoretical:
                    return 0.0
                return math.copysign(math.inf, observed - theoretical)
            return (observed - theoretical) / theoretical * 1e6
        return observed - theoretical

    def contains(self, observed: float, theoretical: float) -> bool:
        return abs(self.error(observed, theoretical)) <= self.value

    def width(self, theoretical: float) -> float:
        """Half-width of the window around ``theoretical`` in Da."""
        if self.unit is ToleranceUnit.PPM:
            return abs(theoretical) * self.value * 1e-6
        return self.value

    def bounds(self, theoretical: float) -> Tuple[float, float]:
        width = self.width(theoretical)
        return (theoretical - width, theoretical + width)

    def to_range(self, theoretical: float, system: SystemLike) -> CoordinateRange:
        """The window around ``theoretical`` as a ``CoordinateRange`` over ``system``."""
        low, high = self.bounds(theoretical)
        return CoordinateRange.closed(system, low, high)

    def __str__(self):
        return f"{self.value:g}{self.unit.value}"
