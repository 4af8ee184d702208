"""Peak entity types.

A peak is the most atomic unit of a processed mass spectrum: a location in one
(or more) coordinate systems with a measured intensity.

Entities
--------
- ``CentroidPeak``: m/z, intensity, index
- ``DeconvolutedPeak``: neutral mass, intensity, charge, index; m/z derived
- ``MZPoint``: m/z and intensity only, no stored index

Roles
-----
``CentroidLike`` and ``DeconvolutedCentroidLike`` are structural: any class
indexed on ``MZ`` with an intensity is centroid-like, any class indexed on
``Mass`` with an intensity and a known charge is deconvoluted-centroid-like.
New types acquire the role by having the capabilities, without registering.

Examples
--------
>>> peak = DeconvolutedPeak(799.359964027, 5000.0, 2, 1)
>>> round(peak.mz, 6)
400.687258
>>> point = CentroidPeak(204.07, 5000.0, 19).to_point()
>>> point.to_centroid().index
0
"""

import functools
import logging
from abc import ABC
from dataclasses import dataclass, fields
from typing import Any, ClassVar, Dict, Tuple, Union

import numpy as np

from .constants import CHARGE_CARRIER_MASS
from .coordinate import (
    MZ,
    IndexedCoordinate,
    Mass,
    SystemType,
    coordinate,
    is_indexed_on,
)

logger = logging.getLogger(__name__)


# =============================================================================
# m/z <-> Neutral Mass
# =============================================================================

def calculate_mz(neutral_mass: float, charge: int) -> float:
    """Calculate m/z from neutral mass and charge.

    m/z = (M + z × charge_carrier) / z

    A charge of 0 gives a non-finite result (``inf`` or ``nan``) rather than
    an error.

    Args:
        neutral_mass: Neutral mass in Da
        charge: Charge state

    Returns:
        m/z value
    """
    if charge == 0:
        logger.debug(f"Deriving m/z of neutral mass {neutral_mass} with charge 0")
    with np.errstate(divide="ignore", invalid="ignore"):
        mz = np.float64(neutral_mass + CHARGE_CARRIER_MASS * charge) / np.float64(charge)
    return float(mz)


def calculate_neutral_mass(mz: float, charge: int) -> float:
    """Calculate neutral mass from m/z and charge.

    M = (m/z) × z - z × charge_carrier

    Args:
        mz: Mass-to-charge ratio
        charge: Charge state

    Returns:
        Neutral mass in Da
    """
    return mz * charge - charge * CHARGE_CARRIER_MASS


# =============================================================================
# Intensity and Charge Capabilities
# =============================================================================

class IntensityMeasurement:
    """An entity with a measured intensity, read through ``.intensity``."""

    _read_capability = True
    _view_attributes = ("intensity",)


class IntensityMeasurementMut(IntensityMeasurement):
    """An ``IntensityMeasurement`` whose intensity can be assigned."""

    def set_intensity(self, value: float) -> None:
        self.intensity = np.float32(value)


class KnownCharge:
    """An entity with a determined charge state, read through ``.charge``."""

    _read_capability = True
    _view_attributes = ("charge",)


class KnownChargeMut(KnownCharge):
    """A ``KnownCharge`` whose charge can be assigned."""

    def set_charge(self, value: int) -> None:
        self.charge = int(value)


# =============================================================================
# Roles
# =============================================================================

class CentroidLike(ABC):
    """Anything indexed in m/z space with an intensity measurement."""

    @classmethod
    def __subclasshook__(cls, C):
        if cls is CentroidLike:
            if is_indexed_on(C, MZ) and issubclass(C, IntensityMeasurement):
                return True
        return NotImplemented

    @staticmethod
    def comparison_key(peak) -> Tuple[float, float]:
        return (coordinate(peak, MZ), peak.intensity)


class DeconvolutedCentroidLike(ABC):
    """Anything indexed in neutral mass space with an intensity and a known charge."""

    @classmethod
    def __subclasshook__(cls, C):
        if cls is DeconvolutedCentroidLike:
            if (
                is_indexed_on(C, Mass)
                and issubclass(C, IntensityMeasurement)
                and issubclass(C, KnownCharge)
            ):
                return True
        return NotImplemented

    @staticmethod
    def comparison_key(peak) -> Tuple[float, float, int]:
        return (coordinate(peak, Mass), peak.intensity, peak.charge)


def as_centroid(peak) -> Union["CentroidPeak", "DeconvolutedPeak"]:
    """Copy any centroid-like entity into its concrete peak type.

    ``CentroidLike`` entities become ``CentroidPeak``, ``DeconvolutedCentroidLike``
    entities become ``DeconvolutedPeak``. Coordinate, intensity, charge and
    index are carried over unchanged.

    Raises:
        TypeError: If ``peak`` has neither role
    """
    if isinstance(peak, CentroidLike):
        return CentroidPeak(coordinate(peak, MZ), peak.intensity, peak.get_index())
    if isinstance(peak, DeconvolutedCentroidLike):
        return DeconvolutedPeak(
            coordinate(peak, Mass), peak.intensity, peak.charge, peak.get_index()
        )
    raise TypeError(f"{type(peak).__name__} is not a centroid-like peak")


# =============================================================================
# Peak Entities
# =============================================================================

@functools.total_ordering
class _Peak:
    """Shared record behaviour: role-based comparison, rendering, plain dicts."""

    _role: ClassVar[Any] = None

    __hash__ = None

    def __setattr__(self, name, value):
        # Intensities stay 32-bit however they are assigned
        if name == "intensity":
            value = np.float32(value)
        super().__setattr__(name, value)

    def __eq__(self, other):
        if not isinstance(other, self._role):
            return NotImplemented
        return self._role.comparison_key(self) == self._role.comparison_key(other)

    def __lt__(self, other):
        if not isinstance(other, self._role):
            return NotImplemented
        return self._role.comparison_key(self) < self._role.comparison_key(other)

    def __str__(self):
        values = ", ".join(str(getattr(self, f.name)) for f in fields(self))
        return f"{type(self).__name__}({values})"

    def to_dict(self) -> Dict[str, Any]:
        """Stored fields as plain Python values, in declaration order."""
        record = {}
        for f in fields(self):
            value = getattr(self, f.name)
            record[f.name] = value.item() if isinstance(value, np.generic) else value
        return record

    @classmethod
    def from_dict(cls, record: Dict[str, Any]):
        return cls(**{f.name: record[f.name] for f in fields(cls) if f.name in record})


@dataclass(eq=False)
class CentroidPeak(_Peak, IndexedCoordinate, IntensityMeasurementMut):
    """A single m/z coordinate with an intensity and an index.

    Nearly the most basic peak representation for peak-picked data.
    """

    mz: float = 0.0
    intensity: np.float32 = np.float32(0.0)
    index: int = 0

    stored_coordinates: ClassVar[Dict[SystemType, str]] = {MZ: "mz"}
    index_coordinate: ClassVar[SystemType] = MZ
    _role: ClassVar[Any] = CentroidLike

    def __post_init__(self):
        self.mz = float(self.mz)
        self.index = int(self.index)

    def to_point(self) -> "MZPoint":
        """Drop the index."""
        return MZPoint(self.mz, self.intensity)

    @classmethod
    def from_point(cls, point: "MZPoint") -> "CentroidPeak":
        """Promote a bare point, assigning index 0."""
        return point.to_centroid()


@dataclass(eq=False)
class DeconvolutedPeak(_Peak, IndexedCoordinate, IntensityMeasurementMut, KnownChargeMut):
    """A single neutral mass coordinate with an intensity, a known charge and an index.

    The m/z coordinate is derived from neutral mass and charge on every read,
    so it always agrees with the current field values.
    """

    neutral_mass: float = 0.0
    intensity: np.float32 = np.float32(0.0)
    charge: int = 0
    index: int = 0

    stored_coordinates: ClassVar[Dict[SystemType, str]] = {Mass: "neutral_mass"}
    derived_coordinates: ClassVar[Dict[SystemType, str]] = {MZ: "mz"}
    index_coordinate: ClassVar[SystemType] = Mass
    _role: ClassVar[Any] = DeconvolutedCentroidLike

    def __post_init__(self):
        self.neutral_mass = float(self.neutral_mass)
        self.charge = int(self.charge)
        self.index = int(self.index)

    @property
    def mz(self) -> float:
        return calculate_mz(self.neutral_mass, self.charge)


@dataclass(eq=False)
class MZPoint(_Peak, IndexedCoordinate, IntensityMeasurementMut):
    """An m/z coordinate and an intensity, for transient representations.

    Reports index 0 and ignores index assignment.
    """

    mz: float = 0.0
    intensity: np.float32 = np.float32(0.0)

    stored_coordinates: ClassVar[Dict[SystemType, str]] = {MZ: "mz"}
    index_coordinate: ClassVar[SystemType] = MZ
    _role: ClassVar[Any] = CentroidLike

    def __post_init__(self):
        self.mz = float(self.mz)

    def get_index(self) -> int:
        return 0

    def set_index(self, index: int) -> None:
        pass

    def to_centroid(self) -> CentroidPeak:
        """Promote to a ``CentroidPeak`` with index 0."""
        return CentroidPeak(self.mz, self.intensity, 0)

    @classmethod
    def from_centroid(cls, peak: CentroidPeak) -> "MZPoint":
        """Demote a ``CentroidPeak``, dropping its index."""
        return peak.to_point()
