"""AlphaPeaks - Peak and coordinate data model for mass spectrometry.

This library provides the entity types that sit underneath peak lists:
peaks that live in several coordinate systems at once (m/z, neutral mass,
time, ion mobility), the capability layer that lets generic code read and
write those coordinates without knowing the concrete peak type, and
intervals for selecting peaks along a coordinate.

All types are plain in-memory values; there is no I/O.
"""

__version__ = "0.1.0"

from alphapeaks import constants
from alphapeaks import coordinate
from alphapeaks import peak
from alphapeaks import interval
from alphapeaks import tolerance
from alphapeaks import search

from alphapeaks.coordinate import (
    CoordinateSystem,
    MZ,
    Mass,
    Time,
    IonMobility,
    CoordinateLike,
    CoordinateRef,
    IndexedCoordinate,
    BorrowedView,
    as_system,
    borrow,
    is_mutable,
    supports,
    set_coordinate,
    coordinate_mut,
)
from alphapeaks.peak import (
    IntensityMeasurement,
    IntensityMeasurementMut,
    KnownCharge,
    KnownChargeMut,
    CentroidLike,
    DeconvolutedCentroidLike,
    CentroidPeak,
    DeconvolutedPeak,
    MZPoint,
    as_centroid,
    calculate_mz,
    calculate_neutral_mass,
)
from alphapeaks.interval import (
    Bound,
    CoordinateRange,
    CoordinateRangeParseError,
    MalformedStartError,
    MalformedEndError,
)
from alphapeaks.tolerance import Tolerance, ToleranceUnit

__all__ = [
    # Submodules
    "constants",
    "coordinate",
    "peak",
    "interval",
    "tolerance",
    "search",

    # Coordinate systems and capabilities
    "CoordinateSystem",
    "MZ",
    "Mass",
    "Time",
    "IonMobility",
    "CoordinateLike",
    "CoordinateRef",
    "IndexedCoordinate",
    "BorrowedView",
    "as_system",
    "borrow",
    "is_mutable",
    "supports",
    "set_coordinate",
    "coordinate_mut",

    # Peaks
    "IntensityMeasurement",
    "IntensityMeasurementMut",
    "KnownCharge",
    "KnownChargeMut",
    "CentroidLike",
    "DeconvolutedCentroidLike",
    "CentroidPeak",
    "DeconvolutedPeak",
    "MZPoint",
    "as_centroid",
    "calculate_mz",
    "calculate_neutral_mass",

    # Intervals
    "Bound",
    "CoordinateRange",
    "CoordinateRangeParseError",
    "MalformedStartError",
    "MalformedEndError",

    # Tolerances
    "Tolerance",
    "ToleranceUnit",
]
