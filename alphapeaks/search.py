"""Generic coordinate algorithms over sequences of peaks.

Every function here works for any coordinate system: the system is a
parameter, and coordinates are read through the capability layer, so the same
code sorts centroids by m/z, deconvoluted peaks by neutral mass, or features
by time.

Key Features
------------
- Coordinate extraction into float64 arrays
- Sorting and re-indexing along a coordinate
- O(log n) range selection and nearest-value lookup with Numba kernels

Examples
--------
>>> peaks = reindex(peaks, MZ)
>>> window = CoordinateRange.parse("400:500", MZ)
>>> hits = select_range(peaks, window)
>>> best = search_nearest(peaks, 445.12, MZ, Tolerance(5.0))
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
from numba import njit

from .coordinate import SystemLike, as_system, coordinate
from .interval import CoordinateRange
from .tolerance import Tolerance

logger = logging.getLogger(__name__)


# =============================================================================
# Numba Kernels
# =============================================================================

@njit
def binary_search_range(values: np.ndarray, start: float, end: float) -> Tuple[int, int]:
    """Find the slice of sorted values lying in the inclusive window [start, end].

    Parameters
    ----------
    values : np.ndarray
        Sorted array of coordinate values
    start : float
        Lower bound (inclusive)
    end : float
        Upper bound (inclusive)

    Returns
    -------
    start_idx : int
        First index inside the window
    end_idx : int
        One past the last index inside the window (exclusive, Python convention)

    Examples
    --------
    >>> values = np.array([100.0, 200.0, 200.1, 300.0])
    >>> binary_search_range(values, 200.0, 250.0)
    (1, 3)
    """
    n = len(values)

    lo = 0
    hi = n
    while lo < hi:
        mid = (lo + hi) // 2
        if values[mid] < start:
            lo = mid + 1
        else:
            hi = mid
    first = lo

    hi = n
    while lo < hi:
        mid = (lo + hi) // 2
        if values[mid] <= end:
            lo = mid + 1
        else:
            hi = mid

    return first, lo


@njit
def find_nearest_index(values: np.ndarray, target: float) -> int:
    """Index of the sorted value closest to ``target``, or -1 if ``values`` is empty.

    Ties resolve to the lower index.
    """
    n = len(values)
    if n == 0:
        return -1

    lo = 0
    hi = n
    while lo < hi:
        mid = (lo + hi) // 2
        if values[mid] < target:
            lo = mid + 1
        else:
            hi = mid

    if lo == 0:
        return 0
    if lo == n:
        return n - 1
    if target - values[lo - 1] <= values[lo] - target:
        return lo - 1
    return lo


# =============================================================================
# Generic Helpers
# =============================================================================

def coordinate_array(peaks: Iterable, system: SystemLike) -> np.ndarray:
    """Coordinates of ``peaks`` in ``system`` as a float64 array."""
    system = as_system(system)
    return np.fromiter((coordinate(peak, system) for peak in peaks), dtype=np.float64)


def sort_by_coordinate(peaks: Iterable, system: SystemLike, reverse: bool = False) -> List:
    """Return ``peaks`` sorted by their coordinate in ``system``."""
    system = as_system(system)
    return sorted(peaks, key=system.coordinate, reverse=reverse)


def reindex(peaks: Iterable, system: Optional[SystemLike] = None) -> List:
    """Sort ``peaks`` along a coordinate and assign indices 0..n-1.

    Args:
        peaks: Indexed coordinate entities
        system: Coordinate to sort by; defaults to each peak's own
            ``index_coordinate``

    Returns:
        The sorted peaks. Indices are assigned in place through ``set_index``,
        so entities that ignore index assignment keep reporting their own.
    """
    if system is None:
        ordered = sorted(peaks, key=lambda peak: coordinate(peak, type(peak).index_coordinate))
    else:
        ordered = sort_by_coordinate(peaks, system)

    for i, peak in enumerate(ordered):
        peak.set_index(i)

    logger.debug(f"Re-indexed {len(ordered):,} peaks")
    return ordered


def select_range(sorted_peaks: Sequence, interval: CoordinateRange) -> List:
    """Peaks of a sequence sorted by ``interval.system`` that fall inside ``interval``."""
    peaks = list(sorted_peaks)
    values = coordinate_array(peaks, interval.system)
    start, end = binary_search_range(values, interval.lower, interval.upper)
    logger.debug(f"Selected {end - start:,} of {len(peaks):,} peaks in {interval.system.__name__} {interval}")
    return peaks[start:end]


def filter_by_range(peaks: Iterable, interval: CoordinateRange) -> List:
    """Peaks inside ``interval``, in their original order. Input need not be sorted."""
    return [peak for peak in peaks if interval.contains(peak)]


def search_nearest(
    sorted_peaks: Sequence,
    value: float,
    system: SystemLike,
    tolerance: Optional[Tolerance] = None,
):
    """Find the peak closest to ``value`` in ``system``.

    Args:
        sorted_peaks: Peaks sorted by their ``system`` coordinate
        value: Theoretical coordinate to look up
        system: Coordinate system to search in
        tolerance: Maximum allowed error, defaults to ``Tolerance()``

    Returns:
        The nearest peak, or ``None`` if there is none within tolerance
    """
    if tolerance is None:
        tolerance = Tolerance()
    peaks = list(sorted_peaks)
    values = coordinate_array(peaks, system)

    idx = find_nearest_index(values, float(value))
    if idx < 0 or not tolerance.contains(values[idx], value):
        return None
    return peaks[idx]
