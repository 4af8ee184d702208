"""Tests for generic coordinate algorithms.

Tests:
- Coordinate arrays for each coordinate system
- Sorting and re-indexing
- Binary search range kernel and range selection
- Nearest-peak lookup with tolerances
"""

import numpy as np
import pytest

from alphapeaks.coordinate import MZ, Mass, borrow
from alphapeaks.interval import CoordinateRange
from alphapeaks.peak import CentroidPeak, DeconvolutedPeak, MZPoint
from alphapeaks.search import (
    binary_search_range,
    coordinate_array,
    filter_by_range,
    find_nearest_index,
    reindex,
    search_nearest,
    select_range,
    sort_by_coordinate,
)
from alphapeaks.tolerance import Tolerance, ToleranceUnit


class TestCoordinateArray:
    """Test coordinate extraction."""

    def test_mz_array(self, unsorted_centroids):
        values = coordinate_array(unsorted_centroids, MZ)
        assert values.dtype == np.float64
        np.testing.assert_array_equal(values, [300.0, 100.0, 250.5, 150.0, 200.0])

    def test_mass_and_derived_mz(self, unsorted_deconvoluted):
        """The same helper reads stored and derived coordinates."""
        masses = coordinate_array(unsorted_deconvoluted, Mass)
        np.testing.assert_array_equal(masses, [1500.0, 900.0, 1200.0])

        mzs = coordinate_array(unsorted_deconvoluted, MZ)
        np.testing.assert_allclose(mzs, [p.mz for p in unsorted_deconvoluted])

    def test_empty(self):
        assert len(coordinate_array([], MZ)) == 0

    def test_wrong_system(self, unsorted_centroids):
        with pytest.raises(TypeError):
            coordinate_array(unsorted_centroids, Mass)


class TestSorting:
    """Test sorting and re-indexing."""

    def test_sort_by_mz(self, unsorted_centroids):
        ordered = sort_by_coordinate(unsorted_centroids, MZ)
        assert [p.mz for p in ordered] == [100.0, 150.0, 200.0, 250.5, 300.0]

    def test_sort_reverse(self, unsorted_centroids):
        ordered = sort_by_coordinate(unsorted_centroids, MZ, reverse=True)
        assert ordered[0].mz == 300.0

    def test_sort_deconvoluted_by_each_system(self, unsorted_deconvoluted):
        """Mass order and m/z order differ when charges differ."""
        by_mass = sort_by_coordinate(unsorted_deconvoluted, Mass)
        assert [p.neutral_mass for p in by_mass] == [900.0, 1200.0, 1500.0]

        by_mz = sort_by_coordinate(unsorted_deconvoluted, MZ)
        assert [p.neutral_mass for p in by_mz] == [900.0, 1500.0, 1200.0]

    def test_reindex(self, unsorted_centroids):
        """Indices follow m/z order."""
        ordered = reindex(unsorted_centroids, MZ)
        assert [p.get_index() for p in ordered] == [0, 1, 2, 3, 4]
        assert [p.mz for p in ordered] == [100.0, 150.0, 200.0, 250.5, 300.0]
        # Assigned in place
        assert unsorted_centroids[0].index == 4

    def test_reindex_native_coordinate(self, unsorted_deconvoluted):
        """Without a system, peaks are indexed on their own index coordinate."""
        ordered = reindex(unsorted_deconvoluted)
        assert [p.neutral_mass for p in ordered] == [900.0, 1200.0, 1500.0]
        assert [p.index for p in ordered] == [0, 1, 2]

    def test_reindex_points_and_views(self, centroid_peak):
        """Entities that ignore set_index keep their own index."""
        ordered = reindex([MZPoint(200.0, 1.0), borrow(centroid_peak), MZPoint(100.0, 1.0)])
        assert [p.get_index() for p in ordered] == [0, 0, 19]
        assert centroid_peak.index == 19


class TestBinarySearchRange:
    """Test the range search kernel."""

    def test_basic_range(self):
        values = np.array([100.0, 200.0, 200.1, 300.0])
        assert binary_search_range(values, 200.0, 250.0) == (1, 3)

    def test_inclusive_ends(self):
        values = np.array([100.0, 200.0, 300.0])
        assert binary_search_range(values, 100.0, 300.0) == (0, 3)

    def test_no_match(self):
        values = np.array([100.0, 200.0, 300.0])
        start, end = binary_search_range(values, 201.0, 299.0)
        assert start == end

    def test_unbounded_end(self):
        values = np.array([100.0, 200.0, 300.0])
        assert binary_search_range(values, 150.0, np.inf) == (1, 3)

    def test_empty(self):
        assert binary_search_range(np.zeros(0), 0.0, 1.0) == (0, 0)


class TestSelectRange:
    """Test range selection over peak sequences."""

    def test_select_mz_window(self, unsorted_centroids):
        peaks = sort_by_coordinate(unsorted_centroids, MZ)
        hits = select_range(peaks, CoordinateRange.closed(MZ, 150.0, 250.5))
        assert [p.mz for p in hits] == [150.0, 200.0, 250.5]

    def test_select_parsed_window(self, unsorted_centroids):
        peaks = sort_by_coordinate(unsorted_centroids, MZ)
        hits = select_range(peaks, CoordinateRange.parse(":160", MZ))
        assert [p.mz for p in hits] == [100.0, 150.0]

    def test_select_mass_window(self, unsorted_deconvoluted):
        peaks = sort_by_coordinate(unsorted_deconvoluted, Mass)
        hits = select_range(peaks, CoordinateRange.closed(Mass, 1000.0, 2000.0))
        assert [p.neutral_mass for p in hits] == [1200.0, 1500.0]

    def test_select_empty(self):
        assert select_range([], CoordinateRange(MZ)) == []

    def test_filter_unsorted(self, unsorted_centroids):
        hits = filter_by_range(unsorted_centroids, CoordinateRange.closed(MZ, 150.0, 250.5))
        assert [p.mz for p in hits] == [250.5, 150.0, 200.0]


class TestNearest:
    """Test nearest-value lookup."""

    def test_find_nearest_index(self):
        values = np.array([100.0, 200.0, 300.0])
        assert find_nearest_index(values, 90.0) == 0
        assert find_nearest_index(values, 149.0) == 0
        assert find_nearest_index(values, 151.0) == 1
        assert find_nearest_index(values, 150.0) == 0
        assert find_nearest_index(values, 1000.0) == 2

    def test_find_nearest_empty(self):
        assert find_nearest_index(np.zeros(0), 1.0) == -1

    def test_search_within_tolerance(self, unsorted_centroids):
        peaks = sort_by_coordinate(unsorted_centroids, MZ)
        hit = search_nearest(peaks, 200.001, MZ, Tolerance(10.0))
        assert hit is not None
        assert hit.mz == 200.0

    def test_search_outside_tolerance(self, unsorted_centroids):
        peaks = sort_by_coordinate(unsorted_centroids, MZ)
        assert search_nearest(peaks, 200.1, MZ, Tolerance(10.0)) is None

    def test_search_da_tolerance(self, unsorted_centroids):
        peaks = sort_by_coordinate(unsorted_centroids, MZ)
        hit = search_nearest(peaks, 200.4, MZ, Tolerance(0.5, ToleranceUnit.DA))
        assert hit.mz == 200.0

    def test_search_default_tolerance(self, unsorted_centroids):
        peaks = sort_by_coordinate(unsorted_centroids, MZ)
        assert search_nearest(peaks, 150.0, MZ).mz == 150.0

    def test_search_derived_mz(self):
        """Deconvoluted peaks can be searched by their derived m/z."""
        peaks = sort_by_coordinate(
            [DeconvolutedPeak(1000.0, 1.0, 2), DeconvolutedPeak(1000.0, 1.0, 1)], MZ
        )
        target = peaks[0].mz
        hit = search_nearest(peaks, target, MZ, Tolerance(1.0))
        assert hit.charge == 2

    def test_search_empty(self):
        assert search_nearest([], 100.0, MZ) is None

    def test_search_peak_sequence_is_not_copied(self):
        """The returned peak is the original object."""
        peak = CentroidPeak(500.0, 1.0)
        assert search_nearest([peak], 500.0, MZ) is peak
