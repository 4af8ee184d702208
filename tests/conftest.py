"""Pytest configuration for AlphaPeaks tests.

This module provides common fixtures for all tests. The library is a pure
in-memory data model, so fixtures are small hand-built peaks.
"""

import numpy as np
import pytest

from alphapeaks import CentroidPeak, DeconvolutedPeak, MZPoint


@pytest.fixture
def centroid_peak():
    """Centroid peak with a non-zero index."""
    return CentroidPeak(204.07, 5000.0, 19)


@pytest.fixture
def deconvoluted_peak():
    """Doubly charged deconvoluted peak of PEPTIDE-like mass."""
    return DeconvolutedPeak(799.359964027, 5000.0, 2, 1)


@pytest.fixture
def mz_point():
    """Bare m/z point."""
    return MZPoint(204.07, 5000.0)


@pytest.fixture
def expected_mz():
    """Derived m/z of the deconvoluted_peak fixture."""
    return 400.68725848027


@pytest.fixture
def unsorted_centroids():
    """Centroid peaks in no particular order, all with index 0."""
    return [
        CentroidPeak(300.0, 100.0),
        CentroidPeak(100.0, 300.0),
        CentroidPeak(250.5, 50.0),
        CentroidPeak(150.0, 1000.0),
        CentroidPeak(200.0, 10.0),
    ]


@pytest.fixture
def unsorted_deconvoluted():
    """Deconvoluted peaks in no particular order."""
    return [
        DeconvolutedPeak(1500.0, 100.0, 3),
        DeconvolutedPeak(900.0, 200.0, 2),
        DeconvolutedPeak(1200.0, 300.0, 2),
    ]


# Random seed for reproducibility
@pytest.fixture(scope="session", autouse=True)
def set_random_seed():
    """Set random seed for reproducible tests."""
    np.random.seed(42)
