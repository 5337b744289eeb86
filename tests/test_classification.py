"""Tests for smooth / cusp / discontinuous classification."""
import math

import numpy as np
import pytest

from calcgraph.numerics.classification import classify_points, count_point_types, secant_slopes
from calcgraph.point import PointType

CUSP_ANGLE = math.radians(25)
SLOPE_LIMIT = 200.0


@pytest.fixture
def x():
    return np.linspace(0, 10, 401)


def _classify(x, y):
    return classify_points(x, y, CUSP_ANGLE, SLOPE_LIMIT)


def test_secant_slopes_edges_reuse_single_slope(x):
    left, right = secant_slopes(x, 2 * x)
    np.testing.assert_allclose(left, 2.0)
    np.testing.assert_allclose(right, 2.0)


def test_line_is_smooth(x):
    types = _classify(x, 3 * x - 1)
    assert np.all(types == PointType.SMOOTH)


def test_abs_has_single_cusp(x):
    types = _classify(x, np.abs(x - 5))
    assert np.flatnonzero(types == PointType.CUSP).tolist() == [200]
    assert not np.any(types == PointType.DISCONTINUOUS)


def test_gentle_corner_stays_smooth(x):
    # slopes 0 and 0.3 differ by ~17 degrees
    y = np.where(x < 5, 0.0, 0.3 * (x - 5))
    assert np.all(_classify(x, y) == PointType.SMOOTH)


def test_jump_is_discontinuous(x):
    y = np.where(x < 4.99, 0.0, 10.0)
    types = _classify(x, y)
    assert np.flatnonzero(types == PointType.DISCONTINUOUS).tolist() == [199, 200]
    assert not np.any(types == PointType.CUSP)


def test_undefined_sample_marks_neighbours(x):
    y = np.sin(x)
    y[100] = np.nan
    types = _classify(x, y)
    assert np.flatnonzero(types == PointType.DISCONTINUOUS).tolist() == [99, 100, 101]


def test_undefined_edge_sample(x):
    y = np.zeros_like(x)
    y[0] = np.nan
    types = _classify(x, y)
    assert types[0] == PointType.DISCONTINUOUS
    assert types[1] == PointType.DISCONTINUOUS
    assert types[2] == PointType.SMOOTH


def test_edge_points_are_never_cusps(x):
    y = np.abs(x - 0.025)
    types = _classify(x, y)
    assert types[0] == PointType.SMOOTH
    assert types[1] == PointType.CUSP


def test_count_point_types(x):
    y = np.abs(x - 5)
    y[300] = np.nan
    counts = count_point_types(_classify(x, y))
    assert counts[PointType.CUSP] == 1
    assert counts[PointType.DISCONTINUOUS] == 3
    assert sum(counts.values()) == len(x)
