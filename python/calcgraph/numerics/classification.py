"""
Point classification primitives.

Tags every sample of a discretized curve as smooth, cusp or discontinuous
from the slopes of its left and right secant lines.
"""

import numpy as np
from typing import Tuple

from calcgraph.point import PointType


def secant_slopes(
    x: np.ndarray,
    y: np.ndarray
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Compute left and right secant slopes at every sample.

    Edge samples only have one neighbour; the missing side reuses the
    available slope so both comparisons see the same value.

    Args:
        x: Strictly increasing sample positions
        y: Sample values (nan = undefined)

    Returns:
        (slope_left, slope_right), each the same length as x
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)

    with np.errstate(invalid='ignore'):
        secants = np.diff(y) / np.diff(x)

    slope_left = np.empty_like(y)
    slope_right = np.empty_like(y)

    slope_left[1:] = secants
    slope_right[:-1] = secants

    # Edges
    slope_left[0] = secants[0]
    slope_right[-1] = secants[-1]

    return slope_left, slope_right


def classify_points(
    x: np.ndarray,
    y: np.ndarray,
    cusp_angle_threshold: float,
    slope_threshold: float
) -> np.ndarray:
    """
    Classify every sample of a curve.

    Decision order per sample:
        1. own value or a neighbour undefined  -> DISCONTINUOUS
        2. max(|slope_left|, |slope_right|) > slope_threshold -> DISCONTINUOUS
        3. |atan(slope_left) - atan(slope_right)| > cusp_angle_threshold -> CUSP
        4. otherwise -> SMOOTH

    A steep secant wins over an angle mismatch, so a jump reads as a break
    rather than a sharp corner.

    Args:
        x: Strictly increasing sample positions
        y: Sample values (nan = undefined)
        cusp_angle_threshold: Angle mismatch threshold in radians
        slope_threshold: Absolute slope threshold

    Returns:
        int8 array of PointType codes
    """
    y = np.asarray(y, dtype=np.float64)
    slope_left, slope_right = secant_slopes(x, y)

    undefined = ~(np.isfinite(y) & np.isfinite(slope_left) & np.isfinite(slope_right))

    with np.errstate(invalid='ignore'):
        steepest = np.maximum(np.abs(slope_left), np.abs(slope_right))
        angle_mismatch = np.abs(np.arctan(slope_left) - np.arctan(slope_right))

        steep = steepest > slope_threshold
        cusp = angle_mismatch > cusp_angle_threshold

    types = np.full(len(y), PointType.SMOOTH, dtype=np.int8)
    types[cusp] = PointType.CUSP
    types[steep | undefined] = PointType.DISCONTINUOUS

    return types


def count_point_types(types: np.ndarray) -> dict:
    """
    Tally classification codes.

    Args:
        types: Array of PointType codes

    Returns:
        dict mapping each PointType to its count
    """
    types = np.asarray(types)
    return {point_type: int(np.sum(types == point_type)) for point_type in PointType}
