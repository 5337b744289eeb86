"""
Calculus primitives for sampled curves.

Finite-difference derivatives and cumulative trapezoidal integrals that
carry point classification along: undefined regions of the input become
undefined regions of the output according to the rules below.
"""

import numpy as np
from scipy import integrate
from typing import List, Tuple

from calcgraph.point import PointType


def differentiate(
    x: np.ndarray,
    y: np.ndarray,
    point_types: np.ndarray
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Compute the derivative of a sampled curve.

    Interior samples use the centered difference
        y'(x_i) = (y[i+1] - y[i-1]) / (x[i+1] - x[i-1])
    and the two edge samples use one-sided differences.

    Propagation:
        - input sample is a cusp                     -> undefined
        - input sample or a neighbour discontinuous -> undefined

    Args:
        x: Strictly increasing sample positions
        y: Sample values
        point_types: PointType codes of the input samples

    Returns:
        (derivative, undefined) where undefined samples hold nan
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    point_types = np.asarray(point_types)

    assert np.all(np.diff(x) > 0), "sample positions must be strictly increasing"

    discontinuous = point_types == PointType.DISCONTINUOUS

    undefined = discontinuous | (point_types == PointType.CUSP)
    undefined[1:] |= discontinuous[:-1]
    undefined[:-1] |= discontinuous[1:]

    with np.errstate(invalid='ignore'):
        derivative = np.gradient(y, x, edge_order=1)

    assert np.all(np.isfinite(derivative[~undefined])), "non-finite slope at a defined sample"

    derivative[undefined] = np.nan
    return derivative, undefined


def undefined_runs(mask: np.ndarray) -> List[Tuple[int, int]]:
    """
    Find runs of consecutive True values.

    Args:
        mask: Boolean array

    Returns:
        List of (start, stop) index pairs, stop exclusive
    """
    padded = np.concatenate([[0], np.asarray(mask, dtype=np.int8), [0]])
    edges = np.flatnonzero(np.diff(padded))
    return list(zip(edges[::2].tolist(), edges[1::2].tolist()))


def bridge_gaps(
    x: np.ndarray,
    y: np.ndarray,
    max_gap_samples: int
) -> np.ndarray:
    """
    Fill short runs of undefined samples with their adjacent limit values.

    Runs of at most max_gap_samples undefined samples are linearly bridged
    between the defined samples on either side (a run touching a domain edge
    takes the single adjacent value). Longer runs stay undefined.

    Args:
        x: Sample positions
        y: Sample values (nan = undefined)
        max_gap_samples: Longest run that is bridged

    Returns:
        Copy of y with short gaps filled
    """
    y = np.array(y, dtype=np.float64)
    defined = np.isfinite(y)
    if not np.any(defined):
        return y

    filled = np.interp(x, x[defined], y[defined])
    for start, stop in undefined_runs(~defined):
        if stop - start <= max_gap_samples:
            y[start:stop] = filled[start:stop]

    return y


def integrate_from(
    x: np.ndarray,
    y: np.ndarray,
    reference_index: int,
    max_gap_samples: int = 3
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Cumulative trapezoidal integral that is zero at a reference sample.

    Integrates outward from the reference in both directions:
        F[i+1] = F[i] + (y[i] + y[i+1]) / 2 * (x[i+1] - x[i])
    and symmetrically to the left.

    Isolated undefined samples of the integrand (runs up to max_gap_samples)
    contribute their adjacent limit values and leave the integral defined.
    A longer undefined run makes the integrand unbounded over an interval:
    the integral is undefined across that run and beyond it, away from the
    reference.

    Args:
        x: Strictly increasing sample positions
        y: Integrand values (nan = undefined)
        reference_index: Sample where the integral is 0
        max_gap_samples: Longest undefined run that is bridged

    Returns:
        (integral, undefined) where undefined samples hold nan
    """
    x = np.asarray(x, dtype=np.float64)
    assert np.all(np.diff(x) > 0), "sample positions must be strictly increasing"

    integrand = bridge_gaps(x, y, max_gap_samples)
    r = reference_index

    right = _cumulative_trapezoid(integrand[r:], x[r:])
    # reversed x runs downhill, so areas to the left come out negative
    left = _cumulative_trapezoid(integrand[:r + 1][::-1], x[:r + 1][::-1])[::-1]

    integral = np.concatenate([left[:-1], right])
    integral[r] = 0.0

    undefined = ~np.isfinite(integral)
    integral[undefined] = np.nan
    return integral, undefined


def _cumulative_trapezoid(y: np.ndarray, x: np.ndarray) -> np.ndarray:
    if len(y) < 2:
        return np.zeros(len(y))
    return integrate.cumulative_trapezoid(y, x, initial=0)
