"""
Gaussian kernel smoothing.

See https://en.wikipedia.org/wiki/Kernel_smoother
"""

import numpy as np
from scipy.ndimage import convolve1d


def gaussian_kernel(
    delta_x: float,
    standard_deviation: float,
    cutoff: float = 4.0
) -> np.ndarray:
    """
    Discretized Gaussian kernel exp(-dx^2 / 2 sigma^2), normalized to sum 1.

    Args:
        delta_x: Sample spacing
        standard_deviation: Kernel sigma, in x units
        cutoff: Truncate at +/- cutoff standard deviations

    Returns:
        Odd-length symmetric kernel
    """
    half = int(np.floor(cutoff * standard_deviation / delta_x))
    offsets = np.arange(-half, half + 1) * delta_x
    kernel = np.exp(-0.5 * (offsets / standard_deviation) ** 2)
    return kernel / kernel.sum()


def gaussian_smooth(
    values: np.ndarray,
    delta_x: float,
    standard_deviation: float,
    cutoff: float = 4.0
) -> np.ndarray:
    """
    Weighted average of every sample with its neighbours.

    Near the domain edges, and next to undefined (nan) samples, the kernel
    is truncated and renormalized over the samples that exist, so the
    curve is not pulled toward zero there.

    Args:
        values: Sample values (nan = undefined)
        delta_x: Sample spacing
        standard_deviation: Kernel sigma, in x units
        cutoff: Truncate at +/- cutoff standard deviations

    Returns:
        Smoothed values; samples with no defined neighbour stay nan
    """
    values = np.asarray(values, dtype=np.float64)
    kernel = gaussian_kernel(delta_x, standard_deviation, cutoff)

    defined = np.isfinite(values)
    filled = np.where(defined, values, 0.0)

    weighted = convolve1d(filled, kernel, mode='constant', cval=0.0)
    total_weight = convolve1d(defined.astype(np.float64), kernel, mode='constant', cval=0.0)

    with np.errstate(invalid='ignore', divide='ignore'):
        smoothed = weighted / total_weight

    smoothed[total_weight <= 0] = np.nan
    return smoothed


def roughness(values: np.ndarray, delta_x: float) -> float:
    """
    Largest second-derivative magnitude over the defined samples.

    Args:
        values: Sample values
        delta_x: Sample spacing

    Returns:
        max |y''|, or nan if nothing is defined
    """
    values = np.asarray(values, dtype=np.float64)
    second = np.gradient(np.gradient(values, delta_x), delta_x)
    if not np.any(np.isfinite(second)):
        return np.nan
    return float(np.nanmax(np.abs(second)))
