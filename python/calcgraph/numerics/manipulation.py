"""
Curve manipulation response algorithms.

Pure functions that turn a drag gesture (position + width) into new sample
values. Width-based modes build a shape profile around the sample closest to
the drag position and add it, scaled, to the baseline values:

    y = baseline + (drag_y - baseline[center]) * profile

so the curve always passes through the drag position and keeps its shape
away from the affected region. Undefined baseline samples stay undefined;
when the center itself is undefined the nearest defined value stands in for
baseline[center]. Profiles are computed from integer sample
offsets, so a shape centred mid-domain is exactly mirror-symmetric.
"""

import enum
import math
import numpy as np
from typing import Optional, Tuple

from calcgraph.config import ManipulationConfig


class ManipulationMode(enum.Enum):
    """The ways a drag can deform an interactive curve."""

    HILL = 'hill'
    TRIANGLE = 'triangle'
    PEDESTAL = 'pedestal'
    PARABOLA = 'parabola'
    SINUSOID = 'sinusoid'
    FREEFORM = 'freeform'
    TILT = 'tilt'
    SHIFT = 'shift'

    @property
    def uses_width(self) -> bool:
        return self in WIDTH_MODES


WIDTH_MODES = frozenset({
    ManipulationMode.HILL,
    ManipulationMode.TRIANGLE,
    ManipulationMode.PEDESTAL,
    ManipulationMode.PARABOLA,
    ManipulationMode.SINUSOID,
})


def clamp_width(width: Optional[float], settings: ManipulationConfig) -> float:
    """
    Clamp a manipulation width into the configured range.

    None selects the default width; zero, negative or non-finite widths fall
    back to the minimum.
    """
    if width is None:
        return settings.width_default
    if not math.isfinite(width) or width <= 0:
        return settings.width_min
    return min(max(width, settings.width_min), settings.width_max)


def center_index(x: np.ndarray, drag_x: float) -> int:
    """Index of the sample closest to drag_x, clamped into the domain (ties go low)."""
    delta_x = x[1] - x[0]
    drag_x = min(max(drag_x, x[0]), x[-1])
    index = math.ceil((drag_x - x[0]) / delta_x - 0.5)
    return min(max(index, 0), len(x) - 1)


def sample_offsets(n: int, center: int, delta_x: float) -> np.ndarray:
    """Signed x distance of every sample from the center sample."""
    return (np.arange(n) - center) * delta_x


def reference_value(baseline: np.ndarray, center: int) -> float:
    """
    Baseline value the drag amplitude is measured from.

    Undefined centers fall back to the nearest defined sample (ties go low),
    and a curve with no defined samples at all uses 0.
    """
    if np.isfinite(baseline[center]):
        return float(baseline[center])
    defined = np.flatnonzero(np.isfinite(baseline))
    if len(defined) == 0:
        return 0.0
    nearest = defined[np.argmin(np.abs(defined - center))]
    return float(baseline[nearest])


def add_where_defined(baseline: np.ndarray, delta: np.ndarray) -> np.ndarray:
    """baseline + delta, leaving undefined baseline samples untouched."""
    return np.where(np.isfinite(baseline), baseline + delta, baseline)


# ----------------------------------------------------------------------
# Shape profiles (1 at the center, 0 or decaying to 0 away from it)

def hill_profile(offsets: np.ndarray, width: float) -> np.ndarray:
    """Gaussian bell; width sets the spread (value ~e^-8 at +/- width)."""
    spread = width / (2 * math.sqrt(2))
    return np.exp(-(offsets / spread) ** 2)


def triangle_profile(offsets: np.ndarray, width: float, delta_x: float) -> np.ndarray:
    """
    Piecewise-linear tent with base corners at +/- width / 2.

    The half-width is rounded to a whole number of samples so the apex and
    both corners sit on samples and classify as cusps.
    """
    half_samples = max(1, int(round(width / 2 / delta_x)))
    half_width = half_samples * delta_x
    return np.clip(1 - np.abs(offsets) / half_width, 0.0, None)


def pedestal_profile(offsets: np.ndarray, width: float, edge_slope_factor: float) -> np.ndarray:
    """
    Flat plateau of the given width with rounded edges.

    Edges fall off as exp(-(d / edge_slope_factor)^4), which keeps the
    derivative at both edges symmetric.
    """
    half_width = width / 2
    beyond = np.maximum(np.abs(offsets) - half_width, 0.0)
    return np.exp(-(beyond / edge_slope_factor) ** 4)


def parabola_profile(offsets: np.ndarray, width: float) -> np.ndarray:
    """
    Parabolic cap (1 - u^2) squared on |u| < 1, u = offset / (width / 2).

    The profile is a quartic in u: squaring the parabola 1 - u^2 keeps
    the rounded top and makes the first derivative vanish at the edges of
    the region, so the bump joins the surrounding curve without a corner.
    """
    u = offsets / (width / 2)
    return np.where(np.abs(u) < 1, (1 - u ** 2) ** 2, 0.0)


def sinusoid_profile(offsets: np.ndarray, width: float, half_waves: int) -> np.ndarray:
    """
    Cosine ripple confined to +/- width / 2.

    An odd number of half wavelengths fits in the width, so the ripple is
    zero at both edges and matches the surrounding curve.
    """
    wavelength = 2 * width / half_waves
    inside = np.abs(offsets) < width / 2
    return np.where(inside, np.cos(2 * np.pi * offsets / wavelength), 0.0)


# ----------------------------------------------------------------------
# Whole-curve transforms

def tilt(
    x: np.ndarray,
    baseline: np.ndarray,
    center: int,
    drag_y: float,
    max_tilt: float
) -> np.ndarray:
    """
    Tilt the curve about the middle of the domain so it passes through the
    drag position, with the added slope clamped to +/- max_tilt degrees.
    """
    pivot = center_index(x, (x[0] + x[-1]) / 2)
    run = x[center] - x[pivot]
    if run == 0:
        return baseline.copy()

    max_slope = math.tan(math.radians(max_tilt))
    slope = (drag_y - reference_value(baseline, center)) / run
    slope = min(max(slope, -max_slope), max_slope)

    return add_where_defined(baseline, slope * (x - x[pivot]))


def shift(baseline: np.ndarray, center: int, drag_y: float) -> np.ndarray:
    """Uniform vertical offset so the curve passes through the drag position."""
    return add_where_defined(baseline, drag_y - reference_value(baseline, center))


def freeform(
    x: np.ndarray,
    current: np.ndarray,
    center: int,
    drag_y: float,
    previous_position: Optional[Tuple[float, float]] = None,
    earlier_position: Optional[Tuple[float, float]] = None
) -> np.ndarray:
    """
    Move the sample under the pointer to the pointer's y.

    When the previous pointer position of the same gesture is given, every
    sample between the two positions is linearly interpolated so fast drags
    leave no gaps. When the position before that is given too, the corner
    the stroke makes at the previous position is rounded off with a
    quadratic Bezier curve.
    """
    y = current.copy()
    y[center] = drag_y

    if previous_position is None:
        return y

    previous_x, previous_y = previous_position
    previous = center_index(x, previous_x)
    low, high = sorted((previous, center))
    if high - low > 1:
        # ends included so that both anchor values are honoured
        y_low, y_high = (previous_y, drag_y) if previous == low else (drag_y, previous_y)
        y[low:high + 1] = np.linspace(y_low, y_high, high - low + 1)

    if earlier_position is not None:
        earlier = center_index(x, earlier_position[0])
        round_corner(x, y, center, previous, earlier, previous_y)

    return y


def round_corner(
    x: np.ndarray,
    y: np.ndarray,
    center: int,
    previous: int,
    earlier: int,
    previous_y: float
) -> None:
    """
    Replace the samples around the previous pointer sample with a quadratic
    Bezier curve, in place.

    The end points sit halfway towards the current and the earlier pointer
    samples and the control point is the previous pointer position. Nothing
    changes unless the previous sample lies strictly between the other two.

    Args:
        x: Sample positions
        y: Sample values, modified in place
        center, previous, earlier: Sample indices of the current, previous
            and earlier pointer positions
        previous_y: Pointer y at the previous position
    """
    if (center - previous) * (earlier - previous) >= 0:
        return

    start = center_index(x, (x[center] + x[previous]) / 2)
    end = center_index(x, (x[earlier] + x[previous]) / 2)
    if (start - previous) * (end - previous) >= 0:
        return
    if not (np.isfinite(y[start]) and np.isfinite(y[end])):
        return

    low, high = sorted((start, end))
    inner = np.arange(low + 1, high)

    # solve x(t) = x[inner] for t; x(t) is monotone on [0, 1]
    p0, p1, p2 = x[start], x[previous], x[end]
    a = p0 - 2 * p1 + p2
    b = 2 * (p1 - p0)
    c = p0 - x[inner]
    q = -0.5 * (b + math.copysign(1.0, b) * np.sqrt(np.maximum(b * b - 4 * a * c, 0.0)))
    t = np.clip(c / q, 0.0, 1.0)

    y[inner] = (1 - t) ** 2 * y[start] + 2 * (1 - t) * t * previous_y + t ** 2 * y[end]


# ----------------------------------------------------------------------
# Dispatch

def respond(
    mode: ManipulationMode,
    x: np.ndarray,
    baseline: np.ndarray,
    current: np.ndarray,
    drag_x: float,
    drag_y: float,
    width: float,
    settings: ManipulationConfig,
    previous_position: Optional[Tuple[float, float]] = None,
    earlier_position: Optional[Tuple[float, float]] = None
) -> np.ndarray:
    """
    Compute the new sample values for one drag step.

    Args:
        mode: Manipulation mode
        x: Sample positions (evenly spaced)
        baseline: Values the drag step works from
        current: Current values (only used by FREEFORM)
        drag_x: Pointer x (clamped into the domain)
        drag_y: Pointer y
        width: Manipulation width, already clamped
        settings: Manipulation configuration
        previous_position: Previous pointer (x, y) of this gesture, FREEFORM only
        earlier_position: Pointer (x, y) before previous_position, FREEFORM only

    Returns:
        New sample values (a fresh array). Undefined baseline samples stay
        undefined, except the one FREEFORM writes under the pointer.
    """
    if not (math.isfinite(drag_x) and math.isfinite(drag_y)):
        raise ValueError(f"Drag position must be finite, got ({drag_x}, {drag_y})")

    x = np.asarray(x, dtype=np.float64)
    baseline = np.asarray(baseline, dtype=np.float64)
    center = center_index(x, drag_x)
    delta_x = x[1] - x[0]

    if mode is ManipulationMode.FREEFORM:
        return freeform(
            x, np.asarray(current, dtype=np.float64), center, drag_y,
            previous_position, earlier_position,
        )

    elif mode is ManipulationMode.TILT:
        return tilt(x, baseline, center, drag_y, settings.max_tilt)

    elif mode is ManipulationMode.SHIFT:
        return shift(baseline, center, drag_y)

    offsets = sample_offsets(len(x), center, delta_x)

    if mode is ManipulationMode.HILL:
        profile = hill_profile(offsets, width)
    elif mode is ManipulationMode.TRIANGLE:
        profile = triangle_profile(offsets, width, delta_x)
    elif mode is ManipulationMode.PEDESTAL:
        profile = pedestal_profile(offsets, width, settings.edge_slope_factor)
    elif mode is ManipulationMode.PARABOLA:
        profile = parabola_profile(offsets, width)
    elif mode is ManipulationMode.SINUSOID:
        profile = sinusoid_profile(offsets, width, settings.sine_half_waves)
    else:
        raise ValueError(f"Unknown manipulation mode: {mode}")

    amplitude = drag_y - reference_value(baseline, center)
    return add_where_defined(baseline, amplitude * profile)
