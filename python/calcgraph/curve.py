"""
Discretized curves.

A Curve is a fixed number of evenly spaced sample points spanning a fixed
x-domain. Adjacent points are treated as infinitesimally close for the
derivative and integral computations, and together they cover every x-value
in the domain.

All point data lives in one arena of parallel numpy arrays owned by the
curve (x, y, classification, initial state, undo ring). SamplePoint objects
are views into that arena. The number of points and their x-coordinates never
change after construction.

Listeners registered with add_listener() are called synchronously, in
registration order, exactly once per logical update.
"""

import math
import numpy as np
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from calcgraph.config import CALCGRAPH_CONFIG, CalcgraphConfig
from calcgraph.history import SnapshotRing, readonly
from calcgraph.numerics.classification import classify_points
from calcgraph.point import PointType, SamplePoint


Listener = Callable[[], None]

# Relative tolerance for deciding that a query x sits exactly on a sample
_ON_SAMPLE_TOLERANCE = 1e-9


class Curve:
    """
    Base class for sampled curves.

    Args:
        y: Initial sample values (defaults to y = 0 everywhere)
        config: Engine configuration (defaults to CALCGRAPH_CONFIG)
    """

    def __init__(
        self,
        y: Optional[Sequence[float]] = None,
        config: Optional[CalcgraphConfig] = None
    ):
        self._config = config if config is not None else CALCGRAPH_CONFIG
        domain = self._config.domain

        self._x = np.linspace(domain.x_min, domain.x_max, domain.n_points)
        self._x.flags.writeable = False
        self._delta_x = domain.delta_x

        if y is None:
            values = np.zeros(domain.n_points)
        else:
            values = np.array(y, dtype=np.float64)
            if values.shape != self._x.shape:
                raise ValueError(
                    f"Expected {domain.n_points} values, got shape {values.shape}"
                )

        self._y = values
        self._point_types = self._classify(values)
        self._snapshot_initial()

        self._history = SnapshotRing(self._config.history.max_undo, domain.n_points)

        self._listeners: List[Listener] = []
        self._notifying = False

        self._points = tuple(SamplePoint(self, i) for i in range(domain.n_points))

    # ------------------------------------------------------------------
    # Construction helpers

    @classmethod
    def from_function(
        cls,
        function: Callable[[np.ndarray], np.ndarray],
        config: Optional[CalcgraphConfig] = None
    ):
        """
        Build a curve by evaluating a vectorized function on the sample grid.

        Args:
            function: Maps an array of x values to y values (a scalar result
                is broadcast, so ``lambda x: 0`` works)
            config: Engine configuration
        """
        cfg = config if config is not None else CALCGRAPH_CONFIG
        domain = cfg.domain
        x = np.linspace(domain.x_min, domain.x_max, domain.n_points)
        y = np.broadcast_to(np.asarray(function(x), dtype=np.float64), x.shape)
        return cls(y=y, config=cfg)

    @classmethod
    def from_points(
        cls,
        points: Iterable[Tuple[float, float]],
        config: Optional[CalcgraphConfig] = None
    ):
        """
        Build a curve by linear interpolation between sparse (x, y) points.

        Points are sorted by x and duplicate x values are dropped (first one
        wins). If the points do not reach a domain edge, a point with y = 0 is
        added at that edge.

        Args:
            points: e.g. [(0, 0), (3, 3), (5, 3), (10, 0)]
            config: Engine configuration
        """
        cfg = config if config is not None else CALCGRAPH_CONFIG
        domain = cfg.domain
        x = np.linspace(domain.x_min, domain.x_max, domain.n_points)
        return cls(y=interpolate_points(points, x), config=cfg)

    # ------------------------------------------------------------------
    # Read-only surface

    @property
    def config(self) -> CalcgraphConfig:
        return self._config

    @property
    def x(self) -> np.ndarray:
        return self._x

    @property
    def y(self) -> np.ndarray:
        return readonly(self._y)

    @property
    def point_types(self) -> np.ndarray:
        return readonly(self._point_types)

    @property
    def points(self) -> Tuple[SamplePoint, ...]:
        return self._points

    @property
    def x_range(self) -> Tuple[float, float]:
        return float(self._x[0]), float(self._x[-1])

    @property
    def delta_x(self) -> float:
        return self._delta_x

    @property
    def cusps(self) -> List[SamplePoint]:
        return [self._points[i] for i in np.flatnonzero(self._point_types == PointType.CUSP)]

    @property
    def discontinuities(self) -> List[SamplePoint]:
        return [self._points[i] for i in np.flatnonzero(self._point_types == PointType.DISCONTINUOUS)]

    def __len__(self):
        return len(self._points)

    def __iter__(self):
        return iter(self._points)

    def __getitem__(self, index):
        return self._points[index]

    def contains(self, x: float) -> bool:
        x_min, x_max = self.x_range
        return math.isfinite(x) and x_min <= x <= x_max

    def closest_index_at(self, x: float, clamp: bool = False) -> Optional[int]:
        """
        Index of the sample nearest to x; ties go to the lower x.

        Args:
            x: Query position
            clamp: Clamp out-of-domain queries to the nearest edge instead of
                returning None

        Returns:
            Sample index, or None when x is outside the domain and clamp is False
        """
        if not math.isfinite(x):
            return None
        if not self.contains(x):
            if not clamp:
                return None
            x = min(max(x, self._x[0]), self._x[-1])

        position = (x - self._x[0]) / self._delta_x
        index = math.ceil(position - 0.5)
        return min(max(index, 0), len(self._points) - 1)

    def closest_point_at(self, x: float) -> Optional[SamplePoint]:
        """Sample point nearest to x, or None when x is outside the domain."""
        index = self.closest_index_at(x)
        return None if index is None else self._points[index]

    def value_at(self, x: float) -> float:
        """
        Value of the curve at x.

        Exact samples return their value; anything in between is linearly
        interpolated from the two bracketing samples.

        Returns:
            The value, or nan when x is outside the domain or a bracketing
            sample is undefined
        """
        if not self.contains(x):
            return math.nan

        position = (x - self._x[0]) / self._delta_x
        lower = min(int(math.floor(position)), len(self._points) - 1)
        fraction = position - lower

        if fraction <= _ON_SAMPLE_TOLERANCE:
            return float(self._y[lower])
        if fraction >= 1 - _ON_SAMPLE_TOLERANCE:
            return float(self._y[lower + 1])

        y0 = self._y[lower]
        y1 = self._y[lower + 1]
        if not (np.isfinite(y0) and np.isfinite(y1)):
            return math.nan
        return float(y0 + fraction * (y1 - y0))

    # ------------------------------------------------------------------
    # Change notification

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            raise ValueError("Listener is not registered on this curve") from None

    def has_listener(self, listener: Listener) -> bool:
        return listener in self._listeners

    def _notify(self) -> None:
        self._notifying = True
        try:
            # copy so listeners may unregister themselves
            for listener in list(self._listeners):
                listener()
        finally:
            self._notifying = False

    # ------------------------------------------------------------------
    # Mutation (subclasses only)

    def _snapshot_initial(self) -> None:
        # Initial state, for resetting purposes
        self._initial_y = self._y.copy()
        self._initial_point_types = self._point_types.copy()
        self._initial_y.flags.writeable = False
        self._initial_point_types.flags.writeable = False

    def _classify(self, y: np.ndarray) -> np.ndarray:
        cfg = self._config.classification
        return classify_points(self._x, y, cfg.cusp_angle_threshold, cfg.slope_threshold)

    def _commit(self, y: np.ndarray, point_types: Optional[np.ndarray] = None) -> None:
        """
        Replace all values in one batch and notify listeners once.

        Classification is recomputed from the new values unless explicit
        point types are given (undo, reset and state restoration).
        """
        if self._notifying:
            raise RuntimeError(
                f"{type(self).__name__} was mutated from inside one of its own listeners"
            )

        y = np.asarray(y, dtype=np.float64)
        if y.shape != self._y.shape:
            raise ValueError(f"Expected {len(self._y)} values, got shape {y.shape}")

        self._y[:] = y
        self._point_types[:] = self._classify(self._y) if point_types is None else point_types
        self._notify()

    # ------------------------------------------------------------------
    # State objects

    def to_state(self) -> List[dict]:
        """Serializable state of every point (histories excluded)."""
        return [point.to_state() for point in self._points]

    def __repr__(self):
        x_min, x_max = self.x_range
        return f"{type(self).__name__}(x_range=[{x_min}, {x_max}], n_points={len(self)})"


def interpolate_points(
    points: Iterable[Tuple[float, float]],
    x: np.ndarray
) -> np.ndarray:
    """
    Linearly interpolate sparse (x, y) points onto a sample grid.

    Args:
        points: Sparse points, any order; duplicate x values keep the first
        x: Sample grid

    Returns:
        Interpolated values on the grid
    """
    pairs = np.array(list(points), dtype=np.float64).reshape(-1, 2)
    if len(pairs) == 0:
        return np.zeros_like(x)

    order = np.argsort(pairs[:, 0], kind='stable')
    pairs = pairs[order]
    _, first = np.unique(pairs[:, 0], return_index=True)
    pairs = pairs[first]

    # ensure that there are points at both domain edges
    if pairs[0, 0] > x[0]:
        pairs = np.vstack([[x[0], 0.0], pairs])
    if pairs[-1, 0] < x[-1]:
        pairs = np.vstack([pairs, [x[-1], 0.0]])

    return np.interp(x, pairs[:, 0], pairs[:, 1])
