"""
Interactive curves.

InteractiveCurve is the curve the user deforms. It is responsible for:

  - Applying the response algorithm of the current manipulation mode to a
    drag step.
  - Gaussian smoothing.
  - Saving, undoing and resetting the points.

save() opens a gesture: until any other mutation happens, width-based
modes, tilt and shift work from the values captured by that save, so
repeated drag steps of one gesture replace each other instead of piling
up. Outside a gesture a drag step works from the current values. undo()
returns the curve to how it looked at the last save. Every public mutation
fires exactly one change notification.
"""

import logging
import numpy as np
from typing import Callable, Optional, Sequence, Tuple

from calcgraph.config import CalcgraphConfig
from calcgraph.curve import Curve, interpolate_points
from calcgraph.numerics.manipulation import ManipulationMode, clamp_width, respond
from calcgraph.numerics.smoothing import gaussian_smooth
from calcgraph.point import PointType, decode_y

logger = logging.getLogger(__name__)



class InteractiveCurve(Curve):
    """
    A curve that can be deformed by drag gestures, smoothed and undone.

    Args:
        y: Initial sample values (defaults to y = 0 everywhere)
        config: Engine configuration (defaults to CALCGRAPH_CONFIG)
    """

    def __init__(
        self,
        y: Optional[Sequence[float]] = None,
        config: Optional[CalcgraphConfig] = None
    ):
        super().__init__(y=y, config=config)
        self._was_manipulated = False
        self._gesture_baseline: Optional[np.ndarray] = None

    @property
    def was_manipulated(self) -> bool:
        return self._was_manipulated

    @property
    def history_depth(self) -> int:
        return self._history.depth

    @property
    def in_gesture(self) -> bool:
        return self._gesture_baseline is not None

    def baseline(self) -> np.ndarray:
        """Values a drag step works from: the open gesture's save, else the current values."""
        if self._gesture_baseline is None:
            return self._y.copy()
        return self._gesture_baseline

    # ------------------------------------------------------------------
    # Manipulation

    def manipulate(
        self,
        mode: ManipulationMode,
        x: float,
        y: float,
        width: Optional[float] = None,
        previous_position: Optional[Tuple[float, float]] = None,
        earlier_position: Optional[Tuple[float, float]] = None
    ) -> None:
        """
        Apply one drag step.

        Args:
            mode: Manipulation mode (a ManipulationMode or its value string)
            x: Pointer x; positions outside the domain act on the nearest edge
            y: Pointer y
            width: Manipulation width for width-based modes; None selects the
                default, out-of-range widths are clamped
            previous_position: Previous pointer (x, y) of the same gesture,
                used by FREEFORM to fill the samples in between
            earlier_position: Pointer (x, y) before previous_position, used by
                FREEFORM to round off the turn at previous_position
        """
        mode = ManipulationMode(mode)
        settings = self._config.manipulation

        clamped = clamp_width(width, settings)
        if mode.uses_width and width is not None and clamped != width:
            logger.debug("Clamped manipulation width %r to %r", width, clamped)

        baseline = self.baseline()
        new_y = respond(
            mode, self._x, baseline, self._y, x, y, clamped, settings,
            previous_position=previous_position,
            earlier_position=earlier_position,
        )

        # only samples that had a value may end up with one
        defined = np.isfinite(baseline) & np.isfinite(self._y)
        assert np.all(np.isfinite(new_y[defined])), f"{mode.value} produced non-finite values"

        logger.debug("%s at (%.4g, %.4g), width=%.4g", mode.value, x, y, clamped)
        self._was_manipulated = True
        self._commit(new_y, ends_gesture=False)

    def apply_function(
        self,
        function: Callable[[np.ndarray], np.ndarray],
        x_positions: Optional[Sequence[float]] = None
    ) -> None:
        """
        Replace the curve with a function. Saves first, so undo() restores
        the previous curve.

        Args:
            function: Vectorized function of x
            x_positions: If given, the function is only evaluated at these
                positions and linearly interpolated in between, which gives a
                piecewise-linear curve with cusps at the positions
        """
        if x_positions is None:
            new_y = np.broadcast_to(np.asarray(function(self._x), dtype=np.float64), self._x.shape)
        else:
            xs = np.asarray(x_positions, dtype=np.float64)
            ys = np.broadcast_to(np.asarray(function(xs), dtype=np.float64), xs.shape)
            new_y = interpolate_points(zip(xs, ys), self._x)

        logger.debug("Applying function to %s", type(self).__name__)
        self.save()
        self._commit(new_y)

    # ------------------------------------------------------------------
    # Smoothing, undo, reset

    def smooth(self) -> None:
        """
        Smooth the whole curve with a Gaussian kernel.

        Works on the current values and saves them first, so undo() restores
        the unsmoothed curve.
        """
        cfg = self._config.smoothing
        new_y = gaussian_smooth(self._y, self._delta_x, cfg.standard_deviation, cfg.cutoff)
        logger.debug("Smoothing %s (sigma=%g)", type(self).__name__, cfg.standard_deviation)
        self.save()
        self._commit(new_y)

    def save(self) -> None:
        """
        Push the current {y, point_type} of every point onto its history and
        open a gesture based on those values.

        The oldest entry is dropped once max_undo entries are stored.
        """
        self._history.push(self._y, self._point_types)
        self._gesture_baseline = self._y.copy()
        self._gesture_baseline.flags.writeable = False

    def undo(self) -> None:
        """
        Restore every point to its most recently saved state.

        With an empty history the points fall back to their initial state.
        """
        saved = self._history.pop()
        if saved is None:
            logger.debug("Undo with empty history; restoring initial state")
            y, types = self._initial_y, self._initial_point_types
        else:
            y, types = saved
        self._commit(y, types)

    def erase(self) -> None:
        """Return every point to its initial state, keeping the history."""
        self._commit(self._initial_y, self._initial_point_types)

    def reset(self) -> None:
        """Restore every point to its initial state and clear the history."""
        self._history.clear()
        self._was_manipulated = False
        self._commit(self._initial_y, self._initial_point_types)

    # ------------------------------------------------------------------
    # State objects

    def apply_state(self, states: Sequence[dict]) -> None:
        """
        Restore current values from to_state() output.

        Raises:
            ValueError: if the point count or x grid does not match
        """
        if len(states) != len(self._points):
            raise ValueError(f"Expected {len(self._points)} point states, got {len(states)}")

        xs = np.array([state['x'] for state in states], dtype=np.float64)
        if not np.allclose(xs, self._x, rtol=0.0, atol=self._delta_x * 1e-6):
            raise ValueError("Point states do not match this curve's x grid")

        y = np.array([decode_y(state['y']) for state in states], dtype=np.float64)
        types = np.array(
            [PointType.from_label(state['pointType']) for state in states], dtype=np.int8
        )
        types[~np.isfinite(y)] = PointType.DISCONTINUOUS

        logger.debug("Restoring %s from %d point states", type(self).__name__, len(states))
        self._commit(y, types)

    def _commit(
        self,
        y: np.ndarray,
        point_types: Optional[np.ndarray] = None,
        ends_gesture: bool = True
    ) -> None:
        super()._commit(y, point_types)
        if ends_gesture:
            self._gesture_baseline = None
