"""
Grapher model.

Owns the interactive curves and the curves derived from the original curve,
and keeps them consistent. Every mutating entry point forwards to the curve
being transformed and, when that is the original curve, pulls the derived
curves in dependency order:

    original -> derivative -> second derivative
             -> integral

By the time any entry point returns, the whole chain has been recomputed and
every curve has fired its own change notification.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from calcgraph.config import CALCGRAPH_CONFIG, CalcgraphConfig
from calcgraph.derived import DerivativeCurve, IntegralCurve
from calcgraph.interactive import InteractiveCurve
from calcgraph.numerics.manipulation import ManipulationMode, clamp_width
from calcgraph.presets import PresetFunction, preset_functions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurveReadout:
    """Values of every curve at one x position (nan where undefined)."""

    x: float
    integral: float
    original: float
    derivative: float
    second_derivative: float


class GrapherModel:
    """
    Top-level curve model.

    Args:
        config: Engine configuration (defaults to CALCGRAPH_CONFIG)
    """

    def __init__(self, config: Optional[CalcgraphConfig] = None):
        self.config = config if config is not None else CALCGRAPH_CONFIG

        self.original_curve = InteractiveCurve(config=self.config)
        self.predict_curve = InteractiveCurve(config=self.config)

        self.derivative_curve = DerivativeCurve(self.original_curve)
        self.second_derivative_curve = DerivativeCurve(self.derivative_curve)
        self.integral_curve = IntegralCurve(self.original_curve)

        self.presets: Tuple[PresetFunction, ...] = preset_functions(self.config.domain)

        self.predict_mode_enabled = False
        self.mode = ManipulationMode.HILL
        self._width = self.config.manipulation.width_default
        self._preset_index: Optional[int] = None

    # ------------------------------------------------------------------
    # Settings

    @property
    def width(self) -> float:
        return self._width

    @width.setter
    def width(self, value: float) -> None:
        self._width = clamp_width(value, self.config.manipulation)

    @property
    def curve_to_transform(self) -> InteractiveCurve:
        return self.predict_curve if self.predict_mode_enabled else self.original_curve

    @property
    def derived_curves(self) -> tuple:
        """Derived curves in the order they are recomputed."""
        return self.derivative_curve, self.second_derivative_curve, self.integral_curve

    # ------------------------------------------------------------------
    # Entry points

    def begin_gesture(self) -> None:
        """Save the curve being transformed; call once when a drag starts."""
        self.curve_to_transform.save()

    def save(self) -> None:
        self.curve_to_transform.save()

    def manipulate(
        self,
        x: float,
        y: float,
        mode: Optional[ManipulationMode] = None,
        width: Optional[float] = None,
        previous_position: Optional[Tuple[float, float]] = None,
        earlier_position: Optional[Tuple[float, float]] = None
    ) -> None:
        """
        Apply one drag step to the curve being transformed.

        Args:
            x, y: Pointer position
            mode: Overrides the current mode for this step
            width: Overrides the current width for this step
            previous_position: Previous pointer position of the gesture
            earlier_position: Pointer position before previous_position
        """
        curve = self.curve_to_transform
        curve.manipulate(
            self.mode if mode is None else mode,
            x, y,
            self._width if width is None else width,
            previous_position=previous_position,
            earlier_position=earlier_position,
        )
        self._propagate(curve)

    def smooth(self) -> None:
        """Smooth the curve being transformed; undoable."""
        curve = self.curve_to_transform
        curve.smooth()
        self._propagate(curve)

    def undo(self) -> None:
        curve = self.curve_to_transform
        curve.undo()
        self._propagate(curve)

    def erase(self) -> None:
        """Flatten the curve being transformed back to its initial state; undoable."""
        curve = self.curve_to_transform
        curve.save()
        curve.erase()
        self._propagate(curve)

    def apply_preset(self, index: int) -> PresetFunction:
        """
        Load a preset function into the curve being transformed; undoable.

        The index wraps around the list of presets.
        """
        index = index % len(self.presets)
        preset = self.presets[index]

        curve = self.curve_to_transform
        curve.apply_function(preset.function, preset.x_positions)
        self._preset_index = index

        logger.debug("Applied preset %d (%s)", index, preset.name)
        self._propagate(curve)
        return preset

    def cycle_preset(self, step: int = 1) -> PresetFunction:
        """Apply the next (or previous, for negative step) preset."""
        if self._preset_index is None:
            index = 0 if step > 0 else step
        else:
            index = self._preset_index + step
        return self.apply_preset(index)

    def reset(self) -> None:
        """Reset both interactive curves and all settings."""
        self.predict_mode_enabled = False
        self.mode = ManipulationMode.HILL
        self._width = self.config.manipulation.width_default
        self._preset_index = None

        self.predict_curve.reset()
        self.original_curve.reset()
        self._propagate(self.original_curve)

    def _propagate(self, curve: InteractiveCurve) -> None:
        if curve is not self.original_curve:
            return
        for derived in self.derived_curves:
            derived.update()

    # ------------------------------------------------------------------
    # Readouts

    def readout(self, x: float) -> CurveReadout:
        """Values of all curves at x."""
        return CurveReadout(
            x=x,
            integral=self.integral_curve.value_at(x),
            original=self.original_curve.value_at(x),
            derivative=self.derivative_curve.value_at(x),
            second_derivative=self.second_derivative_curve.value_at(x),
        )

    def tangent_at(self, x: float) -> Tuple[float, float]:
        """(y, slope) of the tangent line to the original curve at x."""
        return self.original_curve.value_at(x), self.derivative_curve.value_at(x)

    def tangent_line(self, x: float, at: float) -> float:
        """Height of the tangent line through x, evaluated at another position."""
        y, slope = self.tangent_at(x)
        if not (math.isfinite(y) and math.isfinite(slope)):
            return math.nan
        return y + slope * (at - x)

    def area_under_curve(self, x: float) -> float:
        """Net signed area under the original curve from the reference x to x."""
        return self.integral_curve.value_at(x)
