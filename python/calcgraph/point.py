"""
Sample points of a discretized curve.

A SamplePoint is a view onto one slot of its curve's point arena: the curve
stores x, y, classification and undo history for all points in parallel
numpy arrays, and each SamplePoint reads its own index out of them.
SamplePoints are created once with their curve and never resized or
destroyed.
"""

import enum
import math
from typing import NamedTuple, Optional, Tuple


class PointType(enum.IntEnum):
    """Classification of a sample point."""

    SMOOTH = 0
    CUSP = 1
    DISCONTINUOUS = 2

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def from_label(cls, label: str) -> 'PointType':
        try:
            return cls[label.upper()]
        except KeyError:
            raise ValueError(f"Unknown point type: {label}") from None


class PointState(NamedTuple):
    """Immutable {y, classification} snapshot of a point."""

    y: float
    point_type: PointType


class SamplePoint:
    """
    One fixed-x, mutable-y element of a curve.

    Values are read through the owning curve; mutation only happens through
    the curve's own operations.
    """

    __slots__ = ('_curve', '_index')

    def __init__(self, curve, index: int):
        self._curve = curve
        self._index = index

    @property
    def index(self) -> int:
        return self._index

    @property
    def x(self) -> float:
        return float(self._curve._x[self._index])

    @property
    def y(self) -> float:
        return float(self._curve._y[self._index])

    @property
    def point_type(self) -> PointType:
        return PointType(int(self._curve._point_types[self._index]))

    @property
    def state(self) -> PointState:
        return PointState(self.y, self.point_type)

    @property
    def initial_state(self) -> PointState:
        curve = self._curve
        return PointState(
            float(curve._initial_y[self._index]),
            PointType(int(curve._initial_point_types[self._index])),
        )

    @property
    def saved_states(self) -> Tuple[PointState, ...]:
        """Saved states, oldest first."""
        return tuple(
            PointState(float(y), PointType(int(t)))
            for y, t in self._curve._history.column(self._index)
        )

    @property
    def history_depth(self) -> int:
        return self._curve._history.depth

    @property
    def last_saved_state(self) -> PointState:
        """Most recently saved state, or the initial state if nothing was saved."""
        saved = self._curve._history.peek()
        if saved is None:
            return self.initial_state
        y, types = saved
        return PointState(float(y[self._index]), PointType(int(types[self._index])))

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.y)

    @property
    def is_smooth(self) -> bool:
        return self.point_type == PointType.SMOOTH

    @property
    def is_cusp(self) -> bool:
        return self.point_type == PointType.CUSP

    @property
    def is_discontinuous(self) -> bool:
        return self.point_type == PointType.DISCONTINUOUS

    def slope_to(self, other: 'SamplePoint') -> float:
        """Slope of the secant line to another point (nan if undefined)."""
        run = other.x - self.x
        if run == 0:
            raise ValueError("Cannot compute slope between points with the same x")
        return (other.y - self.y) / run

    def to_state(self) -> dict:
        """Serializable state. Saved history is intentionally excluded."""
        initial = self.initial_state
        return {
            'x': self.x,
            'y': _encode(self.y),
            'pointType': self.point_type.label,
            'initialY': _encode(initial.y),
            'initialPointType': initial.point_type.label,
        }

    def __eq__(self, other):
        if not isinstance(other, SamplePoint):
            return NotImplemented
        return self._curve is other._curve and self._index == other._index

    def __hash__(self):
        return hash((id(self._curve), self._index))

    def __repr__(self):
        return f"SamplePoint(x={self.x}, y={self.y}, point_type={self.point_type.label})"


def _encode(value: float) -> Optional[float]:
    # nan is not valid JSON; undefined values serialize as None
    return value if math.isfinite(value) else None


def decode_y(value: Optional[float]) -> float:
    return math.nan if value is None else float(value)
