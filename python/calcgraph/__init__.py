"""
Calcgraph: discretized curve engine for a live calculus grapher.

Draw a function by dragging on an interactive curve and read its derivative,
second derivative and integral, all recomputed after every change.

Usage:
    from calcgraph import GrapherModel, ManipulationMode

    model = GrapherModel()
    model.begin_gesture()
    model.manipulate(15, 5, mode=ManipulationMode.HILL, width=2)
    model.derivative_curve.value_at(15)   # ~0 at the top of the hill

    # Or use the curves directly:
    from calcgraph.interactive import InteractiveCurve
    from calcgraph.derived import DerivativeCurve, IntegralCurve
    from calcgraph.numerics.calculus import differentiate, integrate_from
"""
import logging

from calcgraph.config import CALCGRAPH_CONFIG, CalcgraphConfig
from calcgraph.point import PointState, PointType, SamplePoint
from calcgraph.curve import Curve
from calcgraph.interactive import InteractiveCurve
from calcgraph.derived import (
    DerivedCurve,
    DerivativeCurve,
    SecondDerivativeCurve,
    IntegralCurve,
)
from calcgraph.numerics.manipulation import ManipulationMode
from calcgraph.model import CurveReadout, GrapherModel
from calcgraph.presets import PRESET_FUNCTIONS, PresetFunction

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Configuration
    "CALCGRAPH_CONFIG",
    "CalcgraphConfig",
    # Points
    "PointState",
    "PointType",
    "SamplePoint",
    # Curves
    "Curve",
    "InteractiveCurve",
    "DerivedCurve",
    "DerivativeCurve",
    "SecondDerivativeCurve",
    "IntegralCurve",
    # Manipulation
    "ManipulationMode",
    # Model
    "CurveReadout",
    "GrapherModel",
    "PresetFunction",
    "PRESET_FUNCTIONS",
]
