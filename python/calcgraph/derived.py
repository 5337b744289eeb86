"""
Derived curves.

A derived curve's values are a pure function of one upstream ("base") curve:
its derivative, second derivative or integral. Derived curves share the base
curve's domain and sampling, and never mutate the base curve.

Recomputation is pull-based: whoever mutates the base curve calls update()
on the derived curves afterwards, in dependency order (GrapherModel does
this). Each update() is one batched pass that ends with one change
notification of the derived curve.
"""

import logging
import numpy as np
from typing import Tuple

from calcgraph.curve import Curve
from calcgraph.numerics.calculus import differentiate, integrate_from
from calcgraph.numerics.classification import count_point_types
from calcgraph.point import PointType

logger = logging.getLogger(__name__)


class DerivedCurve(Curve):
    """
    Base class for curves computed from another curve.

    Args:
        base: The upstream curve
    """

    def __init__(self, base: Curve):
        self._base = base
        super().__init__(config=base.config)

        y, types = self._evaluate()
        self._y[:] = y
        self._point_types[:] = types
        self._snapshot_initial()

    @property
    def base(self) -> Curve:
        return self._base

    def update(self) -> None:
        """Recompute every sample from the current base curve and notify once."""
        y, types = self._evaluate()
        counts = count_point_types(types)
        logger.debug(
            "%s updated: %d cusps, %d discontinuous",
            type(self).__name__, counts[PointType.CUSP], counts[PointType.DISCONTINUOUS],
        )
        self._commit(y, types)

    def _evaluate(self) -> Tuple[np.ndarray, np.ndarray]:
        values, undefined = self._compute()
        types = self._classify(values)
        types[undefined] = PointType.DISCONTINUOUS
        return values, types

    def _compute(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return (values, undefined mask) computed from the base curve."""
        raise NotImplementedError


class DerivativeCurve(DerivedCurve):
    """
    Derivative of a base curve by centered finite differences.

    Cusps of the base curve, and discontinuities together with their
    neighbours, are undefined in the derivative.
    """

    def _compute(self):
        base = self._base
        return differentiate(base.x, base.y, base.point_types)


class SecondDerivativeCurve(DerivedCurve):
    """
    Second derivative of a base curve: a derivative of a derivative.

    Keeps its own first-derivative curve, so the propagation rules of
    DerivativeCurve apply twice.
    """

    def __init__(self, base: Curve):
        self._first = DerivativeCurve(base)
        super().__init__(base)

    @property
    def first_derivative(self) -> DerivativeCurve:
        return self._first

    def update(self) -> None:
        self._first.update()
        super().update()

    def _compute(self):
        first = self._first
        return differentiate(first.x, first.y, first.point_types)


class IntegralCurve(DerivedCurve):
    """
    Integral of a base curve by the trapezoidal rule.

    The integral is zero at the reference x (config.integration.reference_x,
    clamped into the domain) and accumulates outward in both directions.
    """

    @property
    def reference_index(self) -> int:
        return self.closest_index_at(self._config.integration.reference_x, clamp=True)

    def _compute(self):
        base = self._base
        return integrate_from(
            base.x, base.y, self.reference_index,
            max_gap_samples=self._config.integration.max_gap_samples,
        )
