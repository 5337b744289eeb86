"""
Shared curves with known calculus.

Every curve here has a closed-form derivative and integral, so the sampled
results can be checked against exact values or against scipy.
"""
import numpy as np
import pytest
from dataclasses import replace


@pytest.fixture
def make_config():
    """Factory for [x_min, x_max] domains with a given sample count."""
    def _make(n_points, x_min=0.0, x_max=10.0):
        from calcgraph.config import CALCGRAPH_CONFIG, DomainConfig
        domain = DomainConfig(x_min=x_min, x_max=x_max, n_points=n_points)
        return replace(CALCGRAPH_CONFIG, domain=domain)
    return _make


@pytest.fixture
def config(make_config):
    """Domain [0, 10] with 1001 samples."""
    return make_config(1001)


@pytest.fixture
def sine(config):
    """sin(x): derivative cos(x), integral 1 - cos(x)."""
    from calcgraph.interactive import InteractiveCurve
    return InteractiveCurve.from_function(np.sin, config=config)


@pytest.fixture
def cosine(config):
    """cos(x): derivative -sin(x), integral sin(x)."""
    from calcgraph.interactive import InteractiveCurve
    return InteractiveCurve.from_function(np.cos, config=config)


@pytest.fixture
def cubic(config):
    """x^3 / 30 - x: second derivative x / 5."""
    from calcgraph.interactive import InteractiveCurve
    return InteractiveCurve.from_function(lambda x: x ** 3 / 30 - x, config=config)


@pytest.fixture
def gaussian(config):
    """Bell at x = 5: integral over the domain ~ sqrt(pi)."""
    from calcgraph.interactive import InteractiveCurve
    return InteractiveCurve.from_function(lambda x: np.exp(-(x - 5) ** 2), config=config)
