"""
Shared curves and configurations for the unit tests.
"""
import numpy as np
import pytest
from dataclasses import replace


@pytest.fixture
def small_config():
    """Domain [0, 10] with 401 samples (dx = 0.025, integer x on samples)."""
    from calcgraph.config import CALCGRAPH_CONFIG, DomainConfig
    return replace(CALCGRAPH_CONFIG, domain=DomainConfig(x_min=0.0, x_max=10.0, n_points=401))


@pytest.fixture
def flat_curve():
    """Default-domain interactive curve, y = 0 everywhere."""
    from calcgraph.interactive import InteractiveCurve
    return InteractiveCurve()


@pytest.fixture
def small_flat_curve(small_config):
    from calcgraph.interactive import InteractiveCurve
    return InteractiveCurve(config=small_config)


@pytest.fixture
def sine_curve(small_config):
    """sin(x) on [0, 10]: smooth everywhere."""
    from calcgraph.interactive import InteractiveCurve
    return InteractiveCurve.from_function(np.sin, config=small_config)


@pytest.fixture
def notifications():
    """Listener factory that counts calls per curve."""
    class Counter:
        def __init__(self):
            self.calls = []

        def listen(self, curve, name=None):
            curve.add_listener(lambda: self.calls.append(name or curve))

        def count(self, name=None):
            if name is None:
                return len(self.calls)
            return self.calls.count(name)

    return Counter()


@pytest.fixture
def model():
    from calcgraph.model import GrapherModel
    return GrapherModel()
