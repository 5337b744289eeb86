"""
Preset functions.

A fixed set of functions that can be loaded into an interactive curve, either
sampled on every grid point or only at coarse x positions (giving a
piecewise-linear curve with a cusp at every position).
"""

import numpy as np
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from calcgraph.config import CALCGRAPH_CONFIG, DomainConfig

# Typical amplitude of a preset, in y units
TYPICAL_Y = 4.0


@dataclass(frozen=True)
class PresetFunction:
    """A named function with optional coarse sampling positions."""

    name: str
    function: Callable[[np.ndarray], np.ndarray]
    x_positions: Optional[Tuple[float, ...]] = None


def x_positions(spacing: float, domain: DomainConfig = CALCGRAPH_CONFIG.domain) -> Tuple[float, ...]:
    """Equally spaced x positions across the domain, starting at x_min."""
    count = int(round((domain.x_max - domain.x_min) / spacing)) + 1
    return tuple(float(domain.x_min + i * spacing) for i in range(count))


def math_functions(domain: DomainConfig = CALCGRAPH_CONFIG.domain) -> dict:
    """The vectorized preset functions for a domain, keyed by name."""
    width = domain.x_max - domain.x_min
    center = domain.center
    a = TYPICAL_Y

    return {
        'sine': lambda x: a * np.sin(2 * np.pi * 5 * x / width),
        'fast_sine': lambda x: a * np.sin(2 * np.pi * 20 * x / width),
        'chirp': lambda x: a * np.sin(2 * np.pi * 20 * x / width * np.sin((x - center) ** 2 / 10)),
        'quadratic_cosine': lambda x: a * np.cos((x - center) ** 2),
        'sawtooth': lambda x: np.mod((x - center) ** 2 / 10, a),
        'staircase': lambda x: a * np.floor(a / 2 * np.sin(2 * np.pi * 5 * x / width)),
    }


def preset_functions(domain: DomainConfig = CALCGRAPH_CONFIG.domain) -> Tuple[PresetFunction, ...]:
    """The ordered list of presets for a domain."""
    fns = math_functions(domain)
    return (
        PresetFunction('sine', fns['sine']),
        PresetFunction('sine_coarse', fns['sine'], x_positions(0.25, domain)),
        PresetFunction('fast_sine', fns['fast_sine']),
        PresetFunction('chirp', fns['chirp']),
        PresetFunction('quadratic_cosine', fns['quadratic_cosine']),
        PresetFunction('quadratic_cosine_coarse', fns['quadratic_cosine'], x_positions(1, domain)),
        PresetFunction('sawtooth', fns['sawtooth']),
        PresetFunction('sawtooth_coarse', fns['sawtooth'], x_positions(1, domain)),
        PresetFunction('staircase', fns['staircase']),
        PresetFunction('staircase_coarse', fns['staircase'], x_positions(1, domain)),
    )


PRESET_FUNCTIONS = preset_functions()
