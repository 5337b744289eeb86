"""
Calcgraph Configuration

Centralized configuration for curve sampling, classification, manipulation,
smoothing, undo and integration defaults.
Avoids hardcoded magic numbers scattered across modules.

Usage:
    from calcgraph.config import CALCGRAPH_CONFIG as cfg

    # Access values
    sigma = cfg.smoothing.standard_deviation
    if width < cfg.manipulation.width_min:
        width = cfg.manipulation.width_min

    # Override for a single curve
    from dataclasses import replace
    coarse = replace(cfg, domain=replace(cfg.domain, n_points=301))
"""

import math
from dataclasses import dataclass, field


@dataclass(frozen=True)
class DomainConfig:
    """Configuration for the sampled x-domain shared by all curves."""

    x_min: float = 0.0
    x_max: float = 30.0

    # 80 samples per unit, so integer x values land exactly on samples
    n_points: int = 2401

    def __post_init__(self):
        if not (math.isfinite(self.x_min) and math.isfinite(self.x_max)):
            raise ValueError(f"Domain bounds must be finite: [{self.x_min}, {self.x_max}]")
        if self.x_max <= self.x_min:
            raise ValueError(f"Empty domain: [{self.x_min}, {self.x_max}]")
        if self.n_points < 3:
            raise ValueError(f"Need at least 3 points, got {self.n_points}")

    @property
    def delta_x(self) -> float:
        return (self.x_max - self.x_min) / (self.n_points - 1)

    @property
    def center(self) -> float:
        return (self.x_min + self.x_max) / 2


@dataclass(frozen=True)
class ClassificationConfig:
    """Thresholds for smooth / cusp / discontinuous classification."""

    # Max angle (radians) between left and right secant lines of a smooth point
    cusp_angle_threshold: float = math.radians(25)

    # Secant slopes steeper than this are treated as a break, not a corner
    slope_threshold: float = 200.0

    def __post_init__(self):
        if self.cusp_angle_threshold <= 0:
            raise ValueError(f"cusp_angle_threshold must be positive, got {self.cusp_angle_threshold}")
        if self.slope_threshold <= 0:
            raise ValueError(f"slope_threshold must be positive, got {self.slope_threshold}")


@dataclass(frozen=True)
class ManipulationConfig:
    """Configuration for the drag response algorithms."""

    # Width range for hill, triangle, pedestal, parabola and sinusoid
    width_min: float = 1.0
    width_max: float = 15.0
    width_default: float = 4.5

    # Pedestal edge softness (larger = wider rounded edge)
    edge_slope_factor: float = 1.5

    # Tilt is clamped to +/- this many degrees from horizontal
    max_tilt: float = 45.0

    # Number of half wavelengths the sinusoid packs into its width
    sine_half_waves: int = 7

    def __post_init__(self):
        if not 0 < self.width_min <= self.width_default <= self.width_max:
            raise ValueError(
                f"Invalid width range: min={self.width_min}, "
                f"default={self.width_default}, max={self.width_max}"
            )
        if self.edge_slope_factor <= 0:
            raise ValueError(f"edge_slope_factor must be positive, got {self.edge_slope_factor}")
        if not 0 <= self.max_tilt < 90:
            raise ValueError(f"max_tilt must be in [0, 90), got {self.max_tilt}")
        if self.sine_half_waves < 1 or self.sine_half_waves % 2 == 0:
            raise ValueError(f"sine_half_waves must be a positive odd number, got {self.sine_half_waves}")


@dataclass(frozen=True)
class SmoothingConfig:
    """Configuration for the Gaussian kernel smoother."""

    # Standard deviation of the kernel, in x units
    standard_deviation: float = 0.25

    # Kernel is truncated at +/- cutoff standard deviations
    cutoff: float = 4.0

    def __post_init__(self):
        if self.standard_deviation <= 0:
            raise ValueError(f"standard_deviation must be positive, got {self.standard_deviation}")
        if self.cutoff <= 0:
            raise ValueError(f"cutoff must be positive, got {self.cutoff}")


@dataclass(frozen=True)
class HistoryConfig:
    """Configuration for the per-point undo stack."""

    max_undo: int = 20

    def __post_init__(self):
        if self.max_undo < 1:
            raise ValueError(f"max_undo must be at least 1, got {self.max_undo}")


@dataclass(frozen=True)
class IntegrationConfig:
    """Configuration for cumulative integration."""

    # The integral is zero here (clamped into the domain)
    reference_x: float = 0.0

    # Longest run of undefined integrand samples that is bridged
    max_gap_samples: int = 3

    def __post_init__(self):
        if self.max_gap_samples < 0:
            raise ValueError(f"max_gap_samples must be >= 0, got {self.max_gap_samples}")


@dataclass(frozen=True)
class CalcgraphConfig:
    """Master configuration for the curve engine."""

    domain: DomainConfig = field(default_factory=DomainConfig)
    classification: ClassificationConfig = field(default_factory=ClassificationConfig)
    manipulation: ManipulationConfig = field(default_factory=ManipulationConfig)
    smoothing: SmoothingConfig = field(default_factory=SmoothingConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    integration: IntegrationConfig = field(default_factory=IntegrationConfig)


# Global singleton instance
CALCGRAPH_CONFIG = CalcgraphConfig()
