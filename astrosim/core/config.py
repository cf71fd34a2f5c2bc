"""
Simulation Configuration
========================

Physical constants and world parameters for the orbital engine.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .errors import ConfigurationError


@dataclass(frozen=True)
class PhysicsConstants:
    """Process-wide physical constants and unit conversions."""
    gravitational_constant: float = 6.67428e-11  # m³/(kg·s²)
    seconds_per_day: float = 3600.0 * 24.0
    astronomical_unit_m: float = 149597870000.0  # m
    kilometre_m: float = 1000.0
    j2000_julian_date: float = 2451545.0

    def au_to_metres(self, au: float) -> float:
        """Convert astronomical units to metres."""
        return au * self.astronomical_unit_m

    def days_to_seconds(self, days: float) -> float:
        """Convert days to seconds."""
        return days * self.seconds_per_day


CONSTANTS = PhysicsConstants()


@dataclass
class WorldConfig:
    """Orbital world configuration."""
    # World name used when no description supplies one
    name: Optional[str] = None

    # Timing
    start_time: datetime = field(default_factory=lambda: datetime(2000, 1, 1, 12, 0, 0))
    time_step_seconds: float = 1.0

    # Ticks between exact analytic re-solves of each orbit
    fixation_period: int = 100

    # Large world coordinate segment edge length (m)
    lwc_segment_length: float = 1024.0

    # Kepler solver policy
    kepler_tolerance: float = 1e-12  # rad
    kepler_max_iterations: int = 10

    def __post_init__(self):
        """Validate configuration."""
        if not (math.isfinite(self.time_step_seconds) and self.time_step_seconds > 0):
            raise ConfigurationError("Time step must be positive")
        if int(self.fixation_period) != self.fixation_period or self.fixation_period < 1:
            raise ConfigurationError("Fixation period must be a positive integer")
        if not (math.isfinite(self.lwc_segment_length) and self.lwc_segment_length > 0):
            raise ConfigurationError("LWC segment length must be positive")
        if not self.kepler_tolerance > 0:
            raise ConfigurationError("Kepler tolerance must be positive")
        if self.kepler_max_iterations < 1:
            raise ConfigurationError("Kepler solver needs at least one iteration")
        self.fixation_period = int(self.fixation_period)


# Pre-defined configurations
def create_default_config() -> WorldConfig:
    """Create configuration with one-second ticks."""
    return WorldConfig()


def create_realtime_config() -> WorldConfig:
    """Create configuration for a 50 Hz display-driven tick."""
    return WorldConfig(
        time_step_seconds=0.02,
        fixation_period=100,
    )


def create_accelerated_config(days_per_tick: float = 1.0) -> WorldConfig:
    """Create configuration where every tick covers whole days."""
    return WorldConfig(
        time_step_seconds=CONSTANTS.days_to_seconds(days_per_tick),
        fixation_period=10,
    )
