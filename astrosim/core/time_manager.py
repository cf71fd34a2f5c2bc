"""
Simulation Time Manager
=======================

Absolute time source for the orbital engine.

Time is kept as a continuous fractional-day count since the J2000 epoch,
which is the epoch all orbital elements are referenced to.
"""

from datetime import datetime, timedelta

from .config import CONSTANTS


class SimulationTime:
    """
    Manages simulation time.

    Provides:
    - Epoch and elapsed time tracking
    - Julian date of the current time
    - Fractional-day count and seconds since J2000
    - Time step management
    """

    J2000_EPOCH = datetime(2000, 1, 1, 12, 0, 0)  # J2000 epoch

    def __init__(self,
                 start_time: datetime = None,
                 time_step: float = 1.0):
        """
        Initialize simulation time.

        Args:
            start_time: Simulation start time (UTC)
            time_step: Default time step in seconds
        """
        self.start_time = start_time or self.J2000_EPOCH
        self.time_step = time_step
        self.elapsed_seconds = 0.0
        self.step_count = 0

        # Day count of the start time, cached to keep the hot path float-only
        delta = self.start_time - self.J2000_EPOCH
        self._start_days = delta.total_seconds() / CONSTANTS.seconds_per_day

    def reset(self):
        """Reset simulation time to start."""
        self.elapsed_seconds = 0.0
        self.step_count = 0

    def advance(self, dt: float) -> float:
        """
        Advance time by an arbitrary step.

        Returns:
            Current elapsed time in seconds
        """
        self.elapsed_seconds += dt
        self.step_count += 1
        return self.elapsed_seconds

    def step(self) -> float:
        """Advance time by the default step."""
        return self.advance(self.time_step)

    def set_time(self, elapsed_seconds: float):
        """Set elapsed time directly."""
        self.elapsed_seconds = elapsed_seconds
        self.step_count = int(elapsed_seconds / self.time_step)

    @property
    def day_count(self) -> float:
        """Fractional days since J2000."""
        return self._start_days + self.elapsed_seconds / CONSTANTS.seconds_per_day

    @property
    def seconds(self) -> float:
        """Seconds since J2000, derived from the day count."""
        return self.day_count * CONSTANTS.seconds_per_day

    @property
    def current_utc(self) -> datetime:
        """Get current UTC time."""
        return self.start_time + timedelta(seconds=self.elapsed_seconds)

    @property
    def julian_date(self) -> float:
        """Julian Date for current time."""
        return CONSTANTS.j2000_julian_date + self.day_count

    def orbit_number(self, period_seconds: float) -> int:
        """
        Completed orbits since J2000 plus one.

        Args:
            period_seconds: Orbital period in seconds
        """
        return int(self.seconds / period_seconds) + 1

    def orbit_phase(self, period_seconds: float) -> float:
        """
        Phase within current orbit.

        Args:
            period_seconds: Orbital period in seconds

        Returns:
            Phase as fraction (0.0 to 1.0)
        """
        return (self.seconds % period_seconds) / period_seconds

    def __repr__(self) -> str:
        return f"SimulationTime(utc={self.current_utc}, days={self.day_count:.6f})"
