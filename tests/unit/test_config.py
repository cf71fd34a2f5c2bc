import dataclasses

import pytest

from astrosim.core.config import (
    CONSTANTS,
    WorldConfig,
    create_accelerated_config,
    create_default_config,
    create_realtime_config,
)
from astrosim.core.errors import ConfigurationError, SimulationError


def test_constants_and_conversions():
    assert CONSTANTS.gravitational_constant == 6.67428e-11
    assert CONSTANTS.au_to_metres(2.0) == 2 * 149597870000.0
    assert CONSTANTS.days_to_seconds(1.5) == 129600.0

    with pytest.raises(dataclasses.FrozenInstanceError):
        CONSTANTS.gravitational_constant = 1.0


def test_default_config():
    config = create_default_config()
    assert config.time_step_seconds == 1.0
    assert config.fixation_period == 100
    assert config.lwc_segment_length == 1024.0
    assert config.kepler_tolerance == 1e-12
    assert config.kepler_max_iterations == 10


def test_preset_configs():
    assert create_realtime_config().time_step_seconds == 0.02
    assert create_accelerated_config(2.0).time_step_seconds == 172800.0


@pytest.mark.parametrize("kwargs", [
    {"time_step_seconds": 0.0},
    {"time_step_seconds": float('inf')},
    {"fixation_period": 0},
    {"fixation_period": 2.5},
    {"lwc_segment_length": -1.0},
    {"kepler_tolerance": 0.0},
    {"kepler_max_iterations": 0},
])
def test_invalid_config_rejected(kwargs):
    with pytest.raises(ConfigurationError):
        WorldConfig(**kwargs)


def test_configuration_error_is_a_value_error():
    with pytest.raises(ValueError):
        WorldConfig(fixation_period=-1)
    assert issubclass(ConfigurationError, SimulationError)
