import dataclasses

import numpy as np
import pytest

from astrosim.core.errors import DomainError
from astrosim.dynamics.orbital import (
    OrbitalElements,
    orbit_normal,
    position_at_time,
    velocity_at_time,
    velocity_estimate,
)


EARTH_GM = 3.986004418e14


@pytest.mark.parametrize("ecc", [0.0, 0.1, 0.5, 0.9])
def test_position_at_epoch_is_periapsis(ecc):
    elements = OrbitalElements(ecc, 1.0e7, 28.5, 40.0, 75.0, 0.0)
    r = position_at_time(elements, EARTH_GM, 0.0)
    assert np.linalg.norm(r) == pytest.approx(1.0e7 * (1 - ecc), rel=1e-12)


def test_unrotated_periapsis_lies_on_y_axis():
    elements = OrbitalElements(0.2, 1.0e7)
    r = position_at_time(elements, EARTH_GM, 0.0)
    assert np.allclose(r, [0.0, 8.0e6, 0.0], atol=1e-6)


def test_half_period_is_apoapsis():
    elements = OrbitalElements(0.3, 2.0e7, 10.0, 20.0, 30.0, 0.0)
    half = elements.period(EARTH_GM) / 2
    r = position_at_time(elements, EARTH_GM, half)
    assert np.linalg.norm(r) == pytest.approx(elements.apoapsis, rel=1e-9)


def test_prograde_motion_towards_negative_x():
    elements = OrbitalElements(0.0, 1.0e7)
    r = position_at_time(elements, EARTH_GM, elements.period(EARTH_GM) / 4)
    assert np.allclose(r, [-1.0e7, 0.0, 0.0], atol=1e-3)


def test_angles_stored_in_radians():
    elements = OrbitalElements(0.1, 1.0e7, 90.0, 180.0, 45.0, 30.0)
    assert elements.inc == pytest.approx(np.pi / 2)
    assert elements.long_asc == pytest.approx(np.pi)
    assert elements.arg_peri == pytest.approx(np.pi / 4)
    assert elements.mean_anomaly_epoch == pytest.approx(np.pi / 6)
    assert elements.b == pytest.approx(1.0e7 * np.sqrt(1 - 0.01))


def test_orientation_quaternion():
    flat = OrbitalElements(0.1, 1.0e7)
    assert np.allclose(flat.q_orbit, [1.0, 0.0, 0.0, 0.0])
    assert np.allclose(orbit_normal(flat), [0.0, 0.0, 1.0])

    polar = OrbitalElements(0.1, 1.0e7, inc=90.0)
    assert np.allclose(orbit_normal(polar), [1.0, 0.0, 0.0])
    assert np.isclose(np.linalg.norm(polar.q_orbit), 1.0)


@pytest.mark.parametrize("ecc, a", [(1.0, 1.0e7), (1.5, 1.0e7), (-0.1, 1.0e7),
                                    (0.1, 0.0), (0.1, -5.0), (float('nan'), 1.0e7)])
def test_invalid_elements_rejected(ecc, a):
    with pytest.raises(DomainError):
        OrbitalElements(ecc, a)


def test_elements_are_immutable():
    elements = OrbitalElements(0.1, 1.0e7)
    with pytest.raises(dataclasses.FrozenInstanceError):
        elements.ecc = 0.2
    with pytest.raises(ValueError):
        elements.q_orbit[0] = 0.0


def test_from_axes():
    elements = OrbitalElements.from_axes(10.0, 8.0)
    assert elements.ecc == pytest.approx(0.6)
    assert elements.b == pytest.approx(8.0)

    with pytest.raises(DomainError):
        OrbitalElements.from_axes(10.0, 12.0)


def test_exact_velocity_matches_finite_difference():
    elements = OrbitalElements(0.4, 2.0e7, 30.0, 60.0, 90.0, 10.0)
    t, h = 1234.0, 0.01
    numeric = (position_at_time(elements, EARTH_GM, t + h)
               - position_at_time(elements, EARTH_GM, t - h)) / (2 * h)
    exact = velocity_at_time(elements, EARTH_GM, t)
    assert np.allclose(exact, numeric, rtol=1e-6, atol=1e-4)


def test_velocity_estimate_uses_mean_speed_and_normal_direction():
    elements = OrbitalElements(0.3, 2.0e7, 15.0, 0.0, 0.0, 0.0)
    t = 500.0
    v = velocity_estimate(elements, EARTH_GM, t)
    r = position_at_time(elements, EARTH_GM, t)

    mean_speed = 2 * np.pi * elements.a / elements.period(EARTH_GM)
    assert np.linalg.norm(v) == pytest.approx(mean_speed)
    assert abs(np.dot(v, r)) < 1e-6 * np.linalg.norm(v) * np.linalg.norm(r)
    assert abs(np.dot(v, orbit_normal(elements))) < 1e-9 * np.linalg.norm(v)


def test_velocity_estimate_is_exact_for_circular_orbit():
    elements = OrbitalElements(0.0, 1.0e7, 51.6, 20.0, 0.0, 0.0)
    t = 321.0
    assert np.allclose(velocity_estimate(elements, EARTH_GM, t),
                       velocity_at_time(elements, EARTH_GM, t), rtol=1e-9, atol=1e-6)
