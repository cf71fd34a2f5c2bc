import numpy as np
import pytest

from astrosim.core.astro_body import AstroBody
from astrosim.core.errors import ConfigurationError
from astrosim.core.rigid_body import RigidBody
from astrosim.dynamics.orbital import OrbitalElements, position_at_time

from conftest import make_sol_earth_luna


def add_mars(world):
    mars = world.add_orbit(world.root, AstroBody(
        "Mars", 6.4185e23, gm=4.282837e13,
        elements=OrbitalElements(0.0934, 2.279e11, 1.85, 49.56, 286.5, 19.4)))
    world.add_orbit(mars, AstroBody(
        "Phobos", 1.0659e16, elements=OrbitalElements(0.0151, 9.376e6, 1.093)))
    world.add_orbit(mars, AstroBody(
        "Deimos", 1.4762e15, elements=OrbitalElements(0.0003, 2.3463e7, 0.93)))
    return mars


def test_lookup_resolves_paths(solar_world):
    luna = solar_world.lookup("Sol/Earth/Luna")
    assert luna is not None
    assert luna.name == "Luna"
    assert luna.path == "Sol/Earth/Luna"
    assert solar_world.lookup("Sol") is solar_world.root
    assert solar_world.get_body("Sol/Earth").name == "Earth"


@pytest.mark.parametrize("path", [
    "Sol/Mars",
    "Mars",
    "Earth/Luna",
    "sol/Earth",
    "Sol/earth",
    "Sol/Luna",
    "Sol/Earth/Luna/Probe",
    "Sol/",
    "",
])
def test_lookup_misses_return_none(solar_world, path):
    assert solar_world.lookup(path) is None
    assert solar_world.get_body(path) is None
    assert solar_world.position_of(path) is None


def test_children_are_kept_in_insertion_order(solar_world):
    add_mars(solar_world)
    assert [n.name for n in solar_world.root.children] == ["Earth", "Mars"]
    mars = solar_world.lookup("Sol/Mars")
    assert [n.name for n in mars.children] == ["Phobos", "Deimos"]
    assert [n.path for n in solar_world.nodes()] == [
        "Sol", "Sol/Earth", "Sol/Earth/Luna", "Sol/Mars", "Sol/Mars/Phobos", "Sol/Mars/Deimos"]


def test_duplicate_sibling_name_rejected(solar_world):
    with pytest.raises(ConfigurationError):
        solar_world.add_orbit(solar_world.root, AstroBody(
            "Earth", 1.0e24, elements=OrbitalElements(0.0, 1.0e11)))


def test_orbiting_body_needs_elements(solar_world):
    with pytest.raises(ConfigurationError):
        solar_world.add_orbit(solar_world.root, AstroBody("Rogue", 1.0e24))


def test_delete_subtree_removes_only_descendants(solar_world):
    add_mars(solar_world)
    earth = solar_world.lookup("Sol/Earth")
    assert len(solar_world) == 6

    solar_world.delete_subtree(solar_world.lookup("Sol/Mars"))

    assert len(solar_world) == 3
    assert solar_world.lookup("Sol/Mars") is None
    assert solar_world.lookup("Sol/Mars/Phobos") is None
    assert solar_world.lookup("Sol/Earth/Luna") is not None
    assert len(earth.children) == 1
    assert [n.name for n in solar_world.root.children] == ["Earth"]

    # Arena slots of surviving nodes stay valid
    assert solar_world.node_at(earth.index) is earth


def test_delete_subtree_rebinds_rigid_bodies(solar_world):
    luna = solar_world.lookup("Sol/Earth/Luna")
    probe = RigidBody("Probe", 100.0, position=luna.body.position.copy().translate([2.0e6, 0, 0]))
    solar_world.add_rigid_body(probe, luna)

    solar_world.delete_subtree(luna)

    earth = solar_world.lookup("Sol/Earth")
    assert solar_world.system_of(probe) is earth
    assert probe in solar_world.rigid_bodies


def test_root_cannot_be_deleted(solar_world):
    with pytest.raises(ValueError):
        solar_world.delete_subtree(solar_world.root)


def test_new_orbit_is_placed_and_due_for_fix(solar_world):
    earth = solar_world.lookup("Sol/Earth")
    expected = position_at_time(earth.body.elements, earth.combined_gm(), solar_world.time.seconds)
    assert np.allclose(earth.body.global_position(), expected, rtol=0.0, atol=1e-3)
    assert earth.body.fixation_countdown == 0


def test_fixation_window_lands_on_exact_orbit():
    fixation_period, dt = 10, 60.0
    world = make_sol_earth_luna(fixation_period=fixation_period, time_step=dt)
    earth = world.lookup("Sol/Earth")
    body = earth.body

    # First tick re-fixes
    world.step(dt)
    assert body.fixation_countdown == fixation_period
    fixed = position_at_time(body.elements, earth.combined_gm(), world.time.seconds)
    assert np.allclose(body.global_position(), fixed, rtol=0.0, atol=1e-3)

    # Coasting for one full window ends on the analytic orbit
    for i in range(fixation_period):
        world.step(dt)
        assert body.fixation_countdown == fixation_period - i - 1
    exact = position_at_time(body.elements, earth.combined_gm(), world.time.seconds)
    assert np.allclose(body.global_position(), exact, rtol=0.0, atol=1.0)

    # And the next tick restarts the countdown
    world.step(dt)
    assert body.fixation_countdown == fixation_period


def test_coasting_drift_is_bounded_over_many_windows():
    world = make_sol_earth_luna(fixation_period=10, time_step=60.0)
    earth = world.lookup("Sol/Earth")

    worst = 0.0
    for _ in range(200):
        world.step()
        exact = position_at_time(earth.body.elements, earth.combined_gm(), world.time.seconds)
        worst = max(worst, np.linalg.norm(earth.body.global_position() - exact))
        assert 0 <= earth.body.fixation_countdown <= 10

    # Chord sag over a 600 s window of Earth's orbit is a few hundred metres
    assert worst < 1.0e3


def test_children_follow_freshly_updated_parent(solar_world):
    earth = solar_world.lookup("Sol/Earth")
    luna = solar_world.lookup("Sol/Earth/Luna")

    for _ in range(25):
        solar_world.step()
        offset = luna.body.position.dist(earth.body.position)
        assert np.allclose(offset, luna.body.relative_position, atol=1e-3)


def test_root_stays_at_origin(solar_world):
    root = solar_world.root
    for _ in range(15):
        solar_world.step()
    assert np.allclose(root.body.global_position(), 0.0)
    assert root.body.fixation_countdown == 0


def test_absolute_velocity_sums_ancestors(solar_world):
    solar_world.step()
    earth = solar_world.lookup("Sol/Earth")
    luna = solar_world.lookup("Sol/Earth/Luna")

    assert np.allclose(solar_world.velocity_of("Sol/Earth/Luna"),
                       luna.body.velocity + earth.body.velocity)
    assert np.allclose(solar_world.velocity_of("Sol"), 0.0)

    # Earth moves at roughly 30 km/s around the Sun
    assert 2.9e4 < np.linalg.norm(earth.body.velocity) < 3.1e4
