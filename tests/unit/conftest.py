import pytest

from astrosim.core.astro_body import AstroBody
from astrosim.core.config import WorldConfig
from astrosim.core.world import World
from astrosim.dynamics.orbital import OrbitalElements


SUN_GM = 1.32712440018e20
EARTH_GM = 3.986004418e14
MOON_GM = 4.9048695e12
AU = 149597870000.0


def make_sol_earth_luna(fixation_period: int = 10, time_step: float = 60.0) -> World:
    config = WorldConfig(time_step_seconds=time_step, fixation_period=fixation_period)

    sol = AstroBody("Sol", 1.9891e30, gm=SUN_GM, radius=6.955e8,
                    obliquity=7.25, sidereal_period=25.38 * 86400)
    world = World(sol, config=config)

    earth = AstroBody("Earth", 5.9736e24, gm=EARTH_GM, radius=6.371e6,
                      flattening=0.0033528, obliquity=23.44,
                      sidereal_period=86164.1,
                      elements=OrbitalElements(0.0167, AU, 0.0, -11.26, 114.2, 0.0))
    earth_node = world.add_orbit(world.root, earth)

    luna = AstroBody("Luna", 7.3477e22, gm=MOON_GM, radius=1.7371e6,
                     obliquity=6.687, sidereal_period=27.321582 * 86400,
                     elements=OrbitalElements(0.0549, 384399000.0, 5.145, 125.08, 318.15, 0.0))
    world.add_orbit(earth_node, luna)
    return world


@pytest.fixture
def solar_world() -> World:
    return make_sol_earth_luna()
