#!/usr/bin/env python3
"""
astrosim Solar System Example
=============================

Loads the sample solar system, places a spacecraft in low Earth orbit and
steps the world, reporting body positions.
"""

import logging
import time

import numpy as np

# Add parent directory to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from astrosim.core.config import WorldConfig
from astrosim.core.loader import load_world_file
from astrosim.core.rigid_body import RigidBody


DATA_FILE = Path(__file__).parent / "solar_system.json"
AU = 149597870000.0


def add_leo_spacecraft(world, altitude_m: float = 500e3) -> RigidBody:
    """Place a 4 kg spacecraft on a circular orbit around Earth."""
    earth = world.lookup("Sol/Earth")
    r = earth.body.eq_radius + altitude_m
    speed = np.sqrt(earth.body.gm / r)

    position = earth.body.position.copy().translate([r, 0.0, 0.0])
    velocity = world.velocity_of("Sol/Earth") + np.array([0.0, speed, 0.0])

    craft = RigidBody("Spacecraft", 4.0, position=position, velocity=velocity)
    return world.add_rigid_body(craft, earth)


def run_quick_simulation(days: float, dt: float, plot: bool):
    """Step the solar system for a number of days."""
    print("=" * 60)
    print("astrosim Solar System")
    print("=" * 60)

    config = WorldConfig(time_step_seconds=dt)
    world = load_world_file(DATA_FILE, config)
    craft = add_leo_spacecraft(world)

    print(f"\nWorld Configuration:")
    print(f"  Systems: {len(world)}")
    print(f"  Time step: {dt} s")
    print(f"  Fixation period: {config.fixation_period} ticks")

    paths = [node.path for node in world.nodes()]
    tracks = {path: [] for path in paths}
    craft_track = []

    print("\nRunning simulation...")
    start_time = time.time()

    ticks = int(days * 86400.0 / dt)
    sample_every = max(1, ticks // 500)
    for i in range(ticks):
        world.step(dt)
        if i % sample_every == 0:
            for path in paths:
                tracks[path].append(world.position_of(path))
            earth_pos = world.lookup("Sol/Earth").body.position
            craft_track.append(craft.position.dist(earth_pos))

        if ticks >= 10 and i % (ticks // 10) == 0:
            print(f"  Progress: {i / ticks * 100:.0f}%", end='\r')

    elapsed = time.time() - start_time
    print(f"\nSimulation complete in {elapsed:.2f}s")
    print(f"  Simulated {ticks} ticks ({days} days)")

    print(f"\nFinal State (day {world.time.day_count:.3f} since J2000):")
    print(f"  UTC: {world.time.current_utc}")
    print(f"  JD:  {world.time.julian_date:.6f}")
    for path in paths:
        pos = world.position_of(path)
        vel = world.velocity_of(path)
        print(f"  {path:<20} r={np.linalg.norm(pos) / AU:8.4f} au  "
              f"|v|={np.linalg.norm(vel) / 1000:7.3f} km/s")

    for node in world.nodes():
        if not node.is_root:
            print(f"  {node.path:<20} orbit {world.time.orbit_number(node.orbital_period):4d}  "
                  f"phase {world.time.orbit_phase(node.orbital_period):.3f}")

    earth = world.lookup("Sol/Earth")
    alt = np.linalg.norm(craft.position.dist(earth.body.position)) - earth.body.eq_radius
    print(f"  {'Spacecraft':<20} altitude={alt / 1000:8.1f} km")

    if plot:
        plot_tracks(tracks, craft_track)


def plot_tracks(tracks, craft_track):
    """Plot heliocentric tracks and the spacecraft's geocentric track."""
    import matplotlib.pyplot as plt

    fig, (ax_sun, ax_earth) = plt.subplots(1, 2, figsize=(12, 6))

    for path, points in tracks.items():
        points = np.array(points) / AU
        ax_sun.plot(points[:, 0], points[:, 1], label=path.split("/")[-1])
    ax_sun.set_xlabel("x [au]")
    ax_sun.set_ylabel("y [au]")
    ax_sun.set_title("Heliocentric positions")
    ax_sun.axis('equal')
    ax_sun.legend()

    craft = np.array(craft_track) / 1000
    ax_earth.plot(craft[:, 0], craft[:, 1])
    ax_earth.set_xlabel("x [km]")
    ax_earth.set_ylabel("y [km]")
    ax_earth.set_title("Spacecraft relative to Earth")
    ax_earth.axis('equal')

    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="astrosim Solar System Example")
    parser.add_argument('--days', type=float, default=1.0, help='Simulated days')
    parser.add_argument('--dt', type=float, default=10.0, help='Time step [s]')
    parser.add_argument('--plot', action='store_true', help='Plot tracks with matplotlib')
    parser.add_argument('--verbose', action='store_true', help='Log loader and solver details')

    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")

    run_quick_simulation(args.days, args.dt, args.plot)

    print("\n" + "=" * 60)
    print("Example complete!")
    print("=" * 60)
