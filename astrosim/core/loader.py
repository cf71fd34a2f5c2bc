"""
World Loader
============

Builds a World from a solar-system description.

The description is a mapping (usually read from JSON) shaped like::

    {
      "star": {
        "name": "Sol",
        "physical": {"mass": 1.9891e30, "gm": 1.32712440018e20, ...},
        "satellites": [
          {"kind": "planet", "name": "Earth",
           "physical": {...},
           "orbit": {"semimajor-axis": 1.00000011, "eccentricity": 0.01671022, ...},
           "satellites": [{"kind": "moon", "name": "Luna", ...}]}
        ]
      }
    }

Planet distances are astronomical units and moon distances metres unless
the orbit gives an explicit "distance-unit". Angles are degrees and
rotation periods days.
"""

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .astro_body import AstroBody
from .config import CONSTANTS, WorldConfig
from .errors import ConfigurationError, DomainError
from .system import SystemNode
from .world import World
from ..dynamics.kepler import orbital_period
from ..dynamics.orbital import OrbitalElements


logger = logging.getLogger(__name__)

DISTANCE_UNITS = {
    'au': CONSTANTS.astronomical_unit_m,
    'km': CONSTANTS.kilometre_m,
    'm': 1.0,
}

DEFAULT_DISTANCE_UNIT = {
    'planet': 'au',
    'moon': 'm',
}


def _number(desc: Mapping, key: str, owner: str, default: Any = ...) -> float:
    if key not in desc or desc[key] is None:
        if default is ...:
            raise ConfigurationError(f"{owner}: missing required field '{key}'")
        return default
    value = desc[key]
    if isinstance(value, bool):
        raise ConfigurationError(f"{owner}: field '{key}' must be numeric, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{owner}: field '{key}' must be numeric, got {value!r}") from None


def _name(desc: Mapping) -> str:
    name = desc.get('name')
    if not isinstance(name, str) or not name or "/" in name:
        raise ConfigurationError(f"invalid body name {name!r}")
    return name


def _physical(desc: Mapping, name: str) -> Dict[str, float]:
    phys = desc.get('physical')
    if not isinstance(phys, Mapping):
        raise ConfigurationError(f"{name}: missing 'physical' section")

    return {
        'mass': _number(phys, 'mass', name),
        'gm': _number(phys, 'gm', name, math.nan),
        'radius': _number(phys, 'radius', name),
        'flattening': _number(phys, 'flattening', name, 0.0),
        'obliquity': _number(phys, 'axial-tilt', name, 0.0),
        'sidereal_period': CONSTANTS.days_to_seconds(
            _number(phys, 'sidereal-rotational-period', name, 0.0)),
    }


def _elements(desc: Mapping, name: str, kind: str) -> OrbitalElements:
    orbit = desc.get('orbit')
    if not isinstance(orbit, Mapping):
        raise ConfigurationError(f"{name}: missing 'orbit' section")

    unit = orbit.get('distance-unit', DEFAULT_DISTANCE_UNIT[kind])
    if unit not in DISTANCE_UNITS:
        raise ConfigurationError(f"{name}: unknown distance unit {unit!r}")
    scale = DISTANCE_UNITS[unit]

    a = _number(orbit, 'semimajor-axis', name) * scale
    inc = _number(orbit, 'inclination', name, 0.0)
    long_asc = _number(orbit, 'longitude-ascending-node', name, 0.0)
    long_peri = _number(orbit, 'longitude-periapsis', name, 0.0)
    mean_long = _number(orbit, 'mean-longitude', name, long_peri)

    # Longitudes are measured partly in the reference plane, partly in the orbit
    arg_peri = long_peri - long_asc
    mean_anomaly = mean_long - long_peri

    if 'eccentricity' in orbit:
        ecc = _number(orbit, 'eccentricity', name)
        return OrbitalElements(ecc, a, inc, long_asc, arg_peri, mean_anomaly)
    b = _number(orbit, 'semiminor-axis', name) * scale
    return OrbitalElements.from_axes(a, b, inc, long_asc, arg_peri, mean_anomaly)


def _load_satellite(world: World, parent: SystemNode, desc: Mapping) -> SystemNode:
    kind = desc.get('kind', 'moon' if not parent.is_root else 'planet')
    if kind not in DEFAULT_DISTANCE_UNIT:
        raise ConfigurationError(f"unknown satellite kind {kind!r}")

    name = _name(desc)
    phys = _physical(desc, name)
    try:
        elements = _elements(desc, name, kind)
    except DomainError as e:
        raise ConfigurationError(f"{name}: {e}") from e

    body = AstroBody(name, elements=elements, **phys)
    period = orbital_period(elements.a, parent.body.gm + body.gm)
    node = world.add_orbit(parent, body, orbital_period=period)

    for sat in desc.get('satellites', ()):
        _load_subtree(world, node, sat)
    return node


def _load_subtree(world: World, parent: SystemNode, desc: Mapping) -> Optional[SystemNode]:
    try:
        return _load_satellite(world, parent, desc)
    except ConfigurationError as e:
        logger.error("skipping %s below %s: %s", desc.get('name', '<unnamed>'), parent.path, e)
        return None


def load_world(description: Mapping, config: WorldConfig = None) -> World:
    """
    Build a world from a description mapping.

    A malformed planet or moon is logged and skipped together with its
    satellites; a malformed star raises ConfigurationError.

    Args:
        description: Mapping with a top-level 'star' entry
        config: World configuration

    Returns:
        World with every body placed on its orbit
    """
    star = description.get('star')
    if not isinstance(star, Mapping):
        raise ConfigurationError("description has no 'star' entry")

    name = _name(star)
    root = AstroBody(name, **_physical(star, name))
    world = World(root, config=config, name=description.get('name'))

    for sat in star.get('satellites', ()):
        _load_subtree(world, world.root, sat)

    world.initialise()
    logger.info("loaded solar system %s with %d systems", world.name, len(world))
    return world


def load_world_file(path, config: WorldConfig = None) -> World:
    """Build a world from a JSON description file."""
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        try:
            description = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"{path}: {e}") from e
    return load_world(description, config=config)
