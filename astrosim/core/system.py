"""
Orbital Systems
===============

Tree of gravitationally dominant bodies. Each node pairs one AstroBody with
the sub-systems orbiting it and the free rigid bodies currently inside its
gravity well.

Nodes live in the world's arena and refer to each other by stable integer
indices.
"""

import logging
import numpy as np
from typing import Any, Iterator, List, Optional

from .astro_body import AstroBody
from .errors import SimulationError
from .rigid_body import RigidBody
from ..dynamics.gravity import GravityAccumulator
from ..dynamics.orbital import position_at_time


logger = logging.getLogger(__name__)


class SystemNode:
    """
    One orbital system in the world tree.

    Stepping order inside a tick:
    1. Gravity on, then integration of, every bound rigid body (using the
       node's pre-update position)
    2. Fixation update of the node's own body
    3. Children, in insertion order
    """

    def __init__(self,
                 world,
                 index: int,
                 body: AstroBody,
                 parent_index: Optional[int] = None,
                 orbital_period: float = 0.0):
        """
        Initialize system node.

        Args:
            world: Owning World
            index: Arena slot of this node
            body: Dominant body of the system
            parent_index: Arena slot of the parent, None for the root
            orbital_period: Orbital period around the parent [s]
        """
        self.world = world
        self.index = index
        self.body = body
        self.parent_index = parent_index
        self.orbital_period = orbital_period

        self.child_indices: List[int] = []
        self.rigid_bodies: List[RigidBody] = []

        # Orbit path renderable, positioned on the parent body
        self.orbit_drawable: Optional[Any] = None

    @property
    def name(self) -> str:
        return self.body.name

    @property
    def parent(self) -> Optional['SystemNode']:
        if self.parent_index is None:
            return None
        return self.world.node_at(self.parent_index)

    @property
    def children(self) -> List['SystemNode']:
        return [self.world.node_at(i) for i in self.child_indices]

    @property
    def is_root(self) -> bool:
        return self.parent_index is None

    @property
    def path(self) -> str:
        """Slash-delimited path from the root, e.g. 'Sol/Earth/Luna'."""
        names = []
        node = self
        while node is not None:
            names.append(node.name)
            node = node.parent
        return "/".join(reversed(names))

    def child(self, name: str) -> Optional['SystemNode']:
        """First child whose name matches exactly."""
        for node in self.children:
            if node.name == name:
                return node
        return None

    def walk(self) -> Iterator['SystemNode']:
        """Depth-first iteration, parent before children."""
        yield self
        for node in self.children:
            yield from node.walk()

    def combined_gm(self) -> float:
        """GM of this body plus the orbited body."""
        return self.parent.body.gm + self.body.gm

    def absolute_velocity(self) -> np.ndarray:
        """Velocity of this body relative to the root frame [m/s]."""
        v = np.zeros(3)
        node = self
        while node is not None and not node.is_root:
            v += node.body.velocity
            node = node.parent
        return v

    # === Position updates ===

    def _time(self) -> float:
        return self.world.time.seconds

    def _solve(self, t: float) -> np.ndarray:
        config = self.world.config
        return position_at_time(self.body.elements, self.combined_gm(), t,
                                tolerance=config.kepler_tolerance,
                                max_iterations=config.kepler_max_iterations)

    def _anchor(self):
        # Absolute position = parent's absolute position + relative offset
        self.body.position.assign(self.parent.body.position)
        self.body.position.translate(self.body.relative_position)

    def set_current_position(self):
        """
        Place the body exactly on its orbit at the current time.

        The root is by definition not orbiting anything and is left alone.
        The fixation countdown is zeroed so the next update re-fixes.
        """
        if self.is_root:
            return
        t = self._time()
        body = self.body
        body.relative_position = self._solve(t)
        self._anchor()
        body.orientation = body.sidereal_orientation_at_time(t)
        body.reset_fixation()

    def update_current_position(self, dt: float):
        """
        Advance the body along its orbit by one tick.

        While the countdown runs the body coasts linearly with the velocity
        from the last fix. At zero the orbit is solved exactly at t and at
        t + fixation_period·dt, the chord between them becomes the coasting
        velocity, and the countdown restarts.
        """
        if self.is_root:
            return

        t = self._time()
        body = self.body

        if body.fixation_countdown > 0:
            body.relative_position = body.relative_position + body.velocity * dt
            self._anchor()
            body.orientation = body.sidereal_orientation_at_time(t)
            body.fixation_countdown -= 1
        else:
            window = body.fixation_period * dt
            new_pos = self._solve(t)
            next_pos = self._solve(t + window)

            body.velocity = (next_pos - new_pos) / window
            body.relative_position = new_pos
            self._anchor()
            body.orientation = body.sidereal_orientation_at_time(t)
            body.fixation_countdown = body.fixation_period

    # === Stepping ===

    def _step_rigid_bodies(self, dt: float, gravity: GravityAccumulator):
        integrator = self.world.integrator
        for obj in self.rigid_bodies:
            try:
                gravity.accumulate(self, obj)
                integrator.step(obj, dt)
            except (SimulationError, FloatingPointError, np.linalg.LinAlgError) as e:
                obj.clear_forces()
                logger.warning("skipping rigid body %s in %s: %s", obj.name, self.path, e)

    def step(self, dt: float, gravity: Optional[GravityAccumulator] = None):
        """
        Step this system and every system below it.

        Args:
            dt: Time step [s]
            gravity: Force model for bound rigid bodies
        """
        gravity = gravity or self.world.gravity
        self._step_rigid_bodies(dt, gravity)

        try:
            self.update_current_position(dt)
        except (SimulationError, FloatingPointError) as e:
            logger.warning("skipping orbit update of %s: %s", self.path, e)

        for node in self.children:
            node.step(dt, gravity)

    def clear_forces(self):
        """Reset force accumulators of bound rigid bodies, recursively."""
        for obj in self.rigid_bodies:
            obj.clear_forces()
        for node in self.children:
            node.clear_forces()

    def update_handles(self):
        """Push current state to render handles, recursively."""
        body = self.body
        if body.light_source is not None:
            body.light_source.set_light_position(body.position)
        if body.drawable is not None:
            body.drawable.set_orientation(body.orientation)
            body.drawable.set_position(body.position)
        if self.orbit_drawable is not None and not self.is_root:
            self.orbit_drawable.set_position(self.parent.body.position)

        for node in self.children:
            node.update_handles()

    def __repr__(self) -> str:
        return (f"SystemNode({self.path!r}, children={len(self.child_indices)}, "
                f"rigid_bodies={len(self.rigid_bodies)})")
