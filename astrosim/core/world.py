"""
World
=====

Central simulation engine: owns the orbital system tree, the registry of
free rigid bodies and the particle systems.
"""

import math
import threading
import numpy as np
from typing import Any, Dict, Iterator, List, Optional

from .astro_body import AstroBody
from .config import WorldConfig
from .errors import ConfigurationError
from .lwcoord import LargeWorldCoordinate
from .rigid_body import RigidBody
from .system import SystemNode
from .time_manager import SimulationTime
from ..dynamics.gravity import GravityAccumulator
from ..dynamics.integrators import RigidBodyIntegrator


class World:
    """
    Orbital world.

    Integrates:
    - Hierarchical Keplerian orbits of stars, planets and moons
    - Gravity and integration of free rigid bodies
    - Render handle updates
    - Particle systems

    Ticks are serialised by an internal lock; readers should use snapshot()
    or hold the lock to never observe a partially stepped tree.
    """

    def __init__(self, root_body: AstroBody, config: WorldConfig = None,
                 name: str = None):
        """
        Initialize world.

        Args:
            root_body: Body at the origin of the root system (e.g. the star)
            config: World configuration
            name: World name (default: config name, then root body name)
        """
        if root_body.elements is not None:
            raise ConfigurationError(f"{root_body.name}: root body cannot have orbital elements")

        self.config = config or WorldConfig()
        self.name = name or self.config.name or root_body.name

        # Initialize time
        self.time = SimulationTime(
            start_time=self.config.start_time,
            time_step=self.config.time_step_seconds
        )

        # Collaborators
        self.gravity = GravityAccumulator()
        self.integrator = RigidBodyIntegrator()

        # Node arena; deleted slots become None and are never reused
        self._nodes: List[Optional[SystemNode]] = []

        # Registries
        self.rigid_bodies: List[RigidBody] = []
        self.particle_systems: List[Any] = []

        self.step_count = 0
        self._lock = threading.RLock()

        root_body.fixation_period = self.config.fixation_period
        self.root = self._new_node(root_body, None, 0.0)

    # === Construction ===

    def _new_node(self, body: AstroBody, parent_index: Optional[int],
                  orbital_period: float) -> SystemNode:
        segment_length = self.config.lwc_segment_length
        if body.position.segment_length != segment_length:
            body.position = LargeWorldCoordinate.from_vector(
                body.global_position(), segment_length=segment_length)
        node = SystemNode(self, len(self._nodes), body, parent_index, orbital_period)
        self._nodes.append(node)
        return node

    def node_at(self, index: int) -> SystemNode:
        """Live node stored in an arena slot."""
        node = self._nodes[index]
        if node is None:
            raise KeyError(f"system node {index} was deleted")
        return node

    def add_orbit(self,
                  parent: SystemNode,
                  body: AstroBody,
                  orbital_period: float = None,
                  fixation_period: int = None) -> SystemNode:
        """
        Add a sub-system orbiting parent.

        Args:
            parent: Orbited system
            body: Body with orbital elements relative to parent
            orbital_period: Period [s] (default: from elements and combined GM)
            fixation_period: Ticks between exact solves (default: config)

        Returns:
            The new system node, already placed on its orbit
        """
        if parent.world is not self:
            raise ConfigurationError(f"{parent.name} belongs to another world")
        if body.elements is None:
            raise ConfigurationError(f"{body.name}: orbiting body needs orbital elements")
        if parent.child(body.name) is not None:
            raise ConfigurationError(f"{parent.path} already has a system named {body.name}")

        if orbital_period is None:
            orbital_period = body.elements.period(parent.body.gm + body.gm)
        if not (math.isfinite(orbital_period) and orbital_period > 0):
            raise ConfigurationError(f"{body.name}: orbital period must be positive")

        body.fixation_period = fixation_period or self.config.fixation_period

        with self._lock:
            node = self._new_node(body, parent.index, orbital_period)
            parent.child_indices.append(node.index)
            node.set_current_position()
        return node

    def add_rigid_body(self, body: RigidBody, system: SystemNode = None) -> RigidBody:
        """
        Register a rigid body and bind it to an orbital system.

        Args:
            body: Rigid body
            system: System whose gravity well holds the body (default: root)
        """
        system = system or self.root
        with self._lock:
            self.rigid_bodies.append(body)
            system.rigid_bodies.append(body)
        return body

    def move_rigid_body(self, body: RigidBody, system: SystemNode):
        """Rebind a registered rigid body to another system."""
        with self._lock:
            current = self.system_of(body)
            if current is not None:
                current.rigid_bodies.remove(body)
            system.rigid_bodies.append(body)

    def system_of(self, body: RigidBody) -> Optional[SystemNode]:
        """System a rigid body is currently bound to."""
        for node in self.nodes():
            if any(obj is body for obj in node.rigid_bodies):
                return node
        return None

    def add_particle_system(self, psys: Any):
        """Register a particle system; anything with step(dt)."""
        with self._lock:
            self.particle_systems.append(psys)

    def delete_subtree(self, node: SystemNode):
        """
        Delete a system and every system below it.

        Rigid bodies bound inside the subtree are rebound to the surviving
        parent. Siblings keep their order.
        """
        if node.is_root:
            raise ValueError("cannot delete the root system")

        with self._lock:
            parent = node.parent
            parent.child_indices.remove(node.index)
            for sub in list(node.walk()):
                parent.rigid_bodies.extend(sub.rigid_bodies)
                sub.rigid_bodies = []
                self._nodes[sub.index] = None

    def initialise(self):
        """Place every body on its orbit at the current time."""
        with self._lock:
            for node in self.nodes():
                node.set_current_position()

    # === Queries ===

    def nodes(self) -> Iterator[SystemNode]:
        """All live nodes, depth first, parents before children."""
        return self.root.walk()

    def __len__(self) -> int:
        return sum(1 for node in self._nodes if node is not None)

    def lookup(self, path: str) -> Optional[SystemNode]:
        """
        Find a system by path.

        The first segment must be the root's name, e.g. 'Sol/Earth/Luna'.
        Segments are matched case-sensitively against the children of the
        previous level.

        Returns:
            The system node, or None when the path does not resolve
        """
        segments = path.split("/")
        if segments[0] != self.root.name:
            return None

        node = self.root
        for segment in segments[1:]:
            node = node.child(segment)
            if node is None:
                return None
        return node

    def get_body(self, path: str) -> Optional[AstroBody]:
        """Body of the system at path, or None."""
        node = self.lookup(path)
        return node.body if node is not None else None

    def position_of(self, path: str) -> Optional[np.ndarray]:
        """Absolute position of the body at path [m], or None."""
        node = self.lookup(path)
        return node.body.global_position() if node is not None else None

    def velocity_of(self, path: str) -> Optional[np.ndarray]:
        """Absolute velocity of the body at path [m/s], or None."""
        node = self.lookup(path)
        return node.absolute_velocity() if node is not None else None

    # === Stepping ===

    def clear_forces(self):
        """Reset all rigid body force accumulators."""
        with self._lock:
            self.root.clear_forces()

    def step(self, dt: float = None) -> float:
        """
        Advance the world by one tick.

        Args:
            dt: Time step [s] (default: config time step)

        Returns:
            Current time in days since J2000
        """
        dt = self.config.time_step_seconds if dt is None else dt
        if not (math.isfinite(dt) and dt > 0):
            raise ValueError(f"Time step must be positive, got {dt}")

        with self._lock:
            self.time.advance(dt)
            self.root.step(dt, self.gravity)
            self.root.update_handles()

            for obj in self.rigid_bodies:
                if obj.drawable is not None:
                    obj.drawable.set_position(obj.position)
                    obj.drawable.set_orientation(obj.quaternion)

            for psys in self.particle_systems:
                psys.step(dt)

            self.step_count += 1
            return self.time.day_count

    def run(self, duration_seconds: float, dt: float = None) -> int:
        """
        Step repeatedly until duration_seconds of simulated time have passed.

        Returns:
            Number of ticks taken
        """
        dt = self.config.time_step_seconds if dt is None else dt
        ticks = int(math.ceil(duration_seconds / dt - 1e-9))
        for _ in range(ticks):
            self.step(dt)
        return ticks

    def snapshot(self) -> Dict[str, Dict[str, np.ndarray]]:
        """
        Consistent copy of every body's state, keyed by path.

        Returns:
            {path: {'position': [m], 'velocity': [m/s], 'orientation': q}}
        """
        with self._lock:
            state = {}
            for node in self.nodes():
                state[node.path] = {
                    'position': node.body.global_position(),
                    'velocity': node.absolute_velocity(),
                    'orientation': node.body.orientation.copy(),
                }
            for obj in self.rigid_bodies:
                state[obj.name] = {
                    'position': obj.global_position(),
                    'velocity': obj.velocity.copy(),
                    'orientation': obj.quaternion.copy(),
                }
            return state

    def __repr__(self) -> str:
        return (f"World({self.name!r}, systems={len(self)}, "
                f"rigid_bodies={len(self.rigid_bodies)}, {self.time})")
