"""
Gravity
=======

Point-mass gravity on free rigid bodies from the dominant bodies of their
orbital system.
"""

import numpy as np

from ..core.errors import DegenerateGeometryError


def compute_gravity(source, target) -> np.ndarray:
    """
    Gravitational force exerted by source on target.

    Args:
        source: AstroBody providing GM and position
        target: Body with mass and position (large world coordinates)

    Returns:
        Force on target [N]
    """
    dist = target.position.dist(source.position)
    r12 = float(dist @ dist)
    if not r12 > 0.0:
        raise DegenerateGeometryError(
            f"{getattr(target, 'name', target)} coincides with {source.name}")

    direction = dist / np.sqrt(r12)
    return direction * (-source.gm * target.mass / r12)


class GravityAccumulator:
    """
    Restricted two-dominant-body gravity.

    A rigid body feels the body of the system it is bound to and, when that
    system orbits another, the parent system's body. No other bodies
    contribute.
    """

    def contributions(self, node, body):
        """Forces on body from the node body and its parent body."""
        forces = [compute_gravity(node.body, body)]
        parent = node.parent
        if parent is not None:
            forces.append(compute_gravity(parent.body, body))
        return forces

    def accumulate(self, node, body) -> np.ndarray:
        """
        Apply gravity to a rigid body's force accumulator.

        Args:
            node: SystemNode the body is bound to
            body: RigidBody

        Returns:
            Total force applied [N]
        """
        total = np.zeros(3)
        for force in self.contributions(node, body):
            body.apply_force(force)
            total += force
        return total
