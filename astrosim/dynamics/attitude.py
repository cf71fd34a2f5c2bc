"""
Attitude Kinematics
===================

Quaternion helpers for orbit orientation and body rotation.

Quaternions are scalar-first numpy arrays [w, x, y, z].
"""

import numpy as np


IDENTITY = np.array([1.0, 0.0, 0.0, 0.0])

X_AXIS = np.array([1.0, 0.0, 0.0])
Y_AXIS = np.array([0.0, 1.0, 0.0])
Z_AXIS = np.array([0.0, 0.0, 1.0])


def q_identity() -> np.ndarray:
    """Return a fresh identity quaternion."""
    return IDENTITY.copy()


def q_rot(axis: np.ndarray, angle: float) -> np.ndarray:
    """
    Quaternion for a rotation about an axis.

    Args:
        axis: Rotation axis (normalised internally)
        angle: Rotation angle [rad]

    Returns:
        Unit quaternion [w, x, y, z]
    """
    axis = np.asarray(axis, dtype=float)
    axis = axis / np.linalg.norm(axis)
    half = 0.5 * angle
    return np.concatenate([[np.cos(half)], np.sin(half) * axis])


def q_mul(q1: np.ndarray, q2: np.ndarray) -> np.ndarray:
    """Hamilton product q1 * q2 (apply q2 first, then q1)."""
    w1, x1, y1, z1 = q1
    w2, x2, y2, z2 = q2

    return np.array([
        w1*w2 - x1*x2 - y1*y2 - z1*z2,
        w1*x2 + x1*w2 + y1*z2 - z1*y2,
        w1*y2 - x1*z2 + y1*w2 + z1*x2,
        w1*z2 + x1*y2 - y1*x2 + z1*w2
    ])


def q_normalise(q: np.ndarray) -> np.ndarray:
    """Normalise quaternion to unit length."""
    q = np.asarray(q, dtype=float)
    norm = np.linalg.norm(q)
    if norm > 1e-10:
        return q / norm
    return q_identity()


def q_to_matrix(q: np.ndarray) -> np.ndarray:
    """Convert quaternion to rotation matrix (body to inertial)."""
    w, x, y, z = q

    return np.array([
        [1-2*(y*y+z*z), 2*(x*y-w*z), 2*(x*z+w*y)],
        [2*(x*y+w*z), 1-2*(x*x+z*z), 2*(y*z-w*x)],
        [2*(x*z-w*y), 2*(y*z+w*x), 1-2*(x*x+y*y)]
    ])


def rotate_vector(v: np.ndarray, q: np.ndarray) -> np.ndarray:
    """Rotate a 3-vector by a unit quaternion."""
    return q_to_matrix(q) @ np.asarray(v, dtype=float)


def quaternion_derivative(q: np.ndarray, omega: np.ndarray) -> np.ndarray:
    """
    Quaternion kinematics equation.

    Args:
        q: Quaternion [w, x, y, z]
        omega: Angular velocity in body frame [rad/s]

    Returns:
        Quaternion derivative dq/dt
    """
    wx, wy, wz = omega

    # Quaternion multiplication matrix
    Omega = 0.5 * np.array([
        [0, -wx, -wy, -wz],
        [wx, 0, wz, -wy],
        [wy, -wz, 0, wx],
        [wz, wy, -wx, 0]
    ])

    return Omega @ q
