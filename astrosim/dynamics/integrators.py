"""
Numerical Integrators
=====================

Integration methods for free rigid bodies.
"""

import numpy as np
from typing import Callable

from .attitude import quaternion_derivative


class RK4Integrator:
    """
    4th order Runge-Kutta integrator.

    Classic fixed-step RK4 method for ODEs.
    """

    def __init__(self, derivative_func: Callable[[float, np.ndarray], np.ndarray]):
        """
        Initialize integrator.

        Args:
            derivative_func: Function f(t, y) returning dy/dt
        """
        self.derivative = derivative_func

    def step(self, t: float, y: np.ndarray, dt: float) -> np.ndarray:
        """
        Perform single RK4 step.

        Args:
            t: Current time
            y: Current state
            dt: Time step

        Returns:
            New state after step
        """
        k1 = self.derivative(t, y)
        k2 = self.derivative(t + 0.5*dt, y + 0.5*dt*k1)
        k3 = self.derivative(t + 0.5*dt, y + 0.5*dt*k2)
        k4 = self.derivative(t + dt, y + dt*k3)

        return y + (dt/6) * (k1 + 2*k2 + 2*k3 + k4)


class RigidBodyIntegrator:
    """
    Steps a RigidBody under its accumulated force and torque.

    Translation uses semi-implicit Euler on the large world coordinate,
    rotation uses RK4 on quaternion kinematics and Euler's equations with
    the torque held constant over the step. Accumulators are cleared once
    the step is taken.
    """

    def step(self, body, dt: float):
        """
        Advance a rigid body by dt.

        Args:
            body: RigidBody with force/torque accumulated for this tick
            dt: Time step [s]
        """
        # Semi-implicit: update velocity first, then position
        body.velocity = body.velocity + body.force / body.mass * dt
        body.position.translate(body.velocity * dt)

        if np.any(body.angular_velocity) or np.any(body.torque):
            state = np.concatenate([body.quaternion, body.angular_velocity])
            inertia = body.inertia
            inertia_inv = np.linalg.inv(inertia)
            torque = body.torque.copy()

            def derivatives(t: float, y: np.ndarray) -> np.ndarray:
                q = y[:4]
                omega = y[4:7]
                # Euler's equation: I·ω̇ = τ - ω × (I·ω)
                omega_dot = inertia_inv @ (torque - np.cross(omega, inertia @ omega))
                return np.concatenate([quaternion_derivative(q, omega), omega_dot])

            state = RK4Integrator(derivatives).step(0.0, state, dt)

            # Normalize quaternion
            body.quaternion = state[:4] / np.linalg.norm(state[:4])
            body.angular_velocity = state[4:7]

        body.clear_forces()
