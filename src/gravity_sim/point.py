# MIT License (see LICENSE)
"""
Kinematic state of a point mass with a fixed-capacity trajectory history.

The trajectory is a ring buffer of TRAJECTORY_SIZE positions plus a write
cursor. It is allocated once and never resized:

    update_trajectory():  trajectory[cursor] = position; cursor += 1 (mod N)
    trajectory_at(k):     trajectory[(k + last + 1) mod N]

where ``last = cursor - 1`` is the slot of the most recent write. So
``trajectory_at(0)`` is the oldest of the last N samples and
``trajectory_at(N - 1)`` the most recent one, independent of where the
cursor physically is. Renderers walk k = 0..N-1 to draw a chronological trail.
"""
from __future__ import annotations
from typing import Iterator

import numpy as np

from .constants import BASE_TRANSLATION, TRAJECTORY_SIZE
from .util import f64


class KinematicPoint:
    """
    Position, velocity and acceleration of one point, plus its recent trail.

    Attributes:
        position: [x, y] float64 array.
        velocity: [vx, vy] float64 array.
        acceleration: [ax, ay] float64 array.
        trajectory: (TRAJECTORY_SIZE, 2) float64 ring buffer of past positions.
        cursor: Next slot of ``trajectory`` to be written.
    """

    __slots__ = ("position", "velocity", "acceleration", "trajectory", "cursor")

    def __init__(self, position=(0.0, 0.0), velocity=(0.0, 0.0), acceleration=(0.0, 0.0)):
        self.position = f64(position)
        self.velocity = f64(velocity)
        self.acceleration = f64(acceleration)
        self.trajectory = np.tile(self.position, (TRAJECTORY_SIZE, 1))
        self.cursor = 0

    @classmethod
    def inertial(cls, position, velocity) -> "KinematicPoint":
        return cls(position, velocity)

    @classmethod
    def stationary(cls, position) -> "KinematicPoint":
        return cls(position)

    @classmethod
    def zeros(cls) -> "KinematicPoint":
        return cls()

    def copy(self) -> "KinematicPoint":
        other = KinematicPoint.__new__(KinematicPoint)
        other.position = self.position.copy()
        other.velocity = self.velocity.copy()
        other.acceleration = self.acceleration.copy()
        other.trajectory = self.trajectory.copy()
        other.cursor = self.cursor
        return other

    def __repr__(self) -> str:
        return (
            f"KinematicPoint(position={self.position.tolist()}, "
            f"velocity={self.velocity.tolist()}, "
            f"acceleration={self.acceleration.tolist()})"
        )

    # ------------------------------------------------------------------
    # Motion
    # ------------------------------------------------------------------

    def reset0(self) -> None:
        """Zero position, velocity and acceleration."""
        self.position.fill(0.0)
        self.velocity.fill(0.0)
        self.acceleration.fill(0.0)

    def reset(self, position=(0.0, 0.0)) -> None:
        """Move to ``position`` and stop (zero velocity and acceleration)."""
        self.position[:] = f64(position)
        self.velocity.fill(0.0)
        self.acceleration.fill(0.0)

    def scale_position(self, scale: float) -> None:
        self.position *= scale

    def scale_velocity(self, scale: float) -> None:
        self.velocity *= scale

    def translate(self, direction, step: float = BASE_TRANSLATION) -> None:
        """Interactive nudge: position += direction · step. No physics involved."""
        self.position += f64(direction) * step

    def accelerate(self, dt: float) -> None:
        """
        Semi-implicit Euler commit.

            v ← v + a·dt
            x ← x + v·dt   (using the updated v)
        """
        self.velocity += self.acceleration * dt
        self.position += self.velocity * dt

    def set_origin(self, origin: "KinematicPoint", old_origin: "KinematicPoint | None" = None) -> None:
        """
        Rebase onto a new reference frame.

        Subtracts ``origin - old_origin`` (or ``origin`` alone when there is no
        previous origin) from position and velocity. The trail is shifted by the
        same positional offset so it stays continuous across the rebase.
        """
        dp = origin.position if old_origin is None else origin.position - old_origin.position
        dv = origin.velocity if old_origin is None else origin.velocity - old_origin.velocity
        self.position -= dp
        self.velocity -= dv
        self.trajectory -= dp

    # ------------------------------------------------------------------
    # Trajectory
    # ------------------------------------------------------------------

    def update_trajectory(self) -> None:
        """Record the current position and advance the write cursor."""
        self.trajectory[self.cursor] = self.position
        self.cursor = (self.cursor + 1) % TRAJECTORY_SIZE

    def clear_trajectory(self) -> None:
        """Collapse the whole trail onto the current position."""
        self.trajectory[:] = self.position

    def trajectory_at(self, k: int) -> np.ndarray:
        """
        k-th sample of the trail in chronological order (read-only view).

        Raises:
            IndexError: If k is outside [0, TRAJECTORY_SIZE).
        """
        if not 0 <= k < TRAJECTORY_SIZE:
            raise IndexError(f"Trajectory index {k} outside [0, {TRAJECTORY_SIZE})")
        sample = self.trajectory[(k + self.cursor) % TRAJECTORY_SIZE]
        sample.flags.writeable = False
        return sample

    def iter_trajectory(self) -> Iterator[np.ndarray]:
        """Yield the trail samples oldest first."""
        for k in range(TRAJECTORY_SIZE):
            yield self.trajectory_at(k)
