# MIT License (see LICENSE)
"""
Core type definitions for the planar gravity simulation.

Defines the fundamental data structures:
- Circle: a kinematic point with display attributes (radius, color).
- Body: a named point mass carrying a Circle.

Bodies are identified by their position in the owning Cluster; they carry no
persistent id. The display attributes never influence the dynamics, with one
exception: the radius inflates the bounding box used for edge wrapping.
"""
from __future__ import annotations
from dataclasses import dataclass, field

import numpy as np

from .constants import SPEED_SCALING_FACTOR
from .orbital import BodySeed
from .point import KinematicPoint
from .vector import Vector2

Color = tuple[float, float, float, float]

BARYCENTER_COLOR: Color = (1.0, 0.0, 0.0, 0.0)


def random_color(rng: np.random.Generator) -> Color:
    """Opaque color with uniformly drawn RGB components."""
    r, g, b = rng.random(3)
    return (float(r), float(g), float(b), 1.0)


# =============================================================================
# Shape
# =============================================================================

@dataclass
class Circle:
    """
    Disc drawn around a kinematic point.

    Attributes:
        center: Kinematic state of the disc center.
        radius: Display radius in world units (≥ 0).
        color: RGBA components in [0, 1].
    """
    center: KinematicPoint = field(default_factory=KinematicPoint)
    radius: float = 0.0
    color: Color = (1.0, 1.0, 1.0, 1.0)

    @classmethod
    def centered(cls, radius: float, color: Color) -> "Circle":
        return cls(KinematicPoint.zeros(), radius, color)

    @classmethod
    def at_cursor(cls, cursor, radius: float, color: Color, middle: Vector2, scale: float) -> "Circle":
        """Stationary circle under a window-space cursor."""
        position = Vector2.from_array(cursor).centered(middle, scale)
        return cls(KinematicPoint.stationary(position), radius, color)

    @classmethod
    def at_cursor_random(cls, cursor, middle: Vector2, scale: float, rng: np.random.Generator) -> "Circle":
        """Circle of random radius in [20, 40) and random color under the cursor."""
        radius = 20.0 * float(rng.random()) + 20.0
        return cls.at_cursor(cursor, radius, random_color(rng), middle, scale)

    def rounding_rect(self, middle: Vector2, scale: float) -> tuple[float, float, float, float]:
        """Window-space bounding rectangle (left, top, width, height)."""
        diameter = 2.0 * self.radius
        corner = Vector2.from_array(self.center.position).left_up(middle, scale)
        return (corner.x - self.radius, corner.y - self.radius, diameter, diameter)

    def bound(self, middle: Vector2) -> bool:
        """
        Wrap the center to the opposite edge once the disc has fully left the
        rectangle [-middle, +middle] on an axis.

        Returns:
            True if the position was changed on any axis.
        """
        pos = self.center.position
        wrapped = False

        x_right = self.radius + middle.x
        x_left = -x_right
        if pos[0] < x_left:
            pos[0] = x_right
            wrapped = True
        elif pos[0] > x_right:
            pos[0] = x_left
            wrapped = True

        y_up = self.radius + middle.y
        y_down = -y_up
        if pos[1] < y_down:
            pos[1] = y_up
            wrapped = True
        elif pos[1] > y_up:
            pos[1] = y_down
            wrapped = True

        return wrapped

    def set_cursor_pos(self, cursor, middle: Vector2, scale: float) -> None:
        self.center.position[:] = Vector2.from_array(cursor).centered(middle, scale).as_array()

    def set_cursor_speed(
        self,
        cursor,
        middle: Vector2,
        scale: float,
        speed_scaling: float = SPEED_SCALING_FACTOR,
    ) -> None:
        """Launch velocity proportional to the cursor's offset from the center."""
        target = Vector2.from_array(cursor).centered(middle, scale).as_array()
        self.center.velocity[:] = (target - self.center.position) / speed_scaling


# =============================================================================
# Body
# =============================================================================

@dataclass
class Body:
    """
    A named point mass.

    Attributes:
        name: Display name (not required to be unique).
        mass: Mass in kg. Strictly positive for simulated bodies; the
              synthetic barycenter of an empty cluster has mass 0.
        shape: Kinematic state and display attributes.
    """
    name: str
    mass: float
    shape: Circle = field(default_factory=Circle)

    def __post_init__(self) -> None:
        if not self.mass > 0:
            raise ValueError(f"Body mass must be positive, got {self.mass}")

    @classmethod
    def orbital(cls, seed: BodySeed, true_anomaly: float) -> "Body":
        """Body placed on its seed orbit at the given true anomaly."""
        orbit = seed.orbit
        center = KinematicPoint.inertial(
            orbit.position_at(true_anomaly),
            orbit.speed_at(true_anomaly),
        )
        return cls(seed.name, seed.mass, Circle(center, seed.radius, seed.color))

    @classmethod
    def barycenter(cls) -> "Body":
        """Massless marker for the weighted center; skips the mass check."""
        body = object.__new__(cls)
        body.name = "barycenter"
        body.mass = 0.0
        body.shape = Circle.centered(0.0, BARYCENTER_COLOR)
        return body

    @property
    def point(self) -> KinematicPoint:
        return self.shape.center

    @property
    def position(self) -> np.ndarray:
        return self.shape.center.position

    @property
    def velocity(self) -> np.ndarray:
        return self.shape.center.velocity

    @property
    def acceleration(self) -> np.ndarray:
        return self.shape.center.acceleration

    @property
    def radius(self) -> float:
        return self.shape.radius

    @property
    def color(self) -> Color:
        return self.shape.color
