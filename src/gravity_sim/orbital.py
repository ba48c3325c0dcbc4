# MIT License (see LICENSE)
"""
Keplerian orbital elements used to seed the initial state of bodies.

An Orbit describes a conic around a focus with gravitational parameter mu.
Given a true anomaly θ (angle from periapsis) it yields, in closed form:

    a = (r_apo + r_peri) / 2                     semi-major axis
    b = sqrt(r_apo · r_peri)                     semi-minor axis
    e = (r_apo - r_peri) / (r_apo + r_peri)      eccentricity
    r(θ) = a(1 - e²) / (1 + e·cos θ)             radius (conic equation)
    γ(θ) = acos((1 + e·cos θ) / sqrt(1 + e² + 2e·cos θ))   flight path angle
    |v(θ)| = sqrt(mu · (2/r - 1/a))              vis-viva

The velocity direction is θ + π/2 - γ, i.e. perpendicular to the radius
vector at the apsides and tilted by the flight path angle elsewhere. Both
position and velocity are rotated by the argument of periapsis.

These formulas are evaluated once per body when a cluster is seeded; the
integrator never touches an Orbit again.

Reference: https://en.wikipedia.org/wiki/Vis-viva_equation
"""
from __future__ import annotations
import math
from dataclasses import dataclass
from enum import Enum

import numpy as np

from .constants import EPSILON
from .vector import Vector2


@dataclass(frozen=True)
class Inclination:
    """
    Tilt of the orbital plane.

    Carried through the seed file for completeness; the planar engine ignores it.
    """
    value: float = 0.0
    argument: float = 0.0


@dataclass(frozen=True)
class Orbit:
    """
    Keplerian orbit description.

    Attributes:
        mu: Gravitational parameter G·M of the central body.
        apoapsis: Farthest distance from the focus (≥ 0).
        periapsis: Nearest distance from the focus (≥ 0).
        argument: Argument of periapsis in radians.
        inclination: Orbital plane tilt (unused in 2D).
    """
    mu: float
    apoapsis: float
    periapsis: float
    argument: float = 0.0
    inclination: Inclination = Inclination()

    def __post_init__(self) -> None:
        if self.mu < 0:
            raise ValueError(f"mu must be non-negative, got {self.mu}")
        if self.apoapsis < 0 or self.periapsis < 0:
            raise ValueError(
                f"Apsides must be non-negative, got ({self.apoapsis}, {self.periapsis})"
            )

    @classmethod
    def circular(cls, mu: float, radius: float, argument: float = 0.0) -> "Orbit":
        return cls(mu=mu, apoapsis=radius, periapsis=radius, argument=argument)

    @property
    def semi_major(self) -> float:
        return 0.5 * (self.apoapsis + self.periapsis)

    @property
    def semi_minor(self) -> float:
        return math.sqrt(self.apoapsis * self.periapsis)

    @property
    def is_degenerate(self) -> bool:
        """True when either axis is below machine epsilon (a point, or a line)."""
        return self.semi_minor < EPSILON or self.semi_major < EPSILON

    @property
    def eccentricity(self) -> float:
        total = self.apoapsis + self.periapsis
        if total > 0:
            return (self.apoapsis - self.periapsis) / total
        return 0.0

    def radius_at(self, true_anomaly: float) -> float:
        """Distance from the focus; 0 where a radial orbit passes through it."""
        e = self.eccentricity
        denom = 1.0 + e * math.cos(true_anomaly)
        if denom < EPSILON:
            return 0.0
        return self.semi_major * (1.0 - e * e) / denom

    def eccentric_anomaly_at(self, true_anomaly: float) -> float:
        e = self.eccentricity
        denom = 1.0 + e * math.cos(true_anomaly)
        if denom < EPSILON:
            return 0.0
        return math.atan(math.sin(true_anomaly) * math.sqrt(1.0 - e * e) / denom)

    def flight_angle_at(self, true_anomaly: float) -> float:
        """Angle between the velocity and the local horizontal; 0 at the apsides."""
        e = self.eccentricity
        ec = e * math.cos(true_anomaly)
        norm = math.sqrt(max(0.0, 1.0 + e * e + 2.0 * ec))
        if norm < EPSILON:
            return 0.0
        return math.acos(min(1.0, (1.0 + ec) / norm))

    def position_at(self, true_anomaly: float) -> Vector2:
        """Position relative to the focus."""
        return Vector2.polar(self.radius_at(true_anomaly), true_anomaly + self.argument)

    def speed_at(self, true_anomaly: float) -> Vector2:
        """
        Velocity vector relative to the focus.

        Degenerate orbits report a zero vector rather than dividing by a
        near-zero axis.
        """
        if self.is_degenerate:
            return Vector2.zeros()
        r = self.radius_at(true_anomaly)
        mag = math.sqrt(max(0.0, self.mu * (2.0 / r - 1.0 / self.semi_major)))
        ang = true_anomaly + math.pi / 2 - self.flight_angle_at(true_anomaly)
        return Vector2.polar(mag, ang + self.argument)


class Kind(Enum):
    """Broad body category, used to draw plausible random masses and radii."""
    ARTIFICIAL = "Artificial"
    TERRESTRIAL = "Terrestrial"
    GIANT = "Giant"
    STAR = "Star"
    HOLE = "Hole"

    @classmethod
    def random(cls, rng: np.random.Generator) -> "Kind":
        members = list(cls)
        return members[int(rng.integers(len(members)))]

    def random_mass(self, rng: np.random.Generator) -> float:
        low, high = _MASS_RANGES[self]
        return float(rng.uniform(low, high))

    def random_radius(self, rng: np.random.Generator) -> float:
        low, high = _RADIUS_RANGES[self]
        return float(rng.uniform(low, high))


# kg
_MASS_RANGES = {
    Kind.ARTIFICIAL: (1.0, 1e6),
    Kind.TERRESTRIAL: (1e22, 1e25),
    Kind.GIANT: (1e25, 1e28),
    Kind.STAR: (1e28, 1e31),
    Kind.HOLE: (1e31, 1e32),
}

# m
_RADIUS_RANGES = {
    Kind.ARTIFICIAL: (1.0, 100.0),
    Kind.TERRESTRIAL: (1e6, 1e7),
    Kind.GIANT: (1e7, 1e8),
    Kind.STAR: (1e7, 1e9),
    Kind.HOLE: (1e6, 1e10),
}


@dataclass(frozen=True)
class BodySeed:
    """
    One record of a seed file: everything needed to place a body on its orbit.

    Attributes:
        name: Display name.
        mass: Mass in kg (> 0).
        color: RGBA components in [0, 1].
        radius: Display radius (≥ 0).
        orbit: Orbital elements relative to the cluster origin.
        kind: Optional category.
    """
    name: str
    mass: float
    color: tuple[float, float, float, float]
    radius: float
    orbit: Orbit
    kind: Kind | None = None
