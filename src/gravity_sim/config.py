# MIT License (see LICENSE)
"""
Simulation configuration.

A single dataclass holds every host-side parameter: window geometry, scales,
oversampling, seeding options and the display/behaviour toggles driven by
interactive commands.
"""
from __future__ import annotations
import math
from dataclasses import dataclass

from .constants import DEFAULT_OVERSAMPLING, DEFAULT_WINDOW_SIZE, G_UNIV
from .vector import Vector2


@dataclass
class SimulationConfig:
    """
    Parameters of one simulation run.

    Attributes:
        seed_path: Seed file to load bodies from (None for an empty cluster).
        width: Window width in px.
        height: Window height in px.
        distance_scale: Pixels per world unit.
        time_scale: World seconds elapsed per real second.
        oversampling: Integration substeps per update.
        gravitational_constant: G used by the gravity evaluator.
        true_anomaly: Seeding anomaly shared by every body; None draws one
                      per body at random.
        rng_seed: Seed of the numpy random generator (None for entropy).
        bounded: Wrap bodies at the window edges.
        trajectory: Record trails.
        pause: Freeze integration.
        eject_outliers: Run outlier ejection after each update.
    """
    seed_path: str | None = None
    width: float = DEFAULT_WINDOW_SIZE[0]
    height: float = DEFAULT_WINDOW_SIZE[1]
    distance_scale: float = 1.0
    time_scale: float = 1.0
    oversampling: int = DEFAULT_OVERSAMPLING
    gravitational_constant: float = G_UNIV
    true_anomaly: float | None = None
    rng_seed: int | None = None

    bounded: bool = False
    trajectory: bool = True
    pause: bool = False
    eject_outliers: bool = False

    def validate(self) -> None:
        """
        Raises:
            ValueError: On a non-positive size, scale or oversampling, or a
                        non-finite gravitational constant.
        """
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Window size must be positive, got {self.width}x{self.height}")
        if self.distance_scale <= 0:
            raise ValueError(f"distance_scale must be positive, got {self.distance_scale}")
        if self.time_scale <= 0:
            raise ValueError(f"time_scale must be positive, got {self.time_scale}")
        if self.oversampling < 1:
            raise ValueError(f"oversampling must be >= 1, got {self.oversampling}")
        if not math.isfinite(self.gravitational_constant):
            raise ValueError(f"gravitational_constant must be finite, got {self.gravitational_constant}")

    @property
    def middle(self) -> Vector2:
        """Window center in px."""
        return Vector2(0.5 * self.width, 0.5 * self.height)

    @property
    def world_middle(self) -> Vector2:
        """Half extents of the visible area in world units (the wrapping box)."""
        return self.middle / self.distance_scale

    def increase_oversampling(self) -> None:
        self.oversampling *= 2

    def decrease_oversampling(self) -> None:
        self.oversampling = max(self.oversampling // 2, 1)

    def increase_distance(self) -> None:
        self.distance_scale *= 2.0

    def decrease_distance(self) -> None:
        self.distance_scale /= 2.0

    def increase_time(self) -> None:
        self.time_scale *= 2.0

    def decrease_time(self) -> None:
        self.time_scale /= 2.0
