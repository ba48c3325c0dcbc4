# MIT License (see LICENSE)
"""
Cluster: the body collection and its integrator.

A Cluster owns an ordered list of bodies (list order is identity), a
synthetic barycenter body, a reference frame and a selection cursor.

Coordinates
-----------
Bodies are stored relative to ``origin``, the absolute kinematic state of the
frame referent (the zero point, the selected body or the barycenter). The
barycenter body is kept in the same relative coordinates. Switching frame or
selection computes the new absolute referent and shifts every body by the
difference, so the rebase is a pure translation in position and velocity.

Integration
-----------
``integrate(dt, oversampling)`` runs in absolute coordinates:

1. De-frame: add ``origin`` back into every body and the barycenter.
2. ``oversampling`` times: for each body i, evaluate the packed derivative
   four times (RK4 stages), perturbing only row i of a snapshot of the
   committed state and restoring it afterwards. The lower half of
   (k1 + 2k2 + 2k3 + k4) / 6 becomes body i's acceleration. Once every body
   has one, a single semi-implicit Euler step commits all of them.
3. Recompute the barycenter and the absolute origin.
4. Re-frame: subtract the new origin.

RK4 only averages the acceleration here; position and velocity advance by one
Euler commit per substep.
"""
from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Callable, Iterator, Sequence

import numpy as np

from .constants import BASE_TRANSLATION, G_UNIV, OUTLIER_SIGMA, SPEED_SCALING_FACTOR
from .core.forces import gravity_derivative
from .orbital import BodySeed
from .point import KinematicPoint
from .types import Body
from .util import f64, weighted_mean
from .vector import Vector2

logger = logging.getLogger(__name__)


class Frame(Enum):
    """Reference frame of the displayed coordinates."""
    ZERO = "zero"
    CURRENT = "current"
    BARYCENTER = "barycenter"

    def next(self) -> "Frame":
        """Cyclic successor: ZERO → CURRENT → BARYCENTER → ZERO."""
        return _NEXT_FRAME[self]


_NEXT_FRAME = {
    Frame.ZERO: Frame.CURRENT,
    Frame.CURRENT: Frame.BARYCENTER,
    Frame.BARYCENTER: Frame.ZERO,
}

# k1 + 2k2 + 2k3 + k4, over 6
RK4_WEIGHTS = np.array([1.0, 2.0, 2.0, 1.0]) / 6.0


@dataclass
class ClusterSnapshot:
    """
    Packed state read by derivative evaluators.

    Attributes:
        state: (n, 4) float64 rows [x, y, vx, vy], one per body.
        masses: (n,) float64 masses.

    During integration row i may temporarily hold an RK4 stage of body i;
    every other row holds committed state.
    """
    state: np.ndarray
    masses: np.ndarray

    @classmethod
    def of(cls, bodies: Sequence[Body]) -> "ClusterSnapshot":
        snapshot = cls(
            state=np.empty((len(bodies), 4), dtype=np.float64),
            masses=f64([b.mass for b in bodies]),
        )
        snapshot.capture([b.point for b in bodies])
        return snapshot

    def capture(self, points: Sequence[KinematicPoint]) -> None:
        """Copy positions and velocities of ``points`` into ``state`` in place."""
        for i, p in enumerate(points):
            self.state[i, :2] = p.position
            self.state[i, 2:] = p.velocity

    def __len__(self) -> int:
        return len(self.masses)


Derivative = Callable[[ClusterSnapshot, int], np.ndarray]


class Cluster:
    """
    Ordered set of gravitating bodies with frame and selection management.

    Attributes:
        bodies: Bodies in insertion order.
        barycenter: Synthetic body holding the total mass and the mass-weighted
                    mean position/velocity (relative coordinates).
        origin: Absolute state of the frame referent.
        current: Index of the selected body (0 when empty).
        frame: Active reference frame.
        g: Gravitational constant used by the default evaluator.
    """

    def __init__(self, bodies: Sequence[Body] | None = None, g: float = G_UNIV, frame: Frame = Frame.ZERO):
        self.bodies: list[Body] = list(bodies) if bodies else []
        self.barycenter = Body.barycenter()
        self.origin = KinematicPoint.zeros()
        self.current = 0
        self.frame = Frame.ZERO
        self.g = g
        self.update_barycenter()
        if frame is not Frame.ZERO:
            self.set_frame(frame)

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    @classmethod
    def orbital(cls, seeds: Sequence[BodySeed], true_anomalies: Sequence[float], g: float = G_UNIV) -> "Cluster":
        """One body per seed, each placed at its own true anomaly."""
        if len(seeds) != len(true_anomalies):
            raise ValueError(
                f"Got {len(seeds)} seeds but {len(true_anomalies)} true anomalies"
            )
        bodies = [Body.orbital(s, float(a)) for s, a in zip(seeds, true_anomalies)]
        return cls(bodies, g=g)

    @classmethod
    def orbital_at(cls, seeds: Sequence[BodySeed], true_anomaly: float, g: float = G_UNIV) -> "Cluster":
        return cls.orbital(seeds, [true_anomaly] * len(seeds), g=g)

    @classmethod
    def orbital_at_random(cls, seeds: Sequence[BodySeed], rng: np.random.Generator, g: float = G_UNIV) -> "Cluster":
        """Seed every body at an independent uniform anomaly in [0, 2π)."""
        anomalies = rng.uniform(0.0, 2.0 * math.pi, size=len(seeds))
        return cls.orbital(seeds, anomalies.tolist(), g=g)

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.bodies)

    def __iter__(self) -> Iterator[Body]:
        return iter(self.bodies)

    def __getitem__(self, index: int) -> Body:
        return self.bodies[index]

    def __repr__(self) -> str:
        return (
            f"Cluster(n={len(self.bodies)}, frame={self.frame.name}, "
            f"current={self.current}, mass={self.barycenter.mass:g})"
        )

    def is_empty(self) -> bool:
        return not self.bodies

    @property
    def current_body(self) -> Body | None:
        return self.bodies[self.current] if self.bodies else None

    @property
    def last(self) -> Body | None:
        return self.bodies[-1] if self.bodies else None

    def snapshot(self) -> ClusterSnapshot:
        return ClusterSnapshot.of(self.bodies)

    # ------------------------------------------------------------------
    # Barycenter and frame
    # ------------------------------------------------------------------

    def update_barycenter(self) -> None:
        """Recompute total mass and mass-weighted position, velocity and acceleration."""
        center = self.barycenter.point
        self.barycenter.mass = float(sum(b.mass for b in self.bodies))
        if not self.bodies:
            center.reset0()
            return
        masses = f64([b.mass for b in self.bodies])
        center.position[:] = weighted_mean(np.array([b.position for b in self.bodies]), masses)
        center.velocity[:] = weighted_mean(np.array([b.velocity for b in self.bodies]), masses)
        center.acceleration[:] = weighted_mean(np.array([b.acceleration for b in self.bodies]), masses)

    def _referent(self, offset: KinematicPoint) -> KinematicPoint:
        """
        Absolute state of the frame referent.

        ``offset`` is the origin the body coordinates are currently relative
        to. An empty cluster in CURRENT frame keeps ``offset``.
        """
        if self.frame is Frame.ZERO:
            return KinematicPoint.zeros()
        if self.frame is Frame.CURRENT:
            if not self.bodies:
                return offset.copy()
            ref = self.bodies[self.current].point
        else:
            ref = self.barycenter.point
        return KinematicPoint.inertial(ref.position + offset.position, ref.velocity + offset.velocity)

    def rebase(self) -> None:
        """Recompute the origin for the active frame and shift every body onto it."""
        old = self.origin
        new = self._referent(old)
        self.origin = new
        for body in self.bodies:
            body.point.set_origin(new, old)
        self.barycenter.point.set_origin(new, old)

    def set_frame(self, frame: Frame) -> None:
        self.frame = frame
        self.rebase()
        self.update_barycenter()
        logger.debug("frame set to %s, origin %s", frame.name, self.origin.position.tolist())

    def next_frame(self) -> Frame:
        self.set_frame(self.frame.next())
        return self.frame

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def increase_current(self, bypass_last: bool = False) -> None:
        """
        Select the next body.

        With ``bypass_last`` the last body (one still being placed) cannot
        become the selection.
        """
        if not self.bodies:
            return
        limit = len(self.bodies) - (2 if bypass_last else 1)
        if self.current < limit:
            self.current += 1
            self._selection_changed()

    def decrease_current(self) -> None:
        if not self.bodies:
            return
        if self.current > 0:
            self.current -= 1
            self._selection_changed()

    def _selection_changed(self) -> None:
        if self.frame is Frame.CURRENT:
            self.rebase()
        self.update_barycenter()
        logger.debug("selected body %d", self.current)

    def _clamp_current(self) -> None:
        self.current = min(self.current, max(len(self.bodies) - 1, 0))

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def push(self, body: Body) -> None:
        """
        Append a body, expressed in the current display coordinates.

        The selection is kept; only the first body of an empty cluster
        becomes selected.
        """
        was_empty = not self.bodies
        self.bodies.append(body)
        if was_empty:
            self.current = 0
            if self.frame is Frame.CURRENT:
                self.rebase()
        self.update_barycenter()
        logger.debug("pushed %r (mass %g), %d bodies", body.name, body.mass, len(self.bodies))

    def pop(self) -> Body | None:
        """Remove and return the last body; None on an empty cluster."""
        if not self.bodies:
            return None
        return self.remove(len(self.bodies) - 1)

    def remove(self, index: int) -> Body | None:
        """Remove and return the body at ``index``; None when out of range."""
        if not 0 <= index < len(self.bodies):
            return None
        body = self.bodies.pop(index)
        self._clamp_current()
        self.update_barycenter()
        if self.frame is Frame.CURRENT:
            self.rebase()
            self.update_barycenter()
        logger.debug("removed %r at %d, %d bodies left", body.name, index, len(self.bodies))
        return body

    def remove_current(self) -> Body | None:
        if not self.bodies:
            return None
        return self.remove(self.current)

    def remove_aways(self) -> Body | None:
        """
        Eject the farthest body when it is a statistical outlier.

        Distances are measured to the barycenter. Mean and population standard
        deviation are taken over every body but the farthest one (over all of
        them when fewer than 3 bodies exist). The farthest body is removed when
        its distance exceeds mean + OUTLIER_SIGMA·std.

        Returns:
            The ejected body, or None.
        """
        n = len(self.bodies)
        if n == 0:
            return None
        positions = np.array([b.position for b in self.bodies])
        distances = np.linalg.norm(positions - self.barycenter.position, axis=1)
        far = int(np.argmax(distances))
        rest = np.delete(distances, far) if n >= 3 else distances
        threshold = float(rest.mean() + OUTLIER_SIGMA * rest.std())
        if distances[far] <= threshold:
            return None
        body = self.remove(far)
        logger.warning(
            "ejected %r: distance %.6g exceeds outlier threshold %.6g",
            body.name, distances[far], threshold,
        )
        return body

    # ------------------------------------------------------------------
    # Per-body operations on the selection
    # ------------------------------------------------------------------

    def reset_current(self) -> None:
        """Stop the selected body at the frame origin and clear its trail."""
        if not self.bodies:
            return
        point = self.bodies[self.current].point
        point.reset()
        point.clear_trajectory()
        self.update_barycenter()

    def translate_current(self, direction, step: float = BASE_TRANSLATION) -> None:
        if not self.bodies:
            return
        self.bodies[self.current].point.translate(direction, step)
        self.update_barycenter()

    def bound_current(self, middle: Vector2) -> bool:
        if not self.bodies:
            return False
        wrapped = self.bodies[self.current].shape.bound(middle)
        self.update_barycenter()
        return wrapped

    def clear_current_trajectory(self) -> None:
        if self.bodies:
            self.bodies[self.current].point.clear_trajectory()

    def update_current_trajectory(self) -> None:
        if self.bodies:
            self.bodies[self.current].point.update_trajectory()

    # ------------------------------------------------------------------
    # Whole-cluster operations
    # ------------------------------------------------------------------

    def bound(self, middle: Vector2) -> int:
        """Wrap every body at the edges of [-middle, +middle]. Returns the number wrapped."""
        if not self.bodies:
            return 0
        wrapped = sum(1 for b in self.bodies if b.shape.bound(middle))
        self.update_barycenter()
        return wrapped

    def update_trajectory(self) -> None:
        for body in self.bodies:
            body.point.update_trajectory()

    def clear_trajectory(self) -> None:
        for body in self.bodies:
            body.point.clear_trajectory()

    def accelerate(self, dt: float) -> None:
        """Commit one semi-implicit Euler step on every body and the barycenter."""
        for body in self.bodies:
            body.point.accelerate(dt)
        self.barycenter.point.accelerate(dt)

    # ------------------------------------------------------------------
    # Interactive placement
    # ------------------------------------------------------------------

    def wait_drop(self, cursor, middle: Vector2, scale: float) -> None:
        """Move the last body under the window-space ``cursor``."""
        if not self.bodies:
            return
        shape = self.bodies[-1].shape
        shape.set_cursor_pos(cursor, middle, scale)
        shape.center.clear_trajectory()
        self.update_barycenter()

    def wait_speed(self, cursor, middle: Vector2, scale: float, speed_scaling: float = SPEED_SCALING_FACTOR) -> None:
        """Give the last body a velocity pointing from it to the ``cursor``."""
        if not self.bodies:
            return
        shape = self.bodies[-1].shape
        shape.set_cursor_speed(cursor, middle, scale, speed_scaling)
        shape.center.clear_trajectory()
        self.update_barycenter()

    # ------------------------------------------------------------------
    # Integration
    # ------------------------------------------------------------------

    def integrate(self, dt: float, oversampling: int = 1, derivative: Derivative | None = None) -> None:
        """
        Advance the cluster by ``oversampling`` substeps of ``dt`` each.

        Args:
            dt: Substep duration.
            oversampling: Number of substeps (≥ 1).
            derivative: ``f(snapshot, i) -> [vx, vy, ax, ay]``. Defaults to
                        Newtonian gravity with this cluster's ``g``.

        Raises:
            ValueError: If ``oversampling < 1`` or ``dt`` is not finite.
        """
        if oversampling < 1:
            raise ValueError(f"oversampling must be >= 1, got {oversampling}")
        if not math.isfinite(dt):
            raise ValueError(f"dt must be finite, got {dt}")
        if not self.bodies:
            return
        if derivative is None:
            derivative = partial(gravity_derivative, g=self.g, out=np.empty(4, dtype=np.float64))

        n = len(self.bodies)
        points = [b.point for b in self.bodies]
        center = self.barycenter.point
        logger.debug("integrate dt=%g oversampling=%d bodies=%d", dt, oversampling, n)

        # De-frame
        for p in (*points, center):
            p.position += self.origin.position
            p.velocity += self.origin.velocity

        snapshot = ClusterSnapshot.of(self.bodies)
        state = snapshot.state
        saved = np.empty(4, dtype=np.float64)
        step = np.empty(4, dtype=np.float64)
        ks = np.empty((4, 4), dtype=np.float64)
        acc = np.empty((n, 2), dtype=np.float64)
        half = 0.5 * dt

        for _ in range(oversampling):
            snapshot.capture(points)
            for i in range(n):
                row = state[i]
                saved[:] = row
                ks[0] = derivative(snapshot, i)
                np.multiply(ks[0], half, out=step)
                np.add(saved, step, out=row)
                ks[1] = derivative(snapshot, i)
                np.multiply(ks[1], half, out=step)
                np.add(saved, step, out=row)
                ks[2] = derivative(snapshot, i)
                np.multiply(ks[2], dt, out=step)
                np.add(saved, step, out=row)
                ks[3] = derivative(snapshot, i)
                row[:] = saved
                np.dot(RK4_WEIGHTS, ks[:, 2:], out=acc[i])

            for p, a in zip(points, acc):
                p.acceleration[:] = a
            center.acceleration[:] = weighted_mean(acc, snapshot.masses)
            self.accelerate(dt)

        self.update_barycenter()
        self.origin = self._referent(KinematicPoint.zeros())

        # Re-frame
        for p in (*points, center):
            p.position -= self.origin.position
            p.velocity -= self.origin.velocity
