# MIT License (see LICENSE)
"""
Force generators for the planar N-body simulation.

This module provides pure functions returning accelerations for one body:
Newtonian gravity against the rest of the cluster, quadratic drag, and an
interactive thrust. Unlike rigid-body force accumulators, nothing here
mutates a body; the integrator in ``cluster.py`` calls these through a
derivative evaluator and stores the combined result itself.

Key concepts:
- Gravity is evaluated over a packed (n, 4) state array [x, y, vx, vy].
- A term whose separation is below machine epsilon is the body itself and is
  skipped, so the full position array can be passed without masking.
- Complexity is O(N) per body, O(N²) per substep.
"""
from __future__ import annotations
from typing import TYPE_CHECKING

import numpy as np

from ..constants import BASE_ACCELERATION, EPSILON, G_UNIV, RESISTANCE
from ..util import norm

if TYPE_CHECKING:
    from ..cluster import ClusterSnapshot
    from ..controls import Direction


def gravity(
    position: np.ndarray,
    positions: np.ndarray,
    masses: np.ndarray,
    g: float = G_UNIV,
) -> np.ndarray:
    """
    Gravitational acceleration at ``position`` due to a set of point masses.

    Implements a = Σ_j G·m_j·(p_j − p) / |p_j − p|³.

    Args:
        position: [x, y] of the attracted body.
        positions: (n, 2) positions of every body, the attracted one included.
        masses: (n,) masses matching ``positions``.
        g: Gravitational constant.

    Returns:
        Acceleration [ax, ay]. Zero for an empty or singleton set.
    """
    if len(positions) == 0:
        return np.zeros(2, dtype=np.float64)

    delta = positions - position
    r2 = np.einsum("ij,ij->i", delta, delta)
    r = np.sqrt(r2)
    mask = r >= EPSILON
    if not mask.any():
        return np.zeros(2, dtype=np.float64)

    w = masses[mask] / (r2[mask] * r[mask])
    return g * (w[:, None] * delta[mask]).sum(axis=0)


def drag(velocity: np.ndarray, k: float = RESISTANCE) -> np.ndarray:
    """
    Quadratic drag acceleration a = -k·|v|·v.

    Not used by the default evaluator; available to custom ones.
    """
    return -k * norm(velocity) * velocity


def push(direction: "Direction") -> np.ndarray:
    """Interactive thrust of magnitude BASE_ACCELERATION along ``direction``."""
    return direction.as_vector().as_array() * BASE_ACCELERATION


def gravity_derivative(
    snapshot: "ClusterSnapshot",
    index: int,
    g: float = G_UNIV,
    out: np.ndarray | None = None,
) -> np.ndarray:
    """
    Packed time derivative of body ``index``'s state.

    Returns [vx, vy, ax, ay]: the body's velocity followed by its gravitational
    acceleration, both read from the snapshot as it currently stands (which
    may hold a stage perturbation of that one body).

    Writes into ``out`` when given, so a caller can reuse one buffer.
    """
    state = snapshot.state
    if out is None:
        out = np.empty(4, dtype=np.float64)
    out[:2] = state[index, 2:]
    out[2:] = gravity(state[index, :2], state[:, :2], snapshot.masses, g)
    return out
