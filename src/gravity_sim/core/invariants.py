# MIT License (see LICENSE)
"""
Utilities for calculating physical invariants and conserved quantities.

Used for verifying simulation correctness and debugging stability issues.
For an isolated cluster (no wrapping, no ejection, no interactive nudges),
linear momentum, angular momentum and total energy should remain constant
within integration error.

All quantities are computed in whatever frame the bodies are currently
expressed in; compare values taken in the same frame.
"""
from __future__ import annotations
from typing import TYPE_CHECKING

import numpy as np

from ..constants import G_UNIV
from ..util import cross2, norm

if TYPE_CHECKING:
    from ..types import Body


def kinetic_energy(bodies: list["Body"]) -> float:
    """
    Calculate the total kinetic energy of a system of bodies.

    T = Σ 0.5 * m * v²

    Args:
        bodies: List of bodies.

    Returns:
        Total kinetic energy.
    """
    ke = 0.0
    for b in bodies:
        v_sq = float(np.dot(b.velocity, b.velocity))
        ke += 0.5 * b.mass * v_sq
    return ke


def potential_energy(bodies: list["Body"], g: float = G_UNIV) -> float:
    """
    Pairwise gravitational potential energy.

    U = -Σ_{i<j} G * m_i * m_j / r_ij

    Coincident pairs are skipped.
    """
    u = 0.0
    n = len(bodies)
    for i in range(n):
        bi = bodies[i]
        for j in range(i + 1, n):
            bj = bodies[j]
            r = norm(bj.position - bi.position)
            if r == 0.0:
                continue
            u -= g * bi.mass * bj.mass / r
    return u


def total_energy(bodies: list["Body"], g: float = G_UNIV) -> float:
    """Kinetic plus potential energy."""
    return kinetic_energy(bodies) + potential_energy(bodies, g)


def linear_momentum(bodies: list["Body"]) -> np.ndarray:
    """
    Calculate the total linear momentum of a system.

    P = Σ (m * v)

    Args:
        bodies: List of bodies.

    Returns:
        Total momentum vector [Px, Py].
    """
    p = np.zeros(2, dtype=np.float64)
    for b in bodies:
        p += b.mass * b.velocity
    return p


def angular_momentum(bodies: list["Body"]) -> float:
    """
    Angular momentum about the frame origin (z-component).

    L = Σ m * (r × v)
    """
    lz = 0.0
    for b in bodies:
        lz += b.mass * cross2(b.position, b.velocity)
    return lz
