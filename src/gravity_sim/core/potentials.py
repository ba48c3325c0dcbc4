# MIT License (see LICENSE)
"""Scalar gravitational potential."""
from __future__ import annotations

import numpy as np

from ..constants import EPSILON, G_UNIV


def potential(
    position: np.ndarray,
    positions: np.ndarray,
    masses: np.ndarray,
    g: float = G_UNIV,
) -> float:
    """
    Magnitude of the gravitational potential at ``position``: Σ_j G·m_j / |p_j − p|.

    The physical potential is the negative of this value. Sources closer than
    machine epsilon (the body itself) are skipped.
    """
    if len(positions) == 0:
        return 0.0
    delta = positions - position
    r = np.sqrt(np.einsum("ij,ij->i", delta, delta))
    mask = r >= EPSILON
    return float(g * np.sum(masses[mask] / r[mask]))
