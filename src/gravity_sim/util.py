# MIT License (see LICENSE)
"""
Utility functions for numpy vector math.

The kinematic state of every body is stored as float64 numpy arrays of shape
(2,). These helpers keep conversions and the hot-path norms in one place.
"""
from __future__ import annotations

import numpy as np


def f64(x) -> np.ndarray:
    """
    Convert any array-like to a float64 numpy array.

    Accepts tuples, lists, numpy arrays and the Vector2/3/4 value types
    (which implement ``__array__``).
    """
    return np.array(x, dtype=np.float64)


def norm2(v: np.ndarray) -> float:
    """Squared magnitude of a 2D vector. Avoids sqrt for performance."""
    return float(v[0] * v[0] + v[1] * v[1])


def norm(v: np.ndarray) -> float:
    """Magnitude (length) of a 2D vector."""
    return float(np.sqrt(norm2(v)))


def cross2(a: np.ndarray, b: np.ndarray) -> float:
    """
    2D cross product (scalar result): a × b = ax*by - ay*bx.

    The z-component of the 3D cross product (a, 0) × (b, 0).
    """
    return float(a[0] * b[1] - a[1] * b[0])


def weighted_mean(values: np.ndarray, weights: np.ndarray) -> np.ndarray:
    """
    Weighted mean of row vectors.

    Returns a zero vector when the total weight is zero, so an empty or
    massless set never divides by zero.
    """
    total = float(np.sum(weights))
    if total == 0.0:
        return np.zeros(values.shape[-1], dtype=np.float64)
    return (weights[:, None] * values).sum(axis=0) / total
