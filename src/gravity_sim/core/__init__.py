# MIT License (see LICENSE)
"""
Core physics components.

This subpackage provides:
    - Force generators: Gravity, quadratic drag, interactive push, and the
      packed derivative evaluated by the cluster integrator.
    - Potential: Scalar gravitational potential.
    - Invariants: Momentum and energy diagnostics.

Typical usage:
    from gravity_sim.core import gravity, total_energy

    acc = gravity(positions[0], positions, masses, g=1.0)
    energy = total_energy(cluster.bodies, g=1.0)
"""
from .forces import drag, gravity, gravity_derivative, push
from .invariants import (
    angular_momentum,
    kinetic_energy,
    linear_momentum,
    potential_energy,
    total_energy,
)
from .potentials import potential

__all__ = [
    # Forces
    "gravity",
    "gravity_derivative",
    "drag",
    "push",
    # Potential
    "potential",
    # Invariants
    "kinetic_energy",
    "potential_energy",
    "total_energy",
    "linear_momentum",
    "angular_momentum",
]
