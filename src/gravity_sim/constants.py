# MIT License (see LICENSE)
"""
Physical and numerical constants used throughout the simulation.

Distances are in meters, masses in kilograms and times in seconds unless a
caller rescales them (the seed file and the tests are free to use G = 1).
"""
from __future__ import annotations
import sys

# Newtonian constant of gravitation, G = 6.67430 × 10⁻¹¹ m³·kg⁻¹·s⁻²
# Reference: https://physics.nist.gov/cgi-bin/cuu/Value?bg
G_UNIV: float = 6.67430e-11

# Machine epsilon for float64. Distances below it are treated as self-interaction
# and orbits with an axis below it are degenerate.
EPSILON: float = sys.float_info.epsilon

# Number of past positions kept by every kinematic point for trail rendering.
TRAJECTORY_SIZE: int = 256

# Displacement applied by one interactive nudge (world units per update).
BASE_TRANSLATION: float = 1.0

# Magnitude of the interactive thrust returned by forces.push().
BASE_ACCELERATION: float = 500.0

# Quadratic drag coefficient k in a = -k·|v|·v.
RESISTANCE: float = 0.001

# Cursor displacement (world units) that maps to one unit of launch velocity
# in the interactive placement protocol.
SPEED_SCALING_FACTOR: float = 1.0

# A body is ejected when its barycentric distance exceeds mean + OUTLIER_SIGMA·std.
OUTLIER_SIGMA: float = 1000.0

# Host defaults
DEFAULT_OVERSAMPLING: int = 64
DEFAULT_WINDOW_SIZE: tuple[float, float] = (640.0, 640.0)
