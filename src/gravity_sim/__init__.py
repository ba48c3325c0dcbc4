# MIT License (see LICENSE)
"""
gravity_sim - A planar N-body gravity simulation engine.

This package simulates point masses under mutual Newtonian gravity for an
interactive viewer: bodies are seeded from orbital elements, advanced by an
acceleration-averaging RK4 integrator, re-centered on a selectable reference
frame, wrapped at the window edges and pruned of runaway outliers.

Main entry points:
    - Cluster: The body collection, its frame/selection and the integrator.
    - Body: A named point mass with display attributes.
    - Orbit, BodySeed: Orbital elements used to seed bodies.
    - Simulator, SimulationConfig: Host-side stepping loop and its parameters.

Submodules:
    - core: Force model, potential and conserved-quantity diagnostics.
    - io: Seed file reading and writing.
    - controls: Directions, commands and the interaction state machine.
    - cli: Headless command line runner (``python -m gravity_sim``).

Example:
    from gravity_sim import Cluster, Body, Circle, KinematicPoint

    star = Body("star", 1.0, Circle(KinematicPoint.zeros(), 1.0))
    planet = Body("planet", 1e-3, Circle(KinematicPoint.inertial((1, 0), (0, 1)), 0.1))
    cluster = Cluster([star, planet], g=1.0)
    cluster.integrate(dt=1e-3, oversampling=64)
"""
from .cluster import Cluster, ClusterSnapshot, Frame
from .config import SimulationConfig
from .controls import Command, Direction, State, Status
from .orbital import BodySeed, Inclination, Kind, Orbit
from .point import KinematicPoint
from .simulator import Simulator
from .types import Body, Circle
from .vector import Vector2, Vector3, Vector4

__all__ = [
    # Core simulation
    "Cluster",
    "ClusterSnapshot",
    "Frame",
    "Body",
    "Circle",
    "KinematicPoint",
    # Seeding
    "Orbit",
    "Inclination",
    "Kind",
    "BodySeed",
    # Host
    "Simulator",
    "SimulationConfig",
    "Command",
    "Direction",
    "State",
    "Status",
    # Vectors
    "Vector2",
    "Vector3",
    "Vector4",
]
