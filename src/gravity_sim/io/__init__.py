# MIT License (see LICENSE)
"""
Input/Output utilities for the gravity simulation.

This subpackage provides:
    - Seed files: orbital descriptions of bodies, loaded once per run.
    - Round-trip support: saved seeds load back identically.

Typical usage:
    from gravity_sim.io import load_seeds, load_cluster, save_seeds

    seeds = load_seeds("solar_system.json")
    cluster = load_cluster("solar_system.json", true_anomaly=0.0)
    save_seeds(seeds, "copy.json")
"""
from .json_io import (
    SeedError,
    load_cluster,
    load_seeds,
    load_seeds_raw,
    orbit_from_json,
    save_seeds,
    seed_from_json,
    seed_to_json,
)

__all__ = [
    "SeedError",
    # Loading
    "load_seeds",
    "load_seeds_raw",
    "load_cluster",
    # Saving
    "save_seeds",
    # Serialization
    "seed_from_json",
    "seed_to_json",
    "orbit_from_json",
]
