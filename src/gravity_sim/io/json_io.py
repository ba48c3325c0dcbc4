# MIT License (see LICENSE)
"""
JSON serialization and deserialization of seed files.

A seed file describes the bodies of a cluster by their orbital elements. It
is read once at construction; every record is parsed and validated before
any body is created, so a bad file never partially seeds a cluster.

JSON Schema Overview:
---------------------
[                                  # or {"bodies": [...]}
  {
    "name": string,                # Required
    "mass": float,                 # Required, > 0
    "color": [r, g, b, a],         # Required, each in [0, 1]
    "radius": float,               # Required, >= 0
    "kind": string,                # Optional: "Artificial", "Terrestrial",
                                   #   "Giant", "Star" or "Hole"
    "orbit": {                     # Required
      "mu": float,                 # Required, G·M of the central body
      "apoapsis": float,           # Required, >= 0
      "periapsis": float,          # Required, >= 0
      "argument": float,           # Radians, default: 0
      "inclination": {             # Optional, ignored by the planar engine
        "value": float,            # Default: 0
        "argument": float          # Default: 0
      }
    }
  }
]
"""
from __future__ import annotations
import json
import logging
import math
from typing import Any

import numpy as np

from ..cluster import Cluster
from ..constants import G_UNIV
from ..orbital import BodySeed, Inclination, Kind, Orbit

logger = logging.getLogger(__name__)


class SeedError(ValueError):
    """A seed file could not be read, parsed or validated."""


def load_seeds_raw(path: str) -> Any:
    """
    Load raw JSON data from a seed file without object construction.

    Raises:
        SeedError: If the file cannot be read or is not valid JSON.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise SeedError(f"Cannot read seed file {path!r}: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise SeedError(f"Invalid JSON in seed file {path!r}: {e}") from e


def load_seeds(path: str) -> list[BodySeed]:
    """
    Load and validate every record of a seed file.

    Args:
        path: Path to the JSON seed file.

    Returns:
        One BodySeed per record, in file order.

    Raises:
        SeedError: On any read, parse or validation failure.
    """
    data = load_seeds_raw(path)
    if isinstance(data, dict):
        data = data.get("bodies")
    if not isinstance(data, list):
        raise SeedError(f"Seed file {path!r} must hold a list of bodies")

    seeds = []
    for i, record in enumerate(data):
        try:
            seeds.append(seed_from_json(record))
        except SeedError as e:
            raise SeedError(f"{path}: body #{i}: {e}") from e
    logger.info("loaded %d seeds from %s", len(seeds), path)
    return seeds


def load_cluster(
    path: str,
    true_anomaly: float | None = None,
    rng: np.random.Generator | None = None,
    g: float = G_UNIV,
) -> Cluster:
    """
    Build a Cluster from a seed file.

    Every body is placed at ``true_anomaly``, or at independent random
    anomalies drawn from ``rng`` when it is None.
    """
    seeds = load_seeds(path)
    if true_anomaly is not None:
        return Cluster.orbital_at(seeds, true_anomaly, g=g)
    return Cluster.orbital_at_random(seeds, rng if rng is not None else np.random.default_rng(), g=g)


def seed_from_json(d: Any) -> BodySeed:
    """
    Parse a single seed record.

    Raises:
        SeedError: If a field is missing, has the wrong type or is out of range.
    """
    if not isinstance(d, dict):
        raise SeedError(f"record must be an object, got {type(d).__name__}")

    name = d.get("name")
    if not isinstance(name, str):
        raise SeedError("'name' must be a string")

    mass = _number(d, "mass")
    if mass <= 0:
        raise SeedError(f"'mass' must be positive, got {mass}")

    radius = _number(d, "radius")
    if radius < 0:
        raise SeedError(f"'radius' must be non-negative, got {radius}")

    color = d.get("color")
    if not isinstance(color, list) or len(color) != 4:
        raise SeedError("'color' must be a list of 4 numbers")
    components = tuple(_number({"color": c}, "color") for c in color)
    if any(c < 0.0 or c > 1.0 for c in components):
        raise SeedError(f"'color' components must lie in [0, 1], got {list(components)}")

    kind = None
    if d.get("kind") is not None:
        try:
            kind = Kind(d["kind"])
        except ValueError:
            logger.warning("unknown kind %r for body %r, ignored", d["kind"], name)

    if "orbit" not in d:
        raise SeedError("missing required field 'orbit'")

    return BodySeed(
        name=name,
        mass=mass,
        color=components,
        radius=radius,
        orbit=orbit_from_json(d["orbit"]),
        kind=kind,
    )


def orbit_from_json(d: Any) -> Orbit:
    """Parse the ``orbit`` object of a seed record."""
    if not isinstance(d, dict):
        raise SeedError("'orbit' must be an object")

    incl = d.get("inclination", {})
    if not isinstance(incl, dict):
        raise SeedError("'inclination' must be an object")

    try:
        return Orbit(
            mu=_number(d, "mu"),
            apoapsis=_number(d, "apoapsis"),
            periapsis=_number(d, "periapsis"),
            argument=_number(d, "argument", 0.0),
            inclination=Inclination(
                value=_number(incl, "value", 0.0),
                argument=_number(incl, "argument", 0.0),
            ),
        )
    except SeedError:
        raise
    except ValueError as e:
        raise SeedError(str(e)) from e


def seed_to_json(seed: BodySeed) -> dict[str, Any]:
    """Serialize a BodySeed to a dictionary (round-trip compatible)."""
    orbit = seed.orbit
    result = {
        "name": seed.name,
        "mass": seed.mass,
        "color": list(seed.color),
        "radius": seed.radius,
        "orbit": {
            "mu": orbit.mu,
            "apoapsis": orbit.apoapsis,
            "periapsis": orbit.periapsis,
            "argument": orbit.argument,
            "inclination": {
                "value": orbit.inclination.value,
                "argument": orbit.inclination.argument,
            },
        },
    }
    if seed.kind is not None:
        result["kind"] = seed.kind.value
    return result


def save_seeds(seeds: list[BodySeed], path: str, indent: int = 2) -> None:
    """Write seeds to a JSON file loadable by ``load_seeds``."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump([seed_to_json(s) for s in seeds], f, indent=indent)


def _number(d: dict[str, Any], key: str, default: float | None = None) -> float:
    """Finite float field of ``d``; bools are rejected."""
    if key not in d:
        if default is None:
            raise SeedError(f"missing required field '{key}'")
        return default
    value = d[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SeedError(f"'{key}' must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise SeedError(f"'{key}' must be finite, got {value}")
    return value
