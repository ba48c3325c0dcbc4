import json
import logging
import math
import numpy as np
import pytest
from gravity_sim.io.json_io import (
    SeedError, load_cluster, load_seeds, save_seeds, seed_from_json,
)
from gravity_sim.orbital import Kind

def _record(**overrides):
    d = {
        "name": "planet",
        "mass": 1e-3,
        "kind": "Terrestrial",
        "color": [0.2, 0.4, 1.0, 1.0],
        "radius": 0.01,
        "orbit": {
            "mu": 1.0,
            "apoapsis": 2.0,
            "periapsis": 0.5,
            "argument": 0.0,
            "inclination": {"value": 0.1, "argument": 0.2},
        },
    }
    d.update(overrides)
    return d

def _star():
    return _record(name="star", mass=1.0, kind="Star", orbit={"mu": 0.0, "apoapsis": 0.0, "periapsis": 0.0})

def _write(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)

def test_load_seeds(tmp_path):
    path = _write(tmp_path / "seeds.json", [_star(), _record()])
    seeds = load_seeds(path)
    assert [s.name for s in seeds] == ["star", "planet"]
    planet = seeds[1]
    assert planet.kind is Kind.TERRESTRIAL
    assert planet.color == (0.2, 0.4, 1.0, 1.0)
    assert planet.orbit.eccentricity == pytest.approx(0.6)
    assert planet.orbit.inclination.value == pytest.approx(0.1)
    # optional fields default
    assert seeds[0].orbit.argument == 0.0

def test_bodies_key_accepted(tmp_path):
    path = _write(tmp_path / "seeds.json", {"bodies": [_record()]})
    assert len(load_seeds(path)) == 1

def test_save_and_load_round_trip(tmp_path):
    seeds = load_seeds(_write(tmp_path / "a.json", [_star(), _record()]))
    out = str(tmp_path / "b.json")
    save_seeds(seeds, out)
    assert load_seeds(out) == seeds

def test_load_cluster_at_anomaly(tmp_path):
    path = _write(tmp_path / "seeds.json", [_star(), _record()])
    cluster = load_cluster(path, true_anomaly=0.0, g=1.0)
    assert len(cluster) == 2
    assert cluster.g == 1.0
    np.testing.assert_allclose(cluster[1].position, [0.5, 0.0], atol=1e-12)
    np.testing.assert_allclose(cluster[1].velocity, [0.0, math.sqrt(3.2)], atol=1e-6)

def test_load_cluster_random_is_reproducible(tmp_path):
    path = _write(tmp_path / "seeds.json", [_star(), _record()])
    a = load_cluster(path, rng=np.random.default_rng(1))
    b = load_cluster(path, rng=np.random.default_rng(1))
    np.testing.assert_array_equal(a[1].position, b[1].position)

def test_missing_file(tmp_path):
    with pytest.raises(SeedError):
        load_seeds(str(tmp_path / "nope.json"))

def test_invalid_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("[{", encoding="utf-8")
    with pytest.raises(SeedError):
        load_seeds(str(path))

def test_invalid_utf8(tmp_path):
    path = tmp_path / "bad.json"
    path.write_bytes(b"[\xff\xfe]")
    with pytest.raises(SeedError):
        load_seeds(str(path))

def test_not_a_list(tmp_path):
    with pytest.raises(SeedError):
        load_seeds(_write(tmp_path / "seeds.json", {"name": "x"}))

@pytest.mark.parametrize("overrides", [
    {"mass": 0.0},
    {"mass": -1.0},
    {"mass": True},
    {"mass": "heavy"},
    {"name": 3},
    {"radius": -0.5},
    {"color": [0.0, 0.0, 0.0]},
    {"color": [0.0, 0.0, 0.0, 1.5]},
    {"orbit": {"mu": 1.0, "apoapsis": -2.0, "periapsis": 0.5}},
    {"orbit": {"mu": 1.0, "apoapsis": 2.0}},
    {"orbit": [1.0, 2.0, 0.5]},
    {"orbit": {"mu": -1.0, "apoapsis": 2.0, "periapsis": 0.5}},
])
def test_invalid_records(overrides):
    with pytest.raises(SeedError):
        seed_from_json(_record(**overrides))

def test_missing_orbit():
    d = _record()
    del d["orbit"]
    with pytest.raises(SeedError):
        seed_from_json(d)

def test_bad_record_fails_whole_file(tmp_path):
    path = _write(tmp_path / "seeds.json", [_star(), _record(mass=-1.0)])
    with pytest.raises(SeedError, match="body #1"):
        load_seeds(path)

def test_unknown_kind_is_ignored(caplog):
    with caplog.at_level(logging.WARNING, logger="gravity_sim.io.json_io"):
        seed = seed_from_json(_record(kind="Comet"))
    assert seed.kind is None
    assert "Comet" in caplog.text

def test_seed_error_is_value_error():
    assert issubclass(SeedError, ValueError)

def test_radial_orbit_seeds_at_focus(tmp_path):
    orbit = {"mu": 1.0, "apoapsis": 2.0, "periapsis": 0.0}
    path = _write(tmp_path / "seeds.json", [_star(), _record(orbit=orbit)])
    cluster = load_cluster(path, true_anomaly=math.pi, g=1.0)
    np.testing.assert_allclose(cluster[1].position, cluster[0].position, atol=1e-12)
    assert np.all(np.isfinite(cluster[1].velocity))
