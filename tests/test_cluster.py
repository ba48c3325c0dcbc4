import logging
import math
import numpy as np
import pytest
from gravity_sim.cluster import Cluster, Frame
from gravity_sim.controls import Direction
from gravity_sim.core.forces import gravity_derivative
from gravity_sim.core.invariants import linear_momentum, total_energy
from gravity_sim.orbital import BodySeed, Orbit
from gravity_sim.point import KinematicPoint
from gravity_sim.types import Body, Circle
from gravity_sim.vector import Vector2

WHITE = (1.0, 1.0, 1.0, 1.0)

def _body(name, mass, pos, vel=(0.0, 0.0), radius=0.0):
    return Body(name, mass, Circle(KinematicPoint.inertial(pos, vel), radius))

def _three_bodies():
    return [
        _body("a", 1.0, (1.0, 0.0), (0.0, 0.3)),
        _body("b", 2.0, (-1.0, 0.5), (0.1, -0.2)),
        _body("c", 0.5, (0.0, 3.0), (-0.4, 0.0)),
    ]

def _absolute(cluster):
    return [(b.position + cluster.origin.position, b.velocity + cluster.origin.velocity) for b in cluster]

# ---------------------------------------------------------------------------
# Barycenter
# ---------------------------------------------------------------------------

def test_barycenter_is_mass_weighted():
    cluster = Cluster([_body("a", 1.0, (0.0, 0.0), (0.0, 0.0)), _body("b", 3.0, (4.0, 0.0), (0.0, 4.0))])
    assert cluster.barycenter.mass == pytest.approx(4.0)
    np.testing.assert_allclose(cluster.barycenter.position, [3.0, 0.0])
    np.testing.assert_allclose(cluster.barycenter.velocity, [0.0, 3.0])

def test_empty_barycenter():
    cluster = Cluster()
    assert cluster.barycenter.mass == 0.0
    np.testing.assert_allclose(cluster.barycenter.position, [0.0, 0.0])
    assert cluster.current_body is None
    assert cluster.last is None

# ---------------------------------------------------------------------------
# Integration
# ---------------------------------------------------------------------------

def test_momentum_conservation_two_body():
    """
    Equal masses at (+-1, 0) on a mutual circular orbit (G=1, v=0.5).
    Total momentum starts at zero and must stay there.
    """
    cluster = Cluster([
        _body("a", 1.0, (1.0, 0.0), (0.0, 0.5)),
        _body("b", 1.0, (-1.0, 0.0), (0.0, -0.5)),
    ], g=1.0)
    for _ in range(200):
        cluster.integrate(1e-3, oversampling=10)
    p = linear_momentum(cluster.bodies)
    assert np.linalg.norm(p) < 1e-4
    np.testing.assert_allclose(cluster.barycenter.position, [0.0, 0.0], atol=1e-4)
    # still on the unit circle
    for b in cluster:
        assert np.linalg.norm(b.position) == pytest.approx(1.0, rel=1e-2)

def test_circular_orbit_one_period():
    """Light planet around a unit star: back near its start after one period T = 2 pi."""
    cluster = Cluster([
        _body("star", 1.0, (0.0, 0.0)),
        _body("planet", 1e-6, (1.0, 0.0), (0.0, 1.0)),
    ], g=1.0)
    e0 = total_energy(cluster.bodies, g=1.0)
    steps, oversampling = 500, 20
    dt = 2 * math.pi / (steps * oversampling)
    for _ in range(steps):
        cluster.integrate(dt, oversampling)
    planet = cluster[1]
    assert np.linalg.norm(planet.position) == pytest.approx(1.0, rel=2e-2)
    assert np.linalg.norm(planet.position - np.array([1.0, 0.0])) < 0.1
    assert total_energy(cluster.bodies, g=1.0) == pytest.approx(e0, rel=2e-2)

def test_integration_is_deterministic():
    a = Cluster(_three_bodies(), g=1.0)
    b = Cluster(_three_bodies(), g=1.0)
    a.integrate(1e-2, 5)
    b.integrate(1e-2, 5)
    for x, y in zip(a, b):
        assert np.array_equal(x.position, y.position)
        assert np.array_equal(x.velocity, y.velocity)

def test_custom_derivative_without_force_is_inertial():
    def free(snapshot, i):
        out = np.zeros(4)
        out[:2] = snapshot.state[i, 2:]
        return out

    cluster = Cluster([_body("a", 1.0, (0.0, 0.0), (1.0, 0.0))])
    cluster.integrate(0.1, oversampling=10, derivative=free)
    np.testing.assert_allclose(cluster[0].position, [1.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(cluster[0].velocity, [1.0, 0.0])

def test_stage_perturbation_is_scoped_to_one_body():
    """Every evaluation sees the committed state for all rows but its own."""
    cluster = Cluster(_three_bodies(), g=1.0)
    committed = cluster.snapshot().state.copy()
    seen = []

    def recording(snapshot, i):
        seen.append((i, snapshot.state.copy()))
        return gravity_derivative(snapshot, i, g=1.0)

    cluster.integrate(0.05, oversampling=1, derivative=recording)
    assert len(seen) == 4 * 3
    assert [i for i, _ in seen] == [0] * 4 + [1] * 4 + [2] * 4
    for i, state in seen:
        others = [j for j in range(3) if j != i]
        np.testing.assert_array_equal(state[others], committed[others])
    # first stage of each body is the committed state itself
    for i, state in seen[::4]:
        np.testing.assert_array_equal(state, committed)

def test_reused_derivative_buffer_matches_fresh_arrays():
    """Stage results are copied out, so a derivative may return one shared buffer."""
    fresh = Cluster(_three_bodies(), g=1.0)
    shared = Cluster(_three_bodies(), g=1.0)
    buf = np.empty(4)
    fresh.integrate(0.01, 5, derivative=lambda s, i: gravity_derivative(s, i, g=1.0))
    shared.integrate(0.01, 5, derivative=lambda s, i: gravity_derivative(s, i, g=1.0, out=buf))
    for a, b in zip(fresh, shared):
        np.testing.assert_array_equal(a.position, b.position)
        np.testing.assert_array_equal(a.velocity, b.velocity)

def test_integrate_validates_arguments():
    cluster = Cluster(_three_bodies())
    with pytest.raises(ValueError):
        cluster.integrate(0.1, oversampling=0)
    with pytest.raises(ValueError):
        cluster.integrate(float("nan"))

def test_integrate_empty_is_noop():
    cluster = Cluster()
    cluster.integrate(0.1, 4)
    assert len(cluster) == 0

# ---------------------------------------------------------------------------
# Frames
# ---------------------------------------------------------------------------

def test_frame_cycle():
    assert Frame.ZERO.next() is Frame.CURRENT
    assert Frame.CURRENT.next() is Frame.BARYCENTER
    assert Frame.BARYCENTER.next() is Frame.ZERO

def test_frame_round_trip_restores_positions():
    cluster = Cluster(_three_bodies())
    cluster.current = 1
    before = [(b.position.copy(), b.velocity.copy()) for b in cluster]
    assert cluster.next_frame() is Frame.CURRENT
    assert cluster.next_frame() is Frame.BARYCENTER
    assert cluster.next_frame() is Frame.ZERO
    for (p, v), b in zip(before, cluster):
        np.testing.assert_allclose(b.position, p, atol=1e-12)
        np.testing.assert_allclose(b.velocity, v, atol=1e-12)
    np.testing.assert_allclose(cluster.origin.position, [0.0, 0.0])

def test_current_frame_centers_selection():
    cluster = Cluster(_three_bodies(), frame=Frame.CURRENT)
    np.testing.assert_allclose(cluster[0].position, [0.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(cluster[0].velocity, [0.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(cluster.origin.position, [1.0, 0.0])
    # b keeps its offset from a
    np.testing.assert_allclose(cluster[1].position, [-2.0, 0.5])

    cluster.increase_current()
    np.testing.assert_allclose(cluster[1].position, [0.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(cluster[0].position, [2.0, -0.5])
    np.testing.assert_allclose(cluster.origin.position, [-1.0, 0.5])

def test_barycenter_frame_centers_barycenter():
    cluster = Cluster(_three_bodies())
    cluster.set_frame(Frame.BARYCENTER)
    np.testing.assert_allclose(cluster.barycenter.position, [0.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(cluster.barycenter.velocity, [0.0, 0.0], atol=1e-12)

def test_integration_independent_of_frame():
    """Absolute trajectories do not depend on the display frame."""
    zero = Cluster(_three_bodies(), g=1.0)
    bary = Cluster(_three_bodies(), g=1.0, frame=Frame.BARYCENTER)
    current = Cluster(_three_bodies(), g=1.0, frame=Frame.CURRENT)
    for _ in range(20):
        for c in (zero, bary, current):
            c.integrate(1e-2, 4)
    np.testing.assert_allclose(current[0].position, [0.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(bary.barycenter.position, [0.0, 0.0], atol=1e-12)
    for other in (bary, current):
        for (p, v), b in zip(_absolute(other), zero):
            np.testing.assert_allclose(p, b.position, atol=1e-9)
            np.testing.assert_allclose(v, b.velocity, atol=1e-9)

# ---------------------------------------------------------------------------
# Selection and structure
# ---------------------------------------------------------------------------

def test_index_clamping():
    cluster = Cluster(_three_bodies())
    cluster.decrease_current()
    assert cluster.current == 0
    for _ in range(5):
        cluster.increase_current()
    assert cluster.current == 2
    cluster.current = 0
    for _ in range(5):
        cluster.increase_current(bypass_last=True)
    assert cluster.current == 1

def test_removing_selected_last_moves_selection_back():
    cluster = Cluster(_three_bodies())
    cluster.increase_current()
    cluster.increase_current()
    assert cluster.current == 2
    popped = cluster.pop()
    assert popped.name == "c"
    assert cluster.current == 1
    removed = cluster.remove(1)
    assert removed.name == "b"
    assert cluster.current == 0
    assert cluster.barycenter.mass == pytest.approx(1.0)

def test_remove_out_of_range_is_noop():
    cluster = Cluster(_three_bodies())
    assert cluster.remove(3) is None
    assert cluster.remove(-1) is None
    assert len(cluster) == 3

def test_push_keeps_selection():
    cluster = Cluster()
    cluster.push(_body("a", 1.0, (1.0, 0.0)))
    assert cluster.current == 0
    cluster.push(_body("b", 3.0, (5.0, 0.0)))
    assert cluster.current == 0
    assert cluster.last.name == "b"
    assert cluster.barycenter.mass == pytest.approx(4.0)
    np.testing.assert_allclose(cluster.barycenter.position, [4.0, 0.0])

def test_push_first_body_in_current_frame_recenters():
    cluster = Cluster(frame=Frame.CURRENT)
    cluster.push(_body("a", 1.0, (2.0, 3.0)))
    np.testing.assert_allclose(cluster[0].position, [0.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(cluster.origin.position, [2.0, 3.0])

def test_empty_cluster_operations_are_noops():
    cluster = Cluster()
    cluster.increase_current()
    cluster.increase_current(bypass_last=True)
    cluster.decrease_current()
    assert cluster.pop() is None
    assert cluster.remove_current() is None
    assert cluster.remove_aways() is None
    cluster.reset_current()
    cluster.translate_current(Direction.UP.as_vector())
    assert cluster.bound(Vector2(10.0, 10.0)) == 0
    assert cluster.bound_current(Vector2(10.0, 10.0)) is False
    cluster.wait_drop((0.0, 0.0), Vector2(10.0, 10.0), 1.0)
    cluster.wait_speed((0.0, 0.0), Vector2(10.0, 10.0), 1.0)
    cluster.update_trajectory()
    cluster.update_current_trajectory()
    cluster.clear_current_trajectory()
    cluster.next_frame()
    assert cluster.current == 0
    assert len(cluster) == 0

def test_reset_and_translate_current():
    cluster = Cluster(_three_bodies())
    cluster.increase_current()
    cluster.translate_current(Direction.RIGHT.as_vector())
    np.testing.assert_allclose(cluster[1].position, [0.0, 0.5])
    cluster.reset_current()
    np.testing.assert_allclose(cluster[1].position, [0.0, 0.0])
    np.testing.assert_allclose(cluster[1].velocity, [0.0, 0.0])
    np.testing.assert_allclose(cluster[1].point.trajectory_at(0), [0.0, 0.0])

# ---------------------------------------------------------------------------
# Wrapping and ejection
# ---------------------------------------------------------------------------

def test_bound_wraps_fully_outside_bodies():
    """Half extents 10 inflated by radius 1: |x| > 11 wraps to the other side."""
    cluster = Cluster([
        _body("out", 1.0, (11.5, 0.0), radius=1.0),
        _body("edge", 1.0, (10.5, -11.5), radius=1.0),
        _body("in", 1.0, (0.0, 0.0), radius=1.0),
    ])
    assert cluster.bound(Vector2(10.0, 10.0)) == 2
    np.testing.assert_allclose(cluster[0].position, [-11.0, 0.0])
    np.testing.assert_allclose(cluster[1].position, [10.5, 11.0])
    np.testing.assert_allclose(cluster[2].position, [0.0, 0.0])

def test_remove_aways_ejects_far_outlier(caplog):
    cluster = Cluster([
        _body("a", 1.0, (1.0, 0.0)),
        _body("b", 1.0, (-1.0, 0.0)),
        _body("c", 1.0, (0.0, 1.0)),
        _body("far", 1e-6, (10000.0, 0.0)),
    ])
    with caplog.at_level(logging.WARNING, logger="gravity_sim.cluster"):
        ejected = cluster.remove_aways()
    assert ejected.name == "far"
    assert [b.name for b in cluster] == ["a", "b", "c"]
    assert cluster.barycenter.mass == pytest.approx(3.0)
    assert "far" in caplog.text
    assert cluster.remove_aways() is None

def test_remove_aways_keeps_two_bodies():
    cluster = Cluster([_body("a", 1.0, (0.0, 0.0)), _body("b", 1e-9, (1e9, 0.0))])
    assert cluster.remove_aways() is None
    assert len(cluster) == 2

# ---------------------------------------------------------------------------
# Placement
# ---------------------------------------------------------------------------

def test_placement_protocol():
    """
    centered(cursor) = ((px - mx)/s, (my - py)/s)
      drop  at (420, 220): ((420-320)/2, (240-220)/2) = (50, 10)
      speed at (320, 240): (0, 0) - (50, 10) = (-50, -10)
    """
    middle = Vector2(320.0, 240.0)
    cluster = Cluster([_body("a", 1.0, (0.0, 0.0))])
    cluster.push(_body("new", 1.0, (0.0, 0.0)))
    cluster.wait_drop((420.0, 220.0), middle, 2.0)
    new = cluster.last
    np.testing.assert_allclose(new.position, [50.0, 10.0])
    np.testing.assert_allclose(new.point.trajectory_at(0), [50.0, 10.0])
    cluster.wait_speed((320.0, 240.0), middle, 2.0)
    np.testing.assert_allclose(new.velocity, [-50.0, -10.0])
    np.testing.assert_allclose(new.position, [50.0, 10.0])
    assert cluster.current == 0
    np.testing.assert_allclose(cluster.barycenter.position, [25.0, 5.0])

# ---------------------------------------------------------------------------
# Seeding
# ---------------------------------------------------------------------------

def test_star_and_planet_scenario():
    """
    Star (mass 1) at rest at the origin, planet at periapsis of
    Orbit(mu=1, apo=2, peri=0.5): position (0.5, 0), velocity (0, sqrt(3.2)).
    """
    seeds = [
        BodySeed("star", 1.0, WHITE, 0.1, Orbit(mu=0.0, apoapsis=0.0, periapsis=0.0)),
        BodySeed("planet", 1e-3, WHITE, 0.01, Orbit(mu=1.0, apoapsis=2.0, periapsis=0.5)),
    ]
    cluster = Cluster.orbital_at(seeds, 0.0, g=1.0)
    star, planet = cluster
    np.testing.assert_allclose(star.position, [0.0, 0.0])
    np.testing.assert_allclose(star.velocity, [0.0, 0.0])
    np.testing.assert_allclose(planet.position, [0.5, 0.0], atol=1e-12)
    np.testing.assert_allclose(planet.velocity, [0.0, math.sqrt(3.2)], atol=1e-6)
    # velocity is tangential at periapsis
    assert float(np.dot(planet.position, planet.velocity)) == pytest.approx(0.0, abs=1e-6)

def test_orbital_seeding_variants():
    seeds = [BodySeed(f"s{i}", 1.0, WHITE, 0.0, Orbit.circular(1.0, r)) for i, r in enumerate((1.0, 2.0, 3.0))]
    with pytest.raises(ValueError):
        Cluster.orbital(seeds, [0.0])
    cluster = Cluster.orbital(seeds, [0.0, math.pi / 2, math.pi])
    np.testing.assert_allclose(cluster[1].position, [0.0, 2.0], atol=1e-12)
    np.testing.assert_allclose(cluster[2].position, [-3.0, 0.0], atol=1e-12)

    rng = np.random.default_rng(3)
    random = Cluster.orbital_at_random(seeds, rng)
    for b, r in zip(random, (1.0, 2.0, 3.0)):
        assert np.linalg.norm(b.position) == pytest.approx(r)

# ---------------------------------------------------------------------------
# Trajectories
# ---------------------------------------------------------------------------

def test_cluster_trajectories():
    cluster = Cluster([_body("a", 1.0, (0.0, 0.0), (1.0, 0.0))])
    cluster.update_trajectory()
    cluster[0].position[:] = (3.0, 0.0)
    cluster.update_current_trajectory()
    np.testing.assert_allclose(cluster[0].point.trajectory_at(255), [3.0, 0.0])
    np.testing.assert_allclose(cluster[0].point.trajectory_at(254), [0.0, 0.0])
    cluster.clear_trajectory()
    np.testing.assert_allclose(cluster[0].point.trajectory_at(0), [3.0, 0.0])

@pytest.mark.parametrize("mass", [0.0, -1.0, float("nan")])
def test_body_mass_must_be_positive(mass):
    with pytest.raises(ValueError):
        _body("ghost", mass, (0.0, 0.0))

def test_barycenter_marker_is_massless():
    center = Body.barycenter()
    assert center.mass == 0.0
    assert Cluster().barycenter.mass == 0.0
