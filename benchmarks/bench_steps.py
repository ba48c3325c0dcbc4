"""
Microbenchmark: time per update vs number of bodies.
Run:
  python benchmarks/bench_steps.py
"""
import time
import numpy as np
from gravity_sim.cluster import Cluster
from gravity_sim.point import KinematicPoint
from gravity_sim.profiler import Profiler
from gravity_sim.types import Body, Circle

def run(n: int, updates: int = 30, oversampling: int = 16):
    prof = Profiler()
    rng = np.random.default_rng(12345)  # determinism (no randomness elsewhere)

    # bodies scattered in a disc around a heavy central mass
    bodies = [Body("center", 1000.0, Circle(KinematicPoint.zeros(), 1.0))]
    for i in range(n - 1):
        r = 5.0 + 20.0 * float(rng.random())
        a = 2 * np.pi * float(rng.random())
        pos = (r * np.cos(a), r * np.sin(a))
        v = np.sqrt(1000.0 / r)
        vel = (-v * np.sin(a), v * np.cos(a))
        bodies.append(Body(f"b{i}", 1.0, Circle(KinematicPoint.inertial(pos, vel), 0.1)))
    cluster = Cluster(bodies, g=1.0)

    # warmup
    for _ in range(3):
        cluster.integrate(1e-3, oversampling)

    t0 = time.perf_counter()
    for _ in range(updates):
        with prof.section("integrate"):
            cluster.integrate(1e-3, oversampling)
        with prof.section("eject"):
            cluster.remove_aways()
    t1 = time.perf_counter()

    per_update = (t1 - t0) / updates
    return per_update, prof.stats.summary()

if __name__ == "__main__":
    for n in [2, 10, 25, 50, 100]:
        per_update, summary = run(n)
        print(f"N={n:4d}  update={1e3*per_update:8.3f} ms  updates/s={1/per_update:8.1f}")
        for k in ["integrate", "eject"]:
            if k in summary:
                print(" ", k, summary[k])
        print()
