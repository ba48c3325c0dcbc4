# examples/two_body_orbit.py
import math
from gravity_sim.cluster import Cluster
from gravity_sim.core.invariants import linear_momentum, total_energy
from gravity_sim.orbital import Orbit
from gravity_sim.point import KinematicPoint
from gravity_sim.types import Body, Circle

# planet on an eccentric orbit around a much heavier star, G = 1
orbit = Orbit(mu=1.0, apoapsis=2.0, periapsis=0.5)
star = Body("star", 1.0, Circle(KinematicPoint.zeros(), 0.1))
planet = Body("planet", 1e-6, Circle(KinematicPoint.inertial(orbit.position_at(0.0), orbit.speed_at(0.0)), 0.02))
cluster = Cluster([star, planet], g=1.0)

period = 2 * math.pi * math.sqrt(orbit.semi_major ** 3)
updates = 200
e0 = total_energy(cluster.bodies, g=1.0)
for _ in range(updates):
    cluster.integrate(period / updates / 64, oversampling=64)

print("period:", period)
print("planet pos:", cluster[1].position, "(start [0.5, 0])")
print("momentum:", linear_momentum(cluster.bodies))
print("energy drift:", total_energy(cluster.bodies, g=1.0) - e0)
