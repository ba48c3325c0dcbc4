# examples/headless_solar_system.py
import logging
import os
from gravity_sim import Frame, SimulationConfig, Simulator

logging.basicConfig(level=logging.INFO)

here = os.path.dirname(os.path.abspath(__file__))
config = SimulationConfig(
    seed_path=os.path.join(here, "solar_system.json"),
    time_scale=864000.0,       # ten simulated days per real second
    oversampling=16,
    true_anomaly=0.0,
)
sim = Simulator.from_config(config)
sim.cluster.set_frame(Frame.BARYCENTER)

for _ in range(30 * 37):       # about one simulated year at 30 updates/s
    sim.update(1 / 30)

for body in sim.cluster:
    print(f"{body.name:8s} r={body.position} v={body.velocity}")
