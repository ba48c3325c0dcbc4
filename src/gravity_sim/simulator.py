# MIT License (see LICENSE)
"""
Host-side stepping loop.

The Simulator ties a Cluster, its SimulationConfig and the interaction Status
together. An event source (a window, a script, the CLI) calls ``apply`` for
every discrete input and ``update`` once per external time step:

    sim = Simulator.from_config(SimulationConfig(seed_path="solar.json"))
    for _ in range(steps):
        sim.update(1 / 30)

``update`` dispatches on ``Status.state`` and then feeds the status machine an
empty event so transient states (RESET, ADD, REMOVE, CANCEL_DROP) last
exactly one update.
"""
from __future__ import annotations
import logging
from contextlib import nullcontext

import numpy as np

from .cluster import Cluster
from .config import SimulationConfig
from .controls import Command, Direction, State, Status
from .io.json_io import load_cluster
from .profiler import Profiler
from .types import Body, Circle

logger = logging.getLogger(__name__)


class Simulator:
    """
    Drives a Cluster from discrete commands and external time steps.

    Attributes:
        cluster: The simulated bodies.
        config: Run parameters and toggles (mutated by scale/toggle commands).
        status: Interaction state machine.
        profiler: Optional section timer for integrate/bound/eject.
        rng: Source of randomness for interactively added bodies.
        updates: Number of ``update`` calls so far.
    """

    def __init__(
        self,
        cluster: Cluster | None = None,
        config: SimulationConfig | None = None,
        status: Status | None = None,
        profiler: Profiler | None = None,
        rng: np.random.Generator | None = None,
    ):
        self.config = config if config is not None else SimulationConfig()
        self.cluster = cluster if cluster is not None else Cluster(g=self.config.gravitational_constant)
        self.status = status if status is not None else Status(state=State.MOVE)
        self.profiler = profiler
        self.rng = rng if rng is not None else np.random.default_rng(self.config.rng_seed)
        self.updates = 0

    @classmethod
    def from_config(
        cls,
        config: SimulationConfig,
        status: Status | None = None,
        profiler: Profiler | None = None,
    ) -> "Simulator":
        """
        Validate ``config`` and seed the cluster from ``config.seed_path``.

        Raises:
            ValueError: If the configuration is invalid.
            SeedError: If the seed file cannot be read or parsed.
        """
        config.validate()
        rng = np.random.default_rng(config.rng_seed)
        if config.seed_path is not None:
            cluster = load_cluster(
                config.seed_path,
                true_anomaly=config.true_anomaly,
                rng=rng,
                g=config.gravitational_constant,
            )
        else:
            cluster = Cluster(g=config.gravitational_constant)
        logger.info(
            "simulator ready: %d bodies, oversampling %d, G=%g",
            len(cluster), config.oversampling, config.gravitational_constant,
        )
        return cls(cluster, config, status, profiler, rng)

    def __repr__(self) -> str:
        return f"Simulator({self.cluster!r}, state={self.status.state.name}, updates={self.updates})"

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def apply(self, event: Command | Direction | None = None) -> State:
        """Forward one discrete input to the config, the cluster and the status."""
        config = self.config
        cluster = self.cluster

        if event is Command.TOGGLE_BOUNDED:
            config.bounded = not config.bounded
        elif event is Command.TOGGLE_TRAJECTORY:
            config.trajectory = not config.trajectory
        elif event is Command.TOGGLE_PAUSE:
            config.pause = not config.pause
        elif event is Command.TOGGLE_EJECT:
            config.eject_outliers = not config.eject_outliers
        elif event is Command.SELECT_NEXT:
            cluster.increase_current(bypass_last=self.status.is_waiting_to_add())
        elif event is Command.SELECT_PREVIOUS:
            cluster.decrease_current()
        elif event is Command.NEXT_FRAME:
            cluster.next_frame()
        elif event is Command.INCREASE_OVERSAMPLING:
            config.increase_oversampling()
        elif event is Command.DECREASE_OVERSAMPLING:
            config.decrease_oversampling()
        elif event is Command.INCREASE_DISTANCE:
            config.increase_distance()
        elif event is Command.DECREASE_DISTANCE:
            config.decrease_distance()
        elif event is Command.INCREASE_TIME:
            config.increase_time()
        elif event is Command.DECREASE_TIME:
            config.decrease_time()

        return self.status.apply(event)

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def update(self, dt: float, cursor=(0.0, 0.0)) -> None:
        """
        Advance by one external time step of ``dt`` real seconds.

        Args:
            dt: Real time elapsed since the previous update.
            cursor: Window-space pointer position, used while placing a body.
        """
        state = self.status.state
        config = self.config
        cluster = self.cluster

        if state is State.MOVE or state is State.TRANSLATE:
            self._move(dt, translate=state is State.TRANSLATE)
        elif state is State.RESET:
            cluster.reset_current()
        elif state is State.ADD:
            self._add(cursor)
        elif state is State.REMOVE:
            cluster.remove_current()
        elif state is State.WAIT_DROP:
            cluster.wait_drop(cursor, config.middle, config.distance_scale)
        elif state is State.WAIT_SPEED:
            cluster.wait_speed(cursor, config.middle, config.distance_scale)
        elif state is State.CANCEL_DROP:
            cluster.pop()

        self.updates += 1
        self.status.apply(None)

    def run(self, steps: int, dt: float) -> None:
        for _ in range(steps):
            self.update(dt)

    def _section(self, name: str):
        return self.profiler.section(name) if self.profiler is not None else nullcontext()

    def _move(self, dt: float, translate: bool) -> None:
        config = self.config
        cluster = self.cluster
        if config.pause or cluster.is_empty():
            return

        if translate:
            cluster.translate_current(self.status.direction.as_vector())
            if config.bounded:
                cluster.bound_current(config.world_middle)
            if config.trajectory:
                cluster.update_current_trajectory()
            return

        with self._section("integrate"):
            cluster.integrate(dt * config.time_scale / config.oversampling, config.oversampling)
        if config.bounded:
            with self._section("bound"):
                cluster.bound(config.world_middle)
        if config.eject_outliers:
            with self._section("eject"):
                cluster.remove_aways()
        if config.trajectory:
            cluster.update_trajectory()

    def _add(self, cursor) -> None:
        """Push a body of random radius and color under the cursor; mass is radius / 10."""
        circle = Circle.at_cursor_random(cursor, self.config.middle, self.config.distance_scale, self.rng)
        body = Body(f"body {len(self.cluster) + 1}", circle.radius / 10.0, circle)
        self.cluster.push(body)
