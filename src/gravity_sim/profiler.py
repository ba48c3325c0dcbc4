# MIT License (see LICENSE)
"""
Simple profiling utilities for performance measurement.

Provides lightweight instrumentation to measure execution time of the
simulator's phases (integrate, bound, eject) without external dependencies.

Example:
    profiler = Profiler()
    with profiler.section("integrate"):
        cluster.integrate(dt, oversampling)
    for line in profiler.stats.lines():
        logger.info(line)
"""
from __future__ import annotations
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator


@dataclass
class ProfileStats:
    """
    Accumulates timing samples for named sections.

    Stores raw timing data and provides summary statistics (count, mean, max, total).
    """
    samples: dict[str, list[float]] = field(default_factory=dict)

    def add(self, name: str, dt: float) -> None:
        """Record a timing sample (in seconds) for a named section."""
        self.samples.setdefault(name, []).append(dt)

    def clear(self) -> None:
        self.samples.clear()

    def summary(self) -> dict[str, dict[str, float]]:
        """
        Compute summary statistics for all recorded sections.

        Returns:
            Dict mapping section name to stats dict with keys:
            - 'n': sample count
            - 'mean_ms': average time in milliseconds
            - 'max_ms': maximum time in milliseconds
            - 'total_ms': accumulated time in milliseconds
        """
        out = {}
        for name, times in self.samples.items():
            n = len(times)
            total = sum(times)
            out[name] = {
                "n": n,
                "mean_ms": 1e3 * (total / n),
                "max_ms": 1e3 * max(times),
                "total_ms": 1e3 * total,
            }
        return out

    def lines(self) -> list[str]:
        """One human-readable line per section, sorted by name."""
        return [
            f"{name}: n={s['n']} mean={s['mean_ms']:.3f}ms max={s['max_ms']:.3f}ms"
            for name, s in sorted(self.summary().items())
        ]


class Profiler:
    """
    Context-manager based profiler for timing code sections.

    Usage:
        profiler = Profiler()
        with profiler.section("integrate"):
            do_expensive_work()

        stats = profiler.stats.summary()
        print(f"integrate avg: {stats['integrate']['mean_ms']:.2f}ms")
    """

    def __init__(self) -> None:
        self.stats = ProfileStats()

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """
        Time the enclosed block and record it under ``name``.

        The sample is recorded even when the block raises.
        """
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self.stats.add(name, time.perf_counter() - t0)
