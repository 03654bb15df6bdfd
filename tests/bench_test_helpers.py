"""Shared test fixtures for benchmark tests."""

from __future__ import annotations

import threading
import time
from typing import Any

from sortbench.algorithms import AlgorithmUnderTest
from sortbench.bench.config import BenchConfig
from sortbench.bench.results import (
    BenchmarkResult,
    BenchRun,
    ResultTable,
    ScheduleSummary,
)


def make_config(**kwargs: Any) -> BenchConfig:
    """A tiny, fast configuration: sizes 10 and 100, five trials, no cooldown."""
    defaults: dict[str, Any] = {
        "min_size": 10,
        "max_size": 100,
        "size_factor": 10,
        "trials": 5,
        "min_acceptable_tests": 2,
        "runtime_limit_s": 1000.0,
        "cooldown_s": 0.0,
        "workers": 1,
    }
    defaults.update(kwargs)
    return BenchConfig(**defaults)


def make_algorithm(
    algorithm_id: str = "mock",
    func: Any = None,
    complexity: str = "O(n log n)",
) -> AlgorithmUnderTest:
    return AlgorithmUnderTest(
        id=algorithm_id,
        name=algorithm_id.replace("_", " ").title(),
        complexity=complexity,
        func=func or (lambda data: data.sort()),
    )


class RecordingSort:
    """Candidate that records every input it receives, then sorts it."""

    def __init__(self) -> None:
        self.inputs: list[tuple[int, ...]] = []
        self._lock = threading.Lock()

    def __call__(self, data: list[int]) -> None:
        with self._lock:
            self.inputs.append(tuple(data))
        data.sort()


class SleepingSort:
    """Candidate that takes at least *delay_s* per call."""

    def __init__(self, delay_s: float) -> None:
        self.delay_s = delay_s
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self, data: list[int]) -> None:
        with self._lock:
            self.calls += 1
        time.sleep(self.delay_s)
        data.sort()


def constant_fill(data: list[int]) -> None:
    """Broken candidate: ordered output, but not a permutation."""
    data[:] = [0] * len(data)


def raising_sort(data: list[int]) -> None:
    raise RuntimeError("candidate exploded")


def make_result(
    mean_ms: float,
    stdev_ms: float = 0.01,
    count: int = 50,
    **flags: bool,
) -> BenchmarkResult:
    """Create a BenchmarkResult from millisecond figures."""
    return BenchmarkResult(
        mean=mean_ms * 1_000_000,
        stdev=stdev_ms * 1_000_000,
        count=count,
        **flags,
    )


def make_run(
    results: dict[str, list[BenchmarkResult | None]],
    sizes: list[int] | None = None,
    *,
    unscheduled: set[tuple[int, int]] | None = None,
    **config_kwargs: Any,
) -> BenchRun:
    """Build a BenchRun directly from per-algorithm result rows.

    Every cell counts as scheduled unless listed in *unscheduled*.
    """
    sizes = sizes or [10, 100]
    algorithms = [make_algorithm(algorithm_id) for algorithm_id in results]
    table = ResultTable(algorithms, sizes, list(results.values()))
    skipped = unscheduled or set()
    samples = {
        (a, s): [1]
        for a in range(len(algorithms))
        for s in range(len(sizes))
        if (a, s) not in skipped
    }
    summary = ScheduleSummary(
        jobs_generated=100,
        jobs_executed=80,
        jobs_discarded=20,
        samples_dropped=2,
        cells_exhausted=1,
        workers=2,
        wall_time_s=75.0,
    )
    config = make_config(algorithms=list(results), **config_kwargs)
    return BenchRun(config=config, table=table, summary=summary, samples=samples)
