"""Job generation for a benchmark run.

One job is one timed trial of one algorithm at one size. Jobs are
created once up front; the coordinator consumes them as a stack.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Mapping, Sequence

from sortbench.algorithms import AlgorithmUnderTest
from sortbench.logging import get_logger

log = get_logger("bench.jobs")


@dataclass(frozen=True)
class Job:
    """Descriptor for a single trial. Indices refer to the run's tables."""

    algorithm_index: int
    size_index: int
    trial_index: int

    @property
    def cell(self) -> tuple[int, int]:
        """The (algorithm, size) cell this job contributes to."""
        return self.algorithm_index, self.size_index


def size_limit(complexity: str, size_limits: Mapping[str, int | None]) -> int | None:
    """Maximum test size for a complexity class; None means unbounded."""
    return size_limits.get(complexity)


def generate_jobs(
    algorithms: Sequence[AlgorithmUnderTest],
    sizes: Sequence[int],
    trials: int,
    size_limits: Mapping[str, int | None],
) -> list[Job]:
    """Expand (algorithm x size x trial) into jobs.

    Sizes above an algorithm's complexity-class ceiling produce no
    jobs at all, so those cells never receive samples.
    """
    jobs: list[Job] = []
    for size_index, size in enumerate(sizes):
        for algorithm_index, algorithm in enumerate(algorithms):
            limit = size_limit(algorithm.complexity, size_limits)
            if limit is not None and size > limit:
                continue
            for trial_index in range(trials):
                jobs.append(Job(algorithm_index, size_index, trial_index))
    log.debug(
        "Generated %d jobs for %d algorithms x %d sizes x %d trials",
        len(jobs),
        len(algorithms),
        len(sizes),
        trials,
    )
    return jobs


def shuffle_jobs(jobs: list[Job], seed: int) -> list[Job]:
    """Shuffle *jobs* in place with a fixed seed and return them.

    The dispatch order is reproducible between runs but uncorrelated
    with algorithm or size, so slow drift over the run (heat, cache
    state) does not land on one algorithm.
    """
    random.Random(seed).shuffle(jobs)
    return jobs
