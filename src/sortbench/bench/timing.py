"""Timing capture for one benchmark trial.

Builds the trial's deterministic input, sorts a private copy with the
candidate and measures wall-clock time around the sort call only. The
reference ordering, the cooldown pause and the correctness check all
happen outside the timed region.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Sequence

from sortbench.algorithms import AlgorithmUnderTest
from sortbench.bench.seeds import make_input
from sortbench.errors import CandidateCrashError, CorrectnessError


# ---------------------------------------------------------------------------
# TimedResult
# ---------------------------------------------------------------------------


@dataclass
class TimedResult:
    """Result of one timed sort call."""

    elapsed_ns: int
    size: int
    trial_index: int

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed_ns / 1_000_000


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------


def verify_sorted(
    result: Sequence[int],
    expected: Sequence[int],
    *,
    algorithm: str,
    size: int,
    trial: int,
) -> None:
    """Check that *result* is the sorted permutation *expected*.

    Raises:
        CorrectnessError: If the output is out of order, or holds a
            different multiset of values than the input did.
    """
    if len(result) != len(expected):
        raise CorrectnessError(
            f"output has {len(result)} elements, expected {len(expected)}",
            algorithm=algorithm,
            size=size,
            trial=trial,
        )
    for i in range(1, len(result)):
        if result[i - 1] > result[i]:
            raise CorrectnessError(
                f"output not sorted at index {i}",
                algorithm=algorithm,
                size=size,
                trial=trial,
            )
    if list(result) != list(expected):
        # Ordered but wrong values: not a permutation of the input.
        raise CorrectnessError(
            "output is not a permutation of the input",
            algorithm=algorithm,
            size=size,
            trial=trial,
        )


# ---------------------------------------------------------------------------
# Core timing implementation
# ---------------------------------------------------------------------------


def run_trial(
    algorithm: AlgorithmUnderTest,
    size: int,
    trial_index: int,
    *,
    seed: int,
    cooldown_s: float = 0.0,
) -> TimedResult:
    """Execute one trial and return its timing.

    Args:
        algorithm: The candidate to run.
        size: Number of elements to sort.
        trial_index: Selects the deterministic input array.
        seed: Global seed the per-trial seed is derived from.
        cooldown_s: Pause before the timed call, outside the timing.

    Raises:
        CandidateCrashError: If the candidate raises.
        CorrectnessError: If the output is not the sorted input.
    """
    data = make_input(size, trial_index, seed)
    expected = sorted(data)

    if cooldown_s > 0:
        time.sleep(cooldown_s)

    try:
        start = time.perf_counter_ns()
        algorithm.run(data)
        elapsed = time.perf_counter_ns() - start
    except Exception as exc:
        raise CandidateCrashError(
            f"{algorithm.id} raised {type(exc).__name__}: {exc}",
            algorithm=algorithm.id,
            size=size,
            trial=trial_index,
        ) from exc

    verify_sorted(data, expected, algorithm=algorithm.id, size=size, trial=trial_index)
    return TimedResult(elapsed_ns=elapsed, size=size, trial_index=trial_index)
