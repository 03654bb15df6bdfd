"""Benchmark result data structures, aggregation and ranking.

Hierarchy::

    BenchRun (top level: one benchmark execution)
      -> config: BenchConfig
      -> summary: ScheduleSummary
      -> system: SystemProfile
      -> table: ResultTable
        -> [algorithm][size]: BenchmarkResult | None

A cell yields ``None`` when too few samples survive outlier filtering.
That is an expected outcome, not an error.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping, Sequence

from sortbench.algorithms import AlgorithmGroup, AlgorithmUnderTest
from sortbench.bench.stats import (
    confidence_half_width,
    filter_outliers,
    mean,
    stdev,
    two_sample_t_test,
)
from sortbench.logging import get_logger

if TYPE_CHECKING:
    from sortbench.bench.config import BenchConfig
    from sortbench.bench.system import SystemProfile

log = get_logger("bench.results")


# ---------------------------------------------------------------------------
# Cell-level result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BenchmarkResult:
    """Summary of one (algorithm, size) cell. Times are in nanoseconds.

    The three flags are presentation classifications relative to the
    fastest member of a group at the same size; they are set by
    :func:`rank` on a copy and are False on a freshly aggregated result.
    """

    mean: float
    stdev: float
    count: int
    is_fastest: bool = False
    is_stat_tied: bool = False
    is_practically_tied: bool = False

    def ci_half_width(self, confidence: float = 0.98) -> float:
        """Half-width of the confidence interval for the mean, in ns."""
        return confidence_half_width(self.stdev, self.count, confidence)

    def compare(self, other: BenchmarkResult) -> tuple[float, float]:
        """Two-tailed p-value and relative difference of means versus *other*."""
        p = two_sample_t_test(
            self.mean, other.mean, self.stdev, other.stdev, self.count, other.count
        )
        diff = (self.mean - other.mean) / other.mean if other.mean else 0.0
        return p, diff

    def to_dict(self) -> dict[str, Any]:
        return {
            "mean_ns": round(self.mean, 1),
            "stdev_ns": round(self.stdev, 1),
            "count": self.count,
            "is_fastest": self.is_fastest,
            "is_stat_tied": self.is_stat_tied,
            "is_practically_tied": self.is_practically_tied,
        }


def aggregate_cell(
    samples: Sequence[int],
    *,
    min_acceptable: int,
    outlier_coefficient: float = 3.0,
) -> BenchmarkResult | None:
    """Turn a cell's raw samples into a result, or None.

    The raw sample count must reach *min_acceptable*; Tukey filtering is
    then applied and the retained count must still reach it.
    """
    if len(samples) < max(min_acceptable, 2):
        return None
    retained = filter_outliers(samples, outlier_coefficient)
    if len(retained) < max(min_acceptable, 2):
        log.debug(
            "Only %d of %d samples survived outlier filtering",
            len(retained),
            len(samples),
        )
        return None
    m = mean(retained)
    return BenchmarkResult(mean=m, stdev=stdev(retained, m), count=len(retained))


# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------


def rank(
    column: Sequence[BenchmarkResult | None],
    *,
    alpha: float = 0.001,
    diff_threshold: float = 0.05,
) -> list[BenchmarkResult | None]:
    """Classify the results of one size against the fastest among them.

    Returns new results (the inputs are not modified) in the same order,
    with ``None`` entries passed through.
    """
    present = [r for r in column if r is not None]
    if not present:
        return list(column)
    fastest_index = min(
        (i for i, r in enumerate(column) if r is not None),
        key=lambda i: column[i].mean,  # type: ignore[union-attr]
    )
    fastest = column[fastest_index]
    assert fastest is not None

    ranked: list[BenchmarkResult | None] = []
    for i, result in enumerate(column):
        if result is None:
            ranked.append(None)
        elif i == fastest_index:
            ranked.append(dataclasses.replace(result, is_fastest=True))
        else:
            p, diff = result.compare(fastest)
            ranked.append(
                dataclasses.replace(
                    result,
                    is_fastest=False,
                    is_stat_tied=p >= alpha,
                    is_practically_tied=diff <= diff_threshold,
                )
            )
    return ranked


# ---------------------------------------------------------------------------
# Result table
# ---------------------------------------------------------------------------


class ResultTable:
    """Per-(algorithm, size) results of a finished run."""

    def __init__(
        self,
        algorithms: Sequence[AlgorithmUnderTest],
        sizes: Sequence[int],
        results: Sequence[Sequence[BenchmarkResult | None]],
    ) -> None:
        self.algorithms = list(algorithms)
        self.sizes = list(sizes)
        self.results = [list(row) for row in results]

    @classmethod
    def from_samples(
        cls,
        algorithms: Sequence[AlgorithmUnderTest],
        sizes: Sequence[int],
        samples: Mapping[tuple[int, int], Sequence[int]],
        *,
        min_acceptable: int,
        outlier_coefficient: float = 3.0,
    ) -> ResultTable:
        results = [
            [
                aggregate_cell(
                    samples.get((a, s), ()),
                    min_acceptable=min_acceptable,
                    outlier_coefficient=outlier_coefficient,
                )
                for s in range(len(sizes))
            ]
            for a in range(len(algorithms))
        ]
        return cls(algorithms, sizes, results)

    def get(self, algorithm_index: int, size_index: int) -> BenchmarkResult | None:
        return self.results[algorithm_index][size_index]

    def ranked(
        self,
        members: Sequence[int],
        *,
        alpha: float = 0.001,
        diff_threshold: float = 0.05,
    ) -> list[list[BenchmarkResult | None]]:
        """Rank the rows in *members* against each other at every size.

        Returns one row per member (same order), one entry per size.
        """
        rows: list[list[BenchmarkResult | None]] = [[] for _ in members]
        for s in range(len(self.sizes)):
            column = rank(
                [self.results[a][s] for a in members],
                alpha=alpha,
                diff_threshold=diff_threshold,
            )
            for row, result in zip(rows, column):
                row.append(result)
        return rows

    def ranked_group(
        self,
        group: AlgorithmGroup,
        *,
        alpha: float = 0.001,
        diff_threshold: float = 0.05,
    ) -> tuple[list[AlgorithmUnderTest], list[list[BenchmarkResult | None]]]:
        """Members of *group* and their ranked rows."""
        members = group.members(self.algorithms)
        return (
            [self.algorithms[i] for i in members],
            self.ranked(members, alpha=alpha, diff_threshold=diff_threshold),
        )


# ---------------------------------------------------------------------------
# Run-level records
# ---------------------------------------------------------------------------


@dataclass
class ScheduleSummary:
    """Bookkeeping of one run, for the report and for consistency checks."""

    jobs_generated: int = 0
    jobs_executed: int = 0
    jobs_discarded: int = 0
    samples_dropped: int = 0
    cells_exhausted: int = 0
    workers: int = 0
    wall_time_s: float = 0.0

    @property
    def samples_recorded(self) -> int:
        return self.jobs_executed - self.samples_dropped

    def to_dict(self) -> dict[str, Any]:
        return {
            "jobs_generated": self.jobs_generated,
            "jobs_executed": self.jobs_executed,
            "jobs_discarded": self.jobs_discarded,
            "samples_dropped": self.samples_dropped,
            "cells_exhausted": self.cells_exhausted,
            "workers": self.workers,
            "wall_time_s": round(self.wall_time_s, 3),
        }


@dataclass
class BenchRun:
    """Everything a finished run hands to the presentation layer."""

    config: BenchConfig
    table: ResultTable
    summary: ScheduleSummary
    system: SystemProfile | None = None
    samples: dict[tuple[int, int], list[int]] = field(default_factory=dict)

    @property
    def algorithms(self) -> list[AlgorithmUnderTest]:
        return self.table.algorithms

    @property
    def sizes(self) -> list[int]:
        return self.table.sizes
