"""Tests for sortbench.bench.results: aggregation, ranking and the result table."""

from __future__ import annotations

import unittest

from bench_test_helpers import make_algorithm, make_result

from sortbench.algorithms import AlgorithmGroup
from sortbench.bench.results import (
    BenchmarkResult,
    ResultTable,
    ScheduleSummary,
    aggregate_cell,
    rank,
)
from sortbench.bench.stats import confidence_half_width, two_sample_t_test


class TestBenchmarkResult(unittest.TestCase):
    def test_flags_default_false(self) -> None:
        result = BenchmarkResult(mean=1.0, stdev=0.1, count=30)
        self.assertFalse(result.is_fastest)
        self.assertFalse(result.is_stat_tied)
        self.assertFalse(result.is_practically_tied)

    def test_ci_half_width(self) -> None:
        result = make_result(2.0, stdev_ms=0.5, count=40)
        self.assertAlmostEqual(
            result.ci_half_width(0.95), confidence_half_width(500_000.0, 40, 0.95)
        )

    def test_compare(self) -> None:
        a = make_result(11.0, stdev_ms=0.5, count=30)
        b = make_result(10.0, stdev_ms=0.4, count=40)
        p, diff = a.compare(b)
        self.assertEqual(p, two_sample_t_test(11e6, 10e6, 5e5, 4e5, 30, 40))
        self.assertAlmostEqual(diff, 0.1)

    def test_to_dict(self) -> None:
        data = make_result(1.0, count=7, is_fastest=True).to_dict()
        self.assertEqual(data["mean_ns"], 1_000_000.0)
        self.assertEqual(data["count"], 7)
        self.assertTrue(data["is_fastest"])


class TestAggregateCell(unittest.TestCase):
    def test_basic(self) -> None:
        result = aggregate_cell([10, 12, 14], min_acceptable=3)
        assert result is not None
        self.assertEqual(result.mean, 12.0)
        self.assertAlmostEqual(result.stdev, 2.0)
        self.assertEqual(result.count, 3)

    def test_too_few_raw_samples(self) -> None:
        self.assertIsNone(aggregate_cell([10, 12], min_acceptable=3))
        self.assertIsNone(aggregate_cell([], min_acceptable=2))

    def test_never_fewer_than_two(self) -> None:
        self.assertIsNone(aggregate_cell([10], min_acceptable=1))

    def test_outliers_removed_before_statistics(self) -> None:
        samples = [100] * 10 + [10_000]
        result = aggregate_cell(samples, min_acceptable=5)
        assert result is not None
        self.assertEqual(result.count, 10)
        self.assertEqual(result.mean, 100.0)
        self.assertEqual(result.stdev, 0.0)

    def test_too_few_after_filtering(self) -> None:
        """The retained count, not the raw count, must reach the minimum."""
        samples = [100] * 10 + [10_000]
        self.assertIsNone(aggregate_cell(samples, min_acceptable=11))


class TestRank(unittest.TestCase):
    def test_fastest_and_ties(self) -> None:
        column = [
            make_result(20.0),
            make_result(10.0),
            make_result(10.1),
            make_result(10.0001, stdev_ms=1.0),
            None,
        ]
        ranked = rank(column, alpha=0.001, diff_threshold=0.05)
        slow, fastest, close, noisy, missing = ranked
        assert slow and fastest and close and noisy
        self.assertTrue(fastest.is_fastest)
        self.assertFalse(fastest.is_stat_tied)
        self.assertFalse(slow.is_fastest)
        self.assertFalse(slow.is_stat_tied)
        self.assertFalse(slow.is_practically_tied)
        # 1% slower, but the difference is significant.
        self.assertFalse(close.is_stat_tied)
        self.assertTrue(close.is_practically_tied)
        self.assertTrue(noisy.is_stat_tied)
        self.assertTrue(noisy.is_practically_tied)
        self.assertIsNone(missing)

    def test_inputs_untouched(self) -> None:
        column = [make_result(1.0), make_result(2.0)]
        rank(column)
        self.assertFalse(column[0].is_fastest)

    def test_first_minimum_wins(self) -> None:
        ranked = rank([make_result(5.0), make_result(5.0)])
        assert ranked[0] and ranked[1]
        self.assertTrue(ranked[0].is_fastest)
        self.assertFalse(ranked[1].is_fastest)
        self.assertTrue(ranked[1].is_stat_tied)

    def test_all_missing(self) -> None:
        self.assertEqual(rank([None, None]), [None, None])

    def test_diff_threshold_is_inclusive(self) -> None:
        ranked = rank([make_result(10.0), make_result(10.5)], diff_threshold=0.05)
        assert ranked[1]
        self.assertTrue(ranked[1].is_practically_tied)


class TestResultTable(unittest.TestCase):
    def setUp(self) -> None:
        self.algorithms = [
            make_algorithm("quicksort_a"),
            make_algorithm("radixsort_b"),
            make_algorithm("quicksort_c"),
        ]
        self.sizes = [10, 100]

    def test_from_samples(self) -> None:
        samples = {(0, 0): [5, 5, 5], (1, 1): [7]}
        table = ResultTable.from_samples(self.algorithms, self.sizes, samples, min_acceptable=3)
        result = table.get(0, 0)
        assert result is not None
        self.assertEqual(result.mean, 5.0)
        self.assertIsNone(table.get(1, 1))
        self.assertIsNone(table.get(2, 0))

    def test_ranked_group_uses_members_only(self) -> None:
        rows = [
            [make_result(3.0), make_result(30.0)],
            [make_result(1.0), make_result(10.0)],
            [make_result(2.0), None],
        ]
        table = ResultTable(self.algorithms, self.sizes, rows)
        members, ranked = table.ranked_group(AlgorithmGroup("Quick", include=("quicksort",)))
        self.assertEqual([a.id for a in members], ["quicksort_a", "quicksort_c"])
        self.assertEqual(len(ranked), 2)
        # The radix row is faster but not a member.
        assert ranked[1][0] and ranked[0][1]
        self.assertTrue(ranked[1][0].is_fastest)
        self.assertTrue(ranked[0][1].is_fastest)
        self.assertIsNone(ranked[1][1])

    def test_ranking_is_per_size(self) -> None:
        rows = [[make_result(1.0), make_result(20.0)], [make_result(2.0), make_result(10.0)]]
        table = ResultTable(self.algorithms[:2], self.sizes, rows)
        ranked = table.ranked([0, 1])
        assert ranked[0][0] and ranked[1][1]
        self.assertTrue(ranked[0][0].is_fastest)
        self.assertTrue(ranked[1][1].is_fastest)


class TestScheduleSummary(unittest.TestCase):
    def test_samples_recorded(self) -> None:
        summary = ScheduleSummary(jobs_generated=10, jobs_executed=8, samples_dropped=3)
        self.assertEqual(summary.samples_recorded, 5)

    def test_to_dict(self) -> None:
        data = ScheduleSummary(wall_time_s=1.23456).to_dict()
        self.assertEqual(data["wall_time_s"], 1.235)
        self.assertEqual(data["jobs_generated"], 0)


if __name__ == "__main__":
    unittest.main()
