"""Tests for sortbench.bench.stats: quartiles, fences, t-test, t table.

Expected values come from hand calculation and from published
Student's t tables.
"""

from __future__ import annotations

import math
import unittest
from unittest.mock import patch

from sortbench.bench import stats
from sortbench.bench.stats import (
    QuartileDescriptor,
    confidence_half_width,
    filter_outliers,
    hyp2f1,
    mean,
    quartiles,
    regularized_incomplete_beta,
    stdev,
    t_cdf,
    t_lookup,
    tukey,
    two_sample_t_test,
    welch_degrees_of_freedom,
)
from sortbench.errors import NumericalError, SeriesDivergenceError


def _close(
    test: unittest.TestCase, value: float, expected: float, margin: float = 0.005
) -> None:
    test.assertLessEqual(abs(value - expected), margin, f"{value} vs. {expected}")


# ---------------------------------------------------------------------------
# Quartiles and outliers
# ---------------------------------------------------------------------------


class TestQuartiles(unittest.TestCase):
    def test_odd_length(self) -> None:
        """The middle element is excluded from both halves."""
        q = quartiles([1, 2, 5, 6, 7, 9, 12, 15, 18, 19, 27])
        self.assertEqual(q, QuartileDescriptor(q1=5.0, q2=9.0, q3=18.0, iqr=13.0))

    def test_even_length(self) -> None:
        q = quartiles([3, 5, 7, 8, 9, 11, 15, 16, 20, 21])
        self.assertEqual(q, QuartileDescriptor(q1=7.0, q2=10.0, q3=16.0, iqr=9.0))

    def test_unsorted_input_is_not_modified(self) -> None:
        samples = [21, 3, 16, 5, 20, 7, 15, 8, 11, 9]
        original = list(samples)
        q = quartiles(samples)
        self.assertEqual(samples, original)
        self.assertEqual(q.q1, 7.0)
        self.assertEqual(q.q3, 16.0)

    def test_two_samples(self) -> None:
        q = quartiles([4, 2])
        self.assertEqual(q, QuartileDescriptor(q1=2.0, q2=3.0, q3=4.0, iqr=2.0))

    def test_too_few_samples(self) -> None:
        with self.assertRaises(ValueError):
            quartiles([1])


class TestTukey(unittest.TestCase):
    def setUp(self) -> None:
        self.q = QuartileDescriptor(q1=-2.0, q2=0.0, q3=2.0, iqr=4.0)

    def test_inside_fences(self) -> None:
        self.assertTrue(tukey(3, self.q, 3.0))

    def test_outside_fences(self) -> None:
        self.assertFalse(tukey(15, self.q, 3.0))

    def test_fences_are_inclusive(self) -> None:
        self.assertTrue(tukey(14, self.q, 3.0))
        self.assertTrue(tukey(-14, self.q, 3.0))
        self.assertFalse(tukey(-14.5, self.q, 3.0))

    def test_default_coefficient(self) -> None:
        self.assertTrue(tukey(14, self.q))
        self.assertFalse(tukey(15, self.q))

    def test_filter_outliers_drops_spike(self) -> None:
        samples = [100, 101, 99, 100, 102, 98, 100, 5000]
        self.assertEqual(filter_outliers(samples), [100, 101, 99, 100, 102, 98, 100])

    def test_filter_outliers_keeps_order(self) -> None:
        samples = [3, 1, 2, 4]
        self.assertEqual(filter_outliers(samples, 3.0), [3, 1, 2, 4])


# ---------------------------------------------------------------------------
# Mean and standard deviation
# ---------------------------------------------------------------------------


class TestMeanStdev(unittest.TestCase):
    def test_mean(self) -> None:
        self.assertEqual(mean([6, 2, 3, 1]), 3.0)

    def test_mean_empty(self) -> None:
        with self.assertRaises(ValueError):
            mean([])

    def test_stdev_known_values(self) -> None:
        _close(self, stdev([6, 2, 3, 1], 3.0), 2.16)
        _close(self, stdev([2, 2, 5, 7], 4.0), 2.45)
        values = [2, 4, 4, 4, 5, 5, 7, 9]
        _close(self, stdev(values, mean(values)), 2.14)

    def test_stdev_constant(self) -> None:
        self.assertEqual(stdev([5, 5, 5], 5.0), 0.0)

    def test_stdev_single_sample(self) -> None:
        with self.assertRaises(ValueError):
            stdev([1], 1.0)


# ---------------------------------------------------------------------------
# Series and incomplete beta
# ---------------------------------------------------------------------------


class TestHypergeometric(unittest.TestCase):
    def test_geometric_series(self) -> None:
        """2F1(1, 1; 1; z) = 1 / (1 - z)."""
        self.assertAlmostEqual(hyp2f1(1.0, 1.0, 1.0, 0.5), 2.0, places=10)

    def test_log_identity(self) -> None:
        """z * 2F1(1, 1; 2; -z) = ln(1 + z)."""
        z = 0.3
        self.assertAlmostEqual(z * hyp2f1(1.0, 1.0, 2.0, -z), math.log1p(z), places=10)

    def test_zero_argument(self) -> None:
        self.assertEqual(hyp2f1(0.5, 3.0, 1.5, 0.0), 1.0)

    def test_large_terms_raise(self) -> None:
        with self.assertRaises(SeriesDivergenceError):
            hyp2f1(0.5, 500.0, 1.5, -0.9)

    def test_non_convergence_raises(self) -> None:
        with patch.object(stats, "_SERIES_MAX_TERMS", 5):
            with self.assertRaises(SeriesDivergenceError):
                hyp2f1(1.0, 1.0, 1.0, 0.99)

    def test_nonpositive_integer_c(self) -> None:
        with self.assertRaises(ValueError):
            hyp2f1(1.0, 1.0, -2.0, 0.5)


class TestIncompleteBeta(unittest.TestCase):
    def test_bounds(self) -> None:
        self.assertEqual(regularized_incomplete_beta(0.0, 2.0, 3.0), 0.0)
        self.assertEqual(regularized_incomplete_beta(1.0, 2.0, 3.0), 1.0)

    def test_uniform(self) -> None:
        """I_x(1, 1) = x."""
        self.assertAlmostEqual(regularized_incomplete_beta(0.3, 1.0, 1.0), 0.3, places=10)

    def test_closed_form(self) -> None:
        """I_x(2, 1) = x^2 and I_x(1, 2) = 1 - (1-x)^2."""
        self.assertAlmostEqual(regularized_incomplete_beta(0.4, 2.0, 1.0), 0.16, places=10)
        self.assertAlmostEqual(regularized_incomplete_beta(0.4, 1.0, 2.0), 0.64, places=10)

    def test_symmetry(self) -> None:
        x, a, b = 0.8, 2.5, 4.0
        self.assertAlmostEqual(
            regularized_incomplete_beta(x, a, b),
            1.0 - regularized_incomplete_beta(1.0 - x, b, a),
            places=10,
        )

    def test_out_of_range(self) -> None:
        with self.assertRaises(ValueError):
            regularized_incomplete_beta(1.5, 1.0, 1.0)


class TestTCdf(unittest.TestCase):
    def test_zero(self) -> None:
        self.assertEqual(t_cdf(0.0, 10.0), 0.5)

    def test_cauchy(self) -> None:
        """With one degree of freedom the t distribution is Cauchy."""
        expected = round(0.5 + math.atan(2.0) / math.pi, 4)
        self.assertAlmostEqual(t_cdf(2.0, 1.0), expected, places=4)

    def test_both_branches_agree(self) -> None:
        """Just below and just above t^2 = df the two forms meet."""
        below = t_cdf(math.sqrt(9.99), 10.0)
        above = t_cdf(math.sqrt(10.01), 10.0)
        self.assertLess(abs(above - below), 0.001)

    def test_series_failure_falls_back(self) -> None:
        expected = t_cdf(1.0, 30.0)
        real = stats.hyp2f1

        def series_fails(a: float, b: float, c: float, z: float) -> float:
            # The t series is the only caller with a = 1/2.
            if a == 0.5:
                raise SeriesDivergenceError("forced")
            return real(a, b, c, z)

        with patch.object(stats, "hyp2f1", side_effect=series_fails) as mock:
            result = t_cdf(1.0, 30.0)
        self.assertEqual(mock.call_count, 2)
        self.assertAlmostEqual(result, expected, places=3)

    def test_both_failing_raises(self) -> None:
        with patch.object(stats, "hyp2f1", side_effect=SeriesDivergenceError("forced")):
            with self.assertRaises(NumericalError) as ctx:
                t_cdf(1.0, 30.0)
        self.assertIsInstance(ctx.exception.__cause__, SeriesDivergenceError)

    def test_invalid_df(self) -> None:
        with self.assertRaises(NumericalError):
            t_cdf(1.0, 0.0)

    def test_huge_df_is_normal(self) -> None:
        self.assertEqual(t_cdf(10.0, 1e6), 1.0)
        self.assertEqual(t_cdf(1.0, 1e7), 0.8413)
        self.assertEqual(t_cdf(1.96, math.inf), 0.975)

    def test_normal_limit_is_continuous(self) -> None:
        for t in (0.5, 1.0, 2.0, 3.0):
            with self.subTest(t=t):
                self.assertAlmostEqual(t_cdf(t, 99_999.0), t_cdf(t, 100_001.0), delta=1e-4)


# ---------------------------------------------------------------------------
# Welch's t-test
# ---------------------------------------------------------------------------


class TestTwoSampleTTest(unittest.TestCase):
    def test_known_values(self) -> None:
        _close(self, two_sample_t_test(10.0, 11.0, 0.5, 0.5, 5, 4, True), 0.022)
        _close(self, two_sample_t_test(10.0, 12.0, 4.0, 3.0, 5, 4, True), 0.42)

    def test_equal_means(self) -> None:
        _close(self, two_sample_t_test(10.0, 10.0, 0.5, 0.5, 5, 4, True), 1.0)

    def test_one_tailed_is_half(self) -> None:
        two = two_sample_t_test(10.0, 12.0, 4.0, 3.0, 5, 4, True)
        one = two_sample_t_test(10.0, 12.0, 4.0, 3.0, 5, 4, False)
        self.assertAlmostEqual(one * 2, two, places=6)

    def test_symmetric_in_order(self) -> None:
        a = two_sample_t_test(10.0, 11.0, 0.5, 0.7, 5, 6)
        b = two_sample_t_test(11.0, 10.0, 0.7, 0.5, 6, 5)
        self.assertAlmostEqual(a, b, places=10)

    def test_large_samples_are_exactly_zero(self) -> None:
        """Very distinct large samples round to p = 0 instead of drifting."""
        cases = [
            (
                (2962.4365482233502, 121.26102846652408, 197),
                (1323.7373737373737, 110.33944725932848, 198),
            ),
            (
                (1036.6834170854272, 84.751897427476393, 199),
                (978.28282828282829, 85.395947359712380, 198),
            ),
            (
                (1018.0, 121.86160698218863, 200),
                (904.52261306532660, 114.28145408898557, 199),
            ),
        ]
        for a, b in cases:
            with self.subTest(a=a, b=b):
                self.assertEqual(two_sample_t_test(a[0], b[0], a[1], b[1], a[2], b[2], True), 0.0)

    def test_zero_stdev_is_distinguishable(self) -> None:
        self.assertEqual(two_sample_t_test(10.0, 10.0, 0.0, 0.5, 5, 4), 0.0)
        self.assertEqual(two_sample_t_test(10.0, 11.0, 0.5, 0.0, 5, 4), 0.0)

    def test_too_few_observations(self) -> None:
        with self.assertRaises(ValueError):
            two_sample_t_test(10.0, 11.0, 0.5, 0.5, 1, 4)

    def test_p_value_in_range(self) -> None:
        for diff in (0.01, 0.1, 0.5, 1.0, 5.0, 50.0):
            with self.subTest(diff=diff):
                p = two_sample_t_test(10.0, 10.0 + diff, 1.0, 1.5, 30, 40)
                self.assertGreaterEqual(p, 0.0)
                self.assertLessEqual(p, 1.0)

    def test_welch_df_equal_groups(self) -> None:
        """Equal variances and sizes give n1 + n2 - 2 degrees of freedom."""
        self.assertAlmostEqual(welch_degrees_of_freedom(1.0, 1.0, 10, 10), 18.0, places=10)


# ---------------------------------------------------------------------------
# Critical values
# ---------------------------------------------------------------------------


class TestTLookup(unittest.TestCase):
    def test_exact_rows(self) -> None:
        self.assertEqual(t_lookup(4), 3.747)
        self.assertEqual(t_lookup(12), 2.681)

    def test_rounds_up_to_decade(self) -> None:
        self.assertEqual(t_lookup(35), 2.423)
        self.assertEqual(t_lookup(72), 2.374)
        self.assertEqual(t_lookup(100), 2.364)

    def test_asymptotic_row(self) -> None:
        self.assertEqual(t_lookup(101), 2.326)
        self.assertEqual(t_lookup(124124), 2.326)

    def test_other_confidence(self) -> None:
        self.assertEqual(t_lookup(10, confidence=0.95), 2.228)
        self.assertEqual(t_lookup(500, confidence=0.99), 2.576)

    def test_invalid(self) -> None:
        with self.assertRaises(ValueError):
            t_lookup(0)
        with self.assertRaises(ValueError):
            t_lookup(10, confidence=0.97)

    def test_half_width(self) -> None:
        self.assertAlmostEqual(confidence_half_width(2.0, 5), 3.747 * 2.0 / math.sqrt(5))


if __name__ == "__main__":
    unittest.main()
