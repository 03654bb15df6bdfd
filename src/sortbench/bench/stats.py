"""Statistical functions for ranking sort timings.

Provides quartiles and Tukey outlier fences, sample standard deviation,
Welch's t-test and a Student's t critical-value table, all in pure
Python with no external dependencies.

The t-distribution CDF is evaluated with a Gauss hypergeometric series
when ``t^2 < df`` and through the regularized incomplete beta function
otherwise (or whenever the first series loses precision). Both routes
are hypergeometric series; when neither yields a finite probability a
``NumericalError`` is raised instead of returning a wrong answer.

References:
    Welch's t-test: Welch, B. L. (1947). "The generalization of
        'Student's' problem when several different population
        variances are involved." Biometrika 34(1-2): 28-35.
    Tukey fences: Tukey, J. W. (1977). "Exploratory Data Analysis."
    Incomplete beta as 2F1: Abramowitz & Stegun, 26.5.23 and 26.7.1.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from sortbench.errors import NumericalError, SeriesDivergenceError


# ---------------------------------------------------------------------------
# Quartiles and outlier fences
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class QuartileDescriptor:
    """Quartiles of a sample, median-of-halves method."""

    q1: float
    q2: float  # median
    q3: float
    iqr: float

    def fences(self, coefficient: float) -> tuple[float, float]:
        """Return the (lower, upper) Tukey fences for *coefficient*."""
        return self.q1 - coefficient * self.iqr, self.q3 + coefficient * self.iqr


def _median(sorted_values: Sequence[float]) -> float:
    n = len(sorted_values)
    if n % 2 == 0:
        return (sorted_values[n // 2 - 1] + sorted_values[n // 2]) / 2.0
    return float(sorted_values[n // 2])


def quartiles(samples: Sequence[float]) -> QuartileDescriptor:
    """Compute quartiles using the median-of-halves method.

    The input is copied and sorted. For an even length the halves are
    ``[:n/2]`` and ``[n/2:]``; for an odd length the middle element is
    excluded from both (``[:n/2]`` and ``[n/2+1:]``).

    Raises:
        ValueError: If fewer than 2 samples are given.
    """
    if len(samples) < 2:
        raise ValueError(f"quartiles need at least 2 samples (got {len(samples)})")

    ordered = sorted(samples)
    n = len(ordered)
    lower = ordered[: n // 2]
    upper = ordered[n // 2 :] if n % 2 == 0 else ordered[n // 2 + 1 :]

    q1 = _median(lower)
    q3 = _median(upper)
    return QuartileDescriptor(q1=q1, q2=_median(ordered), q3=q3, iqr=q3 - q1)


def tukey(value: float, descriptor: QuartileDescriptor, coefficient: float = 3.0) -> bool:
    """Return True if *value* lies inside the Tukey fences (is retained).

    The default coefficient of 3.0 only rejects extreme outliers.
    """
    lower, upper = descriptor.fences(coefficient)
    return lower <= value <= upper


def filter_outliers(
    samples: Sequence[float],
    coefficient: float = 3.0,
) -> list[float]:
    """Return the samples retained by :func:`tukey`, in input order."""
    descriptor = quartiles(samples)
    return [s for s in samples if tukey(s, descriptor, coefficient)]


# ---------------------------------------------------------------------------
# Mean and standard deviation
# ---------------------------------------------------------------------------


def mean(samples: Sequence[float]) -> float:
    """Arithmetic mean. Raises ValueError on an empty sample."""
    if not samples:
        raise ValueError("mean of an empty sample")
    return sum(samples) / len(samples)


def stdev(samples: Sequence[float], sample_mean: float) -> float:
    """Sample standard deviation (n - 1 denominator).

    *sample_mean* is passed in so callers can reuse a computed mean.

    Raises:
        ValueError: If fewer than 2 samples are given.
    """
    n = len(samples)
    if n < 2:
        raise ValueError(f"stdev needs at least 2 samples (got {n})")
    total = sum((s - sample_mean) ** 2 for s in samples)
    return math.sqrt(total / (n - 1))


# ---------------------------------------------------------------------------
# Hypergeometric series and incomplete beta
# ---------------------------------------------------------------------------

_SERIES_MAX_TERMS = 100_000
_SERIES_REL_TOL = 1e-15
# Terms this large cancel catastrophically in alternating series.
_SERIES_MAX_TERM = 1e10

# Past this many degrees of freedom the t CDF matches the normal CDF to
# 4 decimals, while the incomplete beta series needs ~df/3 terms.
_NORMAL_DF = 100_000


def hyp2f1(a: float, b: float, c: float, z: float) -> float:
    """Gauss hypergeometric function 2F1(a, b; c; z) by direct summation.

    Each term is derived from the previous one, so the rising
    factorials never overflow on their own.

    Raises:
        SeriesDivergenceError: If a term is non-finite or reaches
            1e10 in magnitude, or the series has not converged after
            100,000 terms.
        ValueError: If *c* is zero or a negative integer.
    """
    if c <= 0 and c == math.floor(c):
        raise ValueError(f"2F1 undefined for non-positive integer c={c}")

    term = 1.0
    total = 1.0
    for n in range(_SERIES_MAX_TERMS):
        term *= (a + n) * (b + n) / ((c + n) * (n + 1)) * z
        if not math.isfinite(term) or abs(term) >= _SERIES_MAX_TERM:
            raise SeriesDivergenceError(
                "hypergeometric series lost precision",
                a=a,
                b=b,
                c=c,
                z=z,
                term=n + 1,
            )
        total += term
        if term == 0.0 or abs(term) <= _SERIES_REL_TOL * abs(total):
            return total
    raise SeriesDivergenceError(
        "hypergeometric series did not converge",
        a=a,
        b=b,
        c=c,
        z=z,
        terms=_SERIES_MAX_TERMS,
    )


def regularized_incomplete_beta(x: float, a: float, b: float) -> float:
    """Compute the regularized incomplete beta function I_x(a, b).

    Uses ``I_x(a, b) = x^a (1-x)^b / (a B(a, b)) * 2F1(a+b, 1; a+1; x)``
    with the prefactor evaluated in log space. The symmetry relation
    ``I_x(a, b) = 1 - I_{1-x}(b, a)`` keeps the series argument on the
    fast-converging side.
    """
    if not 0.0 <= x <= 1.0:
        raise ValueError(f"incomplete beta needs 0 <= x <= 1 (got {x})")
    if x == 0.0:
        return 0.0
    if x == 1.0:
        return 1.0

    if x > (a + 1) / (a + b + 2):
        return 1.0 - regularized_incomplete_beta(1.0 - x, b, a)

    lbeta = math.lgamma(a) + math.lgamma(b) - math.lgamma(a + b)
    log_prefactor = a * math.log(x) + b * math.log1p(-x) - math.log(a) - lbeta
    return math.exp(log_prefactor) * hyp2f1(a + b, 1.0, a + 1.0, x)


# ---------------------------------------------------------------------------
# Student's t distribution
# ---------------------------------------------------------------------------


def _round4(value: float) -> float:
    return round(value * 10000.0) / 10000.0


def _valid_probability(value: float) -> bool:
    return math.isfinite(value) and 0.0 <= value <= 1.0


def t_cdf(t: float, df: float) -> float:
    """CDF of Student's t distribution at *t* (t >= 0), to 4 decimals.

    When ``t^2 < df`` a series in ``2F1(1/2, (df+1)/2; 3/2; -t^2/df)``
    is tried first. If it diverges or yields an invalid probability,
    the incomplete beta form ``1 - I_{df/(df+t^2)}(df/2, 1/2) / 2`` is
    used instead. Above 100,000 degrees of freedom the standard normal
    CDF is returned.

    Raises:
        NumericalError: If both formulations fail.
    """
    if df <= 0 or math.isnan(df) or math.isnan(t):
        raise NumericalError("invalid t-distribution parameters", t=t, df=df)
    if df > _NORMAL_DF:
        return _round4(0.5 * math.erfc(-t / math.sqrt(2.0)))

    series_error: Exception | None = None
    if t * t < df:
        try:
            scale = math.exp(math.lgamma((df + 1) / 2) - math.lgamma(df / 2))
            series = hyp2f1(0.5, (df + 1) / 2, 1.5, -t * t / df)
            result = _round4(0.5 + t * scale * series / math.sqrt(df * math.pi))
            if _valid_probability(result):
                return result
            series_error = NumericalError("series CDF out of range", value=result)
        except SeriesDivergenceError as exc:
            series_error = exc

    try:
        x = df / (df + t * t)
        result = _round4(1.0 - 0.5 * regularized_incomplete_beta(x, df / 2, 0.5))
    except (SeriesDivergenceError, ValueError, OverflowError) as exc:
        raise NumericalError(
            "t-distribution CDF diverged in both formulations",
            t=t,
            df=df,
            series=series_error,
        ) from exc
    if not _valid_probability(result):
        raise NumericalError(
            "t-distribution CDF out of range",
            t=t,
            df=df,
            value=result,
            series=series_error,
        )
    return result


def welch_degrees_of_freedom(
    stdev1: float,
    stdev2: float,
    n1: int,
    n2: int,
) -> float:
    """Welch-Satterthwaite degrees of freedom for two samples."""
    se1 = stdev1**2 / n1
    se2 = stdev2**2 / n2
    return (se1 + se2) ** 2 / (se1**2 / (n1 - 1) + se2**2 / (n2 - 1))


def two_sample_t_test(
    mean1: float,
    mean2: float,
    stdev1: float,
    stdev2: float,
    n1: int,
    n2: int,
    two_tailed: bool = True,
) -> float:
    """Welch's unequal-variance t-test from summary statistics.

    Returns the p-value for the null hypothesis that both population
    means are equal.

    A zero standard deviation on either side short-circuits to 0.0
    (the samples are treated as distinguishable). Identical means give
    1.0 two-tailed, 0.5 one-tailed.

    Raises:
        ValueError: If either sample has fewer than 2 observations.
        NumericalError: If the t CDF cannot be evaluated.
    """
    if n1 < 2 or n2 < 2:
        raise ValueError(f"t-test needs at least 2 observations per sample (got {n1}, {n2})")
    if stdev1 == 0 or stdev2 == 0:
        return 0.0

    tails = 2.0 if two_tailed else 1.0
    t = abs(mean1 - mean2) / math.sqrt(stdev1**2 / n1 + stdev2**2 / n2)
    if t == 0.0:
        return 0.5 * tails

    df = welch_degrees_of_freedom(stdev1, stdev2, n1, n2)
    p = (1.0 - t_cdf(t, df)) * tails
    if not _valid_probability(p):
        raise NumericalError("t-test p-value out of range", p=p, t=t, df=df)
    return p


# ---------------------------------------------------------------------------
# Critical values
# ---------------------------------------------------------------------------

CONFIDENCE_LEVELS: tuple[float, ...] = (0.50, 0.80, 0.90, 0.95, 0.98, 0.99)

# Two-sided critical t values by degrees of freedom; columns follow
# CONFIDENCE_LEVELS. Key 0 is the normal-approximation row.
T_TABLE: dict[int, tuple[float, float, float, float, float, float]] = {
    1: (1.000, 3.078, 6.314, 12.706, 31.821, 63.657),
    2: (0.816, 1.886, 2.920, 4.303, 6.965, 9.925),
    3: (0.765, 1.638, 2.353, 3.182, 4.541, 5.841),
    4: (0.741, 1.533, 2.132, 2.776, 3.747, 4.604),
    5: (0.727, 1.476, 2.015, 2.571, 3.365, 4.032),
    6: (0.718, 1.440, 1.943, 2.447, 3.143, 3.707),
    7: (0.711, 1.415, 1.895, 2.365, 2.998, 3.499),
    8: (0.706, 1.397, 1.860, 2.306, 2.896, 3.355),
    9: (0.703, 1.383, 1.833, 2.262, 2.821, 3.250),
    10: (0.700, 1.372, 1.812, 2.228, 2.764, 3.169),
    11: (0.697, 1.363, 1.796, 2.201, 2.718, 3.106),
    12: (0.695, 1.356, 1.782, 2.179, 2.681, 3.055),
    13: (0.694, 1.350, 1.771, 2.160, 2.650, 3.012),
    14: (0.692, 1.345, 1.761, 2.145, 2.624, 2.977),
    15: (0.691, 1.341, 1.753, 2.131, 2.602, 2.947),
    16: (0.690, 1.337, 1.746, 2.120, 2.583, 2.921),
    17: (0.689, 1.333, 1.740, 2.110, 2.567, 2.898),
    18: (0.688, 1.330, 1.734, 2.101, 2.552, 2.878),
    19: (0.688, 1.328, 1.729, 2.093, 2.539, 2.861),
    20: (0.687, 1.325, 1.725, 2.086, 2.528, 2.845),
    21: (0.686, 1.323, 1.721, 2.080, 2.518, 2.831),
    22: (0.686, 1.321, 1.717, 2.074, 2.508, 2.819),
    23: (0.685, 1.319, 1.714, 2.069, 2.500, 2.807),
    24: (0.685, 1.318, 1.711, 2.064, 2.492, 2.797),
    25: (0.684, 1.316, 1.708, 2.060, 2.485, 2.787),
    26: (0.684, 1.315, 1.706, 2.056, 2.479, 2.779),
    27: (0.684, 1.314, 1.703, 2.052, 2.473, 2.771),
    28: (0.683, 1.313, 1.701, 2.048, 2.467, 2.763),
    29: (0.683, 1.311, 1.699, 2.045, 2.462, 2.756),
    30: (0.683, 1.310, 1.697, 2.042, 2.457, 2.750),
    40: (0.681, 1.303, 1.684, 2.021, 2.423, 2.704),
    50: (0.679, 1.299, 1.676, 2.009, 2.403, 2.678),
    60: (0.679, 1.296, 1.671, 2.000, 2.390, 2.660),
    70: (0.678, 1.294, 1.667, 1.994, 2.381, 2.648),
    80: (0.678, 1.292, 1.664, 1.990, 2.374, 2.639),
    90: (0.677, 1.291, 1.662, 1.987, 2.368, 2.632),
    100: (0.677, 1.290, 1.660, 1.984, 2.364, 2.626),
    0: (0.674, 1.282, 1.645, 1.960, 2.326, 2.576),
}


def t_lookup(degrees_of_freedom: int, confidence: float = 0.98) -> float:
    """Critical t value for a two-sided interval at *confidence*.

    Exact rows up to 30 degrees of freedom; between 31 and 100 the
    value for the next decade up is returned (a slightly wider, so
    conservative, interval); above 100 the normal approximation row.

    Raises:
        ValueError: If df < 1 or *confidence* is not tabulated.
    """
    if degrees_of_freedom < 1:
        raise ValueError(f"degrees of freedom must be >= 1 (got {degrees_of_freedom})")
    try:
        column = CONFIDENCE_LEVELS.index(confidence)
    except ValueError:
        raise ValueError(
            f"no critical values tabulated for confidence {confidence}; "
            f"choose one of {', '.join(str(c) for c in CONFIDENCE_LEVELS)}"
        ) from None

    if degrees_of_freedom <= 30:
        row = degrees_of_freedom
    elif degrees_of_freedom <= 100:
        row = (degrees_of_freedom + 9) // 10 * 10
    else:
        row = 0
    return T_TABLE[row][column]


def confidence_half_width(
    sample_stdev: float,
    count: int,
    confidence: float = 0.98,
) -> float:
    """Half-width of the t confidence interval for a mean."""
    return t_lookup(count - 1, confidence) * sample_stdev / math.sqrt(count)
