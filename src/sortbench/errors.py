"""Exception hierarchy for sortbench.

Every failure the benchmark can raise derives from ``BenchmarkError``.
Insufficient data for a cell is *not* an error: aggregation reports it as
``None``.
"""

from __future__ import annotations

from typing import Any


class BenchmarkError(Exception):
    """Base class for benchmark failures.

    Keyword context is kept on the instance and rendered by ``__str__``
    so log lines and CLI errors show where the failure happened.
    """

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.context = context

    def __str__(self) -> str:
        parts = [super().__str__()]
        for key, value in self.context.items():
            if value is not None:
                parts.append(f"{key}={value}")
        return "; ".join(parts) if len(parts) > 1 else parts[0]


class ConfigurationError(BenchmarkError, ValueError):
    """Rejected configuration, raised before any job is scheduled."""


class CorrectnessError(BenchmarkError):
    """A candidate produced output that is not a sorted permutation."""

    def __init__(
        self,
        message: str,
        *,
        algorithm: str | None = None,
        size: int | None = None,
        trial: int | None = None,
        **context: Any,
    ) -> None:
        super().__init__(message, algorithm=algorithm, size=size, trial=trial, **context)
        self.algorithm = algorithm
        self.size = size
        self.trial = trial


class CandidateCrashError(BenchmarkError):
    """A candidate raised while sorting. Chained to the original error."""


class NumericalError(BenchmarkError, ArithmeticError):
    """The statistics pipeline could not produce a finite, valid answer."""


class SeriesDivergenceError(NumericalError):
    """A hypergeometric series failed to converge or lost precision."""


class SchedulerError(BenchmarkError, RuntimeError):
    """Coordinator and worker disagree about the state of the run."""
