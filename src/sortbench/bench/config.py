"""Benchmark configuration and profile loading.

Handles:
- The resolved configuration record for a run.
- Loading benchmark profiles from YAML files.
- Merging CLI options with profile values.
- Validating the final configuration before any job is scheduled.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Iterable

import yaml

from sortbench.algorithms import ALGORITHMS, QUICK_ALGORITHMS
from sortbench.bench.seeds import DEFAULT_SEED
from sortbench.bench.stats import CONFIDENCE_LEVELS
from sortbench.errors import ConfigurationError
from sortbench.logging import get_logger

log = get_logger("bench.config")


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

#: Largest size each complexity class is tested at. Classes missing from
#: the table, or mapped to None, are unbounded.
DEFAULT_SIZE_LIMITS: dict[str, int | None] = {
    "O(n^2)": 10_000,
    "O(n^(4/3))": None,
    "O(n^(3/2))": None,
    "O(n log n)": None,
    "O(n)": None,
}

QUICK_MAX_SIZE = 10_000
QUICK_TRIALS = 50


def _all_algorithm_ids() -> list[str]:
    return [a.id for a in ALGORITHMS]


# ---------------------------------------------------------------------------
# BenchConfig
# ---------------------------------------------------------------------------


@dataclass
class BenchConfig:
    """Resolved configuration for a benchmark run."""

    name: str = ""

    # Test sizes
    min_size: int = 10
    max_size: int = 100_000
    size_factor: int = 10

    # Sampling
    trials: int = 200
    runtime_limit_s: float = 10.0
    min_acceptable_tests: int = 30
    outlier_coefficient: float = 3.0

    # Ranking
    alpha: float = 0.001
    diff_threshold: float = 0.05
    confidence: float = 0.98

    # Execution
    workers: int | None = None  # None = auto (half the physical cores)
    seed: int = DEFAULT_SEED
    cooldown_s: float = 0.01

    algorithms: list[str] = field(default_factory=_all_algorithm_ids)
    size_limits: dict[str, int | None] = field(default_factory=lambda: dict(DEFAULT_SIZE_LIMITS))

    @property
    def sizes(self) -> list[int]:
        """The test size series: min_size, min_size*factor, ... <= max_size."""
        sizes: list[int] = []
        if self.min_size < 1 or self.size_factor < 2:
            return sizes
        size = self.min_size
        while size <= self.max_size:
            sizes.append(size)
            size *= self.size_factor
        return sizes

    @property
    def runtime_limit_ns(self) -> int:
        return int(self.runtime_limit_s * 1_000_000_000)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass
class ValidationError:
    """A single configuration validation error."""

    field: str
    message: str
    severity: str = "error"  # "error" or "warning"


def validate_config(
    config: BenchConfig,
    known_algorithms: Iterable[str] | None = None,
) -> list[ValidationError]:
    """Validate a benchmark configuration.

    *known_algorithms* defaults to the registration table's ids.

    Returns a list of validation errors.  Empty list means valid.
    """
    errors: list[ValidationError] = []

    if config.min_size < 1:
        errors.append(
            ValidationError(
                field="min_size",
                message=f"Minimum size must be at least 1 (got {config.min_size}).",
            )
        )
    if config.max_size < config.min_size:
        errors.append(
            ValidationError(
                field="max_size",
                message=(
                    f"Maximum size ({config.max_size}) is below the "
                    f"minimum size ({config.min_size})."
                ),
            )
        )
    if config.size_factor < 2:
        errors.append(
            ValidationError(
                field="size_factor",
                message=f"Size factor must be at least 2 (got {config.size_factor}).",
            )
        )

    if config.trials < 1:
        errors.append(
            ValidationError(
                field="trials",
                message=f"Need at least one trial per cell (got {config.trials}).",
            )
        )
    if config.runtime_limit_s <= 0:
        errors.append(
            ValidationError(
                field="runtime_limit_s",
                message=f"Runtime limit must be positive (got {config.runtime_limit_s}).",
            )
        )
    if config.min_acceptable_tests < 2:
        errors.append(
            ValidationError(
                field="min_acceptable_tests",
                message=(
                    f"Need at least 2 retained samples for a standard deviation "
                    f"(got {config.min_acceptable_tests})."
                ),
            )
        )
    elif config.trials >= 1 and config.min_acceptable_tests > config.trials:
        errors.append(
            ValidationError(
                field="min_acceptable_tests",
                message=(
                    f"Minimum acceptable tests ({config.min_acceptable_tests}) exceeds "
                    f"trials per cell ({config.trials}); no cell can produce a result."
                ),
                severity="warning",
            )
        )
    if config.outlier_coefficient <= 0:
        errors.append(
            ValidationError(
                field="outlier_coefficient",
                message=(
                    f"Outlier coefficient must be positive "
                    f"(got {config.outlier_coefficient})."
                ),
            )
        )

    if not 0 < config.alpha < 1:
        errors.append(
            ValidationError(
                field="alpha",
                message=f"Significance level must be in (0, 1) (got {config.alpha}).",
            )
        )
    if config.diff_threshold < 0:
        errors.append(
            ValidationError(
                field="diff_threshold",
                message=f"Difference threshold cannot be negative (got {config.diff_threshold}).",
            )
        )
    if config.confidence not in CONFIDENCE_LEVELS:
        levels = ", ".join(str(c) for c in CONFIDENCE_LEVELS)
        errors.append(
            ValidationError(
                field="confidence",
                message=f"Confidence must be one of {levels} (got {config.confidence}).",
            )
        )

    if config.workers is not None and config.workers < 1:
        errors.append(
            ValidationError(
                field="workers",
                message=f"Worker count must be at least 1 (got {config.workers}).",
            )
        )
    if config.cooldown_s < 0:
        errors.append(
            ValidationError(
                field="cooldown_s",
                message=f"Cooldown cannot be negative (got {config.cooldown_s}).",
            )
        )

    if not config.algorithms:
        errors.append(
            ValidationError(field="algorithms", message="No algorithms selected."),
        )
    known = set(known_algorithms) if known_algorithms is not None else _all_algorithm_ids()
    for algorithm_id in config.algorithms:
        if algorithm_id not in known:
            errors.append(
                ValidationError(
                    field="algorithms",
                    message=f"Unknown algorithm: {algorithm_id!r}.",
                )
            )

    for complexity, limit in config.size_limits.items():
        if limit is not None and limit < 0:
            errors.append(
                ValidationError(
                    field=f"size_limits.{complexity}",
                    message=f"Size limit cannot be negative (got {limit}).",
                )
            )

    return errors


def check_config(config: BenchConfig, known_algorithms: Iterable[str] | None = None) -> None:
    """Log warnings and raise ConfigurationError on any fatal problem."""
    errors = validate_config(config, known_algorithms)
    for w in errors:
        if w.severity == "warning":
            log.warning("Config warning: %s: %s", w.field, w.message)
    fatal = [e for e in errors if e.severity == "error"]
    if fatal:
        messages = [f"  {e.field}: {e.message}" for e in fatal]
        raise ConfigurationError("Invalid benchmark configuration:\n" + "\n".join(messages))


# ---------------------------------------------------------------------------
# YAML profile loading
# ---------------------------------------------------------------------------


def load_profile(profile_path: Path) -> dict[str, Any]:
    """Load a benchmark profile from a YAML file.

    Profile format::

        name: "overnight"
        max_size: 1000000
        trials: 200
        runtime_limit_s: 10
        workers: 4
        algorithms: [insertionsort, shellsort_ciura, builtin_sort]
        size_limits:
          "O(n^2)": 10000

    Returns:
        The parsed YAML as a dict.
    """
    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_path}")

    text = profile_path.read_text()
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            f"Invalid YAML in profile: {exc}", path=str(profile_path)
        ) from exc

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Profile must be a YAML mapping, got {type(data).__name__}",
            path=str(profile_path),
        )

    return data


_SCALAR_FIELDS = {
    "name": str,
    "min_size": int,
    "max_size": int,
    "size_factor": int,
    "trials": int,
    "runtime_limit_s": float,
    "min_acceptable_tests": int,
    "outlier_coefficient": float,
    "alpha": float,
    "diff_threshold": float,
    "confidence": float,
    "workers": int,
    "seed": int,
    "cooldown_s": float,
}


def _coerce(key: str, value: Any) -> Any:
    if value is None:
        return None
    try:
        return _SCALAR_FIELDS[key](value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid value for '{key}': {value!r}", field=key) from exc


def config_from_profile(
    profile_data: dict[str, Any],
    *,
    cli_overrides: dict[str, Any] | None = None,
) -> BenchConfig:
    """Build a BenchConfig from a parsed YAML profile.

    CLI overrides take precedence over profile values; keys set to None
    in *cli_overrides* are treated as "not given".

    Args:
        profile_data: Parsed YAML profile dict (may be empty).
        cli_overrides: Dict of CLI option values that override
            profile values.  Keys match BenchConfig field names.

    Returns:
        BenchConfig with every field resolved.
    """
    cli = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    known = set(_SCALAR_FIELDS) | {"algorithms", "size_limits"}
    for key in profile_data:
        if key not in known:
            log.warning("Ignoring unknown profile key: %s", key)

    config = BenchConfig()
    for key in _SCALAR_FIELDS:
        if key in cli:
            setattr(config, key, _coerce(key, cli[key]))
        elif key in profile_data:
            setattr(config, key, _coerce(key, profile_data[key]))

    algorithms = cli.get("algorithms", profile_data.get("algorithms"))
    if algorithms is not None:
        if isinstance(algorithms, str):
            algorithms = [a.strip() for a in algorithms.split(",") if a.strip()]
        if not isinstance(algorithms, list):
            raise ConfigurationError("Profile 'algorithms' must be a list of algorithm ids")
        config.algorithms = [str(a) for a in algorithms]

    limits = profile_data.get("size_limits")
    if limits is not None:
        if not isinstance(limits, dict):
            raise ConfigurationError(
                "Profile 'size_limits' must be a mapping of complexity class -> max size"
            )
        for complexity, limit in limits.items():
            config.size_limits[str(complexity)] = None if limit is None else int(limit)
    if "size_limits" in cli:
        config.size_limits.update(cli["size_limits"])

    return config


# ---------------------------------------------------------------------------
# Quick mode helper
# ---------------------------------------------------------------------------


def quick_config(config: BenchConfig) -> BenchConfig:
    """Apply quick mode settings for rapid iteration.

    Caps the size series at 10,000, reduces trials to 50, drops the
    cooldown and keeps one representative algorithm per family.
    Useful during development and testing.
    """
    config.max_size = min(config.max_size, QUICK_MAX_SIZE)
    config.trials = min(config.trials, QUICK_TRIALS)
    config.min_acceptable_tests = min(config.min_acceptable_tests, config.trials)
    config.cooldown_s = 0.0
    selected = [a for a in config.algorithms if a in QUICK_ALGORITHMS]
    config.algorithms = selected or list(QUICK_ALGORITHMS)
    config.name = f"{config.name} (quick)" if config.name else "Quick benchmark"
    return config
