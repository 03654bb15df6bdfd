"""Command-line interface for sortbench.

Provides the main CLI entry point with ``run``, ``algorithms`` and
``system`` subcommands.
"""

from __future__ import annotations

import json
from pathlib import Path

import click

from sortbench import __version__
from sortbench.errors import BenchmarkError, ConfigurationError
from sortbench.logging import setup_logging


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """sortbench: Rank sorting algorithms with repeated randomized trials."""


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


@main.command()
@click.option(
    "--profile",
    "profile_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML benchmark profile.",
)
@click.option("--name", type=str, default=None, help="Human-readable benchmark name.")
@click.option("--min-size", type=int, default=None, help="First test size [default: 10].")
@click.option(
    "--max-size", type=int, default=None, help="Largest test size [default: 100000]."
)
@click.option(
    "--size-factor",
    type=int,
    default=None,
    help="Ratio between consecutive sizes [default: 10].",
)
@click.option("--trials", type=int, default=None, help="Trials per cell [default: 200].")
@click.option(
    "--runtime-limit",
    "runtime_limit_s",
    type=float,
    default=None,
    help="Cumulative seconds per cell before it stops [default: 10].",
)
@click.option(
    "--min-tests",
    "min_acceptable_tests",
    type=int,
    default=None,
    help="Samples a cell must keep to produce a result [default: 30].",
)
@click.option(
    "--outlier-coefficient",
    type=float,
    default=None,
    help="Tukey fence coefficient [default: 3.0].",
)
@click.option(
    "--alpha", type=float, default=None, help="Significance level for ties [default: 0.001]."
)
@click.option(
    "--diff-threshold",
    type=float,
    default=None,
    help="Relative difference counted as a practical tie [default: 0.05].",
)
@click.option(
    "--confidence",
    type=click.Choice(["0.5", "0.8", "0.9", "0.95", "0.98", "0.99"]),
    default=None,
    help="Confidence level of displayed intervals [default: 0.98].",
)
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Worker threads [default: half the physical cores].",
)
@click.option("--seed", type=int, default=None, help="Global seed [default: 2222].")
@click.option(
    "--cooldown",
    "cooldown_s",
    type=float,
    default=None,
    help="Seconds to pause before each timed call [default: 0.01].",
)
@click.option(
    "--algorithms",
    type=str,
    default=None,
    help="Comma-separated algorithm ids (see 'sortbench algorithms').",
)
@click.option(
    "--quick",
    is_flag=True,
    default=False,
    help="Quick mode: sizes up to 10,000, 50 trials, one algorithm per family.",
)
@click.option(
    "--group",
    "group_titles",
    type=str,
    multiple=True,
    help="Only show this group (repeatable), e.g. 'Merge sorts'.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "csv", "markdown"]),
    default="table",
    show_default=True,
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the report to this file instead of stdout.",
)
@click.option("-v", "--verbose", is_flag=True, help="Show detailed output.")
@click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors.")
@click.option("--log-file", type=click.Path(path_type=Path), default=None)
def run(  # noqa: PLR0913
    profile_path: Path | None,
    name: str | None,
    min_size: int | None,
    max_size: int | None,
    size_factor: int | None,
    trials: int | None,
    runtime_limit_s: float | None,
    min_acceptable_tests: int | None,
    outlier_coefficient: float | None,
    alpha: float | None,
    diff_threshold: float | None,
    confidence: str | None,
    workers: int | None,
    seed: int | None,
    cooldown_s: float | None,
    algorithms: str | None,
    quick: bool,
    group_titles: tuple[str, ...],
    output_format: str,
    output: Path | None,
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """Run the benchmark and print ranked results.

    \b
    Examples:
        # Everything, with defaults
        sortbench run

        # Quick development run of the merge sorts
        sortbench run --quick --group "Merge sorts"

        # From a YAML profile, exported as CSV
        sortbench run --profile overnight.yaml --format csv --output results.csv
    """
    from sortbench.algorithms import get_group
    from sortbench.bench.config import config_from_profile, load_profile, quick_config
    from sortbench.bench.display import format_report
    from sortbench.bench.export import export_csv, export_markdown
    from sortbench.bench.runner import BenchRunner

    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    cli_overrides: dict[str, object] = {
        "name": name,
        "min_size": min_size,
        "max_size": max_size,
        "size_factor": size_factor,
        "trials": trials,
        "runtime_limit_s": runtime_limit_s,
        "min_acceptable_tests": min_acceptable_tests,
        "outlier_coefficient": outlier_coefficient,
        "alpha": alpha,
        "diff_threshold": diff_threshold,
        "confidence": float(confidence) if confidence else None,
        "workers": workers,
        "seed": seed,
        "cooldown_s": cooldown_s,
        "algorithms": algorithms,
    }

    try:
        profile_data = load_profile(profile_path) if profile_path else {}
        config = config_from_profile(profile_data, cli_overrides=cli_overrides)
        if quick:
            config = quick_config(config)
        groups = [get_group(title) for title in group_titles] or None
        bench_run = BenchRunner(config).run()
        # Ranking runs the t-tests, so rendering can fail too.
        if output_format == "csv":
            text = export_csv(bench_run, groups[0] if groups else None)
        elif output_format == "markdown":
            text = export_markdown(bench_run, groups)
        else:
            text = format_report(bench_run, groups)
    except ConfigurationError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc
    except BenchmarkError as exc:
        click.echo(f"Benchmark aborted: {exc}", err=True)
        raise SystemExit(2) from exc
    except KeyboardInterrupt:
        click.echo("\nBenchmark interrupted.", err=True)
        raise SystemExit(130)  # noqa: B904

    if output is not None:
        output.write_text(text if text.endswith("\n") else text + "\n", encoding="utf-8")
        click.echo(f"Results written to: {output}", err=True)
    else:
        click.echo(text)


# ---------------------------------------------------------------------------
# algorithms
# ---------------------------------------------------------------------------


@main.command("algorithms")
def algorithms_cmd() -> None:
    """List the registered algorithms and their size caps."""
    from sortbench.algorithms import ALGORITHMS
    from sortbench.bench.config import DEFAULT_SIZE_LIMITS
    from sortbench.formatting import format_table

    rows = []
    for algorithm in ALGORITHMS:
        limit = DEFAULT_SIZE_LIMITS.get(algorithm.complexity)
        rows.append(
            [
                algorithm.id,
                algorithm.name,
                algorithm.complexity,
                f"{limit:,}" if limit is not None else "none",
            ]
        )
    click.echo(
        format_table(
            ["ID", "Name", "Complexity", "Max size"],
            rows,
            alignments=["l", "l", "l", "r"],
            indent=0,
        )
    )


# ---------------------------------------------------------------------------
# system
# ---------------------------------------------------------------------------


@main.command("system")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def system_cmd(as_json: bool) -> None:
    """Print system characterization for benchmark documentation."""
    from sortbench.bench.system import (
        capture_system_profile,
        default_worker_count,
        format_system_profile,
    )

    profile = capture_system_profile()
    if as_json:
        data = profile.to_dict()
        data["default_workers"] = default_worker_count()
        click.echo(json.dumps(data, indent=2))
    else:
        click.echo(format_system_profile(profile))
        click.echo(f"Workers:  {default_worker_count()} (default)")
