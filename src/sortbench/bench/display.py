"""Terminal display formatting for benchmark results.

One table per presentation group: a row per member algorithm, a column
per test size. Each cell shows the mean in milliseconds, the confidence
interval half-width with its share of the mean, and ranking markers.
"""

from __future__ import annotations

from typing import Sequence

from sortbench.algorithms import GROUPS, AlgorithmGroup
from sortbench.bench.results import BenchmarkResult, BenchRun, ScheduleSummary
from sortbench.formatting import (
    format_count,
    format_duration,
    format_ms,
    format_percentage,
    format_section_header,
    format_table,
)

FASTEST = "*"
STAT_TIED = "s"
PRACTICALLY_TIED = "~"

#: Shown for a cell that ran but kept too few samples.
NO_RESULT = "-"


def markers(result: BenchmarkResult) -> str:
    """Ranking markers for a ranked result, e.g. ``'s~'``."""
    if result.is_fastest:
        return FASTEST
    text = ""
    if result.is_stat_tied:
        text += STAT_TIED
    if result.is_practically_tied:
        text += PRACTICALLY_TIED
    return text


def format_result_cell(result: BenchmarkResult | None, confidence: float = 0.98) -> str:
    """``'1.234 ± 0.010 (0.8%) *'`` or ``'-'`` for no result."""
    if result is None:
        return NO_RESULT
    ci = result.ci_half_width(confidence)
    text = (
        f"{format_ms(result.mean)} ± {format_ms(ci)} "
        f"({format_percentage(ci, result.mean)})"
    )
    mark = markers(result)
    return f"{text} {mark}" if mark else text


def format_group_table(run: BenchRun, group: AlgorithmGroup) -> str:
    """Ranked table for one group, or an empty string if it has no members."""
    members, rows = run.table.ranked_group(
        group,
        alpha=run.config.alpha,
        diff_threshold=run.config.diff_threshold,
    )
    if not members:
        return ""
    indices = group.members(run.algorithms)

    headers = ["Algorithm"] + [format_count(size) for size in run.sizes]
    table_rows: list[list[str]] = []
    for algorithm_index, algorithm, row in zip(indices, members, rows):
        cells = [algorithm.name]
        for size_index, result in enumerate(row):
            if (algorithm_index, size_index) not in run.samples:
                # Above the algorithm's size cap: never scheduled.
                cells.append("")
            else:
                cells.append(format_result_cell(result, run.config.confidence))
        table_rows.append(cells)

    return format_table(
        headers,
        table_rows,
        alignments=["l"] + ["r"] * len(run.sizes),
    )


def format_legend(run: BenchRun) -> str:
    pct = f"{run.config.diff_threshold * 100:g}%"
    return (
        f"Values in ms; {run.config.confidence * 100:g}% confidence interval displayed; "
        f"{FASTEST} = fastest; "
        f"{STAT_TIED} = statistically equal to fastest (p >= {run.config.alpha:g}); "
        f"{PRACTICALLY_TIED} = within {pct} of fastest; "
        f"{NO_RESULT} = too few samples"
    )


def format_summary(summary: ScheduleSummary) -> str:
    lines = [
        f"Jobs:     {format_count(summary.jobs_generated)} generated, "
        f"{format_count(summary.jobs_executed)} executed, "
        f"{format_count(summary.jobs_discarded)} discarded",
        f"Samples:  {format_count(summary.samples_recorded)} recorded, "
        f"{format_count(summary.samples_dropped)} dropped after their cell was exhausted",
        f"Cells:    {summary.cells_exhausted} reached the runtime limit",
        f"Workers:  {summary.workers}",
        f"Runtime:  {format_duration(summary.wall_time_s)}",
    ]
    return "\n".join(lines)


def format_report(
    run: BenchRun,
    groups: Sequence[AlgorithmGroup] | None = None,
) -> str:
    """Format a complete run: every group table, the legend and the summary."""
    lines: list[str] = []
    if run.config.name:
        lines.append(run.config.name)
        lines.append("─" * len(run.config.name))
        lines.append("")

    for group in groups if groups is not None else GROUPS:
        table = format_group_table(run, group)
        if not table:
            continue
        lines.append(format_section_header(group.title))
        lines.append(table)
        lines.append("")

    lines.append(format_legend(run))
    lines.append("")
    lines.append(format_summary(run.summary))
    return "\n".join(lines)
