"""Export benchmark results to CSV and Markdown formats.

CSV format: one row per algorithm per size (long format for pandas/R),
ranked within the chosen group. Cells that were never scheduled are
omitted; cells with too few samples have empty statistics.

Markdown format: one table per group, suitable for reports, README
files and GitHub issues.
"""

from __future__ import annotations

import csv
import io
from typing import Sequence

from sortbench.algorithms import GROUPS, TOTALS, AlgorithmGroup
from sortbench.bench.display import format_result_cell
from sortbench.bench.results import BenchRun

CSV_COLUMNS = [
    "algorithm",
    "name",
    "complexity",
    "size",
    "samples",
    "mean_ms",
    "stdev_ms",
    "ci_ms",
    "fastest",
    "stat_tied",
    "practically_tied",
]


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------


def export_csv(run: BenchRun, group: AlgorithmGroup | None = None) -> str:
    """Export results as CSV, ranked within *group* (Totals by default)."""
    group = group or TOTALS
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)

    members, rows = run.table.ranked_group(
        group,
        alpha=run.config.alpha,
        diff_threshold=run.config.diff_threshold,
    )
    indices = group.members(run.algorithms)
    for algorithm_index, algorithm, row in zip(indices, members, rows):
        for size_index, result in enumerate(row):
            if (algorithm_index, size_index) not in run.samples:
                continue
            base = [algorithm.id, algorithm.name, algorithm.complexity, run.sizes[size_index]]
            if result is None:
                writer.writerow(base + [""] * (len(CSV_COLUMNS) - len(base)))
                continue
            writer.writerow(
                base
                + [
                    result.count,
                    f"{result.mean / 1e6:.6f}",
                    f"{result.stdev / 1e6:.6f}",
                    f"{result.ci_half_width(run.config.confidence) / 1e6:.6f}",
                    result.is_fastest,
                    result.is_stat_tied,
                    result.is_practically_tied,
                ]
            )

    return output.getvalue()


# ---------------------------------------------------------------------------
# Markdown export
# ---------------------------------------------------------------------------


def export_markdown(
    run: BenchRun,
    groups: Sequence[AlgorithmGroup] | None = None,
) -> str:
    """Export results as Markdown tables, one per group."""
    lines: list[str] = []
    lines.append(f"# {run.config.name or 'Sort benchmark'}")
    lines.append("")

    for group in groups if groups is not None else GROUPS:
        members, rows = run.table.ranked_group(
            group,
            alpha=run.config.alpha,
            diff_threshold=run.config.diff_threshold,
        )
        if not members:
            continue
        indices = group.members(run.algorithms)

        lines.append(f"## {group.title}")
        lines.append("")
        lines.append("| Algorithm | " + " | ".join(f"{s:,}" for s in run.sizes) + " |")
        lines.append("|---|" + "---:|" * len(run.sizes))
        for algorithm_index, algorithm, row in zip(indices, members, rows):
            cells = []
            for size_index, result in enumerate(row):
                if (algorithm_index, size_index) not in run.samples:
                    cells.append("")
                else:
                    cells.append(format_result_cell(result, run.config.confidence))
            lines.append(f"| {algorithm.name} | " + " | ".join(cells) + " |")
        lines.append("")

    s = run.summary
    lines.append(
        f"*{s.jobs_executed:,} of {s.jobs_generated:,} jobs executed on "
        f"{s.workers} workers; values in ms with "
        f"{run.config.confidence * 100:g}% confidence intervals; "
        "\\* fastest, s statistically tied, ~ within "
        f"{run.config.diff_threshold * 100:g}% of fastest.*"
    )

    return "\n".join(lines)
