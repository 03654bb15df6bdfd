"""Shared text formatting helpers for sortbench.

Provides functions for formatting durations, sizes, timings and aligned
tables used by the report and the CLI.
"""

from __future__ import annotations


def format_duration(seconds: float) -> str:
    """Format seconds as human-readable duration.

    Examples: ``'8s'``, ``'1m 23s'``, ``'1h 12m 34s'``. Always whole seconds
    (truncated, not rounded).
    """
    total = int(seconds)
    if total >= 3600:
        h = total // 3600
        m = (total % 3600) // 60
        s = total % 60
        return f"{h}h {m:2d}m {s:2d}s"
    if total >= 60:
        m = total // 60
        s = total % 60
        return f"{m}m {s:2d}s"
    return f"{total}s"


def format_count(n: int) -> str:
    """Thousands-separated integer: ``1000000`` -> ``'1,000,000'``."""
    return f"{n:,}"


def format_ms(nanoseconds: float, digits: int = 3) -> str:
    """Nanoseconds as milliseconds with a fixed number of decimals."""
    return f"{nanoseconds / 1_000_000:.{digits}f}"


def format_percentage(part: float, total: float) -> str:
    """Format as percentage: ``'4.2%'``. Returns ``'-'`` if *total* is 0."""
    if total == 0:
        return "-"
    return f"{part / total * 100:.1f}%"


def format_table(
    headers: list[str],
    rows: list[list[str]],
    *,
    alignments: list[str] | None = None,
    indent: int = 2,
) -> str:
    """Format a list of rows as an aligned text table.

    Column widths come from the content. Short rows are padded with
    empty cells.

    Args:
        headers: Column header strings.
        rows: List of rows, each a list of cell strings.
        alignments: Per-column alignment: ``'l'``, ``'r'``, or ``'c'``.
        indent: Number of leading spaces per line.

    Returns:
        The formatted table as a string.
    """
    if not headers:
        return ""

    ncols = len(headers)
    aligns = list(alignments or [])
    aligns += ["l"] * (ncols - len(aligns))

    cells = [(list(row) + [""] * ncols)[:ncols] for row in rows]
    widths = [len(h) for h in headers]
    for row in cells:
        for ci, cell in enumerate(row):
            widths[ci] = max(widths[ci], len(cell))

    def _format_cell(text: str, width: int, align: str) -> str:
        if align == "r":
            return text.rjust(width)
        if align == "c":
            return text.center(width)
        return text.ljust(width)

    prefix = " " * indent
    lines = [
        prefix + "  ".join(_format_cell(headers[i], widths[i], aligns[i]) for i in range(ncols)),
        prefix + "  ".join("─" * widths[i] for i in range(ncols)),
    ]
    for row in cells:
        lines.append(
            prefix + "  ".join(_format_cell(row[i], widths[i], aligns[i]) for i in range(ncols))
        )
    return "\n".join(line.rstrip() for line in lines)


def format_section_header(title: str, width: int = 80) -> str:
    """Format a section header: ``'─── Title ──...'``."""
    prefix = "─── "
    suffix_len = width - len(prefix) - len(title) - 1
    return prefix + title + " " + "─" * max(0, suffix_len)
