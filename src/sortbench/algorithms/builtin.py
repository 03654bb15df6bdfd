"""The interpreter's own sorts, as baselines."""

from __future__ import annotations


def builtin_sort(array: list[int]) -> None:
    array.sort()


def builtin_sorted(array: list[int]) -> None:
    """Sort via ``sorted()``, paying for the copy back into *array*."""
    array[:] = sorted(array)
