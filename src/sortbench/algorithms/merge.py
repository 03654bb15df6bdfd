"""Mergesort variants.

All variants are stable and sort in place from the caller's point of
view (the input list ends up sorted), using auxiliary storage
internally.
"""

from __future__ import annotations

from sortbench.algorithms.quadratic import insertionsort

_HYBRID_CUTOFF = 16


def _merge_into(src: list[int], dst: list[int], lo: int, mid: int, hi: int) -> None:
    """Merge src[lo:mid] and src[mid:hi] into dst[lo:hi]."""
    i, j = lo, mid
    for k in range(lo, hi):
        if i < mid and (j >= hi or src[i] <= src[j]):
            dst[k] = src[i]
            i += 1
        else:
            dst[k] = src[j]
            j += 1


def mergesort_prealloc(array: list[int]) -> None:
    """Top-down mergesort with one auxiliary buffer allocated up front."""
    buffer = list(array)

    def sort(lo: int, hi: int) -> None:
        if hi - lo < 2:
            return
        mid = (lo + hi) // 2
        sort(lo, mid)
        sort(mid, hi)
        if array[mid - 1] <= array[mid]:
            return
        buffer[lo:hi] = array[lo:hi]
        _merge_into(buffer, array, lo, mid, hi)

    sort(0, len(array))


def _merge_lists(left: list[int], right: list[int]) -> list[int]:
    merged: list[int] = []
    i = j = 0
    while i < len(left) and j < len(right):
        if left[i] <= right[j]:
            merged.append(left[i])
            i += 1
        else:
            merged.append(right[j])
            j += 1
    merged.extend(left[i:])
    merged.extend(right[j:])
    return merged


def mergesort_repeated_alloc(array: list[int]) -> None:
    """Top-down mergesort allocating fresh lists at every level."""

    def sort(values: list[int]) -> list[int]:
        if len(values) < 2:
            return values
        mid = len(values) // 2
        return _merge_lists(sort(values[:mid]), sort(values[mid:]))

    array[:] = sort(array)


def mergesort_hybrid(array: list[int]) -> None:
    """Top-down mergesort that hands short runs to insertion sort."""
    buffer = list(array)

    def sort(lo: int, hi: int) -> None:
        if hi - lo <= _HYBRID_CUTOFF:
            run = array[lo:hi]
            insertionsort(run)
            array[lo:hi] = run
            return
        mid = (lo + hi) // 2
        sort(lo, mid)
        sort(mid, hi)
        if array[mid - 1] <= array[mid]:
            return
        buffer[lo:hi] = array[lo:hi]
        _merge_into(buffer, array, lo, mid, hi)

    sort(0, len(array))


def mergesort_bottom_up(array: list[int]) -> None:
    n = len(array)
    src = array
    dst = [0] * n
    width = 1
    while width < n:
        for lo in range(0, n, 2 * width):
            mid = min(lo + width, n)
            hi = min(lo + 2 * width, n)
            _merge_into(src, dst, lo, mid, hi)
        src, dst = dst, src
        width *= 2
    if src is not array:
        array[:] = src
