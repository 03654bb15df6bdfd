"""Quicksort variants, all iterative with an explicit range stack.

The smaller partition is pushed last so it is handled first, which keeps
the stack depth logarithmic even on adversarial inputs.
"""

from __future__ import annotations

import random

from sortbench.algorithms.quadratic import insertionsort

_HYBRID_CUTOFF = 16

# Pivot choice only; seeded so a trial's work is reproducible.
_PIVOT_SEED = 0x5EED


def _partition(array: list[int], lo: int, hi: int) -> int:
    """Lomuto partition of array[lo:hi+1] around array[hi]."""
    pivot = array[hi]
    store = lo
    for i in range(lo, hi):
        if array[i] < pivot:
            array[i], array[store] = array[store], array[i]
            store += 1
    array[store], array[hi] = array[hi], array[store]
    return store


def _push_halves(stack: list[tuple[int, int]], lo: int, p: int, hi: int) -> None:
    left = (lo, p - 1)
    right = (p + 1, hi)
    if p - lo < hi - p:
        stack.append(right)
        stack.append(left)
    else:
        stack.append(left)
        stack.append(right)


def quicksort_end(array: list[int]) -> None:
    """Quicksort using the last element as pivot."""
    stack = [(0, len(array) - 1)]
    while stack:
        lo, hi = stack.pop()
        if lo >= hi:
            continue
        p = _partition(array, lo, hi)
        _push_halves(stack, lo, p, hi)


def quicksort_random(array: list[int]) -> None:
    rng = random.Random(_PIVOT_SEED)
    stack = [(0, len(array) - 1)]
    while stack:
        lo, hi = stack.pop()
        if lo >= hi:
            continue
        r = rng.randint(lo, hi)
        array[r], array[hi] = array[hi], array[r]
        p = _partition(array, lo, hi)
        _push_halves(stack, lo, p, hi)


def _median_of_three(array: list[int], lo: int, hi: int) -> int:
    mid = (lo + hi) // 2
    a, b, c = array[lo], array[mid], array[hi]
    if a <= b:
        if b <= c:
            return mid
        return hi if a <= c else lo
    if a <= c:
        return lo
    return hi if b <= c else mid


def quicksort_hybrid(array: list[int]) -> None:
    """Median-of-three quicksort finishing short ranges with insertion sort."""
    stack = [(0, len(array) - 1)]
    while stack:
        lo, hi = stack.pop()
        if hi - lo < _HYBRID_CUTOFF:
            if lo < hi:
                run = array[lo : hi + 1]
                insertionsort(run)
                array[lo : hi + 1] = run
            continue
        m = _median_of_three(array, lo, hi)
        array[m], array[hi] = array[hi], array[m]
        p = _partition(array, lo, hi)
        _push_halves(stack, lo, p, hi)
