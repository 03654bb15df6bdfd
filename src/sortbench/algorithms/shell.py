"""Shellsort with several published gap sequences.

Every sequence is generated ascending up to the array length and then
applied from the largest gap down to 1.
"""

from __future__ import annotations

import math
from typing import Callable

_CIURA = [1, 4, 10, 23, 57, 132, 301, 701, 1750]


def _gapped_insertion(array: list[int], gap: int) -> None:
    for i in range(gap, len(array)):
        value = array[i]
        j = i
        while j >= gap and array[j - gap] > value:
            array[j] = array[j - gap]
            j -= gap
        array[j] = value


def shell_sequence(array: list[int], gaps: list[int]) -> None:
    """Run gapped insertion passes for *gaps* (largest first)."""
    for gap in sorted(gaps, reverse=True):
        if gap < len(array):
            _gapped_insertion(array, gap)


def _ascending(term: Callable[[int], int], limit: int) -> list[int]:
    gaps: list[int] = []
    k = 0
    while True:
        gap = term(k)
        if gap >= limit and gaps:
            return gaps
        if not gaps or gap > gaps[-1]:
            gaps.append(gap)
        k += 1


def knuth_gaps(n: int) -> list[int]:
    return _ascending(lambda k: (3 ** (k + 1) - 1) // 2, n)


def sedgewick82_gaps(n: int) -> list[int]:
    return [1] + _ascending(lambda k: 4 ** (k + 1) + 3 * 2**k + 1, n)


def sedgewick86_gaps(n: int) -> list[int]:
    def term(k: int) -> int:
        if k % 2 == 0:
            return 9 * (2**k - 2 ** (k // 2)) + 1
        return 8 * 2**k - 6 * 2 ** ((k + 1) // 2) + 1

    return _ascending(term, n)


def tokuda_gaps(n: int) -> list[int]:
    return _ascending(lambda k: math.ceil((9 ** (k + 1) - 4 ** (k + 1)) / (5 * 4**k)), n)


def ciura_gaps(n: int) -> list[int]:
    gaps = [g for g in _CIURA if g < n] or [1]
    if len(gaps) == len(_CIURA):
        # Past the tabulated values, extend geometrically by 2.25.
        while int(gaps[-1] * 2.25) < n:
            gaps.append(int(gaps[-1] * 2.25))
    return gaps


def shellsort_knuth(array: list[int]) -> None:
    shell_sequence(array, knuth_gaps(len(array)))


def shellsort_sedgewick82(array: list[int]) -> None:
    shell_sequence(array, sedgewick82_gaps(len(array)))


def shellsort_sedgewick86(array: list[int]) -> None:
    shell_sequence(array, sedgewick86_gaps(len(array)))


def shellsort_gonnet_baeza(array: list[int]) -> None:
    """Gonnet and Baeza-Yates: shrink the gap by 5/11 each pass."""
    gap = len(array)
    while gap > 1:
        gap = 1 if gap < 5 else gap * 5 // 11
        _gapped_insertion(array, gap)


def shellsort_tokuda(array: list[int]) -> None:
    shell_sequence(array, tokuda_gaps(len(array)))


def shellsort_ciura(array: list[int]) -> None:
    shell_sequence(array, ciura_gaps(len(array)))
