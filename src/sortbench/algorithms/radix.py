"""LSD radix sort for signed 32-bit integers."""

from __future__ import annotations

_BITS = 8
_BUCKETS = 1 << _BITS
_MASK = _BUCKETS - 1
_SIGN_FLIP = 1 << 31
_WORD = (1 << 32) - 1


def radixsort_lsd(array: list[int]) -> None:
    """Four 8-bit counting passes over the sign-flipped 32-bit keys.

    Flipping the sign bit maps signed order onto unsigned order, so the
    final pass needs no special handling of negatives.
    """
    keys = [(v ^ _SIGN_FLIP) & _WORD for v in array]
    for shift in range(0, 32, _BITS):
        counts = [0] * _BUCKETS
        for key in keys:
            counts[(key >> shift) & _MASK] += 1
        total = 0
        for i in range(_BUCKETS):
            counts[i], total = total, total + counts[i]
        ordered = [0] * len(keys)
        for key in keys:
            digit = (key >> shift) & _MASK
            ordered[counts[digit]] = key
            counts[digit] += 1
        keys = ordered
    array[:] = [k - _SIGN_FLIP for k in keys]
