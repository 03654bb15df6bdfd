"""Quadratic comparison sorts: bubble, cocktail shaker, selection, insertion."""

from __future__ import annotations

from bisect import bisect_right


def bubblesort(array: list[int]) -> None:
    n = len(array)
    while n > 1:
        last_swap = 0
        for i in range(1, n):
            if array[i - 1] > array[i]:
                array[i - 1], array[i] = array[i], array[i - 1]
                last_swap = i
        # Everything past the last swap is already in place.
        n = last_swap


def cocktail_shaker(array: list[int]) -> None:
    lo = 0
    hi = len(array) - 1
    while lo < hi:
        new_hi = lo
        for i in range(lo, hi):
            if array[i] > array[i + 1]:
                array[i], array[i + 1] = array[i + 1], array[i]
                new_hi = i
        hi = new_hi
        new_lo = hi
        for i in range(hi, lo, -1):
            if array[i - 1] > array[i]:
                array[i - 1], array[i] = array[i], array[i - 1]
                new_lo = i
        lo = new_lo


def selectionsort(array: list[int]) -> None:
    n = len(array)
    for i in range(n - 1):
        smallest = i
        for j in range(i + 1, n):
            if array[j] < array[smallest]:
                smallest = j
        if smallest != i:
            array[i], array[smallest] = array[smallest], array[i]


def selectionsort_minmax(array: list[int]) -> None:
    """Selection sort placing both the minimum and maximum per pass."""
    lo = 0
    hi = len(array) - 1
    while lo < hi:
        smallest = largest = lo
        for j in range(lo + 1, hi + 1):
            if array[j] < array[smallest]:
                smallest = j
            elif array[j] > array[largest]:
                largest = j
        array[lo], array[smallest] = array[smallest], array[lo]
        if largest == lo:
            # The maximum was just moved to where the minimum used to be.
            largest = smallest
        array[hi], array[largest] = array[largest], array[hi]
        lo += 1
        hi -= 1


def insertionsort(array: list[int]) -> None:
    for i in range(1, len(array)):
        value = array[i]
        j = i - 1
        while j >= 0 and array[j] > value:
            array[j + 1] = array[j]
            j -= 1
        array[j + 1] = value


def insertionsort_binary(array: list[int]) -> None:
    """Insertion sort locating each slot with a binary search."""
    for i in range(1, len(array)):
        value = array[i]
        pos = bisect_right(array, value, 0, i)
        if pos != i:
            array[pos + 1 : i + 1] = array[pos:i]
            array[pos] = value
