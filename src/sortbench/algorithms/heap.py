"""Heapsort variants."""

from __future__ import annotations

import heapq


def _sift_down(array: list[int], start: int, end: int) -> None:
    root = start
    value = array[root]
    while True:
        child = 2 * root + 1
        if child >= end:
            break
        if child + 1 < end and array[child + 1] > array[child]:
            child += 1
        if array[child] <= value:
            break
        array[root] = array[child]
        root = child
    array[root] = value


def _sift_up(array: list[int], index: int) -> None:
    value = array[index]
    while index > 0:
        parent = (index - 1) // 2
        if array[parent] >= value:
            break
        array[index] = array[parent]
        index = parent
    array[index] = value


def heapsort_bottom_up(array: list[int]) -> None:
    """Heapsort with Floyd's bottom-up heap construction."""
    n = len(array)
    for start in range(n // 2 - 1, -1, -1):
        _sift_down(array, start, n)
    for end in range(n - 1, 0, -1):
        array[0], array[end] = array[end], array[0]
        _sift_down(array, 0, end)


def heapsort_top_down(array: list[int]) -> None:
    """Heapsort building the heap by repeated insertion."""
    n = len(array)
    for i in range(1, n):
        _sift_up(array, i)
    for end in range(n - 1, 0, -1):
        array[0], array[end] = array[end], array[0]
        _sift_down(array, 0, end)


def heapsort_heapq(array: list[int]) -> None:
    heap = list(array)
    heapq.heapify(heap)
    array[:] = [heapq.heappop(heap) for _ in range(len(heap))]
