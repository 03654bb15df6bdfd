"""Registration table of the candidate sorts.

Every candidate is a callable that sorts a ``list[int]`` in place. The
table below names each one explicitly (id, display name, complexity
class); ids are stable and are what profiles and the CLI refer to.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Sequence

from sortbench.algorithms import builtin, heap, merge, quadratic, quick, radix, shell
from sortbench.errors import ConfigurationError

SortFunction = Callable[[list], None]

QUADRATIC = "O(n^2)"
N_FOUR_THIRDS = "O(n^(4/3))"
LINEARITHMIC = "O(n log n)"
LINEAR = "O(n)"


@dataclass(frozen=True)
class AlgorithmUnderTest:
    """One candidate sort. Immutable, shared read-only by every worker."""

    id: str
    name: str
    complexity: str
    func: SortFunction = field(repr=False, compare=False)

    def run(self, data: list[int]) -> None:
        """Sort *data* in place."""
        self.func(data)

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name, "complexity": self.complexity}


_Q, _N43, _NLOGN, _N = QUADRATIC, N_FOUR_THIRDS, LINEARITHMIC, LINEAR

ALGORITHMS: tuple[AlgorithmUnderTest, ...] = (
    # Quadratic
    AlgorithmUnderTest("bubblesort", "Bubble sort", _Q, quadratic.bubblesort),
    AlgorithmUnderTest("cocktail_shaker", "Cocktail shaker sort", _Q, quadratic.cocktail_shaker),
    AlgorithmUnderTest("selectionsort", "Selection sort", _Q, quadratic.selectionsort),
    AlgorithmUnderTest(
        "selectionsort_minmax", "Selection sort (min/max)", _Q, quadratic.selectionsort_minmax
    ),
    AlgorithmUnderTest("insertionsort", "Insertion sort", _Q, quadratic.insertionsort),
    AlgorithmUnderTest(
        "insertionsort_binary", "Insertion sort (binary)", _Q, quadratic.insertionsort_binary
    ),
    # Shellsort
    AlgorithmUnderTest("shellsort_knuth", "Shellsort (Knuth)", _N43, shell.shellsort_knuth),
    AlgorithmUnderTest(
        "shellsort_sedgewick82", "Shellsort (Sedgewick 82)", _N43, shell.shellsort_sedgewick82
    ),
    AlgorithmUnderTest(
        "shellsort_sedgewick86", "Shellsort (Sedgewick 86)", _N43, shell.shellsort_sedgewick86
    ),
    AlgorithmUnderTest(
        "shellsort_gonnet_baeza", "Shellsort (Gonnet-Baeza)", _N43, shell.shellsort_gonnet_baeza
    ),
    AlgorithmUnderTest("shellsort_tokuda", "Shellsort (Tokuda)", _N43, shell.shellsort_tokuda),
    AlgorithmUnderTest("shellsort_ciura", "Shellsort (Ciura)", _N43, shell.shellsort_ciura),
    # Mergesort
    AlgorithmUnderTest(
        "mergesort_prealloc", "Mergesort (preallocated)", _NLOGN, merge.mergesort_prealloc
    ),
    AlgorithmUnderTest(
        "mergesort_repeated_alloc",
        "Mergesort (repeated alloc)",
        _NLOGN,
        merge.mergesort_repeated_alloc,
    ),
    AlgorithmUnderTest("mergesort_hybrid", "Mergesort (hybrid)", _NLOGN, merge.mergesort_hybrid),
    AlgorithmUnderTest(
        "mergesort_bottom_up", "Mergesort (bottom-up)", _NLOGN, merge.mergesort_bottom_up
    ),
    # Heapsort
    AlgorithmUnderTest(
        "heapsort_bottom_up", "Heapsort (bottom-up)", _NLOGN, heap.heapsort_bottom_up
    ),
    AlgorithmUnderTest("heapsort_top_down", "Heapsort (top-down)", _NLOGN, heap.heapsort_top_down),
    AlgorithmUnderTest("heapsort_heapq", "Heapsort (heapq)", _NLOGN, heap.heapsort_heapq),
    # Quicksort
    AlgorithmUnderTest("quicksort_end", "Quicksort (end pivot)", _NLOGN, quick.quicksort_end),
    AlgorithmUnderTest(
        "quicksort_random", "Quicksort (random pivot)", _NLOGN, quick.quicksort_random
    ),
    AlgorithmUnderTest(
        "quicksort_hybrid", "Quicksort (median-of-3 hybrid)", _NLOGN, quick.quicksort_hybrid
    ),
    # Linear and baselines
    AlgorithmUnderTest("radixsort_lsd", "Radix sort (LSD)", _N, radix.radixsort_lsd),
    AlgorithmUnderTest("builtin_sort", "list.sort()", _NLOGN, builtin.builtin_sort),
    AlgorithmUnderTest("builtin_sorted", "sorted()", _NLOGN, builtin.builtin_sorted),
)

# Reduced set for --quick runs: one representative per family.
QUICK_ALGORITHMS: tuple[str, ...] = (
    "insertionsort",
    "shellsort_ciura",
    "mergesort_hybrid",
    "heapsort_bottom_up",
    "quicksort_hybrid",
    "radixsort_lsd",
    "builtin_sort",
)

_BY_ID = {a.id: a for a in ALGORITHMS}


def get_algorithm(algorithm_id: str) -> AlgorithmUnderTest:
    try:
        return _BY_ID[algorithm_id]
    except KeyError:
        raise ConfigurationError(
            f"Unknown algorithm: {algorithm_id!r}", algorithm=algorithm_id
        ) from None


def select_algorithms(ids: Iterable[str] | None = None) -> tuple[AlgorithmUnderTest, ...]:
    """Resolve *ids* against the table, keeping the given order.

    ``None`` selects every registered algorithm. Unknown ids raise
    :class:`ConfigurationError`.
    """
    if ids is None:
        return ALGORITHMS
    return tuple(get_algorithm(i) for i in ids)


@dataclass(frozen=True)
class AlgorithmGroup:
    """A presentation filter: algorithms ranked against each other.

    An algorithm belongs to the group when its id contains any of
    *include* (or *include* is empty) and none of *exclude*.
    """

    title: str
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()

    def matches(self, algorithm: AlgorithmUnderTest) -> bool:
        if any(word in algorithm.id for word in self.exclude):
            return False
        return not self.include or any(word in algorithm.id for word in self.include)

    def members(self, algorithms: Sequence[AlgorithmUnderTest]) -> list[int]:
        """Indices of the members of this group within *algorithms*."""
        return [i for i, a in enumerate(algorithms) if self.matches(a)]


TOTALS = AlgorithmGroup("Totals", exclude=("radix",))

GROUPS: tuple[AlgorithmGroup, ...] = (
    AlgorithmGroup("Bubble sorts", include=("bubble", "cocktail")),
    AlgorithmGroup("Insertion sorts", include=("insertion", "selection", "cocktail")),
    AlgorithmGroup("Shell sorts", include=("shellsort", "insertionsort")),
    AlgorithmGroup("Merge sorts", include=("mergesort",)),
    AlgorithmGroup("Heap sorts", include=("heapsort",)),
    AlgorithmGroup("Quick sorts", include=("quicksort",)),
    AlgorithmGroup("Radix sort", include=("radix", "builtin")),
    TOTALS,
)


def get_group(title: str) -> AlgorithmGroup:
    """Look up a group by title, case-insensitively, by prefix."""
    wanted = title.strip().lower()
    if not wanted:
        raise ConfigurationError("Group title must not be empty", group=title)
    for group in GROUPS:
        if group.title.lower() == wanted or group.title.lower().startswith(wanted):
            return group
    raise ConfigurationError(f"Unknown group: {title!r}", group=title)
