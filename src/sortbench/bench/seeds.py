"""Deterministic per-trial seeds and input arrays.

A trial's input depends only on the global seed, its size and its trial
index, never on which worker runs it or when. Re-running a benchmark
with any worker count therefore sorts exactly the same arrays.
"""

from __future__ import annotations

import random

DEFAULT_SEED = 2222

_MASK64 = (1 << 64) - 1
_GOLDEN_GAMMA = 0x9E3779B97F4A7C15


def _mix64(z: int) -> int:
    """SplitMix64 finalizer (a bijection on 64-bit integers)."""
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & _MASK64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & _MASK64
    return z ^ (z >> 31)


def seed_for(trial_index: int, global_seed: int = DEFAULT_SEED) -> int:
    """Return the 64-bit seed for *trial_index*.

    Distinct indices below 2**64 always map to distinct seeds: the
    index is scaled by an odd constant, offset by the global seed and
    mixed, and each step is invertible modulo 2**64.
    """
    if trial_index < 0:
        raise ValueError(f"trial index must be non-negative (got {trial_index})")
    z = (global_seed + (trial_index + 1) * _GOLDEN_GAMMA) & _MASK64
    return _mix64(z)


def make_input(size: int, trial_index: int, global_seed: int = DEFAULT_SEED) -> list[int]:
    """Build the input array for one trial: *size* signed 32-bit integers."""
    rng = random.Random(seed_for(trial_index, global_seed))
    values = [rng.getrandbits(32) for _ in range(size)]
    return [v - (1 << 32) if v >= (1 << 31) else v for v in values]
