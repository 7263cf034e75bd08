"""Deterministic randomness source for board generation.

Usage:
    rng = RandomSource(seed=123)  # deterministic
    v = rng.next()                # float in [0, 1)
    child = rng.fork()            # independent stream for a sub-task

The generator is Mulberry32: a single 32-bit state word advanced with wrapping
arithmetic and bit mixing only, so a seed reproduces the same sequence on any
platform. Only an unseeded instance touches system entropy, and only once to
pick its starting state.
"""

from __future__ import annotations

import random

UINT32_MASK = 0xFFFFFFFF
UINT32_SCALE = 0x100000000


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply on unsigned words."""
    return (a * b) & UINT32_MASK


class RandomSource:
    def __init__(self, seed: int | None = None):
        if seed is None:
            seed = random.SystemRandom().getrandbits(32)
        self._state = int(seed) & UINT32_MASK

    @property
    def seed(self) -> int:
        """Current state word. Assigning it reseeds the stream."""
        return self._state

    @seed.setter
    def seed(self, value: int) -> None:
        self._state = int(value) & UINT32_MASK

    def next(self) -> float:
        self._state = (self._state + 0x6D2B79F5) & UINT32_MASK
        state = self._state
        t = _imul(state ^ (state >> 15), 1 | state)
        t = ((t + _imul(t ^ (t >> 7), 61 | t)) & UINT32_MASK) ^ t
        return ((t ^ (t >> 14)) & UINT32_MASK) / UINT32_SCALE

    def fork(self) -> "RandomSource":
        """Return a child stream seeded from this stream's next value."""
        return RandomSource(int(self.next() * UINT32_SCALE))

    def randrange(self, n: int) -> int:
        """Return an integer in [0, n)."""
        if n <= 0:
            raise ValueError("Upper bound must be positive")
        return int(self.next() * n)

    def __repr__(self) -> str:
        return f"RandomSource(seed={self._state:#010x})"
