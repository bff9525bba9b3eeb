"""Counter-based deterministic random source using xxhash.

Every draw is a pure function of (seed, stream, counter), so two engines
built with the same seed and stream consume identical sequences no matter
which thread runs them.  Independent battles get independent streams via
``fork``.

Formula: value_n = (Hash(Seed, Stream, n) >> 11) / 2**53
"""

from __future__ import annotations

import math
import struct
from typing import Callable

import xxhash

RandomSource = Callable[[], float]
"""Any zero-argument callable returning a float in [0.0, 1.0)."""


class DeterministicRNG:
    """Seeded, stream-separated float generator usable as a ``RandomSource``."""

    __slots__ = ("_seed", "_stream", "_counter")

    # 53 high bits map exactly onto a double in [0, 1)
    _FLOAT_BITS = 53

    def __init__(self, seed: int, stream: int = 0) -> None:
        self._seed = seed
        self._stream = stream
        self._counter = 0

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def stream(self) -> int:
        return self._stream

    @property
    def draws(self) -> int:
        """Number of values consumed so far."""
        return self._counter

    def _hash(self, counter: int) -> int:
        payload = struct.pack("<qqq", self._seed, self._stream, counter)
        return xxhash.xxh64(payload).intdigest()

    def next_float(self) -> float:
        """Return the next float in [0.0, 1.0)."""
        value = (self._hash(self._counter) >> (64 - self._FLOAT_BITS)) / (1 << self._FLOAT_BITS)
        self._counter += 1
        return value

    def __call__(self) -> float:
        return self.next_float()

    def next_int(self, low: int, high: int) -> int:
        """Return the next integer in [low, high] inclusive."""
        return random_int(self, low, high)

    def fork(self, stream: int) -> DeterministicRNG:
        """A fresh generator on another stream of the same seed."""
        return DeterministicRNG(self._seed, stream)


def random_int(source: RandomSource, low: int, high: int) -> int:
    """Draw an integer in [low, high] inclusive from any random source."""
    if high < low:
        low, high = high, low
    return min(high, low + math.floor(source() * (high - low + 1)))
