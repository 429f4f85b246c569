"""Bloom filter over space-delimited words.

Main properties:
    • sized from capacity and target false-positive rate
    • per-word membership: a sentence is "seen" when every one of its words is
    • no false negatives, bits are never cleared

The filter is synchronous and holds no lock. Share one instance between
threads only behind an external lock, or give each thread its own.
"""
from __future__ import annotations

import logging
import math
from collections.abc import Iterator

from .errors import InvalidCapacity, InvalidErrorRate
from .hashing import HashFunction, create_hash_fns, decode_uvarint
from .sizing import find_k, find_m

__all__ = ["BloomFilter", "new", "tokenize"]

logger = logging.getLogger(__name__)

_SEP = " "


def tokenize(sentence: str) -> list[str]:
    """Lower-case `sentence` and split on single spaces.

    Repeated spaces yield empty tokens; they are hashed like any other word.
    Lower-casing is Python's full Unicode mapping, so a few characters such as
    "\u0130" become two code points rather than one.
    """
    return sentence.lower().split(_SEP)


class BloomFilter:
    """Bit-array Bloom filter keyed by HMAC-SHA256 hashers."""

    def __init__(self, capacity: int, error_rate: float):
        if capacity <= 0:
            raise InvalidCapacity(capacity)
        # 1/e must stay finite for find_k; subnormal rates overflow it
        if not 0 < error_rate < 1 or math.isinf(1 / error_rate):
            raise InvalidErrorRate(error_rate)

        self.capacity = capacity
        self.error_rate = error_rate
        self._k = find_k(error_rate)
        self._m = find_m(capacity, error_rate)
        self._bits = bytearray((self._m + 7) // 8)
        self._hashers = create_hash_fns(self._k)
        logger.debug(
            "bloom filter sized m=%d k=%d for n=%d e=%g",
            self._m, self._k, capacity, error_rate,
        )

    # -------------------------------------------------------
    # Parameters
    # -------------------------------------------------------
    @property
    def m(self) -> int:
        """Length of the bit array."""
        return self._m

    @property
    def k(self) -> int:
        """Number of hash functions."""
        return self._k

    @property
    def hashers(self) -> tuple[HashFunction, ...]:
        return self._hashers

    @property
    def bits(self) -> list[bool]:
        """Snapshot of the bit array as booleans."""
        return [self.is_set(pos) for pos in range(self._m)]

    # -------------------------------------------------------
    # Hash helpers
    # -------------------------------------------------------
    def positions(self, token: str) -> Iterator[int]:
        """Yield the `k` bit positions of `token`, one per hasher."""
        data = token.encode("utf-8", "surrogatepass")
        for fn in self._hashers:
            h = decode_uvarint(fn.digest(data))
            yield h % self._m

    def is_set(self, pos: int) -> bool:
        return bool(self._bits[pos // 8] & (1 << (pos % 8)))

    def count(self) -> int:
        """Number of bits currently set."""
        return sum(bin(b).count("1") for b in self._bits)

    # -------------------------------------------------------
    # API
    # -------------------------------------------------------
    def add(self, sentence: str) -> None:
        """Record every word of `sentence`."""
        for token in tokenize(sentence):
            for pos in self.positions(token):
                self._bits[pos // 8] |= 1 << (pos % 8)

    def check(self, sentence: str) -> bool:
        """True when every word of `sentence` may have been added."""
        for token in tokenize(sentence):
            if not all(self.is_set(pos) for pos in self.positions(token)):
                return False
        return True

    def __contains__(self, sentence: str) -> bool:
        return self.check(sentence)

    def __repr__(self) -> str:
        return (
            f"BloomFilter(m={self._m}, k={self._k}, "
            f"capacity={self.capacity}, error_rate={self.error_rate})"
        )


def new(capacity: int, error_rate: float) -> BloomFilter:
    """Build a filter, raising `InvalidCapacity` / `InvalidErrorRate` on bad input."""
    return BloomFilter(capacity, error_rate)

