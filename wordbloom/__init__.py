"""wordbloom: a Bloom filter for "have these words been seen before" queries.

Sentences are lower-cased and split on single spaces; each word sets `k` bits
chosen by HMAC-SHA256 hashers. `BloomFilter.check` answers true only when
every word of a sentence has all of its bits set, so false negatives are
impossible and false positives are bounded by the configured error rate.
"""

from __future__ import annotations

__all__ = [
    "BloomFilter",
    "BloomFilterError",
    "InvalidCapacity",
    "InvalidErrorRate",
    "new",
    "tokenize",
]

from .bloom import BloomFilter, new, tokenize
from .errors import BloomFilterError, InvalidCapacity, InvalidErrorRate
