"""Closed-form sizing of a Bloom filter.

Both helpers keep the exact order of float operations (abs, ceil) so the
results match the reference tables bit for bit::

    k = ceil(|log2(1/e)|)
    m = |ceil(n * |ln e| / (ln 2)^2)|

Unlike the textbook formula, ``m`` is not divided by ``k``.
"""
from __future__ import annotations

import math

__all__ = ["find_k", "find_m"]


def find_k(e: float) -> int:
    """Number of hash functions for false-positive rate `e`."""
    return int(math.ceil(abs(math.log2(1 / e))))


def find_m(n: int, e: float) -> int:
    """Bit-array length for `n` items at false-positive rate `e`."""
    log2_sqr = math.pow(math.log(2), 2)
    log_err_abs = abs(math.log(e))
    x = (n * log_err_abs) / log2_sqr
    return int(abs(math.ceil(x)))
