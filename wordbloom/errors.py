"""Exceptions raised by wordbloom.

Only construction can fail: once a filter exists, ``add`` and ``check`` never
raise.
"""
from __future__ import annotations

__all__ = [
    "BloomFilterError",
    "InvalidCapacity",
    "InvalidErrorRate",
    "VarintError",
]


class BloomFilterError(ValueError):
    """Base class for invalid filter parameters."""


class InvalidCapacity(BloomFilterError):
    def __init__(self, capacity=None):
        super().__init__("capacity must be greater than 0")
        self.capacity = capacity


class InvalidErrorRate(BloomFilterError):
    def __init__(self, error_rate=None):
        super().__init__("error rate must be between 0 and 1")
        self.error_rate = error_rate


class VarintError(ValueError):
    """Digest bytes do not hold a valid 64-bit unsigned varint."""
