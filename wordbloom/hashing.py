"""Keyed hash functions and the varint decoder used to turn digests into
bit positions.

Every hasher is HMAC-SHA256 keyed with ``b"key-<i>"``. The key only has to be
distinct and deterministic, so two filters with the same ``k`` hash
identically across runs and processes. Nothing here is meant to be secret.
"""
from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Optional

from .errors import VarintError

__all__ = [
    "HashFunction",
    "create_hash_fns",
    "decode_uvarint",
    "MAX_VARINT_LEN64",
]

logger = logging.getLogger(__name__)

_KEY_FMT = "key-{}"
_DIGESTMOD = hashlib.sha256
_UINT64_MASK = (1 << 64) - 1

MAX_VARINT_LEN64 = 10  # a 64-bit value never needs more than 10 varint bytes


class HashFunction:
    """HMAC-SHA256 instance bound to one key.

    `digest` is the pure entry point: it always starts from the freshly keyed
    state. The `update` / `sum` / `reset` trio keeps a running state for
    callers that feed data incrementally; that state is not shared between
    threads safely.
    """

    __slots__ = ("key", "_pristine", "_state")

    def __init__(self, key: bytes):
        self.key = key
        self._pristine = hmac.new(key, digestmod=_DIGESTMOD)
        self._state = self._pristine.copy()

    @classmethod
    def for_index(cls, i: int) -> "HashFunction":
        return cls(_KEY_FMT.format(i).encode())

    # ------------------------------------------------------------------
    # Pure API
    # ------------------------------------------------------------------
    def digest(self, data: bytes) -> bytes:
        h = self._pristine.copy()
        h.update(data)
        return h.digest()

    # ------------------------------------------------------------------
    # Stateful API
    # ------------------------------------------------------------------
    def update(self, data: bytes) -> None:
        self._state.update(data)

    def sum(self) -> bytes:
        """Digest of everything fed since the last reset."""
        return self._state.digest()

    def reset(self) -> None:
        self._state = self._pristine.copy()

    @property
    def digest_size(self) -> int:
        return self._pristine.digest_size

    def __repr__(self) -> str:  # pragma: no cover
        return f"HashFunction<{self.key!r}>"


def create_hash_fns(k: int) -> tuple[HashFunction, ...]:
    """Build `k` hashers keyed ``key-0`` .. ``key-{k-1}``."""
    return tuple(HashFunction.for_index(i) for i in range(k))


def decode_uvarint(data: bytes, strict: bool = False) -> int:
    """Decode an unsigned little-endian base-128 varint from the start of `data`.

    On overflow or truncated input the value accumulated so far is returned,
    masked to 64 bits. Pass ``strict=True`` to raise `VarintError` instead.
    """
    x = 0
    shift = 0
    err: Optional[str] = None
    for i in range(MAX_VARINT_LEN64):
        if i == len(data):
            err = "truncated varint"
            break
        b = data[i]
        if b < 0x80:
            if i == MAX_VARINT_LEN64 - 1 and b > 1:
                err = "varint overflows a 64-bit integer"
                break
            return (x | b << shift) & _UINT64_MASK
        x |= (b & 0x7F) << shift
        shift += 7
    else:
        err = "varint overflows a 64-bit integer"

    x &= _UINT64_MASK
    if strict:
        raise VarintError(err)
    logger.debug("%s, using partial value %d", err, x)
    return x
