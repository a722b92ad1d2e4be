"""String hashing and a small chained hash table keyed by strings."""

from __future__ import annotations

import struct
from typing import Any

_MASK = 0xFFFFFFFF


def _signed(byte: int) -> int:
    return byte - 256 if byte >= 128 else byte


def _u16(pair: bytes) -> int:
    return pair[0] | (pair[1] << 8)


def super_fast_hash(data: str | bytes) -> int:
    """Return the 32-bit SuperFastHash of ``data`` up to its first NUL byte."""
    raw = data.encode() if isinstance(data, str) else bytes(data)
    raw = raw.split(b"\0", 1)[0]
    length = len(raw)
    if not length:
        return 0

    h = length
    rem = length & 3
    body = length - rem

    for low, high in struct.iter_unpack("<HH", raw[:body]):
        h = (h + low) & _MASK
        tmp = ((high << 11) ^ h) & _MASK
        h = ((h << 16) ^ tmp) & _MASK
        h = (h + (h >> 11)) & _MASK

    tail = raw[body:]
    if rem == 3:
        h = (h + _u16(tail)) & _MASK
        h ^= (h << 16) & _MASK
        h ^= (_signed(tail[2]) << 18) & _MASK
        h = (h + (h >> 11)) & _MASK
    elif rem == 2:
        h = (h + _u16(tail)) & _MASK
        h ^= (h << 11) & _MASK
        h = (h + (h >> 17)) & _MASK
    elif rem == 1:
        h = (h + _signed(tail[0])) & _MASK
        h ^= (h << 10) & _MASK
        h = (h + (h >> 1)) & _MASK

    h ^= (h << 3) & _MASK
    h = (h + (h >> 5)) & _MASK
    h ^= (h << 4) & _MASK
    h = (h + (h >> 17)) & _MASK
    h ^= (h << 25) & _MASK
    h = (h + (h >> 6)) & _MASK
    return h


class HashTable:
    """A table of ``2 ** bits`` bins; new entries go to the front of their bin."""

    def __init__(self, bits: int) -> None:
        if bits < 0:
            raise ValueError("bits must not be negative")
        self.bits = bits
        self._bins: list[list[Any]] = [[] for _ in range(1 << bits)]

    def bin_index(self, key: str | bytes) -> int:
        return super_fast_hash(key) & ((1 << self.bits) - 1)

    def add(self, key: str | bytes, value: Any) -> None:
        self._bins[self.bin_index(key)].insert(0, value)

    def bin(self, key: str | bytes) -> list[Any]:
        """Return the entries sharing ``key``'s bin, most recent first."""
        return list(self._bins[self.bin_index(key)])