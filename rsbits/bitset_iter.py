"""Chunked iteration over the positions of 0-bits or 1-bits of a bit vector.

The vector is read sixteen bits at a time and every chunk is expanded into the
offsets of its matching bits. For dense vectors this beats select-based
iteration, because no rank/select meta-data is consulted.
"""

from __future__ import annotations

__all__ = ["BitSetIter"]

CHUNK_SIZE = 16
"""Number of bits read from the vector at once."""


def _set_bit_offsets(data: int):
    while data:
        lowest = data & -data
        yield lowest.bit_length() - 1
        data ^= lowest


class BitSetIter:
    """Iterator over the indices of the 0-bits (``zero`` true) or 1-bits of ``vec``.

    ``vec`` needs ``len()`` and ``get_bits_unchecked(pos, length)``.
    Positions come out in increasing order and never exceed the vector length.
    """

    __slots__ = ("vec", "zero", "_next_base", "_offsets", "_cursor")

    def __init__(self, vec, zero):
        self.vec = vec
        self.zero: bool = bool(zero)
        self._next_base = 0
        self._offsets: list[int] = []
        self._cursor = 0

    def __iter__(self):
        return self

    def __next__(self):
        while self._cursor == len(self._offsets):
            self._load_next_chunk()
        position = self._offsets[self._cursor]
        self._cursor += 1
        return position

    def _load_next_chunk(self) -> None:
        base = self._next_base
        length = len(self.vec)
        if base >= length:
            raise StopIteration
        width = min(CHUNK_SIZE, length - base)
        data = self.vec.get_bits_unchecked(base, width)
        if self.zero:
            data = ~data & ((1 << width) - 1)
        self._offsets = [base + offset for offset in _set_bit_offsets(data)]
        self._cursor = 0
        self._next_base = base + CHUNK_SIZE

    def __repr__(self) -> str:
        kind = "zeros" if self.zero else "ones"
        return f"{type(self).__name__}({kind}, next_chunk={self._next_base})"