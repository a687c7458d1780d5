"""Immutable bit vector with fast rank and select queries."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from .bitset_iter import BitSetIter
from .index import WORD_MASK, WORD_SIZE, RankSelectIndex
from .select import select0 as _select0
from .select import select1 as _select1
from .select_iter import SelectIter

__all__ = ["RsVec"]

_SPARSE_EQUALS_THRESHOLD = 4_000_000
"""Above this many bits, equality is checked through the sparser bit kind."""

_BLOCK_DESCRIPTOR_BYTES = 2
_SUPER_BLOCK_DESCRIPTOR_BYTES = 8
_SELECT_BLOCK_DESCRIPTOR_BYTES = 16
_WORD_BYTES = WORD_SIZE // 8


class RsVec:
    """A bit vector supporting constant-time rank and fast select queries.

    Bits are stored least-significant first in 64-bit words. Bits of the last
    word beyond ``length`` are ignored.
    """

    __slots__ = ("_index",)

    def __init__(self, words, length):
        self._index = RankSelectIndex(words, length)

    @classmethod
    def from_words(cls, words, length):
        """Build a vector of ``length`` bits from packed 64-bit words."""
        return cls(words, length)

    @classmethod
    def from_bits(cls, bits):
        """Build a vector from an iterable of bits (any truthy value is a 1)."""
        bits = list(bits)
        words = [0] * -(-len(bits) // WORD_SIZE)
        for pos, bit in enumerate(bits):
            if bit:
                words[pos // WORD_SIZE] |= 1 << (pos % WORD_SIZE)
        return cls(words, len(bits))

    def words(self):
        """Return a copy of the packed words backing the vector."""
        return list(self._index.words)

    def count_zeros(self):
        """Return the number of 0-bits in the vector."""
        return self._index.zeros

    def count_ones(self):
        """Return the number of 1-bits in the vector."""
        return self._index.ones

    def rank0(self, pos):
        """Return the number of 0-bits before ``pos`` (total count past the end)."""
        return self._index.rank(True, pos)

    def rank1(self, pos):
        """Return the number of 1-bits before ``pos`` (total count past the end)."""
        return self._index.rank(False, pos)

    def select0(self, rank):
        """Return the position of the 0-bit with ``rank``, or the length if there is none."""
        return _select0(self._index, rank)

    def select1(self, rank):
        """Return the position of the 1-bit with ``rank``, or the length if there is none."""
        return _select1(self._index, rank)

    def __len__(self):
        return self._index.length

    def is_empty(self):
        """Return whether the vector holds no bits."""
        return self._index.length == 0

    def get(self, pos):
        """Return the bit at ``pos`` as 0 or 1, or None if ``pos`` is out of range."""
        if not 0 <= pos < self._index.length:
            return None
        return self.get_unchecked(pos)

    def get_unchecked(self, pos):
        """Return the bit at ``pos`` without checking it against the length."""
        if pos < 0:
            raise IndexError("position must not be negative")
        return (self._index.words[pos // WORD_SIZE] >> (pos % WORD_SIZE)) & 1

    def get_bits(self, pos, length):
        """Return ``length`` (at most 64) bits starting at ``pos`` as an integer.

        Return None if the range exceeds the vector or ``length`` exceeds 64.
        """
        if length > WORD_SIZE or length < 0 or pos < 0:
            return None
        if pos + length > self._index.length:
            return None
        return self.get_bits_unchecked(pos, length)

    def get_bits_unchecked(self, pos, length):
        """Return ``length`` bits starting at ``pos`` without range checks."""
        words = self._index.words
        word_index, offset = divmod(pos, WORD_SIZE)
        value = words[word_index] >> offset
        if offset + length > WORD_SIZE:
            value |= words[word_index + 1] << (WORD_SIZE - offset)
        return value & (1 << length) - 1 & WORD_MASK

    def __iter__(self) -> Iterator[int]:
        words = self._index.words
        for pos in range(self._index.length):
            yield (words[pos // WORD_SIZE] >> (pos % WORD_SIZE)) & 1

    def __reversed__(self) -> Iterator[int]:
        words = self._index.words
        for pos in reversed(range(self._index.length)):
            yield (words[pos // WORD_SIZE] >> (pos % WORD_SIZE)) & 1

    def _same_shape(self, other: "RsVec") -> bool:
        mine, theirs = self._index, other._index
        return (
            mine.length == theirs.length
            and mine.zeros == theirs.zeros
            and mine.ones == theirs.ones
        )

    def sparse_equals(self, other, zero):
        """Compare contents by walking the 0-bits (``zero`` true) or the 1-bits.

        Faster than :meth:`full_equals` when that kind of bit is sparse.
        """
        if not self._same_shape(other):
            return False
        zero = bool(zero)
        for rank, pos in enumerate(self.select_iter(zero)):
            if (other.get_unchecked(pos) == 0) != zero:
                return False
            if other._index.rank(zero, pos) != rank:
                return False
        return True

    def full_equals(self, other):
        """Compare contents word by word, ignoring padding bits."""
        if not self._same_shape(other):
            return False
        length = self._index.length
        full = length // WORD_SIZE
        mine, theirs = self._index.words, other._index.words
        if mine[:full] != theirs[:full]:
            return False
        tail = length % WORD_SIZE
        if tail:
            mask = (1 << tail) - 1
            if mine[full] & mask != theirs[full] & mask:
                return False
        return True

    def __eq__(self, other):
        if not isinstance(other, RsVec):
            return NotImplemented
        if self._index.length > _SPARSE_EQUALS_THRESHOLD:
            return self.sparse_equals(other, self._index.ones > self._index.zeros)
        return self.full_equals(other)

    __hash__ = None

    def heap_size(self):
        """Return the number of bytes the data and meta-data occupy in packed form."""
        index = self._index
        return (
            len(index.words) * _WORD_BYTES
            + len(index.blocks) * _BLOCK_DESCRIPTOR_BYTES
            + len(index.super_blocks) * _SUPER_BLOCK_DESCRIPTOR_BYTES
            + len(index.select_blocks) * _SELECT_BLOCK_DESCRIPTOR_BYTES
        )

    def select_iter(self, zero):
        """Return a double-ended iterator over the positions of 0-bits or 1-bits."""
        return SelectIter(self._index, zero)

    def iter0(self):
        """Return a select iterator over the positions of the 0-bits."""
        return self.select_iter(True)

    def iter1(self):
        """Return a select iterator over the positions of the 1-bits."""
        return self.select_iter(False)

    def bit_set_iter0(self):
        """Return a chunked iterator over the positions of the 0-bits."""
        return BitSetIter(self, True)

    def bit_set_iter1(self):
        """Return a chunked iterator over the positions of the 1-bits."""
        return BitSetIter(self, False)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(length={len(self)}, "
            f"zeros={self.count_zeros()}, ones={self.count_ones()})"
        )