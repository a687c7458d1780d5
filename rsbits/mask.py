"""Lazy masking of one :class:`~rsbits.rs_vec.RsVec` with another.

A :class:`MaskedBitVec` combines two vectors of equal length word by word
through a binary function, without materialising the result. Only reading
operations are offered; :meth:`MaskedBitVec.to_rs_vec` builds the combined
vector when it is needed.
"""

from __future__ import annotations

import operator
from typing import Callable, Iterator

from .index import WORD_MASK, WORD_SIZE
from .rs_vec import RsVec

__all__ = ["MaskedBitVec", "mask_and", "mask_or", "mask_xor"]


class MaskedBitVec:
    """A bit vector masked with another through ``bin_op``, applied lazily.

    ``bin_op`` takes two 64-bit words and returns a word; the result is cut
    to 64 bits, so functions using ``~`` may be passed directly.
    """

    __slots__ = ("_vec_words", "_mask_words", "_length", "_bin_op")

    def __init__(self, vec, mask, bin_op):
        if len(vec) != len(mask):
            raise ValueError("mask cannot have different length than vector")
        self._vec_words: list[int] = vec.words()
        self._mask_words: list[int] = mask.words()
        self._length: int = len(vec)
        self._bin_op: Callable[[int, int], int] = bin_op

    def __len__(self):
        return self._length

    def _limb(self, word_index: int) -> int:
        return (
            self._bin_op(self._vec_words[word_index], self._mask_words[word_index])
            & WORD_MASK
        )

    def _limbs(self) -> Iterator[int]:
        op = self._bin_op
        for a, b in zip(self._vec_words, self._mask_words):
            yield op(a, b) & WORD_MASK

    def get(self, pos):
        """Return the masked bit at ``pos`` as 0 or 1, or None if out of range."""
        if not 0 <= pos < self._length:
            return None
        return self.get_unchecked(pos)

    def get_unchecked(self, pos):
        """Return the masked bit at ``pos`` without checking it against the length."""
        if pos < 0:
            raise IndexError("position must not be negative")
        return (self._limb(pos // WORD_SIZE) >> (pos % WORD_SIZE)) & 1

    def is_bit_set(self, pos):
        """Return whether the masked bit at ``pos`` is set, or None if out of range."""
        if not 0 <= pos < self._length:
            return None
        return self.is_bit_set_unchecked(pos)

    def is_bit_set_unchecked(self, pos):
        """Return whether the masked bit at ``pos`` is set, without a range check."""
        return self.get_unchecked(pos) != 0

    def get_bits(self, pos, length):
        """Return ``length`` (1 to 64) masked bits starting at ``pos``.

        Return None if ``length`` is out of that range or the query runs past the end.
        """
        if length > WORD_SIZE or length <= 0 or pos < 0:
            return None
        if pos + length > self._length:
            return None
        return self.get_bits_unchecked(pos, length)

    def get_bits_unchecked(self, pos, length):
        """Return ``length`` masked bits starting at ``pos`` without range checks."""
        word_index, offset = divmod(pos, WORD_SIZE)
        partial_word = self._limb(word_index) >> offset
        end = offset + length
        if end == WORD_SIZE:
            return partial_word
        if end < WORD_SIZE:
            return partial_word & ((1 << length) - 1)
        next_half = (self._limb(word_index + 1) << (WORD_SIZE - offset)) & WORD_MASK
        return (partial_word | next_half) & ((1 << length) - 1)

    def count_ones(self):
        """Return the number of 1-bits in the masked vector."""
        full, tail = divmod(self._length, WORD_SIZE)
        limbs = self._limbs()
        ones = sum(next(limbs).bit_count() for _ in range(full))
        if tail:
            ones += (self._limb(len(self._vec_words) - 1) & ((1 << tail) - 1)).bit_count()
        return ones

    def count_zeros(self):
        """Return the number of 0-bits in the masked vector."""
        return self._length - self.count_ones()

    def to_rs_vec(self):
        """Apply the mask to every word and return the result as a new :class:`RsVec`."""
        return RsVec(list(self._limbs()), self._length)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(length={self._length})"


def mask_xor(vec: RsVec, mask: RsVec) -> MaskedBitVec:
    """Return ``vec`` masked with ``mask`` by exclusive or."""
    return MaskedBitVec(vec, mask, operator.xor)


def mask_and(vec: RsVec, mask: RsVec) -> MaskedBitVec:
    """Return ``vec`` masked with ``mask`` by and."""
    return MaskedBitVec(vec, mask, operator.and_)


def mask_or(vec: RsVec, mask: RsVec) -> MaskedBitVec:
    """Return ``vec`` masked with ``mask`` by or."""
    return MaskedBitVec(vec, mask, operator.or_)