"""Rank/select index structures over a packed sequence of 64-bit words."""

from __future__ import annotations

from dataclasses import dataclass

WORD_SIZE = 64
"""Number of bits in one storage word."""

WORD_MASK = (1 << WORD_SIZE) - 1

BLOCK_SIZE = 512
"""Number of bits covered by one block descriptor."""

SUPER_BLOCK_SIZE = 1 << 13
"""Number of bits covered by one super-block descriptor."""

SELECT_BLOCK_SIZE = 1 << 13
"""Every this many 0-bits and 1-bits, a select hint is recorded."""

WORDS_PER_BLOCK = BLOCK_SIZE // WORD_SIZE
WORDS_PER_SUPER_BLOCK = SUPER_BLOCK_SIZE // WORD_SIZE
BLOCKS_PER_SUPER_BLOCK = SUPER_BLOCK_SIZE // BLOCK_SIZE


@dataclass
class SelectBlock:
    """Super-block indices where the i-th run of `SELECT_BLOCK_SIZE` zeros/ones starts."""

    index_0: int = 0
    index_1: int = 0


def _zeros_in_word(word: int) -> int:
    return WORD_SIZE - word.bit_count()


class RankSelectIndex:
    """Immutable bit sequence with the meta-data needed for rank and select queries.

    ``blocks[i]`` holds the number of zeros in the enclosing super-block before
    block ``i``; ``super_blocks[j]`` holds the number of zeros before super-block
    ``j``; ``select_blocks`` holds select hints into ``super_blocks``.
    """

    __slots__ = (
        "words",
        "length",
        "blocks",
        "super_blocks",
        "select_blocks",
        "zeros",
        "ones",
    )

    def __init__(self, words, length):
        if length < 0:
            raise ValueError("length must not be negative")
        words = list(words)
        needed = -(-length // WORD_SIZE)
        if len(words) != needed:
            raise ValueError(
                f"a sequence of {length} bits needs exactly {needed} words, got {len(words)}"
            )
        for word in words:
            if not 0 <= word <= WORD_MASK:
                raise ValueError(f"word {word} does not fit in {WORD_SIZE} bits")

        self.words: list[int] = words
        self.length: int = length
        self.blocks: list[int] = []
        self.super_blocks: list[int] = []
        self.select_blocks: list[SelectBlock] = [SelectBlock(0, 0)]
        self._build()

    def _build(self) -> None:
        blocks = self.blocks
        super_blocks = self.super_blocks
        select_blocks = self.select_blocks
        last_word = len(self.words) - 1
        tail_bits = self.length % WORD_SIZE

        total_zeros = 0
        current_zeros = 0
        last_zero_select_block = 0
        last_one_select_block = 0

        for idx, word in enumerate(self.words):
            if idx % WORDS_PER_BLOCK == 0:
                if idx % WORDS_PER_SUPER_BLOCK == 0:
                    total_zeros += current_zeros
                    current_zeros = 0
                    super_blocks.append(total_zeros)
                blocks.append(current_zeros)

            new_zeros = _zeros_in_word(word)
            if idx == last_word and tail_bits > 0:
                # padding bits beyond the end are not part of the sequence
                mask = (1 << tail_bits) - 1
                new_zeros -= _zeros_in_word(word | mask)

            zeros_before = total_zeros + current_zeros
            all_zeros = zeros_before + new_zeros
            if all_zeros // SELECT_BLOCK_SIZE > zeros_before // SELECT_BLOCK_SIZE:
                slot = all_zeros // SELECT_BLOCK_SIZE
                if slot == len(select_blocks):
                    select_blocks.append(SelectBlock(len(super_blocks) - 1, 0))
                else:
                    select_blocks[slot].index_0 = len(super_blocks) - 1
                last_zero_select_block += 1

            all_ones = (idx + 1) * WORD_SIZE - all_zeros
            ones_before = idx * WORD_SIZE - zeros_before
            if all_ones // SELECT_BLOCK_SIZE > ones_before // SELECT_BLOCK_SIZE:
                slot = all_ones // SELECT_BLOCK_SIZE
                if slot == len(select_blocks):
                    select_blocks.append(SelectBlock(0, len(super_blocks) - 1))
                else:
                    select_blocks[slot].index_1 = len(super_blocks) - 1
                last_one_select_block += 1

            current_zeros += new_zeros

        # Trailing hints repeat the last real one so that searches bounded by
        # the next hint never run past the end.
        if last_zero_select_block == len(select_blocks) - 1:
            select_blocks.append(
                SelectBlock(select_blocks[last_zero_select_block].index_0, 0)
            )
        else:
            select_blocks[last_zero_select_block + 1].index_0 = select_blocks[
                last_zero_select_block
            ].index_0
        if last_one_select_block == len(select_blocks) - 1:
            select_blocks.append(
                SelectBlock(0, select_blocks[last_one_select_block].index_1)
            )
        else:
            select_blocks[last_one_select_block + 1].index_1 = select_blocks[
                last_one_select_block
            ].index_1

        total_zeros += current_zeros
        self.zeros: int = total_zeros
        self.ones: int = self.length - total_zeros

    def rank(self, zero, pos):
        """Count the 0-bits (``zero`` true) or 1-bits before ``pos``.

        Positions at or beyond the end report the total count.
        """
        if pos < 0:
            raise IndexError("position must not be negative")
        if pos >= self.length:
            return self.zeros if zero else self.ones

        word_index = pos // WORD_SIZE
        block_index = pos // BLOCK_SIZE
        super_block_index = pos // SUPER_BLOCK_SIZE

        if zero:
            rank = self.super_blocks[super_block_index] + self.blocks[block_index]
        else:
            rank = (
                super_block_index * SUPER_BLOCK_SIZE
                - self.super_blocks[super_block_index]
                + (block_index % BLOCKS_PER_SUPER_BLOCK) * BLOCK_SIZE
                - self.blocks[block_index]
            )

        first_word = block_index * WORDS_PER_BLOCK
        ones = sum(word.bit_count() for word in self.words[first_word:word_index])
        rank += (word_index - first_word) * WORD_SIZE - ones if zero else ones

        partial_mask = (1 << (pos % WORD_SIZE)) - 1
        word = self.words[word_index]
        if zero:
            rank += (~word & partial_mask).bit_count()
        else:
            rank += (word & partial_mask).bit_count()
        return rank

    def bit(self, pos):
        """Return the bit at ``pos`` as 0 or 1."""
        if not 0 <= pos < self.length:
            raise IndexError(f"position {pos} out of range for length {self.length}")
        return (self.words[pos // WORD_SIZE] >> (pos % WORD_SIZE)) & 1

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(length={self.length}, "
            f"zeros={self.zeros}, ones={self.ones})"
        )