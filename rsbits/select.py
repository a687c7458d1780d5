"""Select queries over a :class:`~rsbits.index.RankSelectIndex`.

``select0(index, r)`` finds the position of the ``r``-th 0-bit and
``select1(index, r)`` the position of the ``r``-th 1-bit, counting from zero.
Ranks beyond the number of such bits report the sequence length.
"""

from __future__ import annotations

from .index import (
    BLOCK_SIZE,
    BLOCKS_PER_SUPER_BLOCK,
    SELECT_BLOCK_SIZE,
    SUPER_BLOCK_SIZE,
    WORD_MASK,
    WORD_SIZE,
    WORDS_PER_BLOCK,
    RankSelectIndex,
)

__all__ = [
    "select0",
    "select1",
    "search_super_block0",
    "search_super_block1",
    "search_block0",
    "search_block1",
    "search_word_in_block0",
    "search_word_in_block1",
]

# Halving steps of the binary search over the blocks of one super-block.
_BLOCK_STEPS = tuple(BLOCKS_PER_SUPER_BLOCK >> shift for shift in range(1, 5))


def _check_rank(rank: int) -> None:
    if rank < 0:
        raise ValueError("rank must not be negative")


def _nth_set_bit(word: int, n: int) -> int:
    """Return the position of the ``n``-th (from zero) set bit of ``word``."""
    for _ in range(n):
        word &= word - 1
    return (word & -word).bit_length() - 1


def _ones_before_super_block(index: RankSelectIndex, super_block: int) -> int:
    return super_block * SUPER_BLOCK_SIZE - index.super_blocks[super_block]


def select0(index: RankSelectIndex, rank: int) -> int:
    """Return the position of the 0-bit with the given rank.

    If ``rank`` is not smaller than the number of 0-bits, the length is returned.
    """
    _check_rank(rank)
    if rank >= index.zeros:
        return index.length

    super_block = index.select_blocks[rank // SELECT_BLOCK_SIZE].index_0
    if (
        len(index.super_blocks) > super_block + 1
        and index.super_blocks[super_block + 1] <= rank
    ):
        super_block = search_super_block0(index, super_block, rank)

    rank -= index.super_blocks[super_block]
    block_index = search_block0(index, rank, super_block * BLOCKS_PER_SUPER_BLOCK)
    rank -= index.blocks[block_index]
    return search_word_in_block0(index, rank, block_index)


def select1(index: RankSelectIndex, rank: int) -> int:
    """Return the position of the 1-bit with the given rank.

    If ``rank`` is not smaller than the number of 1-bits, the length is returned.
    """
    _check_rank(rank)
    if rank >= index.ones:
        return index.length

    super_block = index.select_blocks[rank // SELECT_BLOCK_SIZE].index_1
    if (
        len(index.super_blocks) > super_block + 1
        and _ones_before_super_block(index, super_block + 1) <= rank
    ):
        super_block = search_super_block1(index, super_block, rank)

    rank -= _ones_before_super_block(index, super_block)
    block_at_super_block = super_block * BLOCKS_PER_SUPER_BLOCK
    block_index = search_block1(index, rank, block_at_super_block, block_at_super_block)
    rank -= (block_index - block_at_super_block) * BLOCK_SIZE - index.blocks[block_index]
    return search_word_in_block1(index, rank, block_index)


def search_super_block0(index: RankSelectIndex, super_block: int, rank: int) -> int:
    """Find the super-block holding the 0-bit of ``rank``, starting at ``super_block``."""
    upper_bound = index.select_blocks[rank // SELECT_BLOCK_SIZE + 1].index_0
    super_blocks = index.super_blocks

    while upper_bound - super_block > 8:
        middle = super_block + ((upper_bound - super_block) >> 1)
        if super_blocks[middle] <= rank:
            super_block = middle
        else:
            upper_bound = middle

    while len(super_blocks) > super_block + 1 and super_blocks[super_block + 1] <= rank:
        super_block += 1
    return super_block


def search_super_block1(index: RankSelectIndex, super_block: int, rank: int) -> int:
    """Find the super-block holding the 1-bit of ``rank``, starting at ``super_block``."""
    upper_bound = index.select_blocks[rank // SELECT_BLOCK_SIZE + 1].index_1
    super_blocks = index.super_blocks

    while upper_bound - super_block > 8:
        middle = super_block + ((upper_bound - super_block) >> 1)
        if (middle + 1) * SUPER_BLOCK_SIZE - super_blocks[middle] <= rank:
            super_block = middle
        else:
            upper_bound = middle

    while (
        len(super_blocks) > super_block + 1
        and _ones_before_super_block(index, super_block + 1) <= rank
    ):
        super_block += 1
    return super_block


def search_block0(index: RankSelectIndex, rank: int, block_index: int) -> int:
    """Return the block, within the super-block starting at ``block_index``,
    that holds the 0-bit of ``rank`` (relative to the super-block)."""
    blocks = index.blocks
    for step in _BLOCK_STEPS:
        candidate = block_index + step
        if len(blocks) > candidate and rank >= blocks[candidate]:
            block_index = candidate
    return block_index


def search_block1(
    index: RankSelectIndex, rank: int, block_at_super_block: int, block_index: int
) -> int:
    """Return the block, starting the search at ``block_index``, that holds the
    1-bit of ``rank`` (relative to the super-block starting at ``block_at_super_block``)."""
    blocks = index.blocks
    for step in _BLOCK_STEPS:
        candidate = block_index + step
        if (
            len(blocks) > candidate
            and rank >= (candidate - block_at_super_block) * BLOCK_SIZE - blocks[candidate]
        ):
            block_index = candidate
    return block_index


def search_word_in_block0(index: RankSelectIndex, rank: int, block_index: int) -> int:
    """Return the position of the 0-bit of ``rank`` (relative to the block) in ``block_index``."""
    first_word = block_index * WORDS_PER_BLOCK
    for offset, word in enumerate(index.words[first_word:first_word + WORDS_PER_BLOCK]):
        zeros = WORD_SIZE - word.bit_count()
        if zeros <= rank:
            rank -= zeros
        else:
            return (first_word + offset) * WORD_SIZE + _nth_set_bit(~word & WORD_MASK, rank)
    raise ValueError("rank lies outside the block")


def search_word_in_block1(index: RankSelectIndex, rank: int, block_index: int) -> int:
    """Return the position of the 1-bit of ``rank`` (relative to the block) in ``block_index``."""
    first_word = block_index * WORDS_PER_BLOCK
    for offset, word in enumerate(index.words[first_word:first_word + WORDS_PER_BLOCK]):
        ones = word.bit_count()
        if ones <= rank:
            rank -= ones
        else:
            return (first_word + offset) * WORD_SIZE + _nth_set_bit(word, rank)
    raise ValueError("rank lies outside the block")