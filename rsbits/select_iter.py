"""Iteration over the positions of 0-bits or 1-bits of a rank/select index.

The iterator runs select queries for consecutive ranks. It keeps the super-block
and block where the previous query ended, so that a linear walk rarely has to
search the meta-data again. It can be consumed from both ends.
"""

from __future__ import annotations

import copy as _copy
from typing import Optional

from .index import BLOCK_SIZE, BLOCKS_PER_SUPER_BLOCK, SELECT_BLOCK_SIZE, SUPER_BLOCK_SIZE, RankSelectIndex
from .select import (
    search_block0,
    search_block1,
    search_super_block0,
    search_super_block1,
    search_word_in_block0,
    search_word_in_block1,
)

__all__ = ["SelectIter"]


class SelectIter:
    """Double-ended iterator over the indices of the 0-bits (``zero`` true) or 1-bits.

    ``next_back`` takes elements from the end; both ends meet in the middle and
    never yield an element twice. Once exhausted, the iterator stays exhausted.
    """

    __slots__ = (
        "index",
        "zero",
        "_next_rank",
        "_next_rank_back",
        "_last_super_block",
        "_last_super_block_back",
        "_last_block",
        "_last_block_back",
    )

    def __init__(self, index, zero):
        self.index: RankSelectIndex = index
        self.zero: bool = bool(zero)
        self._next_rank = 0
        # None means the back cursor points before element 0.
        self._next_rank_back: Optional[int] = None
        self._last_super_block = 0
        self._last_super_block_back = 0
        self._last_block = 0
        self._last_block_back = 0

        if index.length == 0:
            return

        total = index.zeros if self.zero else index.ones
        self._next_rank_back = total - 1 if total > 0 else None
        self._last_super_block_back = len(index.super_blocks) - 1
        self._last_block_back = len(index.blocks) - 1

    def __iter__(self):
        return self

    def __next__(self):
        position = self._select_next()
        if position is None:
            raise StopIteration
        return position

    def __len__(self):
        back = self._next_rank_back
        upper = back + 1 if back is not None else 0
        return max(upper - self._next_rank, 0)

    def __repr__(self) -> str:
        kind = "zeros" if self.zero else "ones"
        return f"{type(self).__name__}({kind}, remaining={len(self)})"

    def next_back(self):
        """Return the last remaining position, or None when the iterator is exhausted."""
        return self._select_next_0_back() if self.zero else self._select_next_1_back()

    def advance_by(self, n):
        """Skip ``n`` elements from the front.

        Return how many of the ``n`` steps could not be taken (0 when all were).
        """
        if n < 0:
            raise ValueError("cannot advance by a negative number of elements")
        remaining = len(self)
        if remaining >= n:
            self._next_rank += n
            return 0
        self._next_rank += remaining
        return n - remaining

    def advance_back_by(self, n):
        """Skip ``n`` elements from the back.

        Return how many of the ``n`` steps could not be taken (0 when all were).
        """
        if n < 0:
            raise ValueError("cannot advance by a negative number of elements")
        remaining = len(self)
        steps = min(n, remaining)
        if self._next_rank_back is not None:
            moved = self._next_rank_back - steps
            self._next_rank_back = moved if moved >= 0 else None
        return n - steps

    def nth(self, n):
        """Skip ``n`` elements and return the next one, or None if there are too few."""
        if self.advance_by(n):
            return None
        return self._select_next()

    def nth_back(self, n):
        """Skip ``n`` elements from the back and return the next one from the back, or None."""
        if self.advance_back_by(n):
            return None
        return self.next_back()

    def last(self):
        """Consume the iterator and return its last element, or None if it is empty."""
        remaining = len(self)
        if remaining == 0:
            return None
        self.advance_by(remaining - 1)
        return self._select_next()

    def copy(self):
        """Return an independent iterator at the same state over the same index."""
        return _copy.copy(self)

    def _select_next(self):
        return self._select_next_0() if self.zero else self._select_next_1()

    def _ones_before_super_block(self, super_block: int) -> int:
        return super_block * SUPER_BLOCK_SIZE - self.index.super_blocks[super_block]

    def _front_exhausted(self, total: int) -> bool:
        rank = self._next_rank
        back = self._next_rank_back
        return rank >= total or back is None or rank > back

    def _select_next_0(self):
        index = self.index
        if self._front_exhausted(index.zeros):
            return None
        rank = self._next_rank
        super_blocks = index.super_blocks
        blocks = index.blocks

        super_block = index.select_blocks[rank // SELECT_BLOCK_SIZE].index_0
        block_index = 0

        last_sb = self._last_super_block
        if len(super_blocks) > last_sb + 1 and super_blocks[last_sb + 1] > rank:
            super_block = last_sb
            rank -= super_blocks[super_block]
            last_block = self._last_block
            if last_block % BLOCKS_PER_SUPER_BLOCK == BLOCKS_PER_SUPER_BLOCK - 1 or (
                len(blocks) > last_block + 1 and blocks[last_block + 1] > rank
            ):
                block_index = last_block
                rank -= blocks[block_index]
        else:
            super_block = search_super_block0(index, super_block, rank)
            self._last_super_block = super_block
            rank -= super_blocks[super_block]

        # block 0 doubles as "not cached": searching again from it is always correct
        if block_index == 0:
            block_index = search_block0(index, rank, super_block * BLOCKS_PER_SUPER_BLOCK)
            self._last_block = block_index
            rank -= blocks[block_index]

        self._next_rank += 1
        return search_word_in_block0(index, rank, block_index)

    def _select_next_0_back(self):
        index = self.index
        rank = self._next_rank_back
        if rank is None or rank < self._next_rank:
            return None
        super_blocks = index.super_blocks
        blocks = index.blocks

        super_block = index.select_blocks[rank // SELECT_BLOCK_SIZE].index_0
        block_index = 0

        if super_blocks[self._last_super_block_back] < rank:
            super_block = self._last_super_block_back
            rank -= super_blocks[super_block]
            if blocks[self._last_block_back] <= rank:
                block_index = self._last_block_back
                rank -= blocks[block_index]
        else:
            super_block = search_super_block0(index, super_block, rank)
            self._last_super_block_back = super_block
            rank -= super_blocks[super_block]

        if block_index == 0:
            block_index = search_block0(index, rank, super_block * BLOCKS_PER_SUPER_BLOCK)
            self._last_block_back = block_index
            rank -= blocks[block_index]

        self._step_back()
        return search_word_in_block0(index, rank, block_index)

    def _select_next_1(self):
        index = self.index
        if self._front_exhausted(index.ones):
            return None
        rank = self._next_rank
        super_blocks = index.super_blocks
        blocks = index.blocks

        super_block = index.select_blocks[rank // SELECT_BLOCK_SIZE].index_1
        block_index = 0

        last_sb = self._last_super_block
        if (
            len(super_blocks) > last_sb + 1
            and self._ones_before_super_block(last_sb + 1) > rank
        ):
            super_block = last_sb
            block_at_super_block = super_block * BLOCKS_PER_SUPER_BLOCK
            rank -= self._ones_before_super_block(super_block)
            last_block = self._last_block
            if last_block % BLOCKS_PER_SUPER_BLOCK == BLOCKS_PER_SUPER_BLOCK - 1 or (
                len(blocks) > last_block + 1
                and (last_block + 1 - block_at_super_block) * BLOCK_SIZE - blocks[last_block + 1]
                > rank
            ):
                block_index = last_block
                rank -= (block_index - block_at_super_block) * BLOCK_SIZE - blocks[block_index]
        else:
            super_block = search_super_block1(index, super_block, rank)
            self._last_super_block = super_block
            rank -= self._ones_before_super_block(super_block)

        if block_index == 0:
            block_at_super_block = super_block * BLOCKS_PER_SUPER_BLOCK
            block_index = search_block1(index, rank, block_at_super_block, block_at_super_block)
            self._last_block = block_index
            rank -= (block_index - block_at_super_block) * BLOCK_SIZE - blocks[block_index]

        self._next_rank += 1
        return search_word_in_block1(index, rank, block_index)

    def _select_next_1_back(self):
        index = self.index
        rank = self._next_rank_back
        if rank is None or rank < self._next_rank:
            return None
        blocks = index.blocks

        super_block = index.select_blocks[rank // SELECT_BLOCK_SIZE].index_1
        block_index = 0

        if self._ones_before_super_block(self._last_super_block_back) < rank:
            super_block = self._last_super_block_back
            block_at_super_block = super_block * BLOCKS_PER_SUPER_BLOCK
            rank -= self._ones_before_super_block(super_block)
            last_block = self._last_block_back
            if (last_block - block_at_super_block) * BLOCK_SIZE - blocks[last_block] <= rank:
                block_index = last_block
                rank -= (block_index - block_at_super_block) * BLOCK_SIZE - blocks[block_index]
        else:
            super_block = search_super_block1(index, super_block, rank)
            self._last_super_block_back = super_block
            rank -= self._ones_before_super_block(super_block)

        if block_index == 0:
            block_at_super_block = super_block * BLOCKS_PER_SUPER_BLOCK
            block_index = search_block1(index, rank, block_at_super_block, block_at_super_block)
            self._last_block_back = block_index
            rank -= (block_index - block_at_super_block) * BLOCK_SIZE - blocks[block_index]

        self._step_back()
        return search_word_in_block1(index, rank, block_index)

    def _step_back(self) -> None:
        back = self._next_rank_back
        self._next_rank_back = back - 1 if back else None