import random

import pytest

from rsbits.index import BLOCK_SIZE, SUPER_BLOCK_SIZE, WORD_MASK, WORD_SIZE, RankSelectIndex
from rsbits.select_iter import SelectIter

POSITIONS = [
    1,
    3,
    5,
    BLOCK_SIZE,
    BLOCK_SIZE + 1,
    SUPER_BLOCK_SIZE - 1,
    SUPER_BLOCK_SIZE,
    SUPER_BLOCK_SIZE + 1,
]


def _index_from_value(value, length):
    words = [(value >> (WORD_SIZE * i)) & WORD_MASK for i in range(-(-length // WORD_SIZE))]
    return RankSelectIndex(words, length)


def _make_index(length, fill=0, flips=()):
    value = (1 << length) - 1 if fill else 0
    for pos in flips:
        value ^= 1 << pos
    return _index_from_value(value, length)


def _index_from_bits(bits):
    value = 0
    for pos, bit in enumerate(bits):
        if bit:
            value |= 1 << pos
    return _index_from_value(value, len(bits))


def _drain_back(it):
    out = []
    while (value := it.next_back()) is not None:
        out.append(value)
    return out


def test_select1_iterator():
    index = _make_index(2 * SUPER_BLOCK_SIZE, 0, POSITIONS)
    it = SelectIter(index, False)
    assert [next(it) for _ in POSITIONS] == POSITIONS
    with pytest.raises(StopIteration):
        next(it)


def test_select0_iterator():
    index = _make_index(2 * SUPER_BLOCK_SIZE, 1, POSITIONS)
    assert list(SelectIter(index, True)) == POSITIONS


def test_empty_vec_select_iter():
    index = _make_index(0)
    for zero in (True, False):
        it = SelectIter(index, zero)
        assert len(it.copy()) == 0
        assert list(it) == []
        assert it.next_back() is None


def test_full_vec_empty_select_iter():
    index = _make_index(2 * SUPER_BLOCK_SIZE, 0)
    it = SelectIter(index, False)
    assert len(it) == 0
    assert next(it, None) is None
    assert it.next_back() is None
    assert len(it) == 0

    index = _make_index(2 * SUPER_BLOCK_SIZE, 1)
    it = SelectIter(index, True)
    assert len(it) == 0
    assert next(it, None) is None
    assert it.next_back() is None
    assert len(it) == 0


@pytest.mark.parametrize("zero", [True, False])
def test_select_iter_next_back(zero):
    index = _make_index(2 * SUPER_BLOCK_SIZE, 1 if zero else 0, POSITIONS)
    it = SelectIter(index, zero)
    for expected in reversed(POSITIONS):
        assert it.next_back() == expected


@pytest.mark.parametrize("zero", [True, False])
def test_select_iter_mixed(zero):
    index = _make_index(2 * SUPER_BLOCK_SIZE, 1 if zero else 0, POSITIONS)
    it = SelectIter(index, zero)
    assert next(it) == 1
    assert it.next_back() == SUPER_BLOCK_SIZE + 1
    assert next(it) == 3
    assert it.next_back() == SUPER_BLOCK_SIZE
    assert next(it) == 5
    assert it.next_back() == SUPER_BLOCK_SIZE - 1
    assert next(it) == BLOCK_SIZE
    assert it.next_back() == BLOCK_SIZE + 1
    assert next(it, None) is None
    assert it.next_back() is None


@pytest.mark.parametrize("zero", [True, False])
def test_select_iter_back_without_idx0(zero):
    index = _make_index(2 * SUPER_BLOCK_SIZE, 1 if zero else 0, POSITIONS)
    it = SelectIter(index, zero)
    for expected in reversed(POSITIONS[1:]):
        assert it.next_back() == expected
    assert next(it) == 1
    assert it.next_back() is None
    assert next(it, None) is None


def test_select_iter_custom_impls():
    index = _make_index(2 * SUPER_BLOCK_SIZE, 1, POSITIONS)

    it = SelectIter(index, True)
    assert it.copy().last() == SUPER_BLOCK_SIZE + 1
    assert it.copy().nth(2) == 5
    assert it.copy().nth(10) is None
    assert it.copy().advance_by(2) == 0
    assert it.copy().advance_by(10) == 2
    assert len(it) == 8

    it = SelectIter(index, True)
    it.next_back()
    assert it.nth_back(2) == BLOCK_SIZE + 1
    it.next_back()
    assert it.last() == 5

    it = SelectIter(index, True)
    next(it)
    assert it.copy().nth_back(7) is None
    assert len(it.copy()) == 7
    assert it.copy().advance_back_by(8) == 1
    assert it.copy().advance_back_by(7) == 0
    assert it.copy().advance_back_by(6) == 0


@pytest.mark.parametrize("zero", [True, False])
def test_select_iter_size_hints(zero):
    index = _make_index(2 * SUPER_BLOCK_SIZE, 1 if zero else 0, POSITIONS)
    it = SelectIter(index, zero)
    assert len(it) == 8
    steps = [
        ("f", 1),
        ("b", SUPER_BLOCK_SIZE + 1),
        ("f", 3),
        ("b", SUPER_BLOCK_SIZE),
        ("f", 5),
        ("b", SUPER_BLOCK_SIZE - 1),
        ("f", BLOCK_SIZE),
        ("b", BLOCK_SIZE + 1),
    ]
    for remaining, (side, expected) in zip(range(7, -1, -1), steps):
        value = next(it) if side == "f" else it.next_back()
        assert value == expected
        assert len(it) == remaining
    assert next(it, None) is None
    assert len(it) == 0
    assert it.next_back() is None
    assert len(it) == 0


def test_copy_is_independent():
    index = _make_index(2 * SUPER_BLOCK_SIZE, 0, POSITIONS)
    it = SelectIter(index, False)
    clone = it.copy()
    assert list(clone) == POSITIONS
    assert len(it) == 8
    assert next(it) == 1


def test_iteration_is_fused():
    index = _make_index(10, 0, [2])
    it = SelectIter(index, False)
    assert list(it) == [2]
    for _ in range(3):
        with pytest.raises(StopIteration):
            next(it)
        assert it.next_back() is None


def test_advance_on_empty_iterators():
    it = SelectIter(_make_index(0), True)
    assert it.nth(20) is None
    assert it.nth_back(20) is None
    assert it.advance_by(0) == 0
    assert it.advance_back_by(0) == 0
    assert it.advance_by(100) == 100
    assert it.advance_back_by(100) == 100

    it = SelectIter(_make_index(1, 0), True)
    assert len(it) == 1
    assert it.advance_by(1) == 0
    assert len(it) == 0
    assert it.advance_by(1) == 1
    assert it.advance_back_by(1) == 1

    it = SelectIter(_make_index(1, 1), False)
    assert it.advance_back_by(1) == 0
    assert len(it) == 0
    assert it.advance_back_by(1) == 1
    assert it.advance_by(1) == 1


def test_negative_advance_rejected():
    it = SelectIter(_make_index(10), True)
    with pytest.raises(ValueError):
        it.advance_by(-1)
    with pytest.raises(ValueError):
        it.advance_back_by(-1)


def test_random_data_iter():
    rng = random.Random(1234)
    for fill_ratio in (10, 50, 90):
        for length in (BLOCK_SIZE // 2, BLOCK_SIZE, SUPER_BLOCK_SIZE, 4 * SUPER_BLOCK_SIZE):
            for _ in range(2):
                bits = [int(rng.randrange(100) < fill_ratio) for _ in range(length)]
                index = _index_from_bits(bits)
                ones = [i for i, b in enumerate(bits) if b]
                zeros = [i for i, b in enumerate(bits) if not b]
                assert list(SelectIter(index, False)) == ones
                assert list(SelectIter(index, True)) == zeros


def test_random_data_iter_both_ends():
    rng = random.Random(4321)
    for fill_ratio in (10, 50, 90):
        for length in (BLOCK_SIZE // 2, BLOCK_SIZE, SUPER_BLOCK_SIZE, 4 * SUPER_BLOCK_SIZE):
            for _ in range(2):
                bits = [int(rng.randrange(100) < fill_ratio) for _ in range(length)]
                index = _index_from_bits(bits)
                for zero, wanted in ((True, 0), (False, 1)):
                    it = SelectIter(index, zero)
                    total = index.zeros if zero else index.ones
                    taken = [
                        next(it) if rng.randrange(100) < 50 else it.next_back()
                        for _ in range(total)
                    ]
                    assert sorted(set(taken)) == [i for i, b in enumerate(bits) if b == wanted]
                    assert len(it) == 0


def test_iter_back_matches_forward():
    rng = random.Random(99)
    bits = [rng.randrange(2) for _ in range(3 * SUPER_BLOCK_SIZE + 77)]
    index = _index_from_bits(bits)
    for zero in (True, False):
        forward = list(SelectIter(index, zero))
        assert _drain_back(SelectIter(index, zero)) == forward[::-1]


def test_iter1_regression_i6():
    rng = random.Random(7)
    bits = [rng.randrange(2) for _ in range(4 * SUPER_BLOCK_SIZE)]
    index = _index_from_bits(bits)
    ones = list(SelectIter(index, False))
    zeros = list(SelectIter(index, True))
    assert all(index.bit(i) == 1 for i in ones)
    assert all(index.bit(i) == 0 for i in zeros)
    assert sorted(ones + zeros) == list(range(4 * SUPER_BLOCK_SIZE))


def test_iter1_regression_i8():
    input_on_bits = [1, 14, 21, 24, 36, 48, 57, 59, 65, 69, 81, 87, 97, 100, 101, 104, 111, 117]
    index = _make_index(8193, 0, input_on_bits)
    assert list(SelectIter(index, False)) == input_on_bits