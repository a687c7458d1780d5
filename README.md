# rsbits

Immutable bit vectors that answer **rank** and **select** queries quickly.

`RsVec` (in `rsbits.rs_vec`) stores the bits together with a small block index.
Rank takes constant time. Select takes constant time on average and logarithmic time
in the worst case.

## Installation

```
pip install rsbits
```

## Building a vector

You can build a vector from 64-bit words and a length in bits. Bits are stored least
significant first:

```python
from rsbits.rs_vec import RsVec

vec = RsVec.from_words([0b10110], 64)
```

The number of words must be exactly enough to hold `length` bits, and each word must
fit in 64 bits. Otherwise a `ValueError` is raised. Bits in the last word beyond the
length are ignored.

You can also build a vector from an iterable of bits. Any truthy value counts as a 1:

```python
vec = RsVec.from_bits([0, 1, 1, 0, 1])
```

## Queries

```python
vec.rank1(3)        # 1-bits before position 3 -> 2
vec.rank0(3)        # 0-bits before position 3 -> 1
vec.select1(1)      # position of the 1-bit with rank 1 -> 2
vec.select0(1)      # position of the 0-bit with rank 1 -> 3
vec.get(4)          # 1; None when out of range
vec.get_bits(1, 3)  # 0b011; up to 64 bits as an integer, None when out of range
len(vec), vec.is_empty()
vec.count_ones(), vec.count_zeros()
vec.words()         # a copy of the packed words
vec.heap_size()     # bytes of data and index in packed form
```

Edge cases:

- A rank position at or past the end returns the total count.
- A select rank past the last matching bit returns the length of the vector.
- A negative rank position raises `IndexError`.
- A negative select rank raises `ValueError`.
- `get_unchecked` and `get_bits_unchecked` skip the range checks.

## Iteration

Iterating over an `RsVec` yields each bit (0 or 1) in order. `reversed(vec)` yields
them from the end.

`iter0()`, `iter1()` and `select_iter(zero)` return a `SelectIter` (from
`rsbits.select_iter`). It yields the positions of the 0-bits or the 1-bits, and it
can be consumed from both ends:

```python
it = vec.iter1()
next(it)          # first 1-bit position
it.next_back()    # last remaining 1-bit position, or None
len(it)           # positions still left
it.nth(2)         # skip two, then return one; None if too few
```

`SelectIter` has these further methods:

- `nth_back(n)` skips `n` positions from the back, then returns the next one from the back.
- `last()` consumes the iterator and returns its final position.
- `copy()` returns an independent iterator with the same state.
- `advance_by(n)` and `advance_back_by(n)` skip positions without yielding them. They
  return how many of the `n` steps could not be taken, which is 0 when all were taken.

`bit_set_iter0()` and `bit_set_iter1()` return a `BitSetIter` (from
`rsbits.bitset_iter`). It yields the same positions in increasing order. It reads
the vector sixteen bits at a time, which is quicker for dense vectors.

## Equality

`a == b` compares contents:

- For vectors of more than 4,000,000 bits it uses `sparse_equals`.
- For smaller vectors it uses `full_equals`.

You can also call either method yourself:

- `full_equals(other)` compares word by word.
- `sparse_equals(other, zero)` walks the 0-bits (`zero` true) or the 1-bits of one vector.

`RsVec` is not hashable.

## Masks

`rsbits.mask.MaskedBitVec(vec, mask, bin_op)` combines two `RsVec`s of equal length
word by word with a binary function, such as `operator.and_`. The result of the
function is cut to 64 bits, and it is computed only when a bit is read. Vectors of
different lengths raise `ValueError`.

The helpers `mask_and`, `mask_or` and `mask_xor` build the common cases.

A masked vector offers the following:

- `get`, `get_unchecked`, `is_bit_set`, `is_bit_set_unchecked`
- `get_bits` (1 to 64 bits)
- `get_bits_unchecked`
- `count_ones`, `count_zeros`
- `len()`
- `to_rs_vec()`, which builds the combined `RsVec`

## Lower-level pieces

`rsbits.index.RankSelectIndex(words, length)` holds the bits and block index. It
offers `rank(zero, pos)` and `bit(pos)`.

`rsbits.select` provides `select0(index, rank)` and `select1(index, rank)`, plus the
search helpers they use.

## What it does not do

Vectors are immutable. There is no growable bit vector with append, set or flip
operations. To change bits, take `words()`, edit them and build a new `RsVec`. There is
also no serialisation format and no command-line tool.