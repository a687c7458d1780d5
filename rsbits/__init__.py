"""Immutable bit vectors with rank and select queries, select iterators and lazy masks."""

__version__ = "1.6.2"
__all__ = ["index", "select", "select_iter", "bitset_iter", "rs_vec", "mask"]