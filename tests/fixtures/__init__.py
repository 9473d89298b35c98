"""
Test fixtures package for Merkle sum tree tests.

This package provides factory functions for creating test objects.
- common.py: sample ledger, entry/tree factories, toy hash, CSV writer

Usage:
    from fixtures import make_tree, SAMPLE_TOTAL

    def test_something():
        tree = make_tree()
        assert tree.root.sum == SAMPLE_TOTAL
"""

from .common import (
    SAMPLE_RECORDS,
    SAMPLE_TOTAL,
    toy_hash,
    make_entries,
    make_tree,
    make_sized_records,
    write_entries_csv,
)

__all__ = [
    "SAMPLE_RECORDS",
    "SAMPLE_TOTAL",
    "toy_hash",
    "make_entries",
    "make_tree",
    "make_sized_records",
    "write_entries_csv",
]
