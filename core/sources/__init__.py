"""
Entry sources for Merkle sum trees.

Module 04 turns external records into validated Entry values before
they reach a tree.
"""
from .csv_entries import (
    parse_balance,
    parse_entry_rows,
    parse_entries_csv,
)

__all__ = [
    "parse_balance",
    "parse_entry_rows",
    "parse_entries_csv",
]
