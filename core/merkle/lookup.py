"""
Module 03 - Merkle Sum Tree Leaf Lookup

Leaves are matched by recomputing the queried entry's leaf and comparing
hash and sum, the same way a verifier would. A miss returns -1.
"""
from __future__ import annotations

from typing import Sequence

from core.crypto.hashing import HashFunction
from core.merkle.entry import Entry
from core.merkle.node import Node, create_leaf_node
from core.schemas.errors import ConstructionException

NOT_FOUND: int = -1


def find_leaf_index(
    value: int | str,
    sum: int,
    leaves: Sequence[Node],
    hash_function: HashFunction,
) -> int:
    """
    Find the first leaf committing to (value, sum).

    Args:
        value: Packed entry value, or a username to pack
        sum: Entry sum
        leaves: Leaves to search, in index order
        hash_function: HashFunction the leaves were built with

    Returns:
        Leaf index, or NOT_FOUND (-1) when no leaf matches or the pair
        cannot form a valid entry
    """
    try:
        if isinstance(value, str):
            entry = Entry.from_username(value, sum)
        else:
            entry = Entry(value=value, sum=sum)
    except ConstructionException:
        return NOT_FOUND

    target = create_leaf_node(entry, hash_function)
    for index, leaf in enumerate(leaves):
        if leaf == target:
            return index
    return NOT_FOUND


__all__ = [
    "NOT_FOUND",
    "find_leaf_index",
]
