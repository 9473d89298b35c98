"""
Module 03 - Merkle Sum Tree Node Algebra
Pure functions deriving leaf and middle nodes.

Owner: Protocol/Crypto Engineer
Module ID: M03

Canonical Commitment Rules (Hard Contracts):
1. Leaf:   hash = H([entry.value, entry.sum]),            sum = entry.sum
2. Middle: hash = H([l.hash, l.sum, r.hash, r.sum]),      sum = l.sum + r.sum

The middle-node binding is ordered: swapping children changes the hash.
Both child sums enter the hash, so a node cannot be swapped for one with
an equal hash and a different sum.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from core.crypto.hashing import HashFunction

if TYPE_CHECKING:
    from core.merkle.entry import Entry


@dataclass(frozen=True)
class Node:
    """
    A node of a Merkle sum tree.

    Attributes:
        hash: Field element committing to the subtree
        sum: Total of the entry sums below this node
    """
    hash: int
    sum: int


def create_leaf_node(entry: "Entry", hash_function: HashFunction) -> Node:
    """
    Derive the leaf node of an entry.

    Args:
        entry: A validated Entry
        hash_function: Caller-supplied HashFunction

    Returns:
        Leaf Node
    """
    return Node(hash=hash_function([entry.value, entry.sum]), sum=entry.sum)


def create_middle_node(left: Node, right: Node, hash_function: HashFunction) -> Node:
    """
    Combine two child nodes into their parent.

    Args:
        left: Left child
        right: Right child
        hash_function: Caller-supplied HashFunction

    Returns:
        Parent Node
    """
    return Node(
        hash=hash_function([left.hash, left.sum, right.hash, right.sum]),
        sum=left.sum + right.sum,
    )


__all__ = [
    "Node",
    "create_leaf_node",
    "create_middle_node",
]
