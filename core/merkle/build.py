"""
Module 03 - Merkle Sum Tree Batch Builder
Bottom-up construction of a complete tree from a fixed entry list.

Owner: Protocol/Crypto Engineer
Module ID: M03

Algorithm:
1. Pad the entries on the right with ZERO_ENTRY up to 2**depth
2. Level 0: one leaf per (padded) entry
3. Level i: pair nodes (2k, 2k+1) of level i-1 through create_middle_node
4. Root: create_middle_node over the two nodes of level depth-1

Determinism Notes:
- This module never sorts entries; position is part of the commitment,
  so permuting the input changes the root hash
"""
from __future__ import annotations

import logging
from typing import Sequence

from core.crypto.hashing import HashFunction
from core.merkle.constants import MAX_DEPTH, MIN_DEPTH
from core.merkle.entry import ZERO_ENTRY, Entry
from core.merkle.node import Node, create_leaf_node, create_middle_node
from core.schemas.errors import ConstructionException


logger = logging.getLogger(__name__)


def check_depth(depth: int) -> int:
    """
    Validate a tree depth against [MIN_DEPTH, MAX_DEPTH].

    Raises:
        ConstructionException: If the depth is out of range or not an int
    """
    if isinstance(depth, bool) or not isinstance(depth, int):
        raise ConstructionException(
            message=f"The tree depth must be an integer, got {type(depth).__name__}",
            details={"depth": repr(depth)},
        )
    if depth < MIN_DEPTH or depth > MAX_DEPTH:
        raise ConstructionException(
            message=f"The tree depth must be between {MIN_DEPTH} and {MAX_DEPTH}",
            details={"depth": depth},
        )
    return depth


def compute_tree_depth(entry_count: int) -> int:
    """
    Compute the depth needed to hold entry_count leaves.

    depth = ceil(log2(entry_count)), raised to MIN_DEPTH for a single entry
    (which is then paired with one zero leaf).

    Raises:
        ConstructionException: If there are no entries, or more than
            2**MAX_DEPTH
    """
    if entry_count < 1:
        raise ConstructionException(
            message="Cannot build a tree without entries",
            details={"entry_count": entry_count},
        )
    depth = max((entry_count - 1).bit_length(), MIN_DEPTH)
    return check_depth(depth)


def pad_entries(entries: Sequence[Entry], depth: int) -> list[Entry]:
    """Return a copy of entries right-padded with ZERO_ENTRY to 2**depth."""
    capacity = 1 << depth
    if len(entries) > capacity:
        raise ConstructionException(
            message=f"{len(entries)} entries do not fit in a tree of depth {depth}",
            details={"entry_count": len(entries), "depth": depth},
        )
    return list(entries) + [ZERO_ENTRY] * (capacity - len(entries))


def build_merkle_sum_tree(
    entries: Sequence[Entry],
    depth: int,
    hash_function: HashFunction,
) -> tuple[Node, list[list[Node]]]:
    """
    Build every level of a Merkle sum tree.

    Args:
        entries: Ordered entries (not yet padded)
        depth: Tree depth, 2**depth >= len(entries)
        hash_function: Caller-supplied HashFunction

    Returns:
        (root, nodes) where nodes[level][index] holds levels 0..depth-1;
        nodes[depth-1] has exactly two nodes

    Example:
        >>> root, nodes = build_merkle_sum_tree(entries, 2, sha256_field_hash)
        >>> [len(level) for level in nodes]
        [4, 2]
    """
    check_depth(depth)
    padded = pad_entries(entries, depth)

    nodes: list[list[Node]] = [
        [create_leaf_node(entry, hash_function) for entry in padded]
    ]

    for level in range(1, depth):
        below = nodes[level - 1]
        nodes.append([
            create_middle_node(below[i], below[i + 1], hash_function)
            for i in range(0, len(below), 2)
        ])

    root = create_middle_node(nodes[depth - 1][0], nodes[depth - 1][1], hash_function)

    logger.debug(
        "Built %d levels over %d entries (%d padding leaves)",
        depth, len(entries), len(padded) - len(entries),
    )
    return root, nodes


__all__ = [
    "check_depth",
    "compute_tree_depth",
    "pad_entries",
    "build_merkle_sum_tree",
]
