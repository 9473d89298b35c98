"""
Module 03 - Incremental Merkle Sum Tree
Append-only Merkle sum tree with a fixed maximum depth.

Owner: Protocol/Crypto Engineer
Module ID: M03

Insertion recomputes only the depth nodes on the path from the new leaf
to the root. Missing siblings default to precomputed zero nodes:

    zeroes[0] = leaf(ZERO_ENTRY)
    zeroes[i] = middle(zeroes[i-1], zeroes[i-1])

Storage Notes:
- nodes[level] is a list holding the populated prefix of that level;
  because leaves are appended in order, the node being written at a
  level is always the last slot or the one just past it
- Nothing is preallocated, so a depth-32 tree only costs memory for the
  leaves actually inserted

An insert validates its input, computes the full new path, and only then
writes it, so a failed insert leaves the tree unchanged.
"""
from __future__ import annotations

import logging
import threading

from core.crypto.hashing import HashFunction
from core.merkle.build import check_depth
from core.merkle.constants import ARITY, MAX_DEPTH
from core.merkle.entry import ZERO_ENTRY, Entry
from core.merkle.lookup import find_leaf_index
from core.merkle.node import Node, create_leaf_node, create_middle_node
from core.merkle.proofs import create_proof, verify_proof
from core.schemas.errors import ConstructionException, TreeCapacityException
from core.schemas.proof import MerkleProof


logger = logging.getLogger(__name__)


def compute_zeroes(depth: int, hash_function: HashFunction) -> list[Node]:
    """Zero node of every level 0..depth-1."""
    zeroes = [create_leaf_node(ZERO_ENTRY, hash_function)]
    for _ in range(1, depth):
        zeroes.append(create_middle_node(zeroes[-1], zeroes[-1], hash_function))
    return zeroes


class IncrementalMerkleSumTree:
    """
    Incremental Merkle sum tree of arity 2.

    Args:
        hash_function: HashFunction used for every node
        depth: Maximum depth, 1..MAX_DEPTH; capacity is 2**depth leaves.
            Defaults to tree.default_depth of the process-wide config.

    Raises:
        ConstructionException: If hash_function is not callable or depth is
            out of range
    """

    max_depth = MAX_DEPTH

    def __init__(self, hash_function: HashFunction, depth: int | None = None) -> None:
        if hash_function is None:
            raise ConstructionException(message="Parameter 'hash_function' is not defined")
        if not callable(hash_function):
            raise ConstructionException(
                message="Parameter 'hash_function' must be callable",
                details={"type": type(hash_function).__name__},
            )
        if depth is None:
            from core.config.runtime import get_default_config
            depth = get_default_config().tree.default_depth
        check_depth(depth)

        self._hash = hash_function
        self._depth = depth
        self._zeroes: tuple[Node, ...] = tuple(compute_zeroes(depth, hash_function))
        self._nodes: list[list[Node]] = [[] for _ in range(depth)]
        self._entries: list[Entry] = []
        self._root: Node = create_middle_node(
            self._zeroes[depth - 1], self._zeroes[depth - 1], hash_function
        )
        self._lock = threading.Lock()

    @property
    def root(self) -> Node:
        return self._root

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def arity(self) -> int:
        return ARITY

    @property
    def zeroes(self) -> tuple[Node, ...]:
        return self._zeroes

    @property
    def leaves(self) -> tuple[Node, ...]:
        """Inserted leaves, in insertion order."""
        return tuple(self._nodes[0])

    @property
    def entries(self) -> tuple[Entry, ...]:
        return tuple(self._entries)

    @property
    def leaf_count(self) -> int:
        return len(self._nodes[0])

    @property
    def capacity(self) -> int:
        return 1 << self._depth

    @property
    def is_full(self) -> bool:
        return self.leaf_count >= self.capacity

    def __len__(self) -> int:
        return self.leaf_count

    def insert(self, value: int | str, sum: int) -> None:
        """
        Append a leaf at the next free index and recompute its path.

        Args:
            value: Entry value, or a username to pack into one
            sum: Non-negative entry sum

        Raises:
            ConstructionException: If sum is negative or a field is not an int
            TreeCapacityException: If the tree already holds 2**depth leaves
        """
        if isinstance(value, str):
            entry = Entry.from_username(value, sum)
        else:
            entry = Entry(value=value, sum=sum)

        with self._lock:
            if self.is_full:
                raise TreeCapacityException(capacity=self.capacity)

            index = len(self._nodes[0])
            path, root = self._compute_path(index, create_leaf_node(entry, self._hash))

            for level, node in enumerate(path):
                position = index >> level
                level_nodes = self._nodes[level]
                if position == len(level_nodes):
                    level_nodes.append(node)
                else:
                    level_nodes[position] = node
            self._entries.append(entry)
            self._root = root

        logger.debug("Inserted leaf %d (sum %d), root sum %d", index, entry.sum, root.sum)

    def _compute_path(self, index: int, leaf: Node) -> tuple[list[Node], Node]:
        """New node of every level on the path from index, plus the new root."""
        path: list[Node] = []
        node = leaf
        for level in range(self._depth):
            path.append(node)
            level_nodes = self._nodes[level]
            sibling_index = index ^ 1
            if sibling_index < len(level_nodes):
                sibling = level_nodes[sibling_index]
            else:
                sibling = self._zeroes[level]

            if index & 1:
                node = create_middle_node(sibling, node, self._hash)
            else:
                node = create_middle_node(node, sibling, self._hash)
            index >>= 1
        return path, node

    def index_of(self, value: int | str, sum: int) -> int:
        """Return the index of the first leaf matching (value, sum), or -1."""
        return find_leaf_index(value, sum, self._nodes[0], self._hash)

    def create_proof(self, index: int) -> MerkleProof:
        """
        Create a proof of membership for the leaf at index.

        Raises:
            LeafNotFoundException: If no leaf was inserted at index
        """
        with self._lock:
            return create_proof(
                index,
                self._entries,
                self._nodes,
                self._root,
                self._depth,
                zeroes=self._zeroes,
            )

    def verify_proof(self, proof: MerkleProof) -> bool:
        """Verify a proof with this tree's hash function."""
        return verify_proof(proof, self._hash)

    def __repr__(self) -> str:
        return (
            f"IncrementalMerkleSumTree(leaves={self.leaf_count}, depth={self._depth}, "
            f"root_sum={self._root.sum})"
        )


__all__ = [
    "IncrementalMerkleSumTree",
    "compute_zeroes",
]
