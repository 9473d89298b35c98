"""
Module 03 - Merkle Sum Tree
A complete, immutable Merkle sum tree built once from an entry list.

Owner: Protocol/Crypto Engineer
Module ID: M03

A Merkle Sum Tree is a binary Merkle tree where:
- Each entry is a (value, sum) pair
- Each leaf holds H(value, sum) and the entry's sum
- Each middle node holds H(l.hash, l.sum, r.hash, r.sum) and l.sum + r.sum
- The root commits to every entry and carries the total of all sums

The tree exposes no mutating operation: levels are stored as tuples and
only read-only properties are public. Use IncrementalMerkleSumTree for
append-style construction.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from core.crypto.hashing import HashFunction, sha256_field_hash
from core.merkle.build import build_merkle_sum_tree, compute_tree_depth
from core.merkle.constants import ARITY, MAX_DEPTH
from core.merkle.entry import Entry
from core.merkle.lookup import find_leaf_index
from core.merkle.node import Node
from core.merkle.proofs import create_proof, verify_proof
from core.schemas.errors import ConstructionException
from core.schemas.proof import MerkleProof


logger = logging.getLogger(__name__)


class MerkleSumTree:
    """
    Complete Merkle sum tree over a fixed list of entries.

    The depth is ceil(log2(len(entries))) (at least 1); leaf slots past
    the entries hold ZERO_ENTRY leaves.

    Example:
        >>> tree = MerkleSumTree([Entry.from_username("alice", 50), Entry.from_username("bob", 30)])
        >>> tree.root.sum
        80
        >>> tree.verify_proof(tree.create_proof(1))
        True
    """

    max_depth = MAX_DEPTH

    def __init__(
        self,
        entries: Sequence[Entry],
        hash_function: HashFunction | None = None,
    ) -> None:
        if hash_function is None:
            hash_function = sha256_field_hash
        if not callable(hash_function):
            raise ConstructionException(
                message="Parameter 'hash_function' must be callable",
                details={"type": type(hash_function).__name__},
            )
        for position, entry in enumerate(entries):
            if not isinstance(entry, Entry):
                raise ConstructionException(
                    message=f"Entry {position} is not an Entry",
                    details={"position": position, "type": type(entry).__name__},
                )

        self._hash = hash_function
        self._entries: tuple[Entry, ...] = tuple(entries)
        self._depth = compute_tree_depth(len(self._entries))

        root, nodes = build_merkle_sum_tree(self._entries, self._depth, self._hash)
        self._root: Node = root
        self._nodes: tuple[tuple[Node, ...], ...] = tuple(tuple(level) for level in nodes)

        logger.info(
            "Built Merkle sum tree: %d entries, depth %d, root sum %d",
            len(self._entries), self._depth, self._root.sum,
        )

    @classmethod
    def from_csv(
        cls,
        path: str | Path,
        hash_function: HashFunction | None = None,
        delimiter: str = ",",
        username_column: str = "username",
        balance_column: str = "balance",
    ) -> "MerkleSumTree":
        """Build a tree from a username/balance CSV file."""
        from core.sources.csv_entries import parse_entries_csv

        entries = parse_entries_csv(
            path,
            delimiter=delimiter,
            username_column=username_column,
            balance_column=balance_column,
        )
        return cls(entries, hash_function=hash_function)

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
    def hash_function(self) -> HashFunction:
        return self._hash

    @property
    def leaves(self) -> tuple[Node, ...]:
        """All 2**depth leaves, padding included."""
        return self._nodes[0]

    @property
    def entries(self) -> tuple[Entry, ...]:
        """The committed entries, padding excluded."""
        return self._entries

    @property
    def nodes(self) -> tuple[tuple[Node, ...], ...]:
        return self._nodes

    @property
    def leaf_count(self) -> int:
        return len(self._nodes[0])

    def __len__(self) -> int:
        return len(self._entries)

    def index_of(self, value: int | str, sum: int) -> int:
        """
        Return the index of the first entry matching (value, sum), or -1.

        value may be the packed integer or the username itself.
        """
        return find_leaf_index(value, sum, self._nodes[0][: len(self._entries)], self._hash)

    def create_proof(self, index: int) -> MerkleProof:
        """
        Create a proof of membership for the entry at index.

        Raises:
            LeafNotFoundException: If index does not address an entry
        """
        return create_proof(index, self._entries, self._nodes, self._root, self._depth)

    def verify_proof(self, proof: MerkleProof) -> bool:
        """Verify a proof with this tree's hash function."""
        return verify_proof(proof, self._hash)

    def __repr__(self) -> str:
        return (
            f"MerkleSumTree(entries={len(self._entries)}, depth={self._depth}, "
            f"root_sum={self._root.sum})"
        )


__all__ = [
    "MerkleSumTree",
]
