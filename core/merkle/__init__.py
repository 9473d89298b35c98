"""
Module 03 - Merkle Sum Tree
Merkle sum tree construction, incremental insertion, and proof
generation/verification.

Owner: Protocol/Crypto Engineer
Module ID: M03

This module provides:
- Entry / ZERO_ENTRY: the committed (value, sum) record
- Node, create_leaf_node, create_middle_node: the node algebra
- MerkleSumTree: immutable tree built once from an entry list
- IncrementalMerkleSumTree: append-only tree with a fixed max depth
- create_proof / verify_proof: inclusion proofs over hash and sum
- MerkleSumVerifier: verification for holders of a proof and a root

Canonical Commitment Rules:
1. Leaf:   H(value, sum), sum
2. Middle: H(l.hash, l.sum, r.hash, r.sum), l.sum + r.sum
3. Padding: ZERO_ENTRY leaves up to 2**depth
4. Depth: 1 <= depth <= MAX_DEPTH (32)

Usage:
    from core.merkle import Entry, MerkleSumTree, verify_proof
    from core.crypto import sha256_field_hash

    tree = MerkleSumTree([Entry.from_username("alice", 50), Entry.from_username("bob", 30)])
    proof = tree.create_proof(0)
    assert verify_proof(proof, sha256_field_hash)
    assert tree.root.sum == 80
"""
from .constants import (
    ARITY,
    MAX_DEPTH,
    MIN_DEPTH,
    MAX_USERNAME_BYTES,
)

from .node import (
    Node,
    create_leaf_node,
    create_middle_node,
)

from .entry import (
    Entry,
    ZERO_ENTRY,
    username_to_value,
)

from .build import (
    check_depth,
    compute_tree_depth,
    pad_entries,
    build_merkle_sum_tree,
)

from .lookup import (
    NOT_FOUND,
    find_leaf_index,
)

from .proofs import (
    create_proof,
    compute_proof_root,
    verify_proof,
)

from .merkle_sum_tree import MerkleSumTree

from .incremental import (
    IncrementalMerkleSumTree,
    compute_zeroes,
)

from .merkle_proofs import MerkleSumVerifier


__all__ = [
    # Constants
    "ARITY",
    "MAX_DEPTH",
    "MIN_DEPTH",
    "MAX_USERNAME_BYTES",
    # Node algebra
    "Node",
    "create_leaf_node",
    "create_middle_node",
    # Entries
    "Entry",
    "ZERO_ENTRY",
    "username_to_value",
    # Batch building
    "check_depth",
    "compute_tree_depth",
    "pad_entries",
    "build_merkle_sum_tree",
    # Lookup
    "NOT_FOUND",
    "find_leaf_index",
    # Proofs
    "create_proof",
    "compute_proof_root",
    "verify_proof",
    # Trees
    "MerkleSumTree",
    "IncrementalMerkleSumTree",
    "compute_zeroes",
    "MerkleSumVerifier",
]
