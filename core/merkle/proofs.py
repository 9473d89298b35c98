"""
Module 03 - Merkle Sum Tree Proofs
Inclusion proof generation and verification.

Owner: Protocol/Crypto Engineer
Module ID: M03

Generation is a pure read of the materialized level arrays: for each
level record the sibling (index XOR 1) and the path bit (index AND 1),
then halve the index.

Verification needs only the proof and the hash function:
1. node = leaf(proof.entry)
2. For each level k:
   - path bit 0: node = middle(node, sibling_k)
   - path bit 1: node = middle(sibling_k, node)
3. Valid iff node.hash == root_hash and node.sum == root_sum

Verification never raises for a well-typed proof; it returns False.
"""
from __future__ import annotations

import logging
from typing import Sequence

from core.crypto.hashing import HashFunction
from core.merkle.entry import Entry
from core.merkle.node import Node, create_leaf_node, create_middle_node
from core.schemas.errors import ConstructionException, LeafNotFoundException
from core.schemas.proof import MerkleProof, ProofEntry


logger = logging.getLogger(__name__)


def create_proof(
    index: int,
    entries: Sequence[Entry],
    nodes: Sequence[Sequence[Node]],
    root: Node,
    depth: int,
    zeroes: Sequence[Node] | None = None,
) -> MerkleProof:
    """
    Extract the sibling path from a leaf to the root.

    Args:
        index: Leaf index; must address one of the real entries
        entries: Entries committed to the tree, in leaf order
        nodes: Level arrays, nodes[level][index]
        root: Current root node
        depth: Tree depth
        zeroes: Per-level zero nodes used where a sibling slot is
            unpopulated (incremental trees); None for complete trees

    Returns:
        MerkleProof with depth siblings, bottom-up

    Raises:
        LeafNotFoundException: If index does not address an entry
    """
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(entries):
        raise LeafNotFoundException(leaf_index=index if isinstance(index, int) else None)

    siblings_hashes: list[int] = []
    siblings_sums: list[int] = []
    path_indices: list[int] = []

    current = index
    for level in range(depth):
        sibling_index = current ^ 1
        level_nodes = nodes[level]
        if sibling_index < len(level_nodes):
            sibling = level_nodes[sibling_index]
        elif zeroes is not None:
            sibling = zeroes[level]
        else:
            raise LeafNotFoundException(
                message=f"Sibling {sibling_index} missing at level {level}",
                leaf_index=index,
            )
        siblings_hashes.append(sibling.hash)
        siblings_sums.append(sibling.sum)
        path_indices.append(current & 1)
        current >>= 1

    entry = entries[index]
    logger.debug("Created proof for leaf %d (depth %d)", index, depth)

    return MerkleProof(
        entry=ProofEntry(value=entry.value, sum=entry.sum, username=entry.username),
        siblings_hashes=siblings_hashes,
        siblings_sums=siblings_sums,
        path_indices=path_indices,
        root_hash=root.hash,
        root_sum=root.sum,
    )


def compute_proof_root(proof: MerkleProof, hash_function: HashFunction) -> Node:
    """
    Recompute the root a proof commits to.

    Raises:
        ValueError: If the hash function rejects an element of the proof
    """
    entry = Entry(value=proof.entry.value, sum=proof.entry.sum)
    node = create_leaf_node(entry, hash_function)

    for sibling_hash, sibling_sum, bit in zip(
        proof.siblings_hashes, proof.siblings_sums, proof.path_indices
    ):
        sibling = Node(hash=sibling_hash, sum=sibling_sum)
        if bit:
            node = create_middle_node(sibling, node, hash_function)
        else:
            node = create_middle_node(node, sibling, hash_function)

    return node


def verify_proof(proof: MerkleProof, hash_function: HashFunction) -> bool:
    """
    Verify a Merkle sum proof.

    Checks both that the entry is included at the position encoded by
    the path bits and that the sums along the path add up to root_sum.

    Args:
        proof: MerkleProof to verify
        hash_function: The HashFunction the tree was built with

    Returns:
        True if the proof is valid, False otherwise
    """
    lengths = {len(proof.siblings_hashes), len(proof.siblings_sums), len(proof.path_indices)}
    if len(lengths) != 1:
        return False

    try:
        node = compute_proof_root(proof, hash_function)
    except (ValueError, TypeError, ConstructionException) as e:
        logger.debug("Proof rejected while hashing: %s", e)
        return False

    ok = node.hash == proof.root_hash and node.sum == proof.root_sum
    if not ok:
        logger.debug(
            "Proof for leaf %d does not reach the claimed root",
            proof.leaf_index,
        )
    return ok


__all__ = [
    "create_proof",
    "compute_proof_root",
    "verify_proof",
]
