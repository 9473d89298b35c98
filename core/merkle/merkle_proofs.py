"""
Module 03 - Merkle Sum Proof Convenience Wrappers
Thin class-based wrappers around core/merkle/proofs.py for third-party
verifiers.

Owner: Protocol/Crypto Engineer
Module ID: M03

A verifier typically holds:
- the published commitment (root hash and total sum)
- one user's proof, as JSON
- the name of the hash function the operator used

and never the tree itself. MerkleSumVerifier packages exactly that.
"""
from __future__ import annotations

import logging

from core.crypto.hashing import DEFAULT_HASH_ALGORITHM, HashFunction, get_hash_function
from core.merkle.proofs import verify_proof
from core.schemas.proof import MerkleProof


logger = logging.getLogger(__name__)


class MerkleSumVerifier:
    """
    Verifies Merkle sum proofs without access to the tree.

    Example:
        >>> verifier = MerkleSumVerifier()
        >>> verifier.verify_against_root(proof, root_hash=tree.root.hash, root_sum=tree.root.sum)
        True
    """

    def __init__(self, hash_function: HashFunction | None = None) -> None:
        if hash_function is None:
            hash_function = get_hash_function(DEFAULT_HASH_ALGORITHM)
        self._hash = hash_function

    @classmethod
    def for_algorithm(cls, name: str) -> "MerkleSumVerifier":
        """
        Create a verifier for a named hash algorithm.

        Raises:
            ConstructionException: If the algorithm is unknown
        """
        return cls(get_hash_function(name))

    @property
    def hash_function(self) -> HashFunction:
        return self._hash

    def verify(self, proof: MerkleProof) -> bool:
        """
        Verify a proof against the root it carries.

        Returns:
            True if the proof is valid, False otherwise
        """
        return verify_proof(proof, self._hash)

    def verify_against_root(self, proof: MerkleProof, root_hash: int, root_sum: int) -> bool:
        """
        Verify a proof and check it targets the published commitment.

        A proof that is internally consistent but carries a different root
        than the one published is rejected.
        """
        if proof.root_hash != root_hash or proof.root_sum != root_sum:
            logger.debug("Proof root does not match the published commitment")
            return False
        return self.verify(proof)

    def verify_json(self, text: str | bytes) -> bool:
        """
        Parse and verify a JSON proof.

        Raises:
            ProofFormatException: If the text is not a well-formed proof
        """
        return self.verify(MerkleProof.from_json(text))


__all__ = [
    "MerkleSumVerifier",
]
