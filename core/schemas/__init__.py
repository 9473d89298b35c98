"""
Module 01 - Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module: the error
taxonomy, canonical JSON and the MerkleProof wire schema.
"""

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonical_equals,
    canonicalize_value,
    dumps_canonical,
    loads_canonical,
)

# Error models and exceptions
from .errors import (
    CanonicalizationException,
    ConstructionException,
    ErrorCodes,
    LeafNotFoundException,
    MalformedRecordException,
    ProofFormatException,
    SumTreeError,
    SumTreeException,
    TreeCapacityException,
)

# Proof wire schema
from .proof import (
    MerkleProof,
    ProofEntry,
)

__all__ = [
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonical_equals",
    "canonicalize_value",
    "dumps_canonical",
    "loads_canonical",
    # Errors
    "CanonicalizationException",
    "ConstructionException",
    "ErrorCodes",
    "LeafNotFoundException",
    "MalformedRecordException",
    "ProofFormatException",
    "SumTreeError",
    "SumTreeException",
    "TreeCapacityException",
    # Proof
    "MerkleProof",
    "ProofEntry",
]
