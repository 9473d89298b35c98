"""
Core cryptographic utilities.

Module 02 provides the field-element hash functions the Merkle sum
tree is parameterized over.
"""
from .hashing import (
    FIELD_MODULUS,
    HashFunction,
    HASH_FUNCTIONS,
    DEFAULT_HASH_ALGORITHM,
    encode_elements,
    sha256_field_hash,
    blake2b_field_hash,
    get_hash_function,
    to_hex,
    from_hex,
    field_to_hex,
    field_from_hex,
)

__all__ = [
    "FIELD_MODULUS",
    "HashFunction",
    "HASH_FUNCTIONS",
    "DEFAULT_HASH_ALGORITHM",
    "encode_elements",
    "sha256_field_hash",
    "blake2b_field_hash",
    "get_hash_function",
    "to_hex",
    "from_hex",
    "field_to_hex",
    "field_from_hex",
]
