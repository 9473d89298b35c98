"""
Module 02 - Hashing Utilities
Field-element hash functions for Merkle sum tree commitments.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- The HashFunction contract: an ordered sequence of non-negative integers
  mapped to one integer
- SHA-256 and BLAKE2b based field hashes (digest reduced mod the BN254
  scalar field, so outputs can feed a SNARK circuit)
- Lookup of a hash function by its configured name
- Hex encoding/decoding with 0x prefix

Encoding Rules (Hard Contracts):
1. Each element is encoded as 32 bytes, big-endian, unsigned
2. Elements are concatenated in order, then hashed once
3. The digest is read big-endian and reduced mod FIELD_MODULUS

Elements outside [0, 2**256) raise ValueError; the tree never produces
such values, so only a forged proof can trigger it.
"""
from __future__ import annotations

import hashlib
from typing import Callable, Sequence

from core.schemas.errors import ConstructionException


# BN254 (alt_bn128) scalar field modulus
FIELD_MODULUS: int = (
    21888242871839275222246405745257275088548364400416034343698204186575808495617
)

ELEMENT_SIZE: int = 32

HashFunction = Callable[[Sequence[int]], int]


def encode_elements(elements: Sequence[int]) -> bytes:
    """
    Encode field elements as concatenated 32-byte big-endian words.

    Raises:
        ValueError: If an element is negative, too large, or not an int
    """
    out = bytearray()
    for position, element in enumerate(elements):
        if isinstance(element, bool) or not isinstance(element, int):
            raise ValueError(
                f"Element {position} must be an int, got {type(element).__name__}"
            )
        if element < 0:
            raise ValueError(f"Element {position} is negative: {element}")
        try:
            out += element.to_bytes(ELEMENT_SIZE, byteorder="big", signed=False)
        except OverflowError as e:
            raise ValueError(
                f"Element {position} does not fit in {ELEMENT_SIZE} bytes"
            ) from e
    return bytes(out)


def sha256_field_hash(elements: Sequence[int]) -> int:
    """
    Hash an ordered sequence of integers into the BN254 scalar field.

    Rule: H(x_1..x_n) = int(sha256(be32(x_1) || ... || be32(x_n))) mod p

    Args:
        elements: Non-negative integers, each below 2**256

    Returns:
        Integer in [0, FIELD_MODULUS)
    """
    digest = hashlib.sha256(encode_elements(elements)).digest()
    return int.from_bytes(digest, byteorder="big") % FIELD_MODULUS


def blake2b_field_hash(elements: Sequence[int]) -> int:
    """Same as sha256_field_hash, with a 32-byte BLAKE2b digest."""
    digest = hashlib.blake2b(encode_elements(elements), digest_size=32).digest()
    return int.from_bytes(digest, byteorder="big") % FIELD_MODULUS


HASH_FUNCTIONS: dict[str, HashFunction] = {
    "sha256": sha256_field_hash,
    "blake2b": blake2b_field_hash,
}

DEFAULT_HASH_ALGORITHM = "sha256"


def get_hash_function(name: str = DEFAULT_HASH_ALGORITHM) -> HashFunction:
    """
    Resolve a hash function by its configured name.

    Raises:
        ConstructionException: If the name is not registered
    """
    try:
        return HASH_FUNCTIONS[name.lower()]
    except KeyError:
        raise ConstructionException(
            message=f"Unknown hash algorithm: {name}",
            details={"algorithm": name, "supported": sorted(HASH_FUNCTIONS)},
        ) from None


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def field_to_hex(value: int) -> str:
    """Render a field element as a 0x-prefixed 32-byte hex string."""
    return to_hex(value.to_bytes(ELEMENT_SIZE, byteorder="big"))


def field_from_hex(hex_string: str) -> int:
    """Parse a 0x-prefixed hex string into a field element."""
    return int.from_bytes(from_hex(hex_string), byteorder="big")


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
