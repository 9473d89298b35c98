"""
Module 03 - Merkle Sum Tree Entries
The atomic record committed to a Merkle sum tree.

Owner: Protocol/Crypto Engineer
Module ID: M03

An Entry is a (value, sum) pair:
- value: the identifier, as a non-negative integer (usernames are packed
  into one via Entry.from_username)
- sum: the non-negative weight aggregated up the tree (e.g. a balance)

Entries are frozen; a negative sum or a non-integer field fails
construction before any node is derived from it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from core.crypto.hashing import HashFunction
from core.merkle.constants import MAX_USERNAME_BYTES
from core.merkle.node import Node, create_leaf_node
from core.schemas.errors import ConstructionException, MalformedRecordException


def _require_int(name: str, value: Any) -> None:
    # bool is an int subclass but never a valid value or sum
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConstructionException(
            message=f"entry {name} must be an integer, got {type(value).__name__}",
            details={"field": name, "type": type(value).__name__},
        )


def username_to_value(username: str) -> int:
    """
    Pack a username into a field element.

    The UTF-8 bytes are read as one big-endian unsigned integer.

    Raises:
        MalformedRecordException: If the username is empty or longer than
            MAX_USERNAME_BYTES once encoded
    """
    if not isinstance(username, str) or not username:
        raise MalformedRecordException(
            message="Username must be a non-empty string",
            details={"username": repr(username)},
        )
    raw = username.encode("utf-8")
    if len(raw) > MAX_USERNAME_BYTES:
        raise MalformedRecordException(
            message=f"Username exceeds {MAX_USERNAME_BYTES} bytes",
            details={"username": username, "length": len(raw)},
        )
    return int.from_bytes(raw, byteorder="big")


@dataclass(frozen=True)
class Entry:
    """
    A single record committed to the tree.

    Attributes:
        value: Identifier packed as a non-negative integer
        sum: Non-negative weight of the record
        username: Original username, when the value was packed from one.
            Carried for display only; it is not part of the hash.
    """
    value: int
    sum: int
    username: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        """Validate entry fields."""
        _require_int("value", self.value)
        _require_int("sum", self.sum)
        if self.value < 0:
            raise ConstructionException(
                message="entry value can't be negative",
                details={"value": self.value},
            )
        if self.sum < 0:
            raise ConstructionException(
                message="entry sum can't be negative",
                details={"sum": self.sum},
            )

    @classmethod
    def from_username(cls, username: str, balance: int) -> "Entry":
        """Create an entry keyed by a username."""
        return cls(value=username_to_value(username), sum=balance, username=username)

    def compute_leaf(self, hash_function: HashFunction) -> Node:
        """Derive the leaf node for this entry."""
        return create_leaf_node(self, hash_function)


# Padding sentinel for unfilled leaf slots
ZERO_ENTRY: Entry = Entry(value=0, sum=0)


__all__ = [
    "Entry",
    "ZERO_ENTRY",
    "username_to_value",
]
