"""
Module 01 - Schemas & Canonicalization
File: proof.py

Purpose: Wire schema of a Merkle sum tree inclusion proof.

This is the only structure that crosses a trust boundary: a verifier in
another process (or another implementation) parses it and checks it
against a published root. Field names on the wire are camelCase:

    {
      "entry": {"value": "...", "sum": "...", "username": "..."},
      "siblingsHashes": ["...", ...],
      "siblingsSums": ["...", ...],
      "pathIndices": [0, 1, ...],
      "rootHash": "...",
      "rootSum": "..."
    }

Integers are emitted as decimal strings so 254-bit field elements survive
JSON parsers limited to doubles. Decimal strings and ints in [0, 2**256) are
accepted on input; floats are not.
"""

from __future__ import annotations

import json
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    ValidationError,
    model_validator,
)

from .canonical import dumps_canonical
from .errors import ProofFormatException

# Kept local so this module has no dependency on the merkle package
_MIN_DEPTH = 1
_MAX_DEPTH = 32

# Hashing encodes each element as one 32-byte word
_ELEMENT_BOUND = 1 << 256


def _parse_field_int(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("boolean is not a valid integer field")
    if isinstance(value, str):
        if not (value.isascii() and value.isdigit()):
            raise ValueError("integer field must be a non-negative decimal string")
        return int(value)
    return value


def _require_int(value: Any) -> Any:
    if type(value) is not int:
        raise ValueError(f"path bit must be the integer 0 or 1, got {value!r}")
    return value


# Strict: floats such as 12.0 are refused; decimal strings are converted first
FieldInt = Annotated[
    int,
    Field(strict=True, ge=0, lt=_ELEMENT_BOUND),
    BeforeValidator(_parse_field_int),
    PlainSerializer(lambda v: str(v), return_type=str, when_used="json"),
]

PathBit = Annotated[Literal[0, 1], BeforeValidator(_require_int)]


class ProofEntry(BaseModel):
    """The entry whose inclusion a proof asserts."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    value: FieldInt = Field(..., description="Entry identifier as a field element")
    sum: FieldInt = Field(..., description="Entry weight")
    username: str | None = Field(
        default=None,
        description="Display username; not part of the commitment",
    )


class MerkleProof(BaseModel):
    """
    Inclusion proof for one entry of a Merkle sum tree.

    siblings_hashes[k] / siblings_sums[k] describe the sibling at level k
    (level 0 = leaves). path_indices[k] is 0 when the node on the path is
    the left child at level k, 1 when it is the right child.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    entry: ProofEntry
    siblings_hashes: tuple[FieldInt, ...] = Field(..., alias="siblingsHashes")
    siblings_sums: tuple[FieldInt, ...] = Field(..., alias="siblingsSums")
    path_indices: tuple[PathBit, ...] = Field(..., alias="pathIndices")
    root_hash: FieldInt = Field(..., alias="rootHash")
    root_sum: FieldInt = Field(..., alias="rootSum")

    @model_validator(mode="after")
    def _check_shape(self) -> "MerkleProof":
        depth = len(self.siblings_hashes)
        if len(self.siblings_sums) != depth or len(self.path_indices) != depth:
            raise ValueError(
                "siblingsHashes, siblingsSums and pathIndices must have equal length "
                f"(got {depth}, {len(self.siblings_sums)}, {len(self.path_indices)})"
            )
        if not _MIN_DEPTH <= depth <= _MAX_DEPTH:
            raise ValueError(f"proof depth must be between {_MIN_DEPTH} and {_MAX_DEPTH}, got {depth}")
        return self

    @property
    def depth(self) -> int:
        return len(self.siblings_hashes)

    @property
    def leaf_index(self) -> int:
        """Leaf position re-derived from the path bits."""
        return sum(bit << level for level, bit in enumerate(self.path_indices))

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        """Canonical JSON encoding (sorted keys, no whitespace)."""
        return dumps_canonical(self)

    @classmethod
    def from_dict(cls, data: Any) -> "MerkleProof":
        """
        Parse a proof from its wire dictionary.

        Raises:
            ProofFormatException: If the data does not have the proof shape
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ProofFormatException(
                message=f"Invalid Merkle proof: {e.error_count()} validation error(s)",
                details={"errors": e.errors(include_url=False, include_context=False)},
            ) from e

    @classmethod
    def from_json(cls, text: str | bytes) -> "MerkleProof":
        """
        Parse a proof from JSON.

        Raises:
            ProofFormatException: If the text is not JSON or not a proof
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ProofFormatException(
                message=f"Proof is not valid JSON: {e.msg}",
                details={"line": e.lineno, "column": e.colno},
            ) from e
        except UnicodeDecodeError as e:
            raise ProofFormatException(
                message=f"Proof is not valid JSON: undecodable bytes ({e.encoding})",
                details={"encoding": e.encoding, "position": e.start},
            ) from e
        return cls.from_dict(data)


__all__ = [
    "FieldInt",
    "PathBit",
    "ProofEntry",
    "MerkleProof",
]
