"""
Module 01 - Schemas & Canonicalization
File: canonical.py

Purpose: Byte-stable JSON for proofs and commitments.

A proof written by the prover and re-serialized by a verifier must give
the same bytes, so the encoding is fixed:
- keys sorted, no whitespace, UTF-8 kept as-is
- None values dropped
- pydantic models dumped in JSON mode with their wire aliases
- tuples written as lists, bytes as lowercase hex

Floats are refused outright. Every number in a commitment is an integer,
and a float would silently lose precision on a 254-bit field element.
"""

import json
from typing import Any

from pydantic import BaseModel

from .errors import CanonicalizationException

# Canonical JSON separators - no whitespace
CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")


def _child_path(path: str, key: Any) -> str:
    if isinstance(key, int):
        return f"{path}[{key}]"
    return f"{path}.{key}" if path else str(key)


def canonicalize_value(value: Any, path: str = "") -> Any:
    """
    Reduce a value to plain JSON data in canonical form.

    Args:
        value: Model, mapping, sequence or scalar
        path: Location of value inside the outer object, for errors

    Returns:
        JSON-ready data (dict, list, str, int, bool or None)

    Raises:
        CanonicalizationException: On floats, non-string keys or types
            with no JSON form
    """
    if value is None or isinstance(value, (bool, int, str)):
        return value

    if isinstance(value, float):
        raise CanonicalizationException(
            message=f"Floats are not allowed in canonical JSON: {value!r}",
            details={"path": path, "value": repr(value)},
        )

    if isinstance(value, BaseModel):
        return canonicalize_value(
            value.model_dump(mode="json", by_alias=True, exclude_none=True),
            path,
        )

    if isinstance(value, dict):
        out: dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise CanonicalizationException(
                    message=f"Object keys must be strings, got {type(key).__name__}",
                    details={"path": path, "key": repr(key)},
                )
            if item is not None:
                out[key] = canonicalize_value(item, _child_path(path, key))
        return out

    if isinstance(value, (list, tuple)):
        return [canonicalize_value(item, _child_path(path, i)) for i, item in enumerate(value)]

    if isinstance(value, bytes):
        return value.hex()

    raise CanonicalizationException(
        message=f"Cannot canonicalize value of type {type(value).__name__}",
        details={"path": path, "type": type(value).__name__},
    )


def dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to its canonical JSON string.

    Example:
        >>> dumps_canonical({"rootSum": "80", "pathIndices": [1]})
        '{"pathIndices":[1],"rootSum":"80"}'
    """
    return json.dumps(
        canonicalize_value(obj),
        sort_keys=True,
        separators=CANONICAL_JSON_SEPARATORS,
        ensure_ascii=False,
    )


def loads_canonical(json_str: str | bytes) -> Any:
    """Parse canonical JSON. Floats in the input are rejected."""
    def _no_floats(text: str) -> float:
        raise CanonicalizationException(
            message=f"Floats are not allowed in canonical JSON: {text}",
            details={"value": text},
        )

    try:
        return json.loads(json_str, parse_float=_no_floats)
    except json.JSONDecodeError as e:
        raise CanonicalizationException(
            message=f"Invalid JSON: {e.msg}",
            details={"line": e.lineno, "column": e.colno},
        ) from e


def canonical_equals(obj1: Any, obj2: Any) -> bool:
    """True if both objects have the same canonical encoding."""
    try:
        return dumps_canonical(obj1) == dumps_canonical(obj2)
    except CanonicalizationException:
        return False
