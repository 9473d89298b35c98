"""
Module 06 - CLI Verify Command

Verify a proof file offline, optionally against a published commitment.

Usage:
    sumtree verify proof.json [--root-hash HASH] [--root-sum SUM] [--json]

Exit codes: 0 when the proof is valid (and matches the given root),
2 when it is not or the file does not hold a well-formed proof, 1 on
runtime errors such as a missing file or a bad argument.
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from core.config.runtime import RuntimeConfig
from core.crypto.hashing import field_from_hex, field_to_hex
from core.merkle.merkle_proofs import MerkleSumVerifier
from core.schemas.errors import ProofFormatException
from core.schemas.proof import MerkleProof
from sumtree_cli.commands.build import print_error


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    proof_path: str = ""
    leaf_index: int = 0
    username: str | None = None
    entry_sum: str = ""
    root_hash: str = ""
    root_sum: str = ""
    proof_ok: bool = False
    root_ok: bool | None = None
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if self.root_ok is None:
            del d["root_ok"]
        if self.username is None:
            del d["username"]
        if not d["errors"]:
            del d["errors"]
        return d

    @property
    def all_ok(self) -> bool:
        if not self.proof_ok:
            return False
        if self.root_ok is not None and not self.root_ok:
            return False
        return True


def parse_field_arg(text: str) -> int:
    """Parse a 0x-prefixed hex or decimal field element."""
    if text.startswith("0x"):
        return field_from_hex(text)
    return int(text, 10)


def build_summary(
    proof_path: str,
    proof: MerkleProof,
    proof_ok: bool,
    expected_root_hash: int | None,
    expected_root_sum: int | None,
) -> VerifySummary:
    summary = VerifySummary(
        proof_path=proof_path,
        leaf_index=proof.leaf_index,
        username=proof.entry.username,
        entry_sum=str(proof.entry.sum),
        root_hash=field_to_hex(proof.root_hash),
        root_sum=str(proof.root_sum),
        proof_ok=proof_ok,
    )
    if not proof_ok:
        summary.errors.append("Proof does not reach its claimed root")

    if expected_root_hash is not None or expected_root_sum is not None:
        summary.root_ok = True
        if expected_root_hash is not None and expected_root_hash != proof.root_hash:
            summary.root_ok = False
            summary.errors.append("Root hash differs from the published commitment")
        if expected_root_sum is not None and expected_root_sum != proof.root_sum:
            summary.root_ok = False
            summary.errors.append("Root sum differs from the published commitment")

    return summary


def print_summary_human(summary: VerifySummary) -> None:
    print(f"proof: {summary.proof_path}")
    print(f"leaf_index: {summary.leaf_index}")
    if summary.username is not None:
        print(f"username: {summary.username}")
    print(f"entry_sum: {summary.entry_sum}")
    print(f"root_hash: {summary.root_hash}")
    print(f"root_sum: {summary.root_sum}")
    print(f"proof_ok: {str(summary.proof_ok).lower()}")
    if summary.root_ok is not None:
        print(f"root_ok: {str(summary.root_ok).lower()}")

    if summary.errors:
        print(f"\nerrors ({len(summary.errors)}):")
        for err in summary.errors:
            print(f"  ✗ {err}")


def print_summary_json(summary: VerifySummary) -> None:
    print(json.dumps(summary.to_dict(), indent=2))


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    proof_path = Path(args.proof_path)
    config: RuntimeConfig = args.runtime_config

    if not proof_path.exists():
        print(f"Error: Proof not found: {proof_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        expected_root_hash = parse_field_arg(args.root_hash) if args.root_hash else None
    except ValueError as e:
        print(f"Error: Invalid --root-hash: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        proof = MerkleProof.from_json(proof_path.read_bytes())
    except ProofFormatException as e:
        print_error(e, args.json)
        return EXIT_VERIFICATION_FAILED

    verifier = MerkleSumVerifier(config.hash_function())
    proof_ok = verifier.verify(proof)

    summary = build_summary(
        str(proof_path),
        proof,
        proof_ok,
        expected_root_hash=expected_root_hash,
        expected_root_sum=args.root_sum,
    )

    if args.json:
        print_summary_json(summary)
    else:
        print_summary_human(summary)

    if summary.all_ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS

    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
