"""
Module 06 - CLI Build Command

Build a Merkle sum tree from a CSV file and print its commitment:
depth, entry and leaf counts, root hash and root sum.

Usage:
    sumtree build entries.csv [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from core.config.runtime import RuntimeConfig
from core.crypto.hashing import field_to_hex
from core.merkle.merkle_sum_tree import MerkleSumTree
from core.schemas.errors import SumTreeException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


@dataclass
class BuildSummary:
    """Summary of a built tree for CLI output."""
    entries_path: str = ""
    hash_algorithm: str = ""
    entry_count: int = 0
    leaf_count: int = 0
    depth: int = 0
    root_hash: str = ""
    root_sum: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_tree(entries_path: Path, config: RuntimeConfig) -> MerkleSumTree:
    """Build the tree for a CSV file using the configured hash and CSV layout."""
    logger.info(f"Building tree from: {entries_path}")
    return MerkleSumTree.from_csv(
        entries_path,
        hash_function=config.hash_function(),
        delimiter=config.source.delimiter,
        username_column=config.source.username_column,
        balance_column=config.source.balance_column,
    )


def build_summary(entries_path: str, tree: MerkleSumTree, config: RuntimeConfig) -> BuildSummary:
    return BuildSummary(
        entries_path=entries_path,
        hash_algorithm=config.tree.hash_algorithm,
        entry_count=len(tree.entries),
        leaf_count=tree.leaf_count,
        depth=tree.depth,
        root_hash=field_to_hex(tree.root.hash),
        root_sum=str(tree.root.sum),
    )


def print_error(error: SumTreeException, output_json: bool) -> None:
    """Report a tree error on stderr, or as JSON on stdout."""
    if output_json:
        print(json.dumps({"error": error.to_error_model().model_dump(mode="json")}, indent=2, default=str))
    else:
        print(f"Error: {error.message}", file=sys.stderr)
        for key, value in error.details.items():
            print(f"  {key}: {value}", file=sys.stderr)


def print_summary_human(summary: BuildSummary) -> None:
    print(f"entries: {summary.entries_path}")
    print(f"hash: {summary.hash_algorithm}")
    print(f"entry_count: {summary.entry_count}")
    print(f"leaf_count: {summary.leaf_count}")
    print(f"depth: {summary.depth}")
    print(f"root_hash: {summary.root_hash}")
    print(f"root_sum: {summary.root_sum}")


def print_summary_json(summary: BuildSummary) -> None:
    print(json.dumps(summary.to_dict(), indent=2))


def build_cmd(args: Namespace) -> int:
    """
    Execute the build command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    entries_path = Path(args.entries_path)
    config: RuntimeConfig = args.runtime_config

    if not entries_path.exists():
        print(f"Error: Entries file not found: {entries_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        tree = load_tree(entries_path, config)
    except SumTreeException as e:
        print_error(e, args.json)
        return EXIT_RUNTIME_ERROR

    summary = build_summary(str(entries_path), tree, config)
    if args.json:
        print_summary_json(summary)
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS
