"""
Module 06 - CLI Prove Command

Issue an inclusion proof for one entry of a CSV-backed tree.
The entry is selected by index, or by username and balance.

Usage:
    sumtree prove entries.csv --index 3 [--out proof.json]
    sumtree prove entries.csv --username alice --balance 50 [--out proof.json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from core.config.runtime import RuntimeConfig
from core.crypto.hashing import field_to_hex
from core.merkle.lookup import NOT_FOUND
from core.schemas.errors import SumTreeException
from sumtree_cli.commands.build import load_tree, print_error


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def prove_cmd(args: Namespace) -> int:
    """
    Execute the prove command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    entries_path = Path(args.entries_path)
    config: RuntimeConfig = args.runtime_config

    if args.index is None and (args.username is None or args.balance is None):
        print("Error: pass --index, or both --username and --balance", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if not entries_path.exists():
        print(f"Error: Entries file not found: {entries_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        tree = load_tree(entries_path, config)

        index = args.index
        if index is None:
            index = tree.index_of(args.username, args.balance)
            if index == NOT_FOUND:
                print(
                    f"Error: No entry for username={args.username!r} balance={args.balance}",
                    file=sys.stderr,
                )
                return EXIT_RUNTIME_ERROR

        proof = tree.create_proof(index)
    except SumTreeException as e:
        print_error(e, args.json)
        return EXIT_RUNTIME_ERROR

    if args.out:
        out_path = Path(args.out)
        out_path.write_text(proof.to_json(), encoding="utf-8")
        logger.info(f"Wrote proof for leaf {index} to {out_path}")
        summary = {
            "out": str(out_path),
            "leaf_index": index,
            "root_hash": field_to_hex(proof.root_hash),
            "root_sum": str(proof.root_sum),
        }
        if args.json:
            print(json.dumps(summary, indent=2))
        else:
            for key, value in summary.items():
                print(f"{key}: {value}")
    else:
        print(json.dumps(proof.to_dict(), indent=2, sort_keys=True))

    return EXIT_SUCCESS
