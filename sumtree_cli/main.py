"""
Module 06 - CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m sumtree_cli build <entries.csv> [--json]
    python -m sumtree_cli prove <entries.csv> --index N [--out PATH] [--json]
    python -m sumtree_cli prove <entries.csv> --username U --balance B [--out PATH]
    python -m sumtree_cli verify <proof.json> [--root-hash H] [--root-sum S] [--json]
    python -m sumtree_cli config --init

Environment Variables:
    SUMTREE_HASH_ALGORITHM      Hash function name: sha256, blake2b (default: sha256)
    SUMTREE_DEFAULT_DEPTH       Depth for incremental trees (default: 20)
    SUMTREE_CSV_DELIMITER       CSV field delimiter (default: ",")
    SUMTREE_LOG_LEVEL           Log level (default: INFO)
    SUMTREE_LOG_FILE            Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.config.runtime import get_default_config_template
from sumtree_cli import __version__
from sumtree_cli.commands import build, prove, verify
from sumtree_cli.config import load_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="sumtree",
        description="Merkle sum tree CLI - Commit to balances, issue and verify inclusion proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./sumtree.yaml or ~/.config/sumtree/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build a tree from a CSV file and print its root",
        description="Build a Merkle sum tree over username,balance records.",
    )
    build_parser.add_argument(
        "entries_path",
        type=str,
        help="Path to CSV file with username and balance columns",
    )
    build_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    build_parser.set_defaults(func=build.build_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Create an inclusion proof for one entry",
        description="Select an entry by index, or by username and balance, and emit its proof.",
    )
    prove_parser.add_argument(
        "entries_path",
        type=str,
        help="Path to CSV file with username and balance columns",
    )
    prove_parser.add_argument(
        "--index", "-i",
        type=int,
        default=None,
        help="Leaf index of the entry",
    )
    prove_parser.add_argument(
        "--username", "-u",
        type=str,
        default=None,
        help="Username of the entry (requires --balance)",
    )
    prove_parser.add_argument(
        "--balance", "-b",
        type=int,
        default=None,
        help="Balance of the entry (requires --username)",
    )
    prove_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the proof JSON to this path instead of stdout",
    )
    prove_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify an inclusion proof offline",
        description="Recompute the root from a proof, optionally against a published root.",
    )
    verify_parser.add_argument(
        "proof_path",
        type=str,
        help="Path to proof JSON file",
    )
    verify_parser.add_argument(
        "--root-hash",
        type=str,
        default=None,
        help="Published root hash (0x-prefixed hex or decimal)",
    )
    verify_parser.add_argument(
        "--root-sum",
        type=int,
        default=None,
        help="Published root sum",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="sumtree.yaml",
        help="Path for config file (default: sumtree.yaml)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (SUMTREE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: sumtree config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.logging.level
    setup_logging(level=log_level, log_file=config.logging.file)

    # Attach config to args for commands to use
    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if log_level.upper() == "DEBUG":
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
