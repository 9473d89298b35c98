"""
Module 06 - Merkle Sum Tree CLI

Command-line interface for building trees, issuing proofs and verifying them.

Usage:
    python -m sumtree_cli build entries.csv
    python -m sumtree_cli prove entries.csv --index 3 --out proof.json
    python -m sumtree_cli verify proof.json --root-hash 0x... --root-sum 84359
    python -m sumtree_cli config --init
"""

__version__ = "0.1.0"
