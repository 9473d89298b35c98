"""
Module 03 - Merkle Sum Tree Constants

MAX_DEPTH bounds both batch and incremental trees: a tree of depth d
holds at most 2**d leaves.
"""

MAX_DEPTH: int = 32

MIN_DEPTH: int = 1

# Number of children per middle node
ARITY: int = 2

# Usernames are packed into one field element; 31 bytes stays below the
# BN254 scalar field modulus.
MAX_USERNAME_BYTES: int = 31
