"""
Common test fixtures shared by all modules.

Provides factory functions for Merkle sum tree test data:
- The 16-record sample ledger (sums total 84359)
- Entry lists and trees built from it
- A cheap order-sensitive hash for tests that do not need SHA-256
- CSV files of records
"""

from pathlib import Path
from typing import Optional, Sequence

from core.crypto.hashing import HashFunction
from core.merkle.entry import Entry
from core.merkle.merkle_sum_tree import MerkleSumTree


# =============================================================================
# Sample Ledger
# =============================================================================

SAMPLE_RECORDS: list[tuple[str, int]] = [
    ("gAdsIaKy", 7534),
    ("SbuqOZGg", 2129),
    ("obGWlsDd", 6843),
    ("bBTdJWqw", 4201),
    ("Wxrqvbkz", 9987),
    ("hqPwdnTi", 3056),
    ("ecmHRaTe", 5712),
    ("UrzgNBpX", 812),
    ("mJKLSGxv", 7419),
    ("oTRGzxwP", 6338),
    ("VkRhJnYy", 1475),
    ("mgcRujiW", 8890),
    ("QAgerPDX", 2644),
    ("CdyJwHbm", 5103),
    ("tiQJWpVC", 7981),
    ("LmnEqcCs", 4235),
]

SAMPLE_TOTAL: int = 84359


# =============================================================================
# Hash Functions
# =============================================================================

_TOY_MODULUS = (1 << 61) - 1


def toy_hash(elements: Sequence[int]) -> int:
    """
    Order-sensitive polynomial hash.

    Not collision resistant; only for tests exercising tree shape.
    """
    acc = 7
    for element in elements:
        acc = (acc * 1_000_003 + element) % _TOY_MODULUS
    return acc


# =============================================================================
# Entry / Tree Factories
# =============================================================================

def make_entries(
    records: Optional[Sequence[tuple[str, int]]] = None,
) -> list[Entry]:
    """
    Create entries from (username, balance) records.

    Args:
        records: Records to convert (default: SAMPLE_RECORDS)

    Returns:
        Entries in record order
    """
    if records is None:
        records = SAMPLE_RECORDS
    return [Entry.from_username(username, balance) for username, balance in records]


def make_tree(
    records: Optional[Sequence[tuple[str, int]]] = None,
    hash_function: Optional[HashFunction] = None,
) -> MerkleSumTree:
    """Create a MerkleSumTree over records (default: SAMPLE_RECORDS)."""
    return MerkleSumTree(make_entries(records), hash_function=hash_function)


def make_sized_records(count: int, balance: int = 10) -> list[tuple[str, int]]:
    """Create count records user0..userN with balances balance, balance+1, ..."""
    return [(f"user{i}", balance + i) for i in range(count)]


# =============================================================================
# CSV Files
# =============================================================================

def write_entries_csv(
    path: Path,
    records: Optional[Sequence[tuple[str, object]]] = None,
    delimiter: str = ",",
    header: tuple[str, str] = ("username", "balance"),
) -> Path:
    """
    Write records to a CSV file with a header row.

    Values are written verbatim, so malformed balances can be used.
    """
    if records is None:
        records = SAMPLE_RECORDS
    lines = [delimiter.join(header)]
    lines.extend(f"{username}{delimiter}{balance}" for username, balance in records)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
