"""
Module 04 - Entry Sources
CSV ingestion of (username, balance) records.

Owner: Protocol/Crypto Engineer
Module ID: M04

Expected layout (header row required, column names configurable):

    username,balance
    gAdsIaKy,7534
    ...

Rules:
- Rows are kept in file order; order is part of the tree commitment
- A balance that is not a base-10 integer is a malformed record
- A negative balance is rejected, never clamped
- Usernames must be non-empty and at most 31 UTF-8 bytes
"""
from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Iterable, Mapping

from core.merkle.entry import Entry
from core.schemas.errors import ConstructionException, MalformedRecordException


logger = logging.getLogger(__name__)


def parse_balance(raw: object, row: int | None = None) -> int:
    """
    Parse a balance field.

    Raises:
        MalformedRecordException: If the field is not a base-10 integer
        ConstructionException: If the balance is negative
    """
    if isinstance(raw, bool):
        raise MalformedRecordException("Balance must be a number", row=row, details={"balance": raw})
    if isinstance(raw, int):
        balance = raw
    else:
        text = str(raw).strip() if raw is not None else ""
        try:
            balance = int(text, 10)
        except ValueError:
            raise MalformedRecordException(
                "Balance must be a number",
                row=row,
                details={"balance": text},
            ) from None

    if balance < 0:
        raise ConstructionException(
            message="entry balance can't be negative",
            details={"row": row, "balance": balance},
        )
    return balance


def parse_entry_rows(
    rows: Iterable[Mapping[str, object]],
    username_column: str = "username",
    balance_column: str = "balance",
) -> list[Entry]:
    """
    Convert mapping rows into entries.

    Args:
        rows: Mappings holding at least the username and balance columns
        username_column: Key of the username field
        balance_column: Key of the balance field

    Returns:
        Entries in row order

    Raises:
        MalformedRecordException: On a missing column, a bad username or
            a non-numeric balance
        ConstructionException: On a negative balance
    """
    entries: list[Entry] = []
    for row_number, row in enumerate(rows, start=1):
        if username_column not in row or balance_column not in row:
            raise MalformedRecordException(
                f"Record is missing '{username_column}' or '{balance_column}'",
                row=row_number,
                details={"columns": sorted(str(k) for k in row.keys())},
            )

        username = row[username_column]
        username = username.strip() if isinstance(username, str) else username
        try:
            balance = parse_balance(row[balance_column], row=row_number)
            entries.append(Entry.from_username(username, balance))
        except MalformedRecordException as e:
            e.details.setdefault("row", row_number)
            logger.warning("Rejected record %d: %s", row_number, e.message)
            raise
        except ConstructionException as e:
            logger.warning("Rejected record %d: %s", row_number, e.message)
            raise

    return entries


def parse_entries_csv(
    path: str | Path,
    delimiter: str = ",",
    username_column: str = "username",
    balance_column: str = "balance",
) -> list[Entry]:
    """
    Read entries from a CSV file.

    Raises:
        FileNotFoundError: If the file does not exist
        MalformedRecordException: If the header or a record is malformed
        ConstructionException: On a negative balance
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Entries file not found: {path}")

    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f, delimiter=delimiter)
        if reader.fieldnames is None:
            raise MalformedRecordException(
                "Entries file has no header row",
                details={"path": str(path)},
            )
        fieldnames = [name.strip() for name in reader.fieldnames]
        reader.fieldnames = fieldnames
        if username_column not in fieldnames or balance_column not in fieldnames:
            raise MalformedRecordException(
                f"Header must contain '{username_column}' and '{balance_column}'",
                details={"path": str(path), "header": fieldnames},
            )
        entries = parse_entry_rows(
            reader,
            username_column=username_column,
            balance_column=balance_column,
        )

    logger.info("Loaded %d entries from %s", len(entries), path)
    return entries


__all__ = [
    "parse_balance",
    "parse_entry_rows",
    "parse_entries_csv",
]
