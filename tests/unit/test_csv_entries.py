"""
Module 04 - Entry Source Unit Tests
Tests for core/sources/csv_entries.py
"""
import logging

import pytest

from fixtures import SAMPLE_RECORDS, make_entries, write_entries_csv

from core.merkle.entry import Entry
from core.sources.csv_entries import parse_balance, parse_entries_csv, parse_entry_rows
from core.schemas.errors import ConstructionException, MalformedRecordException


class TestParseBalance:
    """Tests for parse_balance()."""

    @pytest.mark.parametrize("raw,expected", [("42", 42), (" 7 ", 7), ("0", 0), (15, 15)])
    def test_valid(self, raw, expected):
        assert parse_balance(raw) == expected

    @pytest.mark.parametrize("raw", ["abc", "1.5", "", None, True, "1e3"])
    def test_not_a_number(self, raw):
        with pytest.raises(MalformedRecordException, match="Balance must be a number"):
            parse_balance(raw, row=3)

    def test_row_in_details(self):
        with pytest.raises(MalformedRecordException) as exc_info:
            parse_balance("x", row=3)

        assert exc_info.value.details["row"] == 3

    def test_negative(self):
        with pytest.raises(ConstructionException, match="entry balance can't be negative") as exc_info:
            parse_balance("-10", row=2)

        assert not isinstance(exc_info.value, MalformedRecordException)
        assert exc_info.value.details["row"] == 2


class TestParseEntryRows:
    """Tests for parse_entry_rows()."""

    def test_rows_to_entries(self):
        rows = [{"username": "alice", "balance": "50"}, {"username": "bob", "balance": 30}]

        entries = parse_entry_rows(rows)

        assert entries == [Entry.from_username("alice", 50), Entry.from_username("bob", 30)]
        assert entries[0].username == "alice"

    def test_username_stripped(self):
        entries = parse_entry_rows([{"username": "  alice ", "balance": "1"}])

        assert entries[0].username == "alice"

    def test_custom_columns(self):
        entries = parse_entry_rows(
            [{"user": "carol", "amount": "9"}],
            username_column="user",
            balance_column="amount",
        )

        assert entries[0].sum == 9

    def test_missing_column(self):
        with pytest.raises(MalformedRecordException, match="missing") as exc_info:
            parse_entry_rows([{"username": "alice"}])

        assert exc_info.value.details["row"] == 1

    def test_empty_username(self):
        with pytest.raises(MalformedRecordException) as exc_info:
            parse_entry_rows([{"username": "a", "balance": "1"}, {"username": "", "balance": "1"}])

        assert exc_info.value.details["row"] == 2

    def test_rejected_row_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="core.sources.csv_entries"):
            with pytest.raises(ConstructionException):
                parse_entry_rows([{"username": "a", "balance": "-1"}])

        assert "Rejected record 1" in caplog.text

    def test_empty_input(self):
        assert parse_entry_rows([]) == []


class TestParseEntriesCsv:
    """Tests for parse_entries_csv()."""

    def test_sample_file(self, entries_csv):
        entries = parse_entries_csv(entries_csv)

        assert entries == make_entries()
        assert [e.username for e in entries] == [u for u, _ in SAMPLE_RECORDS]

    def test_delimiter(self, tmp_path):
        path = write_entries_csv(tmp_path / "e.csv", [("alice", 50)], delimiter=";")

        assert parse_entries_csv(path, delimiter=";")[0].sum == 50

    def test_custom_header(self, tmp_path):
        path = write_entries_csv(tmp_path / "e.csv", [("alice", 50)], header=("user", "amount"))

        entries = parse_entries_csv(path, username_column="user", balance_column="amount")

        assert entries[0].username == "alice"

    def test_header_whitespace(self, tmp_path):
        path = tmp_path / "e.csv"
        path.write_text("username , balance\nalice,5\n", encoding="utf-8")

        assert parse_entries_csv(path)[0].sum == 5

    def test_wrong_header(self, tmp_path):
        path = write_entries_csv(tmp_path / "e.csv", [("alice", 50)], header=("name", "balance"))

        with pytest.raises(MalformedRecordException, match="Header must contain"):
            parse_entries_csv(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")

        with pytest.raises(MalformedRecordException, match="no header"):
            parse_entries_csv(path)

    def test_header_only(self, tmp_path):
        path = write_entries_csv(tmp_path / "e.csv", [])

        assert parse_entries_csv(path) == []

    def test_non_numeric_balance(self, tmp_path):
        path = write_entries_csv(tmp_path / "e.csv", [("alice", 50), ("bob", "lots")])

        with pytest.raises(MalformedRecordException, match="Balance must be a number") as exc_info:
            parse_entries_csv(path)

        assert exc_info.value.details["row"] == 2

    def test_negative_balance(self, tmp_path):
        path = write_entries_csv(tmp_path / "e.csv", [("alice", -50)])

        with pytest.raises(ConstructionException, match="entry balance can't be negative"):
            parse_entries_csv(path)

    def test_short_row(self, tmp_path):
        path = tmp_path / "e.csv"
        path.write_text("username,balance\nalice\n", encoding="utf-8")

        with pytest.raises(MalformedRecordException):
            parse_entries_csv(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            parse_entries_csv(tmp_path / "missing.csv")
