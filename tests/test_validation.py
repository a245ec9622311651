"""Tests for row and schema validation."""

import pytest

from shared.validation import (
    StudentRow,
    build_batch,
    check_required_column,
    parse_roll_no,
    validate_row,
)


class TestParseRollNo:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("1", 1),
            (" 42 ", 42),
            ("-7", -7),
            ("+3", 3),
            ("007", 7),
            ("2147483647", 2147483647),
            ("\u0663", 3),
            ("\t12\r", 12),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_roll_no(value) == expected

    @pytest.mark.parametrize(
        "value",
        ["abc", "", " ", "1.5", "1_000", "1e3", "\u00a01", "1\u2003", "2147483648", "-2147483649", "1 2"],
    )
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_roll_no(value)


class TestValidateRow:
    def test_valid_row_trims_name(self):
        result = validate_row(["  Alice  ", " 1"])
        assert result.is_valid
        assert result.row == StudentRow(name="Alice", roll_no=1)

    def test_too_few_fields(self):
        result = validate_row(["Bob"])
        assert not result.is_valid
        assert "Skipping invalid row" in result.error_message

    def test_non_integer(self):
        result = validate_row(["Carol", "abc"])
        assert not result.is_valid
        assert "invalid number" in result.error_message

    def test_name_trims_only_control_and_space(self):
        assert validate_row(["\tAlice \x00", "1"]).row.name == "Alice"
        assert validate_row(["\u00a0Bob", "2"]).row.name == "\u00a0Bob"

    def test_extra_fields_ignored(self):
        assert validate_row(["Dan", "4", "extra"]).row == StudentRow("Dan", 4)


class TestBuildBatch:
    def test_skips_invalid_rows_and_logs_warnings(self, logger):
        rows = [["Alice", "1"], ["Bob"], ["Carol", "abc"], ["Dan", "4"]]
        batch = build_batch(rows, logger)
        assert batch == [StudentRow("Alice", 1), StudentRow("Dan", 4)]
        warnings = [r for r in logger.records if r["level"] == "WARNING"]
        assert [w["row_index"] for w in warnings] == [2, 3]

    def test_duplicate_names_kept_in_order(self, logger):
        batch = build_batch([["Dan", "1"], ["Dan", "2"]], logger)
        assert batch == [StudentRow("Dan", 1), StudentRow("Dan", 2)]
        assert logger.records == []


class TestCheckRequiredColumn:
    def test_column_present(self, store, logger):
        assert check_required_column(store, "Students", "roll_no", logger) is True
        assert store.schema_checks == [("Students", "roll_no")]

    def test_column_absent(self, make_store, logger):
        store = make_store(columns=("Name",))
        assert check_required_column(store, "Students", "roll_no", logger) is False

    def test_query_failure_fails_closed(self, make_store, logger):
        store = make_store(schema_error="Login timeout expired")
        assert check_required_column(store, "Students", "roll_no", logger) is False
        assert logger.levels() == ["ERROR"]
        assert "Login timeout expired" in logger.messages("ERROR")[0]
