"""Tests for drill import row normalization."""

import math

import pytest

from planner.imports.normalizer import (
    INVALID_MINUTES,
    MISSING_BOTH,
    MISSING_CATEGORY,
    MISSING_NAME,
    CandidateDrill,
    clean_text,
    fix_encoding,
    map_columns,
    normalize_column_name,
    normalize_row,
    normalize_rows,
    parse_minutes,
)
from planner.imports.schemas import RowError


class TestColumnMapping:
    """Tests for header recognition."""

    def test_standard_columns(self):
        """Test the template headers map to field names."""
        assert normalize_column_name("Category") == "category"
        assert normalize_column_name("Name") == "name"
        assert normalize_column_name("Minutes") == "minutes"
        assert normalize_column_name("Notes") == "notes"
        assert normalize_column_name("Media Links") == "media_links"

    def test_aliases_and_whitespace(self):
        """Test aliases, casing and padding."""
        assert normalize_column_name("  DRILL NAME ") == "name"
        assert normalize_column_name("mins") == "minutes"
        assert normalize_column_name("media_links") == "media_links"

    def test_unknown_column(self):
        """Test unrecognized headers are ignored."""
        assert normalize_column_name("Coach") is None
        assert normalize_column_name(None) is None

    def test_map_columns_first_non_empty_wins(self):
        """Test two headers for one field keep the first non-empty value."""
        mapped = map_columns({"Name": "", "Drill": "Cone Weave", "Extra": "x"})
        assert mapped == {"name": "Cone Weave"}


class TestCleaning:
    """Tests for cell cleanup helpers."""

    def test_fix_encoding_repairs_mojibake(self):
        """Test UTF-8 text decoded as Windows-1252 is repaired."""
        assert fix_encoding("Crossover â€” left hand") == "Crossover — left hand"
        assert fix_encoding("CafÃ©") == "Café"

    def test_fix_encoding_leaves_clean_text(self):
        """Test correct text passes through unchanged."""
        assert fix_encoding("Café — drill") == "Café — drill"

    def test_clean_text(self):
        """Test trimming and empty handling."""
        assert clean_text("  Zone Defense  ") == "Zone Defense"
        assert clean_text("   ") is None
        assert clean_text(None) is None
        assert clean_text(math.nan) is None

    def test_clean_text_integral_float(self):
        """Test spreadsheet floats like 3.0 read as "3"."""
        assert clean_text(3.0) == "3"


class TestParseMinutes:
    """Tests for minutes parsing."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, 0),
            ("", 0),
            ("  ", 0),
            (math.nan, 0),
            (10, 10),
            ("15", 15),
            (" 7 ", 7),
            (12.9, 12),
            ("2.5", 2),
            (0, 0),
        ],
    )
    def test_valid_minutes(self, value, expected):
        """Test accepted minutes values."""
        assert parse_minutes(value) == expected

    @pytest.mark.parametrize("value", ["abc", "-5", -1, math.inf, "inf", "nan", True, [10]])
    def test_invalid_minutes(self, value):
        """Test rejected minutes values."""
        with pytest.raises(ValueError, match=INVALID_MINUTES):
            parse_minutes(value)


class TestNormalizeRow:
    """Tests for normalize_row."""

    def test_valid_row(self):
        """Test a complete row becomes a candidate drill."""
        result = normalize_row(
            {
                "Category": " Ball Handling ",
                "Name": "Cone Weave",
                "Minutes": "10",
                "Notes": "Both hands",
                "Media Links": "",
            },
            1,
        )

        assert result == CandidateDrill(
            row=1,
            category_name="Ball Handling",
            name="Cone Weave",
            minutes=10,
            notes="Both hands",
            media_links=None,
        )

    def test_missing_minutes_defaults_to_zero(self):
        """Test a row without a minutes column is valid."""
        result = normalize_row({"category": "Shooting", "name": "Free Throws"}, 4)

        assert isinstance(result, CandidateDrill)
        assert result.minutes == 0

    @pytest.mark.parametrize(
        ("row", "message"),
        [
            ({"Category": "", "Name": ""}, MISSING_BOTH),
            ({"Category": "  ", "Name": "Drill X"}, MISSING_CATEGORY),
            ({"Category": "Shooting", "Name": None}, MISSING_NAME),
            ({"Name": "Drill X"}, MISSING_CATEGORY),
        ],
    )
    def test_required_fields(self, row, message):
        """Test missing category/name produce specific errors."""
        result = normalize_row(row, 3)

        assert result == RowError(row=3, error=message)

    def test_required_fields_checked_before_minutes(self):
        """Test a row missing its name reports the name, not the minutes."""
        result = normalize_row({"Category": "Shooting", "Name": "", "Minutes": "abc"}, 2)

        assert result.error == MISSING_NAME

    def test_invalid_minutes(self):
        """Test invalid minutes produce a row error."""
        result = normalize_row(
            {"Category": "Shooting", "Name": "Form Shooting", "Minutes": "abc"}, 4
        )

        assert result == RowError(row=4, error=INVALID_MINUTES)

    def test_normalize_rows_numbers_from_one(self):
        """Test rows are numbered in input order starting at 1."""
        results = normalize_rows(
            [
                {"Category": "A", "Name": "One"},
                {"Category": "", "Name": "Two"},
                {"Category": "B", "Name": "Three"},
            ]
        )

        assert [r.row for r in results] == [1, 2, 3]
        assert isinstance(results[1], RowError)
