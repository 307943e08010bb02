"""
Plant CSV Parsing Tests
=======================
Header normalization, file checks, row validation, error reports and the
downloadable templates.
"""

from datetime import datetime, timezone

import pytest

from app.constants import CSV_HEADERS
from app.domain.bulk_import import FieldError, InvalidRow
from app.utils.plant_csv import (
    check_upload,
    generate_error_csv,
    generate_plant_csv_template,
    normalize_header,
    parse_plant_csv,
    template_filename,
    validate_row,
)

VALID = {
    "name": "Fern",
    "species_type": "Fern",
    "species_name": "Boston",
    "location": "Porch",
    "date_acquired": "2024-01-15",
}


def _row(**overrides):
    return {**VALID, **overrides}


def _errors(raw):
    parsed = validate_row(1, raw)
    assert not parsed.is_valid
    return {e.field: e.message for e in parsed.errors}


class TestHeaders:
    @pytest.mark.parametrize(
        "header, expected",
        [
            ("name", "name"),
            ("  Species Type ", "species_type"),
            ("Plant Name *", "name"),
            ("DATE", "date_acquired"),
            ("Light", "light_level"),
            ("price", "purchase_price"),
            ("last watered", "last_watered"),
        ],
    )
    def test_normalize_header(self, header, expected):
        assert normalize_header(header) == expected

    def test_aliased_headers_parse(self):
        content = b"Plant Name,Type,Species,Location,Date\nFern,Fern,Boston,Porch,2024-01-15"
        result = parse_plant_csv(content, "plants.csv")
        assert [r.is_valid for r in result.rows] == [True]
        assert result.rows[0].record.species_name == "Boston"


class TestFileChecks:
    def test_extension_required(self):
        assert check_upload("plants.xlsx", 10) == (
            "Invalid file type. Please upload a CSV file (.csv extension required)."
        )
        assert check_upload("", 10) is not None

    def test_size_limit(self):
        message = check_upload("plants.csv", 6 * 1024 * 1024)
        assert message == "File too large. Maximum size is 5MB. Your file is 6.00MB."

    def test_empty(self):
        assert check_upload("plants.csv", 0) == "File is empty. Please upload a valid CSV file."

    def test_acceptable(self):
        assert check_upload("plants.csv", 100) is None

    def test_parse_reports_file_problem(self):
        result = parse_plant_csv(b"", "plants.csv")
        assert not result.success
        assert result.error == "File is empty. Please upload a valid CSV file."

    def test_non_utf8_is_rejected(self):
        result = parse_plant_csv("name\nFougère".encode("utf-16"), "plants.csv")
        assert not result.success
        assert result.error.startswith("CSV parsing error")

    def test_byte_order_mark_is_ignored(self):
        content = ("\ufeff" + ",".join(VALID) + "\n" + ",".join(VALID.values())).encode("utf-8")
        result = parse_plant_csv(content, "plants.csv")
        assert result.rows[0].is_valid


class TestRowValidation:
    def test_valid_row(self):
        parsed = validate_row(3, _row())
        assert parsed.is_valid
        assert parsed.row == 3
        assert parsed.record.date_acquired == datetime(2024, 1, 15, tzinfo=timezone.utc)

    def test_required_fields(self):
        errors = _errors({"name": "  ", "date_acquired": ""})
        assert errors == {
            "name": "Plant name is required",
            "species_type": "Species type is required",
            "species_name": "Species name is required",
            "location": "Location is required",
            "date_acquired": "Date acquired is required",
        }

    def test_date_format(self):
        assert _errors(_row(date_acquired="01/15/2024")) == {
            "date_acquired": "Date must be in YYYY-MM-DD format (e.g., 2024-01-15)"
        }

    def test_impossible_date(self):
        assert _errors(_row(date_acquired="2024-02-30")) == {"date_acquired": "Invalid date"}

    def test_last_care_date(self):
        assert _errors(_row(last_watered="yesterday")) == {
            "last_watered": "Invalid date format (use YYYY-MM-DD)"
        }

    def test_unknown_choice_is_rejected(self):
        assert set(_errors(_row(light_level="sunny"))) == {"light_level"}

    def test_choices_are_case_insensitive(self):
        record = validate_row(1, _row(light_level=" Bright-Indirect ", growth_rate="FAST")).record
        assert record.light_level.value == "bright-indirect"
        assert record.growth_rate.value == "fast"

    @pytest.mark.parametrize(
        "raw, cents",
        [
            ("45", 4500),
            ("$45.00", 4500),
            ("$1,200.00", 120000),
            ("8.99", 899),
            ("free", None),
            ("", None),
        ],
    )
    def test_price_in_cents(self, raw, cents):
        assert validate_row(1, _row(purchase_price=raw)).record.purchase_price == cents

    @pytest.mark.parametrize(
        "raw, expected",
        [("yes", True), ("TRUE", True), ("1", True), ("no", False), ("0", False), ("maybe", None), ("", None)],
    )
    def test_drainage(self, raw, expected):
        assert validate_row(1, _row(has_drainage=raw)).record.has_drainage is expected

    def test_unparseable_numbers_become_empty(self):
        record = validate_row(1, _row(current_height_in="tall", min_temperature_f="55")).record
        assert record.current_height_in is None
        assert record.min_temperature_f == 55.0

    def test_plant_fields_omit_empty_values(self):
        fields = validate_row(1, _row(purchase_price="$3", notes="  ")).record.to_plant_fields()
        assert fields["purchase_price_cents"] == 300
        assert "notes" not in fields
        assert "last_watered_at" not in fields


class TestParse:
    def test_rows_are_numbered_and_blank_lines_skipped(self):
        content = b"name,species_type,species_name,location,date_acquired\nA,B,C,D,2024-01-01\n,,,,\n\nE,,G,H,2024-01-01\n"
        result = parse_plant_csv(content, "plants.csv")
        assert result.success
        assert [(r.row, r.is_valid) for r in result.rows] == [(1, True), (2, False)]

    def test_rows_beyond_limit_are_ignored(self):
        lines = ["name,species_type,species_name,location,date_acquired"]
        lines += [f"Plant {i},Fern,Boston,Porch,2024-01-01" for i in range(5)]
        result = parse_plant_csv("\n".join(lines).encode(), "plants.csv", max_rows=3)
        assert result.total_rows == 3
        assert result.rows[-1].record.name == "Plant 2"

    def test_short_rows_fill_missing_columns(self):
        result = parse_plant_csv(b"name,species_type,species_name,location,date_acquired\nA,B", "plants.csv")
        assert set(result.invalid_rows[0].data) == set(VALID)


class TestErrorCsv:
    def test_one_line_per_field_error(self):
        rows = [
            InvalidRow(
                row=4,
                data={"name": "Fern, Boston", "species_type": "Fern"},
                errors=(FieldError("location", "Location is required"), FieldError("general", "Update failed")),
            )
        ]
        lines = generate_error_csv(rows).splitlines()
        assert lines[0] == ",".join(("Row", "Error Field", "Error Message", *CSV_HEADERS))
        assert lines[1].startswith('4,location,Location is required,"Fern, Boston",Fern,')
        assert lines[2].startswith("4,general,Update failed,")
        assert len(lines) == 3


class TestTemplate:
    def test_full_template(self):
        lines = generate_plant_csv_template().splitlines()
        assert len(lines) == 3
        assert lines[0].startswith("Plant Name *,")
        assert lines[1] == ",".join(CSV_HEADERS)

    def test_simple_template_parses(self):
        template = generate_plant_csv_template(simple=True)
        assert len(template.splitlines()) == 2
        result = parse_plant_csv(template.encode(), "template.csv")
        assert [r.is_valid for r in result.rows] == [True]

    def test_filename_is_dated(self):
        name = template_filename()
        assert name.startswith("plant-upload-template-")
        assert name.endswith(".csv")
