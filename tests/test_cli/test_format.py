"""Tests for CLI formatting utilities."""

from flowdiagram.cli._format import SCHEMA_VERSION, format_number, json_envelope, print_table


class TestFormatNumber:
    def test_integral(self):
        assert format_number(12.0) == "12"

    def test_digits(self):
        assert format_number(12.346, 2) == "12.35"

    def test_trailing_zeros(self):
        assert format_number(2.50, 2) == "2.5"

    def test_negative_zero(self):
        assert format_number(-0.01) == "0"


class TestJsonEnvelope:
    def test_shape(self):
        envelope = json_envelope("inspect", {"nodes": []})
        assert envelope["schema_version"] == SCHEMA_VERSION
        assert envelope["command"] == "inspect"
        assert envelope["data"] == {"nodes": []}
        assert "generated_at" in envelope


class TestPrintTable:
    def test_empty_rows(self):
        assert print_table(["Node"], []) == []

    def test_numeric_columns_right_aligned(self):
        lines = print_table(["Node", "Value"], [["A", "5"], ["Longer", "120"]])
        assert lines[0] == "  Node    Value"
        assert lines[2] == "  A           5"
        assert lines[3] == "  Longer    120"
