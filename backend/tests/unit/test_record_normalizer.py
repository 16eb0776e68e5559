"""Unit tests for row normalization into DataEntry."""

from collections import OrderedDict
from datetime import date

import pytest

from chatalchemy.domain.entities import DataEntry, is_blank_row, normalize_row


def test_content_joins_non_empty_fields_in_row_order():
    row = OrderedDict([("month", "Jan"), ("sales", "100"), ("region", "North")])

    entry = normalize_row(row, "sales.csv")

    assert entry.content == "month: Jan | sales: 100 | region: North"
    assert entry.source == "sales.csv"
    assert list(entry.fields) == ["month", "sales", "region"]


def test_all_empty_row_has_empty_content_and_keeps_fields():
    row = {"a": "", "b": None, "c": ""}

    entry = normalize_row(row, "x.csv")

    assert entry.content == ""
    assert entry.fields == row


def test_empty_values_kept_in_fields_but_skipped_in_content():
    entry = normalize_row({"name": "Aspirin", "notes": "", "dose": None}, "drugs.csv")

    assert entry.content == "name: Aspirin"
    assert "notes" in entry.fields
    assert entry.fields["dose"] is None


def test_keys_are_whitespace_trimmed():
    entry = normalize_row({"  Drug Name ": "Metformin"}, "d.csv")

    assert list(entry.fields) == ["Drug Name"]
    assert entry.content == "Drug Name: Metformin"


def test_whitespace_value_is_kept_as_a_value():
    entry = normalize_row({"a": " ", "b": "x"}, "d.csv")

    assert entry.fields == {"a": " ", "b": "x"}
    assert entry.content == "a:   | b: x"


def test_malformed_row_normalizes_to_empty_entry():
    entry = normalize_row(["not", "a", "mapping"], "bad.csv")

    assert entry.fields == {}
    assert entry.content == ""
    assert entry.source == "bad.csv"


def test_numbers_render_without_trailing_zero():
    entry = normalize_row({"revenue": 50000.0, "ratio": 0.25, "count": 3}, "s.xlsx")

    assert entry.fields["revenue"] == 50000
    assert isinstance(entry.fields["revenue"], int)
    assert entry.content == "revenue: 50000 | ratio: 0.25 | count: 3"


def test_dates_and_booleans_become_strings():
    entry = normalize_row({"day": date(2024, 1, 31), "active": True}, "s.xlsx")

    assert entry.fields["day"] == "2024-01-31"
    assert entry.fields["active"] == "True"


def test_entry_is_immutable():
    entry = normalize_row({"a": "1"}, "s.csv")

    with pytest.raises(AttributeError):
        entry.content = "changed"  # type: ignore[misc]
    with pytest.raises(TypeError):
        entry.fields["a"] = "2"  # type: ignore[index]


def test_input_row_mutation_does_not_leak_into_entry():
    row = {"a": "1"}
    entry = normalize_row(row, "s.csv")

    row["a"] = "2"
    row["b"] = "3"

    assert entry.fields == {"a": "1"}
    assert entry.content == "a: 1"


def test_get_is_case_insensitive():
    entry = DataEntry(fields={"Month": "Jan"}, source="s")

    assert entry.get("month") == "Jan"
    assert entry.get("MONTH") == "Jan"
    assert entry.get("missing") is None


def test_visible_items_skip_internal_keys():
    entry = DataEntry(fields={"content": "x", "source": "y", "name": "z"}, source="s")

    assert entry.visible_keys() == ["name"]


@pytest.mark.parametrize(
    "row, expected",
    [
        ({"a": "", "b": None}, True),
        ({"a": "  ", "b": None}, False),
        ({"a": "", "b": 0}, False),
        ({"a": "x"}, False),
    ],
)
def test_is_blank_row(row, expected):
    assert is_blank_row(row) is expected
