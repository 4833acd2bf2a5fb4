"""Tests for the Record model."""

import pytest

from orgdedupe.models import RECORD_FIELDS, Record


@pytest.mark.unit
def test_non_string_values_coerced_to_empty() -> None:
    """None and non-string values in text fields become empty strings."""
    record = Record(center=None, email=42, locality="Madrid")  # type: ignore[arg-type]

    assert record.center == ""
    assert record.email == ""
    assert record.locality == "Madrid"


@pytest.mark.unit
def test_from_dict_cleans_fields_and_ignores_unknown_keys() -> None:
    """from_dict cleans every data field and drops unknown columns."""
    record = Record.from_dict(
        {"center": "  IES\u00a0 Lope\u200b de Vega ", "email": None, "extra": "x"},
        source="sheet1",
        original_index=7,
    )

    assert record.center == "IES Lope de Vega"
    assert record.email == ""
    assert record.source == "sheet1"
    assert record.original_index == 7
    assert not hasattr(record, "extra")


@pytest.mark.unit
def test_from_dict_reads_original_index_from_row() -> None:
    """original_index is taken from the row when not overridden."""
    assert Record.from_dict({"original_index": "12"}).original_index == 12
    assert Record.from_dict({"original_index": "n/a"}).original_index == -1
    assert Record.from_dict({}).original_index == -1


@pytest.mark.unit
def test_records_are_immutable() -> None:
    """Records cannot be mutated in place."""
    record = Record(center="A")

    with pytest.raises(AttributeError):
        record.center = "B"  # type: ignore[misc]

    updated = record.replace(center="B")
    assert record.center == "A"
    assert updated.center == "B"


@pytest.mark.unit
def test_to_dict_field_order_and_review_fields() -> None:
    """to_dict lists data fields first and review fields only on request."""
    record = Record(center="A", duplicate_flag="DUPLICATE_GROUP_1", duplicate_count=2)

    plain = record.to_dict()
    assert list(plain)[: len(RECORD_FIELDS)] == list(RECORD_FIELDS)
    assert "duplicate_flag" not in plain

    full = record.to_dict(include_review=True)
    assert full["duplicate_flag"] == "DUPLICATE_GROUP_1"
    assert full["duplicate_count"] == 2


@pytest.mark.unit
def test_non_empty_fields_ignores_whitespace() -> None:
    """Whitespace-only values do not count as populated."""
    record = Record(center="A", email="   ", locality="Madrid")

    assert record.non_empty_fields() == 2
    assert record.is_populated("center")
    assert not record.is_populated("email")


@pytest.mark.unit
def test_get_rejects_unknown_field() -> None:
    """get() only exposes data fields."""
    with pytest.raises(KeyError):
        Record().get("source")
