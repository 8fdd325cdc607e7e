import pytest

from network_topology.core.input_validator import validate
from network_topology.utils.error_handler import InvalidSchemaError


def test_valid_record_returns_groupings():
    groupings = [{"IT": []}, {"OT": []}]

    result = validate([{"mac_data": groupings}])

    assert result.is_valid is True
    assert result.groupings == groupings
    assert result.error is None
    assert result.error_message is None
    assert result.suggestions == []


def test_extra_entries_after_the_first_are_ignored():
    result = validate([{"mac_data": []}, "anything", 42])
    assert result.is_valid is True
    assert result.groupings == []


@pytest.mark.parametrize(
    "raw, message, path",
    [
        ({"mac_data": []}, "Scan record must be a list", "$"),
        ("scan", "Scan record must be a list", "$"),
        (None, "Scan record must be a list", "$"),
        ([], "Scan record is empty", "$"),
        (["not an object"], "First scan entry must be an object", "$[0]"),
        ([{"devices": []}], "First scan entry has no mac_data field", "$[0].mac_data"),
        ([{"mac_data": {"IT": []}}], "mac_data must be a list of category groupings", "$[0].mac_data"),
    ],
)
def test_structural_failures_are_reported(raw, message, path):
    result = validate(raw)

    assert result.is_valid is False
    assert result.groupings is None
    assert isinstance(result.error, InvalidSchemaError)
    assert result.error_message == message
    assert result.error.path == path
    assert result.suggestions


def test_malformed_groupings_are_left_to_the_pipeline():
    result = validate([{"mac_data": ["not a grouping", {"IT": "not a list"}]}])
    assert result.is_valid is True


def test_error_string_includes_path():
    result = validate([{}])
    assert str(result.error) == "First scan entry has no mac_data field (at $[0].mac_data)"
