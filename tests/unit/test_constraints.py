"""Host-control constraint emulation tests."""

import pytest

from eventforms.runtime import check_constraints, is_constrained
from eventforms.schema import parse_field


def _field(kind, validation=None, **extra):
    data = {"id": "f", "type": kind, "label": "F", **extra}
    if validation is not None:
        data["validation"] = validation
    return parse_field(data)


@pytest.mark.unit
def test_length_bounds():
    field = _field("text", {"min": 2, "max": 4})

    assert check_constraints(field, "abc") == []
    assert check_constraints(field, "a") == ["Must be at least 2 characters"]
    assert check_constraints(field, "abcde") == ["Must be at most 4 characters"]


@pytest.mark.unit
def test_numeric_range():
    field = _field("number", {"min": 18, "max": 99})

    assert check_constraints(field, 30) == []
    assert check_constraints(field, "42") == []
    assert check_constraints(field, 12) == ["Value must be at least 18"]
    assert check_constraints(field, 100.5) == ["Value must be at most 99"]


@pytest.mark.unit
def test_number_must_parse():
    field = _field("number")

    assert check_constraints(field, "twelve") == ["Please enter a number"]
    assert check_constraints(field, True) == ["Please enter a number"]


@pytest.mark.unit
def test_pattern_must_match_whole_value():
    field = _field("text", {"pattern": "[A-Z]{3}"})

    assert check_constraints(field, "ABC") == []
    assert check_constraints(field, "ABCD") == ["Please match the requested format"]


@pytest.mark.unit
def test_custom_message_replaces_defaults():
    field = _field("phone", {"pattern": "\\+?[0-9 ]+", "max": 5, "message": "Enter a valid phone number"})

    assert check_constraints(field, "+1 555 0000") == ["Enter a valid phone number"]
    assert check_constraints(field, "123") == []


@pytest.mark.unit
@pytest.mark.parametrize("value", [None, "", []])
def test_empty_values_skipped(value):
    assert check_constraints(_field("text", {"min": 3}), value) == []


@pytest.mark.unit
def test_unconstrained_kinds():
    assert check_constraints(_field("select", options=["a"]), "anything") == []
    assert check_constraints(_field("date"), "2024-01-01") == []


@pytest.mark.unit
def test_is_constrained():
    assert is_constrained(_field("text", {"max": 3}))
    assert not is_constrained(_field("text", {"message": "only a message"}))
    assert not is_constrained(_field("text"))
    assert is_constrained(_field("number"))


@pytest.mark.unit
@pytest.mark.parametrize("value", ["nan", "inf", "-Infinity", "1e400", float("nan")])
def test_non_finite_numbers_rejected(value):
    field = _field("number", {"min": 1, "max": 5})

    assert check_constraints(field, value) == ["Please enter a number"]
