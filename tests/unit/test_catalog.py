"""Field catalog tests."""

import pytest

from eventforms.schema.catalog import (
    BoundsKind,
    FieldCatalog,
    FieldKind,
    OptionsPolicy,
    ValueShape,
)


@pytest.mark.unit
def test_catalog_has_eleven_kinds():
    kinds = [spec.kind for spec in FieldCatalog.list_all()]

    assert len(kinds) == 11
    assert set(kinds) == set(FieldKind)


@pytest.mark.unit
@pytest.mark.parametrize("kind", ["text", "email", "phone", "textarea", "url"])
def test_textual_kinds(kind):
    """Textual kinds take length bounds and a pattern but no options."""
    spec = FieldCatalog.get(kind)

    assert spec.bounds is BoundsKind.LENGTH
    assert spec.pattern is True
    assert spec.options is OptionsPolicy.FORBIDDEN
    assert spec.rule_keys == {"min", "max", "pattern", "message"}


@pytest.mark.unit
def test_number_and_untyped_kinds():
    assert FieldCatalog.get("number").rule_keys == {"min", "max", "message"}
    assert FieldCatalog.get("date").rule_keys == {"message"}
    assert FieldCatalog.get("file").rule_keys == {"message"}


@pytest.mark.unit
def test_option_policies():
    assert FieldCatalog.requires_options("select")
    assert FieldCatalog.requires_options(FieldKind.RADIO)
    assert not FieldCatalog.requires_options("checkbox")
    assert FieldCatalog.accepts_options("checkbox")
    assert not FieldCatalog.accepts_options("text")


@pytest.mark.unit
def test_value_shape():
    """Only a checkbox with options is array-valued."""
    assert FieldCatalog.value_shape("checkbox", ["a", "b"]) is ValueShape.ARRAY
    assert FieldCatalog.value_shape("checkbox", None) is ValueShape.SCALAR
    assert FieldCatalog.value_shape("checkbox", []) is ValueShape.SCALAR
    assert FieldCatalog.value_shape("select", ["a"]) is ValueShape.SCALAR


@pytest.mark.unit
def test_unknown_kind():
    with pytest.raises(ValueError):
        FieldCatalog.get("signature")


@pytest.mark.unit
def test_sanitize_drops_unsupported_attributes():
    """Switching select -> text drops options and keeps applicable rules."""
    cleaned = FieldCatalog.sanitize(
        "text",
        {"id": "f", "type": "text", "label": "L", "options": ["a"], "validation": {"max": 10, "message": "m"}},
    )

    assert "options" not in cleaned
    assert cleaned["validation"] == {"max": 10, "message": "m"}


@pytest.mark.unit
def test_sanitize_removes_emptied_rule():
    cleaned = FieldCatalog.sanitize("date", {"id": "f", "validation": {"pattern": "x", "min": 1}})

    assert "validation" not in cleaned


@pytest.mark.unit
def test_sanitize_keeps_checkbox_options():
    cleaned = FieldCatalog.sanitize("checkbox", {"id": "f", "options": ["a", "b"]})

    assert cleaned["options"] == ["a", "b"]
