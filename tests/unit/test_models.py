"""Form schema model tests."""

import pytest
from pydantic import ValidationError

from eventforms.core.json import DocumentError
from eventforms.schema import (
    CheckboxField,
    ChoiceField,
    FieldKind,
    Form,
    FormType,
    NumberField,
    Step,
    TextualField,
    ValidationRule,
    ValueShape,
    parse_field,
)


# ============================================================================
# Fields
# ============================================================================

@pytest.mark.unit
def test_parse_field_selects_variant():
    """The type tag picks the kind-specific model."""
    assert isinstance(parse_field({"id": "a", "type": "email", "label": "Email"}), TextualField)
    assert isinstance(parse_field({"id": "b", "type": "number", "label": "Age"}), NumberField)
    assert isinstance(parse_field({"id": "c", "type": "radio", "label": "Track", "options": ["x"]}), ChoiceField)
    assert isinstance(parse_field({"id": "d", "type": "checkbox", "label": "Terms"}), CheckboxField)


@pytest.mark.unit
def test_field_defaults():
    field = parse_field({"id": "a", "type": "text", "label": "Name"})

    assert field.required is False
    assert field.placeholder is None
    assert field.validation is None
    assert field.kind is FieldKind.TEXT


@pytest.mark.unit
def test_unknown_type_rejected():
    with pytest.raises(ValidationError):
        parse_field({"id": "a", "type": "signature", "label": "Sign"})


@pytest.mark.unit
def test_empty_id_rejected():
    with pytest.raises(ValidationError):
        parse_field({"id": "", "type": "text", "label": "Name"})


@pytest.mark.unit
def test_options_forbidden_on_text():
    """Test that non-choice kinds refuse an options list."""
    with pytest.raises(ValidationError):
        parse_field({"id": "a", "type": "text", "label": "Name", "options": ["x"]})


@pytest.mark.unit
@pytest.mark.parametrize("options", [None, [], ["a", "a"], ["a", "  "]])
def test_choice_options_validation(options):
    """Select and radio need a non-empty list of distinct, non-blank options."""
    data = {"id": "a", "type": "select", "label": "Pick"}
    if options is not None:
        data["options"] = options

    with pytest.raises(ValidationError):
        parse_field(data)


@pytest.mark.unit
def test_checkbox_shapes():
    """An option-backed checkbox is array-valued; a bare checkbox is boolean."""
    multi = parse_field({"id": "a", "type": "checkbox", "label": "Topics", "options": ["x", "y"]})
    single = parse_field({"id": "b", "type": "checkbox", "label": "I agree"})
    emptied = parse_field({"id": "c", "type": "checkbox", "label": "I agree", "options": []})

    assert multi.value_shape is ValueShape.ARRAY
    assert multi.is_array_valued
    assert single.value_shape is ValueShape.SCALAR
    assert emptied.options is None
    assert not emptied.is_array_valued


@pytest.mark.unit
def test_fields_are_frozen():
    field = parse_field({"id": "a", "type": "text", "label": "Name"})

    with pytest.raises(ValidationError):
        field.label = "Other"


# ============================================================================
# Validation rules
# ============================================================================

@pytest.mark.unit
def test_rule_min_greater_than_max():
    with pytest.raises(ValidationError):
        ValidationRule(min=10, max=5)


@pytest.mark.unit
def test_rule_invalid_pattern():
    with pytest.raises(ValidationError):
        ValidationRule(pattern="([a-z")


@pytest.mark.unit
def test_rule_keys_checked_against_kind():
    """Pattern only applies to textual kinds; bounds not to choices."""
    parse_field({"id": "a", "type": "text", "label": "Code", "validation": {"pattern": "[A-Z]{3}"}})
    parse_field({"id": "b", "type": "number", "label": "Age", "validation": {"min": 0, "max": 120}})
    parse_field({"id": "c", "type": "date", "label": "Day", "validation": {"message": "Pick a day"}})

    with pytest.raises(ValidationError):
        parse_field({"id": "d", "type": "number", "label": "Age", "validation": {"pattern": "\\d+"}})
    with pytest.raises(ValidationError):
        parse_field({"id": "e", "type": "select", "label": "Pick", "options": ["x"], "validation": {"min": 1}})


@pytest.mark.unit
def test_negative_length_bound_rejected():
    with pytest.raises(ValidationError):
        parse_field({"id": "a", "type": "text", "label": "Name", "validation": {"min": -1}})

    field = parse_field({"id": "b", "type": "number", "label": "Delta", "validation": {"min": -10}})
    assert field.validation.min == -10


@pytest.mark.unit
def test_rule_unknown_key_rejected():
    with pytest.raises(ValidationError):
        parse_field({"id": "a", "type": "text", "label": "Name", "validation": {"minLength": 2}})


# ============================================================================
# Forms
# ============================================================================

@pytest.mark.unit
def test_form_defaults():
    form = Form(id="form_1", title="Feedback")

    assert form.form_type is FormType.REGISTRATION
    assert form.fields == []
    assert form.is_multi_step is False
    assert form.steps is None
    assert form.step_count == 0


@pytest.mark.unit
def test_form_title_required():
    with pytest.raises(ValidationError):
        Form(id="form_1", title="")


@pytest.mark.unit
def test_form_lookups(multi_step_form):
    assert multi_step_form.field_ids == ["name", "email", "interests", "notes"]
    assert multi_step_form.get_field("email").label == "Email"
    assert multi_step_form.get_field("missing") is None
    assert multi_step_form.field_index("interests") == 2
    assert multi_step_form.step_of("name") == 1
    assert multi_step_form.step_of("notes") is None


@pytest.mark.unit
def test_step_accepts_stored_key():
    """Steps are stored with a 'fields' key."""
    step = Step.model_validate({"title": "Contact", "fields": ["email"]})

    assert step.field_ids == ["email"]


@pytest.mark.unit
def test_from_document_ignores_unknown_keys(form_document):
    """Embedded event summaries and other server keys are ignored."""
    form = Form.from_document(form_document)

    assert form.id == "form_stored"
    assert form.steps[0].field_ids == ["name", "track"]
    assert form.created_at == "2024-05-01T10:00:00Z"
    assert not hasattr(form, "event")


@pytest.mark.unit
def test_to_document_uses_stored_keys(multi_step_form):
    document = multi_step_form.to_document()

    assert document["steps"][0] == {"title": "Contact", "fields": ["email"]}
    assert document["form_type"] == "registration"
    assert "placeholder" not in document["fields"][0]


@pytest.mark.unit
def test_json_documents(multi_step_form):
    """Test JSON encoding through the document codec."""
    text = multi_step_form.to_json()

    assert Form.from_json(text) == multi_step_form
    assert "\n" in multi_step_form.to_json(indent=True)


@pytest.mark.unit
def test_from_json_limits():
    with pytest.raises(DocumentError):
        Form.from_json('{"id": "f", "title": "' + "x" * 200 + '"}', max_size=100)
    with pytest.raises(DocumentError):
        Form.from_json("[]")
