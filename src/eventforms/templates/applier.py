"""Template application: replace a form's fields with a template's field set."""

from ..core.id import generate_field_ids
from ..core.logging_config import get_logger
from ..core.validate import TemplateApplicationError
from ..schema.integrity import enforce_integrity
from ..schema.models import Form, FormField
from .library import FormTemplate, TemplateLibrary

logger = get_logger(__name__)


def copy_fields(template: FormTemplate, fresh_ids: bool = True) -> list[FormField]:
    """
    Deep copy of a template's fields.

    With ``fresh_ids`` every copy gets a new ``field_<ULID>`` id; otherwise
    ids are kept verbatim.
    """
    copies = [f.model_copy(deep=True) for f in template.fields]
    if not fresh_ids:
        return copies
    ids = generate_field_ids(len(copies))
    return [f.model_copy(update={"id": new_id}) for f, new_id in zip(copies, ids)]


def apply_template(form: Form, template: FormTemplate, fresh_ids: bool = True) -> Form:
    """
    Replace every field of ``form`` with the template's fields.

    The form becomes single-step (any steps are discarded); title and
    description are kept. The input form is never modified.
    """
    updated = form.model_copy(
        update={
            "fields": copy_fields(template, fresh_ids),
            "is_multi_step": False,
            "steps": None,
        }
    )
    enforce_integrity(updated)

    logger.info(
        "template_applied",
        form_id=form.id,
        template_id=template.id,
        fields=len(template.fields),
        fresh_ids=fresh_ids,
        dropped_steps=form.step_count,
    )
    return updated


def apply_template_by_id(
    form: Form,
    template_id: str,
    library: TemplateLibrary,
    fresh_ids: bool = True,
) -> Form:
    """
    Look up ``template_id`` in ``library`` and apply it.

    Raises:
        TemplateApplicationError: If the template is unknown
    """
    template = library.get(template_id)
    if template is None:
        logger.warning("template_not_found", template_id=template_id)
        raise TemplateApplicationError(f"Template '{template_id}' not found", template_id=template_id)
    return apply_template(form, template, fresh_ids=fresh_ids)
