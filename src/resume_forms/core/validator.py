"""Form validation.

``validate_form`` maps the current values and the field list to an error
map. It is pure: no I/O, no hidden state, and the resulting mapping is
ordered the same way as the fields, so identical inputs give identical
output.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from resume_forms.core.exceptions import ConfigurationError
from resume_forms.core.fields import FieldPath, FieldSchema, UploadedFile
from resume_forms.core.rules import DEFAULT_RULES, RuleRegistry, check_file

ErrorMap = dict[FieldPath, str]


def is_blank(value: Any) -> bool:
    """True for None, whitespace-only strings and empty collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def validate_form(
    values: Mapping[str, Any],
    fields: Sequence[FieldSchema],
    rules: RuleRegistry | None = None,
) -> ErrorMap:
    """Compute the error map of a form.

    Args:
        values: Current form values keyed by top-level field id.
        fields: Ordered top-level field schemas.
        rules: Rule registry used for ``validation`` names.

    Returns:
        Mapping from field path to message; empty when the form is valid.

    Raises:
        ConfigurationError: If a field names an unknown validation rule.
    """
    rules = rules if rules is not None else DEFAULT_RULES
    errors: ErrorMap = {}
    for field in fields:
        _validate_field(field, values.get(field.id), FieldPath.of(field.id), rules, errors)
    return errors


def _validate_field(
    field: FieldSchema,
    value: Any,
    path: FieldPath,
    rules: RuleRegistry,
    errors: ErrorMap,
) -> None:
    if field.is_array:
        _validate_array(field, value, path, rules, errors)
        return

    if is_blank(value):
        if field.required:
            errors[path] = f"{field.label} is required"
        return

    if isinstance(value, UploadedFile):
        message = check_file(field, value)
        if message:
            errors[path] = message
        return

    if field.validation:
        rule = rules.get(field.validation)
        if rule is None:
            raise ConfigurationError(
                f"Unknown validation rule '{field.validation}' on field '{path}'"
            )
        message = rule.check(value)
        if message:
            errors[path] = message


def _validate_array(
    field: FieldSchema,
    value: Any,
    path: FieldPath,
    rules: RuleRegistry,
    errors: ErrorMap,
) -> None:
    items = value if isinstance(value, list) else []

    if field.required and not items:
        errors[path] = f"Please add at least one {field.label}"
    elif len(items) < field.min_items:
        errors[path] = f"At least {field.min_items} {field.label} required"

    template = field.template or {}
    for index, item in enumerate(items):
        record = item if isinstance(item, Mapping) else {}
        for key, sub in template.items():
            _validate_field(sub, record.get(key), path.child(index, key), rules, errors)


def is_form_valid(errors: Mapping[FieldPath, str]) -> bool:
    """A form can be submitted exactly when its error map is empty."""
    return len(errors) == 0


def errors_under(errors: Mapping[FieldPath, str], path: FieldPath) -> ErrorMap:
    """Errors of one field, including those of its array items."""
    return {p: message for p, message in errors.items() if p.is_within(path)}


def error_messages(errors: Mapping[FieldPath, str]) -> dict[str, str]:
    """Error map keyed by display path, e.g. ``{"education.0.degree": ...}``."""
    return {str(path): message for path, message in errors.items()}
