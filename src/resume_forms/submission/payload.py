"""Conversion between form values and the resume service's data shape."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

from resume_forms.core.fields import FieldKind, FieldSchema
from resume_forms.core.templates import FormTemplate

_ISO_DATE = re.compile(r"^(\d{4}-\d{2}-\d{2})T")


def split_list(text: str, separator: str) -> list[str]:
    """Split delimited text, trimming entries and dropping blank ones.

    Example:
        ```python
        split_list("Go, Rust, ,C++", ",")  # ["Go", "Rust", "C++"]
        ```
    """
    return [part.strip() for part in text.split(separator) if part.strip()]


def build_payload(values: Mapping[str, Any], fields: Sequence[FieldSchema]) -> dict[str, Any]:
    """Turn form values into a generation/edit request body.

    Text fields that declare a ``separator`` become lists, including
    sub-fields of array items. Every other value passes through unchanged,
    as do keys with no field.

    Args:
        values: Current form values.
        fields: Ordered top-level fields.

    Returns:
        New dictionary; ``values`` is not modified.
    """
    payload = dict(values)
    for field in fields:
        if field.id in payload:
            payload[field.id] = _payload_value(field, payload[field.id])
    return payload


def _payload_value(field: FieldSchema, value: Any) -> Any:
    if field.is_array:
        template = field.template or {}
        items = value if isinstance(value, list) else []
        processed = []
        for item in items:
            record = dict(item) if isinstance(item, Mapping) else {}
            for key, sub in template.items():
                if key in record:
                    record[key] = _payload_value(sub, record[key])
            processed.append(record)
        return processed
    if field.separator:
        if isinstance(value, str):
            return split_list(value, field.separator)
        if value is None:
            return []
    return value


def prefill_values(document: Mapping[str, Any], template: FormTemplate) -> dict[str, Any]:
    """Map a stored document onto the values of a form.

    ``personalInfo`` entries are lifted to top-level keys (top-level keys
    win), ``experience`` is read as ``workExperience`` and ISO timestamps
    in date fields are cut to the date. List values are joined back into
    text by ``FormState.load``.

    Args:
        document: Raw document data from the service.
        template: The form the values are meant for.

    Returns:
        Values suitable for ``FormState.load``.
    """
    values = dict(document)
    personal = values.get("personalInfo")
    if isinstance(personal, Mapping):
        for key, value in personal.items():
            values.setdefault(key, value)
    if "workExperience" not in values and "experience" in values:
        values["workExperience"] = values["experience"]

    for field in template.fields:
        if field.id in values:
            values[field.id] = _prefill_value(field, values[field.id])
    return values


def _prefill_value(field: FieldSchema, value: Any) -> Any:
    if field.is_array and isinstance(value, list):
        template = field.template or {}
        items = []
        for item in value:
            record = dict(item) if isinstance(item, Mapping) else {}
            for key, sub in template.items():
                if key in record:
                    record[key] = _prefill_value(sub, record[key])
            items.append(record)
        return items
    if field.kind is FieldKind.DATE and isinstance(value, str):
        match = _ISO_DATE.match(value)
        if match:
            return match.group(1)
    return value
