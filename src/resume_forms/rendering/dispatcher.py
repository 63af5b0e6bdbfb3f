"""Field dispatcher: turns a schema node and its value into a widget.

``render_field`` selects one handler per ``FieldKind``. The array handler
derives a schema for every sub-field of every item, addressed by the
runtime path ``{arrayId}.{index}.{subKey}``, and calls ``render_field``
again, so templates may nest to any depth. Handlers keep no state between
calls.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from resume_forms.core.config import DEFAULT_MAX_FILE_SIZE
from resume_forms.core.fields import FieldKind, FieldPath, FieldSchema, UploadedFile
from resume_forms.core.rules import format_size_limit
from resume_forms.rendering.widgets import (
    SELECT_PLACEHOLDER,
    FileUpload,
    GroupItem,
    RepeatableGroup,
    Select,
    TextArea,
    TextInput,
    Widget,
)

if TYPE_CHECKING:
    from resume_forms.core.state import FormState
    from resume_forms.core.templates import FormTemplate

DEFAULT_TEXTAREA_ROWS = 3


@dataclass(frozen=True)
class FormCallbacks:
    """Mutation callbacks a rendered widget tree routes user actions to."""

    set_scalar: Callable[[FieldPath, Any], Any]
    add_item: Callable[[FieldPath], Any]
    remove_item: Callable[[FieldPath, int], Any]
    set_item_field: Callable[[FieldPath, int, str, Any], Any]
    notify: Callable[[str], Any] | None = None

    @classmethod
    def for_state(
        cls,
        state: FormState,
        notify: Callable[[str], Any] | None = None,
    ) -> FormCallbacks:
        """Callbacks that apply every action to a FormState."""
        return cls(
            set_scalar=state.set_value,
            add_item=state.add_item,
            remove_item=state.remove_item,
            set_item_field=lambda path, index, key, value: state.set_value(
                path.child(index, key), value
            ),
            notify=notify,
        )


Handler = Callable[
    [FieldSchema, Any, Mapping[FieldPath, str], FormCallbacks, FieldPath], Widget
]


def render_field(
    field: FieldSchema,
    value: Any,
    errors: Mapping[FieldPath, str],
    callbacks: FormCallbacks,
    path: FieldPath | None = None,
) -> Widget:
    """Render one field.

    Args:
        field: Schema of the field.
        value: Current value.
        errors: Error map of the whole form.
        callbacks: Where user actions are routed.
        path: Runtime path of the field; defaults to its id.

    Returns:
        The widget for the field's kind.
    """
    path = path or FieldPath.of(field.id)
    return _HANDLERS[field.kind](field, value, errors, callbacks, path)


def render_form(
    template: FormTemplate,
    values: Mapping[str, Any],
    errors: Mapping[FieldPath, str],
    callbacks: FormCallbacks,
) -> list[Widget]:
    """Render every top-level field of a form, in order."""
    return [
        render_field(field, values.get(field.id), errors, callbacks)
        for field in template.fields
    ]


def _scalar_text(value: Any) -> Any:
    return "" if value is None else value


def _setter(callbacks: FormCallbacks, path: FieldPath) -> Callable[[Any], None]:
    def change(value: Any) -> None:
        callbacks.set_scalar(path, value)

    return change


def _render_input(
    field: FieldSchema,
    value: Any,
    errors: Mapping[FieldPath, str],
    callbacks: FormCallbacks,
    path: FieldPath,
) -> Widget:
    return TextInput(
        path=path,
        kind=field.kind,
        label=field.label,
        required=field.required,
        description=field.description,
        error=errors.get(path),
        value=_scalar_text(value),
        placeholder=field.placeholder,
        input_type=field.kind.value,
        on_change=_setter(callbacks, path),
    )


def _render_textarea(
    field: FieldSchema,
    value: Any,
    errors: Mapping[FieldPath, str],
    callbacks: FormCallbacks,
    path: FieldPath,
) -> Widget:
    return TextArea(
        path=path,
        kind=field.kind,
        label=field.label,
        required=field.required,
        description=field.description,
        error=errors.get(path),
        value=_scalar_text(value),
        placeholder=field.placeholder,
        rows=field.rows or DEFAULT_TEXTAREA_ROWS,
        on_change=_setter(callbacks, path),
    )


def _render_select(
    field: FieldSchema,
    value: Any,
    errors: Mapping[FieldPath, str],
    callbacks: FormCallbacks,
    path: FieldPath,
) -> Widget:
    return Select(
        path=path,
        kind=field.kind,
        label=field.label,
        required=field.required,
        description=field.description,
        error=errors.get(path),
        value=_scalar_text(value),
        placeholder=field.placeholder,
        options=[SELECT_PLACEHOLDER, *field.options],
        on_change=_setter(callbacks, path),
    )


def _file_hint(field: FieldSchema) -> str:
    if not field.accept:
        return "PDF up to 10MB"
    limit = format_size_limit(field.max_size or DEFAULT_MAX_FILE_SIZE)
    return f"{field.accept.upper()} up to {limit}"


def _render_file(
    field: FieldSchema,
    value: Any,
    errors: Mapping[FieldPath, str],
    callbacks: FormCallbacks,
    path: FieldPath,
) -> Widget:
    return FileUpload(
        path=path,
        kind=field.kind,
        label=field.label,
        required=field.required,
        description=field.description,
        error=errors.get(path),
        file=value if isinstance(value, UploadedFile) else None,
        accept=field.accept,
        hint=_file_hint(field),
        schema=field,
        on_change=_setter(callbacks, path),
        notify=callbacks.notify,
    )


def _item_callbacks(
    callbacks: FormCallbacks,
    array_path: FieldPath,
    index: int,
    key: str,
) -> FormCallbacks:
    """Callbacks for one sub-field: scalar edits become item-field edits."""

    def set_scalar(_path: FieldPath, value: Any) -> None:
        callbacks.set_item_field(array_path, index, key, value)

    return replace(callbacks, set_scalar=set_scalar)


def _remover(callbacks: FormCallbacks, path: FieldPath, index: int) -> Callable[[], None]:
    def remove() -> None:
        callbacks.remove_item(path, index)

    return remove


def _render_array(
    field: FieldSchema,
    value: Any,
    errors: Mapping[FieldPath, str],
    callbacks: FormCallbacks,
    path: FieldPath,
) -> Widget:
    items: Sequence[Any] = value if isinstance(value, list) else []
    template = field.template or {}
    can_remove = len(items) > field.min_items

    group_items = []
    for index, item in enumerate(items):
        record = item if isinstance(item, Mapping) else {}
        children = []
        for key, sub in template.items():
            child_path = path.child(index, key)
            derived = sub.model_copy(update={"id": str(child_path)})
            children.append(
                render_field(
                    derived,
                    record.get(key),
                    errors,
                    _item_callbacks(callbacks, path, index, key),
                    child_path,
                )
            )
        group_items.append(
            GroupItem(
                index=index,
                title=f"{field.label} #{index + 1}",
                fields=children,
                on_remove=_remover(callbacks, path, index) if can_remove else None,
            )
        )

    def add() -> None:
        callbacks.add_item(path)

    return RepeatableGroup(
        path=path,
        kind=field.kind,
        label=field.label,
        required=field.required,
        description=field.description,
        error=errors.get(path),
        items=group_items,
        min_items=field.min_items,
        on_add=add,
    )


_HANDLERS: dict[FieldKind, Handler] = {
    FieldKind.TEXT: _render_input,
    FieldKind.EMAIL: _render_input,
    FieldKind.TEL: _render_input,
    FieldKind.URL: _render_input,
    FieldKind.NUMBER: _render_input,
    FieldKind.DATE: _render_input,
    FieldKind.TEXTAREA: _render_textarea,
    FieldKind.SELECT: _render_select,
    FieldKind.FILE: _render_file,
    FieldKind.ARRAY: _render_array,
}
