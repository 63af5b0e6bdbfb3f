"""Rendering of field schemas into framework-neutral widgets."""

from resume_forms.rendering.dispatcher import FormCallbacks, render_field, render_form
from resume_forms.rendering.widgets import (
    FileUpload,
    GroupItem,
    InputWidget,
    RepeatableGroup,
    Select,
    TextArea,
    TextInput,
    Widget,
)

__all__ = [
    "FileUpload",
    "FormCallbacks",
    "GroupItem",
    "InputWidget",
    "RepeatableGroup",
    "Select",
    "TextArea",
    "TextInput",
    "Widget",
    "render_field",
    "render_form",
]
