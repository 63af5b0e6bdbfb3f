"""Framework-neutral widget descriptions produced by the dispatcher.

A widget carries what a front end needs to draw one field (label, value,
error, affordances) plus bound callbacks that route user actions back to
the form state. Widgets hold no state of their own: re-render after every
action to get the updated tree.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from resume_forms.core.fields import FieldKind, FieldPath, FieldSchema, SelectOption, UploadedFile
from resume_forms.core.rules import check_file

logger = logging.getLogger(__name__)

SELECT_PLACEHOLDER = SelectOption(value="", label="Select an option")


@dataclass(kw_only=True)
class Widget:
    """Common attributes of every rendered field."""

    path: FieldPath
    kind: FieldKind
    label: str
    required: bool = False
    description: str | None = None
    error: str | None = None

    @property
    def display_label(self) -> str:
        """Label with the required-field marker."""
        return f"{self.label} *" if self.required else self.label

    @property
    def has_error(self) -> bool:
        return self.error is not None


@dataclass(kw_only=True)
class InputWidget(Widget):
    """A widget editing one scalar value."""

    value: Any = ""
    placeholder: str | None = None
    on_change: Callable[[Any], None] = field(repr=False, compare=False)

    def change(self, value: Any) -> None:
        """Route a new value to the form state."""
        self.on_change(value)


@dataclass(kw_only=True)
class TextInput(InputWidget):
    """Single-line input; ``input_type`` is the HTML input type."""

    input_type: str = "text"


@dataclass(kw_only=True)
class TextArea(InputWidget):
    """Multi-line text input."""

    rows: int = 3


@dataclass(kw_only=True)
class Select(InputWidget):
    """Single choice among options; the first option is the empty placeholder."""

    options: list[SelectOption] = field(default_factory=list)


@dataclass(kw_only=True)
class FileUpload(Widget):
    """File picker with drag-and-drop.

    Shows an upload affordance while empty and the file's name, size and
    a remove affordance once a file is held.
    """

    file: UploadedFile | None = None
    accept: str | None = None
    hint: str = ""
    schema: FieldSchema = field(repr=False, compare=False)
    on_change: Callable[[Any], None] = field(repr=False, compare=False)
    notify: Callable[[str], None] | None = field(default=None, repr=False, compare=False)

    @property
    def has_file(self) -> bool:
        return self.file is not None

    @property
    def file_size_label(self) -> str:
        if self.file is None:
            return ""
        return f"{self.file.size_mb:.2f} MB"

    def select(self, file: UploadedFile) -> str | None:
        """Store a picked file unless it breaks the field's constraints.

        Returns:
            The rejection message shown to the user, or None if the file
            was stored.
        """
        message = check_file(self.schema, file)
        if message:
            logger.info("Rejected file '%s' for '%s': %s", file.filename, self.path, message)
            if self.notify:
                self.notify(message)
            return message
        self.on_change(file)
        return None

    def remove(self) -> None:
        """Clear the held file."""
        self.on_change(None)


@dataclass(kw_only=True)
class GroupItem:
    """One item of a repeatable group."""

    index: int
    title: str
    fields: list[Widget] = field(default_factory=list)
    on_remove: Callable[[], None] | None = field(default=None, repr=False, compare=False)

    @property
    def can_remove(self) -> bool:
        return self.on_remove is not None

    def remove(self) -> None:
        """Remove this item.

        Raises:
            RuntimeError: If the group is at its minimum item count.
        """
        if self.on_remove is None:
            raise RuntimeError(f"{self.title} cannot be removed")
        self.on_remove()


@dataclass(kw_only=True)
class RepeatableGroup(Widget):
    """Array field: a list of items sharing one template."""

    items: list[GroupItem] = field(default_factory=list)
    min_items: int = 0
    on_add: Callable[[], None] = field(repr=False, compare=False)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def add_label(self) -> str:
        return f"Add {self.label}"

    @property
    def empty_message(self) -> str:
        return f"No {self.label.lower()} added yet"

    @property
    def empty_hint(self) -> str:
        return f'Click "{self.add_label}" to get started'

    def add(self) -> None:
        """Append an empty item."""
        self.on_add()
