"""Field schema model for dynamic forms.

This module provides:
- FieldKind: The closed set of input kinds a form can contain
- FieldSchema: Immutable description of one input, possibly repeatable
- FieldPath: Runtime address of a value inside a form (``education.0.degree``)
- UploadedFile: Raw file handle held by FILE fields
"""

from __future__ import annotations

import mimetypes
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class FieldKind(str, Enum):
    """Kinds of form inputs."""

    TEXT = "text"
    EMAIL = "email"
    TEL = "tel"
    URL = "url"
    NUMBER = "number"
    DATE = "date"
    TEXTAREA = "textarea"
    SELECT = "select"
    FILE = "file"
    ARRAY = "array"


class SelectOption(BaseModel):
    """One choice of a SELECT field."""

    model_config = ConfigDict(frozen=True)

    value: str
    label: str


class FieldSchema(BaseModel):
    """Immutable description of one form input.

    ARRAY fields carry a ``template``: the schema of one repeatable item,
    keyed by sub-field name. Sub-field ids default to their key.

    Example:
        ```python
        education = FieldSchema(
            id="education",
            label="Education",
            kind=FieldKind.ARRAY,
            min_items=1,
            template={
                "institution": FieldSchema(label="Institution", required=True),
                "gpa": FieldSchema(label="GPA", validation="gpa"),
            },
        )
        ```
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default="", description="Unique key among sibling fields")
    label: str = Field(description="Human-readable label")
    kind: FieldKind = Field(default=FieldKind.TEXT, description="Input kind")
    required: bool = Field(default=False, description="Whether a value must be given")
    placeholder: str | None = Field(default=None, description="Placeholder text")
    validation: str | None = Field(
        default=None,
        description="Name of a validation rule applied to non-empty values",
    )
    rows: int | None = Field(default=None, ge=1, description="Visible rows (textarea)")
    options: tuple[SelectOption, ...] = Field(
        default=(),
        description="Ordered choices (select)",
    )
    template: dict[str, FieldSchema] | None = Field(
        default=None,
        description="Schema of one repeatable item (array)",
    )
    min_items: int = Field(default=0, ge=0, description="Minimum item count (array)")
    accept: str | None = Field(
        default=None,
        description="Accepted file extensions, e.g. '.pdf' or '.pdf,.docx' (file)",
    )
    max_size: int | None = Field(default=None, gt=0, description="Size limit in bytes (file)")
    description: str | None = Field(default=None, description="Help text")
    separator: str | None = Field(
        default=None,
        min_length=1,
        description="Delimiter of a text value submitted as a list",
    )

    @field_validator("template")
    @classmethod
    def assign_sub_field_ids(
        cls, v: dict[str, FieldSchema] | None
    ) -> dict[str, FieldSchema] | None:
        """Sub-fields are identified by their template key."""
        if v is None:
            return v
        return {
            key: sub if sub.id == key else sub.model_copy(update={"id": key})
            for key, sub in v.items()
        }

    @model_validator(mode="after")
    def check_template_matches_kind(self) -> FieldSchema:
        """ARRAY fields need a non-empty template; other kinds must not have one."""
        if self.kind is FieldKind.ARRAY:
            if not self.template:
                raise ValueError(f"Array field '{self.id}' requires a non-empty template")
        elif self.template is not None:
            raise ValueError(
                f"Field '{self.id}' of kind '{self.kind.value}' cannot have a template"
            )
        return self

    @property
    def is_array(self) -> bool:
        return self.kind is FieldKind.ARRAY

    def empty_value(self) -> Any:
        """Initial value of this field in a fresh form."""
        if self.is_array:
            return [self.empty_item() for _ in range(self.min_items)]
        return ""

    def empty_item(self) -> dict[str, Any]:
        """A new item record with every template sub-key empty."""
        if not self.template:
            raise ValueError(f"Field '{self.id}' is not an array field")
        return {key: sub.empty_value() for key, sub in self.template.items()}

    def iter_tree(self) -> Iterator[FieldSchema]:
        """Yield this field and every nested template field, depth first."""
        yield self
        for sub in (self.template or {}).values():
            yield from sub.iter_tree()


@dataclass(frozen=True)
class FieldPath:
    """Runtime address of a value: a top-level id followed by index/key pairs.

    Paths compare and hash as tuples of segments, so a key containing the
    display delimiter never collides with a deeper path.
    """

    segments: tuple[str | int, ...]

    DELIMITER = "."

    def __post_init__(self) -> None:
        if not self.segments or not isinstance(self.segments[0], str):
            raise ValueError("A field path must start with a field id")

    @classmethod
    def of(cls, field_id: str) -> FieldPath:
        return cls((field_id,))

    def child(self, index: int, key: str) -> FieldPath:
        """Path of sub-field ``key`` of item ``index`` of this array."""
        return FieldPath((*self.segments, index, key))

    @property
    def field_id(self) -> str:
        """Id of the top-level field this path belongs to."""
        return str(self.segments[0])

    @property
    def key(self) -> str:
        """Last named segment (the sub-field key, or the field id)."""
        return str(self.segments[-1])

    @property
    def is_top_level(self) -> bool:
        return len(self.segments) == 1

    def is_within(self, other: FieldPath) -> bool:
        """True if this path equals ``other`` or lies underneath it."""
        return self.segments[: len(other.segments)] == other.segments

    def __str__(self) -> str:
        return self.DELIMITER.join(str(s) for s in self.segments)

    def __iter__(self) -> Iterator[str | int]:
        return iter(self.segments)


class UploadedFile(BaseModel):
    """A file picked by the user for a FILE field."""

    filename: str = Field(description="Original file name")
    size: int = Field(ge=0, description="Size in bytes")
    content_type: str | None = Field(default=None, description="MIME type")
    content: bytes | None = Field(default=None, repr=False, description="File bytes")

    @property
    def extension(self) -> str:
        """Lower-case extension including the dot (``'.pdf'``)."""
        return Path(self.filename).suffix.lower()

    @property
    def size_mb(self) -> float:
        return self.size / 1024 / 1024

    @classmethod
    def from_path(cls, path: str | Path) -> UploadedFile:
        """Read a file from disk.

        Args:
            path: Path of the file.

        Returns:
            UploadedFile holding the file's bytes.
        """
        path = Path(path)
        content = path.read_bytes()
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(
            filename=path.name,
            size=len(content),
            content_type=content_type,
            content=content,
        )
