"""Form templates: the field list of one resume type.

This module provides:
- FormTemplate: Ordered top-level fields with serialization and validation
- TemplateRegistry: Registry for managing and discovering form templates

For the forms shipped with the package, see resume_forms.templates.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from resume_forms.core.exceptions import ConfigurationError
from resume_forms.core.fields import FieldKind, FieldPath, FieldSchema
from resume_forms.core.rules import DEFAULT_RULES, RuleRegistry


class FormTemplate(BaseModel):
    """The form shown for one resume type.

    Supports:
    - Loading from and saving to JSON or YAML form files
    - Load-time validation of the field tree
    - Lookup of fields by id or runtime path

    Example:
        ```python
        template = FormTemplate(
            name="fresher",
            title="Fresher Resume",
            fields=[
                FieldSchema(id="fullName", label="Full Name", required=True),
                FieldSchema(id="skills", label="Skills", separator=","),
            ],
        )
        template.validate_template()

        # Save to file
        template.to_yaml("forms/fresher.yaml")

        # Load from file
        loaded = FormTemplate.from_yaml("forms/fresher.yaml")
        ```
    """

    name: str = Field(description="Resume type key, e.g. FRESHER")
    title: str = Field(default="", description="Heading shown above the form")
    description: str | None = Field(
        default=None,
        description="Human-readable description of who this form is for",
    )
    fields: list[FieldSchema] = Field(
        default_factory=list,
        description="Ordered top-level fields",
    )
    version: str = Field(default="1.0", description="Form version")
    tags: list[str] | None = Field(default=None, description="Tags for searching")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate template name is non-empty and normalize it to a key."""
        if not v or not v.strip():
            raise ValueError("Template name cannot be empty")
        return v.strip().upper().replace(" ", "_")

    def validate_template(self, rules: RuleRegistry | None = None) -> list[str]:
        """Validate the field tree.

        Args:
            rules: Rule registry used to resolve ``validation`` names.

        Returns:
            Warnings about attributes that have no effect on their field.

        Raises:
            ConfigurationError: If the tree is malformed.
        """
        rules = rules if rules is not None else DEFAULT_RULES
        warnings: list[str] = []

        if not self.fields:
            raise ConfigurationError(f"Template '{self.name}' has no fields defined")

        self._check_siblings(self.fields, f"template '{self.name}'")

        for top in self.fields:
            for field in top.iter_tree():
                where = f"field '{field.id}' of template '{self.name}'"
                if field.validation and field.validation not in rules:
                    raise ConfigurationError(
                        f"Unknown validation rule '{field.validation}' on {where}"
                    )
                if field.kind is FieldKind.SELECT and not field.options:
                    raise ConfigurationError(f"Select {where} has no options")
                if field.template:
                    self._check_siblings(list(field.template.values()), where)
                if field.min_items and not field.is_array:
                    warnings.append(f"min_items is ignored on non-array {where}")
                if field.rows and field.kind is not FieldKind.TEXTAREA:
                    warnings.append(f"rows is ignored on non-textarea {where}")
                if (field.accept or field.max_size) and field.kind is not FieldKind.FILE:
                    warnings.append(f"file constraints are ignored on non-file {where}")
                if field.separator and field.kind not in (FieldKind.TEXT, FieldKind.TEXTAREA):
                    warnings.append(f"separator is ignored on non-text {where}")

        return warnings

    @staticmethod
    def _check_siblings(fields: list[FieldSchema], where: str) -> None:
        seen: set[str] = set()
        for field in fields:
            if not field.id:
                raise ConfigurationError(f"A field of {where} has no id")
            if FieldPath.DELIMITER in field.id:
                raise ConfigurationError(
                    f"Field id '{field.id}' of {where} contains '{FieldPath.DELIMITER}'"
                )
            if field.id in seen:
                raise ConfigurationError(f"Duplicate field id '{field.id}' in {where}")
            seen.add(field.id)

    def find(self, field_id: str) -> FieldSchema | None:
        """Get a top-level field by id."""
        for field in self.fields:
            if field.id == field_id:
                return field
        return None

    def resolve(self, path: FieldPath) -> FieldSchema:
        """Get the schema addressed by a runtime path.

        Raises:
            KeyError: If the path does not address a field of this template.
        """
        field = self.find(path.field_id)
        if field is None:
            raise KeyError(f"Field '{path.field_id}' not found in template '{self.name}'")
        rest = path.segments[1:]
        for i in range(0, len(rest), 2):
            if not field.template or i + 1 >= len(rest) or rest[i + 1] not in field.template:
                raise KeyError(f"Path '{path}' not found in template '{self.name}'")
            field = field.template[str(rest[i + 1])]
        return field

    def initial_values(self) -> dict[str, Any]:
        """Values of a freshly opened form."""
        return {field.id: field.empty_value() for field in self.fields}

    def to_dict(self) -> dict[str, Any]:
        """Convert template to dictionary for serialization."""
        data: dict[str, Any] = {
            "name": self.name,
            "version": self.version,
        }
        if self.title:
            data["title"] = self.title
        if self.description:
            data["description"] = self.description
        if self.tags:
            data["tags"] = self.tags
        data["fields"] = [
            field.model_dump(mode="json", exclude_defaults=True) for field in self.fields
        ]
        return data

    def to_json(self, path: str | Path | None = None, indent: int = 2) -> str:
        """Serialize the form to JSON.

        Args:
            path: File to write as well, if given.

        Returns:
            The JSON text.
        """
        json_str = json.dumps(self.to_dict(), indent=indent)

        if path:
            Path(path).write_text(json_str)

        return json_str

    def to_yaml(self, path: str | Path | None = None) -> str:
        """Serialize the form to YAML, the format form files are kept in.

        Args:
            path: File to write as well, if given.

        Returns:
            The YAML text.
        """
        yaml_str: str = yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

        if path:
            Path(path).write_text(yaml_str)

        return yaml_str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FormTemplate:
        """Build a form from parsed JSON or YAML data.

        Raises:
            ConfigurationError: If the data does not describe a valid form.
        """
        if not isinstance(data, dict):
            raise ConfigurationError("Template data must be a mapping")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid template '{data.get('name', 'unnamed')}': {e}"
            ) from e

    @classmethod
    def from_json(cls, source: str | Path) -> FormTemplate:
        """Load template from JSON file or string."""
        data = json.loads(_read_source(source))
        return cls.from_dict(data)

    @classmethod
    def from_yaml(cls, source: str | Path) -> FormTemplate:
        """Load template from YAML file or string."""
        data = yaml.safe_load(_read_source(source))
        return cls.from_dict(data)


def _read_source(source: str | Path) -> str:
    if isinstance(source, Path) or (
        isinstance(source, str) and "\n" not in source and Path(source).exists()
    ):
        return Path(source).read_text()
    return str(source)


class TemplateRegistry:
    """Registry for managing form templates.

    Example:
        ```python
        registry = TemplateRegistry()
        registry.register(fresher_template)

        template = registry.get("FRESHER")
        for name in registry.list_templates():
            print(name)
        ```
    """

    def __init__(self, rules: RuleRegistry | None = None) -> None:
        """Create an empty registry validating against ``rules``."""
        self.rules = rules if rules is not None else DEFAULT_RULES
        self._templates: dict[str, FormTemplate] = {}

    def register(self, template: FormTemplate, overwrite: bool = False) -> list[str]:
        """Register a template after validating it.

        Args:
            template: Form to register.
            overwrite: Replace a form already registered under the same name.

        Returns:
            Validation warnings.

        Raises:
            ValueError: If the name is taken and overwrite=False.
            ConfigurationError: If the template is malformed.
        """
        if template.name in self._templates and not overwrite:
            raise ValueError(
                f"Template '{template.name}' already registered. "
                "Use overwrite=True to replace."
            )

        warnings = template.validate_template(self.rules)
        self._templates[template.name] = template
        return warnings

    def get(self, name: str) -> FormTemplate | None:
        """Get template by name (case-insensitive)."""
        return self._templates.get(name.strip().upper())

    def get_or_raise(self, name: str) -> FormTemplate:
        """Get the form of a resume type.

        Raises:
            KeyError: If no form is registered for ``name``.
        """
        template = self.get(name)
        if template is None:
            raise KeyError(f"Template '{name}' not found in registry")
        return template

    def unregister(self, name: str) -> bool:
        """Remove the form of a resume type.

        Returns:
            Whether a form was removed.
        """
        return self._templates.pop(name.strip().upper(), None) is not None

    def list_templates(self) -> list[str]:
        return list(self._templates.keys())

    def search_by_tags(self, tags: list[str]) -> list[FormTemplate]:
        """Find templates with any matching tag."""
        tag_set = set(tags)
        return [t for t in self._templates.values() if t.tags and tag_set.intersection(t.tags)]

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, name: str) -> bool:
        return name.strip().upper() in self._templates

    def __iter__(self) -> Iterator[str]:
        return iter(self._templates)
