"""Validation rules for field values.

Each rule inspects one non-empty value and returns an error message, or
``None`` when the value is acceptable.

Rules:
- PatternRule: Regular-expression match (email, phone, url)
- NumericRangeRule: Number within optional bounds (number, year, gpa)
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterator
from typing import Any, Protocol, runtime_checkable

from resume_forms.core.fields import FieldSchema, UploadedFile


@runtime_checkable
class ValidationRule(Protocol):
    """Protocol for named validation rules."""

    def check(self, value: Any) -> str | None:
        """Check a non-empty value.

        Args:
            value: The field value.

        Returns:
            Error message, or None if the value is valid.
        """
        ...


class PatternRule:
    """Regular-expression rule.

    Example:
        ```python
        rule = PatternRule(r"^\\d{4}$", "Please enter a 4-digit year")
        assert rule.check("2024") is None
        assert rule.check("24") == "Please enter a 4-digit year"
        ```
    """

    def __init__(self, pattern: str, message: str, flags: int = 0) -> None:
        self.pattern = re.compile(pattern, flags)
        self.message = message

    def check(self, value: Any) -> str | None:
        """Match the stripped string form of the value."""
        if self.pattern.fullmatch(str(value).strip()):
            return None
        return self.message


class NumericRangeRule:
    """Numeric rule with optional inclusive bounds."""

    def __init__(
        self,
        minimum: float | None = None,
        maximum: float | None = None,
        message: str | None = None,
        integer: bool = False,
    ) -> None:
        if minimum is not None and maximum is not None and minimum > maximum:
            raise ValueError("minimum must not exceed maximum")
        self.minimum = minimum
        self.maximum = maximum
        self.integer = integer
        self.message = message

    def _range_message(self) -> str:
        if self.message:
            return self.message
        if self.minimum is not None and self.maximum is not None:
            return f"Please enter a number between {self.minimum:g} and {self.maximum:g}"
        if self.minimum is not None:
            return f"Please enter a number of at least {self.minimum:g}"
        if self.maximum is not None:
            return f"Please enter a number of at most {self.maximum:g}"
        return "Please enter a valid number"

    def check(self, value: Any) -> str | None:
        """Parse the value as a number and compare it to the bounds."""
        if isinstance(value, bool):
            return "Please enter a valid number"
        try:
            number = float(str(value).strip())
        except ValueError:
            return "Please enter a valid number"
        if not math.isfinite(number):
            return "Please enter a valid number"
        if self.integer and not number.is_integer():
            return self._range_message()
        if self.minimum is not None and number < self.minimum:
            return self._range_message()
        if self.maximum is not None and number > self.maximum:
            return self._range_message()
        return None


class RuleRegistry:
    """Registry of named validation rules.

    Example:
        ```python
        rules = RuleRegistry.with_defaults()
        rules.register("zip", PatternRule(r"\\d{5}", "Please enter a valid ZIP code"))
        rules.get_or_raise("email").check("jane@example.com")
        ```
    """

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._rules: dict[str, ValidationRule] = {}

    @classmethod
    def with_defaults(cls) -> RuleRegistry:
        """Create a registry holding the builtin rules."""
        registry = cls()
        for name, rule in _builtin_rules().items():
            registry.register(name, rule)
        return registry

    def register(self, name: str, rule: ValidationRule, overwrite: bool = False) -> None:
        """Register a rule under a name.

        Raises:
            ValueError: If the name is taken and overwrite=False.
        """
        if name in self._rules and not overwrite:
            raise ValueError(
                f"Rule '{name}' already registered. Use overwrite=True to replace."
            )
        self._rules[name] = rule

    def get(self, name: str) -> ValidationRule | None:
        return self._rules.get(name)

    def get_or_raise(self, name: str) -> ValidationRule:
        """Get rule by name.

        Raises:
            KeyError: If rule not found.
        """
        if name not in self._rules:
            raise KeyError(f"Validation rule '{name}' not found in registry")
        return self._rules[name]

    def __contains__(self, name: str) -> bool:
        return name in self._rules

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)


def _builtin_rules() -> dict[str, ValidationRule]:
    return {
        "email": PatternRule(
            r"[^@\s]+@[^@\s]+\.[^@\s]+",
            "Please enter a valid email address",
        ),
        "phone": PatternRule(
            r"\+?[\d\s().-]{7,20}",
            "Please enter a valid phone number",
        ),
        "url": PatternRule(
            r"(https?://)?([\w-]+\.)+[\w-]{2,}(/\S*)?",
            "Please enter a valid URL",
            re.IGNORECASE,
        ),
        "number": NumericRangeRule(),
        "year": NumericRangeRule(
            1900, 2100, message="Please enter a valid year", integer=True
        ),
        "gpa": NumericRangeRule(0, 10, message="GPA must be between 0 and 10"),
    }


DEFAULT_RULES = RuleRegistry.with_defaults()


def format_size_limit(size: int) -> str:
    """Human-readable size limit, in MB from one megabyte up and KB below."""
    megabytes = size / (1024 * 1024)
    if megabytes >= 1:
        return f"{round(megabytes, 1):g}MB"
    return f"{max(round(size / 1024), 1)}KB"


def accepted_extensions(accept: str | None) -> list[str]:
    """Split an ``accept`` string into lower-case dotted extensions."""
    if not accept:
        return []
    extensions = []
    for part in accept.split(","):
        part = part.strip().lower()
        if part:
            extensions.append(part if part.startswith(".") else f".{part}")
    return extensions


def check_file(field: FieldSchema, file: UploadedFile) -> str | None:
    """Check a picked file against the field's type and size constraints.

    Args:
        field: The FILE field schema.
        file: The picked file.

    Returns:
        User-facing rejection message, or None if the file is acceptable.
    """
    extensions = accepted_extensions(field.accept)
    if extensions and file.extension not in extensions:
        return f"Please select a {field.accept} file"
    if field.max_size and file.size > field.max_size:
        return f"File size must be less than {format_size_limit(field.max_size)}"
    return None
