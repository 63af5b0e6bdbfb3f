"""Form state store.

``FormState`` owns the values of one open form and the error map derived
from them. Values are changed only through the store's operations; every
operation re-runs the validator before returning, so ``errors`` always
matches ``values``.

Array values are replaced copy-on-write: changing one sub-field of one
item produces a new list and a new item dict, while the other item dicts
are shared with the previous list.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from resume_forms.core.config import FormConfig
from resume_forms.core.fields import FieldPath, FieldSchema
from resume_forms.core.rules import RuleRegistry
from resume_forms.core.templates import FormTemplate
from resume_forms.core.validator import ErrorMap, is_form_valid, validate_form

logger = logging.getLogger(__name__)


class FormState:
    """Values and errors of one open form.

    Example:
        ```python
        state = FormState(BuiltinTemplates.fresher())
        state.set_scalar("fullName", "Jane Doe")
        state.add_array_item("projects")
        state.set_array_item_field("projects", 0, "name", "Compiler")
        print(state.is_valid, state.errors)
        ```
    """

    def __init__(
        self,
        template: FormTemplate,
        rules: RuleRegistry | None = None,
        values: Mapping[str, Any] | None = None,
        config: FormConfig | None = None,
    ) -> None:
        """Open a form with every field empty.

        Args:
            template: The form's field list.
            rules: Rule registry for the validator.
            values: Optional values to prefill (see ``load``).
            config: Form behaviour settings.
        """
        self.template = template
        self.rules = rules
        self.config = config or FormConfig()
        self._values: dict[str, Any] = template.initial_values()
        self._errors: ErrorMap = {}
        if values is not None:
            self.load(values)
        else:
            self._revalidate()

    @property
    def values(self) -> Mapping[str, Any]:
        """Read-only view of the current values."""
        return MappingProxyType(self._values)

    @property
    def errors(self) -> ErrorMap:
        """Copy of the current error map."""
        return dict(self._errors)

    @property
    def is_valid(self) -> bool:
        return is_form_valid(self._errors)

    def get(self, path: FieldPath, default: Any = None) -> Any:
        """Value at a runtime path, or ``default`` if it does not exist."""
        value: Any = self._values.get(path.field_id, default)
        rest = path.segments[1:]
        for i in range(0, len(rest), 2):
            index, key = rest[i], rest[i + 1]
            if not isinstance(value, list) or not isinstance(index, int):
                return default
            if not 0 <= index < len(value) or not isinstance(value[index], Mapping):
                return default
            value = value[index].get(key, default)
        return value

    # =========================================================================
    # Operations
    # =========================================================================

    def set_scalar(self, field_id: str, value: Any) -> None:
        """Replace the value of a top-level field.

        Always succeeds; constraints are reported by the validator.
        """
        if self.template.find(field_id) is None:
            logger.debug("Setting value of undeclared field '%s'", field_id)
        self._values[field_id] = value
        self._revalidate()

    def add_array_item(self, array_field_id: str) -> bool:
        """Append an empty item to a top-level array field."""
        return self.add_item(FieldPath.of(array_field_id))

    def remove_array_item(self, array_field_id: str, index: int) -> bool:
        """Remove one item of a top-level array field."""
        return self.remove_item(FieldPath.of(array_field_id), index)

    def set_array_item_field(
        self,
        array_field_id: str,
        index: int,
        sub_key: str,
        value: Any,
    ) -> bool:
        """Replace one sub-field of one item of a top-level array field."""
        return self.set_value(FieldPath.of(array_field_id).child(index, sub_key), value)

    def set_value(self, path: FieldPath, value: Any) -> bool:
        """Replace the value at any runtime path.

        Returns:
            True if the value was stored, False if the path was rejected.
        """
        if path.is_top_level:
            self.set_scalar(path.field_id, value)
            return True
        if self._resolve(path) is None or not self._items_exist(path):
            logger.warning("Ignoring update of unknown path '%s'", path)
            return False
        self._apply(path, lambda _: value)
        logger.debug("Set '%s'", path)
        return True

    def add_item(self, path: FieldPath) -> bool:
        """Append an empty item to the array field at ``path``.

        Every template sub-key of the new item is empty; nested array
        sub-fields start with their ``min_items`` empty items.

        Returns:
            True if an item was added, False if ``path`` is not an array field.
        """
        field = self._resolve(path)
        if field is None or not field.is_array:
            logger.warning("Cannot add item: '%s' is not an array field", path)
            return False
        if not self._items_exist(path):
            logger.warning("Cannot add item: parent item of '%s' does not exist", path)
            return False
        item = field.empty_item()
        self._apply(path, lambda items: [*_as_list(items), item])
        logger.debug("Added item to '%s'", path)
        return True

    def remove_item(self, path: FieldPath, index: int) -> bool:
        """Remove the item at ``index`` of the array field at ``path``.

        The ``min_items`` floor is not enforced here; callers check
        ``can_remove_item`` before offering the action.

        Returns:
            True if an item was removed, False if the call was rejected.
        """
        field = self._resolve(path)
        if field is None or not field.is_array:
            logger.warning("Cannot remove item: '%s' is not an array field", path)
            return False
        items = _as_list(self.get(path))
        if not 0 <= index < len(items):
            logger.warning("Cannot remove item %d of '%s': index out of range", index, path)
            return False
        self._apply(path, lambda current: [*current[:index], *current[index + 1 :]])
        logger.debug("Removed item %d of '%s'", index, path)
        return True

    def can_remove_item(self, path: FieldPath) -> bool:
        """True while the array at ``path`` holds more than ``min_items`` items."""
        field = self._resolve(path)
        if field is None or not field.is_array:
            return False
        return len(_as_list(self.get(path))) > field.min_items

    def load(self, values: Mapping[str, Any]) -> None:
        """Replace all values, e.g. with an existing document being edited.

        Keys that are not top-level fields are ignored. Array items are
        completed with empty values for missing sub-keys.
        """
        fresh = self.template.initial_values()
        for field in self.template.fields:
            if field.id in values:
                fresh[field.id] = _coerce(field, values[field.id], self.config.list_separator)
        ignored = set(values) - set(fresh)
        if ignored:
            logger.debug("Ignoring undeclared keys on load: %s", sorted(ignored))
        self._values = fresh
        self._revalidate()

    def reset(self) -> None:
        """Return every field to its initial empty value."""
        self._values = self.template.initial_values()
        self._revalidate()

    # =========================================================================
    # Internals
    # =========================================================================

    def _resolve(self, path: FieldPath) -> FieldSchema | None:
        try:
            return self.template.resolve(path)
        except KeyError:
            return None

    def _items_exist(self, path: FieldPath) -> bool:
        """Check that every item index along ``path`` points at an existing item."""
        value: Any = self._values.get(path.field_id)
        rest = path.segments[1:]
        for i in range(0, len(rest), 2):
            index = rest[i]
            if not isinstance(value, list) or not isinstance(index, int):
                return False
            if not 0 <= index < len(value) or not isinstance(value[index], Mapping):
                return False
            value = value[index].get(rest[i + 1])
        return True

    def _apply(self, path: FieldPath, update: Callable[[Any], Any]) -> None:
        root = path.field_id
        self._values[root] = _replace(self._values.get(root), path.segments[1:], update)
        self._revalidate()

    def _revalidate(self) -> None:
        self._errors = validate_form(self._values, self.template.fields, self.rules)


def _as_list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, list) else []


def _replace(value: Any, segments: tuple[str | int, ...], update: Callable[[Any], Any]) -> Any:
    """Copy-on-write update along ``(index, key)`` segment pairs."""
    if not segments:
        return update(value)
    index, key = int(segments[0]), str(segments[1])
    items = list(value)
    item = dict(items[index])
    item[key] = _replace(item.get(key), segments[2:], update)
    items[index] = item
    return items


def _coerce(field: FieldSchema, value: Any, list_separator: str) -> Any:
    """Fit a loaded value to the shape the form expects."""
    if field.is_array:
        template = field.template or {}
        items = []
        for raw in _as_list(value):
            record = raw if isinstance(raw, Mapping) else {}
            items.append(
                {
                    key: _coerce(sub, record[key], list_separator)
                    if key in record
                    else sub.empty_value()
                    for key, sub in template.items()
                }
            )
        return items
    if value is None:
        return ""
    if isinstance(value, list):
        separator = field.separator or list_separator
        joiner = separator if separator.isspace() else f"{separator} "
        return joiner.join(str(v) for v in value)
    return value
