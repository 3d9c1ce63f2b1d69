"""
Generic custom-field support for host models.

A model that mixes in HasCustomFields gets an in-memory extension-field store
(`custom_fields`) backed by a key/value table. The store is filled either by a
full load of one entity's rows or by a list preload restricted to a set of
names; see app/services/custom_field_service.py.
"""

from __future__ import annotations

import enum
import json
import logging
from typing import Any, ClassVar

from sqlalchemy import inspect

from app.exceptions import (
    CustomFieldsNotLoadedError,
    FieldTypeConflictError,
    NotPreloadedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_TRUE_VALUES = frozenset({"t", "true", "1", "yes"})


class FieldKind(str, enum.Enum):
    """Storage kinds a custom field can be declared with."""

    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    JSON = "json"


class CustomFieldTypeRegistry:
    """
    Process-wide registry of declared custom fields for one entity class.

    Values are kept as text in storage; the declared kind decides how they are
    coerced on the way in and out. Names that were never declared behave as
    plain strings.
    """

    def __init__(self, entity: str) -> None:
        self.entity = entity
        self._kinds: dict[str, FieldKind] = {}

    def register(self, name: str, kind: FieldKind | str) -> None:
        kind = FieldKind(kind)
        existing = self._kinds.get(name)
        if existing is None:
            self._kinds[name] = kind
            logger.info("Custom field registered: %s.%s (%s)", self.entity, name, kind.value)
        elif existing is not kind:
            raise FieldTypeConflictError(name, existing.value, kind.value)

    def is_registered(self, name: str) -> bool:
        return name in self._kinds

    def kind_for(self, name: str) -> FieldKind:
        return self._kinds.get(name, FieldKind.STRING)

    def registered_names(self) -> list[str]:
        return list(self._kinds)

    def unregister(self, name: str) -> None:
        """Forget a declaration; used when resetting plugin state."""
        self._kinds.pop(name, None)

    # ── Coercion ──────────────────────────────────────────────────────────────

    def serialize(self, name: str, value: Any) -> str | None:
        """Convert an in-memory value to its stored text form."""
        if value is None:
            return None
        kind = self.kind_for(name)
        if kind is FieldKind.JSON:
            return json.dumps(value)
        if kind is FieldKind.BOOLEAN:
            if isinstance(value, str):
                return "true" if value.strip().lower() in _TRUE_VALUES else "false"
            return "true" if value else "false"
        if kind is FieldKind.INTEGER:
            try:
                return str(int(value))
            except (TypeError, ValueError) as exc:
                raise ValidationError(f"Custom field '{name}' expects an integer", field=name) from exc
        return str(value)

    def deserialize(self, name: str, raw: str | None) -> Any:
        """Convert stored text back to the declared kind."""
        if raw is None:
            return None
        kind = self.kind_for(name)
        if kind is FieldKind.JSON:
            return json.loads(raw)
        if kind is FieldKind.BOOLEAN:
            return raw.strip().lower() in _TRUE_VALUES
        if kind is FieldKind.INTEGER:
            return int(raw)
        return raw

    def coerce(self, name: str, value: Any) -> Any:
        """Return `value` as it will read back after a save."""
        return self.deserialize(name, self.serialize(name, value))


class HasCustomFields:
    """
    Mixin for mapped models owning a custom-field store.

    Subclasses set `custom_field_types` to their own registry.
    """

    custom_field_types: ClassVar[CustomFieldTypeRegistry]

    def _is_persisted(self) -> bool:
        return inspect(self).has_identity

    @property
    def custom_fields_loaded(self) -> bool:
        return self.__dict__.get("_custom_fields") is not None

    @property
    def preloaded_custom_fields(self) -> dict[str, Any] | None:
        return self.__dict__.get("_preloaded_custom_fields")

    @property
    def custom_fields(self) -> dict[str, Any]:
        fields = self.__dict__.get("_custom_fields")
        if fields is None:
            if self._is_persisted():
                raise CustomFieldsNotLoadedError("*", getattr(self, "id", None))
            self.set_loaded_custom_fields({})
            fields = self.__dict__["_custom_fields"]
        return fields

    def set_loaded_custom_fields(self, values: dict[str, Any]) -> None:
        self.__dict__["_custom_fields"] = dict(values)
        self.__dict__["_custom_fields_orig"] = dict(values)

    def set_preloaded_custom_fields(self, values: dict[str, Any]) -> None:
        self.__dict__["_preloaded_custom_fields"] = dict(values)

    def get_custom_field(self, name: str) -> Any:
        fields = self.__dict__.get("_custom_fields")
        if fields is not None:
            return fields.get(name)
        preloaded = self.preloaded_custom_fields
        if preloaded is not None:
            if name not in preloaded:
                raise NotPreloadedError(name)
            return preloaded[name]
        if not self._is_persisted():
            return None
        raise CustomFieldsNotLoadedError(name, getattr(self, "id", None))

    def set_custom_field(self, name: str, value: Any) -> None:
        fields = self.__dict__.get("_custom_fields")
        if fields is None:
            if self._is_persisted():
                raise CustomFieldsNotLoadedError(name, getattr(self, "id", None))
            fields = self.custom_fields
        fields[name] = self.custom_field_types.coerce(name, value)

    def custom_fields_changes(self) -> dict[str, Any]:
        """Return name -> new value for every field changed since the last load or save."""
        if not self.custom_fields_loaded:
            return {}
        current = self.__dict__["_custom_fields"]
        original = self.__dict__.get("_custom_fields_orig", {})
        changes = {name: value for name, value in current.items() if original.get(name) != value}
        # keys deleted from the dict are cleared as well
        for name in original.keys() - current.keys():
            changes[name] = None
        return changes

    def mark_custom_fields_saved(self) -> None:
        current = {k: v for k, v in self.custom_fields.items() if v is not None}
        self.set_loaded_custom_fields(current)
