"""
Plugin API

PluginApi is the set of host extension points handed to a plugin in
PluginBase.activate():

    register_topic_custom_field_type      declare a typed custom field
    add_topic_custom_field_accessor       install a getter/setter property on Topic
    on                                    subscribe to a host event
    track_topic_field                     hook a field into the topic revisor
    add_to_serializer / add_custom_field_to_serializer
                                          extend a topic payload
    add_preloaded_topic_list_custom_field preload a field for topic lists
    register_asset                        ship a static asset

Everything registered through on(), track_topic_field() and the serializer
methods is gated on the plugin's `enabled` flag at call time.  Every
custom-field name must be declared before any other extension references it.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from app.exceptions import UndeclaredFieldError
from app.models.custom_fields import FieldKind
from app.models.topic import Topic
from app.plugins.events import EventBus, event_bus
from app.serializers.topic import SerializerAttribute, SerializerExtensions, serializer_extensions
from app.services import topic_list_service
from app.services.topic_revisor import TopicChanges, TopicRevisor, topic_revisor

if TYPE_CHECKING:
    from app.plugins.base import PluginBase

logger = logging.getLogger(__name__)

STATIC_ROOT = Path(__file__).resolve().parent.parent / "static"


class CustomFieldProperty(property):
    """Property installed by add_topic_custom_field_accessor."""


def custom_field_property(name: str) -> CustomFieldProperty:
    """Build a Topic property reading and writing custom field `name`."""

    def getter(self: Topic) -> Any:
        return self.get_custom_field(name)

    def setter(self: Topic, value: Any) -> None:
        self.set_custom_field(name, value)

    return CustomFieldProperty(getter, setter, doc=f"Custom field '{name}'.")


class PluginApi:
    def __init__(
        self,
        plugin: PluginBase,
        events: EventBus | None = None,
        revisor: TopicRevisor | None = None,
        serializers: SerializerExtensions | None = None,
    ) -> None:
        self.plugin = plugin
        self.events = events or event_bus
        self.revisor = revisor or topic_revisor
        self.serializers = serializers or serializer_extensions
        self.assets: list[str] = []

    @property
    def _owner(self) -> str:
        return self.plugin.meta.name

    def _require_topic_custom_field(self, name: str) -> None:
        if not Topic.custom_field_types.is_registered(name):
            raise UndeclaredFieldError(name, entity="Topic")

    # ── Field declaration & accessors ─────────────────────────────────────────

    def register_topic_custom_field_type(self, name: str, kind: FieldKind | str) -> None:
        Topic.custom_field_types.register(name, kind)

    def add_topic_custom_field_accessor(self, name: str, attribute: str | None = None) -> None:
        self._require_topic_custom_field(name)
        attribute = attribute or name
        existing = getattr(Topic, attribute, None)
        if existing is not None and not isinstance(existing, CustomFieldProperty):
            raise ValueError(f"Topic already defines '{attribute}'")
        setattr(Topic, attribute, custom_field_property(name))

    # ── Events & revisions ────────────────────────────────────────────────────

    def on(self, event: str, callback: Callable[..., Any], name: str | None = None) -> None:
        plugin = self.plugin

        async def guarded(*args: Any) -> Any:
            if not plugin.enabled:
                return None
            result = callback(*args)
            if inspect.isawaitable(result):
                result = await result
            return result

        handler_name = f"{self._owner}:{name or callback.__qualname__}"
        self.events.on(event, guarded, name=handler_name, owner=self._owner)

    def track_topic_field(self, name: str, callback: Callable[[TopicChanges, Any], Any]) -> None:
        self._require_topic_custom_field(name)
        plugin = self.plugin

        def guarded(tc: TopicChanges, value: Any) -> Any:
            if not plugin.enabled:
                return None
            return callback(tc, value)

        self.revisor.track_topic_field(name, guarded)

    # ── Serialization & preload ───────────────────────────────────────────────

    def add_to_serializer(
        self,
        serializer: str,
        attribute: str,
        getter: Callable[[Any], Any],
        include_condition: Callable[[Any], bool] | None = None,
    ) -> None:
        plugin = self.plugin

        def condition(obj: Any) -> bool:
            if not plugin.enabled:
                return False
            return include_condition is None or include_condition(obj)

        self.serializers.add(serializer, SerializerAttribute(attribute, getter, condition))

    def add_custom_field_to_serializer(self, serializer: str, name: str, getter: Callable[[Any], Any]) -> None:
        self._require_topic_custom_field(name)
        self.add_to_serializer(serializer, name, getter)

    def add_preloaded_topic_list_custom_field(self, name: str) -> None:
        self._require_topic_custom_field(name)
        topic_list_service.add_preloaded_custom_field(name)

    # ── Assets ────────────────────────────────────────────────────────────────

    def register_asset(self, path: str) -> None:
        if not (STATIC_ROOT / path).is_file():
            logger.warning("Plugin %s registered missing asset %s", self._owner, path)
        if path not in self.assets:
            self.assets.append(path)
