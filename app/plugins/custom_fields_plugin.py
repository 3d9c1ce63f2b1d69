"""
Custom Fields Plugin

Adds the Price, URL and Store string custom fields to topics and wires
each of them through the host:

  - declared on Topic.custom_field_types and exposed as a Topic property
  - assigned from the creation options when a topic is created
  - tracked by the topic revisor (blank input clears the field)
  - added to the topic_view and topic_list_item payloads
  - preloaded for topic lists

All of it is driven by the FIELDS descriptor table; the plugin is gated on
the `topic_custom_field_enabled` site setting.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy.ext.asyncio import async_object_session

from app.models.custom_fields import FieldKind
from app.plugins.base import PluginBase, PluginMeta
from app.plugins.hooks import HOOK_TOPIC_CREATED
from app.serializers.topic import TOPIC_LIST_ITEM, TOPIC_VIEW
from app.services.topic_service import save_topic

if TYPE_CHECKING:
    from app.models.topic import Topic
    from app.models.user import User
    from app.plugins.api import PluginApi
    from app.serializers.topic import TopicView
    from app.services.topic_revisor import TopicChanges

logger = logging.getLogger(__name__)

STYLESHEET = "stylesheets/common.scss"


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    kind: FieldKind = FieldKind.STRING


PRICE = FieldDescriptor("Price")
URL = FieldDescriptor("URL")
STORE = FieldDescriptor("Store")

FIELDS: tuple[FieldDescriptor, ...] = (PRICE, URL, STORE)

_META = PluginMeta(
    name="custom_fields",
    version="1.0",
    description="Adds Price, URL and Store custom fields to topics",
    authors="Joe Stanton",
    url="https://github.com/JStantonWordPress/CustomFields",
    enabled_setting="topic_custom_field_enabled",
)


def is_blank(value: Any) -> bool:
    """None, empty and whitespace-only strings are blank."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def register_custom_field(api: PluginApi, field: FieldDescriptor) -> None:
    """Declare one field and wire it through accessors, revisions, serializers and preload."""
    name = field.name

    api.register_topic_custom_field_type(name, field.kind)
    api.add_topic_custom_field_accessor(name)

    def revise(tc: TopicChanges, value: Any) -> None:
        old_value = getattr(tc.topic, name)
        new_value = None if is_blank(value) else tc.topic.custom_field_types.coerce(name, value)
        if new_value == old_value:
            return
        # the change record keeps the value as submitted
        tc.record_change(name, old_value, value)
        setattr(tc.topic, name, new_value)

    api.track_topic_field(name, revise)

    def from_topic_view(view: TopicView) -> Any:
        return getattr(view.topic, name)

    def from_list_item(topic: Topic) -> Any:
        return getattr(topic, name)

    api.add_custom_field_to_serializer(TOPIC_VIEW, name, from_topic_view)
    api.add_preloaded_topic_list_custom_field(name)
    api.add_custom_field_to_serializer(TOPIC_LIST_ITEM, name, from_list_item)


class CustomFieldsPlugin(PluginBase):
    """Price / URL / Store topic custom fields."""

    def __init__(self, fields: tuple[FieldDescriptor, ...] = FIELDS) -> None:
        super().__init__()
        self.fields = fields

    @property
    def meta(self) -> PluginMeta:
        return _META

    async def on_load(self, config: dict[str, Any]) -> None:
        await super().on_load(config)
        logger.debug("CustomFieldsPlugin loaded (fields=%s)", [f.name for f in self.fields])

    def activate(self, api: PluginApi) -> None:
        api.register_asset(STYLESHEET)
        for field in self.fields:
            register_custom_field(api, field)
        api.on(HOOK_TOPIC_CREATED, self.on_topic_created, name="assign_custom_fields")

    async def on_topic_created(self, topic: Topic, opts: dict[str, Any], user: User) -> None:
        """Copy field values from the creation options and save the topic once."""
        assigned = [field.name for field in self.fields if field.name in opts]
        if not assigned:
            return
        for name in assigned:
            setattr(topic, name, opts[name])

        db = async_object_session(topic)
        if db is None:
            raise RuntimeError(f"Topic {topic.id} is not attached to a session")
        await save_topic(db, topic)
        logger.debug("Topic %s custom fields %s set on creation by user %s", topic.id, assigned, user.id)
