"""
Topic serializers with plugin-extensible attributes.

Each serializer renders its base pydantic response model and then appends
the attributes plugins registered for it, in registration order.

    topic_view       detail payload of a single topic (object: TopicView)
    topic_list_item  one row of a topic list (object: preload-hydrated Topic)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import CustomFieldsNotLoadedError, NotPreloadedError
from app.models.topic import Topic
from app.schemas.topic import TopicListItemResponse, TopicResponse
from app.services.custom_field_service import load_custom_fields

logger = logging.getLogger(__name__)

TOPIC_VIEW = "topic_view"
TOPIC_LIST_ITEM = "topic_list_item"
SERIALIZERS = (TOPIC_VIEW, TOPIC_LIST_ITEM)


@dataclass(frozen=True)
class SerializerAttribute:
    name: str
    getter: Callable[[Any], Any]
    include_condition: Callable[[Any], bool] | None = None


class SerializerExtensions:
    """Attributes added to each serializer by plugins."""

    def __init__(self) -> None:
        self._attributes: dict[str, list[SerializerAttribute]] = {name: [] for name in SERIALIZERS}

    def add(self, serializer: str, attribute: SerializerAttribute) -> None:
        if serializer not in self._attributes:
            raise ValueError(f"Unknown serializer: {serializer}")
        attributes = self._attributes[serializer]
        for index, existing in enumerate(attributes):
            if existing.name == attribute.name:
                attributes[index] = attribute
                return
        attributes.append(attribute)

    def attributes(self, serializer: str) -> list[SerializerAttribute]:
        return list(self._attributes.get(serializer, []))

    def clear(self) -> None:
        for attributes in self._attributes.values():
            attributes.clear()


serializer_extensions = SerializerExtensions()


@dataclass
class TopicView:
    """Detail-view wrapper around a fully loaded topic."""

    topic: Topic


class ExtensibleSerializer:
    name: ClassVar[str]
    schema: ClassVar[type[BaseModel]]

    def __init__(self, obj: Any, extensions: SerializerExtensions | None = None) -> None:
        self.object = obj
        self.extensions = extensions or serializer_extensions

    def base_object(self) -> Any:
        return self.object

    def as_dict(self) -> dict[str, Any]:
        payload = self.schema.model_validate(self.base_object()).model_dump(mode="json")
        for attribute in self.extensions.attributes(self.name):
            if attribute.include_condition is not None and not attribute.include_condition(self.object):
                continue
            payload[attribute.name] = attribute.getter(self.object)
        return payload


class TopicViewSerializer(ExtensibleSerializer):
    name = TOPIC_VIEW
    schema = TopicResponse

    def base_object(self) -> Topic:
        return self.object.topic


class TopicListItemSerializer(ExtensibleSerializer):
    name = TOPIC_LIST_ITEM
    schema = TopicListItemResponse


async def serialize_topic_list(
    db: AsyncSession,
    topics: Sequence[Topic],
    extensions: SerializerExtensions | None = None,
) -> list[dict[str, Any]]:
    """
    Serialize list rows, loading a topic's custom fields on demand.

    Rows whose attributes only need preloaded fields are serialized without
    touching the database; a row that asks for a field outside the preload
    set has its custom fields loaded individually first.
    """
    rows: list[dict[str, Any]] = []
    for topic in topics:
        serializer = TopicListItemSerializer(topic, extensions)
        try:
            rows.append(serializer.as_dict())
        except (NotPreloadedError, CustomFieldsNotLoadedError) as exc:
            logger.debug("Topic %s field %s not preloaded; loading custom fields", topic.id, exc.field_name)
            await load_custom_fields(db, topic)
            rows.append(serializer.as_dict())
    return rows
