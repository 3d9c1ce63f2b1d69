from .topic import (
    TOPIC_LIST_ITEM,
    TOPIC_VIEW,
    SerializerAttribute,
    SerializerExtensions,
    TopicListItemSerializer,
    TopicView,
    TopicViewSerializer,
    serialize_topic_list,
    serializer_extensions,
)

__all__ = [
    "TOPIC_LIST_ITEM",
    "TOPIC_VIEW",
    "SerializerAttribute",
    "SerializerExtensions",
    "TopicListItemSerializer",
    "TopicView",
    "TopicViewSerializer",
    "serialize_topic_list",
    "serializer_extensions",
]
