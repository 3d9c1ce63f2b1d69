from .custom_fields import CustomFieldTypeRegistry, FieldKind, HasCustomFields
from .topic import Topic, TopicCustomField, TopicRevision
from .user import User

__all__ = [
    "CustomFieldTypeRegistry",
    "FieldKind",
    "HasCustomFields",
    "Topic",
    "TopicCustomField",
    "TopicRevision",
    "User",
]
