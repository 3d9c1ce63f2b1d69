from .topic import TopicCreate, TopicListItemResponse, TopicResponse, TopicRevisionResponse, TopicUpdate

# Define the public API of this module
__all__ = [
    "TopicCreate",
    "TopicUpdate",
    "TopicResponse",
    "TopicListItemResponse",
    "TopicRevisionResponse",
]
