"""
Topic list loading.

Custom fields named in the preload set are fetched for the whole page of
topics in a single query before the list is serialized.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.models.topic import Topic
from app.services.custom_field_service import preload_custom_fields

logger = logging.getLogger(__name__)

_preloaded_custom_fields: list[str] = []


def add_preloaded_custom_field(name: str) -> None:
    if name not in _preloaded_custom_fields:
        _preloaded_custom_fields.append(name)
        logger.info("Topic list will preload custom field %s", name)


def remove_preloaded_custom_field(name: str) -> None:
    """Drop a preload hint; used when resetting plugin state."""
    if name in _preloaded_custom_fields:
        _preloaded_custom_fields.remove(name)


def preloaded_custom_fields() -> list[str]:
    return list(_preloaded_custom_fields)


async def list_topics(db: AsyncSession, skip: int = 0, limit: int = 30) -> list[Topic]:
    """Return the latest topics with the preload set attached."""
    result = await db.execute(
        select(Topic).order_by(Topic.created_at.desc(), Topic.id.desc()).offset(skip).limit(limit)
    )
    topics = list(result.scalars().all())
    await preload_custom_fields(db, topics, _preloaded_custom_fields)
    return topics
