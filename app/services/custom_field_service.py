"""Load, save and bulk-preload rows of the topic custom-field store."""

import logging
from collections.abc import Iterable, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.topic import Topic, TopicCustomField

logger = logging.getLogger(__name__)


async def load_custom_fields(db: AsyncSession, topic: Topic) -> Topic:
    """Read every custom field of one topic into its in-memory store."""
    result = await db.execute(select(TopicCustomField).where(TopicCustomField.topic_id == topic.id))
    registry = Topic.custom_field_types
    values = {row.name: registry.deserialize(row.name, row.value) for row in result.scalars().all()}
    topic.set_loaded_custom_fields(values)
    return topic


async def save_custom_fields(db: AsyncSession, topic: Topic) -> list[str]:
    """
    Write changed custom fields of a topic.

    A changed field is deleted and re-inserted; fields set to None are only
    deleted. The caller owns the transaction (flush only, no commit).

    Returns:
        Names of the fields that were written.
    """
    changes = topic.custom_fields_changes()
    if not changes:
        return []

    registry = Topic.custom_field_types
    await db.execute(
        delete(TopicCustomField).where(
            TopicCustomField.topic_id == topic.id,
            TopicCustomField.name.in_(list(changes)),
        )
    )
    for name, value in changes.items():
        stored = registry.serialize(name, value)
        if stored is not None:
            db.add(TopicCustomField(topic_id=topic.id, name=name, value=stored))
    await db.flush()

    topic.mark_custom_fields_saved()
    logger.debug("Saved custom fields %s for topic %s", sorted(changes), topic.id)
    return list(changes)


async def preload_custom_fields(db: AsyncSession, topics: Sequence[Topic], names: Iterable[str]) -> None:
    """
    Attach the named custom fields to every topic in one query.

    Names absent from storage are preloaded as None, so later reads of a
    preloaded name never fall through to the database.
    """
    names = list(dict.fromkeys(names))
    if not topics or not names:
        return

    by_id = {topic.id: {name: None for name in names} for topic in topics}
    registry = Topic.custom_field_types
    result = await db.execute(
        select(TopicCustomField.topic_id, TopicCustomField.name, TopicCustomField.value).where(
            TopicCustomField.topic_id.in_(list(by_id)),
            TopicCustomField.name.in_(names),
        )
    )
    for topic_id, name, value in result.all():
        by_id[topic_id][name] = registry.deserialize(name, value)

    for topic in topics:
        topic.set_preloaded_custom_fields(by_id[topic.id])
