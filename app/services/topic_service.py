import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.exceptions import TopicNotFoundError, UserNotFoundError
from app.models.topic import Topic
from app.models.user import User
from app.plugins.events import EventBus, event_bus
from app.plugins.hooks import HOOK_TOPIC_CREATED
from app.services.custom_field_service import load_custom_fields, save_custom_fields

logger = logging.getLogger(__name__)


async def create_user(db: AsyncSession, username: str) -> User:
    user = User(username=username)
    db.add(user)
    await db.commit()
    return user


async def get_user(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


async def create_topic(
    db: AsyncSession,
    user: User,
    title: str,
    body: str,
    opts: dict[str, Any] | None = None,
    events: EventBus | None = None,
) -> Topic:
    """
    Create a topic and fire topic.created with (topic, opts, user).

    The topic is committed before handlers run; handlers that change it are
    responsible for saving it again.
    """
    topic = Topic(title=title, body=body, user_id=user.id)
    topic.set_loaded_custom_fields({})
    db.add(topic)
    await db.commit()
    logger.info("Topic %s created by user %s", topic.id, user.id)

    await (events or event_bus).trigger(HOOK_TOPIC_CREATED, topic, opts or {}, user)
    return topic


async def get_topic(db: AsyncSession, topic_id: int) -> Topic:
    """Fetch a topic with all of its custom fields loaded."""
    result = await db.execute(select(Topic).where(Topic.id == topic_id))
    topic = result.scalars().first()
    if topic is None:
        raise TopicNotFoundError(topic_id)
    await load_custom_fields(db, topic)
    return topic


async def save_topic(db: AsyncSession, topic: Topic) -> Topic:
    """Persist a topic together with its changed custom fields."""
    db.add(topic)
    await db.flush()
    await save_custom_fields(db, topic)
    await db.commit()
    return topic
