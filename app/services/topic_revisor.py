"""
Topic revision pipeline.

TopicRevisor applies an edit to a topic through per-field callbacks. Each
tracked field registers `callback(topic_changes, value)`; the callback is
expected to record the change on `topic_changes` and apply the new value to
`topic_changes.topic`. After all callbacks ran the topic and its custom
fields are saved and, if anything was recorded, a TopicRevision is written.
"""

import inspect
import json
import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.topic import Topic, TopicRevision
from app.models.user import User
from app.plugins.events import EventBus, event_bus
from app.plugins.hooks import HOOK_TOPIC_EDITED
from app.services.topic_service import save_topic

logger = logging.getLogger(__name__)

TopicFieldCallback = Callable[["TopicChanges", Any], Any]


class TopicChanges:
    """Change set of one in-flight revise."""

    def __init__(self, topic: Topic, user: User) -> None:
        self.topic = topic
        self.user = user
        self.diff: dict[str, list[Any]] = {}
        self.errors: list[str] = []

    def record_change(self, field_name: str, old_value: Any, new_value: Any) -> None:
        if old_value == new_value:
            return
        self.diff[field_name] = [old_value, new_value]

    def add_error(self, message: str) -> None:
        """Abort the revise; callbacks call this to reject an edit."""
        self.errors.append(message)

    @property
    def errored(self) -> bool:
        return bool(self.errors)

    @property
    def changed(self) -> bool:
        return bool(self.diff)


def _track_attribute(name: str) -> TopicFieldCallback:
    def callback(tc: TopicChanges, value: Any) -> None:
        old_value = getattr(tc.topic, name)
        if value is None or value == old_value:
            return
        tc.record_change(name, old_value, value)
        setattr(tc.topic, name, value)

    return callback


class TopicRevisor:
    def __init__(self) -> None:
        self._tracked_topic_fields: dict[str, TopicFieldCallback] = {}

    def track_topic_field(self, name: str, callback: TopicFieldCallback | None = None) -> None:
        """Track `name`; without a callback the topic attribute of that name is assigned."""
        self._tracked_topic_fields[name] = callback or _track_attribute(name)
        logger.debug("Tracking topic field %s", name)

    def untrack_topic_field(self, name: str) -> None:
        """Stop tracking `name`; used when resetting plugin state."""
        self._tracked_topic_fields.pop(name, None)

    def tracked_topic_fields(self) -> list[str]:
        return list(self._tracked_topic_fields)

    async def revise(
        self,
        db: AsyncSession,
        topic: Topic,
        fields: dict[str, Any],
        editor: User,
        events: EventBus | None = None,
    ) -> TopicChanges:
        """
        Apply `fields` to `topic` and commit the result.

        Keys without a tracked callback are ignored. Callbacks run in the order
        their fields were tracked; a callback error aborts the revise and
        nothing is committed.
        """
        changes = TopicChanges(topic, editor)

        for name, callback in self._tracked_topic_fields.items():
            if name not in fields or changes.errored:
                continue
            result = callback(changes, fields[name])
            if inspect.isawaitable(result):
                await result

        ignored = sorted(set(fields) - set(self._tracked_topic_fields))
        if ignored:
            logger.debug("Revise of topic %s ignored untracked fields %s", topic.id, ignored)

        if changes.errored:
            logger.info("Revise of topic %s rejected: %s", topic.id, changes.errors)
            await db.rollback()
            return changes

        if changes.changed:
            result = await db.execute(
                select(func.coalesce(func.max(TopicRevision.number), 0)).where(TopicRevision.topic_id == topic.id)
            )
            number = result.scalar_one() + 1
            db.add(
                TopicRevision(
                    topic_id=topic.id,
                    user_id=editor.id,
                    number=number,
                    modifications=json.dumps(changes.diff, default=str),
                )
            )
            logger.info("Topic %s revised (revision %s, fields %s)", topic.id, number, sorted(changes.diff))

        await save_topic(db, topic)
        await (events or event_bus).trigger(HOOK_TOPIC_EDITED, topic, changes, editor)
        return changes


async def get_revisions(db: AsyncSession, topic_id: int) -> list[TopicRevision]:
    result = await db.execute(
        select(TopicRevision).where(TopicRevision.topic_id == topic_id).order_by(TopicRevision.number)
    )
    return list(result.scalars().all())


# ── Global singleton ──────────────────────────────────────────────────────────
topic_revisor = TopicRevisor()
topic_revisor.track_topic_field("title")
topic_revisor.track_topic_field("body")
