"""Tests for the topic revision pipeline."""

import json

import pytest
from sqlalchemy.future import select

from app.models.topic import TopicRevision
from app.plugins.events import EventBus
from app.plugins.hooks import HOOK_TOPIC_EDITED
from app.services.topic_revisor import TopicChanges, TopicRevisor, get_revisions
from app.services.topic_service import create_topic, get_topic


@pytest.fixture
def revisor():
    revisor = TopicRevisor()
    revisor.track_topic_field("title")
    revisor.track_topic_field("body")
    return revisor


class TestTopicChanges:
    def test_record_change(self):
        tc = TopicChanges(topic=None, user=None)
        tc.record_change("Price", "1", "2")
        assert tc.diff == {"Price": ["1", "2"]}
        assert tc.changed

    def test_equal_values_not_recorded(self):
        tc = TopicChanges(topic=None, user=None)
        tc.record_change("Price", "1", "1")
        tc.record_change("URL", None, None)
        assert tc.diff == {}
        assert not tc.changed

    def test_errors(self):
        tc = TopicChanges(topic=None, user=None)
        assert not tc.errored
        tc.add_error("nope")
        assert tc.errored


class TestTopicRevisor:
    async def test_builtin_title_tracking(self, db, user, revisor):
        topic = await create_topic(db, user, "Old", "body")
        changes = await revisor.revise(db, topic, {"title": "New"}, user)

        assert changes.diff == {"title": ["Old", "New"]}
        db.expunge_all()
        assert (await get_topic(db, topic.id)).title == "New"

    async def test_unchanged_value_not_recorded(self, db, user, revisor):
        topic = await create_topic(db, user, "Same", "body")
        changes = await revisor.revise(db, topic, {"title": "Same"}, user)
        assert changes.diff == {}
        assert await get_revisions(db, topic.id) == []

    async def test_untracked_fields_ignored(self, db, user, revisor):
        topic = await create_topic(db, user, "Title", "body")
        changes = await revisor.revise(db, topic, {"unknown": "x"}, user)
        assert changes.diff == {}

    async def test_callbacks_run_in_tracking_order(self, db, user, revisor):
        order = []
        revisor.track_topic_field("b", lambda tc, v: order.append("b"))
        revisor.track_topic_field("a", lambda tc, v: order.append("a"))
        topic = await create_topic(db, user, "Title", "body")

        await revisor.revise(db, topic, {"a": 1, "b": 2}, user)
        assert order == ["b", "a"]

    async def test_async_callback_awaited(self, db, user, revisor):
        async def callback(tc, value):
            tc.record_change("score", None, value)

        revisor.track_topic_field("score", callback)
        topic = await create_topic(db, user, "Title", "body")
        changes = await revisor.revise(db, topic, {"score": 3}, user)
        assert changes.diff == {"score": [None, 3]}

    async def test_revision_numbers_increment(self, db, user, revisor):
        topic = await create_topic(db, user, "v0", "body")
        await revisor.revise(db, topic, {"title": "v1"}, user)
        await revisor.revise(db, topic, {"title": "v2", "body": "new body"}, user)

        revisions = await get_revisions(db, topic.id)
        assert [r.number for r in revisions] == [1, 2]
        assert json.loads(revisions[1].modifications) == {
            "title": ["v1", "v2"],
            "body": ["body", "new body"],
        }
        assert revisions[0].user_id == user.id

    async def test_errored_revise_commits_nothing(self, db, user, revisor):
        def reject(tc, value):
            tc.add_error("price locked")

        revisor.track_topic_field("locked", reject)
        topic = await create_topic(db, user, "Title", "body")
        changes = await revisor.revise(db, topic, {"title": "New", "locked": True}, user)

        assert changes.errored
        assert (await db.execute(select(TopicRevision))).scalars().all() == []

    async def test_edited_event_fired(self, db, user, revisor):
        bus = EventBus()
        seen = []
        bus.on(HOOK_TOPIC_EDITED, lambda topic, tc, editor: seen.append((topic.id, tc.diff, editor.id)))
        topic = await create_topic(db, user, "Old", "body")

        await revisor.revise(db, topic, {"title": "New"}, user, events=bus)
        assert seen == [(topic.id, {"title": ["Old", "New"]}, user.id)]
