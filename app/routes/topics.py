import json
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.topic import TopicCreate, TopicRevisionResponse, TopicUpdate
from app.serializers.topic import TopicView, TopicViewSerializer, serialize_topic_list
from app.services.topic_list_service import list_topics
from app.services.topic_revisor import get_revisions, topic_revisor
from app.services.topic_service import create_topic, get_topic

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/topics", status_code=status.HTTP_201_CREATED)
async def create_topic_route(
    payload: TopicCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    topic = await create_topic(db, current_user, payload.title, payload.body, opts=payload.model_dump())
    return TopicViewSerializer(TopicView(topic)).as_dict()


@router.put("/topics/{topic_id}")
async def update_topic_route(
    topic_id: int,
    payload: TopicUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    topic = await get_topic(db, topic_id)
    await topic_revisor.revise(db, topic, payload.model_dump(exclude_unset=True), current_user)
    return TopicViewSerializer(TopicView(topic)).as_dict()


@router.get("/topics/{topic_id}")
async def get_topic_route(topic_id: int, db: AsyncSession = Depends(get_db)):
    topic = await get_topic(db, topic_id)
    return TopicViewSerializer(TopicView(topic)).as_dict()


@router.get("/topics")
async def list_topics_route(
    skip: int = Query(0, ge=0),
    limit: int = Query(30, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    topics = await list_topics(db, skip=skip, limit=limit)
    return {"topics": await serialize_topic_list(db, topics)}


@router.get("/topics/{topic_id}/revisions", response_model=list[TopicRevisionResponse])
async def list_revisions_route(topic_id: int, db: AsyncSession = Depends(get_db)):
    await get_topic(db, topic_id)
    revisions = await get_revisions(db, topic_id)
    return [
        TopicRevisionResponse(
            number=revision.number,
            user_id=revision.user_id,
            modifications=json.loads(revision.modifications),
            created_at=revision.created_at,
        )
        for revision in revisions
    ]
