from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.custom_fields import CustomFieldTypeRegistry, HasCustomFields
from datetime import datetime


class Topic(HasCustomFields, Base):
    __tablename__ = "topics"

    custom_field_types = CustomFieldTypeRegistry("Topic")

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String, index=True, nullable=False)
    body = Column(Text, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="topics", lazy="joined")
    revisions = relationship(
        "TopicRevision",
        back_populates="topic",
        cascade="all, delete-orphan",
        order_by="TopicRevision.number",
    )


class TopicCustomField(Base):
    """Key/value row of the topic extension-field store."""

    __tablename__ = "topic_custom_fields"

    id = Column(Integer, primary_key=True, index=True)
    topic_id = Column(Integer, ForeignKey("topics.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(256), nullable=False)
    value = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("topic_id", "name", name="unique_topic_custom_field"),
        Index("idx_topic_custom_fields_name", "name"),
    )


class TopicRevision(Base):
    """Committed audit record of one topic edit."""

    __tablename__ = "topic_revisions"

    id = Column(Integer, primary_key=True, index=True)
    topic_id = Column(Integer, ForeignKey("topics.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    number = Column(Integer, nullable=False)
    modifications = Column(Text, nullable=False)  # JSON: {field: [old, new]}
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    topic = relationship("Topic", back_populates="revisions")
