from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional
from datetime import datetime


class TopicCreate(BaseModel):
    """Topic creation request; keys beyond title/body are creation options for plugins."""

    title: str = Field(..., min_length=1, title="Topic Title", description="The title of the topic.")
    body: str = Field(..., min_length=1, title="First Post", description="The body of the first post.")

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "example": {
                "title": "Mechanical keyboard deal",
                "body": "Down to its lowest price this year.",
                "Price": "79.99",
                "URL": "https://example.com/keyboard",
                "Store": "Acme",
            }
        },
    )


class TopicUpdate(BaseModel):
    """Topic edit request; every key sent is handed to the revisor."""

    title: Optional[str] = Field(None, min_length=1, title="Updated Title")
    body: Optional[str] = Field(None, min_length=1, title="Updated Body")

    model_config = ConfigDict(extra="allow")


class TopicResponse(BaseModel):
    id: int = Field(..., title="Topic ID")
    title: str = Field(..., title="Topic Title")
    body: str = Field(..., title="First Post")
    user_id: int = Field(..., title="Author ID")
    created_at: datetime = Field(..., title="Created At")
    updated_at: datetime = Field(..., title="Updated At")

    model_config = ConfigDict(from_attributes=True)


class TopicListItemResponse(BaseModel):
    id: int = Field(..., title="Topic ID")
    title: str = Field(..., title="Topic Title")
    user_id: int = Field(..., title="Author ID")
    created_at: datetime = Field(..., title="Created At")

    model_config = ConfigDict(from_attributes=True)


class TopicRevisionResponse(BaseModel):
    number: int
    user_id: Optional[int]
    modifications: dict[str, list[Any]]
    created_at: datetime
