import uuid
from datetime import datetime
from typing import Any
from pydantic import BaseModel, Field


class Coordinates(BaseModel):
    x: float
    y: float


class CommentCreate(BaseModel):
    comment: str = Field(..., min_length=1)
    coordinates: Coordinates | None = None
    markup_data: dict[str, Any] | None = None
    parent_comment_id: uuid.UUID | None = None


class CommentRead(BaseModel):
    model_config = {"from_attributes": True}
    id: uuid.UUID
    drawing_id: uuid.UUID
    author: str
    comment: str
    x_coordinate: float | None
    y_coordinate: float | None
    markup_data: dict[str, Any] | None
    parent_comment_id: uuid.UUID | None
    resolved: bool
    resolved_by: str | None
    resolved_at: datetime | None
    created_at: datetime
