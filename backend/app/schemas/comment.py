"""Comment 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.enums import ContentType
from app.schemas.user import UserSummary


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)
    content_type: ContentType
    content_id: int
    parent_id: Optional[int] = None


class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)


class CommentOut(BaseModel):
    comment_id: int
    content: str
    content_type: str
    content_id: int
    parent_id: Optional[int] = None
    user_id: int
    user: Optional[UserSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    replies: List[CommentOut] = []

    model_config = {"from_attributes": True}


class CommentCountOut(BaseModel):
    content_type: str
    content_id: int
    count: int


CommentOut.model_rebuild()
