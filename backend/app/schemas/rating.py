"""Rating 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.enums import ContentType


class RatingCreate(BaseModel):
    value: int = Field(..., ge=1, le=5)
    content_type: ContentType
    content_id: int


class RatingUpdate(BaseModel):
    value: int = Field(..., ge=1, le=5)


class RatingOut(BaseModel):
    rating_id: int
    value: int
    content_type: str
    content_id: int
    user_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RatingAverageOut(BaseModel):
    average: float
    count: int
