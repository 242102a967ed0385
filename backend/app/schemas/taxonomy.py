"""Category/Tag 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from typing import Optional

from pydantic import BaseModel, Field


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class CategoryOut(BaseModel):
    category_id: int
    name: str
    slug: str
    description: Optional[str] = None

    model_config = {"from_attributes": True}


class TagCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)


class TagOut(BaseModel):
    tag_id: int
    name: str
    slug: str

    model_config = {"from_attributes": True}
