"""Author 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class AuthorCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    bio: Optional[str] = Field(None, max_length=2000)
    email: Optional[EmailStr] = None
    website: Optional[str] = Field(None, max_length=500)
    profile_image: Optional[str] = Field(None, max_length=500)


class AuthorUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    bio: Optional[str] = Field(None, max_length=2000)
    email: Optional[EmailStr] = None
    website: Optional[str] = Field(None, max_length=500)
    profile_image: Optional[str] = Field(None, max_length=500)


class AuthorSummary(BaseModel):
    author_id: int
    name: str
    slug: str
    profile_image: Optional[str] = None

    model_config = {"from_attributes": True}


class AuthorOut(AuthorSummary):
    bio: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    content_counts: Optional[dict] = None

    model_config = {"from_attributes": True}


class AuthorContentItem(BaseModel):
    content_type: str
    content_id: int
    title: str
    slug: str
    excerpt: Optional[str] = None
    status: str
    published_at: Optional[datetime] = None
    view_count: int = 0
