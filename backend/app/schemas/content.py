"""콘텐츠(기사/블로그/위키/갤러리/스토리) 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from app.models.enums import ContentStatus
from app.schemas.author import AuthorSummary
from app.schemas.taxonomy import CategoryOut, TagOut


class ContentCreateBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    status: ContentStatus = ContentStatus.DRAFT
    author_id: int
    category_ids: Optional[List[int]] = None
    tag_ids: Optional[List[int]] = None
    scheduled_publish_at: Optional[datetime] = None

    @model_validator(mode="after")
    def scheduled_requires_time(self):
        if self.status == ContentStatus.SCHEDULED and self.scheduled_publish_at is None:
            raise ValueError("scheduled_publish_at is required when status is SCHEDULED")
        return self


class ContentUpdateBase(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    status: Optional[ContentStatus] = None
    author_id: Optional[int] = None
    category_ids: Optional[List[int]] = None
    tag_ids: Optional[List[int]] = None
    scheduled_publish_at: Optional[datetime] = None


class ContentOutBase(BaseModel):
    title: str
    slug: str
    status: str
    published_at: Optional[datetime] = None
    scheduled_publish_at: Optional[datetime] = None
    view_count: int = 0
    author_id: int
    user_id: Optional[int] = None
    author: Optional[AuthorSummary] = None
    categories: List[CategoryOut] = []
    tags: List[TagOut] = []
    comment_count: int = 0
    rating_count: int = 0
    average_rating: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# --- Article / BlogPost -------------------------------------------------

class ArticleCreate(ContentCreateBase):
    content: str = Field(..., min_length=1)
    excerpt: Optional[str] = Field(None, max_length=500)
    featured_image: Optional[str] = Field(None, max_length=500)


class ArticleUpdate(ContentUpdateBase):
    content: Optional[str] = Field(None, min_length=1)
    excerpt: Optional[str] = Field(None, max_length=500)
    featured_image: Optional[str] = Field(None, max_length=500)


class ArticleOut(ContentOutBase):
    article_id: int
    content: str
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None


class BlogPostCreate(ArticleCreate):
    pass


class BlogPostUpdate(ArticleUpdate):
    pass


class BlogPostOut(ContentOutBase):
    blog_post_id: int
    content: str
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None


# --- Story ----------------------------------------------------------------

class StoryCreate(ArticleCreate):
    series: Optional[str] = Field(None, max_length=100)


class StoryUpdate(ArticleUpdate):
    series: Optional[str] = Field(None, max_length=100)


class StoryOut(ContentOutBase):
    story_id: int
    content: str
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    series: Optional[str] = None


# --- Wiki -----------------------------------------------------------------

class WikiPageCreate(ContentCreateBase):
    content: str = Field(..., min_length=1)
    parent_id: Optional[int] = None


class WikiPageUpdate(ContentUpdateBase):
    content: Optional[str] = Field(None, min_length=1)
    parent_id: Optional[int] = None


class WikiPageOut(ContentOutBase):
    wiki_page_id: int
    content: str
    parent_id: Optional[int] = None
    children_count: int = 0
    child_pages: Optional[List[WikiBreadcrumb]] = None


class WikiTreeNode(BaseModel):
    wiki_page_id: int
    title: str
    slug: str
    children: List[WikiTreeNode] = []
    has_more_children: bool = False


class WikiBreadcrumb(BaseModel):
    wiki_page_id: int
    title: str
    slug: str

    model_config = {"from_attributes": True}


# --- Gallery --------------------------------------------------------------

class GalleryItemCreate(ContentCreateBase):
    description: Optional[str] = Field(None, max_length=1000)


class GalleryItemUpdate(ContentUpdateBase):
    description: Optional[str] = Field(None, max_length=1000)


class GalleryItemOut(ContentOutBase):
    gallery_item_id: int
    description: Optional[str] = None
    file_url: str
    file_type: str
    original_url: Optional[str] = None
    medium_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


class StorySeriesOut(BaseModel):
    series: List[str]


WikiTreeNode.model_rebuild()
WikiPageOut.model_rebuild()
