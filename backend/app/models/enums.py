"""콘텐츠 포털 전역에서 공유하는 열거형 값 정의입니다."""

from enum import Enum


class Role(str, Enum):
    USER = "USER"
    MODERATOR = "MODERATOR"
    ADMIN = "ADMIN"


class ContentStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"
    SCHEDULED = "SCHEDULED"


class ContentType(str, Enum):
    ARTICLE = "article"
    BLOG_POST = "blog_post"
    WIKI_PAGE = "wiki_page"
    GALLERY_ITEM = "gallery_item"
    STORY = "story"
