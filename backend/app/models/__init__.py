"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from app.models.user import User
from app.models.session import UserSession
from app.models.author import Author
from app.models.taxonomy import Category, Tag
from app.models.article import Article
from app.models.blog_post import BlogPost
from app.models.wiki_page import WikiPage
from app.models.gallery_item import GalleryItem
from app.models.story import Story
from app.models.comment import Comment
from app.models.rating import Rating
from app.models.content_version import ContentVersion
from app.models.notification import Notification

CONTENT_MODELS = {
    Article.CONTENT_TYPE: Article,
    BlogPost.CONTENT_TYPE: BlogPost,
    WikiPage.CONTENT_TYPE: WikiPage,
    GalleryItem.CONTENT_TYPE: GalleryItem,
    Story.CONTENT_TYPE: Story,
}

__all__ = [
    "User", "UserSession",
    "Author",
    "Category", "Tag",
    "Article", "BlogPost", "WikiPage", "GalleryItem", "Story",
    "Comment",
    "Rating",
    "ContentVersion",
    "Notification",
    "CONTENT_MODELS",
]
