"""BlogPost 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text

from app.database import Base
from app.models.content_base import ContentMixin


class BlogPost(ContentMixin, Base):
    __tablename__ = "blog_post"
    CONTENT_TYPE = "blog_post"
    PK_FIELD = "blog_post_id"

    blog_post_id = Column(Integer, primary_key=True, autoincrement=True)
    content = Column(Text, nullable=False)
    excerpt = Column(String(500))
    featured_image = Column(String(500))
