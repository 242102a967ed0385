"""Article 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text

from app.database import Base
from app.models.content_base import ContentMixin


class Article(ContentMixin, Base):
    __tablename__ = "article"
    CONTENT_TYPE = "article"
    PK_FIELD = "article_id"

    article_id = Column(Integer, primary_key=True, autoincrement=True)
    content = Column(Text, nullable=False)
    excerpt = Column(String(500))
    featured_image = Column(String(500))
