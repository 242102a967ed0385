"""Story 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, Index

from app.database import Base
from app.models.content_base import ContentMixin


class Story(ContentMixin, Base):
    __tablename__ = "story"
    CONTENT_TYPE = "story"
    PK_FIELD = "story_id"

    story_id = Column(Integer, primary_key=True, autoincrement=True)
    content = Column(Text, nullable=False)
    excerpt = Column(String(500))
    featured_image = Column(String(500))
    series = Column(String(100))

    __table_args__ = (
        Index("idx_story_series", "series"),
    )
