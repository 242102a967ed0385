"""GalleryItem 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text

from app.database import Base
from app.models.content_base import ContentMixin


class GalleryItem(ContentMixin, Base):
    __tablename__ = "gallery_item"
    CONTENT_TYPE = "gallery_item"
    PK_FIELD = "gallery_item_id"

    gallery_item_id = Column(Integer, primary_key=True, autoincrement=True)
    description = Column(Text)
    file_url = Column(String(500), nullable=False)
    file_type = Column(String(50), nullable=False)
    original_url = Column(String(500))
    medium_url = Column(String(500))
    thumbnail_url = Column(String(500))
    width = Column(Integer)
    height = Column(Integer)

    @property
    def content(self):
        return self.description

    @property
    def excerpt(self):
        return None
