"""WikiPage 도메인의 SQLAlchemy 모델 정의입니다. parent_id로 트리 구조를 표현합니다."""

from sqlalchemy import Column, Integer, Text, ForeignKey
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.content_base import ContentMixin


class WikiPage(ContentMixin, Base):
    __tablename__ = "wiki_page"
    CONTENT_TYPE = "wiki_page"
    PK_FIELD = "wiki_page_id"

    wiki_page_id = Column(Integer, primary_key=True, autoincrement=True)
    content = Column(Text, nullable=False)
    parent_id = Column(Integer, ForeignKey("wiki_page.wiki_page_id"), nullable=True, index=True)

    parent = relationship("WikiPage", remote_side=[wiki_page_id], back_populates="children")
    children = relationship("WikiPage", back_populates="parent", order_by="WikiPage.title")

    @property
    def excerpt(self):
        return None
