"""다섯 가지 콘텐츠 모델이 공유하는 컬럼/관계 믹스인입니다."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import declared_attr, relationship
from sqlalchemy.sql import func

from app.models.taxonomy import taxonomy_link_table


class ContentMixin:
    CONTENT_TYPE = ""
    PK_FIELD = ""

    title = Column(String(255), nullable=False)
    slug = Column(String(280), unique=True, nullable=False)
    status = Column(String(20), nullable=False, default="DRAFT")  # DRAFT/PUBLISHED/ARCHIVED/SCHEDULED
    published_at = Column(DateTime)
    scheduled_publish_at = Column(DateTime)
    view_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    @declared_attr
    def author_id(cls):
        return Column(Integer, ForeignKey("author.author_id"), nullable=False, index=True)

    @declared_attr
    def user_id(cls):
        return Column(Integer, ForeignKey("users.user_id"), nullable=True)

    @declared_attr
    def author(cls):
        return relationship("Author", lazy="joined")

    @declared_attr
    def categories(cls):
        table = taxonomy_link_table(cls.__tablename__, cls.PK_FIELD, "category", "category_id")
        return relationship("Category", secondary=table, lazy="selectin", order_by="Category.name")

    @declared_attr
    def tags(cls):
        table = taxonomy_link_table(cls.__tablename__, cls.PK_FIELD, "tag", "tag_id")
        return relationship("Tag", secondary=table, lazy="selectin", order_by="Tag.name")

    @property
    def content_id(self) -> int:
        return getattr(self, self.PK_FIELD)
