"""카테고리/태그 분류 체계의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Table
from sqlalchemy.sql import func
from app.database import Base


class Category(Base):
    __tablename__ = "category"

    category_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
    slug = Column(String(120), unique=True, nullable=False)
    description = Column(Text)
    created_at = Column(DateTime, server_default=func.now())


class Tag(Base):
    __tablename__ = "tag"

    tag_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), unique=True, nullable=False)
    slug = Column(String(60), unique=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


def taxonomy_link_table(content_table: str, content_pk: str, target_table: str, target_pk: str) -> Table:
    """콘텐츠 테이블과 분류 테이블을 잇는 다대다 연결 테이블을 만든다."""
    return Table(
        f"{content_table}_{target_table}",
        Base.metadata,
        Column(
            "content_id",
            Integer,
            ForeignKey(f"{content_table}.{content_pk}", ondelete="CASCADE"),
            primary_key=True,
        ),
        Column(
            target_pk,
            Integer,
            ForeignKey(f"{target_table}.{target_pk}", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
