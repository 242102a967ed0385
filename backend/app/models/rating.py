"""Rating 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, UniqueConstraint, CheckConstraint
from sqlalchemy.sql import func
from app.database import Base


class Rating(Base):
    __tablename__ = "rating"

    rating_id = Column(Integer, primary_key=True, autoincrement=True)
    value = Column(Integer, nullable=False)
    content_type = Column(String(30), nullable=False)
    content_id = Column(Integer, nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "content_type", "content_id", name="uq_rating_user_content"),
        CheckConstraint("value >= 1 AND value <= 5", name="ck_rating_value_range"),
        Index("idx_rating_content", "content_type", "content_id"),
    )
