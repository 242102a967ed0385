"""콘텐츠 변경 이력(버전 스냅샷)을 저장하는 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.sql import func

from app.database import Base


class ContentVersion(Base):
    __tablename__ = "content_version"

    version_id = Column(Integer, primary_key=True, autoincrement=True)
    content_type = Column(String(30), nullable=False)
    content_id = Column(Integer, nullable=False)
    version_number = Column(Integer, nullable=False)
    title = Column(String(255), nullable=False)
    content = Column(Text)
    excerpt = Column(String(500))
    metadata_json = Column("metadata", Text)  # JSON string
    change_note = Column(String(500))
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("content_type", "content_id", "version_number", name="uq_content_version_number"),
        Index("idx_content_version_entity", "content_type", "content_id", "version_number"),
    )
