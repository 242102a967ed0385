"""Comment 도메인의 SQLAlchemy 모델 정의입니다. content_type/content_id로 모든 콘텐츠에 연결됩니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Comment(Base):
    __tablename__ = "comment"

    comment_id = Column(Integer, primary_key=True, autoincrement=True)
    content = Column(Text, nullable=False)
    content_type = Column(String(30), nullable=False)  # article/blog_post/wiki_page/gallery_item/story
    content_id = Column(Integer, nullable=False)
    parent_id = Column(Integer, ForeignKey("comment.comment_id", ondelete="CASCADE"), nullable=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", lazy="joined")
    parent = relationship("Comment", remote_side=[comment_id], back_populates="replies")
    replies = relationship(
        "Comment",
        back_populates="parent",
        cascade="all, delete-orphan",
        order_by="Comment.created_at",
    )

    __table_args__ = (
        Index("idx_comment_content", "content_type", "content_id", "created_at"),
    )
