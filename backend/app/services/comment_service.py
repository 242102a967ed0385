"""Comment Service 도메인 서비스 레이어입니다. 비즈니스 규칙과 데이터 접근 흐름을 캡슐화합니다."""

import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from app.models.comment import Comment
from app.models.user import User
from app.schemas.comment import CommentCreate, CommentUpdate
from app.services import cache_service, content_service, notification_service, queue_service
from app.utils.helpers import page_meta
from app.utils.permissions import ensure_owner, ensure_owner_or_admin

logger = logging.getLogger(__name__)


def _get_comment(db: Session, comment_id: int) -> Comment:
    comment = (
        db.query(Comment)
        .options(selectinload(Comment.replies).selectinload(Comment.replies))
        .filter(Comment.comment_id == comment_id)
        .first()
    )
    if not comment:
        raise HTTPException(status_code=404, detail=f"Comment with id {comment_id} not found")
    return comment


def _notify(db: Session, comment: Comment, content, parent: Optional[Comment], current_user: User) -> None:
    if parent is not None:
        recipient_id = parent.user_id
        noti_type = "comment_reply"
        title = f"{current_user.username}님이 댓글에 답글을 남겼습니다."
    else:
        recipient_id = content.user_id
        noti_type = "content_comment"
        title = f"{current_user.username}님이 '{content.title}'에 댓글을 남겼습니다."
    if recipient_id is None or int(recipient_id) == int(current_user.user_id):
        return
    notification_service.create_notification(
        db,
        user_id=recipient_id,
        noti_type=noti_type,
        title=title,
        message=comment.content[:200],
        link_url=f"/{comment.content_type}/{comment.content_id}#comment-{comment.comment_id}",
    )
    queue_service.enqueue_comment_email(comment.comment_id, recipient_id)


def create_comment(db: Session, data: CommentCreate, current_user: User) -> Comment:
    content_type = data.content_type.value
    content = content_service.get_content_or_404(db, content_type, data.content_id)

    parent = None
    if data.parent_id is not None:
        parent = db.query(Comment).filter(Comment.comment_id == data.parent_id).first()
        if not parent:
            raise HTTPException(status_code=404, detail=f"Parent comment with id {data.parent_id} not found")
        if parent.content_type != content_type or parent.content_id != data.content_id:
            raise HTTPException(status_code=400, detail="Parent comment must belong to the same content")

    comment = Comment(
        content=data.content,
        content_type=content_type,
        content_id=data.content_id,
        parent_id=data.parent_id,
        user_id=current_user.user_id,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)
    logger.info("[comment] created comment_id=%s on %s:%s", comment.comment_id, content_type, data.content_id)
    cache_service.invalidate_content(content_type, data.content_id)

    _notify(db, comment, content, parent, current_user)
    return comment


def list_comments(
    db: Session,
    *,
    content_type: Optional[str] = None,
    content_id: Optional[int] = None,
    user_id: Optional[int] = None,
    page: int = 1,
    limit: int = 10,
) -> Dict[str, Any]:
    page = max(page, 1)
    limit = min(max(limit, 1), 100)
    q = db.query(Comment).filter(Comment.parent_id.is_(None))
    if content_type:
        q = q.filter(Comment.content_type == content_type)
    if content_id is not None:
        q = q.filter(Comment.content_id == content_id)
    if user_id is not None:
        q = q.filter(Comment.user_id == user_id)
    total = q.count()
    rows = (
        q.options(selectinload(Comment.replies).selectinload(Comment.replies))
        .order_by(Comment.created_at.desc(), Comment.comment_id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {"data": rows, "meta": page_meta(total, page, limit)}


def list_for_content(db: Session, content_type: str, content_id: int, page: int = 1, limit: int = 10) -> Dict[str, Any]:
    content_service.get_content_or_404(db, content_type, content_id)
    return list_comments(db, content_type=content_type, content_id=content_id, page=page, limit=limit)


def count_for_content(db: Session, content_type: str, content_id: int) -> int:
    content_service.get_model(content_type)
    return int(
        db.query(func.count(Comment.comment_id))
        .filter(Comment.content_type == content_type, Comment.content_id == content_id)
        .scalar()
        or 0
    )


def get_comment(db: Session, comment_id: int) -> Comment:
    return _get_comment(db, comment_id)


def update_comment(db: Session, comment_id: int, data: CommentUpdate, current_user: User) -> Comment:
    comment = _get_comment(db, comment_id)
    ensure_owner(current_user, comment.user_id, "You can only edit your own comments")
    comment.content = data.content
    db.commit()
    db.refresh(comment)
    return comment


def delete_comment(db: Session, comment_id: int, current_user: User) -> None:
    comment = _get_comment(db, comment_id)
    ensure_owner_or_admin(current_user, comment.user_id, "You can only delete your own comments")
    db.delete(comment)
    db.commit()
    cache_service.invalidate_content(comment.content_type, comment.content_id)
