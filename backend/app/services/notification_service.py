"""Notification Service 도메인 서비스 레이어입니다. 사용자 알림 적재/조회/읽음 처리를 담당합니다."""

import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.notification import Notification

logger = logging.getLogger(__name__)

MAX_LISTED = 50


def get_notifications(db: Session, user_id: int, unread_only: bool = False, limit: int = MAX_LISTED) -> List[Notification]:
    q = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        q = q.filter(Notification.is_read == False)  # noqa: E712
    return (
        q.order_by(Notification.created_at.desc(), Notification.noti_id.desc())
        .limit(min(max(limit, 1), MAX_LISTED))
        .all()
    )


def unread_count(db: Session, user_id: int) -> int:
    return int(
        db.query(func.count(Notification.noti_id))
        .filter(Notification.user_id == user_id, Notification.is_read == False)  # noqa: E712
        .scalar()
        or 0
    )


def mark_read(db: Session, noti_id: int, user_id: int) -> Notification:
    # 다른 사용자의 알림은 존재 여부도 드러내지 않는다.
    noti = (
        db.query(Notification)
        .filter(Notification.noti_id == noti_id, Notification.user_id == user_id)
        .first()
    )
    if not noti:
        raise HTTPException(status_code=404, detail=f"Notification with id {noti_id} not found")
    noti.is_read = True
    db.commit()
    db.refresh(noti)
    return noti


def mark_all_read(db: Session, user_id: int) -> int:
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read == False)  # noqa: E712
        .update({"is_read": True}, synchronize_session=False)
    )
    db.commit()
    return int(updated or 0)


def create_notification(
    db: Session,
    user_id: int,
    noti_type: str,
    title: str,
    message: Optional[str] = None,
    link_url: Optional[str] = None,
    send_email: bool = False,
) -> Notification:
    noti = Notification(
        user_id=user_id,
        noti_type=noti_type,
        title=title,
        message=message,
        link_url=link_url,
    )
    db.add(noti)
    db.commit()
    db.refresh(noti)
    logger.info("[notification] %s -> user_id=%s", noti_type, user_id)
    if send_email:
        from app.services import queue_service

        queue_service.enqueue_notification_email(noti.noti_id)
    return noti
