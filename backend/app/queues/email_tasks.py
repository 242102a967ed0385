"""이메일 발송 작업입니다."""

import logging

from app.config import settings
from app.models.comment import Comment
from app.models.notification import Notification
from app.models.user import User
from app.queues.celery_app import celery, task_session
from app.services import email_service

logger = logging.getLogger(__name__)


def _deliver(to: str, template_name: str, context: dict) -> bool:
    if not email_service.send_template(to, template_name, context):
        raise RuntimeError(f"email delivery failed: {template_name} -> {to}")
    return True


@celery.task(name="email.send_welcome")
def send_welcome(user_id: int) -> bool:
    with task_session() as db:
        user = db.query(User).filter(User.user_id == user_id).first()
        if not user:
            logger.warning("[email] welcome skipped, user %s not found", user_id)
            return False
        return _deliver(
            user.email,
            "welcome",
            {"name": user.name or user.username, "login_url": f"{settings.FRONTEND_URL}/login"},
        )


@celery.task(name="email.send_notification")
def send_notification(noti_id: int) -> bool:
    with task_session() as db:
        noti = db.query(Notification).filter(Notification.noti_id == noti_id).first()
        if not noti or not noti.user:
            logger.warning("[email] notification %s skipped, not found", noti_id)
            return False
        return _deliver(
            noti.user.email,
            "notification",
            {
                "name": noti.user.name or noti.user.username,
                "title": noti.title,
                "message": noti.message or "",
                "link_url": f"{settings.FRONTEND_URL}{noti.link_url}" if noti.link_url else None,
            },
        )


@celery.task(name="email.send_comment_notification")
def send_comment_notification(comment_id: int, recipient_id: int) -> bool:
    from app.services.content_service import get_model, pk_column

    with task_session() as db:
        comment = db.query(Comment).filter(Comment.comment_id == comment_id).first()
        recipient = db.query(User).filter(User.user_id == recipient_id).first()
        if not comment or not recipient:
            logger.warning("[email] comment notification %s skipped, missing rows", comment_id)
            return False
        model = get_model(comment.content_type)
        content = db.query(model).filter(pk_column(model) == comment.content_id).first()
        title = content.title if content else comment.content_type
        return _deliver(
            recipient.email,
            "comment_notification",
            {
                "recipient_name": recipient.name or recipient.username,
                "commenter_name": comment.user.name or comment.user.username,
                "content_title": title,
                "comment_content": comment.content,
                "content_url": f"{settings.FRONTEND_URL}/{comment.content_type}/{comment.content_id}",
            },
        )
