"""예약 발행 작업입니다. beat가 주기적으로 check_scheduled_content를 실행합니다."""

import logging

from app.models.enums import ContentStatus
from app.queues.celery_app import celery, task_session
from app.services import content_service, notification_service
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)


def _publish(db, row) -> None:
    content_service.publish(db, row)
    if row.user_id is None:
        return
    notification_service.create_notification(
        db,
        user_id=row.user_id,
        noti_type="content_published",
        title=f"'{row.title}' 콘텐츠가 발행되었습니다.",
        link_url=f"/{row.CONTENT_TYPE}/{row.slug}",
        send_email=True,
    )


@celery.task(name="publish.publish_content")
def publish_content(content_type: str, content_id: int) -> bool:
    with task_session() as db:
        model = content_service.get_model(content_type)
        row = db.query(model).filter(content_service.pk_column(model) == content_id).first()
        if not row:
            logger.warning("[publish] %s %s not found", content_type, content_id)
            return False
        if row.status == ContentStatus.PUBLISHED.value:
            return False
        _publish(db, row)
        logger.info("[publish] published %s:%s", content_type, content_id)
        return True


@celery.task(name="publish.check_scheduled_content")
def check_scheduled_content() -> int:
    with task_session() as db:
        due = content_service.due_scheduled(db, utcnow())
        for row in due:
            _publish(db, row)
            logger.info("[publish] scheduled %s:%s published", row.CONTENT_TYPE, row.content_id)
        return len(due)


@celery.task(name="maintenance.purge_expired_sessions")
def purge_expired_sessions() -> int:
    from app.services import auth_service

    with task_session() as db:
        deleted = auth_service.purge_expired_sessions(db)
        if deleted:
            logger.info("[maintenance] purged %d expired sessions", deleted)
        return deleted
