"""Celery 앱 구성입니다. 이메일/이미지/검색 색인/예약 발행 작업 큐를 정의합니다."""

import logging
from contextlib import contextmanager

from celery import Celery, Task

from app.config import settings
from app.database import SessionLocal

logger = logging.getLogger(__name__)

QUEUE_EMAIL = "email"
QUEUE_IMAGE = "image-processing"
QUEUE_SEARCH = "search-indexing"
QUEUE_PUBLISH = "scheduled-publish"


class PortalTask(Task):
    """실패/재시도를 로그로 남기는 공통 작업 베이스."""

    autoretry_for = (Exception,)
    retry_backoff = settings.JOB_RETRY_BACKOFF
    retry_backoff_max = 600
    retry_jitter = False
    max_retries = max(settings.JOB_MAX_ATTEMPTS - 1, 0)

    def on_retry(self, exc, task_id, args, kwargs, einfo):
        logger.warning("[queue] %s[%s] retrying: %s", self.name, task_id, exc)

    def on_failure(self, exc, task_id, args, kwargs, einfo):
        logger.error("[queue] %s[%s] failed args=%s: %s", self.name, task_id, args, exc)


celery = Celery("content_portal", task_cls=PortalTask)

celery.conf.update(
    broker_url=settings.CELERY_BROKER_URL,
    result_backend=settings.CELERY_RESULT_BACKEND,
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
    task_eager_propagates=False,
    task_ignore_result=True,
    worker_hijack_root_logger=False,
    task_acks_late=True,
    task_default_queue="default",
    task_routes={
        "email.*": {"queue": QUEUE_EMAIL},
        "image.*": {"queue": QUEUE_IMAGE},
        "search.*": {"queue": QUEUE_SEARCH},
        "publish.*": {"queue": QUEUE_PUBLISH},
        "maintenance.*": {"queue": "default"},
    },
    beat_schedule={
        "check-scheduled-content": {
            "task": "publish.check_scheduled_content",
            "schedule": float(settings.SCHEDULED_PUBLISH_INTERVAL_SECONDS),
        },
        "purge-expired-sessions": {
            "task": "maintenance.purge_expired_sessions",
            "schedule": 60.0 * 60,
        },
    },
)


@contextmanager
def task_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
