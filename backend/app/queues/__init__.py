"""백그라운드 작업 큐 패키지입니다. 작업 모듈을 import해 Celery 레지스트리에 등록합니다."""

from app.queues.celery_app import celery
from app.queues import email_tasks, image_tasks, publish_tasks, search_tasks  # noqa: F401

__all__ = ["celery"]
