"""백그라운드 작업 큐 투입을 감싸는 서비스입니다. 브로커 장애 시 요청을 실패시키지 않고 경고만 남깁니다."""

import logging
from typing import Any, Dict

from app.config import settings

logger = logging.getLogger(__name__)


def _enqueue(task_name: str, *args) -> bool:
    from app.queues import celery  # local import to avoid cyclic side effects

    try:
        celery.tasks[task_name].delay(*args)
    except Exception as exc:
        logger.warning("[queue] %s%s enqueue skipped: %s", task_name, args, exc)
        return False
    return True


def enqueue_welcome_email(user_id: int) -> bool:
    return _enqueue("email.send_welcome", user_id)


def enqueue_notification_email(noti_id: int) -> bool:
    return _enqueue("email.send_notification", noti_id)


def enqueue_comment_email(comment_id: int, recipient_id: int) -> bool:
    return _enqueue("email.send_comment_notification", comment_id, recipient_id)


def enqueue_image_processing(gallery_item_id: int) -> bool:
    return _enqueue("image.process", gallery_item_id)


def enqueue_image_optimize(url: str) -> bool:
    return _enqueue("image.optimize", url)


def enqueue_index_content(content_type: str, content_id: int) -> bool:
    return _enqueue("search.index_content", content_type, content_id)


def enqueue_remove_content(content_type: str, content_id: int) -> bool:
    return _enqueue("search.remove_content", content_type, content_id)


def enqueue_reindex_all() -> bool:
    return _enqueue("search.reindex_all")


def enqueue_publish(content_type: str, content_id: int) -> bool:
    return _enqueue("publish.publish_content", content_type, content_id)


def get_stats() -> Dict[str, Any]:
    from app.queues import celery

    if settings.CELERY_TASK_ALWAYS_EAGER:
        return {"mode": "eager", "broker": "in-process", "workers": {}, "registered_tasks": _registered(celery)}

    try:
        inspector = celery.control.inspect(timeout=1.0)
        active = inspector.active() or {}
        reserved = inspector.reserved() or {}
        scheduled = inspector.scheduled() or {}
    except Exception as exc:
        logger.warning("[queue] stats unavailable: %s", exc)
        return {"mode": "broker", "broker": "unreachable", "workers": {}, "registered_tasks": _registered(celery)}

    workers = {
        name: {
            "active": len(active.get(name, [])),
            "reserved": len(reserved.get(name, [])),
            "scheduled": len(scheduled.get(name, [])),
        }
        for name in set(active) | set(reserved) | set(scheduled)
    }
    return {"mode": "broker", "broker": "ok", "workers": workers, "registered_tasks": _registered(celery)}


def _registered(celery) -> list:
    return sorted(name for name in celery.tasks if not name.startswith("celery."))
