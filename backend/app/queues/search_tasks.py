"""검색 색인 동기화 작업입니다. MeiliSearch가 꺼져 있으면 아무 일도 하지 않습니다."""

import logging

from app.queues.celery_app import celery, task_session
from app.services.search_service import SearchService

logger = logging.getLogger(__name__)


@celery.task(name="search.index_content")
def index_content(content_type: str, content_id: int) -> bool:
    with task_session() as db:
        service = SearchService(db)
        if not service.is_enabled():
            return False
        return service.index_content(content_type, content_id)


@celery.task(name="search.remove_content")
def remove_content(content_type: str, content_id: int) -> bool:
    service = SearchService()
    if not service.is_enabled():
        return False
    return service.remove_content(content_type, content_id)


@celery.task(name="search.reindex_all")
def reindex_all() -> int:
    with task_session() as db:
        service = SearchService(db)
        if not service.is_enabled():
            return 0
        service.initialize_index()
        return service.reindex_all()
