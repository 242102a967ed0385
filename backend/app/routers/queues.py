"""Queues 운영 API 라우터입니다. 작업 큐 상태 조회와 즉시 발행 요청을 제공합니다."""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import require_roles
from app.models.enums import ContentType
from app.models.user import User
from app.schemas.search import QueuedOut
from app.services import content_service, queue_service
from app.utils.permissions import ADMIN, EDITOR_ROLES

router = APIRouter(prefix="/api/v1/queues", tags=["queues"])


@router.get("/stats")
def queue_stats(_current_user: User = Depends(require_roles(ADMIN))) -> Dict[str, Any]:
    return queue_service.get_stats()


@router.post("/publish/{content_type}/{content_id}", response_model=QueuedOut, status_code=202)
def publish_now(
    content_type: ContentType,
    content_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(*EDITOR_ROLES)),
):
    content_service.get_content_or_404(db, content_type.value, content_id)
    queued = queue_service.enqueue_publish(content_type.value, content_id)
    return {"message": f"Publishing queued for {content_type.value} {content_id}", "queued": queued}
