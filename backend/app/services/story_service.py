"""Story Service 도메인 서비스 레이어입니다. 연재(series) 단위 조회를 제공합니다."""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.models.enums import ContentStatus
from app.models.story import Story
from app.services import content_service


def list_stories(db: Session, *, series: Optional[str] = None, page: int = 1, limit: int = 10,
                 sort_by: str = "created_at", sort_order: str = "desc", **filters) -> Dict[str, Any]:
    q = content_service.base_list_query(db, Story, **filters)
    if series:
        q = q.filter(Story.series == series)
    return content_service.paginate(db, Story, q, page=page, limit=limit, sort_by=sort_by, sort_order=sort_order)


def get_series(db: Session) -> List[str]:
    rows = (
        db.query(Story.series)
        .filter(
            Story.status == ContentStatus.PUBLISHED.value,
            Story.series.isnot(None),
            Story.series != "",
        )
        .distinct()
        .order_by(Story.series.asc())
        .all()
    )
    return [row[0] for row in rows]
