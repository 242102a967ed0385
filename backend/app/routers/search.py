"""Search 기능 API 라우터입니다. MeiliSearch 검색/자동완성과 색인 관리 엔드포인트를 제공합니다."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import require_roles
from app.models.enums import ContentType
from app.models.user import User
from app.schemas.common import MessageOut
from app.schemas.search import AutocompleteItem, PopularQuery, QueuedOut, SearchResponse
from app.services import content_service, queue_service
from app.services.search_service import SearchService
from app.utils.permissions import ADMIN

router = APIRouter(prefix="/api/v1/search", tags=["search"])


def _csv(raw: Optional[str]) -> Optional[List[str]]:
    if not raw:
        return None
    return [part.strip() for part in raw.split(",") if part.strip()]


@router.get("", response_model=SearchResponse)
def search(
    q: str = Query(..., min_length=1, max_length=200),
    content_types: Optional[str] = Query(None, description="comma separated content types"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    filter: Optional[str] = Query(None, max_length=500),
    facets: Optional[str] = Query(None, description="comma separated facet attributes"),
):
    types = _csv(content_types)
    for content_type in types or []:
        content_service.get_model(content_type)
    return SearchService().search(
        q,
        content_types=types,
        limit=limit,
        offset=offset,
        extra_filter=filter,
        facets=_csv(facets),
    )


@router.get("/autocomplete", response_model=List[AutocompleteItem])
def autocomplete(
    q: str = Query(..., min_length=1, max_length=100),
    limit: int = Query(8, ge=1, le=20),
):
    return SearchService().autocomplete(q, limit=limit)


@router.get("/popular", response_model=List[PopularQuery])
def popular_queries(limit: int = Query(10, ge=1, le=100)):
    return SearchService().popular_queries(limit=limit)


@router.post("/reindex", response_model=QueuedOut, status_code=202)
def reindex(_current_user: User = Depends(require_roles(ADMIN))):
    return {"message": "Full reindex queued", "queued": queue_service.enqueue_reindex_all()}


@router.post("/clear-cache", response_model=MessageOut)
def clear_cache(_current_user: User = Depends(require_roles(ADMIN))):
    removed = SearchService().clear_search_cache()
    return {"message": f"Cleared {removed} cached search entries"}


@router.post("/index/{content_type}/{content_id}", response_model=QueuedOut, status_code=202)
def index_one(
    content_type: ContentType,
    content_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(ADMIN)),
):
    content_service.get_content_or_404(db, content_type.value, content_id)
    queued = queue_service.enqueue_index_content(content_type.value, content_id)
    return {"message": f"Indexing queued for {content_type.value} {content_id}", "queued": queued}
