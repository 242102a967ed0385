"""Stories 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import require_roles
from app.models.enums import ContentStatus
from app.models.story import Story
from app.models.user import User
from app.schemas.common import MessageOut, Page
from app.schemas.content import StoryCreate, StoryOut, StorySeriesOut, StoryUpdate
from app.services import content_service, story_service
from app.utils.permissions import ADMIN, EDITOR_ROLES

router = APIRouter(prefix="/api/v1/stories", tags=["stories"])


@router.get("", response_model=Page[StoryOut])
def list_stories(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=200),
    status: Optional[ContentStatus] = None,
    author_id: Optional[int] = None,
    category: Optional[str] = None,
    tag: Optional[str] = None,
    series: Optional[str] = Query(None, max_length=100),
    sort_by: str = "created_at",
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    db: Session = Depends(get_db),
):
    params = dict(page=page, limit=limit, search=search, status=status.value if status else None,
                  author_id=author_id, category=category, tag=tag, series=series,
                  sort_by=sort_by, sort_order=sort_order)
    return content_service.cached_list(
        Story, StoryOut, params, lambda: story_service.list_stories(db, **params)
    )


@router.get("/series", response_model=StorySeriesOut)
def list_series(db: Session = Depends(get_db)):
    return {"series": story_service.get_series(db)}


@router.post("", response_model=StoryOut, status_code=201)
def create_story(
    data: StoryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*EDITOR_ROLES)),
):
    return content_service.create_content(db, Story, data, current_user)


@router.get("/slug/{slug}", response_model=StoryOut)
def get_story_by_slug(slug: str, db: Session = Depends(get_db)):
    return content_service.get_by_slug(db, Story, slug)


@router.get("/{story_id}", response_model=StoryOut)
def get_story(story_id: int, db: Session = Depends(get_db)):
    return content_service.get_content(db, Story, story_id)


@router.put("/{story_id}", response_model=StoryOut)
def update_story(
    story_id: int,
    data: StoryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*EDITOR_ROLES)),
):
    return content_service.update_content(db, Story, story_id, data, current_user)


@router.delete("/{story_id}", response_model=MessageOut)
def delete_story(
    story_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(ADMIN)),
):
    content_service.delete_content(db, Story, story_id)
    return {"message": "Story deleted successfully"}
