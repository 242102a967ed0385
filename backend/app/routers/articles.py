"""Articles 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import require_roles
from app.models.article import Article
from app.models.enums import ContentStatus
from app.models.user import User
from app.schemas.common import MessageOut, Page
from app.schemas.content import ArticleCreate, ArticleOut, ArticleUpdate
from app.services import content_service
from app.utils.permissions import ADMIN, EDITOR_ROLES

router = APIRouter(prefix="/api/v1/articles", tags=["articles"])


@router.get("", response_model=Page[ArticleOut])
def list_articles(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=200),
    status: Optional[ContentStatus] = None,
    author_id: Optional[int] = None,
    category: Optional[str] = None,
    tag: Optional[str] = None,
    sort_by: str = "created_at",
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    db: Session = Depends(get_db),
):
    params = dict(page=page, limit=limit, search=search, status=status.value if status else None,
                  author_id=author_id, category=category, tag=tag, sort_by=sort_by, sort_order=sort_order)
    return content_service.cached_list(
        Article, ArticleOut, params, lambda: content_service.list_content(db, Article, **params)
    )


@router.post("", response_model=ArticleOut, status_code=201)
def create_article(
    data: ArticleCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*EDITOR_ROLES)),
):
    return content_service.create_content(db, Article, data, current_user)


@router.get("/slug/{slug}", response_model=ArticleOut)
def get_article_by_slug(slug: str, db: Session = Depends(get_db)):
    return content_service.get_by_slug(db, Article, slug)


@router.get("/{article_id}", response_model=ArticleOut)
def get_article(article_id: int, db: Session = Depends(get_db)):
    return content_service.get_content(db, Article, article_id)


@router.put("/{article_id}", response_model=ArticleOut)
def update_article(
    article_id: int,
    data: ArticleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*EDITOR_ROLES)),
):
    return content_service.update_content(db, Article, article_id, data, current_user)


@router.delete("/{article_id}", response_model=MessageOut)
def delete_article(
    article_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(ADMIN)),
):
    content_service.delete_content(db, Article, article_id)
    return {"message": "Article deleted successfully"}
