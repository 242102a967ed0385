"""Blog Posts 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import require_roles
from app.models.blog_post import BlogPost
from app.models.enums import ContentStatus
from app.models.user import User
from app.schemas.common import MessageOut, Page
from app.schemas.content import BlogPostCreate, BlogPostOut, BlogPostUpdate
from app.services import content_service
from app.utils.permissions import ADMIN, EDITOR_ROLES

router = APIRouter(prefix="/api/v1/blog-posts", tags=["blog-posts"])


@router.get("", response_model=Page[BlogPostOut])
def list_blog_posts(
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
        BlogPost, BlogPostOut, params, lambda: content_service.list_content(db, BlogPost, **params)
    )


@router.post("", response_model=BlogPostOut, status_code=201)
def create_blog_post(
    data: BlogPostCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*EDITOR_ROLES)),
):
    return content_service.create_content(db, BlogPost, data, current_user)


@router.get("/slug/{slug}", response_model=BlogPostOut)
def get_blog_post_by_slug(slug: str, db: Session = Depends(get_db)):
    return content_service.get_by_slug(db, BlogPost, slug)


@router.get("/{blog_post_id}", response_model=BlogPostOut)
def get_blog_post(blog_post_id: int, db: Session = Depends(get_db)):
    return content_service.get_content(db, BlogPost, blog_post_id)


@router.put("/{blog_post_id}", response_model=BlogPostOut)
def update_blog_post(
    blog_post_id: int,
    data: BlogPostUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*EDITOR_ROLES)),
):
    return content_service.update_content(db, BlogPost, blog_post_id, data, current_user)


@router.delete("/{blog_post_id}", response_model=MessageOut)
def delete_blog_post(
    blog_post_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(ADMIN)),
):
    content_service.delete_content(db, BlogPost, blog_post_id)
    return {"message": "Blog post deleted successfully"}
