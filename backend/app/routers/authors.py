"""Authors 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import require_roles
from app.models.user import User
from app.schemas.author import AuthorContentItem, AuthorCreate, AuthorOut, AuthorUpdate
from app.schemas.common import MessageOut, Page
from app.services import author_service
from app.utils.permissions import ADMIN, EDITOR_ROLES

router = APIRouter(prefix="/api/v1/authors", tags=["authors"])


@router.get("", response_model=Page[AuthorOut])
def list_authors(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=200),
    sort_by: str = "name",
    sort_order: str = Query("asc", pattern="^(asc|desc)$"),
    db: Session = Depends(get_db),
):
    return author_service.list_authors(
        db, search=search, page=page, limit=limit, sort_by=sort_by, sort_order=sort_order
    )


@router.post("", response_model=AuthorOut, status_code=201)
def create_author(
    data: AuthorCreate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(*EDITOR_ROLES)),
):
    return author_service.create_author(db, data)


@router.get("/slug/{slug}", response_model=AuthorOut)
def get_author_by_slug(slug: str, db: Session = Depends(get_db)):
    return author_service.get_author_by_slug(db, slug)


@router.get("/{author_id}", response_model=AuthorOut)
def get_author(author_id: int, db: Session = Depends(get_db)):
    return author_service.get_author(db, author_id)


@router.get("/{author_id}/content", response_model=Page[AuthorContentItem])
def get_author_content(
    author_id: int,
    content_type: str = Query("articles", max_length=30),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return author_service.get_author_content(db, author_id, content_type, page=page, limit=limit)


@router.put("/{author_id}", response_model=AuthorOut)
def update_author(
    author_id: int,
    data: AuthorUpdate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(*EDITOR_ROLES)),
):
    return author_service.update_author(db, author_id, data)


@router.delete("/{author_id}", response_model=MessageOut)
def delete_author(
    author_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(ADMIN)),
):
    author_service.delete_author(db, author_id)
    return {"message": "Author deleted successfully"}
