"""Author Service 도메인 서비스 레이어입니다. 비즈니스 규칙과 데이터 접근 흐름을 캡슐화합니다."""

import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import CONTENT_MODELS
from app.models.author import Author
from app.models.enums import ContentStatus
from app.schemas.author import AuthorCreate, AuthorUpdate
from app.utils.helpers import make_slug, page_meta

logger = logging.getLogger(__name__)

# 목록 API에서 쓰던 복수형 이름도 허용한다.
CONTENT_TYPE_ALIASES = {
    "articles": "article",
    "blog_posts": "blog_post",
    "wiki_pages": "wiki_page",
    "gallery_items": "gallery_item",
    "stories": "story",
}
AUTHOR_SORT_FIELDS = ("name", "created_at", "updated_at")


def _get_author(db: Session, author_id: int) -> Author:
    author = db.query(Author).filter(Author.author_id == author_id).first()
    if not author:
        raise HTTPException(status_code=404, detail=f"Author with id {author_id} not found")
    return author


def _ensure_slug_available(db: Session, slug: str, exclude_id: Optional[int] = None) -> None:
    q = db.query(Author.author_id).filter(Author.slug == slug)
    if exclude_id is not None:
        q = q.filter(Author.author_id != exclude_id)
    if q.first():
        raise HTTPException(status_code=409, detail=f"Author with slug '{slug}' already exists")


def _commit(db: Session, author: Author) -> Author:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=f"Author with slug '{author.slug}' already exists")
    db.refresh(author)
    return author


def content_counts(db: Session, author_id: int) -> Dict[str, int]:
    return {
        content_type: int(db.query(func.count(model.author_id)).filter(model.author_id == author_id).scalar() or 0)
        for content_type, model in CONTENT_MODELS.items()
    }


def _with_counts(db: Session, author: Author) -> Author:
    setattr(author, "content_counts", content_counts(db, author.author_id))
    return author


def create_author(db: Session, data: AuthorCreate) -> Author:
    slug = make_slug(data.name)
    _ensure_slug_available(db, slug)
    author = Author(slug=slug, **data.model_dump())
    db.add(author)
    author = _commit(db, author)
    logger.info("[author] created author_id=%s slug=%s", author.author_id, author.slug)
    return _with_counts(db, author)


def list_authors(
    db: Session,
    *,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    sort_by: str = "name",
    sort_order: str = "asc",
) -> Dict[str, Any]:
    page = max(page, 1)
    limit = min(max(limit, 1), 100)
    q = db.query(Author)
    if search:
        pattern = f"%{search.strip()}%"
        q = q.filter(or_(Author.name.ilike(pattern), Author.bio.ilike(pattern)))
    column = getattr(Author, sort_by if sort_by in AUTHOR_SORT_FIELDS else "name")
    q = q.order_by(column.desc() if sort_order == "desc" else column.asc())
    total = q.count()
    rows = q.offset((page - 1) * limit).limit(limit).all()
    return {"data": [_with_counts(db, row) for row in rows], "meta": page_meta(total, page, limit)}


def get_author(db: Session, author_id: int) -> Author:
    return _with_counts(db, _get_author(db, author_id))


def get_author_by_slug(db: Session, slug: str) -> Author:
    author = db.query(Author).filter(Author.slug == slug).first()
    if not author:
        raise HTTPException(status_code=404, detail=f"Author with slug '{slug}' not found")
    return _with_counts(db, author)


def update_author(db: Session, author_id: int, data: AuthorUpdate) -> Author:
    author = _get_author(db, author_id)
    fields = data.model_dump(exclude_unset=True)
    name = fields.pop("name", None)
    if name and name != author.name:
        slug = make_slug(name)
        _ensure_slug_available(db, slug, exclude_id=author.author_id)
        author.name = name
        author.slug = slug
    for key, value in fields.items():
        setattr(author, key, value)
    return _with_counts(db, _commit(db, author))


def delete_author(db: Session, author_id: int) -> None:
    author = _get_author(db, author_id)
    counts = content_counts(db, author_id)
    if any(counts.values()):
        raise HTTPException(
            status_code=400,
            detail="Cannot delete an author who still owns content. Reassign or delete the content first.",
        )
    db.delete(author)
    db.commit()


def get_author_content(db: Session, author_id: int, content_type: str, page: int = 1, limit: int = 10) -> Dict[str, Any]:
    _get_author(db, author_id)
    key = CONTENT_TYPE_ALIASES.get(content_type, content_type)
    model = CONTENT_MODELS.get(key)
    if model is None:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid content type '{content_type}'. Allowed: {', '.join(CONTENT_MODELS)}",
        )
    page = max(page, 1)
    limit = min(max(limit, 1), 100)
    q = db.query(model).filter(
        model.author_id == author_id,
        model.status == ContentStatus.PUBLISHED.value,
    )
    total = q.count()
    rows = (
        q.order_by(model.published_at.desc(), getattr(model, model.PK_FIELD).desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    data = [
        {
            "content_type": key,
            "content_id": row.content_id,
            "title": row.title,
            "slug": row.slug,
            "excerpt": getattr(row, "excerpt", None),
            "status": row.status,
            "published_at": row.published_at,
            "view_count": int(row.view_count or 0),
        }
        for row in rows
    ]
    return {"data": data, "meta": page_meta(total, page, limit)}
