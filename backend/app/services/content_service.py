"""Content Service 도메인 서비스 레이어입니다. 다섯 가지 콘텐츠 유형이 공유하는 생성/조회/수정/삭제 규칙을 캡슐화합니다."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from fastapi import HTTPException
from pydantic import BaseModel
from sqlalchemy import asc, desc, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import CONTENT_MODELS
from app.models.author import Author
from app.models.comment import Comment
from app.models.enums import ContentStatus
from app.models.rating import Rating
from app.models.taxonomy import Category, Tag
from app.models.user import User
from app.services import cache_service, queue_service, version_service
from app.utils.helpers import make_slug, page_meta, utcnow

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
SORTABLE_FIELDS = ("created_at", "updated_at", "published_at", "title", "view_count")
SEARCHABLE_FIELDS = ("title", "content", "excerpt", "description")
TAXONOMY_FIELDS = {"category_ids", "tag_ids"}


def get_model(content_type: str):
    model = CONTENT_MODELS.get(str(content_type))
    if model is None:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid content type '{content_type}'. Allowed: {', '.join(CONTENT_MODELS)}",
        )
    return model


def pk_column(model):
    return getattr(model, model.PK_FIELD)


def get_content_or_404(db: Session, content_type: str, content_id: int):
    model = get_model(content_type)
    row = db.query(model).filter(pk_column(model) == content_id).first()
    if not row:
        raise HTTPException(status_code=404, detail=f"{content_type} with id {content_id} not found")
    return row


def _ensure_slug_available(db: Session, model, slug: str, exclude_id: Optional[int] = None) -> None:
    q = db.query(pk_column(model)).filter(model.slug == slug)
    if exclude_id is not None:
        q = q.filter(pk_column(model) != exclude_id)
    if q.first():
        raise HTTPException(status_code=409, detail=f"{model.CONTENT_TYPE} with slug '{slug}' already exists")


def _ensure_author(db: Session, author_id: int) -> Author:
    author = db.query(Author).filter(Author.author_id == author_id).first()
    if not author:
        raise HTTPException(status_code=404, detail=f"Author with id {author_id} not found")
    return author


def _resolve_many(db: Session, model, pk, ids: Iterable[int], label: str) -> list:
    wanted = list(dict.fromkeys(int(i) for i in ids))
    if not wanted:
        return []
    rows = db.query(model).filter(pk.in_(wanted)).all()
    missing = set(wanted) - {getattr(row, pk.key) for row in rows}
    if missing:
        raise HTTPException(status_code=404, detail=f"{label} not found: {', '.join(str(i) for i in sorted(missing))}")
    return rows


def _apply_taxonomy(db: Session, row, category_ids: Optional[List[int]], tag_ids: Optional[List[int]]) -> None:
    if category_ids is not None:
        row.categories = _resolve_many(db, Category, Category.category_id, category_ids, "Categories")
    if tag_ids is not None:
        row.tags = _resolve_many(db, Tag, Tag.tag_id, tag_ids, "Tags")


def _apply_status(row, status: Optional[ContentStatus], scheduled_publish_at=None) -> None:
    if status is None:
        return
    value = ContentStatus(status).value
    if value == ContentStatus.PUBLISHED.value and row.published_at is None:
        row.published_at = utcnow()
    if value == ContentStatus.SCHEDULED.value:
        if scheduled_publish_at is None and row.scheduled_publish_at is None:
            raise HTTPException(status_code=400, detail="scheduled_publish_at is required when status is SCHEDULED")
    elif value == ContentStatus.PUBLISHED.value:
        row.scheduled_publish_at = None
    row.status = value


def _commit_or_conflict(db: Session, slug: str) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=f"Content with slug '{slug}' already exists")


def snapshot(row) -> Dict[str, Any]:
    """버전 저장/검색 색인에 쓰는 콘텐츠 스냅샷."""
    metadata = {
        "slug": row.slug,
        "status": row.status,
        "author_id": row.author_id,
        "category_ids": [c.category_id for c in row.categories],
        "tag_ids": [t.tag_id for t in row.tags],
    }
    for extra in ("featured_image", "series", "parent_id", "file_url", "file_type"):
        if hasattr(row, extra):
            metadata[extra] = getattr(row, extra)
    return {
        "title": row.title,
        "content": getattr(row, "content", None),
        "excerpt": getattr(row, "excerpt", None),
        "metadata": metadata,
    }


def _record_version(db: Session, row, user_id: Optional[int], change_note: Optional[str] = None) -> None:
    data = snapshot(row)
    version_service.auto_save_version(
        db,
        content_type=row.CONTENT_TYPE,
        content_id=row.content_id,
        title=data["title"],
        content=data["content"],
        excerpt=data["excerpt"],
        metadata=data["metadata"],
        user_id=user_id,
        change_note=change_note,
    )


def after_change(row) -> None:
    cache_service.invalidate_content(row.CONTENT_TYPE, row.content_id)
    queue_service.enqueue_index_content(row.CONTENT_TYPE, row.content_id)


def create_content(db: Session, model, data: BaseModel, current_user: User, **extra):
    slug = make_slug(data.title)
    _ensure_slug_available(db, model, slug)
    _ensure_author(db, data.author_id)

    fields = data.model_dump(exclude=TAXONOMY_FIELDS | {"status"})
    fields.update(extra)
    row = model(slug=slug, user_id=current_user.user_id, **fields)
    _apply_status(row, data.status, data.scheduled_publish_at)
    _apply_taxonomy(db, row, data.category_ids, data.tag_ids)

    db.add(row)
    _commit_or_conflict(db, slug)
    db.refresh(row)
    logger.info("[content] created %s:%s slug=%s", model.CONTENT_TYPE, row.content_id, row.slug)

    _record_version(db, row, current_user.user_id)
    after_change(row)
    return row


def apply_title(db: Session, model, row, title: str) -> None:
    if title == row.title:
        return
    slug = make_slug(title)
    _ensure_slug_available(db, model, slug, exclude_id=row.content_id)
    row.title = title
    row.slug = slug


def update_content(db: Session, model, content_id: int, data: BaseModel, current_user: User, **extra):
    row = get_content_or_404(db, model.CONTENT_TYPE, content_id)
    fields = data.model_dump(exclude_unset=True)

    if fields.get("title"):
        apply_title(db, model, row, fields["title"])
    if fields.get("author_id") is not None:
        _ensure_author(db, fields["author_id"])

    for key, value in fields.items():
        if key in TAXONOMY_FIELDS or key in {"title", "status"}:
            continue
        setattr(row, key, value)
    for key, value in extra.items():
        setattr(row, key, value)

    _apply_status(row, fields.get("status"), fields.get("scheduled_publish_at"))
    _apply_taxonomy(db, row, fields.get("category_ids"), fields.get("tag_ids"))

    _commit_or_conflict(db, row.slug)
    db.refresh(row)

    _record_version(db, row, current_user.user_id)
    after_change(row)
    return row


def delete_content(db: Session, model, content_id: int) -> None:
    row = get_content_or_404(db, model.CONTENT_TYPE, content_id)
    content_type = model.CONTENT_TYPE

    db.query(Comment).filter(
        Comment.content_type == content_type,
        Comment.content_id == content_id,
    ).delete(synchronize_session=False)
    db.query(Rating).filter(
        Rating.content_type == content_type,
        Rating.content_id == content_id,
    ).delete(synchronize_session=False)
    version_service.delete_versions_for_content(db, content_type=content_type, content_id=content_id)
    db.delete(row)
    db.commit()
    logger.info("[content] deleted %s:%s", content_type, content_id)

    cache_service.invalidate_content(content_type, content_id)
    queue_service.enqueue_remove_content(content_type, content_id)


def restore_version(db: Session, model, content_id: int, version_number: int, current_user: User):
    row = get_content_or_404(db, model.CONTENT_TYPE, content_id)
    data = version_service.get_restore_data(
        db, content_type=model.CONTENT_TYPE, content_id=content_id, version_number=version_number
    )
    apply_title(db, model, row, data["title"])
    columns = model.__table__.c
    if "content" in columns:
        row.content = data["content"]
    elif "description" in columns:
        row.description = data["content"]
    if "excerpt" in columns:
        row.excerpt = data["excerpt"]

    _commit_or_conflict(db, row.slug)
    db.refresh(row)
    _record_version(db, row, current_user.user_id, change_note=f"Restored from version {version_number}")
    after_change(row)
    return row


def publish(db: Session, row) -> None:
    row.status = ContentStatus.PUBLISHED.value
    if row.published_at is None:
        row.published_at = utcnow()
    row.scheduled_publish_at = None
    db.commit()
    after_change(row)


def attach_stats(db: Session, model, rows: list) -> list:
    if not rows:
        return rows
    ids = [row.content_id for row in rows]
    comment_counts = dict(
        db.query(Comment.content_id, func.count(Comment.comment_id))
        .filter(Comment.content_type == model.CONTENT_TYPE, Comment.content_id.in_(ids))
        .group_by(Comment.content_id)
        .all()
    )
    rating_stats = {
        content_id: (count, avg)
        for content_id, count, avg in db.query(Rating.content_id, func.count(Rating.rating_id), func.avg(Rating.value))
        .filter(Rating.content_type == model.CONTENT_TYPE, Rating.content_id.in_(ids))
        .group_by(Rating.content_id)
        .all()
    }
    for row in rows:
        count, avg = rating_stats.get(row.content_id, (0, None))
        setattr(row, "comment_count", int(comment_counts.get(row.content_id, 0)))
        setattr(row, "rating_count", int(count))
        setattr(row, "average_rating", round(float(avg), 2) if avg is not None else None)
    return rows


def base_list_query(
    db: Session,
    model,
    *,
    search: Optional[str] = None,
    status: Optional[str] = None,
    author_id: Optional[int] = None,
    category: Optional[str] = None,
    tag: Optional[str] = None,
):
    q = db.query(model)
    if search:
        pattern = f"%{search.strip()}%"
        columns = [model.__table__.c[name] for name in SEARCHABLE_FIELDS if name in model.__table__.c]
        q = q.filter(or_(*[col.ilike(pattern) for col in columns]))
    if status:
        q = q.filter(model.status == ContentStatus(status).value)
    if author_id is not None:
        q = q.filter(model.author_id == author_id)
    if category:
        q = q.filter(model.categories.any(Category.slug == category))
    if tag:
        q = q.filter(model.tags.any(Tag.slug == tag))
    return q


def paginate(
    db: Session,
    model,
    q,
    *,
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_LIMIT,
    sort_by: str = "created_at",
    sort_order: str = "desc",
) -> Dict[str, Any]:
    page = max(int(page or DEFAULT_PAGE), 1)
    limit = min(max(int(limit or DEFAULT_LIMIT), 1), MAX_LIMIT)
    if sort_by not in SORTABLE_FIELDS:
        sort_by = "created_at"
    direction = asc if str(sort_order).lower() == "asc" else desc

    total = q.count()
    rows = (
        q.order_by(direction(getattr(model, sort_by)), direction(pk_column(model)))
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {"data": attach_stats(db, model, rows), "meta": page_meta(total, page, limit)}


def list_content(db: Session, model, *, page=DEFAULT_PAGE, limit=DEFAULT_LIMIT, sort_by="created_at", sort_order="desc", **filters):
    q = base_list_query(db, model, **filters)
    return paginate(db, model, q, page=page, limit=limit, sort_by=sort_by, sort_order=sort_order)


def cached_list(model, out_schema, params: Dict[str, Any], loader) -> Dict[str, Any]:
    """목록 결과를 직렬화해 캐시에 보관한다. 쓰기 작업 시 invalidate_content로 비워진다."""
    def _load():
        result = loader()
        return {
            "data": [out_schema.model_validate(row).model_dump(mode="json") for row in result["data"]],
            "meta": result["meta"],
        }

    return cache_service.wrap(cache_service.list_key(model.CONTENT_TYPE, params), _load)


def get_content(db: Session, model, content_id: int):
    row = get_content_or_404(db, model.CONTENT_TYPE, content_id)
    return attach_stats(db, model, [row])[0]


def get_by_slug(db: Session, model, slug: str, increment_view: bool = True):
    key = cache_service.slug_key(model.CONTENT_TYPE, slug)
    content_id = cache_service.get(key)
    row = None
    if content_id is not None:
        row = db.query(model).filter(pk_column(model) == int(content_id)).first()
    if row is None:
        row = db.query(model).filter(model.slug == slug).first()
        if not row:
            raise HTTPException(status_code=404, detail=f"{model.CONTENT_TYPE} with slug '{slug}' not found")
        cache_service.set(key, row.content_id)
    if increment_view:
        row.view_count = int(row.view_count or 0) + 1
        db.commit()
        db.refresh(row)
    return attach_stats(db, model, [row])[0]


def get_by_identifier(db: Session, model, identifier: str):
    if str(identifier).isdigit():
        row = db.query(model).filter(pk_column(model) == int(identifier)).first()
        if row:
            return attach_stats(db, model, [row])[0]
    return get_by_slug(db, model, str(identifier))


def due_scheduled(db: Session, now=None) -> list:
    now = now or utcnow()
    due = []
    for model in CONTENT_MODELS.values():
        due.extend(
            db.query(model)
            .filter(
                model.status == ContentStatus.SCHEDULED.value,
                model.scheduled_publish_at.isnot(None),
                model.scheduled_publish_at <= now,
            )
            .all()
        )
    return due
