"""Rating Service 도메인 서비스 레이어입니다. 사용자별 콘텐츠 평점(1~5)을 한 건으로 유지합니다."""

import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.rating import Rating
from app.models.user import User
from app.schemas.rating import RatingCreate, RatingUpdate
from app.services import cache_service, content_service
from app.utils.helpers import page_meta
from app.utils.permissions import ensure_owner, ensure_owner_or_admin

logger = logging.getLogger(__name__)


def _get_rating(db: Session, rating_id: int) -> Rating:
    rating = db.query(Rating).filter(Rating.rating_id == rating_id).first()
    if not rating:
        raise HTTPException(status_code=404, detail=f"Rating with id {rating_id} not found")
    return rating


def _find_user_rating(db: Session, user_id: int, content_type: str, content_id: int) -> Optional[Rating]:
    return (
        db.query(Rating)
        .filter(
            Rating.user_id == user_id,
            Rating.content_type == content_type,
            Rating.content_id == content_id,
        )
        .first()
    )


def rate(db: Session, data: RatingCreate, current_user: User) -> Rating:
    """같은 사용자/콘텐츠 조합이면 기존 평점을 갱신한다."""
    content_type = data.content_type.value
    content_service.get_content_or_404(db, content_type, data.content_id)

    rating = _find_user_rating(db, current_user.user_id, content_type, data.content_id)
    if rating is None:
        rating = Rating(
            value=data.value,
            content_type=content_type,
            content_id=data.content_id,
            user_id=current_user.user_id,
        )
        db.add(rating)
        try:
            db.commit()
        except IntegrityError:
            # 동시 요청으로 먼저 생성된 경우 해당 행을 갱신한다.
            db.rollback()
            rating = _find_user_rating(db, current_user.user_id, content_type, data.content_id)
            rating.value = data.value
            db.commit()
    else:
        rating.value = data.value
        db.commit()
    db.refresh(rating)
    cache_service.invalidate_content(content_type, data.content_id)
    return rating


def list_ratings(
    db: Session,
    *,
    content_type: Optional[str] = None,
    content_id: Optional[int] = None,
    user_id: Optional[int] = None,
    page: int = 1,
    limit: int = 10,
) -> Dict[str, Any]:
    page = max(page, 1)
    limit = min(max(limit, 1), 100)
    q = db.query(Rating)
    if content_type:
        q = q.filter(Rating.content_type == content_type)
    if content_id is not None:
        q = q.filter(Rating.content_id == content_id)
    if user_id is not None:
        q = q.filter(Rating.user_id == user_id)
    total = q.count()
    rows = (
        q.order_by(Rating.created_at.desc(), Rating.rating_id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {"data": rows, "meta": page_meta(total, page, limit)}


def list_for_content(db: Session, content_type: str, content_id: int, page: int = 1, limit: int = 10) -> Dict[str, Any]:
    content_service.get_content_or_404(db, content_type, content_id)
    return list_ratings(db, content_type=content_type, content_id=content_id, page=page, limit=limit)


def average_for_content(db: Session, content_type: str, content_id: int) -> Dict[str, Any]:
    content_service.get_content_or_404(db, content_type, content_id)
    avg, count = (
        db.query(func.avg(Rating.value), func.count(Rating.rating_id))
        .filter(Rating.content_type == content_type, Rating.content_id == content_id)
        .one()
    )
    return {"average": round(float(avg), 2) if avg is not None else 0.0, "count": int(count or 0)}


def get_user_rating(db: Session, content_type: str, content_id: int, current_user: User) -> Optional[Rating]:
    content_service.get_content_or_404(db, content_type, content_id)
    return _find_user_rating(db, current_user.user_id, content_type, content_id)


def get_rating(db: Session, rating_id: int) -> Rating:
    return _get_rating(db, rating_id)


def update_rating(db: Session, rating_id: int, data: RatingUpdate, current_user: User) -> Rating:
    rating = _get_rating(db, rating_id)
    ensure_owner(current_user, rating.user_id, "You can only update your own ratings")
    rating.value = data.value
    db.commit()
    db.refresh(rating)
    cache_service.invalidate_content(rating.content_type, rating.content_id)
    return rating


def delete_rating(db: Session, rating_id: int, current_user: User) -> None:
    rating = _get_rating(db, rating_id)
    ensure_owner_or_admin(current_user, rating.user_id, "You can only delete your own ratings")
    content_type, content_id = rating.content_type, rating.content_id
    db.delete(rating)
    db.commit()
    cache_service.invalidate_content(content_type, content_id)
