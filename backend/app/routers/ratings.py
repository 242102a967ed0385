"""Ratings 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import get_current_user
from app.models.enums import ContentType
from app.models.user import User
from app.schemas.common import MessageOut, Page
from app.schemas.rating import RatingAverageOut, RatingCreate, RatingOut, RatingUpdate
from app.services import rating_service

router = APIRouter(prefix="/api/v1/ratings", tags=["ratings"])


@router.get("", response_model=Page[RatingOut])
def list_ratings(
    content_type: Optional[ContentType] = None,
    content_id: Optional[int] = None,
    user_id: Optional[int] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return rating_service.list_ratings(
        db,
        content_type=content_type.value if content_type else None,
        content_id=content_id,
        user_id=user_id,
        page=page,
        limit=limit,
    )


@router.post("", response_model=RatingOut, status_code=201)
def rate_content(
    data: RatingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return rating_service.rate(db, data, current_user)


@router.get("/content/{content_type}/{content_id}", response_model=Page[RatingOut])
def list_for_content(
    content_type: ContentType,
    content_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return rating_service.list_for_content(db, content_type.value, content_id, page=page, limit=limit)


@router.get("/content/{content_type}/{content_id}/average", response_model=RatingAverageOut)
def average_for_content(content_type: ContentType, content_id: int, db: Session = Depends(get_db)):
    return rating_service.average_for_content(db, content_type.value, content_id)


@router.get("/user/{content_type}/{content_id}", response_model=Optional[RatingOut])
def get_my_rating(
    content_type: ContentType,
    content_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return rating_service.get_user_rating(db, content_type.value, content_id, current_user)


@router.get("/{rating_id}", response_model=RatingOut)
def get_rating(rating_id: int, db: Session = Depends(get_db)):
    return rating_service.get_rating(db, rating_id)


@router.put("/{rating_id}", response_model=RatingOut)
def update_rating(
    rating_id: int,
    data: RatingUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return rating_service.update_rating(db, rating_id, data, current_user)


@router.delete("/{rating_id}", response_model=MessageOut)
def delete_rating(
    rating_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    rating_service.delete_rating(db, rating_id, current_user)
    return {"message": "Rating deleted successfully"}
