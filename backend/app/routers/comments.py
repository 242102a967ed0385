"""Comments 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import get_current_user
from app.models.enums import ContentType
from app.models.user import User
from app.schemas.comment import CommentCountOut, CommentCreate, CommentOut, CommentUpdate
from app.schemas.common import MessageOut, Page
from app.services import comment_service

router = APIRouter(prefix="/api/v1/comments", tags=["comments"])


@router.get("", response_model=Page[CommentOut])
def list_comments(
    content_type: Optional[ContentType] = None,
    content_id: Optional[int] = None,
    user_id: Optional[int] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return comment_service.list_comments(
        db,
        content_type=content_type.value if content_type else None,
        content_id=content_id,
        user_id=user_id,
        page=page,
        limit=limit,
    )


@router.post("", response_model=CommentOut, status_code=201)
def create_comment(
    data: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return comment_service.create_comment(db, data, current_user)


@router.get("/content/{content_type}/{content_id}", response_model=Page[CommentOut])
def list_for_content(
    content_type: ContentType,
    content_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return comment_service.list_for_content(db, content_type.value, content_id, page=page, limit=limit)


@router.get("/content/{content_type}/{content_id}/count", response_model=CommentCountOut)
def count_for_content(content_type: ContentType, content_id: int, db: Session = Depends(get_db)):
    count = comment_service.count_for_content(db, content_type.value, content_id)
    return {"content_type": content_type.value, "content_id": content_id, "count": count}


@router.get("/{comment_id}", response_model=CommentOut)
def get_comment(comment_id: int, db: Session = Depends(get_db)):
    return comment_service.get_comment(db, comment_id)


@router.put("/{comment_id}", response_model=CommentOut)
def update_comment(
    comment_id: int,
    data: CommentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return comment_service.update_comment(db, comment_id, data, current_user)


@router.delete("/{comment_id}", response_model=MessageOut)
def delete_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    comment_service.delete_comment(db, comment_id, current_user)
    return {"message": "Comment deleted successfully"}
