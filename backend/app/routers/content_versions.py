"""Content Versions 기능 API 라우터입니다. 버전 이력 조회/비교/복원을 서비스 레이어로 위임합니다."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import get_current_user, require_roles
from app.models import CONTENT_MODELS
from app.models.enums import ContentType
from app.models.user import User
from app.schemas.common import Page
from app.schemas.version import (
    ContentVersionCreate,
    ContentVersionOut,
    PruneOut,
    RestoreDataOut,
    VersionCompareOut,
)
from app.services import content_service, version_service
from app.utils.permissions import ADMIN, EDITOR_ROLES

router = APIRouter(prefix="/api/v1/content-versions", tags=["content-versions"])


@router.post("", response_model=ContentVersionOut, status_code=201)
def create_version(
    data: ContentVersionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*EDITOR_ROLES)),
):
    row = version_service.create_version(db, data, current_user.user_id)
    return version_service.to_response(row)


@router.get("/{content_type}/{content_id}", response_model=Page[ContentVersionOut])
def list_versions(
    content_type: ContentType,
    content_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user_id: Optional[int] = None,
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
):
    content_service.get_content_or_404(db, content_type.value, content_id)
    return version_service.list_versions(
        db, content_type=content_type.value, content_id=content_id, page=page, limit=limit, user_id=user_id
    )


@router.get("/{content_type}/{content_id}/latest", response_model=ContentVersionOut)
def get_latest_version(
    content_type: ContentType,
    content_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
):
    row = version_service.get_latest_version(db, content_type=content_type.value, content_id=content_id)
    return version_service.to_response(row)


@router.get("/{content_type}/{content_id}/compare/{number_a}/{number_b}", response_model=VersionCompareOut)
def compare_versions(
    content_type: ContentType,
    content_id: int,
    number_a: int,
    number_b: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
):
    return version_service.compare_versions(
        db, content_type=content_type.value, content_id=content_id, number_a=number_a, number_b=number_b
    )


@router.get("/{content_type}/{content_id}/restore/{version_number}", response_model=RestoreDataOut)
def get_restore_data(
    content_type: ContentType,
    content_id: int,
    version_number: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(*EDITOR_ROLES)),
):
    return version_service.get_restore_data(
        db, content_type=content_type.value, content_id=content_id, version_number=version_number
    )


@router.post("/{content_type}/{content_id}/restore/{version_number}", response_model=ContentVersionOut)
def restore_version(
    content_type: ContentType,
    content_id: int,
    version_number: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*EDITOR_ROLES)),
):
    model = CONTENT_MODELS[content_type.value]
    content_service.restore_version(db, model, content_id, version_number, current_user)
    row = version_service.get_latest_version(db, content_type=content_type.value, content_id=content_id)
    return version_service.to_response(row)


@router.delete("/{content_type}/{content_id}/prune", response_model=PruneOut)
def prune_versions(
    content_type: ContentType,
    content_id: int,
    keep_count: int = Query(version_service.DEFAULT_KEEP_COUNT, ge=1, le=1000),
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(ADMIN)),
):
    return version_service.prune_old_versions(
        db, content_type=content_type.value, content_id=content_id, keep_count=keep_count
    )


@router.get("/{content_type}/{content_id}/{version_number}", response_model=ContentVersionOut)
def get_version(
    content_type: ContentType,
    content_id: int,
    version_number: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
):
    row = version_service.get_version_by_number(
        db, content_type=content_type.value, content_id=content_id, version_number=version_number
    )
    return version_service.to_response(row)
