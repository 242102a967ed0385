"""Users 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.middleware.auth_middleware import require_roles
from app.models.user import User
from app.schemas.user import ActiveUpdate, RoleUpdate, UserOut
from app.services import user_service
from app.utils.permissions import ADMIN

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("", response_model=List[UserOut])
def list_users(
    include_inactive: bool = False,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(ADMIN)),
):
    return user_service.list_users(db, include_inactive=include_inactive)


@router.patch("/{user_id}/role", response_model=UserOut)
def change_role(
    user_id: int,
    data: RoleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN)),
):
    return user_service.change_role(db, user_id, data.role, current_user)


@router.patch("/{user_id}/active", response_model=UserOut)
def set_active(
    user_id: int,
    data: ActiveUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN)),
):
    return user_service.set_active(db, user_id, data.is_active, current_user)
