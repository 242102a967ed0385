"""User Service 도메인 서비스 레이어입니다. 관리자용 사용자 조회/권한/활성 상태 변경을 담당합니다."""

import logging
from typing import List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.models.user import User
from app.services import auth_service

logger = logging.getLogger(__name__)


def _get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail=f"User with id {user_id} not found")
    return user


def list_users(db: Session, include_inactive: bool = False) -> List[User]:
    q = db.query(User)
    if not include_inactive:
        q = q.filter(User.is_active == True)  # noqa: E712
    return q.order_by(User.user_id.asc()).all()


def change_role(db: Session, user_id: int, role: str, current_user: User) -> User:
    user = _get_user(db, user_id)
    if user.user_id == current_user.user_id:
        raise HTTPException(status_code=400, detail="You cannot change your own role")
    user.role = role
    db.commit()
    db.refresh(user)
    # 기존 토큰의 role 클레임이 남지 않도록 재로그인을 강제한다.
    auth_service.revoke_all_sessions(db, user.user_id)
    logger.info("[user] role of %s changed to %s by %s", user.user_id, role, current_user.user_id)
    return user


def set_active(db: Session, user_id: int, is_active: bool, current_user: User) -> User:
    user = _get_user(db, user_id)
    if user.user_id == current_user.user_id and not is_active:
        raise HTTPException(status_code=400, detail="You cannot deactivate your own account")
    user.is_active = is_active
    db.commit()
    db.refresh(user)
    if not is_active:
        auth_service.revoke_all_sessions(db, user.user_id)
    return user
