"""Permissions 관련 공용 유틸리티 헬퍼입니다."""

from fastapi import HTTPException

from app.models.enums import Role
from app.models.user import User


ADMIN = Role.ADMIN.value
MODERATOR = Role.MODERATOR.value
USER = Role.USER.value

EDITOR_ROLES = (ADMIN, MODERATOR)
ALL_ROLES = (ADMIN, MODERATOR, USER)


def is_admin(user: User) -> bool:
    return user.role == ADMIN


def is_editor(user: User) -> bool:
    return user.role in EDITOR_ROLES


def ensure_owner(user: User, owner_id: int, detail: str) -> None:
    if int(owner_id) != int(user.user_id):
        raise HTTPException(status_code=403, detail=detail)


def ensure_owner_or_admin(user: User, owner_id: int, detail: str) -> None:
    if is_admin(user):
        return
    ensure_owner(user, owner_id, detail)
