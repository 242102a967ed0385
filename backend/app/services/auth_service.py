"""Auth Service 도메인 서비스 레이어입니다. 비즈니스 규칙과 데이터 접근 흐름을 캡슐화합니다."""

import logging
import time
import uuid
from datetime import datetime, timedelta

import bcrypt
from fastapi import HTTPException, status
from jose import JWTError, jwt
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.config import settings
from app.models.enums import Role
from app.models.session import UserSession
from app.models.user import User
from app.schemas.user import RegisterRequest
from app.services import queue_service, token_blacklist_service
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def _encode(user: User, token_type: str, expires_delta: timedelta) -> str:
    payload = {
        "sub": str(user.user_id),
        "email": user.email,
        "username": user.username,
        "role": user.role,
        "type": token_type,
        "iat": time.time(),
        "exp": datetime.utcnow() + expires_delta,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def create_access_token(user: User) -> str:
    return _encode(user, ACCESS_TOKEN_TYPE, timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))


def create_refresh_token(user: User) -> str:
    return _encode(user, REFRESH_TOKEN_TYPE, timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))


def decode_token(token: str) -> dict:
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])


def _issue_tokens(db: Session, user: User) -> dict:
    access_token = create_access_token(user)
    refresh_token = create_refresh_token(user)
    db.add(
        UserSession(
            user_id=user.user_id,
            refresh_token=refresh_token,
            expires_at=utcnow() + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        )
    )
    db.commit()
    return {
        "access_token": access_token,
        "refresh_token": refresh_token,
        "token_type": "bearer",
        "user": user,
    }


def register(db: Session, data: RegisterRequest) -> dict:
    email = data.email.lower()
    if db.query(User.user_id).filter(User.email == email).first():
        raise HTTPException(status_code=409, detail="Email already registered")
    if db.query(User.user_id).filter(User.username == data.username).first():
        raise HTTPException(status_code=409, detail="Username already taken")

    user = User(
        email=email,
        username=data.username,
        password_hash=hash_password(data.password),
        name=data.name,
        role=Role.USER.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("[auth] registered user_id=%s username=%s", user.user_id, user.username)

    queue_service.enqueue_welcome_email(user.user_id)
    return _issue_tokens(db, user)


def login(db: Session, email_or_username: str, password: str) -> dict:
    identifier = (email_or_username or "").strip()
    user = (
        db.query(User)
        .filter(or_(User.email == identifier.lower(), User.username == identifier))
        .first()
    )
    if not user or not user.is_active or not verify_password(password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return _issue_tokens(db, user)


def refresh(db: Session, refresh_token: str) -> dict:
    invalid = HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")
    try:
        payload = decode_token(refresh_token)
    except JWTError:
        raise invalid
    if payload.get("type") != REFRESH_TOKEN_TYPE:
        raise invalid
    if token_blacklist_service.is_revoked_for_user(payload.get("sub"), payload.get("iat")):
        raise invalid

    session = db.query(UserSession).filter(UserSession.refresh_token == refresh_token).first()
    if not session or session.expires_at <= utcnow():
        raise invalid

    user = db.query(User).filter(User.user_id == session.user_id, User.is_active == True).first()  # noqa: E712
    if not user:
        raise invalid

    db.delete(session)
    db.commit()
    return _issue_tokens(db, user)


def logout(db: Session, user: User, access_token: str, refresh_token: str | None = None) -> None:
    q = db.query(UserSession).filter(UserSession.user_id == user.user_id)
    if refresh_token:
        q = q.filter(UserSession.refresh_token == refresh_token)
    q.delete(synchronize_session=False)
    db.commit()
    token_blacklist_service.blacklist_token(access_token)


def revoke_all_sessions(db: Session, user_id: int) -> None:
    db.query(UserSession).filter(UserSession.user_id == user_id).delete(synchronize_session=False)
    db.commit()
    token_blacklist_service.blacklist_all_user_tokens(user_id)


def purge_expired_sessions(db: Session) -> int:
    deleted = db.query(UserSession).filter(UserSession.expires_at <= utcnow()).delete(synchronize_session=False)
    db.commit()
    return int(deleted or 0)
