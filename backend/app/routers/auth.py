"""Auth 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.common import MessageOut
from app.schemas.user import LoginRequest, LogoutRequest, RefreshRequest, RegisterRequest, TokenResponse, UserOut
from app.services import auth_service
from app.middleware.auth_middleware import get_current_token, get_current_user
from app.models.user import User

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, db: Session = Depends(get_db)):
    return auth_service.register(db, request)


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    return auth_service.login(db, request.email_or_username, request.password)


@router.post("/refresh", response_model=TokenResponse)
def refresh(request: RefreshRequest, db: Session = Depends(get_db)):
    return auth_service.refresh(db, request.refresh_token)


@router.post("/logout", response_model=MessageOut)
def logout(
    request: LogoutRequest | None = None,
    token: str = Depends(get_current_token),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    auth_service.logout(db, current_user, token, request.refresh_token if request else None)
    return {"message": "Logged out successfully"}


@router.post("/logout-all", response_model=MessageOut)
def logout_all(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    auth_service.revoke_all_sessions(db, current_user.user_id)
    return {"message": "All sessions have been revoked"}


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    return current_user
