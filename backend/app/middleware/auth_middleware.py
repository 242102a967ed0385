from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.user import User
from app.services import token_blacklist_service
from app.services.auth_service import ACCESS_TOKEN_TYPE, decode_token

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def verify_access_token(token: str) -> dict:
    try:
        payload = decode_token(token)
    except JWTError:
        raise _unauthorized("Invalid or expired token")
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise _unauthorized("Invalid token type")
    if token_blacklist_service.is_blacklisted(token):
        raise _unauthorized("Token has been revoked")
    if token_blacklist_service.is_revoked_for_user(payload.get("sub"), payload.get("iat")):
        raise _unauthorized("Token has been revoked")
    return payload


def _load_user(db: Session, payload: dict) -> User:
    user_id = payload.get("sub")
    if user_id is None:
        raise _unauthorized("Invalid token payload")
    user = db.query(User).filter(User.user_id == int(user_id), User.is_active == True).first()  # noqa: E712
    if not user:
        raise _unauthorized("User not found or inactive")
    return user


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    payload = verify_access_token(credentials.credentials)
    return _load_user(db, payload)


def get_current_token(credentials: HTTPAuthorizationCredentials = Depends(security)) -> str:
    return credentials.credentials


def require_roles(*roles: str):
    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {', '.join(roles)}",
            )
        return current_user
    return checker


def get_optional_user(
    credentials: HTTPAuthorizationCredentials = Depends(optional_security),
    db: Session = Depends(get_db),
):
    if credentials is None:
        return None
    try:
        payload = verify_access_token(credentials.credentials)
        return _load_user(db, payload)
    except HTTPException:
        return None
