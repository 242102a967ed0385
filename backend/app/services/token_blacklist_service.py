"""JWT 블랙리스트 서비스입니다. 로그아웃/강제 만료된 토큰을 만료 시각까지 Redis에 보관합니다."""

import hashlib
import logging
import time

import redis
from jose import JWTError, jwt

from app.config import settings
from app.utils.redis_client import get_redis

logger = logging.getLogger(__name__)

BLACKLIST_PREFIX = "jwt:blacklist:"
USER_REVOKED_PREFIX = "jwt:revoked-before:"


def _token_key(token: str) -> str:
    return BLACKLIST_PREFIX + hashlib.sha256(token.encode("utf-8")).hexdigest()


def blacklist_token(token: str) -> bool:
    """토큰을 남은 수명만큼 블랙리스트에 올린다. 저장했으면 True."""
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError as exc:
        logger.warning("[blacklist] cannot read token claims: %s", exc)
        return False

    exp = claims.get("exp")
    if exp is None:
        logger.warning("[blacklist] token has no exp claim; not blacklisted")
        return False

    ttl = int(exp - time.time())
    if ttl <= 0:
        return False

    client = get_redis()
    if client is None:
        logger.warning("[blacklist] redis unavailable; token not blacklisted")
        return False
    try:
        client.set(_token_key(token), "1", ex=ttl)
    except redis.RedisError as exc:
        logger.warning("[blacklist] failed to blacklist token: %s", exc)
        return False
    return True


def is_blacklisted(token: str) -> bool:
    client = get_redis()
    if client is None:
        return False
    try:
        return bool(client.exists(_token_key(token)))
    except redis.RedisError as exc:
        logger.warning("[blacklist] lookup failed, allowing token: %s", exc)
        return False


def blacklist_all_user_tokens(user_id: int) -> bool:
    """지금 이전에 발급된 해당 사용자의 모든 토큰을 무효화한다."""
    client = get_redis()
    if client is None:
        logger.warning("[blacklist] redis unavailable; cannot revoke tokens of user %s", user_id)
        return False
    ttl = settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60
    try:
        client.set(f"{USER_REVOKED_PREFIX}{user_id}", repr(time.time()), ex=ttl)
    except redis.RedisError as exc:
        logger.warning("[blacklist] failed to revoke tokens of user %s: %s", user_id, exc)
        return False
    return True


def is_revoked_for_user(user_id: int, issued_at) -> bool:
    client = get_redis()
    if client is None or issued_at is None:
        return False
    try:
        cutoff = client.get(f"{USER_REVOKED_PREFIX}{user_id}")
    except redis.RedisError as exc:
        logger.warning("[blacklist] revoke cutoff lookup failed: %s", exc)
        return False
    if cutoff is None:
        return False
    return float(issued_at) <= float(cutoff)
