"""Redis 클라이언트 지연 초기화 헬퍼입니다. REDIS_URL이 없으면 None을 반환합니다."""

import logging
from typing import Optional

import redis

from app.config import settings

logger = logging.getLogger(__name__)

_client: Optional[redis.Redis] = None
_initialized = False


def get_redis() -> Optional[redis.Redis]:
    global _client, _initialized
    if _initialized:
        return _client
    _initialized = True
    if not settings.REDIS_URL:
        return None
    try:
        _client = redis.from_url(settings.REDIS_URL, decode_responses=True, socket_timeout=2)
        _client.ping()
        logger.info("[redis] connected to %s", settings.REDIS_URL)
    except redis.RedisError as exc:
        logger.warning("[redis] unavailable, cache disabled: %s", exc)
        _client = None
    return _client


def set_redis(client: Optional[redis.Redis]) -> None:
    """외부에서 생성한 클라이언트(테스트용 fakeredis 포함)를 주입한다."""
    global _client, _initialized
    _client = client
    _initialized = True


def redis_status() -> str:
    client = get_redis()
    if client is None:
        return "disabled"
    try:
        client.ping()
        return "ok"
    except redis.RedisError:
        return "error"
