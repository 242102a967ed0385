"""Redis 기반 JSON 캐시 서비스입니다. Redis가 없거나 오류가 나면 캐시 미스로 동작합니다."""

import json
import logging
from typing import Any, Callable, Optional

import redis

from app.config import settings
from app.utils.redis_client import get_redis

logger = logging.getLogger(__name__)


def get(key: str) -> Optional[Any]:
    client = get_redis()
    if client is None:
        return None
    try:
        raw = client.get(key)
    except redis.RedisError as exc:
        logger.warning("[cache] get failed for %s: %s", key, exc)
        return None
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except (TypeError, json.JSONDecodeError):
        return None


def set(key: str, value: Any, ttl: Optional[int] = None) -> None:
    client = get_redis()
    if client is None:
        return
    try:
        client.set(key, json.dumps(value, ensure_ascii=False, default=str), ex=ttl or settings.CACHE_DEFAULT_TTL)
    except redis.RedisError as exc:
        logger.warning("[cache] set failed for %s: %s", key, exc)


def delete(key: str) -> None:
    client = get_redis()
    if client is None:
        return
    try:
        client.delete(key)
    except redis.RedisError as exc:
        logger.warning("[cache] delete failed for %s: %s", key, exc)


def delete_pattern(pattern: str) -> int:
    client = get_redis()
    if client is None:
        return 0
    deleted = 0
    try:
        batch = []
        for key in client.scan_iter(match=pattern, count=500):
            batch.append(key)
            if len(batch) >= 500:
                deleted += client.delete(*batch)
                batch = []
        if batch:
            deleted += client.delete(*batch)
    except redis.RedisError as exc:
        logger.warning("[cache] delete_pattern failed for %s: %s", pattern, exc)
    return deleted


def wrap(key: str, fn: Callable[[], Any], ttl: Optional[int] = None) -> Any:
    cached = get(key)
    if cached is not None:
        return cached
    value = fn()
    set(key, value, ttl)
    return value


def list_key(content_type: str, params: dict) -> str:
    parts = [f"{k}={params[k]}" for k in sorted(params) if params[k] is not None]
    return f"{content_type}:list:{'&'.join(parts)}"


def detail_key(content_type: str, content_id: int) -> str:
    return f"{content_type}:detail:{content_id}"


def slug_key(content_type: str, slug: str) -> str:
    return f"{content_type}:slug:{slug}"


def invalidate_content(content_type: str, content_id: Optional[int] = None) -> None:
    if content_id is not None:
        delete(detail_key(content_type, content_id))
    delete_pattern(f"{content_type}:slug:*")
    delete_pattern(f"{content_type}:list:*")
