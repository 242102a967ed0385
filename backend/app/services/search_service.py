"""MeiliSearch 연동 검색 서비스입니다. 색인/검색/자동완성과 검색어 통계를 제공합니다."""

from __future__ import annotations

import hashlib
import logging
from typing import Any, Iterable

import httpx
import redis
from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.config import settings
from app.models import CONTENT_MODELS
from app.models.enums import ContentStatus
from app.services import cache_service
from app.utils.redis_client import get_redis

logger = logging.getLogger(__name__)

ANALYTICS_KEY = "analytics:search:queries"
MAX_TOTAL_HITS = 1000
EXCERPT_FALLBACK_LENGTH = 200

INDEX_SETTINGS: dict[str, Any] = {
    "searchableAttributes": ["title", "content", "excerpt", "author_name", "category_names", "tag_names"],
    "filterableAttributes": ["content_type", "status", "author_id", "published_at", "created_at", "series"],
    "sortableAttributes": ["published_at", "created_at", "view_count"],
    "displayedAttributes": [
        "id", "content_id", "title", "slug", "excerpt", "content_type", "status",
        "published_at", "author_id", "author_name", "featured_image", "thumbnail_url",
        "category_names", "tag_names", "series",
    ],
    "rankingRules": ["words", "typo", "proximity", "attribute", "sort", "exactness", "published_at:desc"],
    "typoTolerance": {"enabled": True, "minWordSizeForTypos": {"oneTypo": 5, "twoTypos": 9}},
    "pagination": {"maxTotalHits": MAX_TOTAL_HITS},
}


def _timestamp(value) -> int | None:
    return int(value.timestamp() * 1000) if value else None


def document_id(content_type: str, content_id: int) -> str:
    return f"{content_type}-{content_id}"


class SearchService:
    """MeiliSearch REST API를 httpx로 호출한다."""

    def __init__(self, db: Session | None = None):
        self.db = db

    # --- transport --------------------------------------------------------

    def is_enabled(self) -> bool:
        return bool(settings.MEILI_ENABLED and str(settings.MEILI_HOST or "").strip())

    def _ensure_enabled(self) -> None:
        if not self.is_enabled():
            raise HTTPException(status_code=503, detail="Search is disabled")

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if settings.MEILI_MASTER_KEY:
            headers["Authorization"] = f"Bearer {settings.MEILI_MASTER_KEY}"
        return headers

    def _url(self, path: str) -> str:
        base = str(settings.MEILI_HOST).rstrip("/")
        return f"{base}/indexes/{settings.MEILI_INDEX_NAME}{path}"

    def _post(self, path: str, payload: Any) -> dict[str, Any]:
        response = httpx.post(
            self._url(path),
            headers=self._headers(),
            json=payload,
            timeout=float(settings.MEILI_TIMEOUT_SECONDS),
        )
        response.raise_for_status()
        return response.json()

    def _patch(self, path: str, payload: Any) -> dict[str, Any]:
        response = httpx.patch(
            self._url(path),
            headers=self._headers(),
            json=payload,
            timeout=float(settings.MEILI_TIMEOUT_SECONDS),
        )
        response.raise_for_status()
        return response.json()

    def _delete(self, path: str) -> dict[str, Any]:
        response = httpx.delete(
            self._url(path),
            headers=self._headers(),
            timeout=float(settings.MEILI_TIMEOUT_SECONDS),
        )
        response.raise_for_status()
        return response.json()

    def health(self) -> str:
        if not self.is_enabled():
            return "disabled"
        try:
            response = httpx.get(
                f"{str(settings.MEILI_HOST).rstrip('/')}/health",
                headers=self._headers(),
                timeout=2.0,
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("[search] health check failed: %s", exc)
            return "error"
        return "ok"

    # --- index management ------------------------------------------------

    def initialize_index(self) -> bool:
        if not self.is_enabled():
            return False
        try:
            httpx.post(
                f"{str(settings.MEILI_HOST).rstrip('/')}/indexes",
                headers=self._headers(),
                json={"uid": settings.MEILI_INDEX_NAME, "primaryKey": "id"},
                timeout=float(settings.MEILI_TIMEOUT_SECONDS),
            )
            self._patch("/settings", INDEX_SETTINGS)
        except httpx.HTTPError as exc:
            logger.warning("[search] index initialization skipped: %s", exc)
            return False
        logger.info("[search] index '%s' configured", settings.MEILI_INDEX_NAME)
        return True

    def build_document(self, row) -> dict[str, Any]:
        content = getattr(row, "content", None) or ""
        excerpt = getattr(row, "excerpt", None) or content[:EXCERPT_FALLBACK_LENGTH]
        return {
            "id": document_id(row.CONTENT_TYPE, row.content_id),
            "content_id": row.content_id,
            "title": row.title,
            "slug": row.slug,
            "content": content,
            "excerpt": excerpt,
            "content_type": row.CONTENT_TYPE,
            "status": row.status,
            "published_at": _timestamp(row.published_at),
            "created_at": _timestamp(row.created_at),
            "view_count": int(row.view_count or 0),
            "author_id": row.author_id,
            "author_name": row.author.name if row.author else None,
            "featured_image": getattr(row, "featured_image", None),
            "thumbnail_url": getattr(row, "thumbnail_url", None),
            "series": getattr(row, "series", None),
            "category_names": [c.name for c in row.categories],
            "tag_names": [t.name for t in row.tags],
        }

    def _load(self, content_type: str, content_id: int):
        model = CONTENT_MODELS.get(content_type)
        if model is None or self.db is None:
            return None
        return self.db.query(model).filter(getattr(model, model.PK_FIELD) == content_id).first()

    def index_content(self, content_type: str, content_id: int) -> bool:
        if not self.is_enabled():
            return False
        row = self._load(content_type, content_id)
        if row is None:
            logger.warning("[search] %s %s not found for indexing", content_type, content_id)
            return False
        self._post("/documents", [self.build_document(row)])
        logger.info("[search] indexed %s:%s", content_type, content_id)
        return True

    def remove_content(self, content_type: str, content_id: int) -> bool:
        if not self.is_enabled():
            return False
        self._delete(f"/documents/{document_id(content_type, content_id)}")
        logger.info("[search] removed %s:%s", content_type, content_id)
        return True

    def reindex_all(self, batch_size: int = 500) -> int:
        if not self.is_enabled() or self.db is None:
            return 0
        total = 0
        for model in CONTENT_MODELS.values():
            batch: list[dict[str, Any]] = []
            for row in self.db.query(model).yield_per(batch_size):
                batch.append(self.build_document(row))
                if len(batch) >= batch_size:
                    self._post("/documents", batch)
                    total += len(batch)
                    batch = []
            if batch:
                self._post("/documents", batch)
                total += len(batch)
        logger.info("[search] reindexed %d documents", total)
        self.clear_search_cache()
        return total

    # --- queries ------------------------------------------------------------

    @staticmethod
    def build_filter(content_types: Iterable[str] | None, extra_filter: str | None) -> list[Any]:
        """Meilisearch 배열 필터를 만든다. 최상위 요소는 AND, 내부 배열은 OR로 묶인다."""
        clauses: list[Any] = []
        flt = (extra_filter or "").strip()
        if flt:
            clauses.append(flt)
        types = [t for t in (content_types or []) if t]
        if types:
            clauses.append([f"content_type = {t}" for t in types])
        clauses.append(f"status = {ContentStatus.PUBLISHED.value}")
        return clauses

    @staticmethod
    def search_cache_key(q: str, limit: int, offset: int, content_types: Iterable[str] | None, extra_filter: str | None) -> str:
        types = ",".join(sorted(t for t in (content_types or []) if t))
        flt = hashlib.md5((extra_filter or "").encode("utf-8")).hexdigest()[:12] if extra_filter else ""
        return f"search:{q}:{limit}:{offset}:{types}:{flt}"

    def search(
        self,
        q: str,
        *,
        content_types: list[str] | None = None,
        limit: int = 20,
        offset: int = 0,
        extra_filter: str | None = None,
        facets: list[str] | None = None,
    ) -> dict[str, Any]:
        self._ensure_enabled()
        self.track_query(q)

        def _run() -> dict[str, Any]:
            payload: dict[str, Any] = {
                "q": q,
                "limit": limit,
                "offset": offset,
                "filter": self.build_filter(content_types, extra_filter),
            }
            if facets:
                payload["facets"] = facets
            try:
                result = self._post("/search", payload)
            except httpx.HTTPStatusError as exc:
                if exc.response.status_code == 400:
                    raise HTTPException(status_code=400, detail="Invalid search filter")
                logger.warning("[search] query failed: %s", exc)
                raise HTTPException(status_code=502, detail="Search backend error")
            except httpx.HTTPError as exc:
                logger.warning("[search] query failed: %s", exc)
                raise HTTPException(status_code=502, detail="Search backend error")
            return {
                "hits": result.get("hits", []),
                "query": result.get("query", q),
                "processing_time_ms": int(result.get("processingTimeMs") or 0),
                "limit": int(result.get("limit", limit)),
                "offset": int(result.get("offset", offset)),
                "estimated_total_hits": int(result.get("estimatedTotalHits") or 0),
                "facet_distribution": result.get("facetDistribution"),
            }

        key = self.search_cache_key(q, limit, offset, content_types, extra_filter)
        if facets:
            key = f"{key}:{','.join(sorted(facets))}"
        return cache_service.wrap(key, _run, settings.SEARCH_CACHE_TTL)

    def autocomplete(self, q: str, limit: int = 8) -> list[dict[str, Any]]:
        self._ensure_enabled()

        def _run() -> list[dict[str, Any]]:
            result = self._post(
                "/search",
                {
                    "q": q,
                    "limit": limit,
                    "filter": self.build_filter(None, None),
                    "attributesToRetrieve": ["content_id", "title", "slug", "content_type"],
                },
            )
            return [
                {
                    "id": hit.get("content_id"),
                    "title": hit.get("title"),
                    "slug": hit.get("slug"),
                    "content_type": hit.get("content_type"),
                }
                for hit in result.get("hits", [])
            ]

        key = f"autocomplete:{q.lower()}:{limit}"
        # 실패한 조회는 캐시에 남기지 않는다.
        try:
            return cache_service.wrap(key, _run, settings.AUTOCOMPLETE_CACHE_TTL)
        except httpx.HTTPError as exc:
            logger.warning("[search] autocomplete failed: %s", exc)
            return []

    def clear_search_cache(self) -> int:
        return cache_service.delete_pattern("search:*") + cache_service.delete_pattern("autocomplete:*")

    # --- analytics ------------------------------------------------------------

    def track_query(self, q: str) -> None:
        term = (q or "").strip().lower()
        client = get_redis()
        if not term or client is None:
            return
        try:
            client.zincrby(ANALYTICS_KEY, 1, term)
        except redis.RedisError as exc:
            logger.warning("[search] analytics tracking skipped: %s", exc)

    def popular_queries(self, limit: int = 10) -> list[dict[str, Any]]:
        client = get_redis()
        if client is None:
            return []
        try:
            rows = client.zrevrange(ANALYTICS_KEY, 0, limit - 1, withscores=True)
        except redis.RedisError as exc:
            logger.warning("[search] analytics lookup failed: %s", exc)
            return []
        return [{"query": term, "count": int(score)} for term, score in rows]
