"""검색/자동완성 응답 계약을 위한 Pydantic 스키마입니다."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class SearchResponse(BaseModel):
    hits: List[Dict[str, Any]]
    query: str
    processing_time_ms: int = 0
    limit: int
    offset: int
    estimated_total_hits: int = 0
    facet_distribution: Optional[Dict[str, Any]] = None


class AutocompleteItem(BaseModel):
    id: int
    title: str
    slug: str
    content_type: str


class PopularQuery(BaseModel):
    query: str
    count: int


class QueuedOut(BaseModel):
    message: str
    queued: bool
