"""콘텐츠 버전 이력 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from app.models.enums import ContentType


class ContentVersionCreate(BaseModel):
    content_type: ContentType
    content_id: int
    version_number: int = Field(..., ge=1)
    title: str = Field(..., min_length=1, max_length=255)
    content: Optional[str] = None
    excerpt: Optional[str] = Field(None, max_length=500)
    metadata: Optional[Dict[str, Any]] = None
    change_note: Optional[str] = Field(None, max_length=500)


class ContentVersionOut(BaseModel):
    version_id: int
    content_type: str
    content_id: int
    version_number: int
    title: str
    content: Optional[str] = None
    excerpt: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    change_note: Optional[str] = None
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None


class VersionChanges(BaseModel):
    title: bool
    content: bool
    excerpt: bool


class VersionCompareOut(BaseModel):
    version_a: ContentVersionOut
    version_b: ContentVersionOut
    changes: VersionChanges


class RestoreDataOut(BaseModel):
    title: str
    content: Optional[str] = None
    excerpt: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class PruneOut(BaseModel):
    deleted: int
