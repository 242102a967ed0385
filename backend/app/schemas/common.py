"""목록 응답에서 공유하는 페이지네이션 스키마입니다."""

from typing import Generic, List, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int


class Page(BaseModel, Generic[T]):
    data: List[T]
    meta: PageMeta


class MessageOut(BaseModel):
    message: str
