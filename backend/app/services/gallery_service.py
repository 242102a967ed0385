"""Gallery Service 도메인 서비스 레이어입니다. 이미지 업로드 검증/변환과 갤러리 항목 CRUD를 묶습니다."""

import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.models.gallery_item import GalleryItem
from app.models.user import User
from app.schemas.content import GalleryItemCreate
from app.services import content_service, image_service, queue_service
from app.utils.helpers import validate_image_extension

logger = logging.getLogger(__name__)


def _rendition_urls(item: GalleryItem) -> list:
    return [item.original_url, item.file_url, item.medium_url, item.thumbnail_url]


def create_item(db: Session, data: GalleryItemCreate, filename: Optional[str], content: bytes, current_user: User) -> GalleryItem:
    validate_image_extension(filename)
    image_service.validate_image(content)
    processed = image_service.process_image(content)

    try:
        item = content_service.create_content(db, GalleryItem, data, current_user, **processed)
    except HTTPException:
        image_service.delete_files(processed[key] for key in ("original_url", "file_url", "medium_url", "thumbnail_url"))
        raise
    queue_service.enqueue_image_optimize(item.file_url)
    return item


def list_items(db: Session, *, file_type: Optional[str] = None, page: int = 1, limit: int = 10,
               sort_by: str = "created_at", sort_order: str = "desc", **filters) -> Dict[str, Any]:
    q = content_service.base_list_query(db, GalleryItem, **filters)
    if file_type:
        q = q.filter(GalleryItem.file_type == file_type)
    return content_service.paginate(db, GalleryItem, q, page=page, limit=limit, sort_by=sort_by, sort_order=sort_order)


def delete_item(db: Session, gallery_item_id: int) -> None:
    item = content_service.get_content_or_404(db, GalleryItem.CONTENT_TYPE, gallery_item_id)
    urls = _rendition_urls(item)
    content_service.delete_content(db, GalleryItem, gallery_item_id)
    removed = image_service.delete_files(urls)
    logger.info("[gallery] deleted item %s and %d files", gallery_item_id, removed)


def reprocess_item(db: Session, gallery_item_id: int) -> bool:
    item = content_service.get_content_or_404(db, GalleryItem.CONTENT_TYPE, gallery_item_id)
    if not item.original_url:
        raise HTTPException(status_code=400, detail="Gallery item has no stored original image")
    return queue_service.enqueue_image_processing(gallery_item_id)
