"""갤러리 이미지 후처리 작업입니다."""

import logging

from app.models.gallery_item import GalleryItem
from app.queues.celery_app import celery, task_session
from app.services import cache_service, image_service

logger = logging.getLogger(__name__)


@celery.task(name="image.process")
def process(gallery_item_id: int) -> bool:
    with task_session() as db:
        item = db.query(GalleryItem).filter(GalleryItem.gallery_item_id == gallery_item_id).first()
        if not item or not item.original_url:
            logger.warning("[image] gallery item %s skipped, no original", gallery_item_id)
            return False
        urls = image_service.regenerate_renditions(item.original_url)
        for key, value in urls.items():
            setattr(item, key, value)
        db.commit()
        cache_service.invalidate_content(GalleryItem.CONTENT_TYPE, gallery_item_id)
        return True


@celery.task(name="image.optimize")
def optimize(url: str) -> int:
    saved = image_service.optimize(url)
    logger.info("[image] optimized %s, saved %d bytes", url, saved)
    return saved
