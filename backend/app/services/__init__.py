"""서비스 레이어 패키지 초기화 모듈입니다."""

from app.services import (
    cache_service,
    token_blacklist_service,
    queue_service,
    auth_service,
    user_service,
    notification_service,
    version_service,
    content_service,
    author_service,
    taxonomy_service,
    wiki_service,
    story_service,
    image_service,
    gallery_service,
    comment_service,
    rating_service,
    email_service,
)
