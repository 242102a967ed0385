"""환경 변수 기반 애플리케이션 설정을 중앙에서 관리합니다."""

import logging
from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path

logger = logging.getLogger(__name__)

MIN_JWT_SECRET_LENGTH = 32


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./portal.db"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = "/api/v1"
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # JWT
    JWT_SECRET: str = "change-me-to-a-random-secret-key"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    BCRYPT_ROUNDS: int = 12

    # Redis (비어 있으면 캐시/블랙리스트 비활성)
    REDIS_URL: str = ""
    CACHE_DEFAULT_TTL: int = 300

    # MeiliSearch
    MEILI_ENABLED: bool = False
    MEILI_HOST: str = "http://localhost:7700"
    MEILI_MASTER_KEY: str = ""
    MEILI_INDEX_NAME: str = "content"
    MEILI_TIMEOUT_SECONDS: float = 10.0
    SEARCH_CACHE_TTL: int = 300
    AUTOCOMPLETE_CACHE_TTL: int = 600

    # Celery
    CELERY_BROKER_URL: str = "redis://localhost:6379/1"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/2"
    CELERY_TASK_ALWAYS_EAGER: bool = False
    JOB_MAX_ATTEMPTS: int = 3
    JOB_RETRY_BACKOFF: int = 2
    SCHEDULED_PUBLISH_INTERVAL_SECONDS: int = 60

    # File upload
    UPLOAD_DIR: str = "uploads"
    MAX_IMAGE_SIZE: int = 10 * 1024 * 1024  # 10 MB
    ALLOWED_IMAGE_EXTENSIONS: List[str] = ["jpg", "jpeg", "png", "gif", "webp"]
    IMAGE_MIN_DIMENSION: int = 200
    IMAGE_MAX_DIMENSION: int = 10000
    IMAGE_WEBP_QUALITY: int = 85

    # Mail
    MAIL_ENABLED: bool = False
    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_USE_TLS: bool = True
    MAIL_FROM: str = "no-reply@content-portal.local"
    FRONTEND_URL: str = "http://localhost:3000"

    def validate_runtime(self) -> None:
        if len(self.JWT_SECRET or "") < MIN_JWT_SECRET_LENGTH:
            logger.warning(
                "[config] JWT_SECRET is shorter than %d characters; use a stronger secret in production",
                MIN_JWT_SECRET_LENGTH,
            )
        if not self.REDIS_URL:
            logger.warning("[config] REDIS_URL is empty; caching and token blacklist are disabled")

    class Config:
        # 실행 cwd와 무관하게 backend/.env를 로드한다.
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
