"""FastAPI 애플리케이션 진입점. 미들웨어, API 라우터, 업로드 정적 파일 서빙을 등록합니다."""

import logging
import os

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.database import Base, engine, get_db
import app.models  # noqa: F401 - 모델 import로 metadata 등록
from app.routers import (
    auth, users, articles, blog_posts, wiki, gallery, stories, authors, taxonomy,
    comments, ratings, content_versions, search, notifications, queues,
)
from app.services.search_service import SearchService
from app.utils.redis_client import redis_status
from app.utils.schema_sync import sync_missing_schema_objects

logging.basicConfig(
    level=getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)
settings.validate_runtime()

SERVICE_NAME = "Multimedia Content Portal"

app = FastAPI(
    title=SERVICE_NAME,
    description="기사/블로그/위키/갤러리/스토리를 제공하는 콘텐츠 포털 API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register all routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(articles.router)
app.include_router(blog_posts.router)
app.include_router(wiki.router)
app.include_router(gallery.router)
app.include_router(stories.router)
app.include_router(authors.router)
app.include_router(taxonomy.router)
app.include_router(comments.router)
app.include_router(ratings.router)
app.include_router(content_versions.router)
app.include_router(search.router)
app.include_router(notifications.router)
app.include_router(queues.router)


@app.on_event("startup")
def ensure_schema():
    # 신규 기능 배포 시 누락된 테이블/컬럼/인덱스를 자동 생성합니다.
    Base.metadata.create_all(bind=engine)
    sync_missing_schema_objects(engine, Base.metadata)
    SearchService().initialize_index()


@app.get("/api/v1/health")
def health_check(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as exc:
        logger.warning("[health] database check failed: %s", exc)
        database = "error"
    redis = redis_status()
    search = SearchService().health()
    status = "ok" if database == "ok" and redis != "error" and search != "error" else "degraded"
    return {
        "status": status,
        "service": SERVICE_NAME,
        "database": database,
        "redis": redis,
        "search": search,
    }


# Static file serving for uploads
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")
