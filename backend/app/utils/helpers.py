"""업로드 경로, 슬러그, 시간 계산 등 공용 헬퍼입니다."""

import math
import os
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException
from slugify import slugify

from app.config import settings


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def make_slug(text: str) -> str:
    slug = slugify(text or "", lowercase=True)
    if not slug:
        raise HTTPException(status_code=400, detail="Cannot generate a slug from this title")
    return slug


def file_extension(filename: str | None) -> str:
    name = filename or ""
    return name.rsplit(".", 1)[-1].lower() if "." in name else ""


def validate_image_extension(filename: str | None) -> str:
    ext = file_extension(filename)
    allowed = {item.lower() for item in settings.ALLOWED_IMAGE_EXTENSIONS}
    if ext not in allowed:
        raise HTTPException(
            status_code=400,
            detail=f"File type '{ext}' not allowed. Allowed: {', '.join(sorted(allowed))}",
        )
    return ext


def upload_folder(subfolder: str) -> str:
    folder = os.path.join(settings.UPLOAD_DIR, subfolder)
    os.makedirs(folder, exist_ok=True)
    return folder


def unique_basename() -> str:
    return uuid.uuid4().hex


def upload_url(subfolder: str, filename: str) -> str:
    return f"/uploads/{subfolder}/{filename}".replace("\\", "/")


def url_to_upload_path(url: str | None) -> str | None:
    if not url or not url.startswith("/uploads/"):
        return None
    return os.path.join(settings.UPLOAD_DIR, url[len("/uploads/"):])


def page_meta(total: int, page: int, limit: int) -> dict:
    return {
        "total": int(total),
        "page": page,
        "limit": limit,
        "total_pages": int(math.ceil(total / limit)) if limit else 0,
    }
