"""Gallery 기능 API 라우터입니다. 이미지 업로드(multipart)를 받아 서비스 레이어로 위임합니다."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import require_roles
from app.models.enums import ContentStatus
from app.models.gallery_item import GalleryItem
from app.models.user import User
from app.schemas.common import MessageOut, Page
from app.schemas.content import GalleryItemCreate, GalleryItemOut, GalleryItemUpdate
from app.schemas.search import QueuedOut
from app.services import content_service, gallery_service
from app.utils.permissions import ADMIN, EDITOR_ROLES

router = APIRouter(prefix="/api/v1/gallery", tags=["gallery"])


def _id_list(raw: Optional[str]) -> Optional[list]:
    if raw is None or not raw.strip():
        return None
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise HTTPException(status_code=422, detail="ids must be a comma separated list of integers")


@router.get("", response_model=Page[GalleryItemOut])
def list_items(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=200),
    status: Optional[ContentStatus] = None,
    author_id: Optional[int] = None,
    category: Optional[str] = None,
    tag: Optional[str] = None,
    file_type: Optional[str] = Query(None, max_length=50),
    sort_by: str = "created_at",
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    db: Session = Depends(get_db),
):
    params = dict(page=page, limit=limit, search=search, status=status.value if status else None,
                  author_id=author_id, category=category, tag=tag, file_type=file_type,
                  sort_by=sort_by, sort_order=sort_order)
    return content_service.cached_list(
        GalleryItem, GalleryItemOut, params, lambda: gallery_service.list_items(db, **params)
    )


@router.post("", response_model=GalleryItemOut, status_code=201)
def create_item(
    file: UploadFile = File(...),
    title: str = Form(...),
    author_id: int = Form(...),
    description: Optional[str] = Form(None),
    status: ContentStatus = Form(ContentStatus.DRAFT),
    category_ids: Optional[str] = Form(None),
    tag_ids: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*EDITOR_ROLES)),
):
    try:
        data = GalleryItemCreate(
            title=title,
            author_id=author_id,
            description=description,
            status=status,
            category_ids=_id_list(category_ids),
            tag_ids=_id_list(tag_ids),
        )
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False))
    content = file.file.read()
    return gallery_service.create_item(db, data, file.filename, content, current_user)


@router.get("/slug/{slug}", response_model=GalleryItemOut)
def get_item_by_slug(slug: str, db: Session = Depends(get_db)):
    return content_service.get_by_slug(db, GalleryItem, slug)


@router.get("/{gallery_item_id}", response_model=GalleryItemOut)
def get_item(gallery_item_id: int, db: Session = Depends(get_db)):
    return content_service.get_content(db, GalleryItem, gallery_item_id)


@router.put("/{gallery_item_id}", response_model=GalleryItemOut)
def update_item(
    gallery_item_id: int,
    data: GalleryItemUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*EDITOR_ROLES)),
):
    return content_service.update_content(db, GalleryItem, gallery_item_id, data, current_user)


@router.post("/{gallery_item_id}/reprocess", response_model=QueuedOut, status_code=202)
def reprocess_item(
    gallery_item_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(*EDITOR_ROLES)),
):
    queued = gallery_service.reprocess_item(db, gallery_item_id)
    return {"message": "Image processing queued", "queued": queued}


@router.delete("/{gallery_item_id}", response_model=MessageOut)
def delete_item(
    gallery_item_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(ADMIN)),
):
    gallery_service.delete_item(db, gallery_item_id)
    return {"message": "Gallery item deleted successfully"}
