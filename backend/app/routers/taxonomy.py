"""Categories/Tags API 라우터입니다."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import require_roles
from app.models.user import User
from app.schemas.common import MessageOut
from app.schemas.taxonomy import CategoryCreate, CategoryOut, TagCreate, TagOut
from app.services import taxonomy_service
from app.utils.permissions import ADMIN, EDITOR_ROLES

router = APIRouter(prefix="/api/v1", tags=["taxonomy"])


@router.get("/categories", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return taxonomy_service.list_categories(db)


@router.post("/categories", response_model=CategoryOut, status_code=201)
def create_category(
    data: CategoryCreate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(*EDITOR_ROLES)),
):
    return taxonomy_service.create_category(db, data)


@router.delete("/categories/{category_id}", response_model=MessageOut)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(ADMIN)),
):
    taxonomy_service.delete_category(db, category_id)
    return {"message": "Category deleted successfully"}


@router.get("/tags", response_model=List[TagOut])
def list_tags(db: Session = Depends(get_db)):
    return taxonomy_service.list_tags(db)


@router.post("/tags", response_model=TagOut, status_code=201)
def create_tag(
    data: TagCreate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(*EDITOR_ROLES)),
):
    return taxonomy_service.create_tag(db, data)


@router.delete("/tags/{tag_id}", response_model=MessageOut)
def delete_tag(
    tag_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(ADMIN)),
):
    taxonomy_service.delete_tag(db, tag_id)
    return {"message": "Tag deleted successfully"}
