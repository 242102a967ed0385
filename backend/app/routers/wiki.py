"""Wiki 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import require_roles
from app.models.enums import ContentStatus
from app.models.user import User
from app.schemas.common import MessageOut, Page
from app.schemas.content import WikiBreadcrumb, WikiPageCreate, WikiPageOut, WikiPageUpdate, WikiTreeNode
from app.services import wiki_service
from app.utils.permissions import ADMIN, EDITOR_ROLES

router = APIRouter(prefix="/api/v1/wiki", tags=["wiki"])


@router.get("", response_model=Page[WikiPageOut])
def list_pages(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=200),
    status: Optional[ContentStatus] = None,
    author_id: Optional[int] = None,
    category: Optional[str] = None,
    tag: Optional[str] = None,
    parent_id: Optional[str] = Query(None, pattern=r"^(null|\d+)$"),
    include_children: bool = False,
    sort_by: str = "created_at",
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    db: Session = Depends(get_db),
):
    return wiki_service.list_pages(
        db,
        parent_id=parent_id,
        include_children=include_children,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
        search=search,
        status=status.value if status else None,
        author_id=author_id,
        category=category,
        tag=tag,
    )


@router.get("/tree", response_model=List[WikiTreeNode])
def get_tree(db: Session = Depends(get_db)):
    return wiki_service.get_tree(db)


@router.post("", response_model=WikiPageOut, status_code=201)
def create_page(
    data: WikiPageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*EDITOR_ROLES)),
):
    return wiki_service.create_page(db, data, current_user)


@router.get("/{wiki_page_id}/children", response_model=List[WikiPageOut])
def get_children(wiki_page_id: int, db: Session = Depends(get_db)):
    return wiki_service.get_children(db, wiki_page_id)


@router.get("/{wiki_page_id}/breadcrumbs", response_model=List[WikiBreadcrumb])
def get_breadcrumbs(wiki_page_id: int, db: Session = Depends(get_db)):
    return wiki_service.get_breadcrumbs(db, wiki_page_id)


@router.get("/{identifier}", response_model=WikiPageOut)
def get_page(identifier: str, db: Session = Depends(get_db)):
    # 숫자면 id, 아니면 slug로 조회한다.
    return wiki_service.get_page(db, identifier)


@router.put("/{wiki_page_id}", response_model=WikiPageOut)
def update_page(
    wiki_page_id: int,
    data: WikiPageUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*EDITOR_ROLES)),
):
    return wiki_service.update_page(db, wiki_page_id, data, current_user)


@router.delete("/{wiki_page_id}", response_model=MessageOut)
def delete_page(
    wiki_page_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(ADMIN)),
):
    wiki_service.delete_page(db, wiki_page_id)
    return {"message": "Wiki page deleted successfully"}
