"""Wiki Service 도메인 서비스 레이어입니다. 위키 페이지 트리(부모/자식) 규칙을 캡슐화합니다."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.enums import ContentStatus
from app.models.user import User
from app.models.wiki_page import WikiPage
from app.schemas.content import WikiPageCreate, WikiPageUpdate
from app.services import content_service

logger = logging.getLogger(__name__)

MAX_TREE_DEPTH = 5


def _get_page(db: Session, wiki_page_id: int) -> WikiPage:
    page = db.query(WikiPage).filter(WikiPage.wiki_page_id == wiki_page_id).first()
    if not page:
        raise HTTPException(status_code=404, detail=f"Wiki page with id {wiki_page_id} not found")
    return page


def _ensure_parent_exists(db: Session, parent_id: int) -> None:
    exists = db.query(WikiPage.wiki_page_id).filter(WikiPage.wiki_page_id == parent_id).first()
    if not exists:
        raise HTTPException(status_code=404, detail=f"Parent wiki page with id {parent_id} not found")


def would_create_circular_reference(db: Session, page_id: int, new_parent_id: int) -> bool:
    """new_parent_id에서 루트까지 올라가며 page_id를 만나면 순환이다."""
    seen = set()
    current: Optional[int] = new_parent_id
    while current is not None:
        if current == page_id:
            return True
        if current in seen:
            return True
        seen.add(current)
        row = db.query(WikiPage.parent_id).filter(WikiPage.wiki_page_id == current).first()
        current = row[0] if row else None
    return False


def _children_counts(db: Session, ids: List[int]) -> Dict[int, int]:
    if not ids:
        return {}
    rows = (
        db.query(WikiPage.parent_id, func.count(WikiPage.wiki_page_id))
        .filter(WikiPage.parent_id.in_(ids))
        .group_by(WikiPage.parent_id)
        .all()
    )
    return {parent_id: int(count) for parent_id, count in rows}


def _attach_children_count(db: Session, pages: List[WikiPage]) -> List[WikiPage]:
    counts = _children_counts(db, [p.wiki_page_id for p in pages])
    for page in pages:
        setattr(page, "children_count", counts.get(page.wiki_page_id, 0))
    return pages


def _attach_child_pages(db: Session, pages: List[WikiPage]) -> None:
    ids = [p.wiki_page_id for p in pages]
    grouped: Dict[int, List[Dict[str, Any]]] = {}
    if ids:
        rows = db.query(WikiPage).filter(WikiPage.parent_id.in_(ids)).order_by(WikiPage.title.asc()).all()
        for row in rows:
            grouped.setdefault(row.parent_id, []).append(
                {"wiki_page_id": row.wiki_page_id, "title": row.title, "slug": row.slug}
            )
    for page in pages:
        setattr(page, "child_pages", grouped.get(page.wiki_page_id, []))


def create_page(db: Session, data: WikiPageCreate, current_user: User) -> WikiPage:
    if data.parent_id is not None:
        _ensure_parent_exists(db, data.parent_id)
    page = content_service.create_content(db, WikiPage, data, current_user)
    return _attach_children_count(db, [page])[0]


def update_page(db: Session, wiki_page_id: int, data: WikiPageUpdate, current_user: User) -> WikiPage:
    page = _get_page(db, wiki_page_id)
    if "parent_id" in data.model_fields_set and data.parent_id is not None:
        if data.parent_id == page.wiki_page_id:
            raise HTTPException(status_code=400, detail="A wiki page cannot be its own parent")
        _ensure_parent_exists(db, data.parent_id)
        if would_create_circular_reference(db, page.wiki_page_id, data.parent_id):
            raise HTTPException(status_code=400, detail="This change would create a circular reference")
    page = content_service.update_content(db, WikiPage, wiki_page_id, data, current_user)
    return _attach_children_count(db, [page])[0]


def delete_page(db: Session, wiki_page_id: int) -> None:
    _get_page(db, wiki_page_id)
    has_children = db.query(WikiPage.wiki_page_id).filter(WikiPage.parent_id == wiki_page_id).first()
    if has_children:
        raise HTTPException(
            status_code=400,
            detail="Cannot delete a wiki page that has child pages. Move or delete the children first.",
        )
    content_service.delete_content(db, WikiPage, wiki_page_id)


def list_pages(
    db: Session,
    *,
    parent_id: Optional[str] = None,
    include_children: bool = False,
    page: int = 1,
    limit: int = 10,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    **filters,
) -> Dict[str, Any]:
    q = content_service.base_list_query(db, WikiPage, **filters)
    if parent_id is not None:
        if str(parent_id).lower() == "null":
            q = q.filter(WikiPage.parent_id.is_(None))
        else:
            q = q.filter(WikiPage.parent_id == int(parent_id))
    result = content_service.paginate(db, WikiPage, q, page=page, limit=limit, sort_by=sort_by, sort_order=sort_order)
    _attach_children_count(db, result["data"])
    if include_children:
        _attach_child_pages(db, result["data"])
    return result


def get_page(db: Session, identifier: str) -> WikiPage:
    page = content_service.get_by_identifier(db, WikiPage, identifier)
    return _attach_children_count(db, [page])[0]


def get_children(db: Session, wiki_page_id: int) -> List[WikiPage]:
    _get_page(db, wiki_page_id)
    children = (
        db.query(WikiPage)
        .filter(WikiPage.parent_id == wiki_page_id)
        .order_by(WikiPage.title.asc())
        .all()
    )
    content_service.attach_stats(db, WikiPage, children)
    return _attach_children_count(db, children)


def get_breadcrumbs(db: Session, wiki_page_id: int) -> List[Dict[str, Any]]:
    page = _get_page(db, wiki_page_id)
    trail: List[Dict[str, Any]] = []
    seen = set()
    current: Optional[WikiPage] = page
    while current is not None and current.wiki_page_id not in seen:
        seen.add(current.wiki_page_id)
        trail.insert(0, {"wiki_page_id": current.wiki_page_id, "title": current.title, "slug": current.slug})
        current = current.parent
    return trail


def _published_children(db: Session, parent_ids: List[int]) -> Dict[int, List[WikiPage]]:
    if not parent_ids:
        return {}
    rows = (
        db.query(WikiPage)
        .filter(
            WikiPage.parent_id.in_(parent_ids),
            WikiPage.status == ContentStatus.PUBLISHED.value,
        )
        .order_by(WikiPage.title.asc())
        .all()
    )
    grouped: Dict[int, List[WikiPage]] = {}
    for row in rows:
        grouped.setdefault(row.parent_id, []).append(row)
    return grouped


def get_tree(db: Session, max_depth: int = MAX_TREE_DEPTH) -> List[Dict[str, Any]]:
    """발행된 루트 페이지(깊이 0)부터 깊이 max_depth까지 트리를 만든다. 레벨 단위로 한 번씩 조회한다."""
    roots = (
        db.query(WikiPage)
        .filter(
            WikiPage.parent_id.is_(None),
            WikiPage.status == ContentStatus.PUBLISHED.value,
        )
        .order_by(WikiPage.title.asc())
        .all()
    )

    def _node(page: WikiPage) -> Dict[str, Any]:
        return {
            "wiki_page_id": page.wiki_page_id,
            "title": page.title,
            "slug": page.slug,
            "children": [],
            "has_more_children": False,
        }

    tree = [_node(page) for page in roots]
    level = list(zip(roots, tree))
    depth = 0
    while level:
        if depth >= max_depth:
            # 한계 깊이의 노드는 상태와 무관하게 하위 페이지가 있으면 표시한다.
            counts = _children_counts(db, [page.wiki_page_id for page, _ in level])
            for page, node in level:
                node["has_more_children"] = counts.get(page.wiki_page_id, 0) > 0
            break
        children = _published_children(db, [page.wiki_page_id for page, _ in level])
        next_level = []
        for page, node in level:
            for kid in children.get(page.wiki_page_id, []):
                child_node = _node(kid)
                node["children"].append(child_node)
                next_level.append((kid, child_node))
        level = next_level
        depth += 1
    return tree
