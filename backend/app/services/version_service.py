"""콘텐츠 버전 저장/조회/비교/복원 기능을 제공하는 도메인 서비스입니다."""

import json
import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.content_version import ContentVersion
from app.schemas.version import ContentVersionCreate
from app.utils.helpers import page_meta

logger = logging.getLogger(__name__)

AUTO_SAVE_NOTE = "Auto-saved version"
DEFAULT_KEEP_COUNT = 10


def _dump_metadata(metadata: Optional[Dict[str, Any]]) -> Optional[str]:
    if metadata is None:
        return None
    return json.dumps(metadata, ensure_ascii=False, default=str)


def parse_metadata(row: ContentVersion) -> Dict[str, Any]:
    try:
        return json.loads(row.metadata_json or "{}")
    except json.JSONDecodeError:
        return {}


def to_response(row: ContentVersion) -> Dict[str, Any]:
    return {
        "version_id": row.version_id,
        "content_type": row.content_type,
        "content_id": row.content_id,
        "version_number": row.version_number,
        "title": row.title,
        "content": row.content,
        "excerpt": row.excerpt,
        "metadata": parse_metadata(row),
        "change_note": row.change_note,
        "user_id": row.user_id,
        "created_at": row.created_at,
    }


def _latest_number(db: Session, content_type: str, content_id: int) -> int:
    current_max = (
        db.query(func.max(ContentVersion.version_number))
        .filter(
            ContentVersion.content_type == content_type,
            ContentVersion.content_id == content_id,
        )
        .scalar()
    )
    return int(current_max or 0)


def create_version(db: Session, data: ContentVersionCreate, user_id: Optional[int]) -> ContentVersion:
    from app.services.content_service import get_content_or_404

    content_type = data.content_type.value
    get_content_or_404(db, content_type, data.content_id)

    exists = (
        db.query(ContentVersion.version_id)
        .filter(
            ContentVersion.content_type == content_type,
            ContentVersion.content_id == data.content_id,
            ContentVersion.version_number == data.version_number,
        )
        .first()
    )
    if exists:
        raise HTTPException(status_code=400, detail=f"Version {data.version_number} already exists for this content")

    row = ContentVersion(
        content_type=content_type,
        content_id=data.content_id,
        version_number=data.version_number,
        title=data.title,
        content=data.content,
        excerpt=data.excerpt,
        metadata_json=_dump_metadata(data.metadata),
        change_note=data.change_note,
        user_id=user_id,
    )
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail=f"Version {data.version_number} already exists for this content")
    db.refresh(row)
    return row


def auto_save_version(
    db: Session,
    *,
    content_type: str,
    content_id: int,
    title: str,
    content: Optional[str],
    excerpt: Optional[str],
    metadata: Optional[Dict[str, Any]],
    user_id: Optional[int],
    change_note: Optional[str] = None,
) -> ContentVersion:
    row = ContentVersion(
        content_type=content_type,
        content_id=content_id,
        version_number=_latest_number(db, content_type, content_id) + 1,
        title=title,
        content=content,
        excerpt=excerpt,
        metadata_json=_dump_metadata(metadata),
        change_note=change_note or AUTO_SAVE_NOTE,
        user_id=user_id,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def list_versions(
    db: Session,
    *,
    content_type: str,
    content_id: int,
    page: int = 1,
    limit: int = 10,
    user_id: Optional[int] = None,
) -> Dict[str, Any]:
    q = db.query(ContentVersion).filter(
        ContentVersion.content_type == content_type,
        ContentVersion.content_id == content_id,
    )
    if user_id is not None:
        q = q.filter(ContentVersion.user_id == user_id)
    total = q.count()
    rows = (
        q.order_by(ContentVersion.version_number.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {"data": [to_response(row) for row in rows], "meta": page_meta(total, page, limit)}


def get_version(db: Session, version_id: int) -> ContentVersion:
    row = db.query(ContentVersion).filter(ContentVersion.version_id == version_id).first()
    if not row:
        raise HTTPException(status_code=404, detail=f"Version with id {version_id} not found")
    return row


def get_version_by_number(db: Session, *, content_type: str, content_id: int, version_number: int) -> ContentVersion:
    row = (
        db.query(ContentVersion)
        .filter(
            ContentVersion.content_type == content_type,
            ContentVersion.content_id == content_id,
            ContentVersion.version_number == version_number,
        )
        .first()
    )
    if not row:
        raise HTTPException(status_code=404, detail=f"Version {version_number} not found")
    return row


def get_latest_version(db: Session, *, content_type: str, content_id: int) -> ContentVersion:
    row = (
        db.query(ContentVersion)
        .filter(
            ContentVersion.content_type == content_type,
            ContentVersion.content_id == content_id,
        )
        .order_by(ContentVersion.version_number.desc())
        .first()
    )
    if not row:
        raise HTTPException(status_code=404, detail="No versions found for this content")
    return row


def compare_versions(db: Session, *, content_type: str, content_id: int, number_a: int, number_b: int) -> Dict[str, Any]:
    version_a = get_version_by_number(db, content_type=content_type, content_id=content_id, version_number=number_a)
    version_b = get_version_by_number(db, content_type=content_type, content_id=content_id, version_number=number_b)
    return {
        "version_a": to_response(version_a),
        "version_b": to_response(version_b),
        "changes": {
            "title": version_a.title != version_b.title,
            "content": version_a.content != version_b.content,
            "excerpt": version_a.excerpt != version_b.excerpt,
        },
    }


def prune_old_versions(db: Session, *, content_type: str, content_id: int, keep_count: int = DEFAULT_KEEP_COUNT) -> Dict[str, int]:
    keep_ids = [
        row[0]
        for row in db.query(ContentVersion.version_id)
        .filter(
            ContentVersion.content_type == content_type,
            ContentVersion.content_id == content_id,
        )
        .order_by(ContentVersion.version_number.desc())
        .limit(keep_count)
        .all()
    ]
    q = db.query(ContentVersion).filter(
        ContentVersion.content_type == content_type,
        ContentVersion.content_id == content_id,
    )
    if keep_ids:
        q = q.filter(ContentVersion.version_id.notin_(keep_ids))
    deleted = q.delete(synchronize_session=False)
    db.commit()
    logger.info("[versions] pruned %s versions of %s:%s", deleted, content_type, content_id)
    return {"deleted": int(deleted or 0)}


def get_restore_data(db: Session, *, content_type: str, content_id: int, version_number: int) -> Dict[str, Any]:
    row = get_version_by_number(db, content_type=content_type, content_id=content_id, version_number=version_number)
    return {
        "title": row.title,
        "content": row.content,
        "excerpt": row.excerpt,
        "metadata": parse_metadata(row),
    }


def delete_versions_for_content(db: Session, *, content_type: str, content_id: int) -> None:
    db.query(ContentVersion).filter(
        ContentVersion.content_type == content_type,
        ContentVersion.content_id == content_id,
    ).delete(synchronize_session=False)
