"""Taxonomy Service 도메인 서비스 레이어입니다. 카테고리/태그 등록과 조회를 담당합니다."""

from typing import List

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.taxonomy import Category, Tag
from app.schemas.taxonomy import CategoryCreate, TagCreate
from app.utils.helpers import make_slug


def list_categories(db: Session) -> List[Category]:
    return db.query(Category).order_by(Category.name.asc()).all()


def list_tags(db: Session) -> List[Tag]:
    return db.query(Tag).order_by(Tag.name.asc()).all()


def _commit_unique(db: Session, row, label: str):
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=f"{label} '{row.name}' already exists")
    db.refresh(row)
    return row


def create_category(db: Session, data: CategoryCreate) -> Category:
    slug = make_slug(data.name)
    if db.query(Category.category_id).filter((Category.slug == slug) | (Category.name == data.name)).first():
        raise HTTPException(status_code=409, detail=f"Category '{data.name}' already exists")
    return _commit_unique(db, Category(name=data.name, slug=slug, description=data.description), "Category")


def create_tag(db: Session, data: TagCreate) -> Tag:
    slug = make_slug(data.name)
    if db.query(Tag.tag_id).filter((Tag.slug == slug) | (Tag.name == data.name)).first():
        raise HTTPException(status_code=409, detail=f"Tag '{data.name}' already exists")
    return _commit_unique(db, Tag(name=data.name, slug=slug), "Tag")


def delete_category(db: Session, category_id: int) -> None:
    row = db.query(Category).filter(Category.category_id == category_id).first()
    if not row:
        raise HTTPException(status_code=404, detail="Category not found")
    db.delete(row)
    db.commit()


def delete_tag(db: Session, tag_id: int) -> None:
    row = db.query(Tag).filter(Tag.tag_id == tag_id).first()
    if not row:
        raise HTTPException(status_code=404, detail="Tag not found")
    db.delete(row)
    db.commit()
