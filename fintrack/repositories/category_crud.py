from datetime import datetime
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from fintrack.models.model import Category, Transaction
from fintrack.schemas.category_schema import CategoryCreate, CategoryUpdate

DEFAULT_CATEGORY_COLOR = "#6366f1"
DEFAULT_CATEGORY_ICON = "tag"


def get_categories_by_user_id(
    db: Session, user_id: int, category_type: Optional[str] = None
):
    query = db.query(Category).filter(Category.user_id == user_id)

    if category_type:
        query = query.filter(Category.type == category_type)

    return query.order_by(Category.name).all()


def get_category_by_id(db: Session, user_id: int, category_id: int):
    return (
        db.query(Category)
        .filter(Category.category_id == category_id, Category.user_id == user_id)
        .first()
    )


def create_category(db: Session, user_id: int, category: CategoryCreate):
    existing_category = (
        db.query(Category)
        .filter(
            Category.user_id == user_id,
            Category.type == category.type,
            Category.name == category.name,
        )
        .first()
    )

    if existing_category:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Category already exists"
        )

    db_category = Category(
        user_id=user_id,
        name=category.name,
        type=category.type,
        color=category.color or DEFAULT_CATEGORY_COLOR,
        icon=category.icon or DEFAULT_CATEGORY_ICON,
    )

    db.add(db_category)
    db.commit()
    db.refresh(db_category)
    return db_category


def update_category(
    db: Session, user_id: int, category_id: int, category_update: CategoryUpdate
):
    db_category = get_category_by_id(db=db, user_id=user_id, category_id=category_id)
    if not db_category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Category not found"
        )

    if category_update.name is not None and category_update.name != db_category.name:
        name_taken = (
            db.query(Category)
            .filter(
                Category.user_id == user_id,
                Category.type == db_category.type,
                Category.name == category_update.name,
            )
            .first()
        )
        if name_taken:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Category already exists",
            )
        db_category.name = category_update.name

    if category_update.color is not None:
        db_category.color = category_update.color
    if category_update.icon is not None:
        db_category.icon = category_update.icon

    db_category.updated_at = datetime.now()
    db.commit()
    db.refresh(db_category)
    return db_category


def delete_category(db: Session, user_id: int, category_id: int):
    db_category = get_category_by_id(db=db, user_id=user_id, category_id=category_id)
    if not db_category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Category not found"
        )

    # transactions keep existing and become uncategorized
    db.query(Transaction).filter(Transaction.category_id == category_id).update(
        {Transaction.category_id: None}, synchronize_session=False
    )
    db.delete(db_category)
    db.commit()
