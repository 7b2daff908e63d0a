from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, joinedload

from fintrack.models.model import Category, Transaction
from fintrack.schemas.transaction_schema import TransactionCreate, TransactionUpdate


def _filtered_query(
    db: Session,
    user_id: int,
    transaction_type: Optional[str] = None,
    category_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    description: Optional[str] = None,
):
    query = db.query(Transaction).filter(Transaction.user_id == user_id)

    if transaction_type:
        query = query.filter(Transaction.type == transaction_type)
    if category_id:
        query = query.filter(Transaction.category_id == category_id)
    if start_date:
        query = query.filter(Transaction.date >= start_date)
    if end_date:
        query = query.filter(Transaction.date <= end_date)
    if description:
        query = query.filter(Transaction.description.ilike(f"%{description}%"))

    return query


def get_transactions(
    db: Session,
    user_id: int,
    offset: int = 0,
    limit: int = 10,
    **filters,
):
    return (
        _filtered_query(db, user_id, **filters)
        .options(joinedload(Transaction.category))
        .order_by(Transaction.date.desc(), Transaction.transaction_id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


def get_transactions_count(db: Session, user_id: int, **filters) -> int:
    return _filtered_query(db, user_id, **filters).count()


def get_transaction_by_id(db: Session, user_id: int, transaction_id: int):
    return (
        db.query(Transaction)
        .options(joinedload(Transaction.category))
        .filter(
            Transaction.transaction_id == transaction_id,
            Transaction.user_id == user_id,
        )
        .first()
    )


def _validate_category(db: Session, user_id: int, category_id: Optional[int], transaction_type: str):
    if category_id is None:
        return

    category = (
        db.query(Category)
        .filter(Category.category_id == category_id, Category.user_id == user_id)
        .first()
    )
    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Category not found"
        )
    if category.type != transaction_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Category type '{category.type}' does not match transaction type '{transaction_type}'",
        )


def create_transaction(db: Session, user_id: int, transaction: TransactionCreate):
    _validate_category(db, user_id, transaction.category_id, transaction.type)

    db_transaction = Transaction(
        user_id=user_id,
        category_id=transaction.category_id,
        type=transaction.type,
        amount=Decimal(str(transaction.amount)),
        description=transaction.description or None,
        date=transaction.date,
    )
    db.add(db_transaction)
    db.commit()
    db.refresh(db_transaction)
    return db_transaction


def update_transaction(
    db: Session, user_id: int, transaction_id: int, transaction_update: TransactionUpdate
):
    db_transaction = get_transaction_by_id(db=db, user_id=user_id, transaction_id=transaction_id)
    if not db_transaction:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found"
        )

    updates = transaction_update.model_dump(exclude_unset=True)
    new_type = updates.get("type", db_transaction.type)
    new_category_id = updates.get("category_id", db_transaction.category_id)
    _validate_category(db, user_id, new_category_id, new_type)

    if "amount" in updates and updates["amount"] is not None:
        db_transaction.amount = Decimal(str(updates["amount"]))
    if "type" in updates and updates["type"] is not None:
        db_transaction.type = updates["type"]
    if "category_id" in updates:
        db_transaction.category_id = updates["category_id"]
    if "description" in updates:
        db_transaction.description = updates["description"] or None
    if "date" in updates and updates["date"] is not None:
        db_transaction.date = updates["date"]

    db_transaction.updated_at = datetime.now()
    db.commit()
    db.refresh(db_transaction)
    return db_transaction


def delete_transaction(db: Session, user_id: int, transaction_id: int):
    db_transaction = get_transaction_by_id(db=db, user_id=user_id, transaction_id=transaction_id)
    if not db_transaction:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found"
        )

    db.delete(db_transaction)
    db.commit()
