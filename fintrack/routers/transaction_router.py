from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from fintrack.database.connection import get_db
from fintrack.repositories import transaction_crud
from fintrack.schemas import transaction_schema, user_schema
from fintrack.security.user_security import get_current_user

transaction_Router = APIRouter(prefix="/transaction")


@transaction_Router.get(
    "/list",
    response_model=transaction_schema.PaginatedTransactionResponse,
    tags=["transactions"],
)
def get_transactions(
    type: Optional[Literal["income", "expense"]] = Query(default=None),
    category_id: Optional[int] = Query(default=None),
    start_date: Optional[date] = Query(default=None, description="Inclusive lower bound"),
    end_date: Optional[date] = Query(default=None, description="Inclusive upper bound"),
    description: Optional[str] = Query(default=None, description="Case-insensitive substring match"),
    page: int = Query(default=1, ge=1, description="Page number (starting from 1)"),
    per_page: int = Query(
        default=10, ge=1, le=100, description="Number of transactions per page (max 100)"
    ),
    user: user_schema.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    filters = {
        "transaction_type": type,
        "category_id": category_id,
        "start_date": start_date,
        "end_date": end_date,
        "description": description,
    }
    offset = (page - 1) * per_page

    transactions = transaction_crud.get_transactions(
        db=db, user_id=user.user_id, offset=offset, limit=per_page, **filters
    )
    total_transactions = transaction_crud.get_transactions_count(
        db=db, user_id=user.user_id, **filters
    )
    total_pages = (total_transactions + per_page - 1) // per_page

    return {
        "transactions": transactions,
        "total_transactions": total_transactions,
        "total_pages": total_pages,
        "current_page": page,
        "per_page": per_page,
    }


@transaction_Router.get(
    "/{transaction_id}",
    response_model=transaction_schema.Transaction,
    tags=["transactions"],
)
def get_transaction_by_id(
    transaction_id: int,
    user: user_schema.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    transaction = transaction_crud.get_transaction_by_id(
        db=db, user_id=user.user_id, transaction_id=transaction_id
    )
    if transaction is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return transaction


@transaction_Router.post(
    "/create",
    response_model=transaction_schema.Transaction,
    status_code=status.HTTP_201_CREATED,
    tags=["transactions"],
)
def create_transaction(
    transaction: transaction_schema.TransactionCreate,
    user: user_schema.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return transaction_crud.create_transaction(db=db, user_id=user.user_id, transaction=transaction)


@transaction_Router.put(
    "/{transaction_id}",
    response_model=transaction_schema.Transaction,
    tags=["transactions"],
)
def update_transaction(
    transaction_id: int,
    transaction_update: transaction_schema.TransactionUpdate,
    user: user_schema.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return transaction_crud.update_transaction(
        db=db,
        user_id=user.user_id,
        transaction_id=transaction_id,
        transaction_update=transaction_update,
    )


@transaction_Router.delete(
    "/{transaction_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["transactions"],
)
def delete_transaction(
    transaction_id: int,
    user: user_schema.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    transaction_crud.delete_transaction(db=db, user_id=user.user_id, transaction_id=transaction_id)
