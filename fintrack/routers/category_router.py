from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from fintrack.database.connection import get_db
from fintrack.repositories import category_crud
from fintrack.schemas import category_schema, user_schema
from fintrack.security.user_security import get_current_user

category_Router = APIRouter(prefix="/category")


@category_Router.get(
    "/list", response_model=list[category_schema.Category], tags=["categories"]
)
def get_user_categories(
    type: Optional[Literal["income", "expense"]] = Query(
        default=None, description="Filter by category type (income or expense)"
    ),
    user: user_schema.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return category_crud.get_categories_by_user_id(
        db=db, user_id=user.user_id, category_type=type
    )


@category_Router.post(
    "/create",
    response_model=category_schema.Category,
    status_code=status.HTTP_201_CREATED,
    tags=["categories"],
)
def create_category(
    category: category_schema.CategoryCreate,
    user: user_schema.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return category_crud.create_category(db=db, user_id=user.user_id, category=category)


@category_Router.put(
    "/{category_id}", response_model=category_schema.Category, tags=["categories"]
)
def update_category(
    category_id: int,
    category_update: category_schema.CategoryUpdate,
    user: user_schema.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return category_crud.update_category(
        db=db,
        user_id=user.user_id,
        category_id=category_id,
        category_update=category_update,
    )


@category_Router.delete(
    "/{category_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["categories"]
)
def delete_category(
    category_id: int,
    user: user_schema.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    category_crud.delete_category(db=db, user_id=user.user_id, category_id=category_id)
