from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict


class CategoryCreate(BaseModel, str_strip_whitespace=True):
    name: str
    type: Literal["income", "expense"]
    color: Optional[str] = None
    icon: Optional[str] = None


class CategoryUpdate(BaseModel, str_strip_whitespace=True):
    name: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None


class Category(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category_id: int
    user_id: int
    name: str
    type: Literal["income", "expense"]
    color: str
    icon: str
    created_at: datetime
    updated_at: datetime
