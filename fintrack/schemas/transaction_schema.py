from datetime import date as calendar_date
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class TransactionCategory(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category_id: int
    name: str
    color: str
    icon: str


class TransactionCreate(BaseModel, str_strip_whitespace=True):
    type: Literal["income", "expense"]
    amount: float = Field(gt=0)
    category_id: Optional[int] = None
    description: Optional[str] = None
    date: calendar_date


class TransactionUpdate(BaseModel, str_strip_whitespace=True):
    type: Optional[Literal["income", "expense"]] = None
    amount: Optional[float] = Field(default=None, gt=0)
    category_id: Optional[int] = None
    description: Optional[str] = None
    date: Optional[calendar_date] = None


class Transaction(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    transaction_id: int
    user_id: int
    category_id: Optional[int] = None
    type: Literal["income", "expense"]
    amount: float
    description: Optional[str]
    date: calendar_date
    created_at: datetime
    updated_at: datetime
    category: Optional[TransactionCategory] = None


class PaginatedTransactionResponse(BaseModel):
    transactions: List[Transaction]
    total_transactions: int
    total_pages: int
    current_page: int
    per_page: int
