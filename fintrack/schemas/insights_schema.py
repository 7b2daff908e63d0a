from datetime import date as calendar_date
from decimal import Decimal
from typing import Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

EntryType = Literal["income", "expense"]


class DateRange(BaseModel):
    """Inclusive day window; a missing bound leaves that side open."""

    model_config = ConfigDict(frozen=True)

    start_date: Optional[calendar_date] = None
    end_date: Optional[calendar_date] = None


class EntryFilter(DateRange):
    type: Optional[EntryType] = None


class EntryCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    color: str


class LedgerEntry(BaseModel):
    """One income or expense record as seen by the aggregators.

    The direction of money is carried by ``type``; ``amount`` is never
    negative.
    """

    model_config = ConfigDict(frozen=True)

    type: EntryType
    amount: Decimal = Field(ge=0)
    date: calendar_date
    category: Optional[EntryCategory] = None


class StatsSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_income: float
    total_expense: float
    balance: float
    transaction_count: int
    overall_balance: Optional[float] = None


class CategoryBucket(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    value: float
    color: str


class MonthlyTrendPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    month: str
    period: str
    income: float
    expense: float
    balance: float


class ComparisonChange(BaseModel):
    model_config = ConfigDict(frozen=True)

    income: float
    expenses: float
    balance: float


class ComparisonResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    current: StatsSummary
    previous: StatsSummary
    change: ComparisonChange


class StatsResponse(StatsSummary):
    currency_symbol: str
    display: Dict[str, str]


class FormattedChange(BaseModel):
    value: str
    is_positive: bool
    is_negative: bool


class ComparisonResponse(ComparisonResult):
    current_range: DateRange
    previous_range: DateRange
    formatted_change: Dict[str, FormattedChange]
