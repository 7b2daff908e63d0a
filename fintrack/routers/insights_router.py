import logging
from datetime import date
from typing import Dict, List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from fintrack.database.connection import get_db, get_session_factory
from fintrack.repositories import user_settings_crud
from fintrack.repositories.ledger_entry_crud import SqlEntrySource
from fintrack.repositories.settings import settings
from fintrack.schemas import insights_schema, user_schema
from fintrack.security.user_security import get_current_user
from fintrack.services import insights_service
from fintrack.utils.date_ranges import RangePreset, previous_period, resolve_date_range
from fintrack.utils.exceptions import InvalidDateRangeError, LedgerFetchError
from fintrack.utils.formatting import (
    format_large_number,
    format_percentage_change,
    get_currency_info,
)

logger = logging.getLogger(__name__)

insights_router = APIRouter(prefix="/insights", tags=["insights"])


def get_entry_source(
    user: user_schema.User = Depends(get_current_user),
    session_factory=Depends(get_session_factory),
) -> SqlEntrySource:
    return SqlEntrySource(
        session_factory, user.user_id, timeout=settings.STORE_TIMEOUT_SECONDS
    )


def get_range_params(
    range: RangePreset = Query(
        default="30d",
        description="Named range: today, week, month, 7d, 30d, 90d, ytd, 12m, all or custom",
    ),
    start_date: Optional[date] = Query(default=None, description="Start of a custom range"),
    end_date: Optional[date] = Query(default=None, description="End of a custom range"),
) -> Tuple[RangePreset, insights_schema.DateRange]:
    try:
        return range, resolve_date_range(range, start_date=start_date, end_date=end_date)
    except InvalidDateRangeError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        )


def _generation_failed(what: str, e: Exception) -> HTTPException:
    logger.error(f"Error generating {what}: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Error generating {what}: {str(e)}",
    )


@insights_router.get("/stats", response_model=insights_schema.StatsResponse)
async def get_stats(
    range_params: Tuple[RangePreset, insights_schema.DateRange] = Depends(get_range_params),
    include_overall_balance: bool = Query(
        default=False,
        description="Report the all-time balance instead of the balance of the range",
    ),
    source: SqlEntrySource = Depends(get_entry_source),
    db: Session = Depends(get_db),
):
    _, date_range = range_params
    try:
        summary = await insights_service.compute_stats(
            source, date_range, include_overall_balance=include_overall_balance
        )
    except LedgerFetchError as e:
        raise _generation_failed("stats", e)

    currency = get_currency_info(
        user_settings_crud.get_currency_code(db=db, user_id=source.user_id)
    )
    return insights_schema.StatsResponse(
        **summary.model_dump(),
        currency_symbol=currency.symbol,
        display={
            "total_income": format_large_number(summary.total_income, currency),
            "total_expense": format_large_number(summary.total_expense, currency),
            "balance": format_large_number(summary.balance, currency),
        },
    )


@insights_router.get(
    "/category-breakdown", response_model=List[insights_schema.CategoryBucket]
)
async def get_category_breakdown(
    range_params: Tuple[RangePreset, insights_schema.DateRange] = Depends(get_range_params),
    source: SqlEntrySource = Depends(get_entry_source),
):
    _, date_range = range_params
    try:
        return await insights_service.compute_category_breakdown(source, date_range)
    except LedgerFetchError as e:
        raise _generation_failed("category breakdown", e)


@insights_router.get("/daily-expenses", response_model=Dict[str, float])
async def get_daily_expenses(
    range_params: Tuple[RangePreset, insights_schema.DateRange] = Depends(get_range_params),
    source: SqlEntrySource = Depends(get_entry_source),
):
    _, date_range = range_params
    try:
        return await insights_service.compute_daily_expenses(source, date_range)
    except LedgerFetchError as e:
        raise _generation_failed("daily expenses", e)


@insights_router.get(
    "/monthly-trends", response_model=List[insights_schema.MonthlyTrendPoint]
)
async def get_monthly_trends(source: SqlEntrySource = Depends(get_entry_source)):
    try:
        return await insights_service.compute_monthly_trends(source)
    except LedgerFetchError as e:
        raise _generation_failed("monthly trends", e)


@insights_router.get("/comparison", response_model=insights_schema.ComparisonResponse)
async def get_comparison(
    range_params: Tuple[RangePreset, insights_schema.DateRange] = Depends(get_range_params),
    source: SqlEntrySource = Depends(get_entry_source),
):
    preset, current_range = range_params
    try:
        previous_range = previous_period(preset, current_range)
    except InvalidDateRangeError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        )

    try:
        comparison = await insights_service.compute_comparison(
            source, current_range, previous_range
        )
    except LedgerFetchError as e:
        raise _generation_failed("comparison", e)

    return insights_schema.ComparisonResponse(
        **comparison.model_dump(),
        current_range=current_range,
        previous_range=previous_range,
        formatted_change={
            metric: format_percentage_change(value)
            for metric, value in comparison.change.model_dump().items()
        },
    )
