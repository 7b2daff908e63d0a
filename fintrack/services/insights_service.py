"""
Transaction statistics and aggregation.

The ``summarize_*``/``group_*``/``build_*`` functions are pure reductions over
an in-memory list of ledger entries. The ``compute_*`` coroutines fetch
entries for a date range from an entry source and feed them through those
reductions.
"""

import asyncio
import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from dateutil.relativedelta import relativedelta

from fintrack.schemas.insights_schema import (
    CategoryBucket,
    ComparisonChange,
    ComparisonResult,
    DateRange,
    EntryFilter,
    LedgerEntry,
    MonthlyTrendPoint,
    StatsSummary,
)
from fintrack.utils.date_ranges import end_of_month, start_of_month
from fintrack.utils.exceptions import LedgerFetchError

logger = logging.getLogger(__name__)

UNCATEGORIZED_NAME = "Uncategorized"
UNCATEGORIZED_COLOR = "#6b7280"
TREND_MONTHS = 12


class EntrySource(Protocol):
    async def fetch_entries(self, entry_filter: EntryFilter) -> List[LedgerEntry]:
        ...


def _net_amount(entries: Sequence[LedgerEntry]) -> Decimal:
    net = Decimal(0)
    for entry in entries:
        if entry.type == "income":
            net += entry.amount
        else:
            net -= entry.amount
    return net


def summarize_entries(entries: Sequence[LedgerEntry]) -> StatsSummary:
    income = expense = Decimal(0)

    for entry in entries:
        if entry.type == "income":
            income += entry.amount
        else:
            expense += entry.amount

    return StatsSummary(
        total_income=float(income),
        total_expense=float(expense),
        balance=float(income - expense),
        transaction_count=len(entries),
    )


def group_expenses_by_category(entries: Sequence[LedgerEntry]) -> List[CategoryBucket]:
    """Sum expense entries per category name, in first-seen order.

    Categories are keyed by name, so two categories sharing a name end up in
    one bucket. Entries without a category land in "Uncategorized".
    """
    buckets: Dict[str, Dict] = {}

    for entry in entries:
        if entry.category is not None:
            name, color = entry.category.name, entry.category.color
        else:
            name, color = UNCATEGORIZED_NAME, UNCATEGORIZED_COLOR

        if name in buckets:
            buckets[name]["value"] += entry.amount
            buckets[name]["color"] = color
        else:
            buckets[name] = {"name": name, "value": entry.amount, "color": color}

    return [
        CategoryBucket(name=bucket["name"], value=float(bucket["value"]), color=bucket["color"])
        for bucket in buckets.values()
    ]


def build_daily_expenses(entries: Sequence[LedgerEntry]) -> Dict[str, float]:
    daily_totals: Dict[str, Decimal] = {}

    for entry in entries:
        if entry.type != "expense":
            continue
        date_str = entry.date.strftime("%Y-%m-%d")
        daily_totals[date_str] = daily_totals.get(date_str, Decimal(0)) + entry.amount

    return {date_str: float(amount) for date_str, amount in daily_totals.items() if amount > 0}


def trailing_month_windows(today: date, months: int = TREND_MONTHS) -> List[Tuple[date, date]]:
    """First and last day of each of the ``months`` calendar months ending at ``today``'s month, oldest first."""
    first_of_current = start_of_month(today)
    windows = []
    for offset in range(months - 1, -1, -1):
        first_day = first_of_current - relativedelta(months=offset)
        windows.append((first_day, end_of_month(first_day)))
    return windows


def build_monthly_trends(
    entries: Sequence[LedgerEntry], windows: Sequence[Tuple[date, date]]
) -> List[MonthlyTrendPoint]:
    totals = {
        (first_day.year, first_day.month): {"income": Decimal(0), "expense": Decimal(0)}
        for first_day, _ in windows
    }

    for entry in entries:
        month_totals = totals.get((entry.date.year, entry.date.month))
        if month_totals is None:
            continue
        month_totals[entry.type] += entry.amount

    points = []
    for first_day, _ in windows:
        month_totals = totals[(first_day.year, first_day.month)]
        points.append(
            MonthlyTrendPoint(
                month=first_day.strftime("%b %Y"),
                period=first_day.strftime("%Y-%m"),
                income=float(month_totals["income"]),
                expense=float(month_totals["expense"]),
                balance=float(month_totals["income"] - month_totals["expense"]),
            )
        )
    return points


def percentage_change(current: float, previous: float) -> float:
    # a zero or negative baseline reports no change rather than unbounded growth
    if previous > 0:
        return (current - previous) / previous * 100
    return 0.0


def compare_summaries(current: StatsSummary, previous: StatsSummary) -> ComparisonResult:
    return ComparisonResult(
        current=current,
        previous=previous,
        change=ComparisonChange(
            income=percentage_change(current.total_income, previous.total_income),
            expenses=percentage_change(current.total_expense, previous.total_expense),
            balance=percentage_change(current.balance, previous.balance),
        ),
    )


async def _fetch_overall_net(source: EntrySource) -> Optional[Decimal]:
    try:
        all_entries = await source.fetch_entries(EntryFilter())
    except LedgerFetchError as e:
        logger.warning(f"Overall balance unavailable, using ranged balance: {e}")
        return None
    return _net_amount(all_entries)


async def compute_stats(
    source: EntrySource,
    date_range: Optional[DateRange] = None,
    include_overall_balance: bool = False,
) -> StatsSummary:
    """Income, expense and balance totals for ``date_range``.

    With ``include_overall_balance`` an unranged query runs alongside the
    ranged one and its income-minus-expense replaces ``balance``. If only that
    extra query fails, the ranged balance is kept.
    """
    date_range = date_range or DateRange()
    entry_filter = EntryFilter(start_date=date_range.start_date, end_date=date_range.end_date)
    logger.debug(f"Computing stats for {date_range.start_date}..{date_range.end_date}")

    if not include_overall_balance:
        return summarize_entries(await source.fetch_entries(entry_filter))

    entries, overall_net = await asyncio.gather(
        source.fetch_entries(entry_filter), _fetch_overall_net(source)
    )
    summary = summarize_entries(entries)
    if overall_net is None:
        return summary

    overall_balance = float(overall_net)
    return summary.model_copy(update={"balance": overall_balance, "overall_balance": overall_balance})


async def compute_category_breakdown(
    source: EntrySource, date_range: Optional[DateRange] = None
) -> List[CategoryBucket]:
    date_range = date_range or DateRange()
    entries = await source.fetch_entries(
        EntryFilter(type="expense", start_date=date_range.start_date, end_date=date_range.end_date)
    )
    return group_expenses_by_category(entries)


async def compute_daily_expenses(
    source: EntrySource, date_range: Optional[DateRange] = None
) -> Dict[str, float]:
    date_range = date_range or DateRange()
    entries = await source.fetch_entries(
        EntryFilter(start_date=date_range.start_date, end_date=date_range.end_date)
    )
    return build_daily_expenses(entries)


async def compute_monthly_trends(
    source: EntrySource, today: Optional[date] = None
) -> List[MonthlyTrendPoint]:
    windows = trailing_month_windows(today or date.today())
    logger.debug(f"Computing monthly trends from {windows[0][0]} to {windows[-1][1]}")

    # one query over the whole span, split per month in memory
    entries = await source.fetch_entries(
        EntryFilter(start_date=windows[0][0], end_date=windows[-1][1])
    )
    return build_monthly_trends(entries, windows)


async def compute_comparison(
    source: EntrySource, current_range: DateRange, previous_range: DateRange
) -> ComparisonResult:
    current, previous = await asyncio.gather(
        compute_stats(source, current_range, include_overall_balance=True),
        compute_stats(source, previous_range, include_overall_balance=True),
    )
    return compare_summaries(current, previous)
