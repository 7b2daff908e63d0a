from calendar import monthrange
from datetime import date, timedelta
from typing import Literal, Optional

from dateutil.relativedelta import relativedelta

from fintrack.schemas.insights_schema import DateRange
from fintrack.utils.exceptions import InvalidDateRangeError

RangePreset = Literal["today", "week", "month", "7d", "30d", "90d", "ytd", "12m", "all", "custom"]


def start_of_month(day: date) -> date:
    return day.replace(day=1)


def end_of_month(day: date) -> date:
    return day.replace(day=monthrange(day.year, day.month)[1])


def start_of_week(day: date) -> date:
    # weeks start on Sunday
    return day - timedelta(days=(day.weekday() + 1) % 7)


def resolve_date_range(
    preset: RangePreset,
    today: Optional[date] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> DateRange:
    """Turn a named range into inclusive start/end dates relative to ``today``."""
    today = today or date.today()

    if preset == "custom":
        if start_date is None or end_date is None:
            raise InvalidDateRangeError("Custom range requires both start_date and end_date")
        if start_date > end_date:
            raise InvalidDateRangeError("start_date must not be after end_date")
        return DateRange(start_date=start_date, end_date=end_date)

    if preset == "today":
        return DateRange(start_date=today, end_date=today)
    if preset == "week":
        first_day = start_of_week(today)
        return DateRange(start_date=first_day, end_date=first_day + timedelta(days=6))
    if preset in ("month", "30d"):
        return DateRange(start_date=start_of_month(today), end_date=end_of_month(today))
    if preset == "7d":
        return DateRange(start_date=today - timedelta(days=6), end_date=today)
    if preset == "90d":
        return DateRange(
            start_date=start_of_month(today) - relativedelta(months=2),
            end_date=end_of_month(today),
        )
    if preset == "ytd":
        return DateRange(start_date=date(today.year, 1, 1), end_date=today)
    if preset == "12m":
        return DateRange(
            start_date=start_of_month(today) - relativedelta(months=11),
            end_date=end_of_month(today),
        )
    if preset == "all":
        return DateRange()

    raise InvalidDateRangeError(f"Unknown range: {preset}")


def previous_period(
    preset: RangePreset, current: DateRange, today: Optional[date] = None
) -> DateRange:
    """The period a ``preset`` range is compared against."""
    today = today or date.today()

    if preset in ("month", "30d"):
        previous_month = start_of_month(today) - relativedelta(months=1)
        return DateRange(start_date=previous_month, end_date=end_of_month(previous_month))
    if preset == "90d":
        return DateRange(
            start_date=start_of_month(today) - relativedelta(months=5),
            end_date=end_of_month(start_of_month(today) - relativedelta(months=3)),
        )
    if preset == "12m":
        return DateRange(
            start_date=start_of_month(today) - relativedelta(months=23),
            end_date=end_of_month(start_of_month(today) - relativedelta(months=12)),
        )
    if preset == "ytd":
        year_ago = today - relativedelta(months=12)
        return DateRange(start_date=date(year_ago.year, 1, 1), end_date=year_ago)
    if preset == "7d":
        return DateRange(start_date=today - timedelta(days=13), end_date=today - timedelta(days=7))
    if preset == "week":
        first_day = start_of_week(today) - timedelta(days=7)
        return DateRange(start_date=first_day, end_date=first_day + timedelta(days=6))
    if preset == "today":
        yesterday = today - timedelta(days=1)
        return DateRange(start_date=yesterday, end_date=yesterday)

    if current.start_date is None or current.end_date is None:
        raise InvalidDateRangeError("An unbounded range has no previous period")

    # same length, ending the day before the current range starts
    period_length = current.end_date - current.start_date
    previous_end = current.start_date - timedelta(days=1)
    return DateRange(start_date=previous_end - period_length, end_date=previous_end)
