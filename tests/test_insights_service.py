import math
from datetime import date

import pytest

from conftest import InMemoryEntrySource, make_entry
from fintrack.schemas.insights_schema import DateRange, StatsSummary
from fintrack.services import insights_service
from fintrack.utils.exceptions import LedgerFetchError

JANUARY = DateRange(start_date=date(2024, 1, 1), end_date=date(2024, 1, 31))
DECEMBER = DateRange(start_date=date(2023, 12, 1), end_date=date(2023, 12, 31))


class TestSummarizeEntries:
    def test_january_scenario(self, january_entries):
        summary = insights_service.summarize_entries(january_entries)

        assert summary.total_income == 100
        assert summary.total_expense == 50
        assert summary.balance == 50
        assert summary.transaction_count == 3
        assert summary.overall_balance is None

    def test_empty_list(self):
        summary = insights_service.summarize_entries([])

        assert summary == StatsSummary(
            total_income=0, total_expense=0, balance=0, transaction_count=0
        )

    def test_decimal_amounts_sum_without_drift(self):
        entries = [make_entry("expense", "0.10", date(2024, 1, 1)) for _ in range(10)]
        entries.append(make_entry("income", "0.20", date(2024, 1, 1)))
        entries.append(make_entry("income", "0.10", date(2024, 1, 1)))

        summary = insights_service.summarize_entries(entries)

        assert summary.total_expense == 1.0
        assert summary.total_income == 0.3
        assert summary.balance == -0.7

    def test_does_not_mutate_input(self, january_entries):
        before = list(january_entries)
        insights_service.summarize_entries(january_entries)
        assert january_entries == before


class TestGroupExpensesByCategory:
    def test_january_scenario(self, january_entries):
        expenses = [entry for entry in january_entries if entry.type == "expense"]

        buckets = insights_service.group_expenses_by_category(expenses)

        assert [(bucket.name, bucket.value) for bucket in buckets] == [
            ("Food", 40),
            ("Uncategorized", 10),
        ]
        assert buckets[1].color == "#6b7280"

    def test_first_seen_order_and_merging_by_name(self):
        entries = [
            make_entry("expense", 5, date(2024, 1, 1), category="Transport", color="#111111"),
            make_entry("expense", 20, date(2024, 1, 2), category="Food", color="#222222"),
            make_entry("expense", 7, date(2024, 1, 3), category="Transport", color="#333333"),
        ]

        buckets = insights_service.group_expenses_by_category(entries)

        assert [bucket.name for bucket in buckets] == ["Transport", "Food"]
        assert buckets[0].value == 12
        # same-named categories collapse, the latest color wins
        assert buckets[0].color == "#333333"

    def test_bucket_values_sum_to_total_expense(self, january_entries):
        expenses = [entry for entry in january_entries if entry.type == "expense"]

        buckets = insights_service.group_expenses_by_category(expenses)
        summary = insights_service.summarize_entries(expenses)

        assert sum(bucket.value for bucket in buckets) == summary.total_expense


class TestBuildDailyExpenses:
    def test_january_scenario(self, january_entries):
        daily = insights_service.build_daily_expenses(january_entries)

        assert daily == {"2024-01-05": 40, "2024-01-06": 10}

    def test_income_only_days_and_zero_days_are_absent(self):
        entries = [
            make_entry("income", 500, date(2024, 2, 1)),
            make_entry("expense", 0, date(2024, 2, 2)),
            make_entry("expense", 3, date(2024, 2, 3)),
            make_entry("expense", 4, date(2024, 2, 3)),
        ]

        daily = insights_service.build_daily_expenses(entries)

        assert daily == {"2024-02-03": 7}

    def test_values_sum_to_total_expense(self, january_entries):
        daily = insights_service.build_daily_expenses(january_entries)
        summary = insights_service.summarize_entries(january_entries)

        assert sum(daily.values()) == summary.total_expense

    def test_idempotent(self, january_entries):
        first = insights_service.build_daily_expenses(january_entries)
        second = insights_service.build_daily_expenses(january_entries)
        assert first == second


class TestMonthlyWindows:
    def test_twelve_windows_ending_at_current_month(self):
        windows = insights_service.trailing_month_windows(date(2024, 3, 15))

        assert len(windows) == 12
        assert windows[0] == (date(2023, 4, 1), date(2023, 4, 30))
        assert windows[-1] == (date(2024, 3, 1), date(2024, 3, 31))

    def test_leap_february(self):
        windows = insights_service.trailing_month_windows(date(2024, 3, 31))
        assert (date(2024, 2, 1), date(2024, 2, 29)) in windows

    def test_crosses_year_boundary(self):
        windows = insights_service.trailing_month_windows(date(2025, 1, 10))
        assert windows[0] == (date(2024, 2, 1), date(2024, 2, 29))
        assert windows[-1] == (date(2025, 1, 1), date(2025, 1, 31))


class TestPercentageChange:
    def test_regular_change(self):
        assert insights_service.percentage_change(150, 100) == 50
        assert insights_service.percentage_change(25, 50) == -50

    def test_zero_baseline_reports_zero(self):
        change = insights_service.percentage_change(500, 0)
        assert change == 0
        assert not math.isinf(change)

    def test_negative_baseline_reports_zero(self):
        assert insights_service.percentage_change(100, -40) == 0


@pytest.mark.asyncio
async def test_compute_stats_filters_by_range(january_entries):
    entries = january_entries + [make_entry("income", 1000, date(2023, 6, 1))]
    source = InMemoryEntrySource(entries)

    summary = await insights_service.compute_stats(source, JANUARY)

    assert summary.total_income == 100
    assert summary.total_expense == 50
    assert summary.balance == 50
    assert summary.transaction_count == 3
    assert len(source.calls) == 1


@pytest.mark.asyncio
async def test_compute_stats_with_overall_balance(january_entries):
    entries = january_entries + [make_entry("income", 1000, date(2023, 6, 1))]
    source = InMemoryEntrySource(entries)

    summary = await insights_service.compute_stats(source, JANUARY, include_overall_balance=True)

    assert summary.total_income == 100
    assert summary.total_expense == 50
    assert summary.balance == 1050
    assert summary.overall_balance == 1050
    assert any(call.start_date is None and call.end_date is None for call in source.calls)


@pytest.mark.asyncio
async def test_compute_stats_falls_back_when_overall_query_fails(january_entries):
    source = InMemoryEntrySource(
        january_entries,
        error=LedgerFetchError("store unavailable"),
        fail_when=lambda entry_filter: entry_filter.start_date is None,
    )

    summary = await insights_service.compute_stats(source, JANUARY, include_overall_balance=True)

    assert summary.balance == 50
    assert summary.overall_balance is None


@pytest.mark.asyncio
async def test_compute_stats_propagates_fetch_error():
    source = InMemoryEntrySource([], error=LedgerFetchError("connection refused"))

    with pytest.raises(LedgerFetchError, match="connection refused"):
        await insights_service.compute_stats(source, JANUARY)


@pytest.mark.asyncio
async def test_compute_category_breakdown_requests_expenses_only(january_entries):
    source = InMemoryEntrySource(january_entries)

    buckets = await insights_service.compute_category_breakdown(source, JANUARY)

    assert source.calls[0].type == "expense"
    assert [(bucket.name, bucket.value) for bucket in buckets] == [
        ("Food", 40),
        ("Uncategorized", 10),
    ]


@pytest.mark.asyncio
async def test_compute_daily_expenses(january_entries):
    source = InMemoryEntrySource(january_entries)

    daily = await insights_service.compute_daily_expenses(source, JANUARY)

    assert daily == {"2024-01-05": 40, "2024-01-06": 10}


@pytest.mark.asyncio
async def test_compute_monthly_trends():
    entries = [
        make_entry("expense", 999, date(2023, 3, 31)),
        make_entry("income", 300, date(2023, 4, 1)),
        make_entry("expense", 30, date(2024, 2, 29)),
        make_entry("income", 100, date(2024, 3, 1)),
        make_entry("expense", 25, date(2024, 3, 31)),
    ]
    source = InMemoryEntrySource(entries)

    points = await insights_service.compute_monthly_trends(source, today=date(2024, 3, 15))

    assert len(points) == 12
    assert points[0].month == "Apr 2023"
    assert points[0].period == "2023-04"
    assert points[0].income == 300
    assert points[0].expense == 0
    assert points[-1].month == "Mar 2024"
    assert points[-1].income == 100
    assert points[-1].expense == 25
    assert points[-1].balance == 75
    february = next(point for point in points if point.period == "2024-02")
    assert february.expense == 30
    assert february.balance == -30
    assert all(point.income == 0 and point.expense == 0 for point in points[1:10])


@pytest.mark.asyncio
async def test_compute_monthly_trends_fails_as_a_whole():
    source = InMemoryEntrySource([], error=LedgerFetchError("timeout"))

    with pytest.raises(LedgerFetchError):
        await insights_service.compute_monthly_trends(source, today=date(2024, 3, 15))


@pytest.mark.asyncio
async def test_compute_comparison_zero_baseline():
    entries = [
        make_entry("income", 200, date(2024, 1, 10)),
        make_entry("expense", 50, date(2024, 1, 11)),
    ]
    source = InMemoryEntrySource(entries)

    result = await insights_service.compute_comparison(source, JANUARY, DECEMBER)

    assert result.current.total_income == 200
    assert result.previous.total_income == 0
    assert result.change.income == 0
    assert result.change.expenses == 0
    assert result.change.balance == 0


@pytest.mark.asyncio
async def test_compute_comparison_percentages():
    entries = [
        make_entry("income", 100, date(2023, 12, 10)),
        make_entry("expense", 50, date(2023, 12, 11)),
        make_entry("income", 150, date(2024, 1, 10)),
        make_entry("expense", 25, date(2024, 1, 11)),
    ]
    source = InMemoryEntrySource(entries)

    result = await insights_service.compute_comparison(source, JANUARY, DECEMBER)

    assert result.change.income == 50
    assert result.change.expenses == -50
    # both sides report the same all-time balance
    assert result.current.balance == result.previous.balance == 175
    assert result.change.balance == 0


@pytest.mark.asyncio
async def test_compute_comparison_fails_if_either_side_fails(january_entries):
    source = InMemoryEntrySource(
        january_entries,
        error=LedgerFetchError("previous period unavailable"),
        fail_when=lambda entry_filter: entry_filter.start_date == DECEMBER.start_date,
    )

    with pytest.raises(LedgerFetchError, match="previous period unavailable"):
        await insights_service.compute_comparison(source, JANUARY, DECEMBER)
