"""Expense allocation tests."""

from datetime import date
from decimal import Decimal
from fractions import Fraction

import pytest

from helpers import NOW
from shopfinance.engine.expenses import allocate, filter_expenses, inventory_valuation, period_multiplier
from shopfinance.engine.models import ExpenseRecord, FixedCategory, FixedExpenses, StockItem
from shopfinance.engine.periods import previous_of, resolve
from shopfinance.engine.quality import DataIssue, DataQualityReport

FIXED = FixedExpenses.of(employee=3_000_000, electricity=500_000, purchase=1_000_000)


@pytest.mark.parametrize(
    "token, expected",
    [
        ("today", Fraction(1, 30)),
        ("yesterday", Fraction(1, 30)),
        ("last-7-days", Fraction(7, 30)),
        ("last-30-days", Fraction(1)),
        ("last-365-days", Fraction(12)),
        ("all-time", Fraction(1)),
    ],
)
def test_named_period_multipliers(token, expected):
    assert period_multiplier(resolve(token, NOW)) == expected


def test_custom_multiplier_uses_inclusive_day_count():
    period = resolve("custom", NOW, (date(2025, 6, 1), date(2025, 6, 10)))
    assert period_multiplier(period) == Fraction(10, 30)


def test_previous_custom_period_scales_the_same():
    period = resolve("custom", NOW, (date(2025, 6, 1), date(2025, 6, 15)))
    assert period_multiplier(previous_of(period)) == period_multiplier(period)


def test_weekly_fixed_share():
    allocation = allocate(FIXED, [], resolve("last-7-days", NOW))
    assert allocation.fixed_share == Decimal("1050000")
    assert allocation.fixed_by_category[FixedCategory.EMPLOYEE] == Decimal("700000")
    assert allocation.fixed_by_category[FixedCategory.ELECTRICITY] == Decimal("500000") * 7 / 30


def test_monthly_fixed_share_is_unscaled():
    allocation = allocate(FIXED, [], resolve("last-30-days", NOW))
    assert allocation.fixed_share == Decimal("4500000")


def test_yearly_fixed_share():
    allocation = allocate(FIXED, [], resolve("last-365-days", NOW))
    assert allocation.fixed_share == Decimal("54000000")


def test_discretionary_records_are_filtered_by_date():
    records = [
        ExpenseRecord(Decimal("100"), date(2025, 6, 15), "tape"),
        ExpenseRecord(Decimal("200"), "2025-06-18", "boxes"),
        ExpenseRecord(Decimal("400"), date(2025, 6, 1), "shelf"),
    ]
    allocation = allocate(FIXED, records, resolve("last-7-days", NOW))
    assert allocation.discretionary_share == Decimal("300")
    assert allocation.discretionary_count == 2
    assert allocation.operating_expenses == Decimal("1050300")


def test_today_includes_todays_expenses_only():
    records = [
        ExpenseRecord(Decimal("50"), date(2025, 6, 18)),
        ExpenseRecord(Decimal("70"), date(2025, 6, 17)),
    ]
    assert allocate(FIXED, records, resolve("today", NOW)).discretionary_share == Decimal("50")
    assert allocate(FIXED, records, resolve("yesterday", NOW)).discretionary_share == Decimal("70")


def test_timestamped_expense_dates_use_business_day():
    # 22:00 UTC on the 17th is already the 18th in Tashkent
    records = [ExpenseRecord(Decimal("80"), "2025-06-17T22:00:00Z", "late entry")]
    assert allocate(FIXED, records, resolve("today", NOW)).discretionary_share == Decimal("80")
    assert allocate(FIXED, records, resolve("yesterday", NOW)).discretionary_share == 0


def test_all_time_sums_every_record_unconditionally():
    records = [
        ExpenseRecord(Decimal("100"), date(2001, 1, 1)),
        ExpenseRecord(Decimal("200"), None),
        ExpenseRecord(Decimal("300"), "someday"),
    ]
    allocation = allocate(FIXED, records, resolve("all-time", NOW))
    assert allocation.discretionary_share == Decimal("600")
    assert allocation.fixed_share == Decimal("4500000")


def test_unparseable_expense_dates_are_counted_and_skipped():
    report = DataQualityReport()
    records = [
        ExpenseRecord(Decimal("100"), "yesterday-ish", "mystery"),
        ExpenseRecord(Decimal("200"), date(2025, 6, 18)),
    ]
    selected = filter_expenses(records, resolve("today", NOW), report)
    assert [r.amount for r in selected] == [Decimal("200")]
    assert report.count(DataIssue.UNPARSEABLE_EXPENSE_DATE) == 1


def test_missing_categories_count_as_zero():
    allocation = allocate(FixedExpenses(), [], resolve("last-7-days", NOW))
    assert allocation.fixed_share == 0
    assert set(allocation.fixed_by_category) == set(FixedCategory)


def test_inventory_valuation():
    items = [
        StockItem(Decimal("1500"), 10, "soap"),
        StockItem(Decimal("250.50"), 4, "gum"),
        StockItem(Decimal("999"), 0, "sold out"),
    ]
    assert inventory_valuation(items) == Decimal("16002.00")
    assert inventory_valuation([]) == 0
