"""Expense allocation for a reporting period.

Fixed categories (employee, electricity, purchase) are stored as a single
monthly total with no dating of their own. Their share of a reporting
period is approximated by linear scaling against a 30-day reference month:
a day is 1/30 of the month, a week 7/30, a year 12 months. This is a known
approximation, not calendar-exact accounting.

Discretionary expenses carry a date and are simply filtered into the
period. For all-time every record counts and fixed totals are taken as-is.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, time, tzinfo
from decimal import Decimal
from fractions import Fraction

import structlog
from dateutil.parser import isoparse

from shopfinance.engine.models import ExpenseRecord, FixedCategory, FixedExpenses, StockItem
from shopfinance.engine.money import ZERO, scale
from shopfinance.engine.periods import PeriodKind, PeriodRange, localize
from shopfinance.engine.quality import DataIssue, DataQualityReport

logger = structlog.get_logger()

REFERENCE_MONTH_DAYS = 30

_FIXED_MULTIPLIERS: dict[PeriodKind, Fraction] = {
    PeriodKind.TODAY: Fraction(1, REFERENCE_MONTH_DAYS),
    PeriodKind.YESTERDAY: Fraction(1, REFERENCE_MONTH_DAYS),
    PeriodKind.LAST_7_DAYS: Fraction(7, REFERENCE_MONTH_DAYS),
    PeriodKind.LAST_30_DAYS: Fraction(1),
    PeriodKind.LAST_365_DAYS: Fraction(12),
    PeriodKind.ALL_TIME: Fraction(1),  # full uncapped total, not a scaled month
}


def period_multiplier(period: PeriodRange) -> Fraction:
    """Share of one month's fixed costs attributed to ``period``."""
    if period.kind is PeriodKind.CUSTOM:
        return Fraction(period.day_count, REFERENCE_MONTH_DAYS)
    return _FIXED_MULTIPLIERS[period.kind]


@dataclass(frozen=True)
class ExpenseAllocation:
    multiplier: Fraction
    fixed_by_category: dict[FixedCategory, Decimal] = field(default_factory=dict)
    discretionary_share: Decimal = ZERO
    discretionary_count: int = 0

    @property
    def fixed_share(self) -> Decimal:
        return sum(self.fixed_by_category.values(), ZERO)

    @property
    def operating_expenses(self) -> Decimal:
        return self.fixed_share + self.discretionary_share


def expense_instant(record: ExpenseRecord, tz: tzinfo) -> datetime | None:
    """Midnight of the day an expense occurred, in ``tz``; None if undated."""
    value = record.occurred_on
    if value is None:
        return None
    if isinstance(value, datetime):
        value = localize(value, tz).date()
    elif isinstance(value, str):
        try:
            value = localize(isoparse(value.strip()), tz).date()
        except (ValueError, OverflowError):
            return None
    if not isinstance(value, date):
        return None
    return datetime.combine(value, time.min, tzinfo=tz)


def filter_expenses(
    records: Iterable[ExpenseRecord],
    period: PeriodRange,
    report: DataQualityReport | None = None,
) -> list[ExpenseRecord]:
    """Discretionary records dated inside ``period``; all of them for all-time."""
    if period.is_all_time:
        return list(records)

    selected = []
    for record in records:
        occurred = expense_instant(record, period.tz)
        if occurred is None:
            if report is None or report.record(DataIssue.UNPARSEABLE_EXPENSE_DATE, id(record), record.name):
                logger.warning("expense_date_unparseable", name=record.name, value=str(record.occurred_on))
            continue
        if period.contains(occurred):
            selected.append(record)
    return selected


def allocate(
    fixed: FixedExpenses,
    records: Iterable[ExpenseRecord],
    period: PeriodRange,
    report: DataQualityReport | None = None,
) -> ExpenseAllocation:
    """Compute the fixed-category share and the discretionary total for ``period``."""
    multiplier = period_multiplier(period)
    by_category = {
        category: scale(fixed.amount(category), multiplier)
        for category in FixedCategory
    }
    selected = filter_expenses(records, period, report)
    return ExpenseAllocation(
        multiplier=multiplier,
        fixed_by_category=by_category,
        discretionary_share=sum((r.amount for r in selected), ZERO),
        discretionary_count=len(selected),
    )


def inventory_valuation(items: Iterable[StockItem]) -> Decimal:
    """Capital tied up in current stock: sum of unit cost × quantity on hand.

    Always taken over the full current inventory and never scaled by period.
    """
    return sum((item.unit_cost * item.quantity for item in items), ZERO)
