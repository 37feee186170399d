"""Analytics service — period summaries, comparisons, trends, dashboard.

Order timestamps are resolved once per snapshot; every period view then
filters that dated list once and derives revenue, expenses, breakdowns and
the trend series from the same subset.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from decimal import Decimal

import structlog

from shopfinance.engine.balance import BalanceSummary, change_pct, compute, revenue_by_payment_method
from shopfinance.engine.expenses import ExpenseAllocation, allocate, inventory_valuation
from shopfinance.engine.models import PaymentMethod, StoreSnapshot
from shopfinance.engine.order_filter import DatedOrder, date_orders, within
from shopfinance.engine.periods import PeriodKind, PeriodRange, previous_of, resolve
from shopfinance.engine.quality import DataIssue, DataQualityReport
from shopfinance.engine.trends import BucketSeries, bucketize

logger = structlog.get_logger()

CustomRange = tuple[date | datetime | None, date | datetime | None]


@dataclass(frozen=True)
class PeriodView:
    """One period's filtered orders and the aggregates derived from them."""
    period: PeriodRange
    orders: list[DatedOrder]
    allocation: ExpenseAllocation
    summary: BalanceSummary
    inventory_value: Decimal

    @property
    def revenue_by_method(self) -> dict[PaymentMethod, Decimal]:
        return revenue_by_payment_method(self.orders)


@dataclass(frozen=True)
class PeriodComparison:
    current: PeriodView
    previous: PeriodView | None

    @property
    def revenue_change(self) -> Decimal | None:
        if self.previous is None:
            return None
        return self.current.summary.revenue - self.previous.summary.revenue

    @property
    def revenue_change_pct(self) -> float | None:
        if self.previous is None:
            return None
        return change_pct(self.current.summary.revenue, self.previous.summary.revenue)


@dataclass(frozen=True)
class Dashboard:
    comparison: PeriodComparison
    trend: BucketSeries | None
    data_quality: DataQualityReport = field(default_factory=DataQualityReport)

    @property
    def current(self) -> PeriodView:
        return self.comparison.current


class AnalyticsService:
    def __init__(self, snapshot: StoreSnapshot, tz: tzinfo):
        self.snapshot = snapshot
        self.tz = tz
        self.report = DataQualityReport()
        self.report.add(DataIssue.INVALID_RECORD, snapshot.invalid_records)
        self._inventory_value = inventory_valuation(snapshot.stock)
        self._dated = date_orders(
            snapshot.orders,
            PeriodRange(PeriodKind.ALL_TIME, None, None, tz),
            self.report,
        )

    def resolve(self, period: str | PeriodKind, now: datetime, custom_range: CustomRange | None = None) -> PeriodRange:
        return resolve(period, now, custom_range, tz=self.tz)

    def view(self, period: PeriodRange) -> PeriodView:
        """Filter once and aggregate everything for ``period``."""
        orders = within(self._dated, period)
        allocation = allocate(
            self.snapshot.fixed_expenses,
            self.snapshot.discretionary,
            period,
            self.report,
        )
        summary = compute(orders, allocation, self._inventory_value)
        logger.debug(
            "period_view_computed",
            period=period.kind.value,
            orders=summary.order_count,
            revenue=str(summary.revenue),
            expenses=str(summary.expenses),
        )
        return PeriodView(period, orders, allocation, summary, self._inventory_value)

    def summary(self, period: str | PeriodKind, now: datetime, custom_range: CustomRange | None = None) -> PeriodView:
        return self.view(self.resolve(period, now, custom_range))

    def comparison(
        self,
        period: str | PeriodKind,
        now: datetime,
        custom_range: CustomRange | None = None,
    ) -> PeriodComparison:
        """Current period against the one right before it (none for all-time)."""
        current = self.summary(period, now, custom_range)
        previous_range = previous_of(current.period)
        previous = self.view(previous_range) if previous_range is not None else None
        return PeriodComparison(current, previous)

    def trend(
        self,
        period: str | PeriodKind,
        now: datetime,
        custom_range: CustomRange | None = None,
    ) -> BucketSeries:
        """Bucketed current vs previous revenue; fails for all-time."""
        current = self.resolve(period, now, custom_range)
        previous = previous_of(current)
        return bucketize(
            within(self._dated, current),
            within(self._dated, previous) if previous is not None else [],
            current,
            previous,
        )

    def dashboard(
        self,
        period: str | PeriodKind,
        now: datetime,
        custom_range: CustomRange | None = None,
    ) -> Dashboard:
        comparison = self.comparison(period, now, custom_range)
        trend = None
        if comparison.previous is not None:
            trend = bucketize(
                comparison.current.orders,
                comparison.previous.orders,
                comparison.current.period,
                comparison.previous.period,
            )
        if self.report.total:
            logger.info("dashboard_data_quality", **self.report.as_dict())
        return Dashboard(comparison, trend, self.report.copy())
