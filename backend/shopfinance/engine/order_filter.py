"""Select the orders that fall inside a reporting period."""

from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal
from typing import NamedTuple

from shopfinance.engine.models import Order
from shopfinance.engine.order_dates import select_timestamp
from shopfinance.engine.periods import PeriodRange
from shopfinance.engine.quality import DataQualityReport


class DatedOrder(NamedTuple):
    """An order paired with its resolved timestamp."""
    order: Order
    occurred_at: datetime

    @property
    def total_amount(self) -> Decimal:
        return self.order.total_amount


def date_orders(
    orders: Iterable[Order],
    period: PeriodRange,
    report: DataQualityReport | None = None,
) -> list[DatedOrder]:
    """Resolve every order's timestamp once, dropping orders that have none.

    Input order is preserved.
    """
    dated = []
    for order in orders:
        occurred_at = select_timestamp(order, period.tz, report)
        if occurred_at is not None:
            dated.append(DatedOrder(order, occurred_at))
    return dated


def within(dated: Iterable[DatedOrder], period: PeriodRange) -> list[DatedOrder]:
    """Keep the already-dated orders inside ``period`` (both bounds inclusive)."""
    return [d for d in dated if period.contains(d.occurred_at)]


def filter_dated(
    orders: Iterable[Order],
    period: PeriodRange,
    report: DataQualityReport | None = None,
) -> list[DatedOrder]:
    return within(date_orders(orders, period, report), period)


def filter_orders(
    orders: Iterable[Order],
    period: PeriodRange,
    report: DataQualityReport | None = None,
) -> list[Order]:
    """Return the subset of ``orders`` whose timestamp lies in ``period``.

    Orders without a usable timestamp are excluded from every period,
    all-time included. The original ordering is kept.
    """
    return [d.order for d in filter_dated(orders, period, report)]
