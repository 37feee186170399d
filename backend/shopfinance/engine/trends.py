"""Time-bucketed trend series for charting.

Orders of the current and the previous period are summed into the same set
of buckets so the two series line up index by index:

    today / yesterday   24 buckets, hour of day          "0:00" … "23:00"
    last-7-days          7 buckets, weekday (Mon first)  "Mon" … "Sun"
    last-30-days         4 buckets, week of month        "Week 1" … "Week 4"
    last-365-days       12 buckets, month of year        "Jan" … "Dec"
    custom              sized by span, offsets from the range start:
                        <= 1 day hourly, <= 7 days daily,
                        <= 31 days per 7-day week, longer per 30-day month

Out-of-range indices are clamped onto the first or last bucket so the
series always sums to the period revenue.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from shopfinance.engine.errors import UndefinedBucketingError
from shopfinance.engine.models import Order
from shopfinance.engine.money import ZERO
from shopfinance.engine.order_dates import select_timestamp
from shopfinance.engine.order_filter import DatedOrder
from shopfinance.engine.periods import ONE_DAY, PeriodKind, PeriodRange, previous_of

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class BucketUnit(str, Enum):
    HOUR = "hour"
    WEEKDAY = "weekday"
    WEEK_OF_MONTH = "week_of_month"
    MONTH_OF_YEAR = "month_of_year"
    DAY_OFFSET = "day"
    WEEK_OFFSET = "week"
    MONTH_OFFSET = "month"


# Days per bucket for the offset units used by custom ranges.
_OFFSET_DAYS = {
    BucketUnit.DAY_OFFSET: 1,
    BucketUnit.WEEK_OFFSET: 7,
    BucketUnit.MONTH_OFFSET: 30,
}


@dataclass(frozen=True)
class BucketLayout:
    unit: BucketUnit
    labels: tuple[str, ...]

    @property
    def count(self) -> int:
        return len(self.labels)


@dataclass(frozen=True)
class Bucket:
    label: str
    current_value: Decimal
    previous_value: Decimal


@dataclass(frozen=True)
class BucketSeries:
    unit: BucketUnit
    buckets: tuple[Bucket, ...]

    @property
    def current_total(self) -> Decimal:
        return sum((b.current_value for b in self.buckets), ZERO)

    @property
    def previous_total(self) -> Decimal:
        return sum((b.previous_value for b in self.buckets), ZERO)

    def __len__(self) -> int:
        return len(self.buckets)


def _hourly() -> BucketLayout:
    return BucketLayout(BucketUnit.HOUR, tuple(f"{h}:00" for h in range(24)))


def layout_for(period: PeriodRange) -> BucketLayout:
    """Pick bucket unit and count for ``period``."""
    kind = period.kind
    if kind is PeriodKind.ALL_TIME:
        raise UndefinedBucketingError("No trend series is defined for the all-time period")
    if kind in (PeriodKind.TODAY, PeriodKind.YESTERDAY):
        return _hourly()
    if kind is PeriodKind.LAST_7_DAYS:
        return BucketLayout(BucketUnit.WEEKDAY, WEEKDAY_LABELS)
    if kind is PeriodKind.LAST_30_DAYS:
        return BucketLayout(BucketUnit.WEEK_OF_MONTH, tuple(f"Week {i}" for i in range(1, 5)))
    if kind is PeriodKind.LAST_365_DAYS:
        return BucketLayout(BucketUnit.MONTH_OF_YEAR, MONTH_LABELS)

    days = period.day_count
    if days <= 1:
        return _hourly()
    if days <= 7:
        return BucketLayout(BucketUnit.DAY_OFFSET, tuple(f"Day {i}" for i in range(1, days + 1)))
    if days <= 31:
        weeks = math.ceil(days / 7)
        return BucketLayout(BucketUnit.WEEK_OFFSET, tuple(f"Week {i}" for i in range(1, weeks + 1)))
    months = math.ceil(days / 30)
    return BucketLayout(BucketUnit.MONTH_OFFSET, tuple(f"Month {i}" for i in range(1, months + 1)))


def bucket_index(instant: datetime, layout: BucketLayout, anchor: datetime | None = None) -> int:
    """Bucket an instant falls into, clamped to ``[0, layout.count)``.

    ``anchor`` is the start of the range the instant belongs to; it is only
    used by the offset units of custom ranges.
    """
    unit = layout.unit
    if unit is BucketUnit.HOUR:
        index = instant.hour
    elif unit is BucketUnit.WEEKDAY:
        index = instant.weekday()  # Monday 0 … Sunday 6
    elif unit is BucketUnit.WEEK_OF_MONTH:
        index = (instant.day - 1) // 7
    elif unit is BucketUnit.MONTH_OF_YEAR:
        index = instant.month - 1
    else:
        offset_days = (instant - anchor) // ONE_DAY
        index = offset_days // _OFFSET_DAYS[unit]
    return min(max(index, 0), layout.count - 1)


def _accumulate(
    orders: Iterable[Order | DatedOrder],
    layout: BucketLayout,
    period: PeriodRange,
) -> list[Decimal]:
    totals = [ZERO] * layout.count
    for item in orders:
        if isinstance(item, DatedOrder):
            occurred_at = item.occurred_at
        else:
            occurred_at = select_timestamp(item, period.tz)
            if occurred_at is None:
                continue
        index = bucket_index(occurred_at.astimezone(period.tz), layout, period.start)
        totals[index] += item.total_amount
    return totals


def bucketize(
    current: Iterable[Order | DatedOrder],
    previous: Iterable[Order | DatedOrder],
    period: PeriodRange,
    previous_period: PeriodRange | None = None,
) -> BucketSeries:
    """Sum order value per bucket for the current and previous period.

    Offsets for the previous series are measured from the previous range's
    own start, so bucket i compares like with like.

    Raises:
        UndefinedBucketingError: ``period`` is all-time.
    """
    layout = layout_for(period)
    previous_period = previous_period or previous_of(period)
    current_totals = _accumulate(current, layout, period)
    previous_totals = _accumulate(previous, layout, previous_period)
    return BucketSeries(
        unit=layout.unit,
        buckets=tuple(
            Bucket(label, cur, prev)
            for label, cur, prev in zip(layout.labels, current_totals, previous_totals)
        ),
    )
