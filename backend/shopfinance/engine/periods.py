"""Reporting period resolution.

Turns a period token (``today``, ``last-7-days``, ``custom`` …) plus an
explicit "now" into a concrete inclusive ``[start, end]`` instant range,
and derives the immediately preceding range used for comparisons.

The engine never reads the wall clock: callers capture ``now`` once per
evaluation and pass it through, so filtering and bucketing always agree
on the same boundaries.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from enum import Enum

from dateutil.relativedelta import relativedelta

from shopfinance.engine.errors import InvalidRangeError

ONE_DAY = timedelta(days=1)
# Smallest step below an instant; keeps a range and its predecessor disjoint.
TICK = timedelta(microseconds=1)


class PeriodKind(str, Enum):
    TODAY = "today"
    YESTERDAY = "yesterday"
    LAST_7_DAYS = "last-7-days"
    LAST_30_DAYS = "last-30-days"
    LAST_365_DAYS = "last-365-days"
    CUSTOM = "custom"
    ALL_TIME = "all-time"

    @classmethod
    def parse(cls, token: str | PeriodKind) -> PeriodKind:
        """Resolve a period token, accepting the legacy dashboard names."""
        if isinstance(token, PeriodKind):
            return token
        kind = _PERIOD_ALIASES.get(str(token).strip().lower())
        if kind is None:
            raise InvalidRangeError(f"Unknown period '{token}'")
        return kind


_PERIOD_ALIASES: dict[str, PeriodKind] = {k.value: k for k in PeriodKind}
_PERIOD_ALIASES.update({
    "day": PeriodKind.TODAY,
    "week": PeriodKind.LAST_7_DAYS,
    "month": PeriodKind.LAST_30_DAYS,
    "year": PeriodKind.LAST_365_DAYS,
    "all": PeriodKind.ALL_TIME,
})


@dataclass(frozen=True)
class PeriodRange:
    """An inclusive instant range; both bounds are ``None`` for all-time."""
    kind: PeriodKind
    start: datetime | None
    end: datetime | None
    tz: tzinfo = timezone.utc

    def __post_init__(self) -> None:
        if self.start is not None and self.end is not None and self.start > self.end:
            raise InvalidRangeError(
                f"Period start {self.start.isoformat()} is after end {self.end.isoformat()}"
            )

    @property
    def is_all_time(self) -> bool:
        return self.kind is PeriodKind.ALL_TIME

    @property
    def day_count(self) -> int | None:
        """Number of calendar days touched by the range (inclusive), None if unbounded."""
        if self.start is None or self.end is None:
            return None
        return (self.end.date() - self.start.date()).days + 1

    def contains(self, instant: datetime) -> bool:
        if self.start is not None and instant < self.start:
            return False
        if self.end is not None and instant > self.end:
            return False
        return True


# ── Clock helpers ─────────────────────────────────


def localize(moment: datetime, tz: tzinfo | None = None) -> datetime:
    """Attach or convert ``moment`` to ``tz``.

    Naive values are read as wall-clock time in ``tz`` (UTC when no zone is
    given); aware values are converted.
    """
    zone = tz or moment.tzinfo or timezone.utc
    if moment.tzinfo is None:
        return moment.replace(tzinfo=zone)
    return moment.astimezone(zone)


def midnight(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)


def end_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.max, tzinfo=moment.tzinfo)


def _as_day(value: date | datetime, tz: tzinfo) -> datetime:
    if isinstance(value, datetime):
        return localize(value, tz)
    return datetime.combine(value, time.min, tzinfo=tz)


# ── Resolution ────────────────────────────────────


def resolve(
    period: str | PeriodKind,
    now: datetime,
    custom_range: tuple[date | datetime | None, date | datetime | None] | None = None,
    tz: tzinfo | None = None,
) -> PeriodRange:
    """Resolve ``period`` into a concrete range anchored at ``now``.

    Raises:
        InvalidRangeError: unknown token, custom period without both dates,
            or custom start after custom end.
    """
    kind = PeriodKind.parse(period)
    now = localize(now, tz)
    zone = now.tzinfo

    if kind is PeriodKind.TODAY:
        return PeriodRange(kind, midnight(now), end_of_day(now), zone)
    if kind is PeriodKind.YESTERDAY:
        day = now - ONE_DAY
        return PeriodRange(kind, midnight(day), end_of_day(day), zone)
    if kind is PeriodKind.LAST_7_DAYS:
        return PeriodRange(kind, now - timedelta(days=7), now, zone)
    if kind is PeriodKind.LAST_30_DAYS:
        return PeriodRange(kind, now - relativedelta(months=1), now, zone)
    if kind is PeriodKind.LAST_365_DAYS:
        return PeriodRange(kind, now - relativedelta(years=1), now, zone)
    if kind is PeriodKind.ALL_TIME:
        return PeriodRange(kind, None, None, zone)

    start, end = custom_range or (None, None)
    if start is None or end is None:
        raise InvalidRangeError("Custom period requires both a start and an end date")
    start_at = midnight(_as_day(start, zone))
    end_at = end_of_day(_as_day(end, zone))
    if start_at.date() > end_at.date():
        raise InvalidRangeError(
            f"Custom period start {start_at.date().isoformat()} is after end {end_at.date().isoformat()}"
        )
    return PeriodRange(kind, start_at, end_at, zone)


def _window(period: PeriodRange) -> timedelta | relativedelta:
    """Semantic length of ``period`` used to step back to its predecessor."""
    if period.kind in (PeriodKind.TODAY, PeriodKind.YESTERDAY):
        return ONE_DAY
    if period.kind is PeriodKind.LAST_7_DAYS:
        return timedelta(days=7)
    if period.kind is PeriodKind.LAST_30_DAYS:
        return relativedelta(months=1)
    if period.kind is PeriodKind.LAST_365_DAYS:
        return relativedelta(years=1)
    return timedelta(days=period.day_count)


def previous_of(period: PeriodRange) -> PeriodRange | None:
    """Range of equal semantic length ending just before ``period`` starts.

    All-time has no predecessor and yields ``None``; callers omit the
    comparison in that case.
    """
    if period.is_all_time or period.start is None:
        return None
    return PeriodRange(
        kind=period.kind,
        start=period.start - _window(period),
        end=period.start - TICK,
        tz=period.tz,
    )
