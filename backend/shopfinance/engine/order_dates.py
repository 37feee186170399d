"""Authoritative timestamp selection for orders.

An order carries up to three candidate dates. The first one present wins:
confirmation time, then order-placed time, then creation time. If the
winning candidate cannot be parsed the order has no timestamp at all; the
later candidates are not consulted and the value is never replaced by "now".
"""

from datetime import datetime, tzinfo

import structlog
from dateutil.parser import isoparse

from shopfinance.engine.models import Order, RawTimestamp
from shopfinance.engine.periods import localize
from shopfinance.engine.quality import DataIssue, DataQualityReport

logger = structlog.get_logger()


def _first_present(candidates) -> RawTimestamp:
    for value in candidates:
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def parse_instant(value: RawTimestamp, tz: tzinfo | None = None) -> datetime | None:
    """Parse an ISO 8601 string (or pass a datetime through), localized to ``tz``."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return localize(value, tz)
    if not isinstance(value, str):
        return None
    try:
        parsed = isoparse(value.strip())
    except (ValueError, OverflowError):
        return None
    return localize(parsed, tz)


def select_timestamp(
    order: Order,
    tz: tzinfo | None = None,
    report: DataQualityReport | None = None,
) -> datetime | None:
    """Return the instant an order occurred at, or None if it has none.

    Missing and unparseable timestamps are logged and, when ``report`` is
    given, counted there.
    """
    raw = _first_present(order.candidate_dates)
    if raw is None:
        if report is None or report.record(DataIssue.MISSING_TIMESTAMP, id(order), order.order_code):
            logger.warning("order_timestamp_missing", order_code=order.order_code)
        return None

    instant = parse_instant(raw, tz)
    if instant is None:
        if report is None or report.record(DataIssue.UNPARSEABLE_TIMESTAMP, id(order), order.order_code):
            logger.warning("order_timestamp_unparseable", order_code=order.order_code, value=str(raw))
    return instant
