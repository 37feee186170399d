"""Order timestamp selection tests."""

from datetime import datetime
from decimal import Decimal

from helpers import TZ, at, make_order
from shopfinance.engine.models import Order
from shopfinance.engine.order_dates import parse_instant, select_timestamp
from shopfinance.engine.quality import DataIssue, DataQualityReport


def test_confirmation_date_wins():
    order = make_order(
        100,
        confirmed_date="2025-06-18T10:00:00",
        order_date="2025-06-17T10:00:00",
        created_at="2025-06-16T10:00:00",
    )
    assert select_timestamp(order, TZ) == at(2025, 6, 18, 10)


def test_falls_back_to_order_date_then_creation():
    placed = make_order(100, order_date="2025-06-17T10:00:00", created_at="2025-06-16T10:00:00")
    created = make_order(100, created_at="2025-06-16T10:00:00")
    assert select_timestamp(placed, TZ) == at(2025, 6, 17, 10)
    assert select_timestamp(created, TZ) == at(2025, 6, 16, 10)


def test_blank_candidate_is_treated_as_absent():
    order = make_order(100, confirmed_date="  ", order_date="2025-06-17T10:00:00")
    assert select_timestamp(order, TZ) == at(2025, 6, 17, 10)


def test_all_candidates_missing():
    report = DataQualityReport()
    assert select_timestamp(make_order(100), TZ, report) is None
    assert report.count(DataIssue.MISSING_TIMESTAMP) == 1


def test_unparseable_winner_does_not_fall_through():
    report = DataQualityReport()
    order = make_order(100, confirmed_date="not-a-date", created_at="2025-06-16T10:00:00", code="A-1")
    assert select_timestamp(order, TZ, report) is None
    assert report.count(DataIssue.UNPARSEABLE_TIMESTAMP) == 1
    assert report.samples[DataIssue.UNPARSEABLE_TIMESTAMP] == ["A-1"]


def test_same_order_is_counted_once():
    report = DataQualityReport()
    order = make_order(100, confirmed_date="garbage")
    select_timestamp(order, TZ, report)
    select_timestamp(order, TZ, report)
    assert report.total == 1


def test_utc_timestamps_are_converted_to_business_time():
    order = make_order(100, confirmed_date="2025-06-18T04:00:00Z")
    assert select_timestamp(order, TZ) == at(2025, 6, 18, 9)
    assert select_timestamp(order, TZ).hour == 9


def test_datetime_candidates_are_accepted():
    order = Order(total_amount=Decimal("5"), order_date=datetime(2025, 6, 18, 8, 15))
    assert select_timestamp(order, TZ) == at(2025, 6, 18, 8, 15)


def test_parse_instant_date_only():
    assert parse_instant("2025-06-18", TZ) == at(2025, 6, 18)


def test_parse_instant_rejects_impossible_dates():
    assert parse_instant("2025-13-45T00:00:00", TZ) is None


def test_non_string_candidate_is_unparseable():
    report = DataQualityReport()
    order = make_order(100, confirmed_date=1750219200000, order_date="2025-06-17T10:00:00")
    assert select_timestamp(order, TZ, report) is None
    assert report.count(DataIssue.UNPARSEABLE_TIMESTAMP) == 1
    assert parse_instant({"seconds": 1750219200}, TZ) is None
