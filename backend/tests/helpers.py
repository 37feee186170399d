"""Test helpers: fixed clock and order factories."""

from datetime import datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

from shopfinance.engine.models import Order, PaymentMethod

TZ = ZoneInfo("Asia/Tashkent")

# Wednesday afternoon; every engine test is anchored here, never on the wall clock.
NOW = datetime(2025, 6, 18, 14, 30, tzinfo=TZ)


def at(*args) -> datetime:
    """Shorthand for an instant in the business timezone."""
    return datetime(*args, tzinfo=TZ)


def make_order(amount, when=None, *, code="", method=PaymentMethod.MANUAL, **dates) -> Order:
    """Order confirmed at ``when`` (or carrying the explicit date fields given)."""
    if when is not None:
        dates.setdefault("confirmed_date", when.isoformat() if isinstance(when, datetime) else when)
    return Order(total_amount=Decimal(amount), payment_method=method, order_code=code, **dates)
