"""Engine data model: orders, expense records and stock snapshots.

These are plain, immutable records handed to the engine by a data-access
collaborator (see ``services.store_client``). The engine never mutates or
persists them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum


class PaymentMethod(str, Enum):
    """How an order was paid."""
    MANUAL = "manual"            # receipt / check code confirmed by the company
    DEMO_ONLINE = "demo-online"
    REAL_ONLINE = "real-online"

    @classmethod
    def parse(cls, value: str | PaymentMethod | None) -> PaymentMethod:
        """Normalize a raw payment method; unknown or missing means manual."""
        if isinstance(value, PaymentMethod):
            return value
        if not value:
            return cls.MANUAL
        return _PAYMENT_ALIASES.get(value.strip().lower(), cls.MANUAL)


_PAYMENT_ALIASES: dict[str, PaymentMethod] = {
    "manual": PaymentMethod.MANUAL,
    "checks_codes": PaymentMethod.MANUAL,
    "demo-online": PaymentMethod.DEMO_ONLINE,
    "demo_online": PaymentMethod.DEMO_ONLINE,
    "real-online": PaymentMethod.REAL_ONLINE,
    "real_online": PaymentMethod.REAL_ONLINE,
}


# Raw candidate value as delivered by the backend: normally an ISO string, a
# datetime or nothing. Anything else is kept as-is and treated as unparseable.
RawTimestamp = str | datetime | object | None


@dataclass(frozen=True)
class Order:
    """A customer order, read-only to the engine."""
    total_amount: Decimal
    payment_method: PaymentMethod = PaymentMethod.MANUAL
    confirmed_date: RawTimestamp = None
    order_date: RawTimestamp = None
    created_at: RawTimestamp = None
    order_code: str = ""

    @property
    def candidate_dates(self) -> tuple[RawTimestamp, RawTimestamp, RawTimestamp]:
        """Timestamp candidates in precedence order: confirmed, placed, created."""
        return (self.confirmed_date, self.order_date, self.created_at)


@dataclass(frozen=True)
class ExpenseRecord:
    """A discretionary, dated cost entry."""
    amount: Decimal
    occurred_on: date | str | object | None  # non-date values count as unparseable
    name: str = ""


class FixedCategory(str, Enum):
    EMPLOYEE = "employee"
    ELECTRICITY = "electricity"
    PURCHASE = "purchase"


@dataclass(frozen=True)
class FixedExpenses:
    """Standing monthly totals per fixed category (no internal dating)."""
    monthly: dict[FixedCategory, Decimal] = field(default_factory=dict)

    @classmethod
    def of(
        cls,
        employee: Decimal | int = 0,
        electricity: Decimal | int = 0,
        purchase: Decimal | int = 0,
    ) -> FixedExpenses:
        return cls(monthly={
            FixedCategory.EMPLOYEE: Decimal(employee),
            FixedCategory.ELECTRICITY: Decimal(electricity),
            FixedCategory.PURCHASE: Decimal(purchase),
        })

    def amount(self, category: FixedCategory) -> Decimal:
        return self.monthly.get(category, Decimal("0"))


@dataclass(frozen=True)
class StockItem:
    """A stock-keeping unit currently on hand."""
    unit_cost: Decimal
    quantity: int
    name: str = ""


@dataclass(frozen=True)
class StoreSnapshot:
    """Everything the engine needs about one company, fetched up front."""
    orders: tuple[Order, ...] = ()
    fixed_expenses: FixedExpenses = field(default_factory=FixedExpenses)
    discretionary: tuple[ExpenseRecord, ...] = ()
    stock: tuple[StockItem, ...] = ()
    # Source records rejected during conversion; never part of the aggregates
    invalid_records: int = 0
