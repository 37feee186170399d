"""Revenue, expenses and net balance for a period."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from shopfinance.engine.expenses import ExpenseAllocation
from shopfinance.engine.models import Order, PaymentMethod
from shopfinance.engine.money import ZERO
from shopfinance.engine.order_filter import DatedOrder


@dataclass(frozen=True)
class BalanceSummary:
    revenue: Decimal
    expenses: Decimal
    balance: Decimal
    operating_expenses: Decimal
    order_count: int


def revenue(orders: Iterable[Order | DatedOrder]) -> Decimal:
    return sum((o.total_amount for o in orders), ZERO)


def compute(
    orders: Iterable[Order | DatedOrder],
    allocation: ExpenseAllocation,
    inventory_value: Decimal,
) -> BalanceSummary:
    """Combine period revenue with allocated expenses.

    ``expenses`` includes the standing inventory valuation unscaled;
    ``operating_expenses`` leaves it out. The balance may be negative.
    """
    orders = list(orders)
    total_revenue = revenue(orders)
    operating = allocation.operating_expenses
    expenses = inventory_value + operating
    return BalanceSummary(
        revenue=total_revenue,
        expenses=expenses,
        balance=total_revenue - expenses,
        operating_expenses=operating,
        order_count=len(orders),
    )


def revenue_by_payment_method(orders: Iterable[Order | DatedOrder]) -> dict[PaymentMethod, Decimal]:
    totals = {method: ZERO for method in PaymentMethod}
    for o in orders:
        order = o.order if isinstance(o, DatedOrder) else o
        totals[order.payment_method] += order.total_amount
    return totals


def change_pct(current: Decimal, previous: Decimal) -> float | None:
    """Relative change in percent; None when there is nothing to compare against."""
    if previous == 0:
        return None
    return float((current - previous) / abs(previous) * 100)
