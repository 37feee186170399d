"""Balance calculation tests."""

from decimal import Decimal
from fractions import Fraction

from helpers import NOW, at, make_order
from shopfinance.engine.balance import change_pct, compute, revenue_by_payment_method
from shopfinance.engine.expenses import ExpenseAllocation, allocate
from shopfinance.engine.models import FixedCategory, FixedExpenses, PaymentMethod
from shopfinance.engine.order_filter import filter_dated, filter_orders
from shopfinance.engine.periods import resolve


def _allocation(fixed="0", discretionary="0") -> ExpenseAllocation:
    return ExpenseAllocation(
        multiplier=Fraction(1),
        fixed_by_category={FixedCategory.EMPLOYEE: Decimal(fixed)},
        discretionary_share=Decimal(discretionary),
    )


def test_revenue_expenses_and_balance():
    orders = [make_order(1000, at(2025, 6, 18, 9)), make_order(2000, at(2025, 6, 18, 9))]
    result = compute(orders, _allocation("300", "200"), Decimal("1500"))
    assert result.revenue == Decimal("3000")
    assert result.expenses == Decimal("2000")
    assert result.operating_expenses == Decimal("500")
    assert result.balance == Decimal("1000")
    assert result.order_count == 2


def test_balance_may_be_negative():
    result = compute([make_order(100, NOW)], _allocation("500"), Decimal("1000"))
    assert result.balance == Decimal("-1400")


def test_inventory_is_included_unscaled_in_every_period():
    fixed = FixedExpenses.of(employee=3000)
    for token in ("today", "last-7-days", "last-365-days", "all-time"):
        allocation = allocate(fixed, [], resolve(token, NOW))
        result = compute([], allocation, Decimal("10000"))
        assert result.expenses - result.operating_expenses == Decimal("10000")


def test_accepts_dated_orders():
    period = resolve("today", NOW)
    orders = [make_order(40, at(2025, 6, 18, 1)), make_order(60, at(2025, 6, 18, 2))]
    assert compute(filter_dated(orders, period), _allocation(), Decimal("0")).revenue == Decimal("100")


def test_compute_is_idempotent():
    period = resolve("last-30-days", NOW)
    orders = [make_order(i * 10, at(2025, 6, i + 1)) for i in range(15)]
    allocation = allocate(FixedExpenses.of(employee=999, electricity=1), [], period)
    first = compute(filter_orders(orders, period), allocation, Decimal("5"))
    second = compute(filter_orders(orders, period), allocation, Decimal("5"))
    assert first == second


def test_revenue_by_payment_method():
    orders = [
        make_order(100, NOW, method=PaymentMethod.MANUAL),
        make_order(250, NOW, method=PaymentMethod.DEMO_ONLINE),
        make_order(400, NOW, method=PaymentMethod.REAL_ONLINE),
        make_order(50, NOW, method=PaymentMethod.REAL_ONLINE),
    ]
    totals = revenue_by_payment_method(orders)
    assert totals == {
        PaymentMethod.MANUAL: Decimal("100"),
        PaymentMethod.DEMO_ONLINE: Decimal("250"),
        PaymentMethod.REAL_ONLINE: Decimal("450"),
    }


def test_payment_method_aliases():
    assert PaymentMethod.parse("demo_online") is PaymentMethod.DEMO_ONLINE
    assert PaymentMethod.parse("real_online") is PaymentMethod.REAL_ONLINE
    assert PaymentMethod.parse("checks_codes") is PaymentMethod.MANUAL
    assert PaymentMethod.parse(None) is PaymentMethod.MANUAL


def test_change_pct():
    assert change_pct(Decimal("150"), Decimal("100")) == 50.0
    assert change_pct(Decimal("50"), Decimal("100")) == -50.0
    assert change_pct(Decimal("10"), Decimal("0")) is None
