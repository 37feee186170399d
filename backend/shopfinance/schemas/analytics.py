"""Analytics schemas."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import AliasChoices, BaseModel, Field

from shopfinance.engine.models import (
    ExpenseRecord,
    FixedCategory,
    FixedExpenses,
    Order,
    PaymentMethod,
    StockItem,
    StoreSnapshot,
)
from shopfinance.engine.periods import PeriodRange
from shopfinance.engine.quality import DataQualityReport
from shopfinance.engine.trends import BucketSeries
from shopfinance.services.analytics_service import Dashboard, PeriodComparison, PeriodView


# ── Input ─────────────────────────────────────────


class OrderIn(BaseModel):
    order_code: str = ""
    total_amount: Decimal = Field(default=Decimal("0"), ge=0)
    payment_method: str | None = None
    # Dates stay raw: a malformed or non-string one excludes the order, not the request
    confirmed_date: Any = None
    order_date: Any = None
    created_at: Any = Field(default=None, validation_alias=AliasChoices("created_at", "createdAt"))

    def to_engine(self) -> Order:
        return Order(
            total_amount=self.total_amount,
            payment_method=PaymentMethod.parse(self.payment_method),
            confirmed_date=self.confirmed_date,
            order_date=self.order_date,
            created_at=self.created_at,
            order_code=self.order_code,
        )


class ExpenseIn(BaseModel):
    name: str = ""
    amount: Decimal = Field(default=Decimal("0"), ge=0)
    expense_date: Any = Field(default=None, validation_alias=AliasChoices("expense_date", "occurred_on"))

    def to_engine(self) -> ExpenseRecord:
        return ExpenseRecord(amount=self.amount, occurred_on=self.expense_date, name=self.name)


class FixedExpensesIn(BaseModel):
    """Monthly totals for the fixed cost categories."""
    employee_expenses: Decimal = Field(default=Decimal("0"), ge=0)
    electricity_expenses: Decimal = Field(default=Decimal("0"), ge=0)
    purchase_costs: Decimal = Field(default=Decimal("0"), ge=0)

    def to_engine(self) -> FixedExpenses:
        return FixedExpenses.of(
            employee=self.employee_expenses,
            electricity=self.electricity_expenses,
            purchase=self.purchase_costs,
        )


class StockItemIn(BaseModel):
    name: str = ""
    unit_cost: Decimal = Field(default=Decimal("0"), ge=0, validation_alias=AliasChoices("unit_cost", "price"))
    quantity: int = Field(default=0, ge=0)

    def to_engine(self) -> StockItem:
        return StockItem(unit_cost=self.unit_cost, quantity=self.quantity, name=self.name)


class PeriodQuery(BaseModel):
    period: str = "all-time"
    start: date | None = None
    end: date | None = None
    now: datetime | None = None  # defaults to the server clock, captured once per request

    @property
    def custom_range(self) -> tuple[date | None, date | None]:
        return (self.start, self.end)


class AnalyticsRequest(PeriodQuery):
    orders: list[OrderIn] = []
    fixed_expenses: FixedExpensesIn = FixedExpensesIn()
    expenses: list[ExpenseIn] = []
    products: list[StockItemIn] = []

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            orders=tuple(o.to_engine() for o in self.orders),
            fixed_expenses=self.fixed_expenses.to_engine(),
            discretionary=tuple(e.to_engine() for e in self.expenses),
            stock=tuple(p.to_engine() for p in self.products),
        )


# ── Output ────────────────────────────────────────


class DataQuality(BaseModel):
    missing_timestamp: int = 0
    unparseable_timestamp: int = 0
    unparseable_expense_date: int = 0
    invalid_record: int = 0

    @classmethod
    def from_report(cls, report: DataQualityReport) -> DataQuality:
        return cls(**report.as_dict())


class PeriodInfo(BaseModel):
    kind: str
    start: datetime | None
    end: datetime | None
    day_count: int | None

    @classmethod
    def from_range(cls, period: PeriodRange) -> PeriodInfo:
        return cls(kind=period.kind.value, start=period.start, end=period.end, day_count=period.day_count)


class FinancialSummary(BaseModel):
    period: PeriodInfo
    revenue: Decimal
    expenses: Decimal
    balance: Decimal
    operating_expenses: Decimal
    order_count: int

    @classmethod
    def from_view(cls, view: PeriodView) -> FinancialSummary:
        s = view.summary
        return cls(
            period=PeriodInfo.from_range(view.period),
            revenue=s.revenue,
            expenses=s.expenses,
            balance=s.balance,
            operating_expenses=s.operating_expenses,
            order_count=s.order_count,
        )


class ExpenseBreakdown(BaseModel):
    multiplier: str  # exact fraction, e.g. "7/30"
    employee: Decimal
    electricity: Decimal
    purchase: Decimal
    discretionary: Decimal
    inventory: Decimal

    @classmethod
    def from_view(cls, view: PeriodView) -> ExpenseBreakdown:
        fixed = view.allocation.fixed_by_category
        return cls(
            multiplier=str(view.allocation.multiplier),
            employee=fixed[FixedCategory.EMPLOYEE],
            electricity=fixed[FixedCategory.ELECTRICITY],
            purchase=fixed[FixedCategory.PURCHASE],
            discretionary=view.allocation.discretionary_share,
            inventory=view.inventory_value,
        )


class PaymentBreakdown(BaseModel):
    manual: Decimal
    demo_online: Decimal
    real_online: Decimal

    @classmethod
    def from_view(cls, view: PeriodView) -> PaymentBreakdown:
        totals = view.revenue_by_method
        return cls(
            manual=totals[PaymentMethod.MANUAL],
            demo_online=totals[PaymentMethod.DEMO_ONLINE],
            real_online=totals[PaymentMethod.REAL_ONLINE],
        )


class ComparisonResponse(BaseModel):
    current: FinancialSummary
    previous: FinancialSummary | None
    revenue_change: Decimal | None
    revenue_change_pct: float | None

    @classmethod
    def from_comparison(cls, comparison: PeriodComparison) -> ComparisonResponse:
        return cls(
            current=FinancialSummary.from_view(comparison.current),
            previous=FinancialSummary.from_view(comparison.previous) if comparison.previous is not None else None,
            revenue_change=comparison.revenue_change,
            revenue_change_pct=comparison.revenue_change_pct,
        )


class TrendPoint(BaseModel):
    label: str
    current: Decimal
    previous: Decimal


class TrendResponse(BaseModel):
    unit: str
    data: list[TrendPoint]
    current_total: Decimal
    previous_total: Decimal

    @classmethod
    def from_series(cls, series: BucketSeries) -> TrendResponse:
        return cls(
            unit=series.unit.value,
            data=[TrendPoint(label=b.label, current=b.current_value, previous=b.previous_value) for b in series.buckets],
            current_total=series.current_total,
            previous_total=series.previous_total,
        )


class SummaryResponse(BaseModel):
    summary: FinancialSummary
    data_quality: DataQuality


class DashboardResponse(BaseModel):
    comparison: ComparisonResponse
    expense_breakdown: ExpenseBreakdown
    payment_breakdown: PaymentBreakdown
    trend: TrendResponse | None
    data_quality: DataQuality

    @classmethod
    def from_dashboard(cls, dashboard: Dashboard) -> DashboardResponse:
        return cls(
            comparison=ComparisonResponse.from_comparison(dashboard.comparison),
            expense_breakdown=ExpenseBreakdown.from_view(dashboard.current),
            payment_breakdown=PaymentBreakdown.from_view(dashboard.current),
            trend=TrendResponse.from_series(dashboard.trend) if dashboard.trend is not None else None,
            data_quality=DataQuality.from_report(dashboard.data_quality),
        )
