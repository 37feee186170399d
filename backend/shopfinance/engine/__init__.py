"""Period aggregation and expense allocation engine.

Pure functions over in-memory orders and expense records; no I/O.
"""

from shopfinance.engine.balance import BalanceSummary, compute
from shopfinance.engine.errors import FinanceEngineError, InvalidRangeError, UndefinedBucketingError
from shopfinance.engine.expenses import ExpenseAllocation, allocate, inventory_valuation, period_multiplier
from shopfinance.engine.models import (
    ExpenseRecord,
    FixedCategory,
    FixedExpenses,
    Order,
    PaymentMethod,
    StockItem,
    StoreSnapshot,
)
from shopfinance.engine.order_dates import select_timestamp
from shopfinance.engine.order_filter import DatedOrder, filter_orders
from shopfinance.engine.periods import PeriodKind, PeriodRange, previous_of, resolve
from shopfinance.engine.quality import DataIssue, DataQualityReport
from shopfinance.engine.trends import Bucket, BucketSeries, BucketUnit, bucketize

__all__ = [
    "BalanceSummary",
    "Bucket",
    "BucketSeries",
    "BucketUnit",
    "DataIssue",
    "DataQualityReport",
    "DatedOrder",
    "ExpenseAllocation",
    "ExpenseRecord",
    "FinanceEngineError",
    "FixedCategory",
    "FixedExpenses",
    "InvalidRangeError",
    "Order",
    "PaymentMethod",
    "PeriodKind",
    "PeriodRange",
    "StockItem",
    "StoreSnapshot",
    "UndefinedBucketingError",
    "allocate",
    "bucketize",
    "compute",
    "filter_orders",
    "inventory_valuation",
    "period_multiplier",
    "previous_of",
    "resolve",
    "select_timestamp",
]
