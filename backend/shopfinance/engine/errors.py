"""Errors raised by the aggregation engine."""


class FinanceEngineError(Exception):
    """Base class for errors raised by the aggregation engine."""


class InvalidRangeError(FinanceEngineError, ValueError):
    """A reporting period cannot be resolved (e.g. custom start after end)."""


class UndefinedBucketingError(FinanceEngineError):
    """A trend series was requested for a period that has no bucketing."""
