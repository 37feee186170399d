"""Custom exception classes for the application."""

from fastapi import HTTPException, status

from shopfinance.engine.errors import FinanceEngineError, InvalidRangeError, UndefinedBucketingError

__all__ = [
    "FinanceEngineError",
    "InvalidRangeError",
    "NotFoundError",
    "StoreUnavailableError",
    "UndefinedBucketingError",
]


# ── Service errors ────────────────────────────────
# Engine errors live in engine/errors.py; all of them are mapped to HTTP
# responses in main.py.


class StoreUnavailableError(FinanceEngineError):
    """The external storefront backend failed or could not be reached."""

    def __init__(self, resource: str, detail: str = ""):
        self.resource = resource
        self.detail = detail
        super().__init__(f"Could not fetch {resource}: {detail}" if detail else f"Could not fetch {resource}")


# ── HTTP errors ───────────────────────────────────


class NotFoundError(HTTPException):
    def __init__(self, resource: str = "Resource"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} not found",
        )
