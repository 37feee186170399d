"""Shared API dependencies."""

from datetime import datetime

from shopfinance.config import settings
from shopfinance.services.store_client import StoreClient


def get_store_client() -> StoreClient:
    return StoreClient()


def get_now() -> datetime:
    """Current instant in the business timezone, read once per request."""
    return datetime.now(settings.tz)


__all__ = ["get_store_client", "get_now"]
