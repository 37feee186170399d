"""HTTP client for the storefront backend.

Fetches a company's orders, fixed monthly expenses, dated custom expenses
and product stock, and converts them into engine records. All retrieval
happens here, before any aggregation runs.
"""

import asyncio

import httpx
import structlog
from pydantic import ValidationError as PydanticValidationError

from shopfinance.config import settings
from shopfinance.core.exceptions import NotFoundError, StoreUnavailableError
from shopfinance.engine.models import ExpenseRecord, FixedExpenses, Order, StockItem, StoreSnapshot
from shopfinance.schemas.analytics import ExpenseIn, FixedExpensesIn, OrderIn, StockItemIn

logger = structlog.get_logger()


def _convert(schema, items: list, resource: str) -> tuple[list, int]:
    """Validate raw records one by one; a bad record is logged, skipped and counted."""
    converted = []
    skipped = 0
    for raw in items:
        try:
            converted.append(schema.model_validate(raw).to_engine())
        except PydanticValidationError as e:
            skipped += 1
            logger.warning("store_record_invalid", resource=resource, errors=e.error_count())
    return converted, skipped


def _section(data: dict, key: str, resource: str, kind: type):
    """``data[key]`` if it has the expected JSON type; missing or null means empty."""
    value = data.get(key)
    if value is None:
        return kind()
    if not isinstance(value, kind):
        logger.warning("store_body_invalid", resource=resource, key=key, got=type(value).__name__)
        raise StoreUnavailableError(resource, "invalid body")
    return value


class StoreClient:
    """Read-only client for the storefront REST API."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.store_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.store_api_timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _get(self, client: httpx.AsyncClient, path: str, resource: str, **params) -> dict:
        try:
            resp = await client.get(path, params=params or None)
        except httpx.TimeoutException as e:
            logger.warning("store_request_timeout", path=path)
            raise StoreUnavailableError(resource, "timeout") from e
        except httpx.TransportError as e:
            logger.warning("store_unreachable", path=path, error=str(e))
            raise StoreUnavailableError(resource, "unreachable") from e

        if resp.status_code == 404:
            raise NotFoundError(resource)
        if resp.status_code != 200:
            logger.warning("store_request_error", path=path, status=resp.status_code)
            raise StoreUnavailableError(resource, f"status {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            logger.warning("store_body_invalid", path=path, content_type=resp.headers.get("content-type"))
            raise StoreUnavailableError(resource, "invalid body") from e
        if not isinstance(data, dict):
            logger.warning("store_body_invalid", path=path, got=type(data).__name__)
            raise StoreUnavailableError(resource, "invalid body")
        return data

    async def _orders(self, client: httpx.AsyncClient, company_id: int) -> tuple[list[Order], int]:
        data = await self._get(client, f"/companies/{company_id}/financial-stats", "Company")
        stats = _section(data, "stats", "Company", dict)
        return _convert(OrderIn, _section(stats, "orders", "Company", list), "orders")

    async def _fixed_expenses(self, client: httpx.AsyncClient, company_id: int) -> tuple[FixedExpenses, int]:
        data = await self._get(client, "/expenses", "Expenses", company_id=company_id)
        try:
            return FixedExpensesIn.model_validate(data.get("expenses") or {}).to_engine(), 0
        except PydanticValidationError as e:
            logger.warning("store_record_invalid", resource="expenses", errors=e.error_count())
            return FixedExpenses.of(), 1

    async def _custom_expenses(self, client: httpx.AsyncClient, company_id: int) -> tuple[list[ExpenseRecord], int]:
        # Custom expenses are optional on the backend; an outage here leaves them empty.
        try:
            data = await self._get(client, "/expenses/custom", "Custom expenses", company_id=company_id)
            raw = _section(data, "expenses", "Custom expenses", list)
        except (StoreUnavailableError, NotFoundError):
            logger.warning("custom_expenses_unavailable", company_id=company_id)
            return [], 0
        return _convert(ExpenseIn, raw, "custom_expenses")

    async def _products(self, client: httpx.AsyncClient, company_id: int) -> tuple[list[StockItem], int]:
        data = await self._get(client, "/products", "Products", company_id=company_id)
        return _convert(StockItemIn, _section(data, "products", "Products", list), "products")

    async def fetch_snapshot(self, company_id: int) -> StoreSnapshot:
        """Fetch everything needed to build a company's financial dashboard.

        The first failing request cancels the others before the connection
        pool is closed, and its error is raised as-is.
        """
        async with self._client() as client:
            try:
                async with asyncio.TaskGroup() as tg:
                    orders_task = tg.create_task(self._orders(client, company_id))
                    fixed_task = tg.create_task(self._fixed_expenses(client, company_id))
                    custom_task = tg.create_task(self._custom_expenses(client, company_id))
                    products_task = tg.create_task(self._products(client, company_id))
            except ExceptionGroup as eg:
                raise eg.exceptions[0]

        orders, bad_orders = orders_task.result()
        fixed, bad_fixed = fixed_task.result()
        custom, bad_custom = custom_task.result()
        products, bad_products = products_task.result()
        invalid = bad_orders + bad_fixed + bad_custom + bad_products

        logger.info(
            "store_snapshot_fetched",
            company_id=company_id,
            orders=len(orders),
            custom_expenses=len(custom),
            products=len(products),
            invalid_records=invalid,
        )
        return StoreSnapshot(
            orders=tuple(orders),
            fixed_expenses=fixed,
            discretionary=tuple(custom),
            stock=tuple(products),
            invalid_records=invalid,
        )

    async def is_available(self) -> bool:
        try:
            async with self._client() as client:
                resp = await client.get("/health")
                return resp.status_code == 200
        except (httpx.TransportError, httpx.TimeoutException):
            return False
