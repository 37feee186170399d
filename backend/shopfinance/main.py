"""ShopFinance API — Main entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shopfinance.config import settings
from shopfinance.core.exceptions import InvalidRangeError, StoreUnavailableError, UndefinedBucketingError
from shopfinance.core.logging import configure_logging
from shopfinance.core.middleware import RequestLoggingMiddleware
from shopfinance.services.store_client import StoreClient

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    configure_logging(settings.log_level, settings.log_json)
    logger.info("Starting ShopFinance API", env=settings.app_env, timezone=settings.business_timezone)
    yield
    logger.info("Shutting down ShopFinance API")


app = FastAPI(
    title="ShopFinance API",
    description="Period aggregation, expense allocation and revenue trends for storefront companies",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    debug=settings.app_debug,
    lifespan=lifespan,
    redirect_slashes=False,
)

# ── Middleware ─────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)


# ── Engine error mapping ──────────────────────────
@app.exception_handler(InvalidRangeError)
async def invalid_range_handler(request: Request, exc: InvalidRangeError):
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": str(exc)})


@app.exception_handler(UndefinedBucketingError)
async def undefined_bucketing_handler(request: Request, exc: UndefinedBucketingError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
    logger.error("store_unavailable", resource=exc.resource, detail=exc.detail)
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": str(exc)})


# ── Health Check ──────────────────────────────────
@app.get("/health", tags=["system"])
async def health_check():
    """Liveness probe — always returns healthy if the process is running."""
    return {"status": "healthy", "version": "0.1.0"}


@app.get("/ready", tags=["system"])
async def readiness_check():
    """Readiness probe — checks the storefront backend is reachable."""
    checks = {"store": "unknown", "api": "ok"}
    if await StoreClient().is_available():
        checks["store"] = "ok"
    else:
        checks["store"] = "unreachable"
        return {"status": "degraded", "checks": checks}

    return {"status": "ready", "checks": checks}


# ── API Routes ────────────────────────────────────
from shopfinance.api.v1 import analytics  # noqa: E402

app.include_router(analytics.router, prefix="/api/v1/analytics", tags=["analytics"])
