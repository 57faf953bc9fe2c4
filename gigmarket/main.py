"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from gigmarket.core.config import settings
from gigmarket.core.errors import MarketplaceError
from gigmarket.core.structured_logging import build_log_context, configure_logging
from gigmarket.core.websocket import InMemoryPresenceRegistry
from gigmarket.db.session import engine

configure_logging()
logger = logging.getLogger(__name__)

# ============================================================================
# Sentry Integration (optional, for production error tracking)
# ============================================================================

if settings.SENTRY_DSN and settings.ENV != "dev":
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENV,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,  # 10% of requests for performance monitoring
        send_default_pii=False,
    )
    logger.info("Sentry initialized for error tracking")

# ============================================================================
# Rate Limiting
# ============================================================================

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from gigmarket.core.rate_limit import limiter


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="Gig Marketplace API",
    description="Order lifecycle, seller stats and notifications for a gig marketplace",
    version=settings.VERSION,
    docs_url="/docs" if settings.ENV == "dev" else None,
    redoc_url="/redoc" if settings.ENV == "dev" else None,
)

# Presence registry for live notification push (per process)
app.state.presence = InMemoryPresenceRegistry()

# Add rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.exception_handler(MarketplaceError)
async def marketplace_error_handler(request: Request, exc: MarketplaceError):
    """Map domain errors to ``{"error": kind, "detail": message}``."""
    logger.info(
        "Rejected %s %s: %s",
        request.method,
        request.url.path,
        exc.kind,
        extra=build_log_context(route=request.url.path, method=request.method),
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "detail": exc.message},
    )


# ============================================================================
# Routers
# ============================================================================

from gigmarket.routers import notifications, orders, payments, reviews, sellers

app.include_router(orders.router, prefix="/orders", tags=["orders"])
app.include_router(reviews.router, tags=["reviews"])  # Mixed paths: /reviews and /services/{id}/reviews
app.include_router(payments.router, prefix="/payments", tags=["payments"])
app.include_router(sellers.router, prefix="/sellers", tags=["sellers"])
app.include_router(notifications.router, prefix="/notifications", tags=["notifications"])

# WebSocket for real-time notifications
from gigmarket.routers import websocket as ws_router
app.include_router(ws_router.router)


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
def health():
    """
    Health check endpoint.

    Verifies database connectivity and returns environment info.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}
