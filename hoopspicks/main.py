"""
HoopsPicks - FastAPI Application
Membership-gated NBA spread picks, community picks and leaderboard
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from hoopspicks.api.routes import health, leaderboard, my_picks, picks, profiles, stripe_webhooks
from hoopspicks.config import settings
from hoopspicks.core.exceptions import (
    AppError,
    DataIntegrityError,
    DependencyError,
    PersistenceError,
    ValidationError,
)
from hoopspicks.core.logger import configure_logging
from hoopspicks.database import init_db
from hoopspicks.integrations.stripe_payments import StripePayments

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    DataIntegrityError: status.HTTP_400_BAD_REQUEST,
    DependencyError: status.HTTP_502_BAD_GATEWAY,
    PersistenceError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    configure_logging(settings.log_level)
    logger.info("Starting HoopsPicks API...")

    try:
        init_db()
        logger.info("Database initialized")
    except Exception as e:
        logger.error(f"Database initialization failed: {str(e)}")

    if settings.stripe_secret_key.get_secret_value():
        app.state.payments = StripePayments.from_settings(settings)
        logger.info("Stripe payments client ready")
    else:
        app.state.payments = None
        logger.warning("STRIPE_SECRET_KEY not set; webhook endpoint will answer 503")

    logger.info(f"API running on {settings.app_env} environment")
    yield
    app.state.payments = None
    logger.info("Shutting down HoopsPicks API...")


app = FastAPI(
    title=settings.app_name,
    description="Backend API for HoopsPicks",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    code = next(
        (value for kind, value in ERROR_STATUS.items() if isinstance(exc, kind)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    return JSONResponse(
        status_code=code,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


@app.get("/")
async def root() -> dict:
    return {
        "name": settings.app_name,
        "environment": settings.app_env,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


prefix = settings.api_v1_prefix
app.include_router(health.router, prefix=prefix, tags=["Health"])
app.include_router(profiles.router, prefix=f"{prefix}/profiles", tags=["Profiles"])
app.include_router(picks.router, prefix=f"{prefix}/picks", tags=["AI Picks"])
app.include_router(my_picks.router, prefix=f"{prefix}/my-picks", tags=["My Picks"])
app.include_router(leaderboard.router, prefix=f"{prefix}/leaderboard", tags=["Leaderboard"])
app.include_router(stripe_webhooks.router, prefix=f"{prefix}/stripe", tags=["Stripe"])
