"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from techpinik.api.router import router as api_router
from techpinik.core.config import get_settings
from techpinik.core.database import close_db
from techpinik.core.errors import register_exception_handlers
from techpinik.core.middleware import AdminGateMiddleware, SecurityHeadersMiddleware
from techpinik.core.observability import (
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    setup_observability,
)
from techpinik.core.rate_limit import limiter

settings = get_settings()

# Get logger (will be configured by setup_observability)
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    # Startup
    logger.info("Starting TechPinik API", version=settings.app_version)
    yield
    # Shutdown
    logger.info("Shutting down TechPinik API")
    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Storefront and back-office API for the TechPinik electronics shop",
    lifespan=lifespan,
)

# Set up observability (logging, tracing, metrics, Sentry)
setup_observability(app)

# Rate limiter state and exception handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Domain errors, HTTP errors and validation errors share one envelope
register_exception_handlers(app)

# Middleware stack (last added = outermost)

# Admin gate (innermost - rejects cookie-less /api/admin requests before routing)
app.add_middleware(
    AdminGateMiddleware,
    cookie_name=settings.session_cookie_name,
)

# Request logging middleware (logs all requests with timing)
app.add_middleware(RequestLoggingMiddleware)

# Request ID middleware (adds unique ID to each request)
app.add_middleware(RequestIDMiddleware)

# Security headers middleware
app.add_middleware(
    SecurityHeadersMiddleware,
    enable_hsts=not settings.debug,  # Enable HSTS in production
)

# CORS middleware (outermost - answers preflight requests first)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

# Include routers
app.include_router(api_router)


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Welcome to TechPinik API", "version": settings.app_version}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "techpinik.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
