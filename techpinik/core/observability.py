"""Observability setup: logging, tracing, metrics, and error tracking."""

import logging
import re
import time
import uuid
from contextvars import ContextVar

import sentry_sdk
import structlog
from fastapi import FastAPI, Request, Response
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from prometheus_client import Counter, Histogram, generate_latest
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from techpinik.core.config import get_settings

settings = get_settings()

# Context variable for request ID (accessible throughout the request lifecycle)
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

# Path segments that look like record IDs are collapsed for metric labels
_ID_SEGMENT = re.compile(
    r"/[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)

# Prometheus metrics - HTTP requests
REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# Prometheus metrics - Statistics reports
STATS_REPORTS = Counter(
    "stats_reports_total",
    "Total statistics reports computed",
    ["kind"],  # admin, storefront
)

STATS_DURATION = Histogram(
    "stats_report_duration_seconds",
    "Time to compute a statistics report",
    ["kind"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

STATS_FETCH_FAILURES = Counter(
    "stats_fetch_failures_total",
    "Statistics sub-fetches that failed",
    ["fetch", "fatal"],
)

# Prometheus metrics - Orders
ORDER_OPERATIONS = Counter(
    "order_operations_total",
    "Total order operations",
    ["operation"],  # create, update, delete
)


def get_request_id() -> str | None:
    """Get the current request ID from context."""
    return request_id_ctx.get()


def normalize_endpoint(path: str) -> str:
    """Collapse record IDs in a path to avoid high label cardinality."""
    return _ID_SEGMENT.sub("/{id}", path)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware to add a unique request ID to each request.

    The request ID is:
    - Generated if not provided in X-Request-ID header
    - Stored in context variable for access throughout the request
    - Added to response headers
    - Bound to structlog context for all log messages
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        token = request_id_ctx.set(request_id)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            request_id_ctx.reset(token)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all requests with timing information."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        logger = structlog.get_logger()
        start_time = time.perf_counter()

        logger.info(
            "Request started",
            client_ip=request.client.host if request.client else None,
            user_agent=request.headers.get("User-Agent"),
        )

        response = await call_next(request)

        duration = time.perf_counter() - start_time

        logger.info(
            "Request completed",
            status_code=response.status_code,
            duration_ms=round(duration * 1000, 2),
        )

        endpoint = normalize_endpoint(request.url.path)

        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()

        REQUEST_LATENCY.labels(
            method=request.method,
            endpoint=endpoint,
        ).observe(duration)

        return response


def configure_structlog() -> None:
    """Configure structlog for JSON logging with context variables."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Configure standard logging to use structlog
    logging.basicConfig(
        format="%(message)s",
        level=logging.INFO if not settings.debug else logging.DEBUG,
    )


def setup_opentelemetry(app: FastAPI) -> None:
    """Set up OpenTelemetry tracing."""
    if not settings.otlp_endpoint:
        structlog.get_logger().info("OpenTelemetry disabled (no OTLP endpoint configured)")
        return

    resource = Resource(attributes={
        SERVICE_NAME: "techpinik-api",
    })
    provider = TracerProvider(resource=resource)

    otlp_exporter = OTLPSpanExporter(
        endpoint=settings.otlp_endpoint,
        insecure=True,  # Set to False in production with TLS
    )
    provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(app)

    structlog.get_logger().info(
        "OpenTelemetry configured",
        otlp_endpoint=settings.otlp_endpoint,
    )


def setup_sentry() -> None:
    """Set up Sentry for error tracking."""
    if not settings.sentry_dsn:
        structlog.get_logger().info("Sentry disabled (no DSN configured)")
        return

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment="development" if settings.debug else "production",
        traces_sample_rate=0.1,  # Sample 10% of transactions
        profiles_sample_rate=0.1,  # Sample 10% of profiles
        integrations=[
            StarletteIntegration(transaction_style="endpoint"),
            FastApiIntegration(transaction_style="endpoint"),
        ],
        # Customer names, phones and addresses stay out of Sentry
        send_default_pii=False,
    )

    structlog.get_logger().info("Sentry configured")


def get_prometheus_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def setup_observability(app: FastAPI) -> None:
    """Set up all observability components.

    Call this function during app initialization to configure:
    - Structured logging with request context
    - OpenTelemetry tracing
    - Sentry error tracking
    - Prometheus metrics endpoint
    """
    configure_structlog()

    setup_sentry()
    setup_opentelemetry(app)

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Prometheus metrics endpoint."""
        return Response(
            content=get_prometheus_metrics(),
            media_type="text/plain; charset=utf-8",
        )

    structlog.get_logger().info("Observability setup complete")


# Helper functions to record custom metrics
def record_stats_report(kind: str, duration: float) -> None:
    """Record a computed statistics report."""
    STATS_REPORTS.labels(kind=kind).inc()
    STATS_DURATION.labels(kind=kind).observe(duration)


def record_stats_fetch_failure(fetch: str, fatal: bool) -> None:
    """Record a failed statistics sub-fetch."""
    STATS_FETCH_FAILURES.labels(fetch=fetch, fatal=str(fatal).lower()).inc()


def record_order_operation(operation: str) -> None:
    """Record an order operation in Prometheus metrics."""
    ORDER_OPERATIONS.labels(operation=operation).inc()
