"""
Service-specific telemetry for sales-api.

Domain metrics and FastAPI instrumentation on top of the shared
``sales_common.observability`` package.
"""

import logging

from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from sales_common.observability import (
    create_counter,
    create_histogram,
    MetricsMiddleware,
)

logger = logging.getLogger("telemetry")

# ── Metrics (Prometheus) ──────────────────────────────────────────

HTTP_REQUESTS = create_counter(
    "http_requests_total",
    "Total HTTP requests by method and path",
    ["method", "path", "status"],
)

HTTP_REQUEST_DURATION = create_histogram(
    "http_request_duration_seconds",
    "Time spent handling HTTP requests by method and path",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
    labelnames=["method", "path"],
)

RECORDS_SEEDED = create_counter(
    "sales_records_seeded_total",
    "Total product transactions inserted from the seed feed",
)

SEED_DURATION = create_histogram(
    "sales_seed_duration_seconds",
    "Time spent fetching and inserting the seed feed",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

QUERY_DURATION = create_histogram(
    "sales_query_duration_seconds",
    "Time spent answering a store-backed request, by operation",
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
    labelnames=["operation"],
)

QUERY_FAILURES = create_counter(
    "sales_query_failures_total",
    "Store-backed requests that failed, by operation",
    ["operation"],
)


# ── Initialization ───────────────────────────────────────────────

def init(app):
    """Add the HTTP-metrics middleware and OpenTelemetry route instrumentation."""
    app.add_middleware(
        MetricsMiddleware,
        counter=HTTP_REQUESTS,
        duration=HTTP_REQUEST_DURATION,
        ignored_paths={"/metrics"},
    )

    try:
        FastAPIInstrumentor.instrument_app(app)
        logger.info("FastAPI instrumentation enabled")
    except Exception as e:
        logger.warning("FastAPI instrumentation failed: %s", e)

    logger.info("Service telemetry initialised")
