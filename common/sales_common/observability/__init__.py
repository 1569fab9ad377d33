"""
sales_common.observability: shared logging, metrics and tracing for the sales services.

Submodules
----------
logging      Structured JSON logging with OTel trace-context injection.
metrics      Prometheus metric factories and helpers.
tracing      OpenTelemetry tracing (OTLP over HTTP).
middleware   Starlette HTTP-metrics middleware.
testing      In-memory tracing exporter & metric-reset helpers for tests.

Quick start
-----------
::

    from sales_common.observability import init_observability, get_logger

    init_observability("sales-api", "1.0.0")
    logger = get_logger("sales-api")
"""

import logging as _logging
import os as _os

# ── logging ──────────────────────────────────────────────────────
from .logging import setup_logging, get_logger, JsonTraceFormatter

# ── metrics ──────────────────────────────────────────────────────
from .metrics import (
    create_counter,
    create_histogram,
    create_service_info,
    observe_duration,
    metrics_response,
)

# ── tracing ──────────────────────────────────────────────────────
from .tracing import init_tracing, shutdown_tracing, db_span

# ── middleware ────────────────────────────────────────────────────
from .middleware import MetricsMiddleware

# ── testing ──────────────────────────────────────────────────────
from .testing import (
    setup_test_tracing,
    get_spans_by_name,
    reset_metrics,
)


# ── bootstrap ────────────────────────────────────────────────────

def init_observability(
    service_name: str,
    version: str,
    *,
    log_level: int = _logging.INFO,
    environment: str | None = None,
) -> None:
    """
    Bootstrap logging, tracing and the service-info metric in one call.

    Tracing is only started when ``OTEL_EXPORTER_OTLP_ENDPOINT`` is set;
    a failing exporter is logged and the service keeps running.

    Args:
        service_name: Identifier used in traces and the info metric.
        version: Semantic version of the service.
        log_level: Root log level (default ``INFO``).
        environment: Deployment env; defaults to ``$ENVIRONMENT`` or
            ``"development"``.
    """
    setup_logging(log_level)
    logger = get_logger(service_name)

    if _os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT"):
        try:
            init_tracing(service_name)
        except Exception as exc:
            logger.warning("Tracing init failed (non-fatal): %s", exc)
    else:
        logger.info("Tracing disabled (OTEL_EXPORTER_OTLP_ENDPOINT not set)")

    create_service_info(
        service_name.replace("-", "_"),
        version,
        environment,
    )

    logger.info("Observability initialised for %s v%s", service_name, version)


__all__ = [
    # bootstrap
    "init_observability",
    # logging
    "setup_logging",
    "get_logger",
    "JsonTraceFormatter",
    # metrics
    "create_counter",
    "create_histogram",
    "create_service_info",
    "observe_duration",
    "metrics_response",
    # tracing
    "init_tracing",
    "shutdown_tracing",
    "db_span",
    # middleware
    "MetricsMiddleware",
    # testing
    "setup_test_tracing",
    "get_spans_by_name",
    "reset_metrics",
]
