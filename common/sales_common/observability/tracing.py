import os
import logging
from contextlib import contextmanager

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.resources import Resource
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.trace import SpanKind, Status, StatusCode

logger = logging.getLogger(__name__)


def init_tracing(service_name: str, endpoint: str | None = None) -> None:
    """
    Initialize OpenTelemetry tracing with the OTLP HTTP exporter.

    Args:
        service_name: Name of the service (e.g. "sales-api").
        endpoint: OTLP HTTP endpoint (e.g. "http://jaeger:4318").
            Defaults to ``OTEL_EXPORTER_OTLP_ENDPOINT``, then
            http://localhost:4318.
    """
    if endpoint is None:
        endpoint = os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4318")

    if endpoint.endswith("/v1/traces"):
        traces_endpoint = endpoint
    else:
        traces_endpoint = f"{endpoint.rstrip('/')}/v1/traces"

    resource = Resource.create({"service.name": service_name})
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=traces_endpoint)))
    trace.set_tracer_provider(provider)

    logger.info("Tracing initialized for %s (exporting to %s)", service_name, traces_endpoint)


def shutdown_tracing() -> None:
    """Flush and shut down the global tracer provider."""
    try:
        provider = trace.get_tracer_provider()
        if hasattr(provider, "shutdown"):
            provider.shutdown()
            logger.info("Tracer shutdown complete")
    except Exception as e:
        logger.warning("Tracer shutdown warning: %s", e)


@contextmanager
def db_span(operation: str, statement: str, tracer_name: str = __name__, **attributes):
    """
    Open an INTERNAL span named ``db <statement>`` for a SQLite operation.

    Extra keyword attributes are added under the ``db.`` namespace. The span
    status is set to ERROR when the block raises; the exception propagates.
    """
    tracer = trace.get_tracer(tracer_name)
    span_attributes = {"db.system": "sqlite", "db.operation": operation}
    span_attributes.update({f"db.{key}": value for key, value in attributes.items()})
    with tracer.start_as_current_span(
        f"db {statement}",
        kind=SpanKind.INTERNAL,
        attributes=span_attributes,
    ) as span:
        try:
            yield span
        except Exception as exc:
            span.set_status(Status(StatusCode.ERROR, str(exc)))
            raise
