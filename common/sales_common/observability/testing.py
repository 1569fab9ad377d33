"""
Test helpers for the observability stack: an in-memory span exporter and a
way to clear the default Prometheus registry between tests.
"""

from prometheus_client import REGISTRY
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider, ReadableSpan
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.sdk.resources import Resource


def setup_test_tracing(service_name: str = "test-service") -> InMemorySpanExporter:
    """
    Install a TracerProvider backed by an InMemorySpanExporter.

    Replaces any provider already set so it can be called from every test.
    Returns the exporter for span inspection.
    """
    resource = Resource.create({"service.name": service_name})
    provider = TracerProvider(resource=resource)
    exporter = InMemorySpanExporter()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    # bypass the set-once guard on the global provider
    trace._TRACER_PROVIDER = None
    trace._TRACER_PROVIDER_SET_ONCE._done = False
    trace.set_tracer_provider(provider)
    return exporter


def get_spans_by_name(exporter: InMemorySpanExporter, name: str) -> list[ReadableSpan]:
    """Filter exported spans by operation name."""
    return [s for s in exporter.get_finished_spans() if s.name == name]


def reset_metrics() -> None:
    """
    Unregister all user-created collectors from the default registry.

    Platform collectors (``gc``, ``process``, ``platform``) have no ``_name``
    and are left in place.
    """
    seen = set()
    for collector in list(REGISTRY._names_to_collectors.values()):
        if not hasattr(collector, "_name") or id(collector) in seen:
            continue
        seen.add(id(collector))
        try:
            REGISTRY.unregister(collector)
        except KeyError:
            pass
