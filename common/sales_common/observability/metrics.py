"""
Prometheus metric factories that tolerate repeated registration.

Modules that get imported more than once (test reloads, multiple app
instances in one process) can call ``create_*`` freely: a second call with
the same name hands back the collector already in the default registry.
"""

import os
import time
from contextlib import contextmanager

from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, Counter, Histogram, Info, generate_latest


def _registered(name: str):
    for collector in set(REGISTRY._names_to_collectors.values()):
        if name in (getattr(collector, "_name", None), getattr(collector, "_original_name", None)):
            return collector
    return None


def _get_or_create(metric_cls, name, documentation, **kwargs):
    try:
        return metric_cls(name, documentation, **kwargs)
    except ValueError:
        existing = _registered(name)
        if existing is None:
            raise
        return existing


def create_counter(name: str, documentation: str, labelnames: list[str] = None) -> Counter:
    return _get_or_create(Counter, name, documentation, labelnames=labelnames or [])


def create_histogram(name: str, documentation: str, buckets: list[float] = None, labelnames: list[str] = None) -> Histogram:
    """Create (or retrieve) a Histogram; default buckets unless ``buckets`` is given."""
    kwargs = {"labelnames": labelnames or []}
    if buckets:
        kwargs["buckets"] = buckets
    return _get_or_create(Histogram, name, documentation, **kwargs)


def create_service_info(service_name: str, version: str, environment: str | None = None) -> Info:
    """
    Publish ``<service_name>_info`` with the version and deployment environment.

    ``environment`` falls back to ``$ENVIRONMENT``, then ``"development"``.
    """
    info = _get_or_create(Info, service_name, "Service metadata")
    info.info({
        "version": version,
        "environment": environment or os.environ.get("ENVIRONMENT", "development"),
    })
    return info


@contextmanager
def observe_duration(histogram: Histogram, **labels):
    """Time the enclosed block into ``histogram``, labelled when labels are given.

    The observation is made whether the block returns or raises.
    """
    target = histogram.labels(**labels) if labels else histogram
    start = time.perf_counter()
    try:
        yield
    finally:
        target.observe(time.perf_counter() - start)


def metrics_response() -> tuple[bytes, str]:
    """Exposition body for the default registry and its content type."""
    return generate_latest(), CONTENT_TYPE_LATEST
