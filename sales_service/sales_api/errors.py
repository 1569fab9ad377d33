"""
Error types surfaced by the API.

Every failure reaches the client as ``{"error": <static message>}`` with the
error's status code (500 for all current cases). ``translate_store_errors``
wraps a store call so storage faults become ``DataAccessError`` with the
endpoint's message, after being logged and counted.
"""

import logging
import sqlite3
from contextlib import contextmanager

from sales_common.observability import observe_duration

from sales_api.telemetry import QUERY_DURATION, QUERY_FAILURES

logger = logging.getLogger("errors")


class SalesApiError(Exception):
    """Base error carrying the message returned to the client."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SeedFetchError(SalesApiError):
    """The seed feed could not be fetched or decoded."""


class DataAccessError(SalesApiError):
    """A read or write against the transaction store failed."""


@contextmanager
def translate_store_errors(operation: str, message: str):
    """Time ``operation`` and re-raise storage faults as ``DataAccessError(message)``."""
    with observe_duration(QUERY_DURATION, operation=operation):
        try:
            yield
        except (sqlite3.Error, ValueError, OverflowError) as exc:
            QUERY_FAILURES.labels(operation=operation).inc()
            logger.exception("%s failed", operation)
            raise DataAccessError(message) from exc
