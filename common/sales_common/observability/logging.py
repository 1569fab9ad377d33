"""
Structured JSON logging with OpenTelemetry trace context injection.

``setup_logging()`` configures the root logger with JSON output; every log
line carries the current trace and span ids when a span is active.

Records logged at CRITICAL with ``extra={"alert": True}`` are additionally
POSTed to ``ALERT_WEBHOOK_URL`` when that variable is set.

Usage::

    from sales_common.observability.logging import setup_logging, get_logger

    setup_logging()
    logger = get_logger("sales-api")
    logger.info("seeded", extra={"records": 60})
"""

import logging
import os
import threading
from datetime import datetime, timezone

import requests
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from pythonjsonlogger.json import JsonFormatter


_FORMAT_STRING = "%(timestamp)s %(level)s %(name)s %(message)s"
_setup_done = False


class JsonTraceFormatter(JsonFormatter):
    """JSON formatter that adds standard fields to every log record."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = record.created
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["message"] = record.getMessage()


class WebhookAlertHandler(logging.Handler):
    """
    Logging handler that POSTs CRITICAL alert records to a webhook URL.

    A record is sent only when its level is ``CRITICAL`` and it was logged
    with ``alert=True`` in its extra data. The POST runs on a daemon thread.

    Args:
        webhook_url: The URL to POST alert payloads to.
        timeout: HTTP request timeout in seconds.
    """

    def __init__(self, webhook_url: str, timeout: int = 5):
        super().__init__(level=logging.WARNING)
        self.webhook_url = webhook_url
        self.timeout = timeout

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno < logging.CRITICAL:
            return
        if not getattr(record, "alert", False):
            return

        try:
            payload = self._build_payload(record)
            thread = threading.Thread(
                target=self._send, args=(payload,), daemon=True
            )
            thread.start()
        except Exception:
            self.handleError(record)

    def _build_payload(self, record: logging.LogRecord) -> dict:
        return {
            "severity": record.levelname,
            "message": record.getMessage(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "logger": record.name,
            "service": getattr(record, "service", "unknown"),
            "operation": getattr(record, "operation", None),
            "source_url": getattr(record, "source_url", None),
            "trace_id": getattr(record, "otelTraceID", ""),
            "span_id": getattr(record, "otelSpanID", ""),
        }

    def _send(self, payload: dict) -> None:
        try:
            requests.post(self.webhook_url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            # debug level so this handler is not re-entered
            logging.getLogger("webhook").debug("Webhook POST failed: %s", exc)


def setup_logging(level: int = logging.INFO) -> None:
    """
    Configure the root logger with structured JSON output and trace context.

    Subsequent calls are no-ops.

    Args:
        level: The root log level (default ``logging.INFO``).
    """
    global _setup_done
    if _setup_done:
        return
    _setup_done = True

    LoggingInstrumentor().instrument(set_logging_format=False)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonTraceFormatter(_FORMAT_STRING))

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)

    webhook_url = os.environ.get("ALERT_WEBHOOK_URL")
    if webhook_url:
        root.addHandler(WebhookAlertHandler(webhook_url))
        logging.getLogger("observability").info(
            "WebhookAlertHandler attached (url=%s)", webhook_url
        )


def get_logger(name: str) -> logging.Logger:
    """Return a named logger."""
    return logging.getLogger(name)
