"""
One-shot bulk load of the product-transaction feed.

The feed is a JSON array of transaction objects. Every object is appended to
the store; running the seeder twice duplicates every record, so it is meant
to be invoked once per fresh database.

Also runnable from the command line::

    sales-seed --db-path ./sales.db
"""

import argparse
import logging
import os
import sqlite3
import sys
import time

import requests
from opentelemetry import trace
from opentelemetry.trace import SpanKind, Status, StatusCode
from pydantic import ValidationError

from sales_common.observability import init_observability

from sales_api import __version__
from sales_api.database import DB_PATH, TransactionStore
from sales_api.errors import DataAccessError, SalesApiError, SeedFetchError
from sales_api.models import TransactionIn
from sales_api.telemetry import RECORDS_SEEDED, SEED_DURATION

logger = logging.getLogger("seeder")

SEED_DATA_URL = os.environ.get(
    "SEED_DATA_URL",
    "https://s3.amazonaws.com/roxiler.com/product_transaction.json",
)

INIT_FAILED = "Failed to initialize database"


def fetch_seed_records(url: str) -> list[TransactionIn]:
    """GET the feed and coerce each object onto the record schema."""
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span(
        "seed fetch",
        kind=SpanKind.CLIENT,
        attributes={"http.method": "GET", "http.url": url},
    ) as span:
        try:
            response = requests.get(url)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            span.set_status(Status(StatusCode.ERROR, str(exc)))
            logger.critical(
                "Seed feed unavailable: %s", exc,
                extra={"alert": True, "operation": "seed", "source_url": url},
            )
            raise SeedFetchError(INIT_FAILED) from exc

        if not isinstance(payload, list):
            span.set_status(Status(StatusCode.ERROR, "feed is not a JSON array"))
            raise SeedFetchError(INIT_FAILED)

        try:
            records = [TransactionIn.model_validate(item) for item in payload]
        except ValidationError as exc:
            span.set_status(Status(StatusCode.ERROR, "feed object has unusable field types"))
            logger.error("Seed feed rejected: %s", exc)
            raise SeedFetchError(INIT_FAILED) from exc

        span.set_attribute("seed.records_count", len(records))
        return records


def seed_database(store: TransactionStore, url: str | None = None) -> int:
    """
    Fetch the feed and append every record to ``store``.

    Returns the number of records inserted. Raises ``SeedFetchError`` when
    the feed cannot be fetched or decoded and ``DataAccessError`` when the
    insert fails.
    """
    url = url or SEED_DATA_URL
    start = time.perf_counter()

    records = fetch_seed_records(url)
    try:
        inserted = store.insert_transactions([record.model_dump() for record in records])
    except sqlite3.Error as exc:
        logger.exception("Seed insert failed")
        raise DataAccessError(INIT_FAILED) from exc

    SEED_DURATION.observe(time.perf_counter() - start)
    RECORDS_SEEDED.inc(inserted)
    logger.info("Seeded %d records from %s", inserted, url)
    return inserted


def main(argv: list[str] | None = None) -> int:
    init_observability("sales-seeder", __version__)

    parser = argparse.ArgumentParser(description="Load the product-transaction feed into the sales database")
    parser.add_argument(
        "--url",
        default=SEED_DATA_URL,
        help="URL of the JSON feed",
    )
    parser.add_argument(
        "--db-path",
        default=str(DB_PATH),
        help="Path to the SQLite database file",
    )
    args = parser.parse_args(argv)

    store = TransactionStore(args.db_path)
    store.init_db()
    try:
        seed_database(store, args.url)
    except SalesApiError as exc:
        logger.error("Seeding aborted: %s", exc.message)
        return 1

    logger.info("Database %s now holds %d records", store.db_path, store.count_records())
    return 0


if __name__ == "__main__":
    sys.exit(main())
