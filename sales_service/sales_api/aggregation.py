"""
Monthly summaries over the transaction store.

Three independent summaries, each scoped to one calendar month (any year):

  compute_statistics: total sale amount, sold and unsold counts
  compute_bar_chart: record counts over ten fixed price ranges
  compute_pie_chart: record counts per category

Each one issues its own query; nothing is shared or cached between them.
``fetch_combined`` runs all three concurrently and merges the results.
"""

import asyncio
import logging
import math
from bisect import bisect_left
from dataclasses import dataclass

from sales_api.database import TransactionStore
from sales_api.models import CategoryCount, CombinedData, PriceRangeCount, SalesStatistics

logger = logging.getLogger("aggregation")


@dataclass(frozen=True)
class PriceBucket:
    """A price range with inclusive integral bounds."""
    label: str
    low: float
    high: float


PRICE_BUCKETS = (
    PriceBucket("0-100", 0, 100),
    PriceBucket("101-200", 101, 200),
    PriceBucket("201-300", 201, 300),
    PriceBucket("301-400", 301, 400),
    PriceBucket("401-500", 401, 500),
    PriceBucket("501-600", 501, 600),
    PriceBucket("601-700", 601, 700),
    PriceBucket("701-800", 701, 800),
    PriceBucket("801-900", 801, 900),
    PriceBucket("901-above", 901, math.inf),
)

_UPPER_BOUNDS = [bucket.high for bucket in PRICE_BUCKETS[:-1]]


def bucket_index(price: float | None) -> int | None:
    """
    Index into ``PRICE_BUCKETS`` for ``price``, or ``None`` if it fits none.

    A price belongs to the first bucket whose upper bound is >= the price,
    so 100 -> "0-100", 100.5 and 101 -> "101-200", 901 -> "901-above".
    Every non-negative price lands in exactly one bucket; negative and
    missing prices land in none.
    """
    if price is None or price < PRICE_BUCKETS[0].low:
        return None
    return bisect_left(_UPPER_BOUNDS, price)


def compute_statistics(store: TransactionStore, month: int | None) -> SalesStatistics:
    totals = store.sale_totals(month)
    return SalesStatistics(
        total_sale_amount=totals["total_sale_amount"],
        total_sold_items=totals["total_sold_items"],
        total_unsold_items=totals["total_unsold_items"],
    )


def compute_bar_chart(store: TransactionStore, month: int | None) -> list[PriceRangeCount]:
    counts = [0] * len(PRICE_BUCKETS)
    for price in store.prices_for_month(month):
        index = bucket_index(price)
        if index is not None:
            counts[index] += 1

    return [
        PriceRangeCount(price_range=bucket.label, count=count)
        for bucket, count in zip(PRICE_BUCKETS, counts)
    ]


def compute_pie_chart(store: TransactionStore, month: int | None) -> list[CategoryCount]:
    return [
        CategoryCount(id=row["category"], category=row["category"], count=row["count"])
        for row in store.count_by_category(month)
    ]


async def fetch_combined(store: TransactionStore, month: int | None) -> CombinedData:
    """
    Run the three summaries concurrently and merge them.

    Each summary runs on a worker thread with its own connection. The first
    failure propagates and no partial result is returned.
    """
    statistics, bar_chart, pie_chart = await asyncio.gather(
        asyncio.to_thread(compute_statistics, store, month),
        asyncio.to_thread(compute_bar_chart, store, month),
        asyncio.to_thread(compute_pie_chart, store, month),
    )
    logger.debug("Combined summaries computed for month=%s", month)
    return CombinedData(statistics=statistics, bar_chart=bar_chart, pie_chart=pie_chart)
