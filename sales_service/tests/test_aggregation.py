"""Tests for the monthly summaries, called directly against a store."""

import asyncio
import math
import sqlite3
from unittest.mock import patch

import pytest

from sales_api.aggregation import (
    PRICE_BUCKETS,
    bucket_index,
    compute_bar_chart,
    compute_pie_chart,
    compute_statistics,
    fetch_combined,
)


class TestBucketIndex:
    @pytest.mark.parametrize("price,label", [
        (0, "0-100"),
        (100, "0-100"),
        (100.5, "101-200"),
        (101, "101-200"),
        (200, "101-200"),
        (550.25, "501-600"),
        (900, "801-900"),
        (900.01, "901-above"),
        (901, "901-above"),
        (1_000_000, "901-above"),
    ])
    def test_price_lands_in_expected_bucket(self, price, label):
        assert PRICE_BUCKETS[bucket_index(price)].label == label

    def test_every_non_negative_price_lands_in_exactly_one_bucket(self):
        prices = [p / 4 for p in range(0, 4 * 1000)]
        for price in prices:
            index = bucket_index(price)
            assert index is not None
            hits = [
                i for i, bucket in enumerate(PRICE_BUCKETS)
                if (PRICE_BUCKETS[i - 1].high if i else -math.inf) < price <= bucket.high
            ]
            assert hits == [index]

    def test_negative_and_missing_prices_land_nowhere(self):
        assert bucket_index(-0.01) is None
        assert bucket_index(None) is None

    def test_last_bucket_is_unbounded(self):
        assert PRICE_BUCKETS[-1].high == math.inf


class TestSummaries:
    def test_example_month(self, store, add_records):
        add_records(
            {"price": 50, "category": "A"},
            {"price": 150, "category": "A", "sold": True},
            {"price": 950, "category": "B"},
        )
        stats = compute_statistics(store, 3)
        assert stats.total_sale_amount == 1150
        assert stats.total_sold_items == 1
        assert stats.total_unsold_items == 2

        counts = {b.price_range: b.count for b in compute_bar_chart(store, 3)}
        assert counts == {
            "0-100": 1, "101-200": 1, "201-300": 0, "301-400": 0, "401-500": 0,
            "501-600": 0, "601-700": 0, "701-800": 0, "801-900": 0, "901-above": 1,
        }

        pie = {c.category: c.count for c in compute_pie_chart(store, 3)}
        assert pie == {"A": 2, "B": 1}

    def test_unknown_month_is_empty(self, store, add_records):
        add_records({}, {})
        assert compute_statistics(store, None).total_sold_items == 0
        assert compute_pie_chart(store, None) == []
        assert all(b.count == 0 for b in compute_bar_chart(store, None))

    def test_missing_category_grouped_together(self, store, add_records):
        add_records({"category": None}, {"category": None}, {"category": "x"})
        pie = {c.category: c.count for c in compute_pie_chart(store, 3)}
        assert pie == {None: 2, "x": 1}


class TestFetchCombined:
    def test_merges_three_summaries(self, store, add_records):
        add_records({"price": 120, "category": "toys", "sold": True})
        combined = asyncio.run(fetch_combined(store, 3))
        assert combined.statistics.total_sold_items == 1
        assert len(combined.bar_chart) == len(PRICE_BUCKETS)
        assert [c.category for c in combined.pie_chart] == ["toys"]

    def test_any_failure_fails_the_whole_call(self, store, add_records):
        add_records({})
        with patch.object(store, "sale_totals", side_effect=sqlite3.OperationalError("locked")):
            with pytest.raises(sqlite3.OperationalError):
                asyncio.run(fetch_combined(store, 3))
