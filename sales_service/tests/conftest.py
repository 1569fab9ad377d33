from datetime import datetime
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from sales_api.database import TransactionStore
from sales_api.dependencies import get_store
from sales_api.main import app


@pytest.fixture
def store(tmp_path):
    """Each test uses a fresh temporary SQLite database."""
    store = TransactionStore(tmp_path / "test.db")
    store.init_db(reset=False)
    return store


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def add_records(store):
    """Insert records built from keyword overrides; returns the inserted count."""

    def _add(*overrides):
        rows = []
        for fields in overrides:
            row = {
                "title": "Item",
                "description": "",
                "price": 10.0,
                "sold": False,
                "category": "misc",
                "date_of_sale": "2021-03-15T10:00:00",
            }
            row.update(fields)
            row["date_of_sale"] = datetime.fromisoformat(row["date_of_sale"])
            rows.append(row)
        return store.insert_transactions(rows)

    return _add


@pytest.fixture
def feed_response():
    """Build a stand-in for the seed feed's ``requests.Response``."""

    def _response(payload):
        response = MagicMock()
        response.json.return_value = payload
        response.raise_for_status.return_value = None
        return response

    return _response


@pytest.fixture
def sample_feed():
    return [dict(item) for item in SAMPLE_FEED]


SAMPLE_FEED = [
    {
        "id": 1,
        "title": "Fjallraven  - Foldsack No. 1 Backpack, Fits 15 Laptops",
        "price": 329.85,
        "description": "Your perfect pack for everyday use and walks in the forest.",
        "category": "men's clothing",
        "image": "https://fakestoreapi.com/img/81fPKd-2AYL._AC_SL1500_.jpg",
        "sold": False,
        "dateOfSale": "2021-11-27T20:29:54+05:30",
    },
    {
        "id": 2,
        "title": "Mens Casual Premium Slim Fit T-Shirts ",
        "price": 44.6,
        "description": "Slim-fitting style, contrast raglan long sleeve.",
        "category": "men's clothing",
        "image": "https://fakestoreapi.com/img/71-3HjGNDUL._AC_SY879._SX._UX._SY._UY_.jpg",
        "sold": False,
        "dateOfSale": "2021-10-27T20:29:54+05:30",
    },
    {
        "id": 3,
        "title": "Mens Cotton Jacket",
        "price": 615.89,
        "description": "great outerwear jackets for Spring/Autumn/Winter",
        "category": "men's clothing",
        "image": "https://fakestoreapi.com/img/71li-ujtlUL._AC_UX679_.jpg",
        "sold": True,
        "dateOfSale": "2022-07-27T20:29:54+05:30",
    },
    {
        "id": 5,
        "title": "John Hardy Women's Legends Naga Gold & Silver Dragon Station Chain Bracelet",
        "price": 6950,
        "description": "From our Legends Collection, the Naga was inspired by the mythical water dragon.",
        "category": "jewelery",
        "image": "https://fakestoreapi.com/img/71pWzhdJNwL._AC_UL640_QL65_ML3_.jpg",
        "sold": False,
        "dateOfSale": "2021-11-27T20:29:54+05:30",
    },
]
