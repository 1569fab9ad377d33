import logging

from fastapi import APIRouter, Depends, Query

from sales_api.database import TransactionStore
from sales_api.dependencies import get_store
from sales_api.errors import translate_store_errors
from sales_api.models import MessageResponse, TransactionListResponse, TransactionOut
from sales_api.months import month_number
from sales_api.seeder import seed_database

logger = logging.getLogger("transactions")

router = APIRouter(tags=["Transactions"])


@router.get("/initialize", response_model=MessageResponse)
def initialize(store: TransactionStore = Depends(get_store)):
    """
    Load the product-transaction feed into the store.

    Not idempotent: every call appends the whole feed again.
    """
    inserted = seed_database(store)
    logger.info("Initialize request inserted %d records", inserted)
    return MessageResponse(message="Database initialized successfully!")


@router.get("/transactions", response_model=TransactionListResponse)
def list_transactions(
    month: str | None = None,
    search: str = "",
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=10, ge=1, alias="perPage"),
    store: TransactionStore = Depends(get_store),
):
    """
    Page through one month's transactions, optionally filtered by ``search``.

    ``search`` matches title, description or price (as text), case-insensitively.
    """
    with translate_store_errors("list_transactions", "Failed to fetch transactions"):
        records, total = store.list_transactions(month_number(month), search, page, per_page)

    return TransactionListResponse(
        transactions=[TransactionOut(**record) for record in records],
        total=total,
        page=page,
        per_page=per_page,
    )
