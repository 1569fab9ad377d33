from fastapi import Request

from sales_api.database import TransactionStore


def get_store(request: Request) -> TransactionStore:
    """The store handle built during application startup."""
    return request.app.state.store
