from .transactions import TransactionIn, TransactionOut, TransactionListResponse, MessageResponse, HealthResponse
from .analytics import SalesStatistics, PriceRangeCount, CategoryCount, CombinedData

__all__ = [
    "TransactionIn",
    "TransactionOut",
    "TransactionListResponse",
    "MessageResponse",
    "HealthResponse",
    "SalesStatistics",
    "PriceRangeCount",
    "CategoryCount",
    "CombinedData",
]
