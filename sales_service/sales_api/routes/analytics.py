from fastapi import APIRouter, Depends

from sales_api.aggregation import compute_bar_chart, compute_pie_chart, compute_statistics, fetch_combined
from sales_api.database import TransactionStore
from sales_api.dependencies import get_store
from sales_api.errors import translate_store_errors
from sales_api.models import CategoryCount, CombinedData, PriceRangeCount, SalesStatistics
from sales_api.months import month_number

router = APIRouter(tags=["Analytics"])


@router.get("/statistics", response_model=SalesStatistics)
def statistics(month: str | None = None, store: TransactionStore = Depends(get_store)):
    with translate_store_errors("statistics", "Failed to fetch statistics"):
        return compute_statistics(store, month_number(month))


@router.get("/bar-chart", response_model=list[PriceRangeCount])
def bar_chart(month: str | None = None, store: TransactionStore = Depends(get_store)):
    with translate_store_errors("bar_chart", "Failed to fetch bar chart data"):
        return compute_bar_chart(store, month_number(month))


@router.get("/pie-chart", response_model=list[CategoryCount])
def pie_chart(month: str | None = None, store: TransactionStore = Depends(get_store)):
    with translate_store_errors("pie_chart", "Failed to fetch pie chart data"):
        return compute_pie_chart(store, month_number(month))


@router.get("/combined-data", response_model=CombinedData)
async def combined_data(month: str | None = None, store: TransactionStore = Depends(get_store)):
    """Statistics, bar chart and pie chart for one month in a single response."""
    with translate_store_errors("combined_data", "Failed to fetch combined data"):
        return await fetch_combined(store, month_number(month))
