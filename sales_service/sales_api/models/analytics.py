from pydantic import Field

from .base import CamelModel


class SalesStatistics(CamelModel):
    total_sale_amount: float
    total_sold_items: int
    total_unsold_items: int


class PriceRangeCount(CamelModel):
    price_range: str = Field(alias="range")
    count: int


class CategoryCount(CamelModel):
    """Per-category record count.

    ``_id`` is the grouping key and always equals ``category``.
    """

    id: str | None = Field(alias="_id")
    category: str | None
    count: int


class CombinedData(CamelModel):
    statistics: SalesStatistics
    bar_chart: list[PriceRangeCount]
    pie_chart: list[CategoryCount]
