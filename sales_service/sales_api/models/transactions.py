from datetime import datetime

from pydantic import BaseModel, ConfigDict

from .base import CamelModel


class TransactionIn(CamelModel):
    """One object of the seed feed.

    Fields outside the record schema (the feed's own ``id``, ``image``) are
    ignored. Values are coerced, not validated: missing fields stay ``None``.
    """

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    description: str | None = None
    price: float | None = None
    sold: bool | None = None
    category: str | None = None
    date_of_sale: datetime | None = None


class TransactionOut(CamelModel):
    id: int
    title: str | None = None
    description: str | None = None
    price: float | None = None
    sold: bool | None = None
    category: str | None = None
    date_of_sale: datetime | None = None


class TransactionListResponse(CamelModel):
    transactions: list[TransactionOut]
    total: int
    page: int
    per_page: int


class MessageResponse(CamelModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    db_connected: bool
    total_records: int
