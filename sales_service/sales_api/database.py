import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path

from sales_common.observability import db_span

DB_PATH = Path(os.environ.get("DATABASE_PATH", str(Path(__file__).parent.parent / "sales.db")))

SCHEMA = """
CREATE TABLE IF NOT EXISTS product_transactions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT,
    description TEXT,
    price REAL,
    sold INTEGER,
    category TEXT,
    date_of_sale TEXT
);

CREATE INDEX IF NOT EXISTS idx_product_transactions_category ON product_transactions(category);
"""

# Month-of-year only; the year of the sale is ignored.
MONTH_CLAUSE = "CAST(strftime('%m', date_of_sale) AS INTEGER) = :month"

SEARCH_CLAUSE = """(
    icontains(title, :search)
    OR icontains(description, :search)
    OR icontains(price_text(price), :search)
)"""

COLUMNS = "id, title, description, price, sold, category, date_of_sale"


def price_text(price) -> str | None:
    """Render a price the way a user would type it: ``150`` or ``329.85``."""
    if price is None:
        return None
    value = float(price)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def icontains(haystack, needle) -> bool:
    if haystack is None or needle is None:
        return False
    return needle.casefold() in str(haystack).casefold()


def to_storage_date(value: datetime | None) -> str | None:
    """Normalise a sale timestamp to a naive UTC ISO string."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat()


def _row_to_record(row: sqlite3.Row) -> dict:
    sold = row["sold"]
    stored_date = row["date_of_sale"]
    return {
        "id": row["id"],
        "title": row["title"],
        "description": row["description"],
        "price": row["price"],
        "sold": None if sold is None else bool(sold),
        "category": row["category"],
        "date_of_sale": (
            datetime.fromisoformat(stored_date).replace(tzinfo=timezone.utc)
            if stored_date else None
        ),
    }


class TransactionStore:
    """
    Handle on the product-transaction collection.

    One instance is built at startup and shared by every request. It holds
    only the database path; each operation opens its own short-lived
    connection, so concurrent requests never share a connection.
    """

    def __init__(self, db_path: Path | str | None = None):
        self.db_path = Path(db_path) if db_path is not None else DB_PATH

    def init_db(self, reset: bool | None = None) -> None:
        """Create the schema. Drops existing records first when ``reset`` (or
        ``DB_RESET_ON_START=true``) is set."""
        if reset is None:
            reset = os.environ.get("DB_RESET_ON_START", "false").lower() == "true"

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with sqlite3.connect(str(self.db_path)) as conn:
            if reset:
                conn.execute("DROP TABLE IF EXISTS product_transactions")
            conn.executescript(SCHEMA)

    @contextmanager
    def connection(self):
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        conn.create_function("icontains", 2, icontains, deterministic=True)
        conn.create_function("price_text", 1, price_text, deterministic=True)
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def insert_transactions(self, records: list[dict]) -> int:
        """Append records as-is; no deduplication."""
        rows = [
            {
                "title": r.get("title"),
                "description": r.get("description"),
                "price": r.get("price"),
                "sold": None if r.get("sold") is None else int(r["sold"]),
                "category": r.get("category"),
                "date_of_sale": to_storage_date(r.get("date_of_sale")),
            }
            for r in records
        ]
        with db_span("INSERT", "insert_transactions", __name__, records_count=len(rows)):
            with self.connection() as conn:
                conn.executemany(
                    """
                    INSERT INTO product_transactions
                        (title, description, price, sold, category, date_of_sale)
                    VALUES
                        (:title, :description, :price, :sold, :category, :date_of_sale)
                    """,
                    rows,
                )
        return len(rows)

    def list_transactions(
        self,
        month: int | None,
        search: str = "",
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[list[dict], int]:
        """Return one page of month records matching ``search`` plus the total match count."""
        params = {
            "month": month,
            "search": search or "",
            "limit": per_page,
            "offset": (page - 1) * per_page,
        }
        where = f"WHERE {MONTH_CLAUSE} AND {SEARCH_CLAUSE}"
        with db_span("SELECT", "list_transactions", __name__, **{"query.page": page, "query.per_page": per_page}) as span:
            with self.connection() as conn:
                rows = conn.execute(
                    f"SELECT {COLUMNS} FROM product_transactions {where} "
                    "ORDER BY id LIMIT :limit OFFSET :offset",
                    params,
                ).fetchall()
                total = conn.execute(
                    f"SELECT COUNT(*) AS cnt FROM product_transactions {where}",
                    params,
                ).fetchone()["cnt"]

            records = [_row_to_record(row) for row in rows]
            span.set_attribute("db.result_count", len(records))
            span.set_attribute("db.total_count", total)
            return records, total

    def sale_totals(self, month: int | None) -> dict:
        """Sum of price and sold/unsold counts for one month."""
        query = f"""
        SELECT
            COALESCE(SUM(price), 0) AS total_sale_amount,
            COALESCE(SUM(CASE WHEN sold THEN 1 ELSE 0 END), 0) AS total_sold_items,
            COALESCE(SUM(CASE WHEN sold THEN 0 ELSE 1 END), 0) AS total_unsold_items
        FROM product_transactions
        WHERE {MONTH_CLAUSE}
        """
        with db_span("SELECT", "sale_totals", __name__):
            with self.connection() as conn:
                row = conn.execute(query, {"month": month}).fetchone()
        return dict(row)

    def prices_for_month(self, month: int | None) -> list[float | None]:
        with db_span("SELECT", "prices_for_month", __name__) as span:
            with self.connection() as conn:
                rows = conn.execute(
                    f"SELECT price FROM product_transactions WHERE {MONTH_CLAUSE} ORDER BY id",
                    {"month": month},
                ).fetchall()
            span.set_attribute("db.result_count", len(rows))
        return [row["price"] for row in rows]

    def count_by_category(self, month: int | None) -> list[dict]:
        query = f"""
        SELECT category, COUNT(*) AS count
        FROM product_transactions
        WHERE {MONTH_CLAUSE}
        GROUP BY category
        """
        with db_span("SELECT", "count_by_category", __name__) as span:
            with self.connection() as conn:
                rows = conn.execute(query, {"month": month}).fetchall()
            span.set_attribute("db.result_count", len(rows))
        return [dict(row) for row in rows]

    def count_records(self) -> int:
        with self.connection() as conn:
            row = conn.execute("SELECT COUNT(*) AS cnt FROM product_transactions").fetchone()
        return row["cnt"]

    def check_connection(self) -> bool:
        try:
            with self.connection() as conn:
                conn.execute("SELECT 1")
            return True
        except sqlite3.Error:
            return False
