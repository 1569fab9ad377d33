import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from sales_common.observability import init_observability, get_logger, shutdown_tracing

from sales_api import __version__
from sales_api.database import TransactionStore
from sales_api.errors import SalesApiError
from sales_api.routes import transactions_router, analytics_router, health_router

# Bootstrap logging + tracing + service-info in one call
init_observability("sales-api", __version__)

logger = get_logger("sales-api")

API_PREFIX = os.environ.get("API_PREFIX", "/api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = TransactionStore()
    store.init_db()
    app.state.store = store
    logger.info("Database initialized at %s", store.db_path)

    yield

    # Flush remaining traces before shutdown
    shutdown_tracing()


app = FastAPI(
    title="Product Sales API",
    version=__version__,
    lifespan=lifespan,
)


@app.exception_handler(SalesApiError)
async def sales_api_error_handler(request: Request, exc: SalesApiError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


# Query parameters that fail parsing are reported like any other failure of the endpoint.
REQUEST_ERROR_MESSAGES = {
    f"{API_PREFIX}/initialize": "Failed to initialize database",
    f"{API_PREFIX}/transactions": "Failed to fetch transactions",
    f"{API_PREFIX}/statistics": "Failed to fetch statistics",
    f"{API_PREFIX}/bar-chart": "Failed to fetch bar chart data",
    f"{API_PREFIX}/pie-chart": "Failed to fetch pie chart data",
    f"{API_PREFIX}/combined-data": "Failed to fetch combined data",
}


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    path = request.url.path
    logger.warning("Rejected query for %s: %s", path, exc.errors())
    message = REQUEST_ERROR_MESSAGES.get(path, "Invalid request")
    return JSONResponse(status_code=500, content={"error": message})


app.include_router(transactions_router, prefix=API_PREFIX)
app.include_router(analytics_router, prefix=API_PREFIX)
app.include_router(health_router)

# Initialize telemetry at module level (before requests start)
try:
    from sales_api import telemetry
    telemetry.init(app)
except Exception as e:
    logger.warning(f"Telemetry init skipped: {e}")
