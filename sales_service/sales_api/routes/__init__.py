from .transactions import router as transactions_router
from .analytics import router as analytics_router
from .health import router as health_router

__all__ = ["transactions_router", "analytics_router", "health_router"]
