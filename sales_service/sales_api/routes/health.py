from fastapi import APIRouter, Depends, Response

from sales_common.observability import metrics_response

from sales_api.database import TransactionStore
from sales_api.dependencies import get_store
from sales_api.models import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
def health(store: TransactionStore = Depends(get_store)):
    db_ok = store.check_connection()
    total = store.count_records() if db_ok else 0
    return HealthResponse(
        status="healthy" if db_ok else "unhealthy",
        db_connected=db_ok,
        total_records=total,
    )


@router.get("/metrics")
def metrics():
    body, content_type = metrics_response()
    return Response(content=body, media_type=content_type)
