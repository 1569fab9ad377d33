"""
Request accounting for Starlette / FastAPI apps.

``MetricsMiddleware`` counts every handled request by method, path and
status and, when given a histogram, times it too. A handler that raises is
recorded as status 500 before the error continues up the stack.

Usage::

    app.add_middleware(
        MetricsMiddleware,
        counter=HTTP_REQUESTS,
        duration=HTTP_REQUEST_DURATION,
        ignored_paths={"/metrics"},
    )
"""

import time

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


class MetricsMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app,
        counter: Counter,
        duration: Histogram | None = None,
        ignored_paths: set[str] | None = None,
    ):
        super().__init__(app)
        self.counter = counter
        self.duration = duration
        self.ignored_paths = frozenset(ignored_paths or ())

    def _record(self, request: Request, status: int, elapsed: float) -> None:
        path = request.url.path
        self.counter.labels(method=request.method, path=path, status=status).inc()
        if self.duration is not None:
            self.duration.labels(method=request.method, path=path).observe(elapsed)

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.ignored_paths:
            return await call_next(request)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self._record(request, 500, time.perf_counter() - start)
            raise
        self._record(request, response.status_code, time.perf_counter() - start)
        return response
