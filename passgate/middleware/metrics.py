"""Prometheus metrics middleware: count and time every HTTP request.

The endpoint label is the path of the route that matched, not the raw
URL.  Requests no route matches (scanners probing /wp-login.php, typos)
are all labelled "unmatched", so they cannot grow the label set.
"""

from __future__ import annotations

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Match

from passgate.core.metrics import ACTIVE_REQUESTS, REQUEST_COUNT, REQUEST_DURATION

UNMATCHED = "unmatched"


def endpoint_label(request: Request) -> str:
    """Path of the first route matching *request*, or UNMATCHED."""
    for route in request.app.router.routes:
        matches = getattr(route, "matches", None)
        path = getattr(route, "path", None)
        if matches is None or path is None:
            continue
        match, _ = matches(request.scope)
        if match is not Match.NONE:
            return path
    return UNMATCHED


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # Scrapes would otherwise dominate the request count.
        if request.url.path == "/metrics":
            return await call_next(request)

        endpoint = endpoint_label(request)
        ACTIVE_REQUESTS.inc()
        start = time.monotonic()
        status_code = "500"

        try:
            response = await call_next(request)
            status_code = str(response.status_code)
        finally:
            ACTIVE_REQUESTS.dec()
            REQUEST_COUNT.labels(
                method=request.method,
                endpoint=endpoint,
                status_code=status_code,
            ).inc()
            REQUEST_DURATION.labels(
                method=request.method, endpoint=endpoint
            ).observe(time.monotonic() - start)

        return response
