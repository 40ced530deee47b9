"""Request context middleware: a request id on every request and log line.

Auth rejections are logged deep inside the steps, far from the HTTP
layer.  The request id ties each "verify_access rejected" warning back to
the request summary line that carries method, path and status.

The id lives in a ContextVar rather than a thread-local: FastAPI serves
concurrent requests on one thread, and the auth pipelines run in a
threadpool, where starlette copies the context for us.
"""

from __future__ import annotations

import logging
import time
import uuid
from contextvars import ContextVar
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


_base_factory = logging.getLogRecordFactory()


def _record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
    """Stamp the current request id on every record, from any logger.

    A filter on the root logger would not see records propagated up from
    child loggers, so the id is attached when the record is created.
    """
    record = _base_factory(*args, **kwargs)
    record.request_id = request_id_var.get()  # type: ignore[attr-defined]
    return record


if not getattr(_base_factory, "_passgate_request_id", False):
    _record_factory._passgate_request_id = True  # type: ignore[attr-defined]
    logging.setLogRecordFactory(_record_factory)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assign (or echo) X-Request-ID, time the request, log one summary line."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        req_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request_id_var.set(req_id)

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000, 1)

        logger.info(
            "%s %s -> %d (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        response.headers["X-Request-ID"] = req_id
        return response
