"""Prometheus scrape endpoint.

Exposes http_* request metrics and auth_decisions_total.  Restrict it to
the scraper at the network level in production: rejection counts reveal
which routes are under attack.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
