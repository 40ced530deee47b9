"""Liveness probe.

Configuration is validated at import, so a process that answers here has
usable secrets.  There are no backing services to check.
"""

from __future__ import annotations

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    return {"status": "ok"}
