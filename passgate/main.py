from __future__ import annotations

import logging

from fastapi import FastAPI

from passgate.api.auth import router as auth_router
from passgate.api.health import router as health_router
from passgate.api.metrics_endpoint import router as metrics_router
from passgate.core.config import SETTINGS
from passgate.core.logging import setup_logging
from passgate.middleware.metrics import MetricsMiddleware
from passgate.middleware.request_context import RequestContextMiddleware

# Configure logging before anything else runs.
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="passgate",
    docs_url="/docs" if SETTINGS.is_dev else None,
    redoc_url="/redoc" if SETTINGS.is_dev else None,
)

# Last-added runs first: RequestContext (outermost) -> Metrics -> route
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)

app.include_router(metrics_router)
app.include_router(health_router)
app.include_router(auth_router)

logger.info(
    "passgate started  env=%s log_level=%s port=%d token_keys=%d "
    "access_ttl=%ds refresh_ttl=%ds",
    SETTINGS.app_env,
    SETTINGS.log_level,
    SETTINGS.port,
    len(SETTINGS.token_secrets),
    SETTINGS.access_token_duration,
    SETTINGS.refresh_token_duration,
)
