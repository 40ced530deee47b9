"""Prometheus metrics, defined in one place.

HTTP metrics are fed by MetricsMiddleware.  AUTH_DECISIONS is fed by the
auth steps themselves, one increment per step run:

  auth_decisions_total{operation="verify_access", outcome="rejected_401"}

A spike in rejected_401 for compare means password guessing; for
verify_access it usually means a client holding expired tokens.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by the MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    # argon2 verification dominates; most auth requests land in 25-250ms
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Auth step outcomes
# ---------------------------------------------------------------------------

AUTH_DECISIONS = Counter(
    "auth_decisions_total",
    "Auth middleware step results",
    ["operation", "outcome"],  # outcome: "passed", "skipped", "rejected_<code>"
)


def record_decision(operation: str, outcome: str) -> None:
    AUTH_DECISIONS.labels(operation=operation, outcome=outcome).inc()
