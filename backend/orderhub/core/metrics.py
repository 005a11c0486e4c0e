# Prometheus metrics for the webhook pipeline plus generic request
# timing. Label sets are kept small and bounded (no integration ids)
# so series cardinality stays stable.

from time import monotonic

from fastapi import Request
from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware


# outcome: accepted | not_found | unauthorized | failed
WEBHOOK_REQUESTS_TOTAL = Counter(
    "orderhub_webhook_requests_total",
    "Inbound webhook calls grouped by outcome",
    ["outcome"],
)

# outcome: delivered | rejected | transport_error
UPSTREAM_DISPATCH_TOTAL = Counter(
    "orderhub_upstream_dispatch_total",
    "Upstream deliveries grouped by outcome",
    ["outcome"],
)

UPSTREAM_DISPATCH_LATENCY = Histogram(
    "orderhub_upstream_dispatch_latency_seconds",
    "Latency of upstream deliveries in seconds",
    buckets=[0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10, 30],
)

REQUEST_LATENCY = Histogram(
    "orderhub_api_request_latency_seconds",
    "Latency of API requests in seconds",
    ["method", "route"],
)
REQUEST_COUNT = Counter(
    "orderhub_api_request_count_total",
    "Total API requests",
    ["method", "route", "http_status"],
)


def record_webhook(outcome: str) -> None:
    WEBHOOK_REQUESTS_TOTAL.labels(outcome=outcome).inc()


def record_dispatch(outcome: str, duration_seconds: float | None = None) -> None:
    UPSTREAM_DISPATCH_TOTAL.labels(outcome=outcome).inc()
    if duration_seconds is not None:
        UPSTREAM_DISPATCH_LATENCY.observe(duration_seconds)


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = monotonic()
        response = await call_next(request)
        route = getattr(request.scope.get("route"), "path", None) or "unmatched"
        REQUEST_LATENCY.labels(request.method, route).observe(monotonic() - start)
        REQUEST_COUNT.labels(request.method, route, str(response.status_code)).inc()
        return response
