import time

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Match

HTTP_REQUESTS = Counter(
    "http_requests_total",
    "HTTP requests served, by route template",
    ["method", "route", "status"],
)

HTTP_LATENCY = Histogram(
    "http_request_duration_seconds",
    "Time spent serving an HTTP request",
    ["method", "route"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

UNMATCHED_ROUTE = "<unmatched>"

# Scrapes and probes would drown out real traffic
_SKIPPED_PREFIXES = ("/metrics", "/health")


def route_template(request: Request) -> str:
    """The path template of the route that serves ``request``, e.g. ``/api/orders/{order_id}``."""
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", UNMATCHED_ROUTE)
    return UNMATCHED_ROUTE


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path.startswith(_SKIPPED_PREFIXES):
            return await call_next(request)

        route = route_template(request)
        started = time.perf_counter()
        response = await call_next(request)
        HTTP_LATENCY.labels(request.method, route).observe(time.perf_counter() - started)
        HTTP_REQUESTS.labels(request.method, route, str(response.status_code)).inc()
        return response
