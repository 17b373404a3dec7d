import time

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Match

MENU_HTTP_REQUESTS = Counter(
    "menu_http_requests_total",
    "HTTP requests handled by the menu service",
    ["method", "route", "status"],
)

MENU_HTTP_LATENCY = Histogram(
    "menu_http_request_duration_seconds",
    "HTTP request latency by route template",
    ["method", "route"],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

UNMATCHED_ROUTE = "<unmatched>"


def route_template(request: Request) -> str:
    """Label a request with the path template it matches, e.g. ``/menu/{item_id}/order``."""
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match is Match.FULL:
            return route.path
    # unknown paths share one label so scanners cannot blow up cardinality
    return UNMATCHED_ROUTE


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        route = route_template(request)
        start = time.perf_counter()
        response = await call_next(request)

        MENU_HTTP_REQUESTS.labels(request.method, route, str(response.status_code)).inc()
        MENU_HTTP_LATENCY.labels(request.method, route).observe(time.perf_counter() - start)
        return response
