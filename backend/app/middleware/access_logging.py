"""Access logging middleware using structlog."""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger(__name__)

# Polled by container orchestrators every few seconds
QUIET_PATHS = frozenset({"/health", "/ready"})

# Identifiers copied from path or query parameters onto the log entry
LOGGED_PARAMS = ("line_id", "station_id")


def _log_level(path: str, status_code: int) -> str:
    if status_code >= 500:
        return "error"
    if path in QUIET_PATHS:
        return "debug"
    return "info"


def _request_identifiers(request: Request) -> dict[str, str]:
    """Line and station ids the request addressed, from its path first and then its query string."""
    path_params = request.scope.get("path_params", {})
    identifiers: dict[str, str] = {}
    for name in LOGGED_PARAMS:
        if value := path_params.get(name) or request.query_params.get(name):
            identifiers[name] = str(value)
    return identifiers


class AccessLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that logs HTTP requests with structured data.

    Replaces uvicorn's access logging with one structlog event per request.
    Server errors log at error level and health checks at debug level.

    Log fields:
        - method: HTTP method (GET, POST, etc.)
        - path: Request path
        - route: Matched route template, e.g. /api/v1/lines/{line_id}/sections
        - line_id/station_id: Identifiers addressed by the request, when present
        - status_code: Response status code
        - duration_ms: Request duration in milliseconds
        - client_ip: Client IP address
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Process request and log access information."""
        start_time = time.perf_counter()

        # X-Forwarded-For can be spoofed; both values are logged and the deployment decides which to trust
        client_ip = request.client.host if request.client else "unknown"
        forwarded_for = None
        if xff_header := request.headers.get("x-forwarded-for"):
            forwarded_for = xff_header.split(",")[0].strip()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000

        # Routing has run by now, so the scope carries the matched route and its path parameters
        log_kwargs: dict[str, str | int | float | None] = {
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
            "client_ip": client_ip,
        }
        if route_path := getattr(request.scope.get("route"), "path", None):
            log_kwargs["route"] = route_path
        log_kwargs.update(_request_identifiers(request))
        if forwarded_for:
            log_kwargs["forwarded_for"] = forwarded_for

        log = getattr(logger, _log_level(request.url.path, response.status_code))
        log("http_request", **log_kwargs)

        return response
