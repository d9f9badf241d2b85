"""
Request correlation for log lines.

Each request gets an id, taken from ``X-Correlation-ID`` when the caller sends
one. The id is bound to loguru's context for the duration of the request, so
every line logged while serving it (Tribler calls, store writes, error
handlers) carries the same ``extra[correlation_id]``.
"""
import time
import uuid

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

CORRELATION_HEADER = "X-Correlation-ID"

# Value shown in log lines emitted outside of any request (startup, shutdown)
NO_CORRELATION_ID = "-"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Binds a correlation id to the request's log context and echoes it back.

    Sonarr/Radarr poll /torrents/info every few seconds, so the per-request
    summary is logged at debug level only.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or uuid.uuid4().hex[:8]
        started = time.perf_counter()

        with logger.contextualize(correlation_id=correlation_id):
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.debug(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.0f} ms)")

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
