"""
Request Logging Middleware

- Assigns a unique request_id to every request
- Logs request start & end with timing
- Echoes the request id back in ``X-Request-ID``
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from shipyard.logging_config import generate_request_id, request_id_ctx

logger = logging.getLogger("shipyard.request")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        # Honour an upstream id (reverse proxy) when present
        rid = request.headers.get("x-request-id") or generate_request_id()
        token = request_id_ctx.set(rid)

        method = request.method
        path = request.url.path
        client_ip = request.client.host if request.client else "-"

        logger.info("→ %s %s from %s", method, path, client_ip)

        start = time.perf_counter()
        try:
            response = await call_next(request)
            elapsed = (time.perf_counter() - start) * 1000
            response.headers["X-Request-ID"] = rid
            logger.info(
                "← %s %s %d %.1fms",
                method, path, response.status_code, elapsed,
            )
            return response
        except Exception:
            elapsed = (time.perf_counter() - start) * 1000
            logger.exception("✗ %s %s failed after %.1fms", method, path, elapsed)
            raise
        finally:
            request_id_ctx.reset(token)
