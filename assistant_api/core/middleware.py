"""Application middleware."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Awaitable, Callable
from time import perf_counter

from fastapi import Request, Response

logger = logging.getLogger(__name__)


async def request_logging_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Log one line per request and add `X-Request-Id` to the response."""
    request_id = uuid.uuid4()
    request.state.request_id = request_id
    started_at = perf_counter()

    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        response.headers["X-Request-Id"] = str(request_id)
        return response
    finally:
        duration_ms = (perf_counter() - started_at) * 1000.0
        logger.info(
            "%s %s -> %d (%.1f ms) [%s]",
            request.method,
            request.url.path,
            status_code,
            duration_ms,
            request_id,
        )
