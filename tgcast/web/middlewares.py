from __future__ import annotations

import time
from typing import Awaitable, Callable

import structlog
from aiohttp import web

logger = structlog.get_logger()

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@web.middleware
async def logging_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Log every incoming request with structured context."""
    start = time.monotonic()
    structlog.contextvars.bind_contextvars(method=request.method, path=request.path)
    logger.info(
        "request_received",
        remote=request.remote,
        content_length=request.content_length,
    )
    try:
        response = await handler(request)
        logger.debug(
            "request_handled",
            status=response.status,
            duration_ms=int((time.monotonic() - start) * 1000),
        )
        return response
    finally:
        structlog.contextvars.unbind_contextvars("method", "path")
