from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any
from uuid import uuid4

from fastapi import Request
from fastapi.responses import JSONResponse

from bucket_lister.infrastructure.http.schemas import METHOD_NOT_ALLOWED_ERROR

logger = logging.getLogger("bucket_lister.http")

ALLOWED_METHODS = frozenset({"GET"})


async def request_logging_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Any]],
) -> Any:
    request_id = request.headers.get("x-request-id", uuid4().hex)
    request_line = _format_request_line(request)
    logger.info(
        "request_received",
        extra={
            "data": {
                "request_id": request_id,
                "request_line": request_line,
                "method": request.method,
                "path": request.url.path,
            },
        },
    )

    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception(
            "request_failed",
            extra={
                "data": {
                    "request_id": request_id,
                    "request_line": request_line,
                    "method": request.method,
                    "path": request.url.path,
                },
            },
        )
        raise

    duration = time.perf_counter() - start
    logger.info(
        "request_completed",
        extra={
            "data": {
                "request_id": request_id,
                "request_line": request_line,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration * 1000, 2),
            },
        },
    )
    return response


async def method_guard_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Any]],
) -> Any:
    """Answer 405 for every method the service does not serve, on any path."""
    if request.method not in ALLOWED_METHODS:
        return JSONResponse(status_code=405, content={"error": METHOD_NOT_ALLOWED_ERROR})
    return await call_next(request)


def _format_request_line(request: Request) -> str:
    query = request.url.query
    if query:
        return f"{request.method} {request.url.path}?{query}"
    return f"{request.method} {request.url.path}"
