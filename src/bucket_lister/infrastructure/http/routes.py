"""HTTP route definitions for the bucket lister API."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from bucket_lister.domain.bucket import BucketListing
from bucket_lister.infrastructure.http.index_page import INDEX_HTML
from bucket_lister.infrastructure.http.schemas import (
    BUCKET_LIST_ERROR,
    METHOD_NOT_ALLOWED_ERROR,
    BucketListResponse,
    ErrorResponse,
)

logger = logging.getLogger("bucket_lister.http")


class BucketListingUseCase(Protocol):
    def execute(self) -> BucketListing:
        ...


@dataclass(frozen=True)
class BucketRouteDeps:
    list_buckets: BucketListingUseCase


def add_page_routes(app: FastAPI) -> None:
    @app.get("/", response_class=HTMLResponse, description="Landing page with setup notes.")
    def index() -> HTMLResponse:
        return HTMLResponse(INDEX_HTML)


def add_bucket_routes(app: FastAPI, dependency_provider: Callable[[], BucketRouteDeps]) -> None:
    def get_dependencies() -> BucketRouteDeps:
        return dependency_provider()

    @app.get(
        "/api/buckets",
        response_model=BucketListResponse,
        responses={500: {"model": ErrorResponse}},
        description="Resolve credentials and list the buckets of the active project.",
    )
    def list_buckets(
        deps: BucketRouteDeps = Depends(get_dependencies),  # noqa: B008
    ) -> BucketListResponse | JSONResponse:
        try:
            listing = deps.list_buckets.execute()
        except Exception as exc:
            logger.exception("bucket listing failed", extra={"data": {"error_type": type(exc).__name__}})
            body = ErrorResponse(error=BUCKET_LIST_ERROR, details=str(exc))
            return JSONResponse(status_code=500, content=body.model_dump())
        return BucketListResponse.from_listing(listing)


def add_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error(_: Request, exc: StarletteHTTPException) -> Response:
        if exc.status_code == 404:
            return PlainTextResponse("Not Found", status_code=404)
        if exc.status_code == 405:
            return _method_not_allowed()
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


def _method_not_allowed() -> JSONResponse:
    return JSONResponse(status_code=405, content={"error": METHOD_NOT_ALLOWED_ERROR})


__all__ = [
    "BucketRouteDeps",
    "add_bucket_routes",
    "add_error_handlers",
    "add_page_routes",
]
