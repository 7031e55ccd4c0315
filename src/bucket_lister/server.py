"""Entrypoint for running the bucket lister API under uvicorn."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from bucket_lister import __version__
from bucket_lister.infrastructure.http.middleware import method_guard_middleware, request_logging_middleware
from bucket_lister.infrastructure.http.routes import add_bucket_routes, add_error_handlers, add_page_routes
from bucket_lister.observability.logging import configure_logging, enable_cloud_logging, init_logging, shutdown_logging
from bucket_lister.observability.tracing import configure_tracing
from bucket_lister.runtime.bootstrap import Runtime, build_runtime
from bucket_lister.runtime.settings import Settings

init_logging()
configure_tracing(service_name="bucket-lister")
_settings = Settings.load()
if _settings.observability.enable_cloud_logging:
    gcp_project = _settings.logging_gcp_project
    if gcp_project is None:
        raise RuntimeError("Cloud logging enabled but no GCP project configured")
    enable_cloud_logging(
        gcp_project=gcp_project,
        cloud_log_name=_settings.observability.cloud_log_name,
        cloud_log_labels={"service": "bucket-lister"},
        service_account_json=_settings.credentials.gcp_service_account_json_value or None,
    )
else:
    configure_logging(cloud_logging_enabled=False, gcp_project=_settings.logging_gcp_project)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    yield
    shutdown_logging()


def create_app(runtime: Runtime) -> FastAPI:
    # Only "/" and "/api/buckets" are served; everything else answers 404.
    app = FastAPI(
        title="GCS Bucket Lister",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )
    app.middleware("http")(method_guard_middleware)
    app.middleware("http")(request_logging_middleware)

    add_error_handlers(app)
    add_page_routes(app)
    add_bucket_routes(app, runtime.bucket_route_deps)

    return app


_runtime = build_runtime(_settings)
app = create_app(_runtime)


def main() -> None:
    import uvicorn

    uvicorn.run(
        app,
        host=_settings.listen_host,
        port=_settings.port,
        # logging already setup
        log_config=None,
    )


__all__ = ["app", "create_app", "main"]
