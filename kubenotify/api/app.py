"""FastAPI application factory for kubenotify.

Usage::

    from kubenotify.api.app import create_app

    app = create_app(pipeline=pipeline, config=config)

Serves liveness/status under ``/api/v1`` and Prometheus metrics at
``/metrics``. The factory is used by both the bootstrap
(``kubenotify.app``) and unit tests.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from kubenotify.api.routes import router
from kubenotify.api.schemas import ErrorResponse

_log = structlog.get_logger(component="api.app")

_API_PREFIX = "/api/v1"


def create_app(pipeline: Any, config: Any = None) -> FastAPI:
    """Create and configure the kubenotify status application.

    Args:
        pipeline: EventPipeline whose counters are reported.
        config:   KubeNotifyConfig. Used for the watch namespace only.

    Returns:
        Configured FastAPI application, ready to be served by uvicorn.
    """
    from kubenotify import __version__

    watch_namespace = ""
    if config is not None and hasattr(config, "watch"):
        watch_namespace = config.watch.namespace or ""

    app = FastAPI(
        title="kubenotify",
        summary="Kubernetes event to Slack notifier",
        version=__version__,
        docs_url="/api/v1/docs",
        redoc_url=None,
        openapi_url="/api/v1/openapi.json",
    )

    app.state.pipeline = pipeline
    app.state.config = config
    app.state.watch_namespace = watch_namespace

    app.include_router(router, prefix=_API_PREFIX)
    app.mount("/metrics", make_asgi_app())

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Catch-all for unhandled exceptions; never expose stack traces."""
        _log.error(
            "unhandled_exception",
            path=str(request.url.path),
            method=request.method,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="INTERNAL_ERROR",
                detail="An unexpected error occurred.",
            ).model_dump(),
        )

    return app
