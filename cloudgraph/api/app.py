"""FastAPI application factory for CloudGraph.

Usage::

    from cloudgraph.api.app import create_app

    app = create_app(pipeline=AnalysisPipeline(), config=config)

The factory is used by both the production bootstrap (``cloudgraph.app``)
and the tests.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cloudgraph.analysis.pipeline import AnalysisPipeline
from cloudgraph.api.routes import router
from cloudgraph.api.schemas import ErrorResponse
from cloudgraph.models.config import CloudGraphConfig
from cloudgraph.observability.logging import get_logger

_log = get_logger("api.app")

_API_PREFIX = "/api/v1"


def create_app(
    pipeline: AnalysisPipeline | None = None,
    config: CloudGraphConfig | None = None,
) -> FastAPI:
    """Create and configure the CloudGraph FastAPI application.

    Args:
        pipeline: AnalysisPipeline shared by all requests; a default one is
                  built when omitted.
        config:   CloudGraphConfig supplying default options and limits.

    Returns:
        Configured FastAPI application, ready to be served by uvicorn.
    """
    from cloudgraph import __version__

    app = FastAPI(
        title="CloudGraph",
        summary="Infrastructure dependency analysis API",
        version=__version__,
        description=(
            "CloudGraph turns compose files and cluster manifests into a "
            "dependency graph, Mermaid diagrams and a list of reliability risks."
        ),
        docs_url="/api/v1/docs",
        redoc_url="/api/v1/redoc",
        openapi_url="/api/v1/openapi.json",
    )

    app.state.pipeline = pipeline or AnalysisPipeline()
    app.state.config = config or CloudGraphConfig()

    app.include_router(router, prefix=_API_PREFIX)

    # -----------------------------------------------------------------------
    # Exception handlers
    # -----------------------------------------------------------------------

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        _request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Map Pydantic validation errors to our error envelope."""
        errors = exc.errors()
        detail = "Invalid request body."
        if errors:
            locs = errors[0].get("loc", ())
            # locs is a tuple like ("body", "files", 0, "content")
            where = ".".join(str(part) for part in locs if part != "body")
            msg = str(errors[0].get("msg", ""))
            detail = f"{where}: {msg}" if where else msg

        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error="INVALID_REQUEST", detail=detail).model_dump(),
        )

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
