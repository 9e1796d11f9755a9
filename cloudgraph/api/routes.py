"""REST API routes.

Handlers are plain ``def`` so FastAPI runs the synchronous pipeline in its
worker thread pool.
"""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from cloudgraph.analysis.pipeline import analyze
from cloudgraph.api.schemas import (
    AnalyzeRequest,
    AnalyzeResponse,
    ErrorResponse,
    HealthResponse,
    OptionsSchema,
    ValidateRequest,
    ValidateResponse,
    ValidationIssueSchema,
)
from cloudgraph.ingest import decode_files, validate_files
from cloudgraph.models.analysis import AnalysisOptions, AnalysisStatus
from cloudgraph.models.config import CloudGraphConfig
from cloudgraph.models.documents import FileInput
from cloudgraph.observability.logging import get_logger
from cloudgraph.serialization import to_jsonable

_log = get_logger("api.routes")

router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _config(request: Request) -> CloudGraphConfig:
    return request.app.state.config


def _resolve_options(body: AnalyzeRequest, config: CloudGraphConfig) -> AnalysisOptions:
    """Request options override the configured defaults field by field."""
    requested = body.options or OptionsSchema()
    return AnalysisOptions(
        infer_dependencies=(
            config.analysis.infer_dependencies
            if requested.infer_dependencies is None
            else requested.infer_dependencies
        ),
        include_raw=config.analysis.include_raw if requested.include_raw is None else requested.include_raw,
    )


def _too_many_files(count: int, config: CloudGraphConfig) -> JSONResponse | None:
    if count <= config.analysis.max_files:
        return None
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error="INVALID_REQUEST",
            detail=f"Too many files: {count} (maximum {config.analysis.max_files}).",
        ).model_dump(),
    )


@router.post("/analyze", response_model=AnalyzeResponse, responses=_ERROR_RESPONSES)
def analyze_files(body: AnalyzeRequest, request: Request) -> AnalyzeResponse | JSONResponse:
    config = _config(request)
    rejected = _too_many_files(len(body.files), config)
    if rejected is not None:
        return rejected

    decoded = decode_files(FileInput(name=f.name, content=f.content) for f in body.files)
    response = analyze(decoded, _resolve_options(body, config), pipeline=request.app.state.pipeline)

    if response.status == AnalysisStatus.ERROR or response.result is None:
        _log.warning("analyze_request_failed", analysis_id=response.id, error=response.error)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="ANALYSIS_FAILED", detail=response.error or "").model_dump(),
        )

    return AnalyzeResponse(id=response.id, status=response.status, result=to_jsonable(response.result))


@router.post("/validate", response_model=ValidateResponse, responses=_ERROR_RESPONSES)
def validate(body: ValidateRequest, request: Request) -> ValidateResponse | JSONResponse:
    rejected = _too_many_files(len(body.files), _config(request))
    if rejected is not None:
        return rejected

    report = validate_files(FileInput(name=f.name, content=f.content) for f in body.files)
    return ValidateResponse(
        valid=report.valid,
        errors=[ValidationIssueSchema(file=i.file, message=i.message, line=i.line) for i in report.errors],
        warnings=[ValidationIssueSchema(file=i.file, message=i.message, line=i.line) for i in report.warnings],
    )


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    from cloudgraph import __version__

    return HealthResponse(status="healthy", version=__version__, timestamp=datetime.now(tz=UTC).isoformat())


@router.get("/metrics")
def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
