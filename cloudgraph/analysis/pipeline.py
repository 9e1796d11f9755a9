"""Analysis orchestration.

``AnalysisPipeline.run`` sequences extraction, selector resolution,
inference, graph building, diagrams, the architectural summary, risk
detection and recommendations over one batch of decoded files. Per-file
decode and extraction failures are collected, in file then document order,
without aborting the batch. ``analyze`` wraps ``run`` for front-ends and
turns an unrecovered exception into an error response.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Sequence
from datetime import UTC, datetime

from cloudgraph.analysis.diagrams import generate_diagrams
from cloudgraph.analysis.graph_builder import build_graph
from cloudgraph.analysis.inference import infer_dependencies
from cloudgraph.analysis.recommendations import generate_recommendations
from cloudgraph.analysis.selectors import resolve_selectors
from cloudgraph.analysis.summary import build_architectural_analysis, build_resource_summary
from cloudgraph.errors import ExtractionError
from cloudgraph.extractors import detect_platform, extractor_for
from cloudgraph.models.analysis import (
    AnalysisOptions,
    AnalysisResponse,
    AnalysisResult,
    AnalysisStatus,
)
from cloudgraph.models.documents import DecodedFile
from cloudgraph.models.resources import Dependency, Resource
from cloudgraph.observability.logging import analysis_context, get_logger
from cloudgraph.observability.metrics import (
    analyses_total,
    analysis_duration_seconds,
    documents_processed_total,
    extraction_errors_total,
)
from cloudgraph.rules import RiskEngine, build_risk_engine

_logger = get_logger("analysis.pipeline")


def _now() -> str:
    return datetime.now(tz=UTC).isoformat()


class AnalysisPipeline:
    """Runs the full analysis over one batch of decoded files.

    Holds no per-run state; one instance may serve any number of runs.
    """

    def __init__(self, risk_engine: RiskEngine | None = None) -> None:
        self._risk_engine = risk_engine or build_risk_engine()

    def run(
        self,
        files: Sequence[DecodedFile],
        options: AnalysisOptions | None = None,
        analysis_id: str | None = None,
    ) -> AnalysisResult:
        """Analyse *files* and return the complete result.

        Raises:
            SelectorResolutionError: a pending selector could not be
                interpreted; the run is abandoned.
        """
        options = options or AnalysisOptions()
        analysis_id = analysis_id or str(uuid.uuid4())
        created_at = _now()
        t_start = time.monotonic()

        with analysis_context(analysis_id):
            resources, dependencies, errors = self._extract(files, options)

            dependencies = resolve_selectors(dependencies, resources)
            if options.infer_dependencies:
                dependencies = dependencies + infer_dependencies(resources)

            graph = build_graph(resources, dependencies, [f.file_name for f in files])
            diagrams = generate_diagrams(resources, dependencies)
            architecture = build_architectural_analysis(resources, dependencies)
            risks = self._risk_engine.evaluate(resources, dependencies)
            recommendations = generate_recommendations(risks)

            duration = time.monotonic() - t_start
            analysis_duration_seconds.observe(duration)
            analyses_total.labels(status=AnalysisStatus.COMPLETED).inc()
            _logger.info(
                "analysis_completed",
                files=len(files),
                resources=len(resources),
                edges=graph.edge_count,
                risks=len(risks),
                errors=len(errors),
                duration_ms=round(duration * 1000.0, 2),
            )

        return AnalysisResult(
            id=analysis_id,
            status=AnalysisStatus.COMPLETED,
            created_at=created_at,
            completed_at=_now(),
            summary=build_resource_summary(resources),
            graph=graph,
            diagrams=diagrams,
            analysis=architecture,
            risks=risks,
            recommendations=recommendations,
            errors=errors or None,
        )

    def _extract(
        self,
        files: Sequence[DecodedFile],
        options: AnalysisOptions,
    ) -> tuple[list[Resource], list[Dependency], list[str]]:
        resources: list[Resource] = []
        dependencies: list[Dependency] = []
        errors: list[str] = []

        for file in files:
            if file.errors:
                errors.extend(file.errors)
                extraction_errors_total.labels(stage="decode").inc(len(file.errors))
                continue

            for doc in file.documents:
                platform = detect_platform(doc.document)
                documents_processed_total.labels(platform=platform).inc()
                raw_text = doc.raw_text if options.include_raw else None
                try:
                    result = extractor_for(platform).extract(doc.document, file.file_name, raw_text)
                except (ExtractionError, ValueError, TypeError) as exc:
                    errors.append(f"Error parsing {file.file_name}: {exc}")
                    extraction_errors_total.labels(stage="extract").inc()
                    _logger.warning(
                        "document_extraction_failed",
                        file=file.file_name,
                        document=doc.index,
                        error=str(exc),
                    )
                    continue
                resources.extend(result.resources)
                dependencies.extend(result.dependencies)

        return resources, dependencies, errors


def analyze(
    files: Sequence[DecodedFile],
    options: AnalysisOptions | None = None,
    pipeline: AnalysisPipeline | None = None,
) -> AnalysisResponse:
    """Run the pipeline and wrap the outcome for a front-end."""
    pipeline = pipeline or AnalysisPipeline()
    analysis_id = str(uuid.uuid4())
    try:
        result = pipeline.run(files, options, analysis_id=analysis_id)
    except Exception as exc:
        analyses_total.labels(status=AnalysisStatus.ERROR).inc()
        _logger.error("analysis_failed", analysis_id=analysis_id, error=str(exc), exc_type=type(exc).__name__)
        return AnalysisResponse(id=analysis_id, status=AnalysisStatus.ERROR, error=str(exc))
    return AnalysisResponse(id=analysis_id, status=AnalysisStatus.COMPLETED, result=result)
