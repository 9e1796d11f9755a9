"""Analysis result data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from cloudgraph.models.graph import DependencyGraph
from cloudgraph.models.resources import Confidence, Resource, Tier
from cloudgraph.models.risks import Recommendation, Risk


class AnalysisStatus(StrEnum):
    COMPLETED = "completed"
    ERROR = "error"


@dataclass(frozen=True)
class AnalysisOptions:
    """Per-run switches."""

    infer_dependencies: bool = True
    include_raw: bool = False


@dataclass
class ResourceSummary:
    """Counts by kind/platform plus the full resource list."""

    total_resources: int = 0
    by_kind: dict[str, int] = field(default_factory=dict)
    by_platform: dict[str, int] = field(default_factory=dict)
    resources: list[Resource] = field(default_factory=list)


@dataclass(frozen=True)
class Diagrams:
    """The three Mermaid flowchart renderings of one graph."""

    container_view: str
    service_view: str
    infrastructure_view: str


@dataclass
class LogicalGroup:
    """Resources sharing one architectural tier."""

    name: str
    category: Tier
    resources: list[str] = field(default_factory=list)


@dataclass
class ExternalDependency:
    """An endpoint referenced from configuration but not defined in the input."""

    name: str
    type: str
    inferred_from: list[str] = field(default_factory=list)
    confidence: Confidence = Confidence.MEDIUM


@dataclass
class ArchitecturalAnalysis:
    """Free-text overview, tier groupings and detected external endpoints."""

    overview: str = ""
    logical_groups: list[LogicalGroup] = field(default_factory=list)
    external_dependencies: list[ExternalDependency] = field(default_factory=list)


@dataclass
class AnalysisResult:
    """Complete output of one pipeline run.

    Contract between the pipeline and all consumers (REST, CLI); consumers
    must not re-derive graph or risk data on their own.
    """

    id: str
    status: AnalysisStatus
    created_at: str  # ISO-8601 UTC
    summary: ResourceSummary
    graph: DependencyGraph
    diagrams: Diagrams
    analysis: ArchitecturalAnalysis
    risks: list[Risk] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)
    completed_at: str | None = None
    errors: list[str] | None = None


@dataclass
class AnalysisResponse:
    """Envelope returned by ``analyze``: a result, or the fatal error."""

    id: str
    status: AnalysisStatus
    result: AnalysisResult | None = None
    error: str | None = None
