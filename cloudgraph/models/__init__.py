"""Core data structures for CloudGraph."""

from cloudgraph.models.analysis import (
    AnalysisOptions,
    AnalysisResponse,
    AnalysisResult,
    AnalysisStatus,
    ArchitecturalAnalysis,
    Diagrams,
    ExternalDependency,
    LogicalGroup,
    ResourceSummary,
)
from cloudgraph.models.config import CloudGraphConfig
from cloudgraph.models.documents import DecodedFile, FileInput, SourceDocument
from cloudgraph.models.graph import DependencyGraph, GraphEdge, GraphMetadata, GraphNode
from cloudgraph.models.resources import (
    Confidence,
    Dependency,
    DependencyType,
    EnvVar,
    HealthCheck,
    Platform,
    PortMapping,
    ResolvedTarget,
    Resource,
    ResourceKind,
    ResourceLimits,
    ResourceMetadata,
    SelectorTarget,
    Tier,
    VolumeMount,
)
from cloudgraph.models.risks import Recommendation, Risk, RiskCategory, Severity

__all__ = [
    "AnalysisOptions",
    "AnalysisResponse",
    "AnalysisResult",
    "AnalysisStatus",
    "ArchitecturalAnalysis",
    "CloudGraphConfig",
    "Confidence",
    "DecodedFile",
    "Dependency",
    "DependencyGraph",
    "DependencyType",
    "Diagrams",
    "EnvVar",
    "ExternalDependency",
    "FileInput",
    "GraphEdge",
    "GraphMetadata",
    "GraphNode",
    "HealthCheck",
    "LogicalGroup",
    "Platform",
    "PortMapping",
    "Recommendation",
    "ResolvedTarget",
    "Resource",
    "ResourceKind",
    "ResourceLimits",
    "ResourceMetadata",
    "ResourceSummary",
    "Risk",
    "RiskCategory",
    "SelectorTarget",
    "Severity",
    "SourceDocument",
    "Tier",
    "VolumeMount",
]
