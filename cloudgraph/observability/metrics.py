"""Prometheus metrics for the analysis pipeline."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

analyses_total = Counter(
    "cloudgraph_analyses_total",
    "Analysis runs by final status.",
    ["status"],
)

documents_processed_total = Counter(
    "cloudgraph_documents_processed_total",
    "Decoded documents dispatched to an extractor.",
    ["platform"],
)

extraction_errors_total = Counter(
    "cloudgraph_extraction_errors_total",
    "Per-file decode or extraction errors recorded without aborting a run.",
    ["stage"],
)

dependencies_inferred_total = Counter(
    "cloudgraph_dependencies_inferred_total",
    "Runtime dependencies synthesized from environment patterns.",
    ["pattern"],
)

risks_detected_total = Counter(
    "cloudgraph_risks_detected_total",
    "Risks emitted by the risk engine.",
    ["rule_id"],
)

analysis_duration_seconds = Histogram(
    "cloudgraph_analysis_duration_seconds",
    "Wall-clock duration of one pipeline run.",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)
