"""Implicit dependency inference from environment variables.

Each environment entry is rendered as ``NAME=VALUE`` and tested against an
ordered table of well-known backing-service patterns. A hit links the
resource to the first other resource whose name or image mentions the
pattern's canonical name.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from cloudgraph.models.resources import (
    Confidence,
    Dependency,
    DependencyType,
    ResolvedTarget,
    Resource,
    stable_id,
)
from cloudgraph.observability.logging import get_logger
from cloudgraph.observability.metrics import dependencies_inferred_total

_logger = get_logger("analysis.inference")


@dataclass(frozen=True)
class InferencePattern:
    """A backing-service signature looked for in environment entries."""

    pattern: re.Pattern[str]
    kind: str  # "database" | "cache" | "message-broker" | "search"
    canonical_name: str

    def matches(self, assignment: str) -> bool:
        return self.pattern.search(assignment) is not None


def _pattern(regex: str, kind: str, canonical_name: str) -> InferencePattern:
    return InferencePattern(re.compile(regex, re.IGNORECASE), kind, canonical_name)


INFERENCE_PATTERNS: tuple[InferencePattern, ...] = (
    _pattern(r"postgres|postgresql", "database", "postgres"),
    _pattern(r"mysql|mariadb", "database", "mysql"),
    _pattern(r"mongodb|mongo", "database", "mongo"),
    _pattern(r"redis", "cache", "redis"),
    _pattern(r"rabbitmq|amqp", "message-broker", "rabbitmq"),
    _pattern(r"kafka", "message-broker", "kafka"),
    _pattern(r"elasticsearch", "search", "elasticsearch"),
)


def _find_target(resources: Sequence[Resource], source: Resource, canonical_name: str) -> Resource | None:
    for resource in resources:
        if resource.id == source.id:
            continue
        if canonical_name in resource.name.lower():
            return resource
        image = resource.metadata.image
        if image and canonical_name in image.lower():
            return resource
    return None


def infer_dependencies(
    resources: Sequence[Resource],
    patterns: Sequence[InferencePattern] = INFERENCE_PATTERNS,
) -> list[Dependency]:
    """Return runtime dependencies inferred from every resource's environment.

    Every matching (entry, pattern) pair with a target yields one
    dependency; explicit edges between the same resources are not
    consulted.
    """
    inferred: list[Dependency] = []
    for resource in resources:
        for env in resource.metadata.environment:
            assignment = env.as_assignment()
            for pattern in patterns:
                if not pattern.matches(assignment):
                    continue
                target = _find_target(resources, resource, pattern.canonical_name)
                if target is None:
                    continue
                inferred.append(
                    Dependency(
                        id=stable_id(resource.id, target.id, env.name, pattern.canonical_name, len(inferred)),
                        source=resource.id,
                        target=ResolvedTarget(target.id),
                        type=DependencyType.RUNTIME,
                        is_inferred=True,
                        confidence=Confidence.MEDIUM,
                        reason=f"Inferred from environment variable: {env.name}",
                        metadata={"pattern": pattern.pattern.pattern, "kind": pattern.kind},
                    )
                )
                dependencies_inferred_total.labels(pattern=pattern.canonical_name).inc()

    if inferred:
        _logger.debug("dependencies_inferred", count=len(inferred))
    return inferred
