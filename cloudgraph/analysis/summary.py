"""Resource summary and architectural overview."""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Sequence

from cloudgraph.analysis.categorizer import categorize
from cloudgraph.models.analysis import (
    ArchitecturalAnalysis,
    ExternalDependency,
    LogicalGroup,
    ResourceSummary,
)
from cloudgraph.models.resources import (
    COMPUTE_KINDS,
    Confidence,
    Dependency,
    Resource,
    ResourceKind,
    Tier,
)

_RE_URL_HOST = re.compile(r"https?://([^/\s:]+)")


def build_resource_summary(resources: Sequence[Resource]) -> ResourceSummary:
    return ResourceSummary(
        total_resources=len(resources),
        by_kind=dict(Counter(r.kind for r in resources)),
        by_platform=dict(Counter(str(r.platform) for r in resources)),
        resources=list(resources),
    )


def build_overview(resources: Sequence[Resource], dependencies: Sequence[Dependency]) -> str:
    platforms = list(dict.fromkeys(str(r.platform) for r in resources))
    lines = [
        f"This infrastructure consists of {len(resources)} resources across "
        f"{len(platforms)} platform(s): {', '.join(platforms)}."
    ]

    workloads = sum(1 for r in resources if r.kind in COMPUTE_KINDS)
    services = sum(1 for r in resources if r.kind == ResourceKind.SERVICE)
    ingresses = sum(1 for r in resources if r.kind == ResourceKind.INGRESS)
    if workloads:
        lines.append(f"\n**Workloads:** {workloads} container workloads detected.")
    if services:
        lines.append(f"**Services:** {services} service endpoints configured.")
    if ingresses:
        lines.append(f"**Ingress:** {ingresses} ingress resources for external access.")

    inferred = sum(1 for d in dependencies if d.is_inferred)
    if inferred:
        lines.append(
            f"\n**Note:** {inferred} dependencies were inferred from environment variables and may need verification."
        )
    return "\n".join(lines)


def build_logical_groups(resources: Sequence[Resource]) -> list[LogicalGroup]:
    """Non-empty tiers in frontend, backend, data, infra order."""
    members: dict[Tier, list[str]] = {tier: [] for tier in Tier}
    for resource in resources:
        members[categorize(resource)].append(resource.id)
    return [
        LogicalGroup(name=tier.value.capitalize(), category=tier, resources=ids) for tier, ids in members.items() if ids
    ]


def detect_external_dependencies(resources: Sequence[Resource]) -> list[ExternalDependency]:
    """Hosts of ``http(s)://`` URLs found in environment values, first seen wins."""
    external: dict[str, ExternalDependency] = {}
    for resource in resources:
        for env in resource.metadata.environment:
            match = _RE_URL_HOST.search(env.value or "")
            if match is None or match.group(1) in external:
                continue
            host = match.group(1)
            external[host] = ExternalDependency(
                name=host,
                type="external-api",
                inferred_from=[resource.id],
                confidence=Confidence.MEDIUM,
            )
    return list(external.values())


def build_architectural_analysis(
    resources: Sequence[Resource],
    dependencies: Sequence[Dependency],
) -> ArchitecturalAnalysis:
    return ArchitecturalAnalysis(
        overview=build_overview(resources, dependencies),
        logical_groups=build_logical_groups(resources),
        external_dependencies=detect_external_dependencies(resources),
    )
