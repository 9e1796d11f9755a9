"""Mermaid flowchart rendering.

Three independent views over the same resources and dependencies:

* container view -- compute resources and the edges between them;
* service view   -- entry point, ingresses, services and workloads, with
  routing and selector edges only;
* infrastructure view -- resources grouped by tier, every resolved edge
  except selector bindings.

Explicit edges are drawn solid (``-->``), inferred ones dashed (``-.->``),
and every edge is labelled with its dependency type.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from cloudgraph.analysis.categorizer import categorize
from cloudgraph.models.analysis import Diagrams
from cloudgraph.models.resources import (
    COMPUTE_KINDS,
    Dependency,
    DependencyType,
    Resource,
    ResourceKind,
    Tier,
)

_RE_UNSAFE_ID = re.compile(r"[^A-Za-z0-9_]")

_INDENT = "  "

# Tier subgraphs in the infrastructure view; infra nodes stay ungrouped.
_TIER_SUBGRAPHS: tuple[tuple[Tier, str], ...] = (
    (Tier.FRONTEND, "Frontend"),
    (Tier.BACKEND, "Backend"),
    (Tier.DATA, "Data"),
)


def sanitize_id(resource_id: str) -> str:
    """Map *resource_id* onto the ``[A-Za-z0-9_]`` alphabet Mermaid accepts.

    Distinct ids may collide after sanitizing.
    """
    return _RE_UNSAFE_ID.sub("_", resource_id)


def _label(text: str) -> str:
    return text.replace('"', "#quot;")


def _node_line(resource: Resource, label: str | None = None, depth: int = 1) -> str:
    return f'{_INDENT * depth}{sanitize_id(resource.id)}["{_label(label or resource.name)}"]'


def _edge_line(dep: Dependency, target_id: str) -> str:
    arrow = "-.->" if dep.is_inferred else "-->"
    return f"{_INDENT}{sanitize_id(dep.source)} {arrow}|{dep.type}| {sanitize_id(target_id)}"


def _subgraph(title: str, resources: Sequence[Resource]) -> list[str]:
    lines = [f"{_INDENT}subgraph {title}"]
    lines.extend(_node_line(r, depth=2) for r in resources)
    lines.append(f"{_INDENT}end")
    lines.append("")
    return lines


def _render(lines: list[str]) -> str:
    return "\n".join(lines) + "\n"


def container_view(resources: Sequence[Resource], dependencies: Sequence[Dependency]) -> str:
    compute = [r for r in resources if r.kind in COMPUTE_KINDS]
    compute_ids = {r.id for r in compute}

    lines = ["flowchart TB"]
    for resource in compute:
        image = resource.metadata.image
        label = f"{resource.name}<br/>{image.split('/')[-1]}" if image else resource.name
        lines.append(_node_line(resource, label))
    for dep in dependencies:
        target_id = dep.target_id
        if target_id is not None and dep.source in compute_ids and target_id in compute_ids:
            lines.append(_edge_line(dep, target_id))
    return _render(lines)


def service_view(resources: Sequence[Resource], dependencies: Sequence[Dependency]) -> str:
    ingresses = [r for r in resources if r.kind == ResourceKind.INGRESS]
    services = [r for r in resources if r.kind == ResourceKind.SERVICE]
    workloads = [r for r in resources if r.kind in COMPUTE_KINDS]

    lines = [
        "flowchart LR",
        f"{_INDENT}subgraph External",
        f"{_INDENT * 2}Internet((Internet))",
        f"{_INDENT}end",
        "",
    ]
    for title, members in (("Ingress", ingresses), ("Services", services), ("Workloads", workloads)):
        if members:
            lines.extend(_subgraph(title, members))

    for dep_type in (DependencyType.ROUTING, DependencyType.SELECTOR):
        for dep in dependencies:
            target_id = dep.target_id
            if dep.type == dep_type and target_id is not None:
                lines.append(_edge_line(dep, target_id))
    return _render(lines)


def infrastructure_view(resources: Sequence[Resource], dependencies: Sequence[Dependency]) -> str:
    tiers: dict[Tier, list[Resource]] = {tier: [] for tier in Tier}
    for resource in resources:
        tiers[categorize(resource)].append(resource)

    lines = ["flowchart TB"]
    for tier, title in _TIER_SUBGRAPHS:
        if tiers[tier]:
            lines.extend(_subgraph(title, tiers[tier]))
    lines.extend(_node_line(r) for r in tiers[Tier.INFRA])

    for dep in dependencies:
        target_id = dep.target_id
        if target_id is not None and dep.type != DependencyType.SELECTOR:
            lines.append(_edge_line(dep, target_id))
    return _render(lines)


def generate_diagrams(resources: Sequence[Resource], dependencies: Sequence[Dependency]) -> Diagrams:
    return Diagrams(
        container_view=container_view(resources, dependencies),
        service_view=service_view(resources, dependencies),
        infrastructure_view=infrastructure_view(resources, dependencies),
    )
