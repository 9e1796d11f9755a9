"""Projects resources and resolved dependencies onto a DependencyGraph."""

from __future__ import annotations

from collections.abc import Sequence

from cloudgraph.analysis.categorizer import categorize
from cloudgraph.models.graph import DependencyGraph, GraphEdge, GraphMetadata, GraphNode
from cloudgraph.models.resources import Dependency, Resource


def _node(resource: Resource) -> GraphNode:
    return GraphNode(
        id=resource.id,
        label=resource.name,
        type=resource.kind,
        platform=resource.platform,
        group=categorize(resource),
        namespace=resource.namespace,
        properties={
            "image": resource.metadata.image,
            "replicas": resource.metadata.replicas,
            "ports": list(resource.metadata.ports),
            "source_file": resource.source_file,
        },
    )


def build_graph(
    resources: Sequence[Resource],
    dependencies: Sequence[Dependency],
    source_files: Sequence[str] = (),
) -> DependencyGraph:
    """Return one node per resource and one edge per resolved dependency.

    Dependencies still pointing at a selector are skipped. Nodes are not
    deduplicated: two resources sharing an id produce two nodes.
    """
    nodes = [_node(r) for r in resources]
    edges = [
        GraphEdge(
            id=dep.id,
            source=dep.source,
            target=dep.target_id,
            type=dep.type,
            is_inferred=dep.is_inferred,
            confidence=dep.confidence,
            label=dep.type,
        )
        for dep in dependencies
        if dep.target_id is not None
    ]
    platforms = list(dict.fromkeys(r.platform for r in resources))
    return DependencyGraph(
        nodes=nodes,
        edges=edges,
        metadata=GraphMetadata(
            total_nodes=len(nodes),
            total_edges=len(edges),
            platforms=platforms,
            source_files=list(source_files),
        ),
    )
