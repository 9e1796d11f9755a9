"""Data structures for the resource dependency graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from cloudgraph.models.resources import Confidence, DependencyType, Platform


@dataclass(frozen=True)
class GraphNode:
    """A node in the dependency graph; one per Resource."""

    id: str
    label: str
    type: str
    platform: Platform
    group: str
    namespace: str | None = None
    properties: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class GraphEdge:
    """A typed edge between two nodes; one per resolved Dependency."""

    id: str
    source: str
    target: str
    type: DependencyType
    is_inferred: bool
    confidence: Confidence
    label: str = ""


@dataclass
class GraphMetadata:
    """Aggregate information about a built graph."""

    total_nodes: int = 0
    total_edges: int = 0
    platforms: list[Platform] = field(default_factory=list)
    generated_at: str = field(default_factory=lambda: datetime.now(tz=UTC).isoformat())
    source_files: list[str] = field(default_factory=list)


@dataclass
class DependencyGraph:
    """Node/edge projection of an analysis run."""

    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)
    metadata: GraphMetadata = field(default_factory=GraphMetadata)

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    def node(self, node_id: str) -> GraphNode | None:
        """Return the node with *node_id*, or None."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def edges_from(self, node_id: str) -> list[GraphEdge]:
        return [e for e in self.edges if e.source == node_id]
