"""Tests for Mermaid diagram generation."""

from __future__ import annotations

from cloudgraph.analysis.diagrams import (
    container_view,
    generate_diagrams,
    infrastructure_view,
    sanitize_id,
    service_view,
)
from cloudgraph.models.resources import (
    Confidence,
    Dependency,
    DependencyType,
    Platform,
    ResolvedTarget,
    Resource,
    ResourceKind,
    ResourceMetadata,
    SelectorTarget,
)


def _make_resource(resource_id: str, name: str, kind: str, image: str | None = None) -> Resource:
    return Resource(
        id=resource_id,
        name=name,
        kind=kind,
        platform=Platform.COMPOSE,
        source_file="f.yml",
        metadata=ResourceMetadata(image=image),
    )


def _make_dep(source: str, target: str, dep_type: DependencyType, inferred: bool = False) -> Dependency:
    return Dependency(
        id=f"{source}->{target}",
        source=source,
        target=ResolvedTarget(target),
        type=dep_type,
        is_inferred=inferred,
        confidence=Confidence.MEDIUM if inferred else Confidence.HIGH,
    )


_FRONTEND = _make_resource("dc-container-frontend", "frontend", ResourceKind.CONTAINER, "nginx:1.25")
_API = _make_resource("dc-container-api", "api", ResourceKind.CONTAINER, "registry.io/acme/api:1")
_DB = _make_resource("dc-container-db", "db", ResourceKind.CONTAINER, "postgres:16")
_NET = _make_resource("dc-network-backend", "backend", ResourceKind.NETWORK)


class TestSanitizeId:
    def test_replaces_unsafe_characters(self) -> None:
        assert sanitize_id("k8s-service-default-api.v1") == "k8s_service_default_api_v1"

    def test_keeps_safe_characters(self) -> None:
        assert sanitize_id("Abc_123") == "Abc_123"

    def test_collisions_are_possible(self) -> None:
        assert sanitize_id("a-b") == sanitize_id("a.b")


class TestContainerView:
    def test_exact_output(self) -> None:
        deps = [
            _make_dep(_FRONTEND.id, _API.id, DependencyType.STARTUP),
            _make_dep(_API.id, _DB.id, DependencyType.RUNTIME, inferred=True),
            _make_dep(_API.id, _NET.id, DependencyType.NETWORK),
        ]
        assert container_view([_FRONTEND, _API, _DB, _NET], deps) == (
            "flowchart TB\n"
            '  dc_container_frontend["frontend<br/>nginx:1.25"]\n'
            '  dc_container_api["api<br/>api:1"]\n'
            '  dc_container_db["db<br/>postgres:16"]\n'
            "  dc_container_frontend -->|startup| dc_container_api\n"
            "  dc_container_api -.->|runtime| dc_container_db\n"
        )

    def test_label_without_image(self) -> None:
        worker = _make_resource("w", "worker", ResourceKind.DEPLOYMENT)
        assert '  w["worker"]' in container_view([worker], [])

    def test_quotes_escaped(self) -> None:
        odd = _make_resource("odd", 'say "hi"', ResourceKind.CONTAINER)
        assert "#quot;hi#quot;" in container_view([odd], [])


class TestServiceView:
    def test_always_has_external_entry(self) -> None:
        view = service_view([], [])
        assert view.startswith("flowchart LR\n  subgraph External\n    Internet((Internet))\n  end\n")
        assert "subgraph Ingress" not in view
        assert "subgraph Services" not in view
        assert "subgraph Workloads" not in view

    def test_routing_then_selector_edges(self) -> None:
        ingress = _make_resource("ing", "edge", ResourceKind.INGRESS)
        service = _make_resource("svc", "api", ResourceKind.SERVICE)
        deployment = _make_resource("dep", "api", ResourceKind.DEPLOYMENT)
        deps = [
            _make_dep("svc", "dep", DependencyType.SELECTOR),
            _make_dep("ing", "svc", DependencyType.ROUTING),
            _make_dep("dep", "cfg", DependencyType.CONFIG),
        ]
        view = service_view([ingress, service, deployment], deps)
        assert "  subgraph Ingress\n" in view
        assert "  subgraph Services\n" in view
        assert "  subgraph Workloads\n" in view
        routing = view.index("ing -->|routing| svc")
        selector = view.index("svc -->|selector| dep")
        assert routing < selector
        assert "config" not in view

    def test_pending_selector_not_drawn(self) -> None:
        pending = Dependency(
            id="p",
            source="svc",
            target=SelectorTarget({"app": "api"}),
            type=DependencyType.SELECTOR,
        )
        assert "-->" not in service_view([], [pending])


class TestInfrastructureView:
    def test_groups_and_edges(self) -> None:
        config = _make_resource("cfg", "app-config", ResourceKind.CONFIG_MAP)
        deps = [
            _make_dep(_FRONTEND.id, _API.id, DependencyType.STARTUP),
            _make_dep(_API.id, config.id, DependencyType.CONFIG),
            _make_dep("svc", _API.id, DependencyType.SELECTOR),
        ]
        view = infrastructure_view([_FRONTEND, _API, _DB, config], deps)
        assert view.startswith("flowchart TB\n")
        assert view.index("subgraph Frontend") < view.index("subgraph Backend") < view.index("subgraph Data")
        assert '  cfg["app-config"]\n' in view
        assert "dc_container_frontend -->|startup| dc_container_api" in view
        assert "dc_container_api -->|config| cfg" in view
        assert "selector" not in view

    def test_empty_tiers_omitted(self) -> None:
        view = infrastructure_view([_API], [])
        assert "subgraph Backend" in view
        assert "subgraph Frontend" not in view
        assert "subgraph Data" not in view


def test_generate_diagrams_returns_three_views() -> None:
    diagrams = generate_diagrams([_FRONTEND, _API], [])
    assert diagrams.container_view.startswith("flowchart TB")
    assert diagrams.service_view.startswith("flowchart LR")
    assert diagrams.infrastructure_view.startswith("flowchart TB")
