"""Tests for the REST API: routing, option resolution and error envelopes."""

from __future__ import annotations

from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from cloudgraph.analysis.pipeline import AnalysisPipeline
from cloudgraph.api.app import create_app
from cloudgraph.errors import SelectorResolutionError
from cloudgraph.models.config import AnalysisConfig, CloudGraphConfig

_COMPOSE = """\
services:
  frontend:
    image: nginx:1.25
    depends_on: [api]
  api:
    image: acme/api:1
    environment:
      DATABASE_URL: postgres://db:5432/app
    depends_on: [db]
  db:
    image: postgres:16
"""


def _make_app(
    pipeline: AnalysisPipeline | MagicMock | None = None,
    config: CloudGraphConfig | None = None,
) -> TestClient:
    app = create_app(pipeline=pipeline, config=config)
    return TestClient(app, raise_server_exceptions=False)


def _analyze_body(content: str = _COMPOSE, **options: object) -> dict:
    body: dict = {"files": [{"name": "docker-compose.yml", "content": content}]}
    if options:
        body["options"] = options
    return body


class TestAnalyzeEndpoint:
    def test_analyze_compose(self) -> None:
        resp = _make_app().post("/api/v1/analyze", json=_analyze_body())
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "completed"
        result = body["result"]
        assert result["id"] == body["id"]
        assert result["summary"]["total_resources"] == 3
        assert len(result["graph"]["nodes"]) == 3
        labels = [(e["source"], e["target"], e["type"]) for e in result["graph"]["edges"]]
        assert ("dc-container-frontend", "dc-container-api", "startup") in labels
        assert ("dc-container-api", "dc-container-db", "runtime") in labels
        assert result["diagrams"]["container_view"].startswith("flowchart TB")
        assert result["errors"] is None

    def test_camel_case_option_disables_inference(self) -> None:
        resp = _make_app().post("/api/v1/analyze", json=_analyze_body(inferDependencies=False))
        assert resp.status_code == 200
        edges = resp.json()["result"]["graph"]["edges"]
        assert all(not e["is_inferred"] for e in edges)

    def test_config_default_applies_when_option_omitted(self) -> None:
        config = CloudGraphConfig(analysis=AnalysisConfig(infer_dependencies=False))
        resp = _make_app(config=config).post("/api/v1/analyze", json=_analyze_body())
        edges = resp.json()["result"]["graph"]["edges"]
        assert [e["type"] for e in edges] == ["startup", "startup"]

    def test_include_raw(self) -> None:
        resp = _make_app().post("/api/v1/analyze", json=_analyze_body(include_raw=True))
        resources = resp.json()["result"]["summary"]["resources"]
        assert all(r["raw_text"] for r in resources)

    def test_file_errors_do_not_fail_request(self) -> None:
        body = {
            "files": [
                {"name": "bad.yaml", "content": "a: [1, 2\n"},
                {"name": "docker-compose.yml", "content": _COMPOSE},
            ]
        }
        resp = _make_app().post("/api/v1/analyze", json=body)
        assert resp.status_code == 200
        errors = resp.json()["result"]["errors"]
        assert len(errors) == 1
        assert errors[0].startswith("YAML parse error:")

    def test_empty_files_rejected(self) -> None:
        resp = _make_app().post("/api/v1/analyze", json={"files": []})
        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "INVALID_REQUEST"
        assert body["detail"].startswith("files")

    def test_empty_content_rejected(self) -> None:
        resp = _make_app().post("/api/v1/analyze", json={"files": [{"name": "a.yaml", "content": ""}]})
        assert resp.status_code == 400
        assert resp.json()["detail"].startswith("files.0.content")

    def test_too_many_files(self) -> None:
        config = CloudGraphConfig(analysis=AnalysisConfig(max_files=1))
        body = {"files": [{"name": f"{i}.yaml", "content": "a: 1"} for i in range(2)]}
        resp = _make_app(config=config).post("/api/v1/analyze", json=body)
        assert resp.status_code == 400
        assert resp.json() == {"error": "INVALID_REQUEST", "detail": "Too many files: 2 (maximum 1)."}

    def test_pipeline_failure_returns_analysis_failed(self) -> None:
        pipeline = MagicMock()
        pipeline.run.side_effect = SelectorResolutionError("selector must be a mapping")
        resp = _make_app(pipeline=pipeline).post("/api/v1/analyze", json=_analyze_body())
        assert resp.status_code == 500
        body = resp.json()
        assert body["error"] == "ANALYSIS_FAILED"
        assert "selector must be a mapping" in body["detail"]


class TestValidateEndpoint:
    def test_valid(self) -> None:
        resp = _make_app().post("/api/v1/validate", json=_analyze_body())
        assert resp.status_code == 200
        assert resp.json() == {"valid": True, "errors": [], "warnings": []}

    def test_invalid(self) -> None:
        body = {"files": [{"name": "bad.yaml", "content": "kind: Deployment\nmetadata:\n  name: web\n"}]}
        resp = _make_app().post("/api/v1/validate", json=body)
        data = resp.json()
        assert data["valid"] is False
        assert {"file": "bad.yaml", "message": "Kubernetes Deployment missing required field: spec", "line": None} in (
            data["errors"]
        )


class TestOperationalEndpoints:
    def test_health(self) -> None:
        from cloudgraph import __version__

        resp = _make_app().get("/api/v1/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["version"] == __version__
        assert body["timestamp"]

    def test_metrics_exposition(self) -> None:
        client = _make_app()
        client.post("/api/v1/analyze", json=_analyze_body())
        resp = client.get("/api/v1/metrics")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")
        assert "cloudgraph_analyses_total" in resp.text

    def test_unknown_route(self) -> None:
        assert _make_app().get("/api/v1/nope").status_code == 404
