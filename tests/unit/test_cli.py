"""Tests for the ``cloudgraph`` command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from cloudgraph import __version__
from cloudgraph.cli import cli
from cloudgraph.models.analysis import AnalysisResponse, AnalysisStatus

_COMPOSE = """\
services:
  frontend:
    image: nginx:1.25
    depends_on: [api]
  api:
    image: acme/api:1
    environment:
      - DATABASE_URL=postgres://db:5432/app
    depends_on: [db]
  db:
    image: postgres:16
"""

_DEPLOYMENT = """\
apiVersion: apps/v1
kind: Deployment
metadata:
  name: web
spec:
  replicas: 1
  template:
    spec:
      containers:
        - name: web
          image: nginx
"""


@pytest.fixture()
def compose_file(tmp_path: Path) -> Path:
    path = tmp_path / "docker-compose.yml"
    path.write_text(_COMPOSE, encoding="utf-8")
    return path


@pytest.fixture()
def manifest_file(tmp_path: Path) -> Path:
    path = tmp_path / "web.yaml"
    path.write_text(_DEPLOYMENT, encoding="utf-8")
    return path


def _run(*args: str):
    return CliRunner().invoke(cli, list(args))


class TestAnalyzeCommand:
    def test_json_output(self, compose_file: Path) -> None:
        result = _run("analyze", str(compose_file), "-o", "json")
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["status"] == "completed"
        assert payload["summary"]["total_resources"] == 3
        assert payload["graph"]["metadata"]["source_files"] == ["docker-compose.yml"]

    def test_no_infer(self, compose_file: Path) -> None:
        result = _run("analyze", str(compose_file), "-o", "json", "--no-infer")
        edges = json.loads(result.stdout)["graph"]["edges"]
        assert [e["type"] for e in edges] == ["startup", "startup"]

    def test_table_output(self, compose_file: Path) -> None:
        result = _run("analyze", str(compose_file))
        assert result.exit_code == 0, result.output
        assert "Resources" in result.stdout
        assert "Dependencies" in result.stdout
        assert "No risks detected" in result.stdout

    def test_table_lists_risks(self, manifest_file: Path) -> None:
        result = _run("analyze", str(manifest_file))
        assert result.exit_code == 0, result.output
        assert "Risks Found: 3" in result.stdout
        assert "Single Replica Workload" in result.stdout

    def test_summary_output(self, manifest_file: Path) -> None:
        result = _run("analyze", str(manifest_file), "-o", "summary")
        assert result.exit_code == 0, result.output
        assert "Total Resources: 1" in result.stdout
        assert "Deployment: 1" in result.stdout
        assert "[high] Improve High Availability" in result.stdout
        assert "[high] Add Health Checks" in result.stdout

    def test_mermaid_flag(self, compose_file: Path) -> None:
        result = _run("analyze", str(compose_file), "-o", "summary", "--mermaid")
        assert "Mermaid Diagram:" in result.stdout
        assert "flowchart TB" in result.stdout

    def test_parse_errors_are_warnings(self, compose_file: Path, tmp_path: Path) -> None:
        broken = tmp_path / "broken.yaml"
        broken.write_text("a: [1, 2\n", encoding="utf-8")
        result = _run("analyze", str(broken), str(compose_file), "-o", "json")
        assert result.exit_code == 0
        assert "warning: YAML parse error" in result.stderr
        assert len(json.loads(result.stdout)["errors"]) == 1

    def test_analysis_failure_exits_non_zero(self, compose_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        failed = AnalysisResponse(id="x", status=AnalysisStatus.ERROR, error="boom")
        monkeypatch.setattr("cloudgraph.cli.main.run_analysis", lambda *_args, **_kwargs: failed)
        result = _run("analyze", str(compose_file))
        assert result.exit_code == 1
        assert "Analysis failed: boom" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        result = _run("analyze", str(tmp_path / "nope.yaml"))
        assert result.exit_code == 2


class TestValidateCommand:
    def test_valid(self, compose_file: Path, manifest_file: Path) -> None:
        result = _run("validate", str(compose_file), str(manifest_file))
        assert result.exit_code == 0, result.output
        assert "Validation Results:" in result.stdout
        assert "All 2 file(s) valid." in result.stdout

    def test_errors_exit_1(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.yaml"
        bad.write_text("apiVersion: apps/v1\nkind: Deployment\nmetadata:\n  name: web\n", encoding="utf-8")
        result = _run("validate", str(bad))
        assert result.exit_code == 1
        assert "Kubernetes Deployment missing required field: spec" in result.stdout
        assert "Validation failed." in result.stdout

    def test_strict_fails_on_warnings(self, tmp_path: Path) -> None:
        warn = tmp_path / "docker-compose.yml"
        warn.write_text("services:\n  api:\n    ports: ['80']\n", encoding="utf-8")
        assert _run("validate", str(warn)).exit_code == 0
        assert _run("validate", "--strict", str(warn)).exit_code == 1


def test_version() -> None:
    result = _run("--version")
    assert result.exit_code == 0
    assert __version__ in result.stdout
