"""Property-based fuzz tests for the CloudGraph REST API.

Uses hypothesis to generate randomised inputs for the JSON endpoints
(/health, /analyze, /validate) and validates that:
 1. Malformed request bodies are rejected with 400, never 500
 2. Arbitrary file content never surfaces as INTERNAL_ERROR
 3. Response body is always valid JSON
 4. Error responses always have ``error`` + ``detail``
 5. Content-Type is always ``application/json``
"""

from __future__ import annotations

from fastapi.testclient import TestClient
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from cloudgraph.analysis.pipeline import AnalysisPipeline
from cloudgraph.api.app import create_app

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

_CLIENT = TestClient(create_app(pipeline=AnalysisPipeline()), raise_server_exceptions=False)


def _make_app() -> TestClient:
    return _CLIENT


# ---------------------------------------------------------------------------
# Hypothesis strategies
# ---------------------------------------------------------------------------

# Printable text without surrogates (JSON-safe)
_json_safe_text = st.text(
    alphabet=st.characters(codec="utf-8", exclude_categories=("Cs",)),
    min_size=1,
    max_size=500,
)

_file_name = st.from_regex(r"[a-z][a-z0-9\-]{0,20}\.ya?ml", fullmatch=True)

# YAML-ish text assembled from fragments that exercise both dialects
_yaml_fragment = st.sampled_from(
    [
        "services:\n",
        "  api:\n",
        "    image: postgres\n",
        "    depends_on: [db]\n",
        "    ports: ['8080:80', 5432]\n",
        "    environment: [REDIS_URL=redis://cache]\n",
        "    volumes: ['./data:/data:ro', 'pgdata:/var/lib']\n",
        "networks: [a, b]\n",
        "volumes: 3\n",
        "---\n",
        "apiVersion: v1\n",
        "kind: Service\n",
        "kind: Deployment\n",
        "metadata:\n",
        "  name: web\n",
        "  labels: {app: web}\n",
        "spec:\n",
        "  selector: [app]\n",
        "  selector: {app: web}\n",
        "  replicas: one\n",
        "  template: {spec: {containers: {}}}\n",
        "  template: {spec: {containers: [{name: c, env: 5}]}}\n",
        "  rules: [{http: {paths: [{backend: 7}]}}]\n",
        "- item\n",
        ": broken\n",
        "[unclosed\n",
    ]
)
_yaml_like_text = st.lists(_yaml_fragment, min_size=1, max_size=12).map("".join)


# ---------------------------------------------------------------------------
# Shared assertion helpers
# ---------------------------------------------------------------------------


def _assert_valid_json_response(resp, allowed_status_codes: set[int] | None = None):
    """Assert universal invariants on every API response."""
    assert resp.headers.get("content-type", "").startswith("application/json"), (
        f"Expected application/json, got {resp.headers.get('content-type')}"
    )
    body = resp.json()
    assert isinstance(body, dict)

    if allowed_status_codes is not None:
        assert resp.status_code in allowed_status_codes, f"Unexpected status {resp.status_code}, body={body}"

    if resp.status_code >= 400:
        assert "error" in body, f"Error response missing 'error': {body}"
        assert "detail" in body, f"Error response missing 'detail': {body}"
        assert body["error"] != "INTERNAL_ERROR", f"Unhandled exception leaked: {body}"


# ===========================================================================
# A. POST /analyze -- file content fuzzing
# ===========================================================================


class TestAnalyzeContentFuzz:
    """Fuzz the ``content`` of submitted files."""

    @given(content=_json_safe_text)
    @settings(max_examples=50, suppress_health_check=[HealthCheck.too_slow])
    def test_random_text_never_crashes(self, content: str) -> None:
        resp = _make_app().post("/api/v1/analyze", json={"files": [{"name": "f.yaml", "content": content}]})
        _assert_valid_json_response(resp, allowed_status_codes={200, 500})

    @given(content=_yaml_like_text)
    @settings(max_examples=100, suppress_health_check=[HealthCheck.too_slow])
    def test_yaml_like_text_always_completes(self, content: str) -> None:
        resp = _make_app().post("/api/v1/analyze", json={"files": [{"name": "f.yaml", "content": content}]})
        _assert_valid_json_response(resp, allowed_status_codes={200})
        assert resp.json()["status"] == "completed"

    @given(names=st.lists(_file_name, min_size=1, max_size=5), content=_yaml_like_text)
    @settings(max_examples=30, suppress_health_check=[HealthCheck.too_slow])
    def test_many_files(self, names: list[str], content: str) -> None:
        files = [{"name": n, "content": content} for n in names]
        resp = _make_app().post("/api/v1/analyze", json={"files": files})
        _assert_valid_json_response(resp, allowed_status_codes={200})
        assert resp.json()["result"]["graph"]["metadata"]["source_files"] == names


# ===========================================================================
# B. POST /analyze -- body fuzzing
# ===========================================================================


class TestAnalyzeBodyFuzz:
    """Fuzz the request body structure of POST /analyze."""

    def test_missing_files_field_returns_400(self) -> None:
        resp = _make_app().post("/api/v1/analyze", json={})
        _assert_valid_json_response(resp, allowed_status_codes={400})

    @given(
        extra=st.dictionaries(
            st.text(min_size=1, max_size=20).filter(lambda k: k not in ("files", "options")),
            st.text(max_size=50),
            max_size=5,
        )
    )
    @settings(max_examples=30)
    def test_extra_fields_ignored(self, extra: dict) -> None:
        body = {**extra, "files": [{"name": "a.yaml", "content": "services: {web: {image: nginx}}"}]}
        resp = _make_app().post("/api/v1/analyze", json=body)
        _assert_valid_json_response(resp, allowed_status_codes={200})

    @given(
        options=st.dictionaries(
            st.sampled_from(["inferDependencies", "includeRaw", "infer_dependencies", "include_raw"]),
            st.one_of(st.booleans(), st.none()),
        )
    )
    @settings(max_examples=30)
    def test_option_combinations_accepted(self, options: dict) -> None:
        body = {"files": [{"name": "a.yaml", "content": "services: {web: {image: nginx}}"}], "options": options}
        resp = _make_app().post("/api/v1/analyze", json=body)
        _assert_valid_json_response(resp, allowed_status_codes={200})

    @given(files=st.one_of(st.text(max_size=20), st.integers(), st.lists(st.integers(), min_size=1, max_size=3)))
    @settings(max_examples=30)
    def test_malformed_files_return_400(self, files: object) -> None:
        resp = _make_app().post("/api/v1/analyze", json={"files": files})
        _assert_valid_json_response(resp, allowed_status_codes={400})

    def test_non_json_content_type_returns_error(self) -> None:
        resp = _make_app().post(
            "/api/v1/analyze",
            content=b"files=a.yaml",
            headers={"content-type": "application/x-www-form-urlencoded"},
        )
        _assert_valid_json_response(resp, allowed_status_codes={400})

    @given(body=st.sampled_from(["null", "[]", "42", '"string"', "true"]))
    @settings(max_examples=10)
    def test_non_object_json_returns_400(self, body: str) -> None:
        resp = _make_app().post(
            "/api/v1/analyze",
            content=body.encode(),
            headers={"content-type": "application/json"},
        )
        _assert_valid_json_response(resp, allowed_status_codes={400})


# ===========================================================================
# C. POST /validate
# ===========================================================================


class TestValidateFuzz:
    @given(content=st.one_of(_json_safe_text, _yaml_like_text))
    @settings(max_examples=50, suppress_health_check=[HealthCheck.too_slow])
    def test_validate_always_answers(self, content: str) -> None:
        resp = _make_app().post("/api/v1/validate", json={"files": [{"name": "f.yaml", "content": content}]})
        _assert_valid_json_response(resp, allowed_status_codes={200})
        body = resp.json()
        assert body["valid"] is (not body["errors"])


# ===========================================================================
# D. GET /health -- robustness
# ===========================================================================


class TestHealthFuzz:
    @given(
        params=st.dictionaries(
            st.text(min_size=1, max_size=20),
            st.text(max_size=50),
            max_size=5,
        )
    )
    @settings(max_examples=30)
    def test_random_query_params_always_200(self, params: dict) -> None:
        resp = _make_app().get("/api/v1/health", params=params)
        _assert_valid_json_response(resp, allowed_status_codes={200})
        assert resp.json()["status"] == "healthy"
