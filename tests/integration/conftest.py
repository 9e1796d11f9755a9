"""Shared fixtures for CloudGraph integration tests.

Provides realistic compose and cluster inputs plus a pipeline wired with
the built-in rule set, so tests can exercise full runs end to end.
"""

from __future__ import annotations

import pytest

from cloudgraph.analysis.pipeline import AnalysisPipeline
from cloudgraph.ingest import decode_file
from cloudgraph.models.analysis import AnalysisOptions
from cloudgraph.models.documents import DecodedFile, FileInput

# ---------------------------------------------------------------------------
# Sample inputs
# ---------------------------------------------------------------------------

COMPOSE_STACK = """\
version: "3.8"
services:
  frontend:
    image: nginx:1.25
    ports: ["80:80"]
    depends_on: [api]
  api:
    image: acme/api:1
    environment:
      DATABASE_URL: postgres://db:5432/app
    depends_on: [db]
  db:
    image: postgres:16
"""

CLUSTER_STACK = """\
apiVersion: apps/v1
kind: Deployment
metadata:
  name: web
  namespace: shop
  labels:
    app: web
spec:
  replicas: 1
  selector:
    matchLabels:
      app: web
  template:
    metadata:
      labels:
        app: web
    spec:
      containers:
        - name: web
          image: acme/web:2
          resources:
            limits:
              cpu: 500m
              memory: 256Mi
---
apiVersion: v1
kind: Service
metadata:
  name: web
  namespace: shop
spec:
  selector:
    app: web
  ports:
    - port: 80
      targetPort: 8080
"""

CONFIG_STACK = """\
apiVersion: v1
kind: ConfigMap
metadata:
  name: settings
---
apiVersion: v1
kind: ConfigMap
metadata:
  name: unused
---
apiVersion: apps/v1
kind: Deployment
metadata:
  name: worker
spec:
  replicas: 2
  template:
    spec:
      containers:
        - name: worker
          image: acme/worker:1
          envFrom:
            - configMapRef:
                name: settings
          livenessProbe:
            httpGet:
              path: /healthz
              port: 8080
          resources:
            limits:
              cpu: "1"
"""


# ---------------------------------------------------------------------------
# Factory helpers
# ---------------------------------------------------------------------------


def make_file(name: str, content: str) -> DecodedFile:
    """Decode *content* as if it had been submitted under *name*."""
    return decode_file(FileInput(name=name, content=content))


def make_options(infer: bool = True, include_raw: bool = False) -> AnalysisOptions:
    return AnalysisOptions(infer_dependencies=infer, include_raw=include_raw)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def pipeline() -> AnalysisPipeline:
    return AnalysisPipeline()


@pytest.fixture()
def compose_file() -> DecodedFile:
    return make_file("docker-compose.yml", COMPOSE_STACK)


@pytest.fixture()
def cluster_file() -> DecodedFile:
    return make_file("web.yaml", CLUSTER_STACK)


@pytest.fixture()
def config_file() -> DecodedFile:
    return make_file("worker.yaml", CONFIG_STACK)
