"""Structural validation of submitted files.

Checks YAML syntax and the handful of fields each dialect needs to be
analysed. It is deliberately shallow: nothing here validates against the
upstream compose or cluster schemas.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import yaml

from cloudgraph.extractors import detect_platform
from cloudgraph.ingest.decoder import split_documents, yaml_error_line
from cloudgraph.models.documents import FileInput
from cloudgraph.models.resources import WORKLOAD_KINDS, Platform

_SUPPORTED_COMPOSE_VERSIONS = ("2", "3")

_NEEDS_SPEC_KINDS = WORKLOAD_KINDS | {"Pod"}


@dataclass(frozen=True)
class ValidationIssue:
    file: str
    message: str
    line: int | None = None


@dataclass
class ValidationReport:
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def error(self, file: str, message: str, line: int | None = None) -> None:
        self.errors.append(ValidationIssue(file, message, line))

    def warn(self, file: str, message: str) -> None:
        self.warnings.append(ValidationIssue(file, message))


def _validate_compose(file_name: str, doc: dict[str, object], report: ValidationReport) -> None:
    if not doc.get("services") and not doc.get("version"):
        report.warn(file_name, "Docker Compose file has no services defined")

    version = doc.get("version")
    if version and not str(version).startswith(_SUPPORTED_COMPOSE_VERSIONS):
        report.warn(
            file_name,
            f'Docker Compose version "{version}" may not be fully supported. '
            "Versions 2.x and 3.x are recommended.",
        )

    services = doc.get("services")
    if not isinstance(services, dict):
        if services is not None:
            report.error(file_name, "services must be a mapping")
        return
    for name, service in services.items():
        if not isinstance(service, dict):
            report.error(file_name, f'Service "{name}" has invalid configuration')
            continue
        if not service.get("image") and not service.get("build"):
            report.warn(file_name, f'Service "{name}" has no image or build context specified')


def _validate_manifest(file_name: str, doc: dict[str, object], report: ValidationReport) -> None:
    if not doc.get("apiVersion"):
        report.error(file_name, "Kubernetes manifest missing required field: apiVersion")
    if not doc.get("kind"):
        report.error(file_name, "Kubernetes manifest missing required field: kind")

    metadata = doc.get("metadata")
    if not metadata:
        report.warn(file_name, "Kubernetes manifest has no metadata section")
    elif not isinstance(metadata, dict) or not metadata.get("name"):
        report.error(file_name, "Kubernetes manifest metadata missing required field: name")

    kind = doc.get("kind")
    if kind in _NEEDS_SPEC_KINDS and not doc.get("spec"):
        report.error(file_name, f"Kubernetes {kind} missing required field: spec")


def validate_file(file: FileInput, report: ValidationReport) -> None:
    chunks = split_documents(file.content)
    if not chunks:
        report.warn(file.name, "File is empty or contains no valid YAML documents")
        return

    # A syntax error anywhere fails the whole file before any structural check.
    docs: list[object] = []
    for chunk in chunks:
        try:
            docs.append(yaml.safe_load(chunk.text))
        except yaml.YAMLError as exc:
            report.error(file.name, f"YAML syntax error: {exc}", yaml_error_line(exc, chunk.start_line))
            return

    for position, doc in enumerate(docs, start=1):
        if doc is None:
            report.warn(file.name, f"Document {position} is empty")
            continue
        if not isinstance(doc, dict):
            report.error(file.name, f"Document {position} is not a mapping")
            continue
        if detect_platform(doc) is Platform.COMPOSE:
            _validate_compose(file.name, doc, report)
        else:
            _validate_manifest(file.name, doc, report)


def validate_files(files: Iterable[FileInput]) -> ValidationReport:
    report = ValidationReport()
    for file in files:
        validate_file(file, report)
    return report
