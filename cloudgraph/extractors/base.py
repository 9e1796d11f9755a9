"""Extractor base class and shared document helpers.

Every extractor turns one decoded document into Resources and raw
Dependencies. Optional fields are read through the tolerant helpers below;
only the structural helpers (``require_mapping``/``require_list``) raise.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from cloudgraph.errors import ExtractionError
from cloudgraph.models.resources import (
    Confidence,
    Dependency,
    DependencyTarget,
    DependencyType,
    Platform,
    Resource,
    stable_id,
)


@dataclass
class ExtractionResult:
    """Resources and dependencies extracted from one document."""

    resources: list[Resource] = field(default_factory=list)
    dependencies: list[Dependency] = field(default_factory=list)

    def add_dependency(
        self,
        source: str,
        target: DependencyTarget,
        dep_type: DependencyType,
        reason: str,
        metadata: dict[str, object] | None = None,
    ) -> Dependency:
        """Append an explicit (high-confidence) dependency and return it."""
        dep = Dependency(
            id=stable_id(source, target.key, dep_type, reason, len(self.dependencies)),
            source=source,
            target=target,
            type=dep_type,
            is_inferred=False,
            confidence=Confidence.HIGH,
            reason=reason,
            metadata=metadata,
        )
        self.dependencies.append(dep)
        return dep


class Extractor(ABC):
    """Abstract base class for platform extractors."""

    platform: Platform

    @abstractmethod
    def extract(self, document: object, source_file: str, raw_text: str | None = None) -> ExtractionResult:
        """Extract resources and dependencies from *document*.

        Raises:
            ExtractionError: the document is structurally invalid.
        """


def require_mapping(value: object, field_path: str, source_file: str) -> dict[str, object]:
    """Return *value* as a mapping; None becomes empty, anything else raises."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ExtractionError(f"{field_path} must be a mapping, got {type(value).__name__}", source_file)
    return value


def require_list(value: object, field_path: str, source_file: str) -> list[object]:
    """Return *value* as a list; None becomes empty, anything else raises."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise ExtractionError(f"{field_path} must be a list, got {type(value).__name__}", source_file)
    return value


def as_mapping(value: object) -> dict[str, object]:
    return value if isinstance(value, dict) else {}


def as_list(value: object) -> list[object]:
    return value if isinstance(value, list) else []


def as_str_map(value: object) -> dict[str, str]:
    """Coerce a label-style mapping to ``dict[str, str]``; non-mappings become empty."""
    if not isinstance(value, dict):
        return {}
    return {str(k): "" if v is None else str(v) for k, v in value.items()}


def as_int(value: object) -> int | None:
    """Parse an integer, returning None for anything unparseable."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def as_str(value: object) -> str | None:
    if value is None:
        return None
    return str(value)


def as_command(value: object) -> list[str] | None:
    """Normalize a string-or-list command to a list of strings."""
    if value is None or value == "":
        return None
    if isinstance(value, list):
        return [str(v) for v in value]
    return [str(value)]
