"""Risk and recommendation data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class Severity(StrEnum):
    """Risk severity level."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RiskCategory(StrEnum):
    """Categories emitted by the built-in risk rules."""

    AVAILABILITY = "Availability"
    RELIABILITY = "Reliability"
    RESOURCE_MANAGEMENT = "Resource Management"
    CLEANUP = "Cleanup"


@dataclass(frozen=True)
class Risk:
    """A single finding produced by a risk rule."""

    id: str
    rule_id: str
    severity: Severity
    category: str
    title: str
    description: str
    affected_resources: list[str] = field(default_factory=list)
    recommendation: str = ""


@dataclass(frozen=True)
class Recommendation:
    """Higher-level advice aggregated from risks of one category."""

    id: str
    priority: str  # "high" | "medium" | "low"
    category: str
    title: str
    description: str
    affected_resources: list[str] = field(default_factory=list)
