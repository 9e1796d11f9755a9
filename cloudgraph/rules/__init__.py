"""Risk detection rules.

Exposes:
    build_risk_engine -- RiskEngine loaded with the built-in rules, in order.
"""

from __future__ import annotations

from cloudgraph.rules.base import RiskEngine, RiskRule
from cloudgraph.rules.r01_single_replica import SingleReplicaRule
from cloudgraph.rules.r02_missing_health_check import MissingHealthCheckRule
from cloudgraph.rules.r03_missing_resource_limits import MissingResourceLimitsRule
from cloudgraph.rules.r04_orphaned_resource import OrphanedResourceRule


def build_risk_engine() -> RiskEngine:
    return RiskEngine(
        [
            SingleReplicaRule(),
            MissingHealthCheckRule(),
            MissingResourceLimitsRule(),
            OrphanedResourceRule(),
        ]
    )


__all__ = [
    "MissingHealthCheckRule",
    "MissingResourceLimitsRule",
    "OrphanedResourceRule",
    "RiskEngine",
    "RiskRule",
    "SingleReplicaRule",
    "build_risk_engine",
]
