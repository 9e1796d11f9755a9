"""R02 Missing Health Check -- Reliability rule."""

from __future__ import annotations

from collections.abc import Sequence

from cloudgraph.models.resources import Dependency, Resource, ResourceKind
from cloudgraph.models.risks import Risk, RiskCategory, Severity
from cloudgraph.rules.base import RiskRule

_LONG_RUNNING_KINDS = frozenset({ResourceKind.DEPLOYMENT, ResourceKind.STATEFUL_SET, ResourceKind.DAEMON_SET})


class MissingHealthCheckRule(RiskRule):
    """Long-running workloads without a liveness or readiness probe."""

    rule_id = "R02_missing_health_check"
    title = "Missing Health Checks"
    severity = Severity.MEDIUM
    category = RiskCategory.RELIABILITY
    recommendation = "Add liveness and readiness probes for better failure detection."

    def evaluate(self, resources: Sequence[Resource], dependencies: Sequence[Dependency]) -> list[Risk]:
        return [
            self.make_risk(r, f'{r.kind} "{r.name}" has no liveness or readiness probes configured.')
            for r in resources
            if r.kind in _LONG_RUNNING_KINDS and r.metadata.health_check is None
        ]
