"""R03 Missing Resource Limits -- Resource Management rule.

Only cluster workloads are checked; compose deploy limits are optional in
most setups.
"""

from __future__ import annotations

from collections.abc import Sequence

from cloudgraph.models.resources import Dependency, Platform, Resource, ResourceKind
from cloudgraph.models.risks import Risk, RiskCategory, Severity
from cloudgraph.rules.base import RiskRule

_LONG_RUNNING_KINDS = frozenset({ResourceKind.DEPLOYMENT, ResourceKind.STATEFUL_SET, ResourceKind.DAEMON_SET})


def _has_limits(resource: Resource) -> bool:
    limits = resource.metadata.resources
    return limits is not None and bool(limits.limits)


class MissingResourceLimitsRule(RiskRule):
    """Cluster workloads whose primary container declares no limits."""

    rule_id = "R03_missing_resource_limits"
    title = "Missing Resource Limits"
    severity = Severity.MEDIUM
    category = RiskCategory.RESOURCE_MANAGEMENT
    recommendation = "Define resource limits to prevent resource exhaustion."

    def evaluate(self, resources: Sequence[Resource], dependencies: Sequence[Dependency]) -> list[Risk]:
        return [
            self.make_risk(r, f'{r.kind} "{r.name}" has no CPU/memory limits defined.')
            for r in resources
            if r.platform == Platform.CLUSTER and r.kind in _LONG_RUNNING_KINDS and not _has_limits(r)
        ]
