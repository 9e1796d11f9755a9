"""R01 Single Replica -- Availability rule.

Flags Deployments and StatefulSets running exactly one replica.
"""

from __future__ import annotations

from collections.abc import Sequence

from cloudgraph.models.resources import Dependency, Resource, ResourceKind
from cloudgraph.models.risks import Risk, RiskCategory, Severity
from cloudgraph.rules.base import RiskRule

_REPLICATED_KINDS = frozenset({ResourceKind.DEPLOYMENT, ResourceKind.STATEFUL_SET})


class SingleReplicaRule(RiskRule):
    """A replicated workload with one replica is a single point of failure."""

    rule_id = "R01_single_replica"
    title = "Single Replica Workload"
    severity = Severity.MEDIUM
    category = RiskCategory.AVAILABILITY
    recommendation = "Consider increasing replicas to at least 2 for high availability."

    def evaluate(self, resources: Sequence[Resource], dependencies: Sequence[Dependency]) -> list[Risk]:
        return [
            self.make_risk(
                r,
                f'{r.kind} "{r.name}" has only 1 replica, creating a single point of failure.',
            )
            for r in resources
            if r.kind in _REPLICATED_KINDS and r.metadata.replicas == 1
        ]
