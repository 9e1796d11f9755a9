"""R04 Orphaned Resource -- Cleanup rule.

A ConfigMap, Secret or PersistentVolumeClaim that no dependency points at
is probably left over. Run after selector resolution so only concrete
targets count.
"""

from __future__ import annotations

from collections.abc import Sequence

from cloudgraph.models.resources import Dependency, Resource, ResourceKind
from cloudgraph.models.risks import Risk, RiskCategory, Severity
from cloudgraph.rules.base import RiskRule

_REFERENCE_ONLY_KINDS = frozenset(
    {ResourceKind.CONFIG_MAP, ResourceKind.SECRET, ResourceKind.PERSISTENT_VOLUME_CLAIM}
)


class OrphanedResourceRule(RiskRule):
    """Configuration and storage objects never referenced by anything."""

    rule_id = "R04_orphaned_resource"
    title = "Potentially Orphaned Resource"
    severity = Severity.LOW
    category = RiskCategory.CLEANUP
    recommendation = "Verify if this resource is still needed or can be removed."

    def evaluate(self, resources: Sequence[Resource], dependencies: Sequence[Dependency]) -> list[Risk]:
        referenced = {d.target_id for d in dependencies if d.target_id is not None}
        return [
            self.make_risk(r, f'{r.kind} "{r.name}" is not referenced by any workload.')
            for r in resources
            if r.kind in _REFERENCE_ONLY_KINDS and r.id not in referenced
        ]
