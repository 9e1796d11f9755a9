"""Risk rule base class and engine.

Rules are stateless: each one sees the complete resource and dependency
lists of a run and returns every Risk it finds. The engine runs them in
registration order and concatenates their output.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from cloudgraph.models.resources import Dependency, Resource, stable_id
from cloudgraph.models.risks import Risk, Severity
from cloudgraph.observability.logging import get_logger
from cloudgraph.observability.metrics import risks_detected_total

_logger = get_logger("rules.engine")


class RiskRule(ABC):
    """Abstract base class for risk rules."""

    rule_id: str
    title: str
    severity: Severity
    category: str
    recommendation: str

    @abstractmethod
    def evaluate(self, resources: Sequence[Resource], dependencies: Sequence[Dependency]) -> list[Risk]:
        """Return the risks this rule finds in one run's output."""

    def make_risk(self, resource: Resource, description: str) -> Risk:
        """Build a risk citing *resource*, with an id stable across runs."""
        return Risk(
            id=stable_id(self.rule_id, resource.id),
            rule_id=self.rule_id,
            severity=self.severity,
            category=self.category,
            title=self.title,
            description=description,
            affected_resources=[resource.id],
            recommendation=self.recommendation,
        )


class RiskEngine:
    """Evaluates an ordered set of risk rules."""

    def __init__(self, rules: Sequence[RiskRule] | None = None) -> None:
        self._rules: list[RiskRule] = list(rules or [])

    def register(self, rule: RiskRule) -> None:
        self._rules.append(rule)

    @property
    def rules(self) -> list[RiskRule]:
        return list(self._rules)

    def evaluate(self, resources: Sequence[Resource], dependencies: Sequence[Dependency]) -> list[Risk]:
        risks: list[Risk] = []
        for rule in self._rules:
            found = rule.evaluate(resources, dependencies)
            if found:
                risks_detected_total.labels(rule_id=rule.rule_id).inc(len(found))
                _logger.debug("rule_fired", rule_id=rule.rule_id, count=len(found))
            risks.extend(found)
        return risks
