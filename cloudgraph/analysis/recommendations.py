"""Category-level recommendations aggregated from risks."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from cloudgraph.models.resources import stable_id
from cloudgraph.models.risks import Recommendation, Risk, RiskCategory


@dataclass(frozen=True)
class RecommendationTemplate:
    category: str
    priority: str
    title: str
    describe: Callable[[int], str]


# Categories without a template produce no recommendation.
RECOMMENDATION_TEMPLATES: tuple[RecommendationTemplate, ...] = (
    RecommendationTemplate(
        category=RiskCategory.AVAILABILITY,
        priority="high",
        title="Improve High Availability",
        describe=lambda n: (
            f"{n} workloads have single replicas. "
            "Consider implementing horizontal pod autoscaling or increasing replica counts."
        ),
    ),
    RecommendationTemplate(
        category=RiskCategory.RELIABILITY,
        priority="high",
        title="Add Health Checks",
        describe=lambda n: (
            f"{n} workloads are missing health checks. "
            "Add liveness and readiness probes for better failure detection and recovery."
        ),
    ),
)


def _union(risks: Sequence[Risk]) -> list[str]:
    seen: dict[str, None] = {}
    for risk in risks:
        for resource_id in risk.affected_resources:
            seen.setdefault(resource_id, None)
    return list(seen)


def generate_recommendations(risks: Sequence[Risk]) -> list[Recommendation]:
    """Return one recommendation per templated category that has risks."""
    recommendations = []
    for template in RECOMMENDATION_TEMPLATES:
        matching = [r for r in risks if r.category == template.category]
        if not matching:
            continue
        affected = _union(matching)
        recommendations.append(
            Recommendation(
                id=stable_id("recommendation", template.category, *affected),
                priority=template.priority,
                category=template.category,
                title=template.title,
                description=template.describe(len(matching)),
                affected_resources=affected,
            )
        )
    return recommendations
