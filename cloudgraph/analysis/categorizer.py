"""Tier assignment by name, image and kind keywords."""

from __future__ import annotations

from dataclasses import dataclass

from cloudgraph.models.resources import Resource, ResourceKind, Tier


@dataclass(frozen=True)
class TierRule:
    """Keyword triggers for one tier; any single trigger is enough."""

    tier: Tier
    name_keywords: tuple[str, ...] = ()
    image_keywords: tuple[str, ...] = ()
    kinds: frozenset[str] = frozenset()

    def matches(self, resource: Resource) -> bool:
        name = resource.name.lower()
        image = (resource.metadata.image or "").lower()
        return (
            resource.kind in self.kinds
            or any(k in name for k in self.name_keywords)
            or any(k in image for k in self.image_keywords)
        )


# First match wins.
TIER_RULES: tuple[TierRule, ...] = (
    TierRule(
        tier=Tier.FRONTEND,
        name_keywords=("frontend", "ui", "web"),
        image_keywords=("nginx", "react", "vue", "angular"),
    ),
    TierRule(
        tier=Tier.DATA,
        name_keywords=("postgres", "mysql", "mongo", "redis", "database", "db"),
        image_keywords=("postgres", "mysql", "mongo", "redis"),
    ),
    TierRule(
        tier=Tier.INFRA,
        name_keywords=("rabbit", "kafka", "queue"),
        image_keywords=("rabbitmq", "kafka"),
        kinds=frozenset(
            {
                ResourceKind.INGRESS,
                ResourceKind.SERVICE,
                ResourceKind.CONFIG_MAP,
                ResourceKind.SECRET,
                ResourceKind.PERSISTENT_VOLUME,
                ResourceKind.PERSISTENT_VOLUME_CLAIM,
            }
        ),
    ),
)


def categorize(resource: Resource) -> Tier:
    """Return the tier of *resource*; backend when no rule matches."""
    for rule in TIER_RULES:
        if rule.matches(resource):
            return rule.tier
    return Tier.BACKEND
