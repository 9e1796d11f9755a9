"""Label-selector resolution.

Expands every pending ``SelectorTarget`` into concrete dependencies on the
resources whose labels contain all of the selector's pairs. Runs once, after
every file in the batch has been extracted, so selectors bind across files.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from cloudgraph.errors import SelectorResolutionError
from cloudgraph.models.resources import (
    Dependency,
    ResolvedTarget,
    Resource,
    SelectorTarget,
    stable_id,
)
from cloudgraph.observability.logging import get_logger

_logger = get_logger("analysis.selectors")


def matches_selector(labels: Mapping[str, str], match_labels: Mapping[str, str]) -> bool:
    """True when *labels* is a superset of *match_labels*.

    A resource without labels never matches, not even an empty selector.
    """
    if not labels:
        return False
    return all(labels.get(key) == value for key, value in match_labels.items())


def _validate_match_labels(dep: Dependency, target: SelectorTarget) -> None:
    match_labels = target.match_labels
    if not isinstance(match_labels, Mapping):
        raise SelectorResolutionError(
            f"dependency {dep.id} from {dep.source}: selector is {type(match_labels).__name__}, expected a mapping"
        )
    for key, value in match_labels.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise SelectorResolutionError(
                f"dependency {dep.id} from {dep.source}: selector entry {key!r}={value!r} is not a string pair"
            )


def _format_selector(match_labels: Mapping[str, str]) -> str:
    pairs = ", ".join(f'"{k}": "{v}"' for k, v in match_labels.items())
    return "{" + pairs + "}"


def resolve_selectors(dependencies: Sequence[Dependency], resources: Sequence[Resource]) -> list[Dependency]:
    """Replace each selector dependency with one dependency per matching resource.

    Non-selector dependencies pass through unchanged and in order. A
    selector matching nothing is dropped.

    Raises:
        SelectorResolutionError: a selector's match labels are not a
            string-to-string mapping.
    """
    resolved: list[Dependency] = []
    for dep in dependencies:
        target = dep.target
        if not isinstance(target, SelectorTarget):
            resolved.append(dep)
            continue

        _validate_match_labels(dep, target)
        matched = [r for r in resources if matches_selector(r.labels, target.match_labels)]
        if not matched:
            _logger.debug("selector_unmatched", source=dep.source, selector=dict(target.match_labels))
            continue

        reason = f"Selector match: {_format_selector(target.match_labels)}"
        for resource in matched:
            resolved.append(
                Dependency(
                    id=stable_id(dep.id, resource.id),
                    source=dep.source,
                    target=ResolvedTarget(resource.id),
                    type=dep.type,
                    is_inferred=dep.is_inferred,
                    confidence=dep.confidence,
                    reason=reason,
                    metadata=dep.metadata,
                )
            )
        _logger.debug("selector_resolved", source=dep.source, matches=len(matched))
    return resolved
