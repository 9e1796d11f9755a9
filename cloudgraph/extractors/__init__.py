"""Platform extractors.

Exposes:
    detect_platform   -- classify a decoded document as compose or cluster.
    extractor_for     -- the extractor instance for a platform.
"""

from __future__ import annotations

from cloudgraph.extractors.base import ExtractionResult, Extractor
from cloudgraph.extractors.compose import ComposeExtractor
from cloudgraph.extractors.kubernetes import KubernetesExtractor
from cloudgraph.models.resources import Platform

_COMPOSE_MARKERS = ("version", "services", "networks")


def detect_platform(document: object) -> Platform:
    """Return the dialect of *document*.

    A mapping with ``version``, ``services`` or ``networks`` (or ``volumes``
    without ``apiVersion``) is compose-style; anything else is a cluster
    manifest.
    """
    if isinstance(document, dict):
        if any(key in document for key in _COMPOSE_MARKERS):
            return Platform.COMPOSE
        if "volumes" in document and "apiVersion" not in document:
            return Platform.COMPOSE
    return Platform.CLUSTER


_EXTRACTORS: dict[Platform, Extractor] = {
    Platform.COMPOSE: ComposeExtractor(),
    Platform.CLUSTER: KubernetesExtractor(),
}


def extractor_for(platform: Platform) -> Extractor:
    return _EXTRACTORS[platform]


__all__ = [
    "ComposeExtractor",
    "ExtractionResult",
    "Extractor",
    "KubernetesExtractor",
    "detect_platform",
    "extractor_for",
]
