"""Core resource and dependency data structures."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import StrEnum


class Platform(StrEnum):
    """Configuration dialect a resource was extracted from."""

    COMPOSE = "compose"
    CLUSTER = "cluster"


class ResourceKind(StrEnum):
    """Normalized resource kinds.

    Unknown cluster kinds are carried through verbatim as plain strings,
    so ``Resource.kind`` is typed ``str``.
    """

    CONTAINER = "Container"
    DEPLOYMENT = "Deployment"
    STATEFUL_SET = "StatefulSet"
    DAEMON_SET = "DaemonSet"
    JOB = "Job"
    CRON_JOB = "CronJob"
    SERVICE = "Service"
    INGRESS = "Ingress"
    CONFIG_MAP = "ConfigMap"
    SECRET = "Secret"
    PERSISTENT_VOLUME = "PersistentVolume"
    PERSISTENT_VOLUME_CLAIM = "PersistentVolumeClaim"
    NETWORK = "Network"
    VOLUME = "Volume"


class DependencyType(StrEnum):
    """Relationship type between two resources."""

    NETWORK = "network"
    STORAGE = "storage"
    CONFIG = "config"
    SECRET = "secret"
    STARTUP = "startup"
    RUNTIME = "runtime"
    SELECTOR = "selector"
    ROUTING = "routing"


class Confidence(StrEnum):
    """Qualitative trust level attached to a dependency."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Tier(StrEnum):
    """Coarse architectural grouping assigned per resource."""

    FRONTEND = "frontend"
    BACKEND = "backend"
    DATA = "data"
    INFRA = "infra"


WORKLOAD_KINDS: frozenset[str] = frozenset(
    {
        ResourceKind.DEPLOYMENT,
        ResourceKind.STATEFUL_SET,
        ResourceKind.DAEMON_SET,
        ResourceKind.JOB,
        ResourceKind.CRON_JOB,
    }
)

# Kinds that run containers; used by the container and service diagrams.
COMPUTE_KINDS: frozenset[str] = frozenset(
    {
        ResourceKind.CONTAINER,
        ResourceKind.DEPLOYMENT,
        ResourceKind.STATEFUL_SET,
        ResourceKind.DAEMON_SET,
    }
)


@dataclass(frozen=True)
class PortMapping:
    """A single exposed port."""

    container_port: int
    host_port: int | None = None
    protocol: str = "TCP"
    name: str | None = None
    node_port: int | None = None


@dataclass(frozen=True)
class VolumeMount:
    """A volume mounted into a container."""

    name: str
    mount_path: str
    sub_path: str | None = None
    read_only: bool = False
    source: str | None = None  # compose bind/volume source
    type: str | None = None  # "volume" | "bind" | "tmpfs" | "pvc"


@dataclass(frozen=True)
class EnvVar:
    """An environment entry; ``value_from`` holds cluster value references."""

    name: str
    value: str | None = None
    value_from: dict[str, object] | None = None

    def as_assignment(self) -> str:
        """Return the ``NAME=VALUE`` form used for pattern matching."""
        return f"{self.name}={self.value or ''}"


@dataclass(frozen=True)
class ResourceLimits:
    """CPU/memory limits and requests."""

    limits: dict[str, str] | None = None
    requests: dict[str, str] | None = None


@dataclass(frozen=True)
class HealthCheck:
    """Normalized health-check descriptor."""

    type: str  # "http" | "tcp" | "exec"
    path: str | None = None
    port: int | None = None
    command: list[str] | None = None
    interval: str | None = None
    timeout: str | None = None


@dataclass(frozen=True)
class ResourceMetadata:
    """Runtime details captured from the source document."""

    image: str | None = None
    replicas: int | None = None
    ports: list[PortMapping] = field(default_factory=list)
    volumes: list[VolumeMount] = field(default_factory=list)
    environment: list[EnvVar] = field(default_factory=list)
    selector: dict[str, str] | None = None
    command: list[str] | None = None
    args: list[str] | None = None
    working_dir: str | None = None
    resources: ResourceLimits | None = None
    health_check: HealthCheck | None = None


@dataclass(frozen=True)
class Resource:
    """Normalized representation of one infrastructure object.

    Created once per run by an extractor and never mutated afterwards.
    """

    id: str
    name: str
    kind: str
    platform: Platform
    source_file: str
    namespace: str | None = None
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    metadata: ResourceMetadata = field(default_factory=ResourceMetadata)
    raw_text: str | None = None


@dataclass(frozen=True)
class ResolvedTarget:
    """Dependency target that names a concrete resource id."""

    resource_id: str

    @property
    def key(self) -> str:
        return self.resource_id


@dataclass(frozen=True)
class SelectorTarget:
    """Dependency target still pending label-selector resolution."""

    match_labels: dict[str, str]

    @property
    def key(self) -> str:
        pairs = ",".join(f"{k}={v}" for k, v in sorted(self.match_labels.items()))
        return f"selector:{pairs}"


DependencyTarget = ResolvedTarget | SelectorTarget


@dataclass(frozen=True)
class Dependency:
    """Directed relationship between two resources, explicit or inferred."""

    id: str
    source: str
    target: DependencyTarget
    type: DependencyType
    is_inferred: bool = False
    confidence: Confidence = Confidence.HIGH
    reason: str = ""
    metadata: dict[str, object] | None = None

    @property
    def is_resolved(self) -> bool:
        return isinstance(self.target, ResolvedTarget)

    @property
    def target_id(self) -> str | None:
        """Concrete target id, or None while a selector is pending."""
        if isinstance(self.target, ResolvedTarget):
            return self.target.resource_id
        return None


_ID_NAMESPACE = uuid.UUID("6f1c2b1e-5d43-4c55-9a51-2f0e3c7a9d10")


def stable_id(*parts: object) -> str:
    """Return a deterministic id (UUIDv5) for the given identifying parts."""
    return str(uuid.uuid5(_ID_NAMESPACE, "|".join(str(p) for p in parts)))
