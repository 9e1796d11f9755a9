"""Cluster-manifest extractor.

Dispatches on ``kind``. Workloads aggregate ports, volume mounts and
environment across every pod container (init containers included) and emit
config/secret/storage dependencies; Services emit one pending selector
dependency; Ingresses emit routing and TLS secret dependencies. ConfigMaps,
Secrets, PersistentVolumeClaims and PersistentVolumes are leaves. Unknown
kinds become generic resources without dependency extraction.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from cloudgraph.errors import ExtractionError
from cloudgraph.extractors.base import (
    ExtractionResult,
    Extractor,
    as_command,
    as_int,
    as_list,
    as_mapping,
    as_str,
    as_str_map,
    require_list,
    require_mapping,
)
from cloudgraph.models.resources import (
    DependencyType,
    EnvVar,
    HealthCheck,
    Platform,
    PortMapping,
    ResolvedTarget,
    Resource,
    ResourceKind,
    ResourceLimits,
    ResourceMetadata,
    SelectorTarget,
    VolumeMount,
)
from cloudgraph.observability.logging import get_logger

_logger = get_logger("extractor.kubernetes")

DEFAULT_NAMESPACE = "default"

_ID_SEGMENTS: dict[str, str] = {
    ResourceKind.PERSISTENT_VOLUME_CLAIM: "pvc",
}

_POD_TEMPLATE_KINDS = frozenset(
    {
        ResourceKind.DEPLOYMENT,
        ResourceKind.STATEFUL_SET,
        ResourceKind.DAEMON_SET,
        ResourceKind.JOB,
    }
)

_LEAF_KINDS = frozenset(
    {
        ResourceKind.CONFIG_MAP,
        ResourceKind.SECRET,
        ResourceKind.PERSISTENT_VOLUME_CLAIM,
        ResourceKind.PERSISTENT_VOLUME,
    }
)


def cluster_resource_id(kind: str, namespace: str | None, name: str) -> str:
    """Return the deterministic id of a cluster object.

    PersistentVolumes are cluster-scoped and carry no namespace segment.
    """
    if kind == ResourceKind.PERSISTENT_VOLUME:
        return f"k8s-pv-{name}"
    segment = _ID_SEGMENTS.get(kind, kind.lower())
    return f"k8s-{segment}-{namespace or DEFAULT_NAMESPACE}-{name}"


@dataclass(frozen=True)
class _Manifest:
    """The kind-discriminating fields of one manifest, plus its raw sections."""

    kind: str
    name: str
    namespace: str
    labels: dict[str, str]
    annotations: dict[str, str]
    spec: dict[str, object]
    source_file: str
    raw_text: str | None

    def resource_id(self, kind: str | None = None) -> str:
        return cluster_resource_id(kind or self.kind, self.namespace, self.name)

    def ref_id(self, kind: str, name: str) -> str:
        """Id of a same-namespace object referenced by this manifest."""
        return cluster_resource_id(kind, self.namespace, name)


def _containers(
    pod_spec: dict[str, object],
    source_file: str,
) -> tuple[list[dict[str, object]], list[dict[str, object]]]:
    containers = require_list(pod_spec.get("containers"), "containers", source_file)
    init_containers = require_list(pod_spec.get("initContainers"), "initContainers", source_file)
    return (
        [c for c in containers if isinstance(c, dict)],
        [c for c in init_containers if isinstance(c, dict)],
    )


def _parse_probe(value: object) -> HealthCheck | None:
    probe = as_mapping(value)
    if not probe:
        return None
    if "httpGet" in probe:
        http = as_mapping(probe.get("httpGet"))
        return HealthCheck(type="http", path=as_str(http.get("path")), port=as_int(http.get("port")))
    if "tcpSocket" in probe:
        return HealthCheck(type="tcp", port=as_int(as_mapping(probe.get("tcpSocket")).get("port")))
    return HealthCheck(type="exec", command=as_command(as_mapping(probe.get("exec")).get("command")))


def _parse_container_resources(container: dict[str, object]) -> ResourceLimits | None:
    resources = container.get("resources")
    if not isinstance(resources, dict):
        return None
    return ResourceLimits(
        limits=as_str_map(resources.get("limits")) or None,
        requests=as_str_map(resources.get("requests")) or None,
    )


def _volume_types(pod_spec: dict[str, object]) -> dict[str, str]:
    """Map pod volume names to a mount type."""
    types = {}
    for vol in as_list(pod_spec.get("volumes")):
        vol = as_mapping(vol)
        name = as_str(vol.get("name"))
        if not name:
            continue
        if "persistentVolumeClaim" in vol:
            types[name] = "pvc"
        elif "hostPath" in vol:
            types[name] = "bind"
        elif as_mapping(vol.get("emptyDir")).get("medium") == "Memory":
            types[name] = "tmpfs"
        else:
            types[name] = "volume"
    return types


class KubernetesExtractor(Extractor):
    """Extracts resources and dependencies from one cluster manifest."""

    platform = Platform.CLUSTER

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[_Manifest, ExtractionResult], None]] = {
            ResourceKind.SERVICE: self._extract_service,
            ResourceKind.INGRESS: self._extract_ingress,
            "Pod": self._extract_pod,
        }
        for kind in _POD_TEMPLATE_KINDS | {ResourceKind.CRON_JOB}:
            self._handlers[kind] = self._extract_workload
        for kind in _LEAF_KINDS:
            self._handlers[kind] = self._extract_leaf

    def extract(self, document: object, source_file: str, raw_text: str | None = None) -> ExtractionResult:
        if not isinstance(document, dict):
            raise ExtractionError("manifest must be a mapping", source_file)

        result = ExtractionResult()
        kind = document.get("kind")
        if not kind or not document.get("apiVersion"):
            _logger.debug("manifest_skipped", source_file=source_file, reason="missing kind or apiVersion")
            return result

        metadata = require_mapping(document.get("metadata"), "metadata", source_file)
        name = as_str(metadata.get("name"))
        if not name:
            raise ExtractionError(f"{kind} is missing metadata.name", source_file)

        kind = str(kind)
        namespace = as_str(metadata.get("namespace")) or DEFAULT_NAMESPACE
        manifest = _Manifest(
            kind=kind,
            name=name,
            namespace=namespace,
            labels=as_str_map(metadata.get("labels")),
            annotations=as_str_map(metadata.get("annotations")),
            spec=require_mapping(document.get("spec"), "spec", source_file),
            source_file=source_file,
            raw_text=raw_text,
        )

        handler = self._handlers.get(kind, self._extract_generic)
        handler(manifest, result)

        _logger.debug(
            "manifest_extracted",
            source_file=source_file,
            kind=kind,
            name=name,
            dependencies=len(result.dependencies),
        )
        return result

    # ------------------------------------------------------------------
    # Workloads
    # ------------------------------------------------------------------

    def _extract_workload(self, manifest: _Manifest, result: ExtractionResult) -> None:
        spec = manifest.spec
        if manifest.kind == ResourceKind.CRON_JOB:
            job_spec = as_mapping(as_mapping(spec.get("jobTemplate")).get("spec"))
            template = as_mapping(job_spec.get("template"))
        else:
            template = as_mapping(spec.get("template"))
        pod_spec = as_mapping(template.get("spec"))

        replicas = as_int(spec.get("replicas"))
        selector = as_str_map(as_mapping(spec.get("selector")).get("matchLabels")) or None
        self._extract_pod_spec(
            manifest,
            pod_spec,
            result,
            kind=manifest.kind,
            resource_id=manifest.resource_id(),
            replicas=1 if replicas is None else replicas,
            selector=selector,
        )

    def _extract_pod(self, manifest: _Manifest, result: ExtractionResult) -> None:
        self._extract_pod_spec(
            manifest,
            manifest.spec,
            result,
            kind=ResourceKind.CONTAINER,
            resource_id=manifest.resource_id("Pod"),
            replicas=1,
            selector=None,
        )

    def _extract_pod_spec(
        self,
        manifest: _Manifest,
        pod_spec: dict[str, object],
        result: ExtractionResult,
        *,
        kind: str,
        resource_id: str,
        replicas: int,
        selector: dict[str, str] | None,
    ) -> None:
        containers, init_containers = _containers(pod_spec, manifest.source_file)
        all_containers = containers + init_containers
        primary = containers[0] if containers else {}
        volume_types = _volume_types(pod_spec)

        ports: list[PortMapping] = []
        mounts: list[VolumeMount] = []
        environment: list[EnvVar] = []
        for container in all_containers:
            for port in as_list(container.get("ports")):
                port = as_mapping(port)
                container_port = as_int(port.get("containerPort"))
                if container_port is None:
                    continue
                ports.append(
                    PortMapping(
                        container_port=container_port,
                        protocol=as_str(port.get("protocol")) or "TCP",
                        name=as_str(port.get("name")),
                    )
                )
            for mount in as_list(container.get("volumeMounts")):
                mount = as_mapping(mount)
                name = as_str(mount.get("name")) or ""
                mounts.append(
                    VolumeMount(
                        name=name,
                        mount_path=as_str(mount.get("mountPath")) or "",
                        sub_path=as_str(mount.get("subPath")),
                        read_only=bool(mount.get("readOnly", False)),
                        type=volume_types.get(name, "volume"),
                    )
                )
            for env in as_list(container.get("env")):
                env = as_mapping(env)
                name = as_str(env.get("name"))
                if not name:
                    continue
                value_from = env.get("valueFrom")
                environment.append(
                    EnvVar(
                        name=name,
                        value=as_str(env.get("value")),
                        value_from=value_from if isinstance(value_from, dict) else None,
                    )
                )

        health_check = _parse_probe(primary.get("livenessProbe")) or _parse_probe(primary.get("readinessProbe"))

        result.resources.append(
            Resource(
                id=resource_id,
                name=manifest.name,
                kind=kind,
                platform=Platform.CLUSTER,
                source_file=manifest.source_file,
                namespace=manifest.namespace,
                labels=manifest.labels,
                annotations=manifest.annotations,
                metadata=ResourceMetadata(
                    image=as_str(primary.get("image")),
                    replicas=replicas,
                    ports=ports,
                    volumes=mounts,
                    environment=environment,
                    selector=selector,
                    command=as_command(primary.get("command")),
                    args=as_command(primary.get("args")),
                    working_dir=as_str(primary.get("workingDir")),
                    resources=_parse_container_resources(primary),
                    health_check=health_check,
                ),
                raw_text=manifest.raw_text,
            )
        )

        for container in all_containers:
            self._extract_container_refs(manifest, resource_id, container, result)
        self._extract_volume_refs(manifest, resource_id, pod_spec, result)

    def _extract_container_refs(
        self,
        manifest: _Manifest,
        resource_id: str,
        container: dict[str, object],
        result: ExtractionResult,
    ) -> None:
        for env in as_list(container.get("env")):
            env = as_mapping(env)
            value_from = as_mapping(env.get("valueFrom"))
            env_name = as_str(env.get("name")) or ""
            cm_name = as_str(as_mapping(value_from.get("configMapKeyRef")).get("name"))
            if cm_name:
                result.add_dependency(
                    resource_id,
                    ResolvedTarget(manifest.ref_id(ResourceKind.CONFIG_MAP, cm_name)),
                    DependencyType.CONFIG,
                    f"Environment variable {env_name} from ConfigMap",
                )
            secret_name = as_str(as_mapping(value_from.get("secretKeyRef")).get("name"))
            if secret_name:
                result.add_dependency(
                    resource_id,
                    ResolvedTarget(manifest.ref_id(ResourceKind.SECRET, secret_name)),
                    DependencyType.SECRET,
                    f"Environment variable {env_name} from Secret",
                )

        for env_from in as_list(container.get("envFrom")):
            env_from = as_mapping(env_from)
            cm_name = as_str(as_mapping(env_from.get("configMapRef")).get("name"))
            if cm_name:
                result.add_dependency(
                    resource_id,
                    ResolvedTarget(manifest.ref_id(ResourceKind.CONFIG_MAP, cm_name)),
                    DependencyType.CONFIG,
                    "envFrom ConfigMap",
                )
            secret_name = as_str(as_mapping(env_from.get("secretRef")).get("name"))
            if secret_name:
                result.add_dependency(
                    resource_id,
                    ResolvedTarget(manifest.ref_id(ResourceKind.SECRET, secret_name)),
                    DependencyType.SECRET,
                    "envFrom Secret",
                )

    def _extract_volume_refs(
        self,
        manifest: _Manifest,
        resource_id: str,
        pod_spec: dict[str, object],
        result: ExtractionResult,
    ) -> None:
        for vol in as_list(pod_spec.get("volumes")):
            vol = as_mapping(vol)
            vol_name = as_str(vol.get("name")) or ""
            cm_name = as_str(as_mapping(vol.get("configMap")).get("name"))
            if cm_name:
                result.add_dependency(
                    resource_id,
                    ResolvedTarget(manifest.ref_id(ResourceKind.CONFIG_MAP, cm_name)),
                    DependencyType.CONFIG,
                    f"ConfigMap volume: {vol_name}",
                )
            secret_name = as_str(as_mapping(vol.get("secret")).get("secretName"))
            if secret_name:
                result.add_dependency(
                    resource_id,
                    ResolvedTarget(manifest.ref_id(ResourceKind.SECRET, secret_name)),
                    DependencyType.SECRET,
                    f"Secret volume: {vol_name}",
                )
            claim_name = as_str(as_mapping(vol.get("persistentVolumeClaim")).get("claimName"))
            if claim_name:
                result.add_dependency(
                    resource_id,
                    ResolvedTarget(manifest.ref_id(ResourceKind.PERSISTENT_VOLUME_CLAIM, claim_name)),
                    DependencyType.STORAGE,
                    f"PVC mount: {vol_name}",
                )

    # ------------------------------------------------------------------
    # Networking
    # ------------------------------------------------------------------

    def _extract_service(self, manifest: _Manifest, result: ExtractionResult) -> None:
        spec = manifest.spec
        ports = []
        for port in as_list(spec.get("ports")):
            port = as_mapping(port)
            service_port = as_int(port.get("port"))
            if service_port is None:
                continue
            target_port = as_int(port.get("targetPort"))
            ports.append(
                PortMapping(
                    container_port=service_port if target_port is None else target_port,
                    host_port=service_port,
                    node_port=as_int(port.get("nodePort")),
                    protocol=as_str(port.get("protocol")) or "TCP",
                    name=as_str(port.get("name")),
                )
            )

        raw_selector = spec.get("selector")
        if raw_selector is not None and not isinstance(raw_selector, dict):
            raise ExtractionError(f"Service {manifest.name}: spec.selector must be a mapping", manifest.source_file)
        selector = as_str_map(raw_selector) if raw_selector is not None else None

        resource_id = manifest.resource_id()
        result.resources.append(
            Resource(
                id=resource_id,
                name=manifest.name,
                kind=ResourceKind.SERVICE,
                platform=Platform.CLUSTER,
                source_file=manifest.source_file,
                namespace=manifest.namespace,
                labels=manifest.labels,
                annotations=manifest.annotations,
                metadata=ResourceMetadata(ports=ports, selector=selector),
                raw_text=manifest.raw_text,
            )
        )

        if selector is not None:
            result.add_dependency(
                resource_id,
                SelectorTarget(selector),
                DependencyType.SELECTOR,
                "Service selector",
                metadata={"selector": dict(selector)},
            )

    def _extract_ingress(self, manifest: _Manifest, result: ExtractionResult) -> None:
        spec = manifest.spec
        resource_id = manifest.resource_id()
        result.resources.append(
            Resource(
                id=resource_id,
                name=manifest.name,
                kind=ResourceKind.INGRESS,
                platform=Platform.CLUSTER,
                source_file=manifest.source_file,
                namespace=manifest.namespace,
                labels=manifest.labels,
                annotations=manifest.annotations,
                raw_text=manifest.raw_text,
            )
        )

        for rule in as_list(spec.get("rules")):
            rule = as_mapping(rule)
            host = as_str(rule.get("host"))
            for path in as_list(as_mapping(rule.get("http")).get("paths")):
                path = as_mapping(path)
                backend = as_mapping(path.get("backend"))
                # networking.k8s.io/v1 uses backend.service.name; v1beta1 used backend.serviceName
                service_name = as_str(as_mapping(backend.get("service")).get("name")) or as_str(
                    backend.get("serviceName")
                )
                if not service_name:
                    continue
                path_value = as_str(path.get("path")) or "/"
                result.add_dependency(
                    resource_id,
                    ResolvedTarget(manifest.ref_id(ResourceKind.SERVICE, service_name)),
                    DependencyType.ROUTING,
                    f"Ingress path: {path_value} -> {service_name}",
                    metadata={"host": host, "path": path_value},
                )

        for tls in as_list(spec.get("tls")):
            secret_name = as_str(as_mapping(tls).get("secretName"))
            if secret_name:
                result.add_dependency(
                    resource_id,
                    ResolvedTarget(manifest.ref_id(ResourceKind.SECRET, secret_name)),
                    DependencyType.SECRET,
                    "TLS certificate secret",
                )

    # ------------------------------------------------------------------
    # Leaves and unknown kinds
    # ------------------------------------------------------------------

    def _extract_leaf(self, manifest: _Manifest, result: ExtractionResult) -> None:
        cluster_scoped = manifest.kind == ResourceKind.PERSISTENT_VOLUME
        result.resources.append(
            Resource(
                id=manifest.resource_id(),
                name=manifest.name,
                kind=manifest.kind,
                platform=Platform.CLUSTER,
                source_file=manifest.source_file,
                namespace=None if cluster_scoped else manifest.namespace,
                labels=manifest.labels,
                annotations=manifest.annotations,
                raw_text=manifest.raw_text,
            )
        )

    def _extract_generic(self, manifest: _Manifest, result: ExtractionResult) -> None:
        _logger.debug("generic_kind", kind=manifest.kind, name=manifest.name)
        result.resources.append(
            Resource(
                id=manifest.resource_id(),
                name=manifest.name,
                kind=manifest.kind,
                platform=Platform.CLUSTER,
                source_file=manifest.source_file,
                namespace=manifest.namespace,
                labels=manifest.labels,
                annotations=manifest.annotations,
                raw_text=manifest.raw_text,
            )
        )
