"""Compose-style extractor.

Each top-level service becomes a Container resource; top-level networks,
volumes, secrets and configs become leaf resources. Explicit references
between them (depends_on, links, network membership, named-volume mounts,
secrets, configs) become high-confidence dependencies.
"""

from __future__ import annotations

import re

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
    VolumeMount,
)
from cloudgraph.observability.logging import get_logger

_logger = get_logger("extractor.compose")

# (top-level section, resource kind, id prefix)
_LEAF_SECTIONS: tuple[tuple[str, ResourceKind, str], ...] = (
    ("networks", ResourceKind.NETWORK, "network"),
    ("volumes", ResourceKind.VOLUME, "volume"),
    ("secrets", ResourceKind.SECRET, "secret"),
    ("configs", ResourceKind.CONFIG_MAP, "config"),
)

_BIND_PREFIXES = ("/", ".", "~")
_RE_PATH_SEPARATORS = re.compile(r"[/\\.]")


def compose_resource_id(prefix: str, name: object) -> str:
    """Return the id of a compose resource, e.g. ``dc-container-api``."""
    return f"dc-{prefix}-{name}"


def parse_port(entry: object) -> PortMapping | None:
    """Parse one port entry in short (``[ip:][host:]container[/proto]``), integer or long form."""
    if isinstance(entry, bool):
        return None
    if isinstance(entry, int):
        return PortMapping(container_port=entry)
    if isinstance(entry, str):
        spec, _, proto = entry.partition("/")
        parts = spec.split(":")
        container_port = as_int(parts[-1])
        if container_port is None:
            return None
        host_port = as_int(parts[-2]) if len(parts) >= 2 else None
        return PortMapping(
            container_port=container_port,
            host_port=host_port,
            protocol="UDP" if proto.lower() == "udp" else "TCP",
        )
    if isinstance(entry, dict):
        target = as_int(entry.get("target"))
        if target is None:
            return None
        protocol = as_str(entry.get("protocol")) or "tcp"
        return PortMapping(
            container_port=target,
            host_port=as_int(entry.get("published")),
            protocol=protocol.upper(),
            name=as_str(entry.get("name")),
        )
    return None


def parse_ports(value: object) -> list[PortMapping]:
    ports = []
    for entry in as_list(value):
        port = parse_port(entry)
        if port is None:
            _logger.debug("port_entry_skipped", entry=str(entry))
            continue
        ports.append(port)
    return ports


def parse_volume(entry: object) -> VolumeMount | None:
    """Parse a ``source:target[:mode]`` string or a long-form volume object."""
    if isinstance(entry, str):
        parts = entry.split(":")
        source = parts[0]
        mount_path = parts[1] if len(parts) > 1 and parts[1] else source
        read_only = len(parts) > 2 and "ro" in parts[2].split(",")
        if source.startswith(_BIND_PREFIXES):
            return VolumeMount(
                name=f"bind-{_RE_PATH_SEPARATORS.sub('-', source)}",
                mount_path=mount_path,
                read_only=read_only,
                source=source,
                type="bind",
            )
        return VolumeMount(name=source, mount_path=mount_path, read_only=read_only, source=source, type="volume")
    if isinstance(entry, dict):
        source = as_str(entry.get("source"))
        return VolumeMount(
            name=source or "",
            mount_path=as_str(entry.get("target")) or "",
            read_only=bool(entry.get("read_only", False)),
            source=source,
            type=as_str(entry.get("type")) or "volume",
        )
    return None


def parse_volumes(value: object) -> list[VolumeMount]:
    return [vol for vol in (parse_volume(entry) for entry in as_list(value)) if vol is not None]


def _env_value(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def parse_environment(value: object) -> list[EnvVar]:
    """Accept either ``KEY=VALUE`` strings or a key/value mapping."""
    if isinstance(value, list):
        env = []
        for item in value:
            name, sep, raw = str(item).partition("=")
            env.append(EnvVar(name=name, value=raw if sep and raw else None))
        return env
    if isinstance(value, dict):
        return [EnvVar(name=str(name), value=_env_value(raw)) for name, raw in value.items()]
    return []


def parse_labels(value: object) -> dict[str, str]:
    if isinstance(value, list):
        labels = {}
        for item in value:
            key, _, raw = str(item).partition("=")
            labels[key] = raw
        return labels
    return as_str_map(value)


def _parse_healthcheck(value: object) -> HealthCheck | None:
    check = as_mapping(value)
    if not check or check.get("disable") is True:
        return None
    command = as_command(check.get("test"))
    if command == ["NONE"]:
        return None
    return HealthCheck(
        type="exec",
        command=command,
        interval=as_str(check.get("interval")),
        timeout=as_str(check.get("timeout")),
    )


def _parse_deploy_resources(deploy: dict[str, object]) -> ResourceLimits | None:
    resources = deploy.get("resources")
    if not isinstance(resources, dict):
        return None

    def _pick(section: object) -> dict[str, str] | None:
        values = as_mapping(section)
        picked = {
            key: str(values[src]) for key, src in (("cpu", "cpus"), ("memory", "memory")) if values.get(src) is not None
        }
        return picked or None

    return ResourceLimits(limits=_pick(resources.get("limits")), requests=_pick(resources.get("reservations")))


def _names(value: object) -> list[str]:
    """Names from a list, or the keys of a mapping."""
    if isinstance(value, dict):
        return [str(k) for k in value]
    return [str(v) for v in as_list(value)]


def _reference_name(entry: object) -> str | None:
    """Secret/config reference: a bare name or ``{source: name}``."""
    if isinstance(entry, dict):
        return as_str(entry.get("source"))
    return as_str(entry)


class ComposeExtractor(Extractor):
    """Extracts Container and leaf resources from a compose-style document."""

    platform = Platform.COMPOSE

    def extract(self, document: object, source_file: str, raw_text: str | None = None) -> ExtractionResult:
        if not isinstance(document, dict):
            raise ExtractionError("compose document must be a mapping", source_file)

        result = ExtractionResult()

        for section, kind, prefix in _LEAF_SECTIONS:
            entries = require_mapping(document.get(section), section, source_file)
            for name in entries:
                result.resources.append(
                    Resource(
                        id=compose_resource_id(prefix, name),
                        name=str(name),
                        kind=kind,
                        platform=Platform.COMPOSE,
                        source_file=source_file,
                    )
                )

        services = require_mapping(document.get("services"), "services", source_file)
        for key, body in services.items():
            if body is None:
                body = {}
            if not isinstance(body, dict):
                raise ExtractionError(f"service '{key}' must be a mapping", source_file)
            self._extract_service(str(key), body, source_file, raw_text, result)

        _logger.debug(
            "compose_extracted",
            source_file=source_file,
            resources=len(result.resources),
            dependencies=len(result.dependencies),
        )
        return result

    def _extract_service(
        self,
        key: str,
        service: dict[str, object],
        source_file: str,
        raw_text: str | None,
        result: ExtractionResult,
    ) -> None:
        resource_id = compose_resource_id("container", key)
        deploy = as_mapping(service.get("deploy"))
        volumes = parse_volumes(service.get("volumes"))
        replicas = as_int(deploy.get("replicas"))

        image = as_str(service.get("image"))
        if image is None and service.get("build"):
            image = "[build]"

        result.resources.append(
            Resource(
                id=resource_id,
                name=as_str(service.get("container_name")) or key,
                kind=ResourceKind.CONTAINER,
                platform=Platform.COMPOSE,
                source_file=source_file,
                labels=parse_labels(service.get("labels")),
                metadata=ResourceMetadata(
                    image=image,
                    replicas=1 if replicas is None else replicas,
                    ports=parse_ports(service.get("ports")),
                    volumes=volumes,
                    environment=parse_environment(service.get("environment")),
                    command=as_command(service.get("command")),
                    working_dir=as_str(service.get("working_dir")),
                    resources=_parse_deploy_resources(deploy),
                    health_check=_parse_healthcheck(service.get("healthcheck")),
                ),
                raw_text=raw_text,
            )
        )

        for dep in _names(service.get("depends_on")):
            result.add_dependency(
                resource_id,
                ResolvedTarget(compose_resource_id("container", dep)),
                DependencyType.STARTUP,
                "Explicit depends_on declaration",
            )

        for link in as_list(service.get("links")):
            target = str(link).split(":")[0]
            result.add_dependency(
                resource_id,
                ResolvedTarget(compose_resource_id("container", target)),
                DependencyType.NETWORK,
                "Compose links declaration",
            )

        for vol in volumes:
            if vol.type == "volume" and vol.name:
                result.add_dependency(
                    resource_id,
                    ResolvedTarget(compose_resource_id("volume", vol.name)),
                    DependencyType.STORAGE,
                    f"Volume mount at {vol.mount_path}",
                )

        for entry in as_list(service.get("secrets")):
            name = _reference_name(entry)
            if name:
                result.add_dependency(
                    resource_id,
                    ResolvedTarget(compose_resource_id("secret", name)),
                    DependencyType.SECRET,
                    "Secret reference in service",
                )

        for entry in as_list(service.get("configs")):
            name = _reference_name(entry)
            if name:
                result.add_dependency(
                    resource_id,
                    ResolvedTarget(compose_resource_id("config", name)),
                    DependencyType.CONFIG,
                    "Config reference in service",
                )

        for network in _names(service.get("networks")):
            result.add_dependency(
                resource_id,
                ResolvedTarget(compose_resource_id("network", network)),
                DependencyType.NETWORK,
                "Network membership",
            )
