"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from cloudgraph.models.config import (
    AnalysisConfig,
    APIConfig,
    CloudGraphConfig,
    LogConfig,
)


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"CLOUDGRAPH_{key}", default)


def _env_bool(key: str, default: bool = False) -> bool:
    val = _env(key, str(default).lower())
    return val.lower() in ("true", "1", "yes")


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    val = int(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def load_config() -> CloudGraphConfig:
    """Load configuration from CLOUDGRAPH_* environment variables."""
    return CloudGraphConfig(
        analysis=AnalysisConfig(
            infer_dependencies=_env_bool("INFER_DEPENDENCIES", True),
            include_raw=_env_bool("INCLUDE_RAW", False),
            max_files=_env_int("MAX_FILES", 50, min_val=1, max_val=500),
        ),
        api=APIConfig(
            host=_env("API_HOST", "0.0.0.0"),
            port=_env_int("API_PORT", 8080, min_val=1024, max_val=65535),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
        ),
    )
