"""TOML-based client configuration.

Loads ~/.cirrus/defaults.toml (global) and cirrus.toml (project), merges
them, applies CIRRUS_* environment variables and explicit overrides, and
builds an immutable ``CirrusConfig``.

Example cirrus.toml::

    base_url = "https://api.cirrus.cloud/v1"
    request_timeout = 30

    [timeouts.database]
    delete = 1200
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, TypeAlias

from cirrus.errors import ConfigurationError
from cirrus.types import ResourceKind

RawConfig: TypeAlias = dict[str, Any]

DEFAULT_BASE_URL = "https://api.cirrus.cloud/v1"
DEFAULT_USER_AGENT = "cirrus-python/0.1.0"

GLOBAL_CONFIG_PATH = Path.home() / ".cirrus" / "defaults.toml"
PROJECT_CONFIG_NAME = "cirrus.toml"

ENV_API_TOKEN = "CIRRUS_API_TOKEN"
ENV_BASE_URL = "CIRRUS_BASE_URL"


@dataclass(frozen=True, slots=True)
class KindTimeouts:
    """Per-operation deadlines for one resource kind, in seconds."""

    create: float
    update: float
    delete: float


@dataclass(frozen=True, slots=True)
class CirrusConfig:
    """Control-plane client configuration.

    Args:
        api_token: Bearer token. Falls back to CIRRUS_API_TOKEN.
        base_url: API root. Falls back to CIRRUS_BASE_URL.
        user_agent: Sent with every request.
        request_timeout: Upper bound for one HTTP round trip, in seconds.
        read_retries: Attempts for idempotent reads on transient failure.
        retry_base_delay: First backoff delay for read retries, in seconds.
        timeouts: Per-kind overrides of the default operation deadlines.
    """

    api_token: str
    base_url: str = DEFAULT_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    request_timeout: float = 30.0
    read_retries: int = 3
    retry_base_delay: float = 1.0
    timeouts: dict[ResourceKind, KindTimeouts] = field(default_factory=dict)

    def timeouts_for(self, kind: ResourceKind, default: KindTimeouts) -> KindTimeouts:
        return self.timeouts.get(kind, default)

    def __repr__(self) -> str:
        return f"CirrusConfig(base_url={self.base_url!r}, api_token='***')"


def _deep_merge(base: RawConfig, override: RawConfig) -> RawConfig:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_toml(path: Path) -> RawConfig:
    if not path.is_file():
        return {}
    with path.open("rb") as f:
        return tomllib.load(f)


def load_config(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> RawConfig:
    global_cfg = _read_toml(global_path or GLOBAL_CONFIG_PATH)
    project_path = (project_dir or Path.cwd()) / PROJECT_CONFIG_NAME
    project_cfg = _read_toml(project_path)

    merged = _deep_merge(global_cfg, project_cfg)
    merged.setdefault("timeouts", {})
    return merged


def _env_overrides(environ: Mapping[str, str]) -> RawConfig:
    env: RawConfig = {}
    if token := environ.get(ENV_API_TOKEN):
        env["api_token"] = token
    if base_url := environ.get(ENV_BASE_URL):
        env["base_url"] = base_url
    return env


def _build_timeouts(raw: Any) -> dict[ResourceKind, KindTimeouts]:
    from cirrus.resources.registry import service_for

    if not isinstance(raw, dict):
        raise ConfigurationError(
            f"'timeouts' must be a table of per-kind tables, got {type(raw).__name__}"
        )

    result: dict[ResourceKind, KindTimeouts] = {}
    for name, values in raw.items():
        try:
            kind = ResourceKind(name)
        except ValueError:
            valid = ", ".join(k.value for k in ResourceKind)
            raise ConfigurationError(
                f"Unknown resource kind '{name}' in timeouts. Valid: {valid}"
            ) from None
        if not isinstance(values, dict):
            raise ConfigurationError(
                f"timeouts.{name} must be a table with create/update/delete, "
                f"got {type(values).__name__}"
            )
        default = getattr(service_for(kind), "default_timeouts", None)
        if default is None:
            raise ConfigurationError(f"{kind.label} operations do not wait; remove timeouts.{name}")
        try:
            result[kind] = KindTimeouts(
                create=float(values.get("create", default.create)),
                update=float(values.get("update", default.update)),
                delete=float(values.get("delete", default.delete)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"timeouts.{name}: {e}") from e
    return result


def resolve_config(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
    timeouts: dict[ResourceKind, KindTimeouts] | None = None,
    **overrides: Any,
) -> CirrusConfig:
    """Build a ``CirrusConfig`` from files, environment and overrides.

    Precedence, lowest first: global file, project file, environment,
    keyword overrides.

    Raises:
        ConfigurationError: No API token anywhere, or an unknown key.
    """
    raw = load_config(project_dir=project_dir, global_path=global_path)
    raw = _deep_merge(raw, _env_overrides(os.environ if environ is None else environ))
    raw = _deep_merge(raw, {k: v for k, v in overrides.items() if v is not None})

    if not raw.get("api_token"):
        raise ConfigurationError(
            f"Missing API token. Set api_token in {PROJECT_CONFIG_NAME} "
            f"or the {ENV_API_TOKEN} environment variable."
        )

    known = {f.name for f in fields(CirrusConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

    resolved = _build_timeouts(raw.pop("timeouts"))
    resolved.update(timeouts or {})
    return CirrusConfig(**raw, timeouts=resolved)
