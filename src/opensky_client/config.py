"""Configuration loading, environment-variable interpolation, and validation.

Resolution order for ``${VAR}`` placeholders:
    CLI overrides → environment variables → raw config value.

``${VAR}`` (no default) raises if unresolvable.
``${VAR:-default}`` falls back to *default*.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import jsonschema
import orjson

logger = logging.getLogger(__name__)

_VAR_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-(.*?))?\}")

_SCHEMA_PATH = Path(__file__).resolve().parent.parent.parent / "config" / "config.schema.json"

DEFAULT_BASE_URL = "https://opensky-network.org/api"


@dataclass
class ApiConfig:
    """OpenSky REST API settings.

    When ``username`` is set the credentials are embedded in every request
    URL; otherwise requests are anonymous.
    """

    base_url: str = DEFAULT_BASE_URL
    username: str = ""
    password: str = ""
    timeout_seconds: float = 10.0


@dataclass
class OutputConfig:
    """Where canonical JSON snapshots are written in ``snapshot`` mode."""

    snapshot_dir: str = "./snapshots"
    file_prefix: str = "opensky"


@dataclass
class LogFileConfig:
    """Optional log file output settings.

    When ``enabled`` is True the application writes operational logs to a
    rotating file in addition to stderr.
    """

    enabled: bool = False
    path: str = "./opensky-client.log"
    max_size_bytes: int = 10485760   # 10 MB
    backup_count: int = 5


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "info"
    format: str = "json"
    file: LogFileConfig = field(default_factory=LogFileConfig)
    redact_patterns: list[str] = field(
        default_factory=lambda: ["*password*", "*secret*", "*token*"]
    )


@dataclass
class AppConfig:
    """Top-level application configuration."""

    api: ApiConfig = field(default_factory=ApiConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _interpolate_value(value: str, overrides: dict[str, str] | None = None) -> str:
    """Replace ``${VAR}`` / ``${VAR:-default}`` in *value*."""

    def _replacer(match: re.Match) -> str:
        var_name = match.group(1)
        default = match.group(2)  # None when no ``:-`` present

        if overrides and var_name in overrides:
            return overrides[var_name]
        env_val = os.environ.get(var_name)
        if env_val is not None:
            return env_val
        if default is not None:
            return default

        raise ValueError(
            f"Required variable ${{{var_name}}} is not set in environment "
            f"or CLI overrides"
        )

    return _VAR_RE.sub(_replacer, value)


def _walk_and_interpolate(obj: Any, overrides: dict[str, str] | None = None) -> Any:
    """Recursively interpolate all string values in a JSON-like structure."""
    if isinstance(obj, str):
        return _interpolate_value(obj, overrides)
    if isinstance(obj, dict):
        return {k: _walk_and_interpolate(v, overrides) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_walk_and_interpolate(item, overrides) for item in obj]
    return obj


def _pick(cls: type, raw: dict[str, Any]) -> dict[str, Any]:
    """Keep only the keys *cls* declares (nested sections excluded)."""
    return {k: raw[k] for k in raw if k in cls.__dataclass_fields__ and not isinstance(raw[k], dict)}


def _dict_to_config(raw: dict[str, Any]) -> AppConfig:
    """Convert a raw dict into a typed :class:`AppConfig`."""
    api_raw = raw.get("api", {})
    output_raw = raw.get("output", {})
    logging_raw = raw.get("logging", {})
    log_file_raw = logging_raw.get("file", {})

    return AppConfig(
        api=ApiConfig(**_pick(ApiConfig, api_raw)),
        output=OutputConfig(**_pick(OutputConfig, output_raw)),
        logging=LoggingConfig(
            file=LogFileConfig(**_pick(LogFileConfig, log_file_raw)),
            **_pick(LoggingConfig, logging_raw),
        ),
    )


def default_config(overrides: dict[str, str] | None = None) -> AppConfig:
    """Build a config without a file: defaults plus ``OPENSKY_*`` variables."""
    return _dict_to_config(_walk_and_interpolate({
        "api": {
            "username": "${OPENSKY_USERNAME:-}",
            "password": "${OPENSKY_PASSWORD:-}",
        },
    }, overrides=overrides))


def load_config(
    path: str | Path,
    overrides: dict[str, str] | None = None,
    schema_path: str | Path | None = None,
) -> AppConfig:
    """Load, interpolate, validate, and return the application config.

    Parameters
    ----------
    path:
        Filesystem path to ``config.json``.
    overrides:
        CLI-supplied variable overrides.
    schema_path:
        Path to the JSON Schema file.  Defaults to
        ``config/config.schema.json`` relative to the project root.

    Returns
    -------
    AppConfig
        Fully resolved and validated configuration.

    Raises
    ------
    ValueError
        If a required ``${VAR}`` cannot be resolved.
    jsonschema.ValidationError
        If the config fails schema validation.
    """
    raw_bytes = Path(path).read_bytes()
    raw: dict[str, Any] = orjson.loads(raw_bytes)

    interpolated = _walk_and_interpolate(raw, overrides=overrides)

    sp = Path(schema_path) if schema_path else _SCHEMA_PATH
    if sp.exists():
        schema = orjson.loads(sp.read_bytes())
        jsonschema.validate(instance=interpolated, schema=schema)
        logger.debug("Config passed schema validation")
    else:
        logger.warning("Schema file not found at %s, skipping validation", sp)

    return _dict_to_config(interpolated)


def resolve_config(
    path: Optional[str | Path],
    overrides: dict[str, str] | None = None,
) -> AppConfig:
    """Load *path* when given, else fall back to :func:`default_config`."""
    if path is None:
        return default_config(overrides)
    return load_config(path, overrides=overrides)
