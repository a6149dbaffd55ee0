"""
Provider configuration.

The configuration file is TOML. Each placement field (zone, service offering,
template, project) accepts either a CloudStack UUID or a symbolic name; names
are resolved once, after loading, by
:func:`stackrunner.cloudstack.names.resolve_all` and the resulting IDs are
kept on the config for the rest of the process.

Example::

    api_url = "https://cloudstack.example.com/client/api"
    api_key = "..."
    secret  = "..."
    verify_ssl = true
    zone = "us-west-1"
    service_offering = "2-4096"
    template = "runner-ubuntu-2404"
    project = "infra"          # optional
    async_timeout = "20m"      # optional, default 15m
"""

from __future__ import annotations

import json
import os
import re
import tomllib
from pathlib import Path
from typing import Any

import pydantic
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator

from stackrunner.base.exceptions import ConfigError

DEFAULT_ASYNC_TIMEOUT = 15 * 60

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ns|us|µs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

# Checked in this order so the first missing field is the one reported.
_REQUIRED_FIELDS = ("api_url", "api_key", "secret", "zone", "service_offering", "template")


def parse_duration(text: str) -> float:
    """Parse a duration such as ``15m``, ``1h30m`` or ``-45s`` into seconds.

    Raises:
        ValueError: If *text* is not a valid duration.
    """
    text = text.strip()
    if text in ("0", ""):
        return 0.0
    sign = 1.0
    if text[0] in "-+":
        sign = -1.0 if text[0] == "-" else 1.0
        text = text[1:]
    if text == "0":
        return 0.0
    if not text:
        raise ValueError("invalid duration: missing value after sign")
    pos = 0
    total = 0.0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos != len(text):
        raise ValueError(f"invalid duration {text!r}")
    return sign * total


class ResolvedIdentifiers(BaseModel):
    """Platform IDs for the configured placement resources."""

    model_config = ConfigDict(frozen=True)

    zone_id: str
    service_offering_id: str
    template_id: str
    project_id: str | None = None


class ProviderConfig(BaseModel):
    """CloudStack provider configuration.

    Credentials missing from the file are read from ``CLOUDSTACK_ENDPOINT``,
    ``CLOUDSTACK_KEY`` and ``CLOUDSTACK_SECRET``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    api_url: str = Field(description="CloudStack API URL")
    api_key: str = Field(description="CloudStack API key")
    secret: str = Field(description="CloudStack API secret")
    verify_ssl: bool = Field(default=False, description="Verify SSL certificates (default: false)")
    zone: str = Field(description="CloudStack zone name or UUID")
    service_offering: str = Field(description="Compute offering name or UUID")
    template: str = Field(description="VM template name or UUID")
    project: str | None = Field(
        default=None, description="CloudStack project name or UUID (optional)"
    )
    ssh_key_name: str | None = Field(default=None, description="SSH keypair name (optional)")
    async_timeout: str = Field(
        default="", description="Async API call timeout (e.g. 15m - default: 15m)"
    )
    expunge: bool = Field(
        default=False, description="Expunge VMs immediately on deletion (default: false)"
    )

    _resolved: ResolvedIdentifiers | None = PrivateAttr(default=None)

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Fall back to environment variables for missing credentials."""
        env_map = {
            "api_url": "CLOUDSTACK_ENDPOINT",
            "api_key": "CLOUDSTACK_KEY",
            "secret": "CLOUDSTACK_SECRET",
        }
        values = dict(values)
        for field, env_var in env_map.items():
            if not values.get(field) and os.environ.get(env_var):
                values[field] = os.environ[env_var]
        return values

    @field_validator("async_timeout", mode="before")
    @classmethod
    def check_async_timeout(cls, v: Any) -> Any:
        if isinstance(v, bool):
            return v
        if isinstance(v, (int, float)):
            return f"{v}s"
        if isinstance(v, str):
            parse_duration(v)
        return v

    def validate_required(self) -> None:
        """Raise :class:`ConfigError` naming the first empty required field."""
        for field in _REQUIRED_FIELDS:
            if not getattr(self, field):
                raise ConfigError(f"missing {field}")

    @property
    def async_timeout_seconds(self) -> int:
        seconds = parse_duration(self.async_timeout)
        if seconds <= 0:
            return DEFAULT_ASYNC_TIMEOUT
        return max(int(seconds), 1)

    # -- resolved identifiers ------------------------------------------

    @property
    def resolved(self) -> ResolvedIdentifiers | None:
        return self._resolved

    def set_resolved(self, resolved: ResolvedIdentifiers) -> None:
        """Attach resolved IDs. Allowed exactly once per config."""
        if self._resolved is not None:
            raise ConfigError("configuration names are already resolved")
        self._resolved = resolved

    def _require_resolved(self) -> ResolvedIdentifiers:
        if self._resolved is None:
            raise ConfigError("configuration names have not been resolved")
        return self._resolved

    @property
    def zone_id(self) -> str:
        return self._require_resolved().zone_id

    @property
    def service_offering_id(self) -> str:
        return self._require_resolved().service_offering_id

    @property
    def template_id(self) -> str:
        return self._require_resolved().template_id

    @property
    def project_id(self) -> str | None:
        return self._require_resolved().project_id


def load_config(path: str | Path) -> ProviderConfig:
    """Load and validate the provider configuration file.

    Names are not resolved here; see
    :func:`stackrunner.cloudstack.names.resolve_all`.

    Raises:
        ConfigError: If the file cannot be read or decoded, has unknown keys,
            or leaves a required field empty.
    """
    path = Path(path)
    try:
        with path.open("rb") as f:
            raw = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"error decoding config {path}: {e}") from e

    try:
        cfg = ProviderConfig.model_validate(raw)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "config"
        if first["type"] == "missing":
            raise ConfigError(f"missing {field}") from e
        raise ConfigError(f"invalid {field}: {first['msg']}") from e

    cfg.validate_required()
    return cfg


def get_config_json_schema() -> str:
    """Return the JSON schema of the configuration document."""
    return json.dumps(ProviderConfig.model_json_schema())


__all__ = [
    "DEFAULT_ASYNC_TIMEOUT",
    "ProviderConfig",
    "ResolvedIdentifiers",
    "get_config_json_schema",
    "load_config",
    "parse_duration",
]
