"""
Data exchanged with the orchestrator.

Field aliases follow the orchestrator's JSON wire format (some keys are
hyphenated); models accept either the alias or the field name.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class OSType(str, Enum):
    LINUX = "linux"
    WINDOWS = "windows"


class OSArch(str, Enum):
    AMD64 = "amd64"
    ARM64 = "arm64"
    ARM = "arm"


class InstanceStatus(str, Enum):
    """Canonical instance status reported back to the orchestrator."""

    RUNNING = "running"
    STOPPED = "stopped"
    UNKNOWN = "unknown"


class RunnerApplicationDownload(BaseModel):
    """One downloadable build of the runner agent."""

    model_config = ConfigDict(extra="ignore")

    os: str | None = None
    architecture: str | None = None
    download_url: str | None = None
    filename: str | None = None
    sha256_checksum: str | None = None
    temp_download_token: str | None = None


class UserDataOptions(BaseModel):
    model_config = ConfigDict(extra="ignore")

    disable_updates_on_boot: bool = False
    extra_packages: list[str] = Field(default_factory=list)
    enable_boot_debug: bool = False


class BootstrapInstance(BaseModel):
    """Request to create one runner instance.

    ``extra_specs`` is the raw per-request override document. It is kept
    unparsed here; :mod:`stackrunner.spec.extra_specs` validates and
    deserialises it.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = ""
    pool_id: str = ""
    os_type: OSType | None = None
    os_arch: OSArch | None = Field(default=None, alias="arch")
    tools: list[RunnerApplicationDownload] = Field(default_factory=list)
    repo_url: str = ""
    callback_url: str = Field(default="", alias="callback-url")
    metadata_url: str = Field(default="", alias="metadata-url")
    instance_token: str = Field(default="", alias="instance-token")
    ssh_keys: list[str] = Field(default_factory=list, alias="ssh-keys")
    ca_cert_bundle: str | None = Field(default=None, alias="ca-cert-bundle")
    github_runner_group: str = Field(default="", alias="github-runner-group")
    labels: list[str] = Field(default_factory=list)
    flavor: str = ""
    image: str = ""
    jit_config_enabled: bool = False
    user_data_options: UserDataOptions = Field(default_factory=UserDataOptions)
    extra_specs: dict[str, Any] | str | None = None


class ProviderInstance(BaseModel):
    """Canonical view of a CloudStack VM, recomputed on every query."""

    provider_id: str
    name: str = ""
    os_type: str | None = None
    os_arch: str | None = None
    status: InstanceStatus = InstanceStatus.UNKNOWN


__all__ = [
    "OSType",
    "OSArch",
    "InstanceStatus",
    "RunnerApplicationDownload",
    "UserDataOptions",
    "BootstrapInstance",
    "ProviderInstance",
]
