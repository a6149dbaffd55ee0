"""Fully resolved deployment spec for one CloudStack VM."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from stackrunner.base.config import ProviderConfig
from stackrunner.base.exceptions import ProviderError, ValidationError
from stackrunner.base.params import BootstrapInstance, RunnerApplicationDownload
from stackrunner.spec.extra_specs import ExtraSpecs, NFSMount, parse_extra_specs
from stackrunner.spec.tools import ToolFetch, default_tool_fetch


class RunnerSpec(BaseModel):
    """Everything needed to deploy and bootstrap one runner VM.

    Instances are immutable; :meth:`merge_extra_specs` returns a new spec.
    """

    model_config = ConfigDict(frozen=True)

    zone_id: str = ""
    service_offering_id: str = ""
    template_id: str = ""
    project_id: str | None = None
    network_ids: list[str] = Field(default_factory=list)
    ssh_key_name: str | None = None
    disable_updates: bool = False
    enable_boot_debug: bool = False
    extra_packages: list[str] = Field(default_factory=list)
    nfs_mounts: list[NFSMount] = Field(default_factory=list)
    runner_install_template: str | None = None
    pre_install_scripts: dict[str, str] = Field(default_factory=dict)
    extra_context: dict[str, str] = Field(default_factory=dict)
    tools: RunnerApplicationDownload = Field(default_factory=RunnerApplicationDownload)
    bootstrap: BootstrapInstance = Field(default_factory=BootstrapInstance)
    controller_id: str = ""

    def merge_extra_specs(self, extra: ExtraSpecs | None) -> RunnerSpec:
        """Return a copy with *extra* applied on top.

        Strings override only when present and non-empty, lists only when
        non-empty, booleans whenever present.
        """
        if extra is None:
            return self
        update: dict[str, Any] = {}
        for field in ("zone_id", "service_offering_id", "template_id", "ssh_key_name", "project_id"):
            value = getattr(extra, field)
            if value:
                update[field] = value
        for field in ("network_ids", "extra_packages", "nfs_mounts"):
            value = getattr(extra, field)
            if value:
                update[field] = list(value)
        for field in ("disable_updates", "enable_boot_debug"):
            value = getattr(extra, field)
            if value is not None:
                update[field] = value
        if extra.runner_install_template:
            update["runner_install_template"] = extra.runner_install_template
        if extra.pre_install_scripts:
            update["pre_install_scripts"] = dict(extra.pre_install_scripts)
        if extra.extra_context:
            update["extra_context"] = dict(extra.extra_context)
        return self.model_copy(update=update)

    def validate_spec(self) -> None:
        """Raise :class:`ValidationError` if a required field is empty."""
        if not self.zone_id:
            raise ValidationError("missing zone_id")
        if not self.service_offering_id:
            raise ValidationError("missing service_offering_id")
        if not self.template_id:
            raise ValidationError("missing template_id")
        if not self.bootstrap.name:
            raise ValidationError("missing bootstrap params")


class SpecBuilder:
    """Builds :class:`RunnerSpec` objects from a resolved provider config.

    Attributes:
        config: Provider configuration with resolved identifiers.
        tool_fetch: Picks the runner download for the instance's OS/arch.
    """

    def __init__(self, config: ProviderConfig, tool_fetch: ToolFetch = default_tool_fetch) -> None:
        self.config = config
        self.tool_fetch = tool_fetch

    def build(self, bootstrap: BootstrapInstance, controller_id: str) -> RunnerSpec:
        """Resolve *bootstrap* into a validated :class:`RunnerSpec`.

        Raises:
            ValidationError: If no tools match, the override document is
                invalid, or the merged spec is incomplete.
        """
        try:
            tools = self.tool_fetch(bootstrap.os_type, bootstrap.os_arch, bootstrap.tools)
        except ProviderError as e:
            raise ValidationError(f"failed to get tools: {e}") from e

        try:
            extra = parse_extra_specs(bootstrap.extra_specs)
        except ValidationError as e:
            raise ValidationError(f"error loading extra specs: {e}") from e

        options = bootstrap.user_data_options
        spec = RunnerSpec(
            zone_id=self.config.zone_id,
            service_offering_id=self.config.service_offering_id,
            template_id=self.config.template_id,
            project_id=self.config.project_id,
            ssh_key_name=self.config.ssh_key_name,
            disable_updates=options.disable_updates_on_boot,
            enable_boot_debug=options.enable_boot_debug,
            extra_packages=list(options.extra_packages),
            tools=tools,
            bootstrap=bootstrap,
            controller_id=controller_id,
        ).merge_extra_specs(extra)

        try:
            spec.validate_spec()
        except ValidationError as e:
            raise ValidationError(f"error validating spec: {e}") from e
        return spec


__all__ = ["RunnerSpec", "SpecBuilder"]
