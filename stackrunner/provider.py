"""CloudStack external provider.

Glues configuration, name resolution, spec building and the compute
service together behind :class:`~stackrunner.base.provider.ProviderBlueprint`.
"""

from __future__ import annotations

import uuid
from pathlib import Path

from stackrunner import __version__
from stackrunner.base.compute import ComputeBlueprint
from stackrunner.base.config import ProviderConfig, get_config_json_schema, load_config
from stackrunner.base.exceptions import NotFoundError, ProviderError
from stackrunner.base.logger import sr_logger
from stackrunner.base.params import BootstrapInstance, InstanceStatus, ProviderInstance
from stackrunner.base.provider import ProviderBlueprint
from stackrunner.cloudstack.client import new_client
from stackrunner.cloudstack.compute import Compute
from stackrunner.cloudstack.convert import vm_to_provider_instance
from stackrunner.cloudstack.names import resolve_all
from stackrunner.spec.extra_specs import get_extra_specs_json_schema, validate_extra_specs
from stackrunner.spec.runner_spec import SpecBuilder
from stackrunner.spec.tools import ToolFetch, default_tool_fetch

SUPPORTED_INTERFACE_VERSIONS = ["v0.1.0", "v0.1.1"]


class CloudStackProvider(ProviderBlueprint):
    """Runner provider backed by Apache CloudStack.

    Attributes:
        config: Provider configuration with resolved identifiers.
        controller_id: ID of the orchestrator controller; tags every VM.
        compute: VM lifecycle service.
        spec_builder: Turns bootstrap requests into runner specs.
        log: Logger bound to this controller and to one request ID, so every
            record of an invocation can be correlated.
    """

    def __init__(
        self,
        config: ProviderConfig,
        controller_id: str,
        compute: ComputeBlueprint | None = None,
        tool_fetch: ToolFetch = default_tool_fetch,
    ) -> None:
        self.config = config
        self.controller_id = controller_id
        self.compute = compute if compute is not None else Compute(config)
        self.spec_builder = SpecBuilder(config, tool_fetch=tool_fetch)
        self.log = sr_logger.bind(controller_id=controller_id, request_id=uuid.uuid4().hex[:12])

    @classmethod
    def from_config_file(cls, path: str | Path, controller_id: str) -> CloudStackProvider:
        """Load the config at *path*, resolve its names and build a provider.

        Raises:
            ConfigError: If the config is unreadable or incomplete.
            ResolutionError: If a configured name cannot be resolved.
        """
        config = load_config(path)
        client = new_client(config)
        resolve_all(config, client)
        return cls(config, controller_id, compute=Compute(config, client=client))

    def create_instance(self, bootstrap: BootstrapInstance) -> ProviderInstance:
        ctx = {
            "operation": "create_instance",
            "pool_id": bootstrap.pool_id,
            "instance": bootstrap.name,
        }
        self.log.debug("Creating instance", **ctx)
        try:
            spec = self.spec_builder.build(bootstrap, self.controller_id)
            instance_id = self.compute.create_instance(spec)
        except ProviderError:
            self.log.error("Failed to create instance", exc_info=True, **ctx)
            raise
        self.log.info(f"Created VM {instance_id}", **ctx)
        return ProviderInstance(
            provider_id=instance_id,
            name=bootstrap.name,
            os_type=bootstrap.os_type.value if bootstrap.os_type else None,
            os_arch=bootstrap.os_arch.value if bootstrap.os_arch else None,
            status=InstanceStatus.RUNNING,
        )

    def delete_instance(self, instance: str) -> None:
        ctx = {"operation": "delete_instance", "instance": instance}
        self.log.debug(f"Deleting instance (expunge={self.config.expunge})", **ctx)
        try:
            self.compute.destroy_instance(instance, expunge=self.config.expunge)
        except ProviderError:
            self.log.error("Failed to delete instance", exc_info=True, **ctx)
            raise
        self.log.info("Instance deleted", **ctx)

    def get_instance(self, instance: str) -> ProviderInstance | None:
        ctx = {"operation": "get_instance", "instance": instance}
        try:
            vm = self.compute.find_instance(self.controller_id, instance)
        except NotFoundError:
            self.log.debug("Instance not found", **ctx)
            return None
        result = vm_to_provider_instance(vm)
        self.log.debug(f"Found instance {result.provider_id} ({result.status.value})", **ctx)
        return result

    def list_instances(self, pool_id: str) -> list[ProviderInstance]:
        ctx = {"operation": "list_instances", "pool_id": pool_id}
        try:
            vms = self.compute.list_instances_by_pool(self.controller_id, pool_id)
        except ProviderError:
            self.log.error("Failed to list instances", exc_info=True, **ctx)
            raise
        instances = [vm_to_provider_instance(vm) for vm in vms]
        self.log.debug(f"Listed {len(instances)} instances", **ctx)
        return instances

    def remove_all_instances(self) -> None:
        # Instances are removed one by one through delete_instance, per pool.
        return None

    def start(self, instance: str) -> None:
        self.compute.start_instance(instance)

    def stop(self, instance: str, force: bool = False) -> None:
        self.compute.stop_instance(instance, force=force)

    def get_version(self) -> str:
        return __version__

    def get_supported_interface_versions(self) -> list[str]:
        return list(SUPPORTED_INTERFACE_VERSIONS)

    def validate_pool_info(
        self, image: str, flavor: str, provider_config: str, extra_specs: str
    ) -> None:
        """Only the override document is checked; image and flavor come from it or the config."""
        if extra_specs:
            validate_extra_specs(extra_specs)

    def get_config_json_schema(self) -> str:
        return get_config_json_schema()

    def get_extra_specs_json_schema(self) -> str:
        return get_extra_specs_json_schema()
