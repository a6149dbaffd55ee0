"""CloudStack implementation of the Compute blueprint."""

from __future__ import annotations

from typing import Any

from stackrunner.base.compute import ComputeBlueprint
from stackrunner.base.config import ProviderConfig
from stackrunner.base.exceptions import (
    AmbiguousMatchError,
    NotFoundError,
    PlatformError,
    ValidationError,
)
from stackrunner.cloudstack.client import (
    TRANSPORT_ERRORS,
    handle_error,
    is_not_found_error,
    new_client,
)
from stackrunner.cloudstack.convert import GONE_STATES
from stackrunner.cloudstack.names import is_identifier
from stackrunner.spec.runner_spec import RunnerSpec
from stackrunner.spec.userdata import compose_user_data

CONTROLLER_ID_TAG = "GARM_CONTROLLER_ID"
POOL_ID_TAG = "GARM_POOL_ID"

_RESOURCE_TYPE = "UserVm"


def _tag_list(tags: dict[str, str]) -> list[dict[str, str]]:
    return [{"key": k, "value": v} for k, v in tags.items()]


class Compute(ComputeBlueprint):
    """CloudStack virtual machine service.

    Async API calls (deploy, tag, start, stop, destroy) block until the
    CloudStack job finishes, bounded by the configured async timeout.

    Attributes:
        config: Provider configuration with resolved identifiers.
        client: ``cs.CloudStack`` API client.
    """

    def __init__(self, config: ProviderConfig, client: Any = None) -> None:
        """Initialize the CloudStack client.

        Args:
            config: Provider configuration.
            client: Pre-built API client; one is created from *config* if
                omitted.
        """
        self.config = config
        self.client = client if client is not None else new_client(config)

    @property
    def _project_id(self) -> str | None:
        resolved = self.config.resolved
        return resolved.project_id if resolved is not None else None

    def _list_vms(self, msg: str, **params: Any) -> list[dict[str, Any]]:
        params["listall"] = True
        if self._project_id:
            params["projectid"] = self._project_id
        try:
            return self.client.listVirtualMachines(fetch_list=True, **params)  # type: ignore[no-any-return]
        except TRANSPORT_ERRORS as e:
            handle_error(e, msg)

    def create_instance(self, spec: RunnerSpec) -> str:
        """Deploy a CloudStack VM for *spec* and tag it.

        The VM is tagged with the controller ID, pool ID, name, OS type and
        OS arch. A VM that deployed but could not be tagged is reported as a
        failure.

        Returns:
            Instance ID.

        Raises:
            ValidationError: If user data cannot be composed.
            PlatformError: If deployment or tagging fails.
        """
        bootstrap = spec.bootstrap
        user_data = compose_user_data(spec)

        params: dict[str, Any] = {
            "serviceofferingid": spec.service_offering_id,
            "templateid": spec.template_id,
            "zoneid": spec.zone_id,
            "name": bootstrap.name,
            "displayname": bootstrap.name,
            "userdata": user_data,
        }
        if spec.network_ids:
            params["networkids"] = ",".join(spec.network_ids)
        if spec.ssh_key_name:
            params["keypair"] = spec.ssh_key_name
        if spec.project_id:
            params["projectid"] = spec.project_id

        try:
            resp = self.client.deployVirtualMachine(fetch_result=True, **params)
        except TRANSPORT_ERRORS as e:
            handle_error(e, f"Failed to deploy virtual machine '{bootstrap.name}'")

        vm = resp.get("virtualmachine", resp) if resp else {}
        instance_id = vm.get("id")
        if not instance_id:
            raise PlatformError(f"Empty VM id in deploy response for '{bootstrap.name}'")

        tags = {
            CONTROLLER_ID_TAG: spec.controller_id,
            POOL_ID_TAG: bootstrap.pool_id,
            "Name": bootstrap.name,
            "OSType": bootstrap.os_type.value if bootstrap.os_type else "",
            "OSArch": bootstrap.os_arch.value if bootstrap.os_arch else "",
        }
        try:
            self.client.createTags(
                resourceids=instance_id,
                resourcetype=_RESOURCE_TYPE,
                tags=_tag_list(tags),
                fetch_result=True,
            )
        except TRANSPORT_ERRORS as e:
            handle_error(e, f"Failed to tag VM '{instance_id}'")
        return instance_id  # type: ignore[no-any-return]

    def find_instance(self, controller_id: str, identifier: str) -> dict[str, Any]:
        """Find one VM by ID, or by display name within the controller's tags.

        Args:
            controller_id: Restrict name lookups to this controller's VMs;
                ignored when empty.
            identifier: CloudStack VM ID or display name.

        Raises:
            ValidationError: If *identifier* is blank.
            NotFoundError: If no VM matches.
            AmbiguousMatchError: If more than one VM has this name.
            PlatformError: On CloudStack API failure.
        """
        if not identifier.strip():
            raise ValidationError("empty identifier")

        if is_identifier(identifier):
            try:
                vms = self._list_vms(f"Failed to get instance '{identifier}'", id=identifier)
            except PlatformError as e:
                # Unknown UUIDs are reported as an API error, not an empty list.
                if is_not_found_error(e):
                    raise NotFoundError(f"No such instance '{identifier}'") from e
                raise
            if not vms:
                raise NotFoundError(f"No such instance '{identifier}'")
            return vms[0]

        params: dict[str, Any] = {"name": identifier}
        if controller_id:
            params["tags"] = _tag_list({CONTROLLER_ID_TAG: controller_id})
        vms = self._list_vms("Failed to list instances", **params)
        if not vms:
            raise NotFoundError(f"No such instance '{identifier}'")
        if len(vms) > 1:
            raise AmbiguousMatchError(
                f"Found more than one instance with name '{identifier}'"
            )
        return vms[0]

    def list_instances_by_pool(self, controller_id: str, pool_id: str) -> list[dict[str, Any]]:
        """List the pool's VMs, skipping destroyed and expunging ones.

        Raises:
            PlatformError: On CloudStack API failure.
        """
        tags = _tag_list({CONTROLLER_ID_TAG: controller_id, POOL_ID_TAG: pool_id})
        vms = self._list_vms("Failed to list instances", tags=tags)
        return [
            vm
            for vm in vms
            if vm is not None and (vm.get("state") or "").lower() not in GONE_STATES
        ]

    def start_instance(self, identifier: str) -> None:
        """Start a stopped VM.

        Raises:
            NotFoundError: If the VM does not exist.
            PlatformError: On CloudStack API failure.
        """
        vm = self.find_instance("", identifier)
        try:
            self.client.startVirtualMachine(id=vm["id"], fetch_result=True)
        except TRANSPORT_ERRORS as e:
            handle_error(e, f"Failed to start instance '{identifier}'")

    def stop_instance(self, identifier: str, force: bool = False) -> None:
        """Stop a VM. A VM that no longer exists counts as stopped.

        Raises:
            AmbiguousMatchError: If more than one VM has this name.
            PlatformError: On CloudStack API failure.
        """
        try:
            vm = self.find_instance("", identifier)
        except NotFoundError:
            return
        try:
            self.client.stopVirtualMachine(id=vm["id"], forced=force, fetch_result=True)
        except TRANSPORT_ERRORS as e:
            if is_not_found_error(e):
                return
            handle_error(e, f"Failed to stop instance '{identifier}'")

    def destroy_instance(self, identifier: str, expunge: bool = False) -> None:
        """Destroy a VM. A VM that no longer exists counts as destroyed.

        Args:
            identifier: CloudStack VM ID or display name.
            expunge: Delete permanently instead of leaving it in the
                ``Destroyed`` state.

        Raises:
            AmbiguousMatchError: If more than one VM has this name.
            PlatformError: On CloudStack API failure.
        """
        try:
            vm = self.find_instance("", identifier)
        except NotFoundError:
            return
        try:
            self.client.destroyVirtualMachine(id=vm["id"], expunge=expunge, fetch_result=True)
        except TRANSPORT_ERRORS as e:
            if is_not_found_error(e):
                return
            handle_error(e, f"Failed to destroy instance '{identifier}'")
