"""Mapping of CloudStack VM records onto :class:`ProviderInstance`."""

from __future__ import annotations

from typing import Any

from stackrunner.base.exceptions import ValidationError
from stackrunner.base.params import InstanceStatus, ProviderInstance

_RUNNING_STATES = frozenset({"running", "starting", "migrating", "restoring", "stopping"})
_STOPPED_STATES = frozenset({"stopped", "shutdown", "destroyed", "expunging"})

# VMs in these states are gone as far as the orchestrator is concerned.
GONE_STATES = frozenset({"destroyed", "expunging"})


def classify_state(raw_state: str | None) -> InstanceStatus:
    """Map a raw CloudStack VM state onto the canonical status (case-insensitive)."""
    state = (raw_state or "").lower()
    if state in _RUNNING_STATES:
        return InstanceStatus.RUNNING
    if state in _STOPPED_STATES:
        return InstanceStatus.STOPPED
    return InstanceStatus.UNKNOWN


def vm_to_provider_instance(vm: dict[str, Any] | None) -> ProviderInstance:
    """Build a :class:`ProviderInstance` from a ``listVirtualMachines`` record.

    The name comes from ``displayname``, falling back to the ``Name`` tag;
    OS type and arch come from the ``OSType`` / ``OSArch`` tags set at
    creation time.

    Raises:
        ValidationError: If the record is missing or has no ID.
    """
    if vm is None:
        raise ValidationError("nil virtual machine")
    vm_id = vm.get("id")
    if not vm_id:
        raise ValidationError("virtual machine has empty id")

    name = vm.get("displayname") or ""
    os_type = None
    os_arch = None
    for tag in vm.get("tags") or []:
        key, value = tag.get("key"), tag.get("value")
        if key == "Name" and not name:
            name = value or ""
        elif key == "OSType":
            os_type = value
        elif key == "OSArch":
            os_arch = value

    return ProviderInstance(
        provider_id=vm_id,
        name=name,
        os_type=os_type,
        os_arch=os_arch,
        status=classify_state(vm.get("state")),
    )


__all__ = ["GONE_STATES", "classify_state", "vm_to_provider_instance"]
