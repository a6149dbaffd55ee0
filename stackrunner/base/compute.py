"""Compute (VM) lifecycle blueprint."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from stackrunner.spec.runner_spec import RunnerSpec


class ComputeBlueprint(ABC):
    """Abstract interface for runner VM lifecycle on a compute platform.

    Instances are identified either by platform ID or by display name.
    Fleet membership is carried in tags (controller ID and pool ID), which
    is the only thing used to scope listings.
    """

    @abstractmethod
    def create_instance(self, spec: RunnerSpec) -> str:
        """Deploy a VM for *spec*, tag it, and return its platform ID.

        Args:
            spec: Fully resolved runner spec.

        Returns:
            Instance ID.
        """

    @abstractmethod
    def find_instance(self, controller_id: str, identifier: str) -> dict[str, Any]:
        """Return the single VM matching *identifier*.

        Args:
            controller_id: When non-empty, name lookups only match VMs tagged
                with this controller.
            identifier: Platform ID or display name.

        Raises:
            NotFoundError: If nothing matches.
            AmbiguousMatchError: If several VMs share the name.
        """

    @abstractmethod
    def list_instances_by_pool(self, controller_id: str, pool_id: str) -> list[dict[str, Any]]:
        """List live VMs tagged with both *controller_id* and *pool_id*."""

    @abstractmethod
    def start_instance(self, identifier: str) -> None:
        """Start a stopped instance."""

    @abstractmethod
    def stop_instance(self, identifier: str, force: bool = False) -> None:
        """Stop an instance. Succeeds if the instance does not exist."""

    @abstractmethod
    def destroy_instance(self, identifier: str, expunge: bool = False) -> None:
        """Destroy an instance. Succeeds if the instance does not exist."""
