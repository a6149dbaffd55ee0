"""External provider blueprint: the operations the orchestrator invokes."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stackrunner.base.params import BootstrapInstance, ProviderInstance


class ProviderBlueprint(ABC):
    """Abstract interface every runner provider implements."""

    @abstractmethod
    def create_instance(self, bootstrap: BootstrapInstance) -> ProviderInstance:
        """Create a runner instance from a bootstrap request."""

    @abstractmethod
    def delete_instance(self, instance: str) -> None:
        """Delete an instance by ID or name. Missing instances are not an error."""

    @abstractmethod
    def get_instance(self, instance: str) -> ProviderInstance | None:
        """Return the instance, or ``None`` if it does not exist."""

    @abstractmethod
    def list_instances(self, pool_id: str) -> list[ProviderInstance]:
        """List the live instances of a pool."""

    @abstractmethod
    def remove_all_instances(self) -> None:
        """Remove every instance managed by this provider."""

    @abstractmethod
    def start(self, instance: str) -> None:
        """Start a stopped instance."""

    @abstractmethod
    def stop(self, instance: str, force: bool = False) -> None:
        """Stop an instance. Missing instances are not an error."""

    @abstractmethod
    def get_version(self) -> str:
        """Return the provider version."""

    @abstractmethod
    def get_supported_interface_versions(self) -> list[str]:
        """Return the orchestrator interface versions this provider speaks."""

    @abstractmethod
    def validate_pool_info(
        self, image: str, flavor: str, provider_config: str, extra_specs: str
    ) -> None:
        """Validate pool settings before any instance is created."""

    @abstractmethod
    def get_config_json_schema(self) -> str:
        """Return the JSON schema of the provider configuration file."""

    @abstractmethod
    def get_extra_specs_json_schema(self) -> str:
        """Return the JSON schema of the per-pool override document."""
