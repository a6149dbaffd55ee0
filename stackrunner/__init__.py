"""Stackrunner: ephemeral CI runner provider for Apache CloudStack.

Resolves bootstrap requests from the runner orchestrator into CloudStack
VM deployments and manages their lifecycle::

    from stackrunner import CloudStackProvider

    provider = CloudStackProvider.from_config_file("cloudstack.toml", controller_id)
    instance = provider.create_instance(bootstrap)
"""

__version__ = "0.1.0"

from .base import (  # noqa: E402
    BootstrapInstance,
    ComputeBlueprint,
    InstanceStatus,
    ProviderBlueprint,
    ProviderConfig,
    ProviderInstance,
    load_config,
)
from .provider import CloudStackProvider  # noqa: E402

__all__ = [
    "__version__",
    "BootstrapInstance",
    "CloudStackProvider",
    "ComputeBlueprint",
    "InstanceStatus",
    "ProviderBlueprint",
    "ProviderConfig",
    "ProviderInstance",
    "load_config",
]
