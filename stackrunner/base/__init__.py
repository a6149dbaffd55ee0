"""Abstract blueprints and core utilities.

Everything here is independent of CloudStack: the provider and compute
blueprints, configuration, the shared data model, exceptions and logging.
"""

from .compute import ComputeBlueprint
from .config import ProviderConfig, ResolvedIdentifiers, load_config
from .params import (
    BootstrapInstance,
    InstanceStatus,
    OSArch,
    OSType,
    ProviderInstance,
    RunnerApplicationDownload,
)
from .provider import ProviderBlueprint


__all__ = [
    "ComputeBlueprint",
    "ProviderBlueprint",
    "ProviderConfig",
    "ResolvedIdentifiers",
    "load_config",
    "BootstrapInstance",
    "InstanceStatus",
    "OSArch",
    "OSType",
    "ProviderInstance",
    "RunnerApplicationDownload",
]
