"""CloudStack provider implementation."""

from .client import is_not_found_error, new_client
from .compute import CONTROLLER_ID_TAG, POOL_ID_TAG, Compute
from .convert import classify_state, vm_to_provider_instance
from .names import NameResolver, is_identifier, resolve_all

__all__ = [
    "CONTROLLER_ID_TAG",
    "POOL_ID_TAG",
    "Compute",
    "NameResolver",
    "classify_state",
    "is_identifier",
    "is_not_found_error",
    "new_client",
    "resolve_all",
    "vm_to_provider_instance",
]
