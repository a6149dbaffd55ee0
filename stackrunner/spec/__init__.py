"""Resolution of bootstrap requests into deployable runner specs."""

from .extra_specs import (
    ExtraSpecs,
    NFSMount,
    get_extra_specs_json_schema,
    parse_extra_specs,
    validate_extra_specs,
)
from .runner_spec import RunnerSpec, SpecBuilder
from .tools import ToolFetch, default_tool_fetch
from .userdata import compose_user_data, generate_nfs_script

__all__ = [
    "ExtraSpecs",
    "NFSMount",
    "RunnerSpec",
    "SpecBuilder",
    "ToolFetch",
    "compose_user_data",
    "default_tool_fetch",
    "generate_nfs_script",
    "get_extra_specs_json_schema",
    "parse_extra_specs",
    "validate_extra_specs",
]
