"""Stackrunner CLI: the executable the runner orchestrator invokes.

The command and every option fall back to the environment variables the
orchestrator sets for external providers, so the same binary works when
called by hand or with no arguments at all::

    stackrunner --config cloudstack.toml --controller-id c1 list-instances --pool-id p1
    GARM_PROVIDER_CONFIG_FILE=cloudstack.toml stackrunner create-instance < bootstrap.json
    GARM_COMMAND=CreateInstance GARM_PROVIDER_CONFIG_FILE=cloudstack.toml stackrunner < bootstrap.json
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any

from stackrunner.base.exceptions import ProviderError

COMMANDS = [
    "create-instance",
    "delete-instance",
    "get-instance",
    "list-instances",
    "remove-all-instances",
    "start",
    "stop",
    "get-version",
    "get-supported-interface-versions",
    "validate-pool-info",
    "get-config-json-schema",
    "get-extra-specs-json-schema",
]

# Orchestrator names (``CreateInstance``, ``GetConfigJSONSchema``) map onto these.
_COMMANDS_BY_KEY = {c.replace("-", ""): c for c in COMMANDS}


def _normalize_command(value: str | None) -> str | None:
    if not value:
        return None
    return _COMMANDS_BY_KEY.get(value.replace("-", "").replace("_", "").lower(), value)


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ``stackrunner`` CLI.

    Returns:
        Configured :class:`~argparse.ArgumentParser`.
    """
    env = os.environ.get
    parser = argparse.ArgumentParser(
        prog="stackrunner",
        description="CloudStack runner provider",
    )
    parser.add_argument(
        "command",
        nargs="?",
        type=_normalize_command,
        choices=COMMANDS,
        default=env("GARM_COMMAND") or None,
        help="Provider operation to perform (default: $GARM_COMMAND)",
    )
    parser.add_argument(
        "--config", "-c",
        default=env("GARM_PROVIDER_CONFIG_FILE"),
        help="Path to the provider TOML configuration",
    )
    parser.add_argument(
        "--controller-id",
        default=env("GARM_CONTROLLER_ID", ""),
        help="Orchestrator controller ID",
    )
    parser.add_argument(
        "--instance", "-i",
        default=env("GARM_INSTANCE_ID"),
        help="Instance ID or name",
    )
    parser.add_argument(
        "--pool-id", "-p",
        default=env("GARM_POOL_ID"),
        help="Pool ID",
    )
    parser.add_argument(
        "--extra-specs",
        default=env("GARM_POOL_EXTRASPECS", ""),
        help="Override document (JSON) for validate-pool-info",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Force stop",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def _require(value: str | None, flag: str) -> str:
    if not value:
        raise ProviderError(f"{flag} is required for this command")
    return value


def _run(ns: argparse.Namespace) -> Any:
    """Execute the parsed command and return its printable result."""
    from stackrunner import __version__
    from stackrunner.base.config import get_config_json_schema
    from stackrunner.base.params import BootstrapInstance
    from stackrunner.provider import SUPPORTED_INTERFACE_VERSIONS, CloudStackProvider
    from stackrunner.spec.extra_specs import get_extra_specs_json_schema

    if ns.command == "get-version":
        return __version__
    if ns.command == "get-supported-interface-versions":
        return list(SUPPORTED_INTERFACE_VERSIONS)
    if ns.command == "get-config-json-schema":
        return json.loads(get_config_json_schema())
    if ns.command == "get-extra-specs-json-schema":
        return json.loads(get_extra_specs_json_schema())

    provider = CloudStackProvider.from_config_file(_require(ns.config, "--config"), ns.controller_id)

    if ns.command == "create-instance":
        bootstrap = BootstrapInstance.model_validate_json(sys.stdin.read())
        return provider.create_instance(bootstrap).model_dump(mode="json")
    if ns.command == "delete-instance":
        return provider.delete_instance(_require(ns.instance, "--instance"))
    if ns.command == "get-instance":
        inst = provider.get_instance(_require(ns.instance, "--instance"))
        return inst.model_dump(mode="json") if inst is not None else {}
    if ns.command == "list-instances":
        pool_id = _require(ns.pool_id, "--pool-id")
        return [inst.model_dump(mode="json") for inst in provider.list_instances(pool_id)]
    if ns.command == "remove-all-instances":
        return provider.remove_all_instances()
    if ns.command == "start":
        return provider.start(_require(ns.instance, "--instance"))
    if ns.command == "stop":
        return provider.stop(_require(ns.instance, "--instance"), force=ns.force)
    if ns.command == "validate-pool-info":
        return provider.validate_pool_info("", "", "", ns.extra_specs)
    raise ProviderError(f"Unknown command '{ns.command}'")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Results are printed to stdout as JSON (dicts/lists) or plain text.
    Failures print to stderr and exit with status 1.

    Args:
        argv: Optional argument list (defaults to ``sys.argv``).
    """
    parser = _build_parser()
    ns = parser.parse_args(argv)
    if ns.command is None:
        parser.error("a command is required (or set GARM_COMMAND)")

    if ns.log_level:
        from stackrunner.base.logger import sr_logger

        sr_logger.set_level(ns.log_level)

    try:
        result = _run(ns)
    except ProviderError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        # Malformed bootstrap JSON on stdin.
        print(f"Invalid input: {e}", file=sys.stderr)
        sys.exit(1)

    if result is None:
        return
    if isinstance(result, (dict, list)):
        print(json.dumps(result, indent=2, default=str))
    else:
        print(result)


if __name__ == "__main__":
    main()
