"""Resolution of symbolic CloudStack resource names to UUIDs."""

from __future__ import annotations

import logging
import re
import threading
from typing import Any, Literal

from stackrunner.base.config import ProviderConfig, ResolvedIdentifiers
from stackrunner.base.exceptions import (
    AmbiguousMatchError,
    NotFoundError,
    ProviderError,
    ResolutionError,
)
from stackrunner.cloudstack.client import TRANSPORT_ERRORS, handle_error

logger = logging.getLogger("stackrunner")

ResourceKind = Literal["zone", "service_offering", "project", "template"]

_UUID_RE = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    re.IGNORECASE,
)

_resolve_lock = threading.Lock()


def is_identifier(value: str) -> bool:
    """Return True if *value* is a canonical 8-4-4-4-12 hex UUID."""
    return _UUID_RE.fullmatch(value) is not None


class NameResolver:
    """Turns zone / offering / project / template names into UUIDs.

    Values that already look like UUIDs are returned as-is without touching
    the API.

    Attributes:
        client: CloudStack API client.
    """

    def __init__(self, client: Any) -> None:
        self.client = client

    def resolve(
        self,
        kind: ResourceKind,
        value: str,
        *,
        zone_id: str | None = None,
        project_id: str | None = None,
    ) -> str:
        """Return the UUID for *value*.

        Args:
            kind: Resource kind to look up.
            value: UUID or symbolic name.
            zone_id: Zone scope for template lookups.
            project_id: Project scope for template lookups.

        Raises:
            NotFoundError: If no resource matches.
            AmbiguousMatchError: If several zones, offerings or projects match.
            PlatformError: On CloudStack API failure.
        """
        if is_identifier(value):
            return value

        lookups = {
            "zone": self._lookup_zone,
            "service_offering": self._lookup_service_offering,
            "project": self._lookup_project,
        }
        if kind == "template":
            matches = self._lookup_template(value, zone_id, project_id)
        elif kind in lookups:
            matches = lookups[kind](value)
        else:
            raise ValueError(f"Unknown resource kind: {kind}")

        if not matches:
            raise NotFoundError(f"No match found for {kind} '{value}'")
        if len(matches) > 1:
            if kind == "template":
                # First match in API order wins for templates.
                logger.debug(
                    "%d templates match '%s', using %s", len(matches), value, matches[0]["id"]
                )
            else:
                raise AmbiguousMatchError(f"Found more than one {kind} matching '{value}'")
        return matches[0]["id"]  # type: ignore[no-any-return]

    def _list(self, command: str, msg: str, **params: Any) -> list[dict[str, Any]]:
        try:
            return getattr(self.client, command)(fetch_list=True, **params)  # type: ignore[no-any-return]
        except TRANSPORT_ERRORS as e:
            handle_error(e, msg)

    def _lookup_zone(self, name: str) -> list[dict[str, Any]]:
        return self._list("listZones", f"Failed to look up zone '{name}'", name=name)

    def _lookup_service_offering(self, name: str) -> list[dict[str, Any]]:
        return self._list(
            "listServiceOfferings", f"Failed to look up service offering '{name}'", name=name
        )

    def _lookup_project(self, name: str) -> list[dict[str, Any]]:
        return self._list(
            "listProjects", f"Failed to look up project '{name}'", name=name, listall=True
        )

    def _lookup_template(
        self, name: str, zone_id: str | None, project_id: str | None
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"templatefilter": "executable", "name": name}
        if zone_id:
            params["zoneid"] = zone_id
        if project_id:
            params["projectid"] = project_id
        return self._list("listTemplates", f"Failed to look up template '{name}'", **params)


def resolve_all(config: ProviderConfig, client: Any) -> ResolvedIdentifiers:
    """Resolve the configured placement names once and store them on *config*.

    Order is zone, service offering, project, template; templates are looked
    up inside the resolved zone and project. Later calls for the same config
    return the stored result without any API call.

    Raises:
        ResolutionError: Naming the field and value that failed.
    """
    with _resolve_lock:
        if config.resolved is not None:
            return config.resolved

        resolver = NameResolver(client)

        def _resolve(field: str, kind: ResourceKind, value: str, **scope: Any) -> str:
            try:
                return resolver.resolve(kind, value, **scope)
            except ProviderError as e:
                raise ResolutionError(f"failed to resolve {field} '{value}': {e}") from e

        zone_id = _resolve("zone", "zone", config.zone)
        offering_id = _resolve("service_offering", "service_offering", config.service_offering)
        project_id = None
        if config.project:
            project_id = _resolve("project", "project", config.project)
        template_id = _resolve(
            "template", "template", config.template, zone_id=zone_id, project_id=project_id
        )

        resolved = ResolvedIdentifiers(
            zone_id=zone_id,
            service_offering_id=offering_id,
            template_id=template_id,
            project_id=project_id,
        )
        config.set_resolved(resolved)
        logger.debug("Resolved configuration names: %s", resolved.model_dump())
        return resolved


__all__ = ["NameResolver", "ResourceKind", "is_identifier", "resolve_all"]
