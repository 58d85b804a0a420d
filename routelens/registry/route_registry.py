"""
Adapters from route-registry structures to RouteGroup models.

The routing layer exposes its registrations as ``{basePath, router}`` pairs,
where ``router.stack`` holds layers and each routed layer carries
``route.path`` and ``route.methods`` (method name -> handled flag). These
helpers only read that structure; they never register or mutate routes.
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

from pydantic import ValidationError

from routelens.exceptions import RouteRegistryError
from routelens.schemas import RouteDef, RouteGroup

logger = logging.getLogger(__name__)


def _get(obj: Any, *names: str) -> Any:
    """Read the first present attribute or key among names."""
    for name in names:
        if isinstance(obj, Mapping):
            if name in obj:
                return obj[name]
        elif hasattr(obj, name):
            return getattr(obj, name)
    return None


def _handled_methods(methods: Any) -> List[str]:
    if isinstance(methods, Mapping):
        # Express keeps internal flags such as "_all" next to the verbs
        return [name.upper() for name, handled in methods.items() if handled and not name.startswith("_")]
    if isinstance(methods, (list, tuple)):
        return [str(name).upper() for name in methods]
    if methods is None:
        return []
    raise RouteRegistryError(f"Route methods must be a list or a mapping, got {type(methods).__name__}")


def route_defs_from_router(router: Any) -> List[RouteDef]:
    stack = _get(router, "stack") or []
    routes: List[RouteDef] = []
    for layer in stack:
        route = _get(layer, "route")
        if route is None:
            continue
        path = _get(route, "path")
        if not isinstance(path, str):
            continue
        routes.append(RouteDef(sub_path=path, methods=_handled_methods(_get(route, "methods"))))
    return routes


def route_groups_from_registry(registered: Iterable[Any]) -> List[RouteGroup]:
    """
    Convert ``getRegisteredRoutes()``-shaped entries into RouteGroups.

    Args:
        registered: Entries exposing ``basePath`` (or ``base_path``) and ``router``,
            as attributes or mapping keys

    Returns:
        One RouteGroup per entry, in registration order
    """
    groups: List[RouteGroup] = []
    for entry in registered:
        base_path = _get(entry, "basePath", "base_path")
        if not isinstance(base_path, str):
            raise RouteRegistryError(f"Registered route entry has no base path: {entry!r}")
        router = _get(entry, "router")
        groups.append(RouteGroup(base_path=base_path, routes=route_defs_from_router(router)))
    return groups


def _group_from_manifest_entry(entry: Any) -> RouteGroup:
    if not isinstance(entry, Mapping):
        raise RouteRegistryError(f"Manifest entries must be objects, got {type(entry).__name__}")
    if "router" in entry:
        return route_groups_from_registry([entry])[0]

    base_path = _get(entry, "basePath", "base_path")
    route_entries = entry.get("routes", [])
    if not isinstance(route_entries, list):
        raise RouteRegistryError(f"Routes under {base_path} must be a list, got {type(route_entries).__name__}")

    routes: List[RouteDef] = []
    for route in route_entries:
        if not isinstance(route, Mapping):
            raise RouteRegistryError(f"Route definitions must be objects under {base_path}")
        sub_path = _get(route, "subPath", "sub_path", "path")
        routes.append(RouteDef(sub_path=sub_path, methods=_handled_methods(route.get("methods"))))
    return RouteGroup(base_path=base_path, routes=routes)


def load_route_manifest(manifest_path: str, encoding: Optional[str] = "utf-8") -> List[RouteGroup]:
    """
    Load route groups from a JSON manifest.

    The manifest is a list of groups (or an object with a ``groups`` list).
    A group is either ``{"basePath", "routes": [{"path", "methods"}]}`` or the
    registry shape ``{"basePath", "router": {"stack": [...]}}``.

    Raises:
        RouteRegistryError: If the file cannot be read or does not describe route groups
    """
    try:
        data = json.loads(Path(manifest_path).read_text(encoding=encoding))
    except (OSError, ValueError) as e:
        raise RouteRegistryError(f"Cannot read route manifest {manifest_path}: {e}") from e

    if isinstance(data, Mapping):
        data = data.get("groups")
    if not isinstance(data, list):
        raise RouteRegistryError(f"Route manifest {manifest_path} must contain a list of route groups")

    try:
        groups = [_group_from_manifest_entry(entry) for entry in data]
    except ValidationError as e:
        raise RouteRegistryError(f"Invalid route manifest {manifest_path}: {e}") from e

    logger.debug(f"Loaded {len(groups)} route groups from {manifest_path}")
    return groups
