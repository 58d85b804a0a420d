from routelens.route_lister import RouteLister, inspect_routes, list_routes
from routelens.registry import load_route_manifest, route_groups_from_registry, scan_route_groups
from routelens.schemas import RouteDef, RouteDescriptor, RouteGroup, RouteInspection

__all__ = [
    "RouteLister",
    "inspect_routes",
    "list_routes",
    "load_route_manifest",
    "route_groups_from_registry",
    "scan_route_groups",
    "RouteDef",
    "RouteDescriptor",
    "RouteGroup",
    "RouteInspection",
]
