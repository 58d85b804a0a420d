from .route_registry import load_route_manifest, route_groups_from_registry
from .source_scanner import scan_route_groups

__all__ = ["load_route_manifest", "route_groups_from_registry", "scan_route_groups"]
