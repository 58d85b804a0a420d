"""
Pydantic schemas for route groups, route descriptors and inspection records.

These models describe the data that flows between the route registry
front ends, the introspection engine and the CLI.
"""

from .route_schema import (
    JSON_HEADERS,
    MatchTier,
    RouteDef,
    RouteDescriptor,
    RouteGroup,
    RouteInspection,
    SchemaOutcome,
)

__all__ = [
    "JSON_HEADERS",
    "MatchTier",
    "RouteDef",
    "RouteDescriptor",
    "RouteGroup",
    "RouteInspection",
    "SchemaOutcome",
]
