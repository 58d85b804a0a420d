"""
Schemas for registered routes and the descriptors produced from them.

RouteGroup and RouteDef mirror what the routing layer exposes. RouteDescriptor
is the output unit of a listing pass; RouteInspection carries the same
descriptor together with the reason its body came out the way it did.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

JSON_HEADERS: Dict[str, str] = {"Content-Type": "application/json"}

OPTIONAL_STRING = "string (optional)"
REQUIRED_STRING = "string"


class MatchTier(str, Enum):
    """Strategy that resolved a handler name."""

    EXACT = "exact"
    PATTERN = "pattern"
    FUZZY = "fuzzy"


class SchemaOutcome(str, Enum):
    """Why a route's body schema is present or null."""

    INFERRED = "inferred"
    METHOD_WITHOUT_BODY = "method_without_body"
    NO_CONTROLLER = "no_controller"
    UNREADABLE_CONTROLLER = "unreadable_controller"
    NO_FUNCTION_MATCH = "no_function_match"
    BODY_NOT_ISOLATED = "body_not_isolated"
    NO_FIELDS = "no_fields"
    ERROR = "error"


class RouteDef(BaseModel):
    """A single sub-route registered on a router and the methods it handles."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    sub_path: str = Field(alias="subPath", description="Path relative to the group's base path")
    methods: List[str] = Field(default_factory=list, description="HTTP methods in registration order")

    @field_validator("methods")
    @classmethod
    def normalize_methods(cls, v: List[str]) -> List[str]:
        seen: List[str] = []
        for method in v:
            upper = method.upper()
            if upper not in seen:
                seen.append(upper)
        return seen


class RouteGroup(BaseModel):
    """A base path and the routes one router unit registers under it."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    base_path: str = Field(alias="basePath", description="Mount point of the router, e.g. /api/auth")
    routes: List[RouteDef] = Field(default_factory=list)


class RouteDescriptor(BaseModel):
    """Documentation-ready description of one route and method."""

    path: str
    method: str
    body: Optional[Dict[str, str]] = None
    headers: Optional[Dict[str, str]] = None

    @field_validator("method")
    @classmethod
    def upper_method(cls, v: str) -> str:
        return v.upper()

    @field_validator("body")
    @classmethod
    def empty_body_is_null(cls, v: Optional[Dict[str, str]]) -> Optional[Dict[str, str]]:
        # An empty schema is never a valid inference result
        if not v:
            return None
        return v


class RouteInspection(BaseModel):
    """A route descriptor plus diagnostics about how its body was inferred."""

    descriptor: RouteDescriptor
    outcome: SchemaOutcome
    controller_path: Optional[str] = None
    function_name: Optional[str] = None
    match_tier: Optional[MatchTier] = None
