import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from routelens.introspection.body_schema_extractor import (
    PAYLOAD_EXPRESSIONS,
    extract_schema,
    isolate_function_body,
)
from routelens.introspection.controller_discovery import (
    API_PREFIX,
    CONTROLLER_SUFFIX,
    CONTROLLERS_DIR,
    discover_controllers,
)
from routelens.introspection.function_extractor import extract_function_names
from routelens.introspection.name_matcher import MatchStrategy, match_function
from routelens.schemas import (
    JSON_HEADERS,
    RouteDescriptor,
    RouteGroup,
    RouteInspection,
    SchemaOutcome,
)

logger = logging.getLogger(__name__)

METHODS_WITHOUT_BODY = {"GET", "DELETE"}
METHODS_WITH_JSON_HEADERS = {"POST", "PUT"}


class RouteLister:
    """
    Walks registered route groups and describes every route and method.

    Each call to inspect() or list() is an independent pass: the controller
    index, the controller texts and the function inventories are rebuilt from
    the filesystem every time. Failures while inferring one route's body are
    contained to that route and reported as a null body.

    Args:
        root_dir: Project root that holds the controllers directory
        controllers_dir: Controllers directory name under root_dir
        controller_suffix: Infix marking controller files (``.controller.``)
        api_prefix: Prefix under which controller keys are mounted
        payload_expressions: Expressions that denote the request payload
        strategies: Name-resolution cascade; the default cascade when None

    Example:
        lister = RouteLister("/srv/app")
        descriptors = lister.list(route_groups)
    """

    def __init__(
        self,
        root_dir: str,
        controllers_dir: str = CONTROLLERS_DIR,
        controller_suffix: str = CONTROLLER_SUFFIX,
        api_prefix: str = API_PREFIX,
        payload_expressions: Sequence[str] = PAYLOAD_EXPRESSIONS,
        strategies: Optional[Sequence[MatchStrategy]] = None,
    ):
        self.root_dir = root_dir
        self.controllers_dir = controllers_dir
        self.controller_suffix = controller_suffix
        self.api_prefix = api_prefix
        self.payload_expressions = tuple(payload_expressions)
        self.strategies = strategies

    def inspect(self, route_groups: Iterable[RouteGroup]) -> List[RouteInspection]:
        controller_index = discover_controllers(
            self.root_dir,
            controllers_dir=self.controllers_dir,
            suffix=self.controller_suffix,
            api_prefix=self.api_prefix,
        )

        inspections: List[RouteInspection] = []
        for group in route_groups:
            for route in group.routes:
                full_path = f"{group.base_path}{route.sub_path}"
                for method in route.methods:
                    inspections.append(self._inspect_route(full_path, method.upper(), controller_index))

        inferred = sum(1 for inspection in inspections if inspection.outcome == SchemaOutcome.INFERRED)
        logger.info(f"Listed {len(inspections)} routes, inferred {inferred} body schemas")
        return inspections

    def list(self, route_groups: Iterable[RouteGroup]) -> List[RouteDescriptor]:
        return [inspection.descriptor for inspection in self.inspect(route_groups)]

    def _inspect_route(self, full_path: str, method: str, controller_index: Dict[str, str]) -> RouteInspection:
        headers = dict(JSON_HEADERS) if method in METHODS_WITH_JSON_HEADERS else None

        def result(outcome: SchemaOutcome, body: Optional[Dict[str, str]] = None, **details) -> RouteInspection:
            return RouteInspection(
                descriptor=RouteDescriptor(path=full_path, method=method, body=body, headers=headers),
                outcome=outcome,
                **details,
            )

        if method in METHODS_WITHOUT_BODY:
            return result(SchemaOutcome.METHOD_WITHOUT_BODY)

        controller_path = find_controller(full_path, controller_index)
        if controller_path is None:
            logger.debug(f"{method} {full_path}: no controller registered for this path")
            return result(SchemaOutcome.NO_CONTROLLER)

        try:
            source_text = Path(controller_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"{method} {full_path}: cannot read controller {controller_path}: {e}")
            return result(SchemaOutcome.UNREADABLE_CONTROLLER, controller_path=controller_path)

        try:
            functions = extract_function_names(source_text)
            found = match_function(full_path, method, functions, strategies=self.strategies)
            if found is None:
                return result(SchemaOutcome.NO_FUNCTION_MATCH, controller_path=controller_path)

            details = {
                "controller_path": controller_path,
                "function_name": found.name,
                "match_tier": found.tier,
            }
            body = extract_schema(found.name, source_text, self.payload_expressions)
            if body is not None:
                return result(SchemaOutcome.INFERRED, body=body, **details)
            if isolate_function_body(found.name, source_text) is None:
                return result(SchemaOutcome.BODY_NOT_ISOLATED, **details)
            return result(SchemaOutcome.NO_FIELDS, **details)
        except Exception as e:
            logger.warning(f"{method} {full_path}: body inference failed: {e}", exc_info=True)
            return result(SchemaOutcome.ERROR, controller_path=controller_path)


def find_controller(full_path: str, controller_index: Dict[str, str]) -> Optional[str]:
    """First controller whose base path is a prefix of full_path."""
    for base_path, controller_path in controller_index.items():
        if full_path.startswith(base_path):
            return controller_path
    return None


def inspect_routes(route_groups: Iterable[RouteGroup], root_dir: str, **options) -> List[RouteInspection]:
    return RouteLister(root_dir, **options).inspect(route_groups)


def list_routes(route_groups: Iterable[RouteGroup], root_dir: str, **options) -> List[RouteDescriptor]:
    """Describe every registered route and method, inferring request bodies from controllers."""
    return RouteLister(root_dir, **options).list(route_groups)
