"""The ``routelens list`` command."""

import argparse
import json
import logging
import os
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from routelens.config import RouteLensConfig
from routelens.exceptions import RouteLensError
from routelens.registry.route_registry import load_route_manifest
from routelens.registry.source_scanner import scan_route_groups
from routelens.route_lister import RouteLister
from routelens.schemas import RouteGroup, RouteInspection
from routelens.schemas.route_schema import OPTIONAL_STRING

logger = logging.getLogger(__name__)


def add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("root", nargs="?", default=None, help="Project root (default: ROUTELENS_ROOT_DIR or .)")
    parser.add_argument(
        "--manifest",
        help="JSON file describing the registered route groups (default: scan the project's entry file)",
    )
    parser.add_argument("--entry", help="Entry file to scan, relative to the project root")
    parser.add_argument("--controllers-dir", dest="controllers_dir", help="Controllers directory under the root")
    parser.add_argument("--api-prefix", dest="api_prefix", help="Prefix under which controllers are mounted")
    parser.add_argument("--format", dest="output_format", choices=["json", "table"], help="Output format")
    parser.add_argument("--explain", action="store_true", help="Show how each body schema was obtained")
    parser.add_argument("--log-level", dest="log_level", help="Logging level (e.g. DEBUG, INFO)")


def build_config(args: argparse.Namespace) -> RouteLensConfig:
    """Environment configuration overridden by any options given on the command line."""
    config = RouteLensConfig.from_env()
    overrides = {
        "root_dir": args.root,
        "controllers_dir": args.controllers_dir,
        "api_prefix": args.api_prefix,
        "output_format": args.output_format,
        "log_level": args.log_level,
    }
    values = config.model_dump()
    values.update({key: value for key, value in overrides.items() if value is not None})
    return RouteLensConfig(**values)


def load_route_groups(config: RouteLensConfig, args: argparse.Namespace) -> List[RouteGroup]:
    if args.manifest:
        return load_route_manifest(args.manifest)
    return scan_route_groups(config.root_dir, entry_file=args.entry)


def format_body(body: Optional[Dict[str, str]]) -> str:
    if not body:
        return "-"
    return ", ".join(f"{name}?" if kind == OPTIONAL_STRING else name for name, kind in body.items())


def display_routes(inspections: List[RouteInspection], explain: bool = False) -> None:
    console = Console()
    table = Table(title="Registered routes")
    table.add_column("Method", style="bold")
    table.add_column("Path")
    table.add_column("Body")
    table.add_column("JSON", justify="center")
    if explain:
        table.add_column("Outcome")
        table.add_column("Handler")
        table.add_column("Tier")
        table.add_column("Controller")

    for inspection in inspections:
        descriptor = inspection.descriptor
        row = [
            descriptor.method,
            descriptor.path,
            format_body(descriptor.body),
            "yes" if descriptor.headers else "",
        ]
        if explain:
            row += [
                inspection.outcome.value,
                inspection.function_name or "",
                inspection.match_tier.value if inspection.match_tier else "",
                os.path.basename(inspection.controller_path) if inspection.controller_path else "",
            ]
        table.add_row(*row)

    console.print(table)


def render_json(inspections: List[RouteInspection], explain: bool = False) -> str:
    if explain:
        payload = [inspection.model_dump(mode="json") for inspection in inspections]
    else:
        payload = [inspection.descriptor.model_dump(mode="json") for inspection in inspections]
    return json.dumps(payload, indent=2)


def run(args: argparse.Namespace, configure_logging: Optional[Callable[[str], None]] = None) -> int:
    console = Console(stderr=True)
    try:
        config = build_config(args)
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red] {escape(str(e))}")
        return 2

    if configure_logging is not None:
        configure_logging(config.log_level)

    try:
        route_groups = load_route_groups(config, args)
    except RouteLensError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 2

    lister = RouteLister(
        config.root_dir,
        controllers_dir=config.controllers_dir,
        controller_suffix=config.controller_suffix,
        api_prefix=config.api_prefix,
    )
    inspections = lister.inspect(route_groups)

    if config.output_format == "table":
        display_routes(inspections, explain=args.explain)
    else:
        print(render_json(inspections, explain=args.explain))
    return 0
