"""Command line entry point for routelens."""

import argparse
import logging
import sys
from typing import List, Optional

from routelens.cli.commands import list_routes


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="routelens",
        description="Describe an API's routes and infer request bodies from controller source",
    )
    subparsers = parser.add_subparsers(dest="command")
    list_routes.add_arguments(
        subparsers.add_parser("list", help="List registered routes with inferred request bodies")
    )
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format="%(asctime)s - %(levelname)s - %(message)s")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "list":
        return list_routes.run(args, configure_logging=configure_logging)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
