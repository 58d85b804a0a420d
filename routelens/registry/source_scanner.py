"""
Static discovery of route groups in an Express-style project.

Reads the application entry file for router mounts (``app.use("/api/auth",
authRoutes)``), follows each mounted module to its source file and collects
the ``router.<verb>("/path", ...)`` and ``router.route("/path").<verb>(...)``
declarations found there. Nothing is executed; like the rest of routelens this
works on source text only and skips whatever it cannot follow.
"""

import logging
import os
import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from routelens.exceptions import RouteScanError
from routelens.schemas import RouteDef, RouteGroup

logger = logging.getLogger(__name__)

ENTRY_CANDIDATES = [
    "index.js",
    "app.js",
    "server.js",
    "index.ts",
    "app.ts",
    "server.ts",
    "src/index.js",
    "src/app.js",
    "src/server.js",
    "src/index.ts",
    "src/app.ts",
    "src/server.ts",
]
MODULE_EXTENSIONS = [".js", ".ts", ".mjs", ".cjs"]
HTTP_VERBS = ["get", "post", "put", "delete", "patch", "head", "options"]

_VERBS = "|".join(HTTP_VERBS)
_STRING = r"[\"'`]([^\"'`]+)[\"'`]"

REQUIRE_BINDING = re.compile(rf"(?:const|let|var)\s+([\w$]+)\s*=\s*require\(\s*{_STRING}\s*\)")
IMPORT_BINDING = re.compile(rf"import\s+([\w$]+)\s+from\s+{_STRING}")
MOUNT = re.compile(rf"\.use\(\s*{_STRING}\s*,([^;]*?)\)\s*;?\s*(?://.*)?$", re.MULTILINE)
INLINE_REQUIRE = re.compile(rf"require\(\s*{_STRING}\s*\)")
ROUTER_BINDING = re.compile(r"(?:const|let|var)\s+([\w$]+)\s*=\s*(?:express\s*\.\s*)?Router\s*\(")


def find_entry_file(root_dir: str, entry_file: Optional[str] = None) -> Path:
    root = Path(root_dir)
    if entry_file:
        path = Path(entry_file)
        path = path if path.is_absolute() else root / path
        if not path.is_file():
            raise RouteScanError(f"Entry file {path} does not exist")
        return path

    for candidate in ENTRY_CANDIDATES:
        path = root / candidate
        if path.is_file():
            return path
    raise RouteScanError(f"No application entry file found in {root_dir} (tried {', '.join(ENTRY_CANDIDATES)})")


def resolve_module(base_dir: Path, specifier: str) -> Optional[Path]:
    """Resolve a relative module specifier the way Node does for local files."""
    if not specifier.startswith("."):
        return None
    target = (base_dir / specifier).resolve()
    if target.is_file():
        return target
    for extension in MODULE_EXTENSIONS:
        candidate = target.with_name(target.name + extension)
        if candidate.is_file():
            return candidate
    for extension in MODULE_EXTENSIONS:
        candidate = target / f"index{extension}"
        if candidate.is_file():
            return candidate
    return None


def module_bindings(source_text: str) -> Dict[str, str]:
    bindings: Dict[str, str] = {}
    for pattern in (REQUIRE_BINDING, IMPORT_BINDING):
        for match in pattern.finditer(source_text):
            bindings.setdefault(match.group(1), match.group(2))
    return bindings


def router_mounts(source_text: str) -> List[Tuple[str, str]]:
    """
    Return ``(base_path, module_specifier)`` pairs in mount order.

    The router is the last argument of ``use``; middleware arguments before it
    are ignored. The router may be a bound name or an inline ``require``.
    """
    bindings = module_bindings(source_text)
    mounts: List[Tuple[str, str]] = []
    for match in MOUNT.finditer(source_text):
        base_path, arguments = match.group(1), match.group(2)
        inline = INLINE_REQUIRE.search(arguments)
        if inline:
            mounts.append((base_path, inline.group(1)))
            continue
        names = re.findall(r"[\w$]+", arguments)
        if names and names[-1] in bindings:
            mounts.append((base_path, bindings[names[-1]]))
        else:
            logger.debug(f"Mount at {base_path} does not reference an imported router")
    return mounts


def route_declarations(source_text: str) -> List[RouteDef]:
    """Collect route declarations from a router module, in source order."""
    receivers = ROUTER_BINDING.findall(source_text) or ["router"]
    receiver = "|".join(re.escape(name) for name in receivers)

    direct = re.compile(rf"\b(?:{receiver})\s*\.\s*({_VERBS})\s*\(\s*{_STRING}")
    chained = re.compile(rf"\b(?:{receiver})\s*\.\s*route\s*\(\s*{_STRING}\s*\)")
    chained_verb = re.compile(rf"\.\s*({_VERBS})\s*\(")

    declarations: List[Tuple[int, RouteDef]] = []
    for match in direct.finditer(source_text):
        declarations.append((match.start(), RouteDef(sub_path=match.group(2), methods=[match.group(1)])))
    for match in chained.finditer(source_text):
        end = source_text.find(";", match.end())
        chain = source_text[match.end() : end if end != -1 else len(source_text)]
        methods = chained_verb.findall(chain)
        if methods:
            declarations.append((match.start(), RouteDef(sub_path=match.group(1), methods=methods)))

    declarations.sort(key=lambda item: item[0])
    return [route for _, route in declarations]


def scan_route_groups(root_dir: str, entry_file: Optional[str] = None) -> List[RouteGroup]:
    """
    Derive route groups from an Express-style project without running it.

    Args:
        root_dir: Project root
        entry_file: Application entry file, relative to root_dir or absolute.
            When omitted the usual entry names are tried.

    Returns:
        One RouteGroup per router mount that resolves to a local source file

    Raises:
        RouteScanError: If no entry file can be found
    """
    entry = find_entry_file(root_dir, entry_file)
    try:
        entry_text = entry.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise RouteScanError(f"Cannot read entry file {entry}: {e}") from e

    groups: List[RouteGroup] = []
    for base_path, specifier in router_mounts(entry_text):
        module_path = resolve_module(entry.parent, specifier)
        if module_path is None:
            logger.warning(f"Cannot resolve router module {specifier!r} mounted at {base_path}")
            continue
        try:
            module_text = module_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Cannot read router module {module_path}: {e}")
            continue
        groups.append(RouteGroup(base_path=base_path, routes=route_declarations(module_text)))

    logger.debug(f"Scanned {len(groups)} route groups from {os.path.relpath(entry, root_dir)}")
    return groups
