"""
Infer the request payload shape of a handler from its source text.

The extractor isolates the handler body with a handful of declaration-shaped
regexes, then collects the names destructured from the request payload.
A field is reported optional when the body tests it in a conditional-looking
expression. No value types are inferred; every field is a string.
"""

import logging
import re
from typing import Dict, List, Optional, Sequence

from routelens.introspection.function_extractor import IDENTIFIER
from routelens.schemas.route_schema import OPTIONAL_STRING, REQUIRED_STRING

logger = logging.getLogger(__name__)

PAYLOAD_EXPRESSIONS = ("req.body",)

# A closing brace (optionally followed by a semicolon) at the start of a line
BODY_END = re.compile(r"^\};?", re.MULTILINE)

VALID_FIELD = re.compile(rf"^{IDENTIFIER}$")

QUOTES = "'\"`"


def body_patterns(function_name: str) -> List[re.Pattern]:
    """Declaration heads for function_name, each ending at the body's opening brace."""
    name = re.escape(function_name)
    shapes = [
        rf"const\s+{name}\s*=\s*async\s*\([^)]*\)\s*=>\s*\{{",
        rf"const\s+{name}\s*=\s*\([^)]*\)\s*=>\s*\{{",
        rf"async\s+function\s+{name}\s*\([^)]*\)\s*\{{",
        rf"\bfunction\s+{name}\s*\([^)]*\)\s*\{{",
        rf"(?:module\.)?exports\.{name}\s*=\s*(?:async\s*)?(?:function\s*(?:{IDENTIFIER})?\s*)?\([^)]*\)\s*(?:=>\s*)?\{{",
    ]
    return [re.compile(shape) for shape in shapes]


def balanced_body_end(source_text: str, start: int) -> Optional[int]:
    """Index of the brace closing the block that opens just before start.

    Braces inside string literals and comments are ignored. Returns None if
    the block never closes.
    """
    depth = 1
    i = start
    length = len(source_text)
    while i < length:
        char = source_text[i]
        if char in QUOTES:
            i += 1
            while i < length and source_text[i] != char:
                if source_text[i] == "\\":
                    i += 1
                i += 1
        elif source_text.startswith("//", i):
            newline = source_text.find("\n", i)
            i = length if newline == -1 else newline
        elif source_text.startswith("/*", i):
            close = source_text.find("*/", i + 2)
            i = length if close == -1 else close + 1
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return None


def isolate_function_body(function_name: str, source_text: str) -> Optional[str]:
    """
    Return the text between the function's opening and closing braces.

    The first declaration shape that matches wins. The body ends at the first
    closing brace that starts a line. A balancing brace found before that
    line ends it earlier, which covers handlers written on a single line.
    """
    for pattern in body_patterns(function_name):
        head = pattern.search(source_text)
        if not head:
            continue
        start = head.end()
        end_marker = BODY_END.search(source_text, start)
        marker_end = end_marker.start() if end_marker else None
        balanced_end = balanced_body_end(source_text, start)
        if balanced_end is not None and (marker_end is None or balanced_end <= marker_end):
            return source_text[start:balanced_end]
        if marker_end is not None:
            return source_text[start:marker_end]
    return None


def destructuring_patterns(payload_expressions: Sequence[str]) -> List[re.Pattern]:
    payload = "|".join(re.escape(expression) for expression in payload_expressions)
    return [
        re.compile(rf"const\s*\{{([^}}]*)\}}\s*=\s*(?:{payload})\b"),
        re.compile(rf"\{{([^}}]*)\}}\s*=\s*(?:{payload})\b"),
    ]


def clean_field(piece: str) -> Optional[str]:
    """Reduce one destructuring entry to its source field name.

    ``name: alias`` keeps ``name`` and ``name = default`` keeps ``name``.
    Anything that is not a bare identifier afterwards is dropped.
    """
    field = piece.split(":", 1)[0]
    field = field.split("=", 1)[0].strip()
    if not field or "//" in field or "/*" in field or "*/" in field:
        return None
    if not VALID_FIELD.match(field):
        return None
    return field


def extract_destructured_fields(
    body: str, payload_expressions: Sequence[str] = PAYLOAD_EXPRESSIONS
) -> List[str]:
    fields: List[str] = []
    for pattern in destructuring_patterns(payload_expressions):
        for match in pattern.finditer(body):
            for piece in match.group(1).split(","):
                field = clean_field(piece)
                if field:
                    fields.append(field)
    return fields


def is_optional(field: str, body: str) -> bool:
    markers = (f"if ({field})", f"{field} ?", f"{field} &&", f"{field} ||")
    return any(marker in body for marker in markers)


def extract_schema(
    function_name: str,
    source_text: str,
    payload_expressions: Sequence[str] = PAYLOAD_EXPRESSIONS,
) -> Optional[Dict[str, str]]:
    """
    Infer the request body schema of function_name from source_text.

    Args:
        function_name: Handler whose body should be inspected
        source_text: Full text of the controller file
        payload_expressions: Expressions that denote the request payload

    Returns:
        Mapping of field name to ``"string"`` or ``"string (optional)"``,
        or None when the body cannot be isolated or destructures nothing.
    """
    body = isolate_function_body(function_name, source_text)
    if body is None:
        logger.debug(f"Could not isolate the body of {function_name}")
        return None

    fields = extract_destructured_fields(body, payload_expressions)
    if not fields:
        logger.debug(f"{function_name} destructures no fields from {', '.join(payload_expressions)}")
        return None

    schema: Dict[str, str] = {}
    for field in fields:
        schema[field] = OPTIONAL_STRING if is_optional(field, body) else REQUIRED_STRING
    return schema
