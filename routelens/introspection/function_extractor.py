"""Lexical extraction of handler function names from controller source text."""

import re
from typing import List

IDENTIFIER = r"[A-Za-z_$][\w$]*"

# Order matters: names are reported in first-seen order across these patterns
FUNCTION_DECLARATION_PATTERNS = [
    re.compile(rf"const\s+({IDENTIFIER})\s*=\s*async\s*\([^)]*\)\s*=>"),
    re.compile(rf"const\s+({IDENTIFIER})\s*=\s*\([^)]*\)\s*=>"),
    re.compile(rf"async\s+function\s+({IDENTIFIER})\s*\("),
    re.compile(rf"function\s+({IDENTIFIER})\s*\("),
]


def extract_function_names(source_text: str) -> List[str]:
    """Return the distinct function names declared in source_text.

    Purely syntactic: any arrow-function constant or function declaration
    counts, whether or not it is exported or used as a route handler.
    """
    names: List[str] = []
    for pattern in FUNCTION_DECLARATION_PATTERNS:
        for match in pattern.finditer(source_text):
            name = match.group(1)
            if name not in names:
                names.append(name)
    return names
