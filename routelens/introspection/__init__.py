from .body_schema_extractor import extract_schema, isolate_function_body
from .controller_discovery import discover_controllers
from .function_extractor import extract_function_names
from .name_matcher import (
    ExactMatchStrategy,
    FunctionMatch,
    MatchStrategy,
    PatternMatchStrategy,
    match_function,
    resolve_function,
)

__all__ = [
    "extract_schema",
    "isolate_function_body",
    "discover_controllers",
    "extract_function_names",
    "ExactMatchStrategy",
    "FunctionMatch",
    "MatchStrategy",
    "PatternMatchStrategy",
    "match_function",
    "resolve_function",
]
