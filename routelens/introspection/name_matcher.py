"""
Resolve which handler function implements a route.

Resolution is a cascade of strategies evaluated in order; the first strategy
that produces a hit wins. Each strategy only looks at names, never at
function bodies.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from routelens.schemas import MatchTier
from routelens.utils import levenshtein

logger = logging.getLogger(__name__)

MAX_EDIT_DISTANCE = 2

ACTION_VERBS: Dict[str, List[str]] = {
    "GET": ["get", "fetch", "retrieve", "list", "show", "find"],
    "POST": ["create", "add", "register", "login", "send", "verify", "resend"],
    "PUT": ["update", "edit", "modify", "change"],
    "DELETE": ["delete", "remove", "destroy"],
    "PATCH": ["patch", "update", "modify"],
}

USER_SEGMENT = "user"


@dataclass(frozen=True)
class RouteShape:
    """The parts of a route path the strategies reason about."""

    method: str
    segments: List[str]

    @property
    def last(self) -> str:
        return self.segments[-1] if self.segments else ""

    @property
    def second_last(self) -> str:
        return self.segments[-2] if len(self.segments) > 1 else ""

    @property
    def has_user_segment(self) -> bool:
        return USER_SEGMENT in self.segments

    @classmethod
    def from_path(cls, route_path: str, method: str) -> "RouteShape":
        segments = [segment for segment in route_path.split("/") if segment]
        return cls(method=method.upper(), segments=segments)


@dataclass(frozen=True)
class FunctionMatch:
    """A resolved handler name and how it was found."""

    name: str
    tier: MatchTier
    candidate: str


def capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


def camel_case(word: str) -> str:
    """``all-users`` -> ``allUsers``."""
    parts = [part for part in word.split("-") if part]
    if not parts:
        return ""
    return parts[0] + "".join(capitalize(part) for part in parts[1:])


class MatchStrategy(ABC):
    """One tier of the resolution cascade."""

    tier: MatchTier

    @abstractmethod
    def match(self, shape: RouteShape, functions: Sequence[str]) -> Optional[FunctionMatch]:
        """Return the first function accepted for the route shape, or None."""


class ExactMatchStrategy(MatchStrategy):
    """Case-insensitive equality against a few direct spellings of the last segment."""

    tier = MatchTier.EXACT

    def candidates(self, shape: RouteShape) -> List[str]:
        last = shape.last
        method = shape.method.lower()
        return [last, method + capitalize(last), last + capitalize(method)]

    def match(self, shape: RouteShape, functions: Sequence[str]) -> Optional[FunctionMatch]:
        wanted = {candidate.lower(): candidate for candidate in self.candidates(shape) if candidate}
        for function_name in functions:
            candidate = wanted.get(function_name.lower())
            if candidate is not None:
                return FunctionMatch(name=function_name, tier=self.tier, candidate=candidate)
        return None


class PatternMatchStrategy(MatchStrategy):
    """
    Guess handler names from the route shape and accept near matches.

    Guesses are tried in order. A function is accepted for a guess when either
    name contains the other, or, failing that, when their edit distance is
    within max_distance; the latter is reported as a fuzzy match.
    """

    tier = MatchTier.PATTERN

    def __init__(self, max_distance: int = MAX_EDIT_DISTANCE):
        self.max_distance = max_distance

    def special_cases(self, shape: RouteShape) -> List[str]:
        if not shape.has_user_segment:
            return []
        on_collection = shape.last == USER_SEGMENT
        if shape.method == "GET":
            if on_collection:
                return ["getAllUsers", "getUsers", "listUsers"]
            return ["getUserById", "getUser"]
        if shape.method == "POST" and on_collection:
            return ["createUserByAdmin", "createUser", "addUser"]
        if shape.method == "PUT":
            return ["updateProfile", "updateUserProfile", "updateUser", "updateUserById", "editUser"]
        if shape.method == "DELETE":
            return ["deleteUser", "deleteUserById", "removeUser"]
        return []

    def candidates(self, shape: RouteShape) -> List[str]:
        last = shape.last
        second_last = shape.second_last

        guesses = self.special_cases(shape)
        guesses += [last, last + "User", last + capitalize(second_last)]
        for verb in ACTION_VERBS.get(shape.method, []):
            guesses.append(verb + capitalize(last))
            guesses.append(verb + capitalize(second_last))
        guesses.append(last.replace("-", ""))
        guesses.append(camel_case(last))
        guesses.append(shape.method.lower() + capitalize(camel_case(last)))

        ordered: List[str] = []
        for guess in guesses:
            if guess and guess not in ordered:
                ordered.append(guess)
        return ordered

    def match(self, shape: RouteShape, functions: Sequence[str]) -> Optional[FunctionMatch]:
        for candidate in self.candidates(shape):
            lowered = candidate.lower()
            for function_name in functions:
                name = function_name.lower()
                if name == lowered or lowered in name or name in lowered:
                    return FunctionMatch(name=function_name, tier=MatchTier.PATTERN, candidate=candidate)
                if levenshtein(name, lowered) <= self.max_distance:
                    return FunctionMatch(name=function_name, tier=MatchTier.FUZZY, candidate=candidate)
        return None


DEFAULT_STRATEGIES: List[MatchStrategy] = [ExactMatchStrategy(), PatternMatchStrategy()]


def match_function(
    route_path: str,
    method: str,
    functions: Sequence[str],
    strategies: Optional[Sequence[MatchStrategy]] = None,
) -> Optional[FunctionMatch]:
    """Run the strategy cascade and return the first hit with its tier."""
    if not functions:
        return None
    shape = RouteShape.from_path(route_path, method)
    for strategy in strategies if strategies is not None else DEFAULT_STRATEGIES:
        found = strategy.match(shape, functions)
        if found is not None:
            logger.debug(f"{shape.method} {route_path} resolved to {found.name} ({found.tier.value})")
            return found
    logger.debug(f"{shape.method} {route_path}: no handler among {len(functions)} functions")
    return None


def resolve_function(route_path: str, method: str, candidates: Sequence[str]) -> Optional[str]:
    """Return the name of the function that most likely implements the route."""
    found = match_function(route_path, method, candidates)
    return found.name if found else None
