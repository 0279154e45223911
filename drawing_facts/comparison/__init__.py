"""Component to drawing matching."""

from .matcher import (
    ComponentInfo,
    ComponentDrawingMatcher,
    MatchMethod,
    MatchResult,
    MatchResults,
    file_stem,
)

__all__ = [
    "ComponentInfo",
    "ComponentDrawingMatcher",
    "MatchMethod",
    "MatchResult",
    "MatchResults",
    "file_stem",
]
