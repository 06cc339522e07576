"""
Collection Engine

Overview
--------
This package holds the pure side of memberprobe: match rules and the
collectors that feed object members through them.

Responsibilities:
1.  Define `MatchRule` and evaluate rule lists against a key/value/owner triple.
2.  Enumerate the own keys of a single object (`collect`).
3.  Build the family of objects related to a root and scan all of them (`collect_wide`).

Public Interfaces:
- `collect`, `collect_wide`: Collectors.
- `evaluate`, `MatchRule`, `MatchEvent`: Matcher engine.
- `prefix`, `suffix`, `includes`, `regex`, `predicate`: Rule factories.
- `resolve_ambient`: Default scan root.
"""

from .collector import collect, collect_wide, resolve_ambient
from .matchers import (
    MatchEvent,
    MatchRule,
    evaluate,
    includes,
    predicate,
    prefix,
    regex,
    suffix,
)

__all__ = [
    "collect",
    "collect_wide",
    "resolve_ambient",
    "MatchEvent",
    "MatchRule",
    "evaluate",
    "includes",
    "predicate",
    "prefix",
    "regex",
    "suffix",
]
