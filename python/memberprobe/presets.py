"""Canned rule lists for common discovery patterns."""

from types import MappingProxyType
from typing import List

from memberprobe.core.matchers import MatchRule, includes, prefix, regex

MATCHER_PACKS = MappingProxyType(
    {
        "domEvents": (
            prefix("on"),
            includes("EventListener"),
            includes("EventTarget"),
        ),
        "network": (
            includes("fetch"),
            includes("XHR"),
            includes("Request"),
            includes("Response"),
        ),
        "console": (
            includes("log"),
            includes("warn"),
            includes("error"),
            includes("debug"),
        ),
        "logging": (
            regex(r"^(debug|info|warning|warn|error|exception|critical|fatal|log)$"),
        ),
        "dunder": (regex(r"^__\w+__$"),),
        "private": (regex(r"^_(?!_)"),),
    }
)


def get_matcher_pack(name: str) -> List[MatchRule]:
    """Return a fresh list of the rules in pack ``name``.

    Unknown names give an empty list.

    >>> [r.pattern for r in get_matcher_pack("domEvents")]
    ['on', 'EventListener', 'EventTarget']
    >>> get_matcher_pack("nope")
    []
    """
    return list(MATCHER_PACKS.get(name, ()))
