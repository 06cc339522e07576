"""Match rules and the rule evaluator.

A rule is a tagged variant: ``kind`` selects the test, ``pattern`` is the
argument of that test and ``transform`` optionally turns a hit into the
string that ends up in the result.

>>> rule = prefix("on", transform=lambda key, value, pattern: key[len(pattern):])
>>> evaluate([rule], "onClick", None, None)[0][1]
'Click'
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

PREFIX = "prefix"
SUFFIX = "suffix"
INCLUDES = "includes"
REGEX = "regex"
PREDICATE = "predicate"

KINDS = (PREFIX, SUFFIX, INCLUDES, REGEX, PREDICATE)


@dataclass(frozen=True)
class MatchRule:
    kind: str
    pattern: Any
    transform: Optional[Callable[[str, Any, Any], Any]] = None

    def __post_init__(self):
        if self.kind == REGEX and isinstance(self.pattern, str):
            object.__setattr__(self, "pattern", re.compile(self.pattern))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchRule":
        """Build a rule from ``{"type", "value", "transform"}``.

        ``custom`` is accepted as an alias of ``predicate``.
        """
        kind = data.get("type", data.get("kind"))
        if kind == "custom":
            kind = PREDICATE
        return cls(
            kind,
            data.get("value", data.get("pattern")),
            data.get("transform"),
        )


@dataclass
class MatchEvent:
    """What the match observer receives for every hit."""

    key: str
    value: Any
    owner: Any
    rule: MatchRule
    output: Optional[str]


def prefix(pattern, transform=None) -> MatchRule:
    return MatchRule(PREFIX, pattern, transform)


def suffix(pattern, transform=None) -> MatchRule:
    return MatchRule(SUFFIX, pattern, transform)


def includes(pattern, transform=None) -> MatchRule:
    return MatchRule(INCLUDES, pattern, transform)


def regex(pattern, transform=None) -> MatchRule:
    return MatchRule(REGEX, pattern, transform)


def predicate(func, transform=None) -> MatchRule:
    return MatchRule(PREDICATE, func, transform)


def as_rules(rules) -> List[MatchRule]:
    """Accept rules as ``MatchRule`` objects or plain dicts."""
    if rules is None:
        return []
    if isinstance(rules, (MatchRule, dict)):
        rules = [rules]
    out = []
    for rule in rules:
        if isinstance(rule, dict):
            try:
                rule = MatchRule.from_dict(rule)
            except re.error as e:
                logger.debug("ignoring rule with bad pattern %r: %s", rule, e)
                continue
        out.append(rule)
    return out


def _match_prefix(rule, key, value, owner):
    return isinstance(rule.pattern, str) and key.startswith(rule.pattern)


def _match_suffix(rule, key, value, owner):
    return isinstance(rule.pattern, str) and key.endswith(rule.pattern)


def _match_includes(rule, key, value, owner):
    return isinstance(rule.pattern, str) and rule.pattern in key


def _match_regex(rule, key, value, owner):
    # re.Pattern keeps no position between calls, each search starts at 0
    if not isinstance(rule.pattern, re.Pattern):
        return False
    return rule.pattern.search(key) is not None


def _match_predicate(rule, key, value, owner):
    if not callable(rule.pattern):
        return False
    try:
        return bool(rule.pattern(key, value, owner))
    except Exception as e:
        logger.debug("predicate failed for %r: %s", key, e)
        return False


_DISPATCH = {
    PREFIX: _match_prefix,
    SUFFIX: _match_suffix,
    INCLUDES: _match_includes,
    REGEX: _match_regex,
    PREDICATE: _match_predicate,
}


def _output_for(rule: MatchRule, key: str, value: Any) -> Optional[str]:
    if rule.transform is None:
        return key
    try:
        out = rule.transform(key, value, rule.pattern)
        if out is None:
            return None
        out = str(out)
    except Exception as e:
        logger.debug("transform failed for %r: %s", key, e)
        return None
    return out or None


def evaluate(
    rules: Sequence[MatchRule],
    key: str,
    value: Any,
    owner: Any,
    on_match: Optional[Callable[[MatchEvent], Any]] = None,
) -> List[Tuple[MatchRule, Optional[str]]]:
    """Run every rule against one ``(key, value, owner)`` triple.

    Returns the ``(rule, output)`` pairs of the rules that matched, in rule
    order. ``output`` is ``None`` when the hit produced nothing to collect.
    Never raises.
    """
    hits = []
    for rule in rules:
        test = _DISPATCH.get(getattr(rule, "kind", None))
        if test is None or not test(rule, key, value, owner):
            continue

        out = _output_for(rule, key, value)
        hits.append((rule, out))

        if on_match is not None:
            try:
                on_match(MatchEvent(key, value, owner, rule, out))
            except Exception as e:
                logger.debug("match observer failed for %r: %s", key, e)
    return hits


def apply_rules(rules, key, value, owner, results: Dict[str, None], on_match=None):
    """Evaluate ``rules`` and merge the outputs into ``results``.

    ``results`` is a dict used as an insertion-ordered set.
    """
    for _, out in evaluate(rules, key, value, owner, on_match):
        if out is not None:
            results[out] = None
