"""Unit tests for memberprobe.core.matchers."""

import re

import pytest

from memberprobe.core.matchers import (
    MatchEvent,
    MatchRule,
    as_rules,
    evaluate,
    includes,
    predicate,
    prefix,
    regex,
    suffix,
)


class TestStringRules:
    """Prefix, suffix and includes rules."""

    def test_prefix(self):
        assert evaluate([prefix("on")], "onClick", 1, None) == [(prefix("on"), "onClick")]
        assert evaluate([prefix("on")], "click", 1, None) == []

    def test_suffix(self):
        hits = evaluate([suffix("Listener")], "addEventListener", None, None)
        assert [out for _, out in hits] == ["addEventListener"]

    def test_includes(self):
        assert evaluate([includes("Event")], "addEventListener", None, None)
        assert not evaluate([includes("Event")], "append", None, None)

    def test_empty_includes_matches_everything(self):
        assert evaluate([includes("")], "anything", None, None)

    def test_non_string_pattern_never_matches(self):
        rules = [prefix(1), suffix(None), includes(["a"])]
        assert evaluate(rules, "a", None, None) == []


class TestRegexRule:
    def test_string_pattern_is_compiled(self):
        rule = regex(r"^get")
        assert isinstance(rule.pattern, re.Pattern)
        assert evaluate([rule], "getItem", None, None)

    def test_search_semantics(self):
        assert evaluate([regex(re.compile("Item"))], "getItem", None, None)

    def test_repeated_use_is_independent(self):
        rule = regex(re.compile("a"))
        first = evaluate([rule], "abc", None, None)
        second = evaluate([rule], "abc", None, None)
        assert first == second and len(first) == 1

    def test_non_pattern_value_never_matches(self):
        rule = MatchRule("regex", 42)
        assert evaluate([rule], "42", None, None) == []


class TestPredicateRule:
    def test_receives_key_value_owner(self):
        seen = []

        def check(key, value, owner):
            seen.append((key, value, owner))
            return True

        owner = object()
        evaluate([predicate(check)], "k", "v", owner)
        assert seen == [("k", "v", owner)]

    def test_raising_predicate_is_no_match(self):
        def check(key, value, owner):
            raise RuntimeError("nope")

        assert evaluate([predicate(check)], "k", None, None) == []

    def test_truthiness(self):
        assert evaluate([predicate(lambda k, v, o: 1)], "k", None, None)
        assert not evaluate([predicate(lambda k, v, o: "")], "k", None, None)


class TestTransform:
    def test_transform_output(self):
        rule = prefix("on", transform=lambda key, value, pattern: key[len(pattern):])
        assert evaluate([rule], "onClick", None, None) == [(rule, "Click")]

    def test_transform_receives_pattern(self):
        seen = []
        rule = suffix("Up", transform=lambda k, v, p: seen.append(p) or k)
        evaluate([rule], "KeyUp", 3, None)
        assert seen == ["Up"]

    def test_empty_or_none_output_discarded(self):
        rules = [includes("", transform=lambda *a: ""), includes("", transform=lambda *a: None)]
        assert [out for _, out in evaluate(rules, "k", None, None)] == [None, None]

    def test_output_coerced_to_string(self):
        rule = includes("", transform=lambda *a: 7)
        assert evaluate([rule], "k", None, None)[0][1] == "7"

    def test_raising_transform_is_no_output(self):
        def bad(*args):
            raise KeyError("x")

        assert evaluate([includes("", transform=bad)], "k", None, None)[0][1] is None


class TestObserver:
    def test_observer_receives_event(self):
        events = []
        rule = prefix("on")
        owner = {"onClick": 1}
        evaluate([rule], "onClick", 1, owner, on_match=events.append)
        assert events == [MatchEvent("onClick", 1, owner, rule, "onClick")]

    def test_observer_failure_swallowed(self):
        def observer(event):
            raise RuntimeError("observer")

        assert evaluate([includes("")], "k", None, None, on_match=observer)

    def test_observer_called_once_per_matching_rule(self):
        events = []
        evaluate([includes("a"), includes("b"), includes("z")], "ab", None, None, events.append)
        assert [e.rule.pattern for e in events] == ["a", "b"]


class TestRuleConstruction:
    def test_unknown_kind_is_inert(self):
        assert evaluate([MatchRule("glob", "*")], "anything", None, None) == []

    def test_from_dict(self):
        rule = MatchRule.from_dict({"type": "prefix", "value": "on"})
        assert rule == prefix("on")

    def test_from_dict_custom_alias(self):
        fn = lambda k, v, o: True  # noqa: E731
        assert MatchRule.from_dict({"type": "custom", "value": fn}).kind == "predicate"

    def test_as_rules_mixed(self):
        rules = as_rules([prefix("a"), {"type": "suffix", "value": "b"}])
        assert rules == [prefix("a"), suffix("b")]

    def test_as_rules_single_and_none(self):
        assert as_rules(prefix("a")) == [prefix("a")]
        assert as_rules(None) == []

    def test_as_rules_drops_bad_regex_dict(self):
        assert as_rules([{"type": "regex", "value": "("}]) == []

    def test_rules_are_immutable(self):
        rule = prefix("on")
        with pytest.raises(AttributeError):
            rule.pattern = "off"
