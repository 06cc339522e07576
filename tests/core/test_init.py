"""Tests for the package namespace, attachment and preset packs."""

import sys
from types import ModuleType, SimpleNamespace

import memberprobe
import memberprobe.core.collector as collector
from memberprobe.core.matchers import MatchRule, prefix


def test_public_surface():
    for name in (
        "collect",
        "collect_wide",
        "instrument",
        "with_logger",
        "MATCHER_PACKS",
        "get_matcher_pack",
        "attach",
    ):
        assert hasattr(memberprobe, name), name
        assert name in memberprobe.__all__


def test_attach_to_explicit_target():
    target = SimpleNamespace()
    namespace = memberprobe.attach(target)
    assert namespace is memberprobe
    assert target.MemberCollector is memberprobe


def test_attach_to_ambient(monkeypatch):
    ambient = ModuleType("attach_ambient")
    monkeypatch.setattr(collector, "AMBIENT_BINDINGS", ("attach_ambient",))
    monkeypatch.setitem(sys.modules, "attach_ambient", ambient)
    memberprobe.attach(name="Probe")
    assert ambient.Probe is memberprobe
    assert ambient.Probe.collect is memberprobe.collect


def test_instrument_returns_namespace():
    obj = SimpleNamespace(run=lambda: 1)
    assert memberprobe.instrument(obj, logger=lambda o: None) is memberprobe
    assert memberprobe.with_logger(obj, logger=lambda o: None) is memberprobe


class TestPresets:
    def test_known_packs(self):
        assert {"domEvents", "network", "console"} <= set(memberprobe.MATCHER_PACKS)

    def test_pack_contents(self):
        rules = memberprobe.get_matcher_pack("console")
        assert all(isinstance(r, MatchRule) for r in rules)
        assert [r.pattern for r in rules] == ["log", "warn", "error", "debug"]

    def test_unknown_pack_is_empty(self):
        assert memberprobe.get_matcher_pack("missing") == []

    def test_accessor_returns_copy(self):
        rules = memberprobe.get_matcher_pack("network")
        rules.append(prefix("x"))
        rules.clear()
        assert len(memberprobe.get_matcher_pack("network")) == 4

    def test_table_is_read_only(self):
        try:
            memberprobe.MATCHER_PACKS["new"] = ()
        except TypeError:
            pass
        assert "new" not in memberprobe.MATCHER_PACKS

    def test_pack_drives_collect(self):
        source = {"onClick": 1, "addEventListener": 2, "render": 3}
        result = memberprobe.collect(source=source, rules=memberprobe.get_matcher_pack("domEvents"))
        assert sorted(result) == ["addEventListener", "onClick"]

    def test_private_and_dunder_packs(self):
        source = {"_a": 1, "__b__": 2, "c": 3}
        assert memberprobe.collect(source=source, rules=memberprobe.get_matcher_pack("private")) == ["_a"]
        assert memberprobe.collect(source=source, rules=memberprobe.get_matcher_pack("dunder")) == ["__b__"]
