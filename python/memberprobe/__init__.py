"""
memberprobe - Runtime Member Discovery and Call Instrumentation

Overview
--------
This is the top-level package. The module itself is the namespace users work
with: import it directly, or bind it onto the ambient namespace with `attach`.

Responsibilities:
1.  Export the collectors (`collect`, `collect_wide`) and rule factories.
2.  Export instrumentation entry points (`instrument`, `with_logger`, `Instrumentation`).
3.  Export preset rule packs (`MATCHER_PACKS`, `get_matcher_pack`).

Public Interfaces:
- Collect: `collect`, `collect_wide`, `resolve_ambient`
- Rules: `MatchRule`, `prefix`, `suffix`, `includes`, `regex`, `predicate`
- Instrument: `instrument`, `with_logger`, `Instrumentation`, `CallObservation`
- Presets: `MATCHER_PACKS`, `get_matcher_pack`
- Namespace: `attach`
"""

import sys

import memberprobe.config as config
from memberprobe.core import (
    MatchEvent,
    MatchRule,
    collect,
    collect_wide,
    evaluate,
    includes,
    predicate,
    prefix,
    regex,
    resolve_ambient,
    suffix,
)
from memberprobe.inspect import (
    CallObservation,
    Instrumentation,
    instrument,
    log_observation,
    with_logger,
)
from memberprobe.presets import MATCHER_PACKS, get_matcher_pack

VERSION = "0.3.0"

NAMESPACE_NAME = "MemberCollector"


def attach(target=None, name=NAMESPACE_NAME):
    """Bind this namespace as ``name`` on ``target`` (default: the ambient namespace)."""
    if target is None:
        target = resolve_ambient()
    namespace = sys.modules[__name__]
    setattr(target, name, namespace)
    return namespace


__all__ = [
    "VERSION",
    "config",
    "attach",
    "collect",
    "collect_wide",
    "resolve_ambient",
    "evaluate",
    "MatchEvent",
    "MatchRule",
    "prefix",
    "suffix",
    "includes",
    "regex",
    "predicate",
    "instrument",
    "with_logger",
    "Instrumentation",
    "CallObservation",
    "log_observation",
    "MATCHER_PACKS",
    "get_matcher_pack",
]
