"""Single-object and family collectors.

``collect`` scans one object's own public names. ``collect_wide`` builds the
family of objects related to a root (its type, its wrapped original, its MRO,
a same-named ambient binding and explicitly expanded children) and scans all
of their own names, public or not.
"""

import logging
import sys
from types import SimpleNamespace
from typing import Any, Callable, Dict, Iterable, List, Optional

from memberprobe.core.keys import list_all_own_property_names, list_own_keys
from memberprobe.core.matchers import MatchEvent, apply_rules, as_rules
from memberprobe.utils.py import (
    _as_list,
    _get_member,
    _get_name,
    _is_scannable,
    _seed_values,
)

logger = logging.getLogger(__name__)

# Probed in this order when no explicit source or root is given
AMBIENT_BINDINGS = ("__main__", "__mp_main__", "builtins")

# Every class chain converges on these two
TERMINALS = (object, type)

_AMBIENT = object()


def resolve_ambient():
    """Return the best-effort top-level namespace of the running program."""
    for name in AMBIENT_BINDINGS:
        module = sys.modules.get(name)
        if module is not None:
            return module
    return SimpleNamespace()


def _seeded(defaults, extra) -> Dict[str, None]:
    results = {}
    for value in _seed_values(defaults) + _seed_values(extra):
        results[value] = None
    return results


def collect(
    source: Any = _AMBIENT,
    defaults: Any = (),
    extra: Any = (),
    rules: Iterable = (),
    on_match: Optional[Callable[[MatchEvent], Any]] = None,
) -> List[str]:
    """Collect names from the own public keys of ``source``.

    Args:
        source: Object or mapping to scan. Defaults to the ambient namespace;
            an explicit ``None`` returns only the seeded values.
        defaults: Value or sequence of values seeded into the result.
        extra: Additional seed values, added after ``defaults``.
        rules: ``MatchRule`` objects (or rule dicts) applied to every key.
        on_match: Optional observer called with a ``MatchEvent`` per hit.

    Returns:
        List of unique strings. Order carries no meaning.
    """
    results = _seeded(defaults, extra)
    if source is _AMBIENT:
        source = resolve_ambient()
    if source is None:
        return list(results)

    listing = list_own_keys(source)
    if not listing.ok:
        return list(results)

    rules = as_rules(rules)
    for key in listing.names:
        try:
            value = _get_member(source, key)
        except Exception as e:
            logger.debug("skipping %r: %s", key, e)
            continue
        apply_rules(rules, key, value, source, results, on_match)

    return list(results)


class _SourceClosure:
    """Identity-deduplicated, insertion-ordered set of scan sources."""

    def __init__(self, root):
        self.root = root
        self._seen = set()
        self.sources = []

    def add(self, obj) -> bool:
        if not _is_scannable(obj):
            return False
        if obj is not self.root and any(obj is t for t in TERMINALS):
            return False
        if id(obj) in self._seen:
            return False
        self._seen.add(id(obj))
        self.sources.append(obj)
        return True

    def __iter__(self):
        return iter(self.sources)

    def __len__(self):
        return len(self.sources)


def _mro_of(obj):
    if isinstance(obj, type):
        return obj.__mro__[1:]
    return type(obj).__mro__


def _alias_candidates(root) -> List[str]:
    names = []
    try:
        if callable(root):
            names.append(_get_name(root))
    except Exception as e:
        logger.debug("cannot read root name: %s", e)
    try:
        wrapped = getattr(root, "__wrapped__", None)
        if wrapped is not None:
            names.append(_get_name(wrapped))
    except Exception as e:
        logger.debug("cannot read wrapped name: %s", e)
    names.append(_get_name(type(root)))
    return [n for n in names if n]


def build_closure(root, expand_children: Iterable = ()) -> _SourceClosure:
    """Collect the objects related to ``root``.

    Each step is best-effort: a failing lookup leaves that member out and
    the remaining steps still run.
    """
    closure = _SourceClosure(root)
    closure.add(root)

    for child in _as_list(expand_children):
        if not isinstance(child, str):
            continue
        try:
            closure.add(_get_member(root, child))
        except Exception as e:
            logger.debug("cannot expand %r: %s", child, e)

    closure.add(type(root))

    try:
        closure.add(getattr(root, "__wrapped__", None))
    except Exception as e:
        logger.debug("cannot read __wrapped__: %s", e)

    try:
        for ancestor in _mro_of(root):
            if any(ancestor is t for t in TERMINALS):
                break
            closure.add(ancestor)
    except Exception as e:
        logger.debug("cannot walk the MRO: %s", e)

    ambient = resolve_ambient()
    for name in _alias_candidates(root):
        try:
            alias = getattr(ambient, name)
        except AttributeError:
            continue
        except Exception as e:
            logger.debug("cannot resolve ambient alias %r: %s", name, e)
            continue
        closure.add(alias)

    return closure


def _names_of(source) -> List[str]:
    names = {}
    for name in list_own_keys(source).names:
        names[name] = None
    for name in list_all_own_property_names(source).names:
        names[name] = None
    return list(names)


def collect_wide(
    root: Any = None,
    defaults: Any = (),
    extra: Any = (),
    rules: Iterable = (),
    on_match: Optional[Callable[[MatchEvent], Any]] = None,
    expand_children: Iterable = (),
) -> List[str]:
    """Collect names from ``root`` and every object related to it.

    Takes the same arguments as :func:`collect`, plus ``expand_children``:
    names of members of ``root`` whose values are scanned as extra sources.
    Unlike :func:`collect`, private and special names are scanned too.
    """
    results = _seeded(defaults, extra)
    if root is None:
        root = resolve_ambient()

    rules = as_rules(rules)
    for source in build_closure(root, expand_children):
        for key in _names_of(source):
            try:
                value = _get_member(source, key)
            except Exception as e:
                logger.debug("skipping %r: %s", key, e)
                continue
            apply_rules(rules, key, value, source, results, on_match)

    return list(results)
