"""Key enumeration capabilities.

Both listing functions report failure through ``KeyListing.ok`` rather than
raising, so collectors can stay total without wrapping every call site.
"""

import logging
from collections.abc import Mapping
from typing import NamedTuple, Tuple

logger = logging.getLogger(__name__)


class KeyListing(NamedTuple):
    names: Tuple[str, ...]
    ok: bool = True


FAILED = KeyListing((), False)


def _mapping_keys(obj) -> Tuple[str, ...]:
    return tuple(k for k in list(obj.keys()) if isinstance(k, str))


def _slot_names(obj) -> Tuple[str, ...]:
    names = []
    for klass in type(obj).__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name not in ("__dict__", "__weakref__") and name not in names:
                names.append(name)
    return tuple(names)


def list_own_keys(obj) -> KeyListing:
    """List the public names an object exposes as its own.

    Mappings contribute their string keys; other objects contribute the
    names in ``vars(obj)`` that do not start with an underscore.
    """
    try:
        if isinstance(obj, Mapping):
            return KeyListing(_mapping_keys(obj))
        names = list(vars(obj))
        return KeyListing(
            tuple(k for k in names if isinstance(k, str) and not k.startswith("_"))
        )
    except Exception as e:
        logger.debug("cannot list keys of %s: %s", type(obj).__name__, e)
        return FAILED


def list_all_own_property_names(obj) -> KeyListing:
    """List every own name, including private, special and slot names."""
    try:
        if isinstance(obj, Mapping):
            return KeyListing(_mapping_keys(obj))
    except Exception as e:
        logger.debug("cannot list keys of %s: %s", type(obj).__name__, e)
        return FAILED

    names = []
    ok = False
    try:
        names.extend(k for k in list(vars(obj)) if isinstance(k, str))
        ok = True
    except TypeError:
        # no __dict__, slots may still be present
        pass
    except Exception as e:
        logger.debug("cannot read vars() of %s: %s", type(obj).__name__, e)

    try:
        for name in _slot_names(obj):
            if name not in names:
                names.append(name)
        ok = True
    except Exception as e:
        logger.debug("cannot read __slots__ of %s: %s", type(obj).__name__, e)

    if not ok:
        return FAILED
    return KeyListing(tuple(names))
