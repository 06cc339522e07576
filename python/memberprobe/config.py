"""Flat key/value configuration for memberprobe.

Keys that were never set fall back to the environment: ``memberprobe.label``
is read from ``MEMBERPROBE_LABEL``.
"""

import builtins
import os

_store = {}


def _env_name(key):
    return key.upper().replace(".", "_")


def is_true(value):
    if value in [True, "TRUE", "True", "true", "1", "YES", "Yes", "yes", "ON", "On", "on"]:
        return True
    return False


def get(key, default=None):
    if key in _store:
        return _store[key]
    return os.environ.get(_env_name(key), default)


def set(key, value):
    _store[key] = value


def get_str(key):
    value = get(key)
    if value is None:
        return None
    return str(value)


def contains_key(key):
    return key in _store or _env_name(key) in os.environ


def remove(key):
    return _store.pop(key, None)


def keys():
    return sorted(_store)


def clear():
    _store.clear()


def len():
    return builtins.len(_store)


def is_empty():
    return not _store
