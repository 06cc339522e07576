from collections.abc import Mapping
from typing import Any, Iterable, List, Optional

PRIMITIVE_TYPES = (bool, int, float, complex, str, bytes, bytearray)


def _get_otel_trace():
    """Lazy import of the OpenTelemetry trace API.

    Centralized here so extensions can share the same helper.
    """
    try:
        from opentelemetry import trace

        return trace
    except ImportError as exc:  # pragma: no cover - environment dependent
        raise ImportError(
            "OpenTelemetry is not installed. Please install it with: "
            "pip install 'memberprobe[otel]'"
        ) from exc


def _is_scannable(obj) -> bool:
    """Whether ``obj`` belongs to the object/function category.

    >>> _is_scannable(None), _is_scannable("abc"), _is_scannable(3)
    (False, False, False)
    >>> _is_scannable({}), _is_scannable(len)
    (True, True)
    """
    return obj is not None and not isinstance(obj, PRIMITIVE_TYPES)


def _get_member(obj, key):
    """Read ``key`` from a mapping or an object.

    Items are read from mappings, attributes from everything else. Errors
    raised by the underlying lookup (missing keys, throwing properties)
    propagate to the caller.

    Examples
    --------
    >>> _get_member({"a": 1}, "a")
    1

    >>> class Obj:
    ...     foo = 10
    >>> _get_member(Obj(), "foo")
    10
    """
    if isinstance(obj, Mapping):
        return obj[key]
    return getattr(obj, key)


def _seed_values(values: Any) -> List[str]:
    """Normalize a seed argument into a list of strings.

    A single value is treated as a one-element sequence, ``None`` entries
    are dropped.

    >>> _seed_values("a")
    ['a']
    >>> _seed_values(["a", None, 2])
    ['a', '2']
    >>> _seed_values(None)
    []
    """
    if values is None:
        return []
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        values = [values]
    return [str(v) for v in values if v is not None]


def _as_list(values: Any) -> List[Any]:
    if values is None:
        return []
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        return [values]
    return list(values)


def _get_name(obj) -> Optional[str]:
    """Return ``obj.__name__`` when it is a non-empty string."""
    try:
        name = obj.__name__
    except Exception:
        return None
    if isinstance(name, str) and name:
        return name
    return None
