import asyncio
import concurrent.futures
import functools
import inspect
import logging
import threading
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from types import (
    ClassMethodDescriptorType,
    FunctionType,
    MethodDescriptorType,
    WrapperDescriptorType,
)
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

import memberprobe.config as config
from memberprobe.core.collector import TERMINALS, collect_wide
from memberprobe.core.matchers import MatchEvent, includes

_log = logging.getLogger(__name__)
call_log = logging.getLogger("memberprobe.calls")

thread_global = threading.local()

WRAPPED_MARKER = "__memberprobe_wrapped__"

WRAP_TARGETS = ("root", "prototype", "owner")

# class attributes of these types bind the instance on access
_BINDING_TYPES = (FunctionType, MethodDescriptorType, WrapperDescriptorType)

CALL = "call"
RESOLVED = "resolved"
REJECTED = "rejected"


@dataclass
class CallObservation:
    """One observed invocation, resolution or rejection.

    ``args`` excludes the bound instance, which is reported as ``this_arg``.
    """

    label: str
    key: str
    args: Tuple[Any, ...]
    kwargs: Dict[str, Any]
    this_arg: Any
    phase: str
    result: Any = None
    error: Optional[BaseException] = None


def log_observation(observation: CallObservation) -> None:
    """Default sink: one INFO record per observation on ``memberprobe.calls``."""
    if observation.error is not None:
        call_log.info(
            "%s %s [%s] args=%r kwargs=%r error=%r",
            observation.label,
            observation.key,
            observation.phase,
            observation.args,
            observation.kwargs,
            observation.error,
        )
    else:
        call_log.info(
            "%s %s [%s] args=%r kwargs=%r result=%r",
            observation.label,
            observation.key,
            observation.phase,
            observation.args,
            observation.kwargs,
            observation.result,
        )


def _deliver(sink, observation):
    # a sink that calls back into wrapped code must not observe itself
    if getattr(thread_global, "delivering", False):
        return
    thread_global.delivering = True
    try:
        sink(observation)
    except Exception as e:
        _log.debug("observation sink failed for %r: %s", observation.key, e)
    finally:
        thread_global.delivering = False


def _is_dunder(key: str) -> bool:
    return len(key) > 4 and key.startswith("__") and key.endswith("__")


def _is_wrapper(obj) -> bool:
    try:
        return getattr(obj, WRAPPED_MARKER, False) is True
    except Exception:
        return False


def _is_wrappable(obj) -> bool:
    return callable(obj) and not inspect.isclass(obj) and not _is_wrapper(obj)


def _own_value(target, key):
    """Return ``(True, raw)`` if ``target`` stores ``key`` itself."""
    try:
        own = vars(target)
    except TypeError:
        own = {}
    if key in own:
        return True, own[key]
    for klass in type(target).__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if key in ((slots,) if isinstance(slots, str) else slots):
            return True, getattr(target, key)
    return False, None


def _class_member(klass, key):
    """Return ``(True, raw)`` if ``key`` is defined along ``klass.__mro__``.

    Members only reachable through the metaclass report ``(False, None)``.
    """
    for base in klass.__mro__:
        own = vars(base)
        if key in own:
            return True, own[key]
    return False, None


def _unbound_classmethod(raw):
    """Turn a builtin classmethod descriptor into a plain ``(cls, ...)`` function."""

    def call(cls, *args, **kwargs):
        return raw.__get__(None, cls)(*args, **kwargs)

    functools.update_wrapper(call, raw)
    return call


class WrapRegistry:
    """Records which ``(target, key)`` pairs a session has replaced.

    Targets are tracked by identity and kept alive for the session.
    """

    def __init__(self):
        self._entries: Dict[int, Tuple[Any, set]] = {}

    def contains(self, target, key) -> bool:
        entry = self._entries.get(id(target))
        return entry is not None and key in entry[1]

    def record(self, target, key) -> None:
        self._entries.setdefault(id(target), (target, set()))[1].add(key)

    def items(self) -> Iterator[Tuple[Any, str]]:
        for target, keys in self._entries.values():
            for key in sorted(keys):
                yield target, key

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self):
        return sum(len(keys) for _, keys in self._entries.values())


class Instrumentation:
    """An instrumentation session.

    A session owns one :class:`WrapRegistry`; calling :meth:`instrument`
    several times on the same session never wraps a member twice, and
    :meth:`restore` puts back every original it replaced.

    Args:
        logger: Sink receiving each :class:`CallObservation`. Defaults to
            :func:`log_observation`.
        label: Tag copied into every observation. Defaults to the
            ``memberprobe.label`` config value, then ``"[LOG]"``.
        wrap_target: Where wrappers are installed: ``"root"`` (the
            instrumented object), ``"prototype"`` (the class of the object
            that owned the member) or ``"owner"`` (that object itself).
        await_promises: Also observe the settlement of future-like and
            coroutine results.
    """

    def __init__(
        self,
        logger: Optional[Callable[[CallObservation], Any]] = None,
        label: Optional[str] = None,
        wrap_target: Optional[str] = None,
        await_promises: Optional[bool] = None,
    ):
        self.sink = logger if logger is not None else log_observation
        if label is None:
            label = config.get("memberprobe.label", "[LOG]")
        self.label = label

        if wrap_target is None:
            wrap_target = config.get("memberprobe.wrap_target", "root")
        if wrap_target not in WRAP_TARGETS:
            _log.warning("unknown wrap_target %r, using 'root'", wrap_target)
            wrap_target = "root"
        self.wrap_target = wrap_target

        if await_promises is None:
            await_promises = config.is_true(
                config.get("memberprobe.await_promises", False)
            )
        self.await_promises = bool(await_promises)

        self.registry = WrapRegistry()
        self._installs: List[Tuple[Any, str, bool, Any]] = []

    def instrument(self, target, rules=None, expand_children=()):
        """Wrap every callable member of ``target``'s family matching ``rules``.

        ``rules`` defaults to matching every name. Returns the session.
        """
        if target is None:
            return self
        if rules is None:
            rules = [includes("")]

        def on_match(event: MatchEvent):
            self._wrap(target, event.key, event.value, event.owner)

        collect_wide(
            root=target,
            rules=rules,
            on_match=on_match,
            expand_children=expand_children,
        )
        return self

    def wrapped(self) -> List[Tuple[Any, str]]:
        return list(self.registry.items())

    def restore(self) -> None:
        """Undo every install made by this session, newest first."""
        while self._installs:
            target, key, had_own, previous = self._installs.pop()
            try:
                if isinstance(target, Mapping):
                    target[key] = previous
                elif had_own:
                    setattr(target, key, previous)
                else:
                    delattr(target, key)
            except Exception as e:
                _log.debug("cannot restore %r: %s", key, e)
        self.registry.clear()

    def _resolve_target(self, root, owner):
        if owner is None:
            return root
        if self.wrap_target == "owner":
            return owner
        if self.wrap_target == "prototype":
            if inspect.isclass(owner):
                return owner
            proto = type(owner)
            if any(proto is t for t in TERMINALS):
                return root
            return proto
        return root

    def _wrap(self, root, key, value, owner):
        if not callable(value) or inspect.isclass(value):
            return
        target = self._resolve_target(root, owner)
        if any(target is t for t in TERMINALS):
            return
        if self.registry.contains(target, key):
            return
        try:
            installed = self._install(target, key)
        except Exception as e:
            _log.debug("cannot wrap %r on %s: %s", key, type(target).__name__, e)
            return
        if installed:
            self.registry.record(target, key)

    def _install(self, target, key) -> bool:
        if isinstance(target, Mapping):
            if not isinstance(target, MutableMapping) or key not in target:
                return False
            original = target[key]
            if not _is_wrappable(original):
                return False
            target[key] = self._make_wrapper(original, key, bound_first=False)
            self._installs.append((target, key, True, original))
            return True

        had_own, previous = _own_value(target, key)
        # special methods are looked up on the type, shadowing them is useless
        if _is_dunder(key) and not had_own:
            return False

        on_class = inspect.isclass(target)
        in_mro, raw = _class_member(target, key) if on_class else (False, None)
        if not in_mro:
            try:
                raw = inspect.getattr_static(target, key)
            except AttributeError:
                return False
        if isinstance(raw, property) and raw.fset is None:
            return False

        original = getattr(target, key)
        if not _is_wrappable(original):
            return False

        if on_class and not in_mro:
            # metaclass member: keep it bound to the class it was read from
            replacement = staticmethod(self._make_wrapper(original, key, bound_first=False))
        elif on_class:
            replacement = self._class_replacement(raw, original, key)
        else:
            replacement = self._make_wrapper(original, key, bound_first=False)

        setattr(target, key, replacement)
        self._installs.append((target, key, had_own, previous))
        return True

    def _class_replacement(self, raw, original, key):
        if isinstance(raw, staticmethod):
            return staticmethod(self._make_wrapper(raw.__func__, key, bound_first=False))
        if isinstance(raw, classmethod):
            return classmethod(self._make_wrapper(raw.__func__, key, bound_first=True))
        if isinstance(raw, ClassMethodDescriptorType):
            return classmethod(
                self._make_wrapper(_unbound_classmethod(raw), key, bound_first=True)
            )
        if isinstance(raw, _BINDING_TYPES):
            return self._make_wrapper(raw, key, bound_first=True)
        # callables that do not bind (partials, builtins) must stay unbound
        return staticmethod(self._make_wrapper(original, key, bound_first=False))

    def _make_wrapper(self, original, key, bound_first):
        label = self.label
        sink = self.sink
        await_promises = self.await_promises
        bound_self = None if bound_first else getattr(original, "__self__", None)

        @functools.wraps(original)
        def wrapper(*args, **kwargs):
            if bound_first and args:
                this_arg, call_args = args[0], args[1:]
            else:
                this_arg, call_args = bound_self, args

            def emit(phase, result=None, error=None):
                _deliver(
                    sink,
                    CallObservation(
                        label, key, call_args, kwargs, this_arg, phase, result, error
                    ),
                )

            try:
                result = original(*args, **kwargs)
            except BaseException as err:
                emit(CALL, error=err)
                raise

            emit(CALL, result=result)
            if await_promises:
                return _observe_settlement(result, emit)
            return result

        if inspect.iscoroutinefunction(original) and hasattr(
            inspect, "markcoroutinefunction"
        ):
            inspect.markcoroutinefunction(wrapper)
        setattr(wrapper, WRAPPED_MARKER, True)
        return wrapper


def _observe_settlement(result, emit):
    """Arrange resolved/rejected observations for an asynchronous result.

    Future-like objects are returned unchanged; coroutines and other
    awaitables come back as an observing coroutine with the same outcome.
    """
    if inspect.iscoroutine(result):
        return _observe_coroutine(result, emit)

    try:
        add_done_callback = getattr(result, "add_done_callback", None)
    except Exception:
        add_done_callback = None
    if not callable(add_done_callback):
        if inspect.isawaitable(result):
            return _observe_coroutine(result, emit)
        return result

    def on_done(future):
        try:
            error = future.exception()
        except (asyncio.CancelledError, concurrent.futures.CancelledError) as err:
            error = err
        except Exception as e:
            _log.debug("cannot read settled future: %s", e)
            return
        if error is not None:
            emit(REJECTED, error=error)
        else:
            emit(RESOLVED, result=future.result())

    try:
        add_done_callback(on_done)
    except Exception as e:
        _log.debug("cannot observe %s: %s", type(result).__name__, e)
    return result


async def _observe_coroutine(awaitable, emit):
    try:
        value = await awaitable
    except BaseException as err:
        emit(REJECTED, error=err)
        raise
    emit(RESOLVED, result=value)
    return value


def instrument(
    target,
    rules=None,
    logger=None,
    label=None,
    wrap_target=None,
    await_promises=None,
    expand_children=(),
):
    """Wrap matching callable members of ``target`` with observing wrappers.

    Runs a fresh :class:`Instrumentation` session and returns the
    ``memberprobe`` namespace so calls can be chained.
    """
    import memberprobe

    Instrumentation(
        logger=logger,
        label=label,
        wrap_target=wrap_target,
        await_promises=await_promises,
    ).instrument(target, rules=rules, expand_children=expand_children)
    return memberprobe


def with_logger(target, **options):
    return instrument(target, **options)
