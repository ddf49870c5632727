"""Instrumentation: enforce ``args`` specs on every call to a speced function.

Speced functions are called through a slot held by the registry. The
:func:`speced` decorator binds the implementation to that slot and hands back
a proxy that looks the slot up on every call, so :func:`instrument` and
:func:`unstrument` take effect for every caller by swapping the slot.

Checking can be suspended for the current thread or task with
:func:`instrumentation_disabled`; the flag lives in a context variable so
concurrent scopes do not interfere.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from conspec.errors import InstrumentationError, UnknownFunction
from conspec.registry.models import InstrumentedFn
from conspec.registry.registry import Registry, default_registry
from conspec.spec.fn import call_arguments
from conspec.spec.model import INVALID
from conspec.spec.names import namespace_of

logger = logging.getLogger(__name__)

_checking_enabled: ContextVar[bool] = ContextVar("conspec_instrumentation_enabled", default=True)


def checking_enabled() -> bool:
    return _checking_enabled.get()


@contextmanager
def instrumentation_disabled() -> Iterator[None]:
    """Skip argument checks for instrumented calls made inside the block."""
    token = _checking_enabled.set(False)
    try:
        yield
    finally:
        _checking_enabled.reset(token)


# --- Slot indirection ---


class SpecedFunction:
    """Callable proxy that dispatches through the registry slot for ``name``."""

    def __init__(self, name: str, registry: Registry, impl: Callable[..., Any]):
        self.name = name
        self.registry = registry
        functools.update_wrapper(self, impl)

    def __call__(self, *args, **kwargs):
        return self.registry.slot(self.name)(*args, **kwargs)

    def __repr__(self) -> str:
        return f"<speced function {self.name}>"


def speced(
    name: str,
    args=None,
    ret=None,
    fn=None,
    registry: Registry | None = None,
) -> Callable[[Callable[..., Any]], SpecedFunction]:
    """Decorator binding a function to ``name`` and, if given, its specs.

    Usage::

        @speced("billing/charge", args=cat(("amount", pos_int)))
        def charge(amount): ...
    """
    reg = registry or default_registry()

    def decorator(impl: Callable[..., Any]) -> SpecedFunction:
        if args is not None or ret is not None or fn is not None:
            reg.fdef(name, args=args, ret=ret, fn=fn)
        reg.bind(name, impl)
        return SpecedFunction(name, reg, impl)

    return decorator


# --- Instrument / unstrument ---


def _make_wrapper(record: InstrumentedFn, registry: Registry) -> Callable[..., Any]:
    name = record.name

    @functools.wraps(record.original)
    def checked(*args, **kwargs):
        if record.enabled and checking_enabled():
            spec = registry.fn_spec(name)
            if spec is not None and spec.args is not None:
                items = call_arguments(args, kwargs)
                if spec.args._conform(items, registry) is INVALID:
                    problems = spec.args._explain(items, [], [name], [], registry)
                    raise InstrumentationError(name, ["args"], problems, items)
        return record.original(*args, **kwargs)

    return checked


def instrument(name: str, registry: Registry | None = None) -> Callable[..., Any] | None:
    """Replace the function bound to ``name`` with an argument-checking wrapper.

    Returns:
        The wrapper, or None when ``name`` has no function spec or is
        already instrumented.

    Raises:
        UnknownFunction: ``name`` has a function spec but nothing is bound.
    """
    reg = registry or default_registry()
    with reg.lock.write():
        if reg.instrumented(name) is not None or reg.fn_spec(name) is None:
            return None
        if not reg.is_bound(name):
            raise UnknownFunction(name)
        record = InstrumentedFn(name=name, original=reg.slot(name), wrapper=None)
        record.wrapper = _make_wrapper(record, reg)
        reg.swap_in(record)
    logger.info("instrumented name=%s", name)
    return record.wrapper


def unstrument(name: str, registry: Registry | None = None) -> Callable[..., Any] | None:
    """Restore the original function for ``name``; returns it, or None if not instrumented."""
    reg = registry or default_registry()
    record = reg.swap_out(name)
    if record is None:
        return None
    logger.info("unstrumented name=%s", name)
    return record.original


def _matches(name: str, namespaces: frozenset[str] | None) -> bool:
    return namespaces is None or namespace_of(name) in namespaces


def _normalize_filter(namespace_filter: str | Iterable[str] | None) -> frozenset[str] | None:
    if namespace_filter is None:
        return None
    if isinstance(namespace_filter, str):
        return frozenset([namespace_filter])
    return frozenset(namespace_filter)


def instrument_all(
    namespace_filter: str | Iterable[str] | None = None,
    registry: Registry | None = None,
) -> set[str]:
    """Instrument every bound speced function, optionally limited to namespaces.

    Returns:
        The names that were newly instrumented.
    """
    reg = registry or default_registry()
    namespaces = _normalize_filter(namespace_filter)
    changed = set()
    for name in sorted(reg.speced_fns):
        if not _matches(name, namespaces) or not reg.is_bound(name):
            continue
        if instrument(name, registry=reg) is not None:
            changed.add(name)
    return changed


def unstrument_all(
    namespace_filter: str | Iterable[str] | None = None,
    registry: Registry | None = None,
) -> set[str]:
    """Undo instrumentation, optionally limited to namespaces; returns names restored."""
    reg = registry or default_registry()
    namespaces = _normalize_filter(namespace_filter)
    changed = set()
    for name in sorted(reg.instrumented_names()):
        if _matches(name, namespaces) and unstrument(name, registry=reg) is not None:
            changed.add(name)
    return changed
