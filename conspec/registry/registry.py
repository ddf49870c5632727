"""Process-wide registry of named specs and speced functions.

The registry maps qualified names to specs, remembers which names were
registered through ``fdef``, holds the callable slot every speced function is
dispatched through, and owns the instrumentation table. Reads vastly outnumber
writes, so access goes through a reader-writer lock.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from conspec.errors import CyclicSpec, InvalidSpecName, UnknownFunction, UnknownSpec
from conspec.registry.models import InstrumentedFn, SpecEntry
from conspec.spec.fn import FnSpec
from conspec.spec.model import Ref, Spec, as_spec
from conspec.spec.names import is_qualified, namespace_of

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """Many readers or one writer. The writer may re-enter both sides."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer: int | None = None
        self._writer_depth = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        me = threading.get_ident()
        with self._cond:
            nested = self._writer == me
            if not nested:
                while self._writer is not None:
                    self._cond.wait()
                self._readers += 1
        try:
            yield
        finally:
            if not nested:
                with self._cond:
                    self._readers -= 1
                    if self._readers == 0:
                        self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        me = threading.get_ident()
        with self._cond:
            if self._writer == me:
                self._writer_depth += 1
            else:
                while self._writer is not None or self._readers > 0:
                    self._cond.wait()
                self._writer = me
                self._writer_depth = 1
        try:
            yield
        finally:
            with self._cond:
                self._writer_depth -= 1
                if self._writer_depth == 0:
                    self._writer = None
                    self._cond.notify_all()


class Registry:
    """Named specs, speced functions and their instrumentation state."""

    def __init__(self):
        self.lock = ReadWriteLock()
        self._specs: dict[str, Spec] = {}
        self._speced_fns: set[str] = set()
        self._slots: dict[str, Callable[..., Any]] = {}
        self._instrumented: dict[str, InstrumentedFn] = {}

    # --- Specs ---

    def define(self, name: str, spec) -> str:
        """Store ``spec`` under ``name``, replacing any previous definition."""
        if not is_qualified(name):
            raise InvalidSpecName(f"Spec names must look like 'namespace/name': {name!r}")
        spec = as_spec(spec)
        with self.lock.write():
            self._specs[name] = spec
        logger.debug("spec_defined name=%s spec=%s", name, spec.describe())
        return name

    def get(self, name: str) -> Spec | None:
        """Return the spec stored under ``name`` without following references."""
        with self.lock.read():
            return self._specs.get(name)

    def contains(self, name: str) -> bool:
        with self.lock.read():
            return name in self._specs

    def resolve_chain(self, name: str) -> tuple[list[str], Spec]:
        """Follow name references to a concrete spec.

        Returns:
            The names visited (outermost first) and the concrete spec.

        Raises:
            UnknownSpec: a name in the chain is not registered.
            CyclicSpec: the chain revisits a name.
        """
        chain: list[str] = []
        with self.lock.read():
            current = name
            while True:
                if current in chain:
                    raise CyclicSpec(chain + [current])
                chain.append(current)
                spec = self._specs.get(current)
                if spec is None:
                    logger.debug("spec_lookup_failed name=%s chain=%s", current, chain)
                    raise UnknownSpec(current)
                if not isinstance(spec, Ref):
                    return chain, spec
                current = spec.name

    def resolve(self, name: str) -> Spec:
        return self.resolve_chain(name)[1]

    def names(self, namespace: str | None = None) -> list[str]:
        with self.lock.read():
            names = list(self._specs)
        if namespace:
            names = [n for n in names if namespace_of(n) == namespace]
        return sorted(names)

    def entries(self, namespace: str | None = None) -> list[SpecEntry]:
        out = []
        for name in self.names(namespace):
            spec = self.get(name)
            out.append(
                SpecEntry(
                    name=name,
                    description=spec.describe() if spec else "",
                    speced_fn=name in self.speced_fns,
                    instrumented=self.instrumented(name) is not None,
                )
            )
        return out

    # --- Speced functions ---

    def fdef(self, name: str, args=None, ret=None, fn=None) -> str:
        """Register a function spec and record ``name`` as a speced function."""
        spec = FnSpec(args=args, ret=ret, fn=fn)
        with self.lock.write():
            self.define(name, spec)
            self._speced_fns.add(name)
        logger.debug("fn_spec_defined name=%s spec=%s", name, spec.describe())
        return name

    @property
    def speced_fns(self) -> frozenset[str]:
        with self.lock.read():
            return frozenset(self._speced_fns)

    def fn_spec(self, name: str) -> FnSpec | None:
        """The ``FnSpec`` registered for ``name``, if any."""
        with self.lock.read():
            if name not in self._specs:
                return None
            _, spec = self.resolve_chain(name)
        return spec if isinstance(spec, FnSpec) else None

    def bind(self, name: str, fn: Callable[..., Any]) -> Callable[..., Any]:
        """Put ``fn`` in the callable slot for ``name``.

        Rebinding an instrumented name replaces the original behind the
        wrapper, so the check stays in place.
        """
        with self.lock.write():
            record = self._instrumented.get(name)
            if record is not None:
                record.original = fn
            else:
                self._slots[name] = fn
        logger.debug("fn_bound name=%s instrumented=%s", name, record is not None)
        return fn

    def slot(self, name: str) -> Callable[..., Any]:
        """The callable currently dispatched to for ``name``."""
        with self.lock.read():
            try:
                return self._slots[name]
            except KeyError:
                raise UnknownFunction(name) from None

    def is_bound(self, name: str) -> bool:
        with self.lock.read():
            return name in self._slots

    # --- Instrumentation table ---

    def instrumented(self, name: str) -> InstrumentedFn | None:
        with self.lock.read():
            return self._instrumented.get(name)

    def instrumented_names(self) -> frozenset[str]:
        with self.lock.read():
            return frozenset(self._instrumented)

    def swap_in(self, record: InstrumentedFn) -> None:
        """Record ``record`` and dispatch its name to the wrapper."""
        with self.lock.write():
            self._instrumented[record.name] = record
            self._slots[record.name] = record.wrapper

    def swap_out(self, name: str) -> InstrumentedFn | None:
        """Forget the instrumentation of ``name`` and restore its original."""
        with self.lock.write():
            record = self._instrumented.pop(name, None)
            if record is not None:
                self._slots[name] = record.original
        return record


_default_registry = Registry()


def default_registry() -> Registry:
    """The process-wide registry used when no registry is passed explicitly."""
    return _default_registry


def define(name: str, spec, registry: Registry | None = None) -> str:
    return (registry or _default_registry).define(name, spec)


def resolve(name: str, registry: Registry | None = None) -> Spec:
    return (registry or _default_registry).resolve(name)


def fdef(name: str, args=None, ret=None, fn=None, registry: Registry | None = None) -> str:
    return (registry or _default_registry).fdef(name, args=args, ret=ret, fn=fn)
