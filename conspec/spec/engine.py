"""Conformance API: conform, explain, valid, unform and friends.

Every function accepts a spec or anything :func:`conspec.spec.model.as_spec`
understands (most often a registered name) and an optional registry; the
process-wide registry is used when none is given. Data that does not match
never raises: ``conform`` returns ``INVALID`` and ``explain`` returns problems.
"""

from __future__ import annotations

import logging
from typing import Any

from conspec.errors import NoGenerator, SpecAssertionError
from conspec.registry.registry import Registry, default_registry
from conspec.spec.model import INVALID, Ref, as_spec
from conspec.spec.problems import Problem, format_problems

logger = logging.getLogger(__name__)

_check_asserts = False


def _registry(registry: Registry | None) -> Registry:
    return registry if registry is not None else default_registry()


def conform(spec, value: Any, registry: Registry | None = None):
    """Return the conformed form of ``value``, or ``INVALID``."""
    return as_spec(spec)._conform(value, _registry(registry))


def explain(spec, value: Any, registry: Registry | None = None) -> list[Problem]:
    """Return the problems that stop ``value`` from conforming; empty if valid."""
    reg = _registry(registry)
    spec = as_spec(spec)
    problems = spec._explain(value, [], [], [], reg)
    if not problems and spec._conform(value, reg) is INVALID:
        # An invalid value always yields at least one problem.
        problems = [Problem(value=value, predicate=spec.describe())]
    return problems


def explain_str(spec, value: Any, registry: Registry | None = None) -> str:
    return format_problems(explain(spec, value, registry))


def valid(spec, value: Any, registry: Registry | None = None) -> bool:
    return conform(spec, value, registry) is not INVALID


def unform(spec, value: Any, registry: Registry | None = None):
    """Invert :func:`conform`; raises ``NotUnformable`` for lossy specs."""
    return as_spec(spec)._unform(value, _registry(registry))


def describe(spec, registry: Registry | None = None) -> str:
    """Readable form of a spec; names describe the spec they are bound to."""
    spec = as_spec(spec)
    if isinstance(spec, Ref):
        return _registry(registry).resolve(spec.name).describe()
    return spec.describe()


def generate(spec, registry: Registry | None = None):
    """Produce a value through the spec's externally supplied generator."""
    spec = as_spec(spec)
    if isinstance(spec, Ref):
        reg = _registry(registry)
        chain, target = reg.resolve_chain(spec.name)
        # The outermost name that carries a generator wins.
        for name in chain:
            stored = reg.get(name)
            if stored is not None and stored.gen is not None:
                return stored.gen()
        spec = target
    if spec.gen is None:
        raise NoGenerator(f"No generator supplied for {spec.describe()}")
    return spec.gen()


# --- Assertions ---


def set_check_asserts(enabled: bool) -> None:
    global _check_asserts
    _check_asserts = bool(enabled)
    logger.debug("check_asserts=%s", _check_asserts)


def check_asserts() -> bool:
    return _check_asserts


def assert_valid(spec, value: Any, registry: Registry | None = None):
    """Return ``value`` if it conforms (or asserts are off); raise otherwise."""
    if not _check_asserts:
        return value
    problems = explain(spec, value, registry)
    if problems:
        raise SpecAssertionError(problems)
    return value
