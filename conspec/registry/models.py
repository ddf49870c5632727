"""Registry data models — instrumentation records and listing entries."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass
class InstrumentedFn:
    """A function currently replaced by its argument-checking wrapper."""

    name: str
    original: Callable[..., Any]
    wrapper: Callable[..., Any]
    enabled: bool = True  # Per-function switch; see instrumentation_disabled() for scopes


@dataclass
class SpecEntry:
    """A registered spec as shown by listings."""

    name: str
    description: str
    speced_fn: bool = False
    instrumented: bool = False

    @property
    def namespace(self) -> str:
        return self.name.split("/", 1)[0]
