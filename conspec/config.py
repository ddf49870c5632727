"""Settings — which spec modules to load and how checking behaves.

Settings come from a YAML file (``conspec.yaml`` in the working directory by
default) and may be overridden by environment variables:

    modules:            # importable modules that define specs
      - myapp.specs
    instrument:         # namespaces to instrument after loading
      - billing
    check_asserts: true
    log_level: INFO

``CONSPEC_CHECK_ASSERTS`` and ``CONSPEC_LOG_LEVEL`` take precedence over the
file.
"""

from __future__ import annotations

import importlib
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from conspec.errors import DocumentError
from conspec.instrument import instrument_all
from conspec.registry.registry import Registry, default_registry
from conspec.spec.engine import set_check_asserts

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = "conspec.yaml"
TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """Runtime settings for conspec."""

    modules: list[str] = field(default_factory=list)
    instrument: list[str] = field(default_factory=list)
    check_asserts: bool = False
    log_level: str = "WARNING"
    source: str = ""  # File the settings were read from, if any


def load_settings(path: str | Path | None = None, environ: dict | None = None) -> Settings:
    """Load settings from YAML, then apply environment overrides.

    A missing default file yields default settings; a missing explicit file
    or a malformed one raises ``DocumentError``.
    """
    env = os.environ if environ is None else environ
    settings = Settings()

    explicit = path is not None
    path = Path(path) if explicit else Path(DEFAULT_SETTINGS_FILE)
    if path.exists():
        settings = _read_settings(path)
    elif explicit:
        raise DocumentError(f"Settings file not found: {path}")

    if "CONSPEC_CHECK_ASSERTS" in env:
        settings.check_asserts = env["CONSPEC_CHECK_ASSERTS"].strip().lower() in TRUE_VALUES
    if env.get("CONSPEC_LOG_LEVEL"):
        settings.log_level = _check_level(
            env["CONSPEC_LOG_LEVEL"].strip().upper(), "CONSPEC_LOG_LEVEL"
        )
    return settings


def _check_level(level: str, source: str) -> str:
    if not isinstance(logging.getLevelName(level), int):
        raise DocumentError(f"Unknown log level {level!r} in {source}")
    return level


def _read_settings(path: Path) -> Settings:
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise DocumentError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise DocumentError(f"Settings file {path} must contain a mapping")

    modules = data.get("modules", [])
    namespaces = data.get("instrument", [])
    for key, value in (("modules", modules), ("instrument", namespaces)):
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise DocumentError(f"'{key}' in {path} must be a list of strings")

    return Settings(
        modules=modules,
        instrument=namespaces,
        check_asserts=bool(data.get("check_asserts", False)),
        log_level=_check_level(str(data.get("log_level", "WARNING")).upper(), str(path)),
        source=str(path),
    )


def load_spec_modules(modules: list[str]) -> list[str]:
    """Import modules for their spec definitions; returns the names imported."""
    loaded = []
    for module in modules:
        try:
            importlib.import_module(module)
        except ImportError as e:
            raise DocumentError(f"Cannot import spec module '{module}': {e}") from e
        logger.debug("spec_module_loaded module=%s", module)
        loaded.append(module)
    return loaded


def apply_settings(settings: Settings, registry: Registry | None = None) -> set[str]:
    """Load spec modules, set assert checking and instrument namespaces.

    Returns:
        Names instrumented as a result.
    """
    reg = registry or default_registry()
    load_spec_modules(settings.modules)
    set_check_asserts(settings.check_asserts)
    instrumented: set[str] = set()
    if settings.instrument:
        instrumented = instrument_all(settings.instrument, registry=reg)
    return instrumented
