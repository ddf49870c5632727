"""Errors raised by conspec.

Data that fails to match a spec is never an error: ``conform`` returns
``INVALID`` and ``explain`` returns problems. Everything here signals misuse
of the API (bad spec construction, unknown names, broken registrations) or a
check that the caller asked to be enforced.
"""

from __future__ import annotations


class ConspecError(Exception):
    """Base class for every error raised by conspec."""


class UnknownSpec(ConspecError, KeyError):
    """No spec is registered under the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unable to resolve spec: {name}")

    def __str__(self) -> str:
        return self.args[0]


class UnknownFunction(ConspecError, KeyError):
    """No callable is bound to the requested function name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No function bound to: {name}")

    def __str__(self) -> str:
        return self.args[0]


class CyclicSpec(ConspecError):
    """Name resolution looped back onto a name it already visited."""

    def __init__(self, chain: list[str]):
        self.chain = chain
        super().__init__(f"Cyclic spec reference: {' -> '.join(chain)}")


class InvalidSpecName(ConspecError, ValueError):
    """A spec name is not of the form ``namespace/name``."""


class MalformedKeySpec(ConspecError, ValueError):
    """A key-set spec lists a key that is not a qualified name."""


class NoDispatchSpec(ConspecError, LookupError):
    """A multi-spec dispatch tag has no spec behind it."""

    def __init__(self, tag, value):
        self.tag = tag
        self.value = value
        super().__init__(f"No spec for dispatch tag {tag!r}")


class NotUnformable(ConspecError, TypeError):
    """The spec discards information while conforming and cannot be inverted."""


class NoGenerator(ConspecError, LookupError):
    """The spec carries no generator capability."""


class InstrumentationError(ConspecError):
    """An instrumented function was called with arguments that do not conform."""

    def __init__(self, fn_name: str, path: list, problems: list, args: list):
        self.fn_name = fn_name
        self.path = path
        self.problems = problems
        self.args_value = args
        lines = "\n".join(f"  {p}" for p in problems)
        super().__init__(f"Call to {fn_name} did not conform to spec:\n{lines}")


class SpecAssertionError(ConspecError, AssertionError):
    """``assert_valid`` found a value that does not conform."""

    def __init__(self, problems: list):
        self.problems = problems
        lines = "\n".join(f"  {p}" for p in problems)
        super().__init__(f"Spec assertion failed:\n{lines}")


class DocumentError(ConspecError):
    """A data or settings document could not be read."""
