"""Constructors for every spec variant.

Tagged forms take ``(tag, spec)`` pairs, keyword arguments, or both; pairs
come first and declaration order is preserved::

    cat(("name", str), ("age", maybe(int)))
    any_of(num=int, text=str)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from conspec.spec.fn import FnSpec
from conspec.spec.keys import KeysStar, MapSpec
from conspec.spec.model import (
    And,
    CollOf,
    Conformer,
    MapOf,
    Nilable,
    Or,
    Predicate,
    TupleSpec,
    as_tagged,
)
from conspec.spec.multi import MultiSpec
from conspec.spec.regex import Alt, Amp, Cat, Maybe, Nested, Rep


def pred(fn: Callable[[Any], Any], name: str = "") -> Predicate:
    return Predicate(fn, name=name)


def all_of(*specs) -> And:
    return And(specs)


def any_of(*pairs, **tagged) -> Or:
    return Or(as_tagged(pairs, tagged))


def tuple_of(*specs) -> TupleSpec:
    return TupleSpec(specs)


def coll_of(spec, kind: type | None = None, min_count: int | None = None, max_count: int | None = None) -> CollOf:
    return CollOf(spec, kind=kind, min_count=min_count, max_count=max_count)


def map_of(key_spec, val_spec, conform_keys: bool = False) -> MapOf:
    return MapOf(key_spec, val_spec, conform_keys=conform_keys)


def conformer(fn: Callable[[Any], Any], unform: Callable[[Any], Any] | None = None) -> Conformer:
    return Conformer(fn, unform_fn=unform)


def nilable(spec) -> Nilable:
    return Nilable(spec)


# --- Regex-ops ---


def cat(*pairs, **tagged) -> Cat:
    return Cat(as_tagged(pairs, tagged))


def alt(*pairs, **tagged) -> Alt:
    return Alt(as_tagged(pairs, tagged))


def zero_or_more(spec) -> Rep:
    return Rep(spec, 0)


def one_or_more(spec) -> Rep:
    return Rep(spec, 1)


def maybe(spec) -> Maybe:
    return Maybe(spec)


def amp(re, *preds) -> Amp:
    return Amp(re, preds)


def nested(re) -> Nested:
    return Nested(re)


# --- Maps, dispatch, functions ---


def keys(req=(), opt=(), req_un=(), opt_un=()) -> MapSpec:
    return MapSpec(req=tuple(req), opt=tuple(opt), req_un=tuple(req_un), opt_un=tuple(opt_un))


def keys_star(req=(), opt=(), req_un=(), opt_un=()) -> KeysStar:
    return KeysStar(keys(req=req, opt=opt, req_un=req_un, opt_un=opt_un))


def multi_spec(dispatch_fn: Callable[[Any], Any], lookup_fn: Callable[[Any], Any], retag=None) -> MultiSpec:
    return MultiSpec(dispatch_fn, lookup_fn, retag=retag)


def fspec(args=None, ret=None, fn=None) -> FnSpec:
    return FnSpec(args=args, ret=ret, fn=fn)
