"""conspec — runtime data specs, conformance and function instrumentation.

Describe the legal shape of values with composable specs, register them under
qualified names, then conform, explain or unform values against them and
enforce argument specs on speced functions at call time.
"""

__version__ = "0.3.0"

from conspec.errors import (
    ConspecError,
    CyclicSpec,
    DocumentError,
    InstrumentationError,
    InvalidSpecName,
    MalformedKeySpec,
    NoDispatchSpec,
    NoGenerator,
    NotUnformable,
    SpecAssertionError,
    UnknownFunction,
    UnknownSpec,
)
from conspec.instrument import (
    SpecedFunction,
    instrument,
    instrument_all,
    instrumentation_disabled,
    speced,
    unstrument,
    unstrument_all,
)
from conspec.registry.registry import Registry, default_registry, define, fdef, resolve
from conspec.spec.builders import (
    all_of,
    alt,
    amp,
    any_of,
    cat,
    coll_of,
    conformer,
    fspec,
    keys,
    keys_star,
    map_of,
    maybe,
    multi_spec,
    nested,
    nilable,
    one_or_more,
    pred,
    tuple_of,
    zero_or_more,
)
from conspec.spec.engine import (
    assert_valid,
    conform,
    describe,
    explain,
    explain_str,
    generate,
    set_check_asserts,
    unform,
    valid,
)
from conspec.spec.keys import AllKeys, AnyKeys, KeyReq
from conspec.spec.model import INVALID, Invalid, Spec
from conspec.spec.problems import Problem, get_in
