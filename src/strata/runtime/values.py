"""Value model: what the engine needs to know about host values.

The resolver never inspects host types directly. It goes through a small
capability interface, implemented per value family with
``functools.singledispatch``:

- ``category_of(value)``: nil, scalar, sequence, mapping, stream or
  indirection. Decides how loops iterate a value.
- ``lookup(value, key)``: attribute or index access. Raises ``LookupMiss``
  describing why a probe failed.
- ``invoke(target, args)``: positional call with an arity check.

Host code can teach the engine about its own types by registering them:

    >>> @category_of.register(Table)
    ... def _(value):
    ...     return Category.SEQUENCE
    >>> @lookup.register(Table)
    ... def _(value, key):
    ...     return value.cell(key)

Indirection:
``Ref`` boxes and ``weakref.ref`` objects are indirection layers. ``deref``
unwraps any number of them to the first concrete value, or ``None`` when a
layer is empty (a dead weak reference, or a ``Ref(None)``).

Thread-Safety:
All functions are stateless. Registrations should happen at import time.

"""

from __future__ import annotations

import inspect
import numbers
import operator
import weakref
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from functools import singledispatch
from typing import Any

from strata.nodes.control_flow import Compare


class _NoValue:
    """Sentinel for a path that resolved to nothing in non-strict mode.

    Falsy and distinct from ``None`` so callers can tell "missing" from
    "present but nil".
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return "NO_VALUE"

    def __bool__(self) -> bool:
        return False


class _NoKey:
    """Sentinel for a path segment without a name selector."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "NO_KEY"


NO_VALUE: Any = _NoValue()
NO_KEY: Any = _NoKey()


@dataclass(slots=True)
class Ref:
    """Mutable box around a value; one indirection layer.

    Lets the host hand a template a value it can still replace, e.g. a
    ``Ref`` shared between the context and a callback.
    """

    value: Any = None


class ContextStack(tuple):
    """The context stack itself, exposed to templates as a sequence.

    A path with no leading selector (``$@``) resolves to this value, so a
    template can pass the whole scope chain to a function or index into it.
    Outermost scope first.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"ContextStack({tuple.__repr__(self)})"


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


class Category(Enum):
    """How the engine treats a host value."""

    NIL = "nil"
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    STREAM = "stream"
    INDIRECTION = "indirection"


@singledispatch
def category_of(value: Any) -> Category:
    """Classify ``value``.

    Anything iterable that is neither a sequence nor a mapping (iterators,
    generators, sets, dict views) is a stream: it is iterated exactly once.
    Everything else is a scalar.
    """
    if isinstance(value, Iterable):
        return Category.STREAM
    return Category.SCALAR


@category_of.register(type(None))
@category_of.register(_NoValue)
def _category_nil(value: Any) -> Category:
    return Category.NIL


@category_of.register(str)
@category_of.register(bytes)
@category_of.register(bytearray)
def _category_text(value: Any) -> Category:
    return Category.SCALAR


@category_of.register(Mapping)
def _category_mapping(value: Any) -> Category:
    return Category.MAPPING


@category_of.register(Sequence)
def _category_sequence(value: Any) -> Category:
    return Category.SEQUENCE


@category_of.register(Ref)
@category_of.register(weakref.ReferenceType)
def _category_indirection(value: Any) -> Category:
    return Category.INDIRECTION


def deref(value: Any) -> Any:
    """Unwrap indirection layers down to a concrete value or ``None``."""
    while True:
        if isinstance(value, Ref):
            value = value.value
        elif isinstance(value, weakref.ReferenceType):
            value = value()
        else:
            return value


# ---------------------------------------------------------------------------
# Probes
# ---------------------------------------------------------------------------


class MissKind(Enum):
    """Why a lookup or call probe failed."""

    NOT_FOUND = "not found"
    NIL_RECEIVER = "nil receiver"
    NOT_CALLABLE = "not callable"
    BAD_ARGUMENTS = "bad arguments"
    INACCESSIBLE = "inaccessible"


class LookupMiss(Exception):
    """A probe did not match.

    Internal signal between the value model and the resolver, which turns
    it into a ``ResolutionError`` or a silent ``NO_VALUE``.
    """

    def __init__(self, kind: MissKind, key: Any = NO_KEY, detail: str | None = None):
        self.kind = kind
        self.key = key
        self.detail = detail
        super().__init__(f"{kind.value}: {key!r}" + (f" ({detail})" if detail else ""))


def _is_private(name: str) -> bool:
    return name.startswith("_")


def _attribute(value: Any, name: str) -> Any:
    if _is_private(name):
        raise LookupMiss(MissKind.INACCESSIBLE, name)
    try:
        return getattr(value, name)
    except AttributeError:
        raise LookupMiss(MissKind.NOT_FOUND, name) from None


def _item(value: Any, key: Any) -> Any:
    if not hasattr(type(value), "__getitem__"):
        raise LookupMiss(MissKind.NOT_FOUND, key)
    try:
        return value[key]
    except (LookupError, TypeError):
        raise LookupMiss(MissKind.NOT_FOUND, key) from None


@singledispatch
def lookup(value: Any, key: Any) -> Any:
    """Look up ``key`` on a generic object.

    String keys name public attributes, falling back to item access.
    Other keys use item access only.
    """
    if isinstance(key, str):
        try:
            return _attribute(value, key)
        except LookupMiss as miss:
            if miss.kind is MissKind.INACCESSIBLE:
                raise
    return _item(value, key)


@lookup.register(Mapping)
def _lookup_mapping(value: Mapping, key: Any) -> Any:
    # Keys only: a scope dict must not answer "items" or "keys" with its
    # own methods. Membership first so a defaultdict is never filled.
    try:
        present = key in value
    except TypeError:
        present = False
    if not present:
        raise LookupMiss(MissKind.NOT_FOUND, key)
    return value[key]


@lookup.register(Sequence)
def _lookup_sequence(value: Sequence, key: Any) -> Any:
    if isinstance(key, int) and not isinstance(key, bool):
        if 0 <= key < len(value):
            return value[key]
        raise LookupMiss(MissKind.NOT_FOUND, key, f"index out of range for length {len(value)}")
    if isinstance(key, str):
        return _attribute(value, key)
    raise LookupMiss(MissKind.NOT_FOUND, key)


def invoke(target: Any, args: Sequence[Any]) -> Any:
    """Call ``target`` with positional ``args``.

    Raises:
        LookupMiss: NOT_CALLABLE if target is not callable, BAD_ARGUMENTS
            if its signature does not accept the arguments.

    Exceptions raised by the callable itself propagate unchanged.
    """
    target = deref(target)
    if not callable(target):
        raise LookupMiss(MissKind.NOT_CALLABLE, detail=f"{type(target).__name__} is not callable")
    try:
        signature = inspect.signature(target)
    except (TypeError, ValueError):
        # Some builtins carry no signature; let the call itself decide.
        signature = None
    if signature is not None:
        try:
            signature.bind(*args)
        except TypeError as exc:
            raise LookupMiss(MissKind.BAD_ARGUMENTS, detail=str(exc)) from None
    return target(*args)


def probe(value: Any, key: Any, args: Sequence[Any], call: bool) -> Any:
    """Resolve one path step against ``value``.

    Looks up ``key`` (unless it is ``NO_KEY``) and then calls the result
    when ``call`` is set. With ``NO_KEY`` and ``call`` the value itself is
    called.
    """
    value = deref(value)
    if value is None or value is NO_VALUE:
        raise LookupMiss(MissKind.NIL_RECEIVER, key)
    if key is not NO_KEY:
        value = lookup(value, key)
    if call:
        value = invoke(value, args)
    return value


# ---------------------------------------------------------------------------
# Truthiness, comparison, text form
# ---------------------------------------------------------------------------


def truthy(value: Any) -> bool:
    """Conditional truth of a dereferenced value.

    Empty sequences, mappings and strings, zero, ``None`` and ``NO_VALUE``
    are false. Streams are true without being consumed.
    """
    if value is None or value is NO_VALUE:
        return False
    return bool(value)


class Incomparable(Exception):
    """Operands belong to categories that cannot be compared."""


_OPERATORS: dict[Compare, Callable[[Any, Any], bool]] = {
    Compare.EQ: operator.eq,
    Compare.NE: operator.ne,
    Compare.LT: operator.lt,
    Compare.LE: operator.le,
    Compare.GT: operator.gt,
    Compare.GE: operator.ge,
}

# Categories with equality but no ordering.
_UNORDERED = frozenset({"nil", "bool"})


def _comparison_category(value: Any) -> str | None:
    if value is None or value is NO_VALUE:
        return "nil"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (numbers.Real, Decimal)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (bytes, bytearray)):
        return "bytes"
    return None


def compare(left: Any, op: Compare, right: Any) -> bool:
    """Apply ``op`` to two dereferenced values of the same category.

    Numbers compare with numbers (int, float, Decimal, Fraction), strings
    with strings, bytes with bytes. Booleans and nil support only equality.

    Raises:
        Incomparable: Categories differ or do not support ``op``.
    """
    category = _comparison_category(left)
    if category is None or category != _comparison_category(right):
        raise Incomparable(left, right)
    if category in _UNORDERED and op not in (Compare.EQ, Compare.NE):
        raise Incomparable(left, right)
    if category == "nil":
        # None and NO_VALUE are the same nil.
        return op is Compare.EQ
    try:
        return bool(_OPERATORS[op](left, right))
    except ArithmeticError:
        # Decimal NaN has no order.
        raise Incomparable(left, right) from None


def to_bytes(value: Any) -> bytes:
    """Default text form of a value, UTF-8 encoded."""
    return str(value).encode("utf-8")
