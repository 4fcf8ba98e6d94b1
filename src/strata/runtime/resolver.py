"""Resolution engine: turn a ``Var`` path into a value.

Resolution order for ``a.b(x).c``:

1. Every selector is evaluated to a key. Interpolated selectors are
   rendered and nested paths resolved, both in strict mode: a dynamic key
   that cannot be computed is always an error.
2. The first segment is searched in the context stack, innermost scope
   first. Scopes that do not match are skipped.
3. Every later segment probes only the value produced by the one before.

Strict vs non-strict:
    - strict: any miss raises a ``ResolutionError`` subclass.
    - non-strict: a first segment no scope matches yields ``NO_VALUE``; a
      later segment yields ``NO_VALUE`` for "not found" and "nil receiver"
      misses. Wrong arguments, calls of non-callables and private members
      raise in both modes.

Arguments are always evaluated strictly.

"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from strata.environment.exceptions import (
    ArgumentMismatchError,
    InaccessibleMemberError,
    NilReceiverError,
    NotCallableError,
    ResolutionError,
    TemplateError,
    TemplateRuntimeError,
    UndefinedError,
)
from strata.nodes.path import Const, Interpolation, Operand, Segment, Var, describe
from strata.render_context import get_render_context
from strata.runtime.values import (
    NO_KEY,
    NO_VALUE,
    ContextStack,
    LookupMiss,
    MissKind,
    deref,
    probe,
)

logger = logging.getLogger(__name__)

_MISS_ERRORS: dict[MissKind, type[ResolutionError]] = {
    MissKind.NOT_FOUND: UndefinedError,
    MissKind.NIL_RECEIVER: NilReceiverError,
    MissKind.NOT_CALLABLE: NotCallableError,
    MissKind.BAD_ARGUMENTS: ArgumentMismatchError,
    MissKind.INACCESSIBLE: InaccessibleMemberError,
}

# Misses that non-strict mode turns into NO_VALUE past the first segment.
_SOFT_MISSES = frozenset({MissKind.NOT_FOUND, MissKind.NIL_RECEIVER})


def resolve(var: Var, stack: Sequence[Any], strict: bool) -> Any:
    """Resolve ``var`` against ``stack`` (outermost scope first).

    Returns:
        The resolved value (not yet dereferenced), or ``NO_VALUE`` when a
        non-strict resolution misses.

    Raises:
        ResolutionError: On a miss the strict policy does not absorb.
        TemplateRuntimeError: When a host callable raises.
    """
    segments = var.segments
    keys = [_evaluate_key(segment, stack) for segment in segments]

    head = segments[0]
    args = _evaluate_args(head, stack)
    if keys[0] is NO_KEY and not head.call:
        value: Any = ContextStack(stack)
    else:
        value = _search_stack(var, stack, keys[0], args, head.call, strict)
        if value is NO_VALUE:
            return NO_VALUE

    for segment, key in zip(segments[1:], keys[1:]):
        args = _evaluate_args(segment, stack)
        try:
            value = _probe(var, value, key, args, segment.call)
        except LookupMiss as miss:
            if strict or miss.kind not in _SOFT_MISSES:
                raise _resolution_error(var, miss) from None
            logger.debug("Path %s stopped at %r: %s", describe(var), key, miss.kind.value)
            return NO_VALUE
    return value


def evaluate(operand: Operand, stack: Sequence[Any], strict: bool) -> Any:
    """Evaluate a literal, interpolated or path operand."""
    if isinstance(operand, Const):
        return operand.value
    if isinstance(operand, Interpolation):
        from strata.runtime.executor import render_fragment

        return render_fragment(operand.body, stack)
    return resolve(operand, stack, strict)


def _evaluate_key(segment: Segment, stack: Sequence[Any]) -> Any:
    name = segment.name
    if name is None:
        return NO_KEY
    return deref(evaluate(name, stack, strict=True))


def _evaluate_args(segment: Segment, stack: Sequence[Any]) -> list[Any]:
    return [deref(evaluate(arg, stack, strict=True)) for arg in segment.args]


def _search_stack(
    var: Var,
    stack: Sequence[Any],
    key: Any,
    args: list[Any],
    call: bool,
    strict: bool,
) -> Any:
    """Probe scopes innermost-first; the first scope that matches wins."""
    miss: LookupMiss | None = None
    for scope in reversed(stack):
        try:
            return _probe(var, scope, key, args, call)
        except LookupMiss as scope_miss:
            miss = scope_miss
    if miss is None:
        miss = LookupMiss(MissKind.NIL_RECEIVER, key, "empty context stack")
    if strict:
        raise _resolution_error(var, miss, stack) from None
    logger.debug("Path %s not found in %d scope(s)", describe(var), len(stack))
    return NO_VALUE


def _probe(var: Var, value: Any, key: Any, args: list[Any], call: bool) -> Any:
    try:
        return probe(value, key, args, call)
    except (LookupMiss, TemplateError):
        raise
    except Exception as e:
        raise _host_error(var, e) from e


def _template_location() -> tuple[str | None, list[tuple[str, int]]]:
    render_ctx = get_render_context()
    if render_ctx is None:
        return None, []
    return render_ctx.template_name, render_ctx.template_stack


def _resolution_error(
    var: Var,
    miss: LookupMiss,
    stack: Sequence[Any] | None = None,
) -> ResolutionError:
    template_name, template_stack = _template_location()
    error_cls = _MISS_ERRORS[miss.kind]
    if error_cls is UndefinedError and stack is not None:
        names: set[str] = set()
        for scope in stack:
            scope = deref(scope)
            if isinstance(scope, Mapping):
                names.update(k for k in scope if isinstance(k, str))
        return UndefinedError(
            describe(var),
            var.lineno,
            template_name,
            miss.detail,
            template_stack,
            available_names=frozenset(names),
        )
    return error_cls(describe(var), var.lineno, template_name, miss.detail, template_stack)


def _host_error(var: Var, error: Exception) -> TemplateRuntimeError:
    """Wrap an exception raised by host code during a lookup or call."""
    template_name, template_stack = _template_location()
    error_str = str(error).strip() or f"{type(error).__name__} (no details available)"
    return TemplateRuntimeError(
        f"{type(error).__name__}: {error_str}",
        expression=describe(var),
        template_name=template_name,
        lineno=var.lineno,
        template_stack=template_stack,
    )
