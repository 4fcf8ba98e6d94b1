"""Execution engine: walk a node sequence and write its output.

The executor is a tree walker. Each node type maps to a handler in
``_NODE_HANDLERS``; a handler returns True when a ``Return`` node was
reached, which stops every enclosing level.

    Executor(config, sink, deferred)
    ├── config: TemplateConfig      # strict + escape hook, immutable
    ├── sink: Sink                  # append-only byte sink
    └── deferred: list[bytes]       # registry shared by the whole run

Sub-branches (conditional branches, loop bodies, deferred blocks) run
through the same ``execute`` call with another node sequence. The document
is never copied or mutated.

Loop iteration by value category:
    sequence: one fresh scope per item, index = position + start
    mapping:  one fresh scope per entry, index = key (start must be 0)
    stream:   drained once, index = running counter from start
    nil:      empty branch
    scalar:   body once, index = None

"""

from __future__ import annotations

import io
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from strata.environment.exceptions import (
    ComparisonError,
    LoopConfigError,
    NestedTemplateError,
    NestingDepthError,
    TemplateError,
)
from strata.nodes import Defer, For, If, Node, Return, Text, Var, describe
from strata.render_context import get_render_context, nested_render_context
from strata.runtime.resolver import evaluate, resolve
from strata.runtime.values import (
    NO_VALUE,
    Category,
    Incomparable,
    category_of,
    compare,
    deref,
    to_bytes,
    truthy,
)
from strata.utils.html import Sink

logger = logging.getLogger(__name__)

EscapeHook = Callable[[Sink, bytes], None]


@dataclass(frozen=True, slots=True)
class TemplateConfig:
    """Settings shared by every node sequence of one template."""

    strict: bool = False
    escape: EscapeHook | None = None


# Interpolated keys and arguments: must resolve, never escaped.
FRAGMENT_CONFIG = TemplateConfig(strict=True, escape=None)

_NODE_HANDLERS: dict[type[Node], str] = {
    Text: "_exec_text",
    Var: "_exec_var",
    If: "_exec_if",
    For: "_exec_for",
    Return: "_exec_return",
    Defer: "_exec_defer",
}


def _loop_scope(node: For, item: Any, index: Any) -> dict[str, Any]:
    scope = {node.target: item}
    if node.index:
        scope[node.index] = index
    return scope


class Executor:
    """Runs node sequences for one template run.

    Not thread-safe: each run builds its own executors. The document and
    config they read are immutable and may be shared.
    """

    __slots__ = ("_config", "_deferred", "_sink")

    def __init__(self, config: TemplateConfig, sink: Sink, deferred: list[bytes]):
        self._config = config
        self._sink = sink
        self._deferred = deferred

    def execute(self, nodes: Sequence[Node], stack: Sequence[Any]) -> bool:
        """Execute ``nodes`` in order.

        Returns:
            True if a ``Return`` node was reached.
        """
        for node in nodes:
            handler = _NODE_HANDLERS.get(type(node))
            if handler is None:
                raise TypeError(f"Unknown node type: {type(node).__name__}")
            if getattr(self, handler)(node, stack):
                return True
        return False

    # -- output ---------------------------------------------------------------

    def _emit(self, data: bytes, escape: bool) -> None:
        hook = self._config.escape
        if escape and hook is not None:
            hook(self._sink, data)
        else:
            self._sink.write(data)

    def _exec_text(self, node: Text, stack: Sequence[Any]) -> bool:
        self._sink.write(node.value)
        return False

    def _exec_var(self, node: Var, stack: Sequence[Any]) -> bool:
        from strata.template import NestedTemplate, Template

        value = deref(resolve(node, stack, self._config.strict))
        if value is None or value is NO_VALUE:
            return False
        if isinstance(value, Template):
            self._run_nested(value, value.stack_for(stack), node)
        elif isinstance(value, NestedTemplate):
            self._run_nested(value.template, value.stack, node)
        elif isinstance(value, (bytes, bytearray, memoryview)):
            self._emit(bytes(value), node.escape)
        else:
            self._emit(to_bytes(value), node.escape)
        return False

    def _run_nested(self, template: Any, stack: Sequence[Any], node: Var) -> None:
        """Render a template value as a complete run of its own."""
        try:
            with nested_render_context(template.name, node.lineno):
                template._execute(self._sink, stack)
        except NestingDepthError:
            raise
        except TemplateError as e:
            render_ctx = get_render_context()
            raise NestedTemplateError(
                e,
                expression=describe(node),
                template_name=render_ctx.template_name if render_ctx else None,
                lineno=node.lineno,
                template_stack=render_ctx.template_stack if render_ctx else None,
            ) from e

    # -- control flow -----------------------------------------------------------

    def _exec_if(self, node: If, stack: Sequence[Any]) -> bool:
        if node.op is None:
            chosen = truthy(deref(evaluate(node.test, stack, self._config.strict)))
        else:
            # Both sides of a comparison must exist.
            left = deref(evaluate(node.test, stack, strict=True))
            right = deref(evaluate(node.right, stack, strict=True)) if node.right is not None else None
            try:
                chosen = compare(left, node.op, right)
            except Incomparable:
                render_ctx = get_render_context()
                raise ComparisonError(
                    left,
                    right,
                    node.op.value,
                    template_name=render_ctx.template_name if render_ctx else None,
                    lineno=node.lineno,
                ) from None
        return self.execute(node.body if chosen else node.else_, stack)

    def _exec_for(self, node: For, stack: Sequence[Any]) -> bool:
        value = deref(resolve(node.iter, stack, strict=False))
        category = category_of(value)

        if category is Category.SEQUENCE:
            if not value:
                return self.execute(node.empty, stack)
            for position, item in enumerate(value):
                scope = _loop_scope(node, item, position + node.start)
                if self.execute(node.body, (*stack, scope)):
                    return True
            return False

        if category is Category.MAPPING:
            if node.start:
                render_ctx = get_render_context()
                raise LoopConfigError(
                    node.start,
                    expression=describe(node.iter),
                    template_name=render_ctx.template_name if render_ctx else None,
                    lineno=node.lineno,
                )
            if not value:
                return self.execute(node.empty, stack)
            for key, item in value.items():
                scope = _loop_scope(node, item, key)
                if self.execute(node.body, (*stack, scope)):
                    return True
            return False

        if category is Category.STREAM:
            counter = node.start
            for item in value:
                scope = _loop_scope(node, item, counter)
                if self.execute(node.body, (*stack, scope)):
                    return True
                counter += 1
            logger.debug("Drained %d item(s) from %s", counter - node.start, describe(node.iter))
            if counter == node.start:
                return self.execute(node.empty, stack)
            return False

        if category is Category.NIL:
            return self.execute(node.empty, stack)

        scope = _loop_scope(node, value, None)
        return self.execute(node.body, (*stack, scope))

    def _exec_return(self, node: Return, stack: Sequence[Any]) -> bool:
        return True

    def _exec_defer(self, node: Defer, stack: Sequence[Any]) -> bool:
        buffer = io.BytesIO()
        # A Return inside the block ends the block only.
        Executor(self._config, buffer, self._deferred).execute(node.body, stack)
        self._deferred.append(buffer.getvalue())
        return False


def run_nodes(
    config: TemplateConfig,
    nodes: Sequence[Node],
    sink: Sink,
    stack: Sequence[Any],
) -> None:
    """Execute a document and flush its deferred output, newest first.

    Deferred output is written only when execution raised nothing.
    """
    deferred: list[bytes] = []
    Executor(config, sink, deferred).execute(nodes, stack)
    for chunk in reversed(deferred):
        sink.write(chunk)
    if deferred:
        logger.debug("Flushed %d deferred block(s)", len(deferred))


def render_fragment(nodes: Sequence[Node], stack: Sequence[Any]) -> str:
    """Render an interpolated operand to text, strictly and unescaped."""
    buffer = io.BytesIO()
    run_nodes(FRAGMENT_CONFIG, nodes, buffer, stack)
    return buffer.getvalue().decode("utf-8", errors="surrogateescape")
