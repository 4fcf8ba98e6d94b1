"""Strata Template — a node document ready to run against a context stack.

A Template pairs an immutable node sequence with the settings that control
how it runs. Running walks the nodes depth-first and streams bytes to a sink.

Architecture:
    ```
    Template
    ├── _nodes: tuple[Node, ...]      # Shared, never mutated
    ├── _config: TemplateConfig       # strict + escape hook
    ├── _globals: Mapping | None      # Outermost scope, if any
    └── _name                         # For error messages
    ```

Deferred Output:
Every run owns a registry of deferred buffers. ``Defer`` blocks render into
it while the document runs; once the whole document finished without error,
the buffers are written to the sink newest first. A failed run writes none
of them.

Thread-Safety:
- Templates are immutable after construction
- ``run()`` creates only local state (stack, registry, executor)
- Multiple threads can run the same template simultaneously

"""

from __future__ import annotations

import io
import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from strata.runtime.executor import EscapeHook, TemplateConfig, run_nodes
from strata.utils.html import write_escaped_html

if TYPE_CHECKING:
    from strata.nodes import Node
    from strata.template.nested import NestedTemplate
    from strata.utils.html import Sink

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class Template:
    """Node document ready for running.

    Thread-Safety:
        - Template object is immutable after construction
        - Each ``run()`` call creates local state only
        - Multiple threads can run the same template simultaneously

    Attributes:
        name: Template identifier (for error messages)
        strict: Whether resolution misses raise
        escape: Escape hook applied to escapable output, or None

    Methods:
        run(sink, *context): Stream output to a byte sink
        render(*context): Render to a string
        nested(*context): Bind a context for use as a value

    Example:
            >>> from strata import Template
            >>> from strata.nodes import Const, Segment, Text, Var
            >>> t = Template([Text(1, b"Hello, "), Var(1, (Segment(Const("name")),))])
            >>> t.render({"name": "<World>"})
            'Hello, &lt;World&gt;'

    """

    __slots__ = ("_config", "_globals", "_max_nesting_depth", "_name", "_nodes")

    def __init__(
        self,
        nodes: Sequence[Node],
        *,
        strict: bool = False,
        escape: EscapeHook | None = write_escaped_html,
        name: str | None = None,
        globals: Mapping[str, Any] | None = None,
        max_nesting_depth: int = 50,
    ):
        if max_nesting_depth < 1:
            raise ValueError(f"max_nesting_depth must be at least 1, got {max_nesting_depth}")
        if escape is not None and not callable(escape):
            raise ValueError(f"escape must be callable or None, got {type(escape).__name__}")
        self._nodes = tuple(nodes)
        self._config = TemplateConfig(strict=strict, escape=escape)
        self._name = name
        self._globals = globals
        self._max_nesting_depth = max_nesting_depth

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self._nodes

    @property
    def strict(self) -> bool:
        return self._config.strict

    @property
    def escape(self) -> EscapeHook | None:
        return self._config.escape

    @property
    def globals(self) -> Mapping[str, Any] | None:
        return self._globals

    def configure(self, *, strict: bool = _UNSET, escape: EscapeHook | None = _UNSET) -> Template:
        """Return a copy with different settings, sharing the same nodes.

        Example:
            >>> raw = page.configure(escape=None)
            >>> checked = page.configure(strict=True)
        """
        return Template(
            self._nodes,
            strict=self._config.strict if strict is _UNSET else strict,
            escape=self._config.escape if escape is _UNSET else escape,
            name=self._name,
            globals=self._globals,
            max_nesting_depth=self._max_nesting_depth,
        )

    def stack_for(self, context: Sequence[Any]) -> tuple[Any, ...]:
        """Build the context stack for a run: globals first, then ``context``."""
        if self._globals is None:
            return tuple(context)
        return (self._globals, *context)

    def run(self, sink: Sink, *context: Any) -> None:
        """Run the template, writing its output to ``sink``.

        Args:
            sink: Object with ``write(bytes)``
            *context: Scopes, outermost first; the last one is searched first

        Raises:
            TemplateError: A path, loop or comparison failed. Output written
                before the failure stays in the sink; deferred output is
                discarded.
            OSError: The sink failed. Propagated unchanged.
        """
        from strata.render_context import render_context

        with render_context(template_name=self._name, max_depth=self._max_nesting_depth):
            logger.debug("Running template %s", self._name or "(inline)")
            self._execute(sink, self.stack_for(context))
            logger.debug("Finished template %s", self._name or "(inline)")

    def _execute(self, sink: Sink, stack: Sequence[Any]) -> None:
        """Run against a prepared stack inside the current render context."""
        run_nodes(self._config, self._nodes, sink, stack)

    def render_bytes(self, *context: Any) -> bytes:
        """Run into memory and return the output bytes."""
        buffer = io.BytesIO()
        self.run(buffer, *context)
        return buffer.getvalue()

    def render(self, *context: Any) -> str:
        """Run into memory and return the output decoded as UTF-8.

        Example:
            >>> t.render({"name": "World"})
            'Hello, World'
        """
        return self.render_bytes(*context).decode("utf-8")

    def nested(self, *context: Any) -> NestedTemplate:
        """Bind ``context`` to this template for use as a value elsewhere.

        The result renders with its own context stack, whatever the stack of
        the template it ends up in.
        """
        from strata.template.nested import NestedTemplate

        return NestedTemplate(self, context)

    def __repr__(self) -> str:
        return f"<Template {self._name or '(inline)'}>"
