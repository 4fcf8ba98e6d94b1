"""Strata RenderContext — per-run state kept out of the user's context stack.

Tracks the template being rendered, how deeply template values are nested
inside each other, and the chain of nested templates for error messages.

Benefits:
    - Clean context stack (no internal scope pushed for bookkeeping)
    - Thread-safe via ContextVar
    - Nested runs restore the outer state on exit, even on error

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field


@dataclass
class RenderContext:
    """Per-run state isolated from the context stack.

    Thread Safety:
        ContextVars are thread-local by design. Each thread has its own
        RenderContext instance.

    Attributes:
        template_name: Current template name for error messages
        depth: How many template values enclose the current run
        max_depth: Maximum allowed nesting depth
        template_stack: Stack of (template_name, line) for error traces
    """

    template_name: str | None = None

    # 50 is deep enough for any real composition while catching a
    # template that resolves to itself early.
    depth: int = 0
    max_depth: int = 50

    template_stack: list[tuple[str, int]] = field(default_factory=list)

    def check_nesting_depth(self, template_name: str | None) -> None:
        """Check if the nesting limit is reached.

        Raises:
            NestingDepthError: If depth >= max_depth
        """
        if self.depth >= self.max_depth:
            from strata.environment.exceptions import NestingDepthError

            raise NestingDepthError(
                f"Maximum nesting depth exceeded ({self.max_depth}) "
                f"when rendering '{template_name or '(inline)'}'",
                template_name=self.template_name,
                template_stack=self.template_stack,
                suggestion="Check for a template that renders itself: A → B → A",
            )

    def child_context(self, template_name: str | None, line: int) -> RenderContext:
        """Create the context for a template value rendered at ``line``.

        Appends the current location to template_stack for error traces.
        """
        new_stack = self.template_stack.copy()
        new_stack.append((self.template_name or "<template>", line))
        return RenderContext(
            template_name=template_name,
            depth=self.depth + 1,
            max_depth=self.max_depth,
            template_stack=new_stack,
        )


_render_context: ContextVar[RenderContext | None] = ContextVar(
    "strata_render_context",
    default=None,
)


def get_render_context() -> RenderContext | None:
    """Get current render context (None if not in a run)."""
    return _render_context.get()


@contextmanager
def render_context(
    template_name: str | None = None,
    max_depth: int = 50,
) -> Iterator[RenderContext]:
    """Context manager for run-scoped state.

    Creates a new RenderContext and makes it current for the duration of
    the with block, restoring the previous one on exit.

    Example:
        with render_context(template_name="page") as ctx:
            executor.execute(nodes, stack)
    """
    ctx = RenderContext(template_name=template_name, max_depth=max_depth)
    token: Token[RenderContext | None] = _render_context.set(ctx)
    try:
        yield ctx
    finally:
        _render_context.reset(token)


@contextmanager
def nested_render_context(template_name: str | None, line: int) -> Iterator[RenderContext]:
    """Enter a child context for a template value rendered at ``line``.

    Outside any run this behaves like ``render_context``.

    Raises:
        NestingDepthError: If the nesting limit is reached
    """
    parent = _render_context.get()
    if parent is None:
        ctx = RenderContext(template_name=template_name)
    else:
        parent.check_nesting_depth(template_name)
        ctx = parent.child_context(template_name, line)
    token = _render_context.set(ctx)
    try:
        yield ctx
    finally:
        _render_context.reset(token)
