"""Templates bound to their own context."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from strata.template.core import Template
    from strata.utils.html import Sink


class NestedTemplate:
    """A Template + context pair, usable as a value in another context.

    When a path resolves to a NestedTemplate the executor runs it against
    its bound context instead of the enclosing stack.

    Example:
        >>> card = card_template.nested({"title": "News"})
        >>> page.render({"sidebar": card})
        >>> str(card)               # Render on its own
        '<div>News</div>'
    """

    __slots__ = ("_context", "_template")

    def __init__(self, template: Template, context: tuple[Any, ...]):
        self._template = template
        self._context = tuple(context)

    @property
    def template(self) -> Template:
        return self._template

    @property
    def context(self) -> tuple[Any, ...]:
        return self._context

    @property
    def stack(self) -> tuple[Any, ...]:
        """The bound context stack, with the template's globals first."""
        return self._template.stack_for(self._context)

    def run(self, sink: Sink) -> None:
        self._template.run(sink, *self._context)

    def render(self) -> str:
        buffer = io.BytesIO()
        self.run(buffer)
        return buffer.getvalue().decode("utf-8")

    def __str__(self) -> str:
        """Render and return full string."""
        return self.render()

    def __repr__(self) -> str:
        return f"<NestedTemplate {self._template.name or '(inline)'} scopes={len(self._context)}>"
