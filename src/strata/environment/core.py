"""Strata Environment — defaults shared by the templates it builds.

An Environment holds the run settings (strict mode, escape hook, nesting
limit) and a globals mapping that becomes the outermost scope of every
template it creates.

    >>> env = Environment(strict=True, globals={"site": "Example"})
    >>> page = env.from_nodes(nodes, name="page")
    >>> page.render({"title": "Home"})

Thread-Safety:
``add_global`` replaces the globals dict instead of mutating it
(copy-on-write), so templates already built keep the globals they were
given and concurrent runs never see a half-updated mapping.

"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from strata.utils.html import write_escaped_html

if TYPE_CHECKING:
    from strata.nodes import Node
    from strata.template import Template
    from strata.utils.html import Sink


@dataclass
class Environment:
    """Configuration for building templates.

    Attributes:
        strict: Raise on any resolution miss instead of rendering nothing
        escape: Escape hook for escapable output; None disables escaping
        globals: Outermost scope of every template built here
        max_nesting_depth: Limit for template values rendered inside each other

    Raises:
        ValueError: If a setting is invalid
    """

    strict: bool = False
    escape: Callable[[Sink, bytes], None] | None = write_escaped_html
    globals: dict[str, Any] = field(default_factory=dict)
    max_nesting_depth: int = 50

    def __post_init__(self) -> None:
        if not isinstance(self.strict, bool):
            raise ValueError(f"strict must be a bool, got {type(self.strict).__name__}")
        if self.escape is not None and not callable(self.escape):
            raise ValueError(f"escape must be callable or None, got {type(self.escape).__name__}")
        if self.max_nesting_depth < 1:
            raise ValueError(
                f"max_nesting_depth must be at least 1, got {self.max_nesting_depth}"
            )
        self.globals = dict(self.globals)

    def from_nodes(self, nodes: Sequence[Node], name: str | None = None) -> Template:
        """Build a Template from a node document with this environment's settings."""
        from strata.template import Template

        return Template(
            nodes,
            strict=self.strict,
            escape=self.escape,
            name=name,
            globals=self.globals,
            max_nesting_depth=self.max_nesting_depth,
        )

    def add_global(self, name: str, value: Any) -> None:
        """Add or replace a global.

        Templates built earlier keep the globals they were built with.
        """
        new = self.globals.copy()
        new[name] = value
        self.globals = new
