"""Strata — a streaming template runtime over host values.

Strata runs a parsed template document (a tree of immutable nodes) against
a stack of host values and streams the output, as bytes, to any object with
a ``write`` method.

Quickstart:
    >>> from strata import Template
    >>> from strata.nodes import Const, Segment, Text, Var
    >>> page = Template([Text(1, b"Hello, "), Var(1, (Segment(Const("name")),))])
    >>> page.render({"name": "World"})
    'Hello, World'

Architecture:
Nodes → Executor → Resolver → Value model → Sink

1. **Nodes**: Immutable document tree (Text, Var, If, For, Return, Defer)
2. **Executor**: Walks nodes depth-first, one handler per node type
3. **Resolver**: Turns a path into a value by searching the context stack
4. **Value model**: Category, lookup and call capabilities of host values

Strict Mode:
Non-strict templates (the default) render nothing for a path that does not
resolve. Strict templates raise ``UndefinedError``:

    >>> page.configure(strict=True).render({})  # Raises UndefinedError

Deferred Output:
``Defer`` blocks render while the document runs but are written only after
everything else, newest first, and only if the run succeeded.

Thread-Safety:
Templates and nodes are immutable. Each run keeps its state in local
variables and a ContextVar, so one template can run on many threads.

Free-Threading (PEP 703):
Declares GIL-independence via `_Py_mod_gil = 0` attribute.

"""

from strata.environment import (
    ArgumentMismatchError,
    ComparisonError,
    Environment,
    ErrorCode,
    InaccessibleMemberError,
    LoopConfigError,
    NestedTemplateError,
    NestingDepthError,
    NilReceiverError,
    NotCallableError,
    ResolutionError,
    TemplateError,
    TemplateRuntimeError,
    UndefinedError,
)
from strata.render_context import RenderContext, get_render_context, render_context
from strata.runtime import NO_VALUE, Category, Ref, category_of, lookup
from strata.template import NestedTemplate, Template
from strata.utils.html import Sink, html_escape, write_escaped_html

__version__ = "0.1.0"

__all__ = [
    "NO_VALUE",
    "ArgumentMismatchError",
    "Category",
    "ComparisonError",
    "Environment",
    "ErrorCode",
    "InaccessibleMemberError",
    "LoopConfigError",
    "NestedTemplate",
    "NestedTemplateError",
    "NestingDepthError",
    "NilReceiverError",
    "NotCallableError",
    "Ref",
    "RenderContext",
    "ResolutionError",
    "Sink",
    "Template",
    "TemplateError",
    "TemplateRuntimeError",
    "UndefinedError",
    "__version__",
    "category_of",
    "get_render_context",
    "html_escape",
    "lookup",
    "render_context",
    "write_escaped_html",
]


# Free-threading declaration (PEP 703)
def __getattr__(name: str) -> object:
    """Module-level getattr for the free-threading declaration."""
    if name == "_Py_mod_gil":
        # 0 = Py_MOD_GIL_NOT_USED
        return 0
    raise AttributeError(f"module 'strata' has no attribute {name!r}")
