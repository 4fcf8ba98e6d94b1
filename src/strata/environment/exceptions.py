"""Exceptions for the strata template engine.

Exception Hierarchy:
TemplateError (base)
├── ResolutionError               # Path could not be resolved
│   ├── UndefinedError            # No attribute, key or index matched
│   ├── NilReceiverError          # Lookup into a nil value
│   ├── NotCallableError          # Call of a value that is not callable
│   ├── ArgumentMismatchError     # Arguments do not fit the callable
│   └── InaccessibleMemberError   # Private (underscore) member
└── TemplateRuntimeError          # Render-time error with context
    ├── NestedTemplateError       # A template value failed while rendering
    ├── NestingDepthError         # Template values nested too deeply
    ├── LoopConfigError           # Index offset requested over a mapping
    └── ComparisonError           # Operands of incompatible categories

Error Messages:
Every error carries the line of the node that failed. Runtime errors also
carry the template name, the values involved and a suggestion:

    ```
    UndefinedError: Undefined variable 'usr.name' in page:3. Did you mean 'user'?
      Hint: Pass 'usr' in the context, or render with strict=False
    ```

Sink write failures are never wrapped: they propagate as raised by the sink.

"""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar

from strata.environment import terminal

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------


class ErrorCode(Enum):
    """Searchable error codes for strata errors.

    Format: S-{CATEGORY}-{NUMBER}
    Categories: RES (resolution), RUN (runtime), CFG (configuration)
    """

    # Resolution errors (S-RES-xxx)
    UNDEFINED_VARIABLE = "S-RES-001"
    NIL_RECEIVER = "S-RES-002"
    NOT_CALLABLE = "S-RES-003"
    ARGUMENT_MISMATCH = "S-RES-004"
    INACCESSIBLE_MEMBER = "S-RES-005"

    # Runtime errors (S-RUN-xxx)
    RUNTIME_ERROR = "S-RUN-001"
    NESTED_TEMPLATE = "S-RUN-002"
    NESTING_DEPTH = "S-RUN-003"

    # Configuration errors (S-CFG-xxx)
    LOOP_CONFIG = "S-CFG-001"
    INCOMPARABLE = "S-CFG-002"

    @property
    def category(self) -> str:
        """Error category (e.g., 'resolution', 'runtime', 'configuration')."""
        prefix = self.value.split("-")[1]
        return {
            "RES": "resolution",
            "RUN": "runtime",
            "CFG": "configuration",
        }.get(prefix, "unknown")


def format_template_stack(stack: list[tuple[str, int]] | None) -> str:
    """Format the chain of nested templates for error messages.

    Example:
        >>> print(format_template_stack([("page", 4), ("card", 2)]))
        Template stack:
          • page:4
          • card:2
    """
    if not stack:
        return ""

    lines = [terminal.dim_text("Template stack:")]
    for template_name, line_num in stack:
        lines.append(f"  • {terminal.location(template_name)}:{terminal.line_number(str(line_num))}")
    return "\n".join(lines)


def _location(template_name: str | None, lineno: int | None) -> str:
    loc = template_name or "<template>"
    if lineno:
        loc += f":{lineno}"
    return loc


class TemplateError(Exception):
    """Base exception for all strata errors.

        >>> try:
        ...     template.run(sink, data)
        ... except TemplateError as e:
        ...     log.error("Template error: %s", e.format_compact())

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format error as a one-screen summary prefixed with its code."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        return header


# ---------------------------------------------------------------------------
# Resolution errors
# ---------------------------------------------------------------------------


class ResolutionError(TemplateError):
    """A path could not be resolved against the context stack.

    Raised for every miss in strict mode, and in non-strict mode for any
    miss other than "not found" or "nil receiver" past the first segment.

    Attributes:
        path: Dotted form of the path that failed (e.g. ``user.name``)
        lineno: Line of the originating node
        template: Template name, or ``<template>``
        detail: Extra information from the failed probe
        template_stack: (name, line) pairs of enclosing nested templates
    """

    code: ErrorCode | None = None
    reason: ClassVar[str] = "Cannot resolve"

    def __init__(
        self,
        path: str,
        lineno: int | None = None,
        template: str | None = None,
        detail: str | None = None,
        template_stack: list[tuple[str, int]] | None = None,
    ):
        self.path = path
        self.lineno = lineno
        self.template = template or "<template>"
        self.detail = detail
        self.template_stack = template_stack or []
        super().__init__(self._format_message())

    def _header(self) -> str:
        location = _location(self.template, self.lineno)
        msg = f"{self.reason} '{self.path}' in {terminal.location(location)}"
        if self.detail:
            msg += f" ({self.detail})"
        return msg

    def _hint(self) -> str | None:
        return None

    def _format_message(self) -> str:
        msg = self._header()
        if self.template_stack:
            msg += "\n\n" + format_template_stack(self.template_stack)
        hint_text = self._hint()
        if hint_text:
            msg += f"\n  {terminal.hint('Hint:')} {hint_text}"
        return msg

    def format_compact(self) -> str:
        parts = [terminal.format_error_header(self.code.value if self.code else None, self._header())]
        if self.template_stack:
            parts.append(format_template_stack(self.template_stack))
        hint_text = self._hint()
        if hint_text:
            parts.append(f"  {terminal.hint('Hint:')} {hint_text}")
        return "\n".join(parts)


class UndefinedError(ResolutionError):
    """No scope, attribute, key or index matched the path.

    If ``available_names`` is provided, a "Did you mean?" suggestion is
    included when a close match is found (using ``difflib.get_close_matches``).

    Example:
            >>> Template([Var(1, (Segment(Const("titl")),))], strict=True).render({"title": "x"})
        UndefinedError: Undefined variable 'titl' in <template>:1. Did you mean 'title'?

    """

    code: ErrorCode | None = ErrorCode.UNDEFINED_VARIABLE
    reason: ClassVar[str] = "Undefined variable"

    def __init__(
        self,
        path: str,
        lineno: int | None = None,
        template: str | None = None,
        detail: str | None = None,
        template_stack: list[tuple[str, int]] | None = None,
        available_names: frozenset[str] | None = None,
    ):
        self._available_names = available_names
        super().__init__(path, lineno, template, detail, template_stack)

    def _header(self) -> str:
        msg = super()._header()
        if self._available_names:
            from difflib import get_close_matches

            root = self.path.split(".", 1)[0].split("[", 1)[0].split("(", 1)[0]
            matches = get_close_matches(root, self._available_names, n=1, cutoff=0.6)
            if matches and matches[0] != root:
                msg += f". Did you mean '{terminal.suggestion(matches[0])}'?"
        return msg

    def _hint(self) -> str | None:
        return f"Pass '{self.path}' in the context, or render with strict=False"


class NilReceiverError(ResolutionError):
    """A later path segment was looked up on a nil value."""

    code: ErrorCode | None = ErrorCode.NIL_RECEIVER
    reason: ClassVar[str] = "Lookup on nil value in"

    def _hint(self) -> str | None:
        return "Check that every value along the path is set"


class NotCallableError(ResolutionError):
    """A call was requested on a value that is not callable."""

    code: ErrorCode | None = ErrorCode.NOT_CALLABLE
    reason: ClassVar[str] = "Not callable:"


class ArgumentMismatchError(ResolutionError):
    """The callable does not accept the given positional arguments."""

    code: ErrorCode | None = ErrorCode.ARGUMENT_MISMATCH
    reason: ClassVar[str] = "Wrong arguments for"


class InaccessibleMemberError(ResolutionError):
    """The path named a private member (leading underscore) of an object."""

    code: ErrorCode | None = ErrorCode.INACCESSIBLE_MEMBER
    reason: ClassVar[str] = "Inaccessible member in"

    def _hint(self) -> str | None:
        return "Names starting with '_' are private; expose a public attribute instead"


# ---------------------------------------------------------------------------
# Runtime errors
# ---------------------------------------------------------------------------


class TemplateRuntimeError(TemplateError):
    """Render-time error with debugging context.

    Output Format:
            ```
            Runtime Error: division by zero
              Location: report:12
              Expression: stats.ratio()
              Suggestion: ...
            ```

    Attributes:
        message: Error description
        expression: Path or construct that failed
        values: Dict of names -> values for context
        template_name: Name of the template
        lineno: Line number of the failing node
        suggestion: Actionable fix suggestion
        template_stack: (name, line) pairs of enclosing nested templates

    """

    code: ErrorCode | None = ErrorCode.RUNTIME_ERROR

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        values: dict[str, Any] | None = None,
        template_name: str | None = None,
        lineno: int | None = None,
        suggestion: str | None = None,
        template_stack: list[tuple[str, int]] | None = None,
    ):
        self.message = message
        self.expression = expression
        self.values = values or {}
        self.template_name = template_name
        self.lineno = lineno
        self.suggestion = suggestion
        self.template_stack = template_stack or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [f"Runtime Error: {self.message}"]

        if self.template_name or self.lineno:
            loc = _location(self.template_name, self.lineno)
            parts.append(f"  Location: {terminal.location(loc)}")

        if self.template_stack:
            parts.append("")
            parts.append(format_template_stack(self.template_stack))

        if self.expression:
            parts.append(f"  Expression: {self.expression}")

        if self.values:
            parts.append("  Values:")
            for name, value in self.values.items():
                type_name = type(value).__name__
                value_repr = repr(value)
                if len(value_repr) > 80:
                    value_repr = value_repr[:77] + "..."
                parts.append(f"    {name} = {value_repr} ({type_name})")

        if self.suggestion:
            parts.append(f"\n  {terminal.hint('Suggestion:')} {self.suggestion}")

        return "\n".join(parts)

    def format_compact(self) -> str:
        parts = [
            terminal.format_error_header(self.code.value if self.code else None, self.message),
            f"  Location: {terminal.location(_location(self.template_name, self.lineno))}",
        ]
        if self.template_stack:
            parts.append(format_template_stack(self.template_stack))
        if self.expression:
            parts.append(f"  Expression: {self.expression}")
        if self.suggestion:
            parts.append(f"  {terminal.hint('Hint:')} {self.suggestion}")
        return "\n".join(parts)


class NestedTemplateError(TemplateRuntimeError):
    """A template used as a value failed while rendering.

    The original error is kept in ``inner`` (and as ``__cause__``); the
    line reported is the line of the outer node that rendered the template.
    """

    code: ErrorCode | None = ErrorCode.NESTED_TEMPLATE

    def __init__(self, inner: TemplateError, **kwargs: Any):
        self.inner = inner
        first_line = str(inner).splitlines()[0] if str(inner) else type(inner).__name__
        super().__init__(f"Nested template failed: {terminal.strip_colors(first_line)}", **kwargs)


class NestingDepthError(TemplateRuntimeError):
    """Template values were nested deeper than the configured maximum."""

    code: ErrorCode | None = ErrorCode.NESTING_DEPTH


class LoopConfigError(TemplateRuntimeError):
    """A loop over a mapping asked for a numeric index offset.

    Mapping iteration binds keys, not positions, so an offset has no meaning.
    The check runs whether or not the mapping is empty.
    """

    code: ErrorCode | None = ErrorCode.LOOP_CONFIG

    def __init__(self, start: int, **kwargs: Any):
        self.start = start
        super().__init__(
            f"Index offset {start} is not allowed when looping over a mapping",
            values={"start": start},
            suggestion="Remove the index offset, or loop over a sequence of keys instead",
            **kwargs,
        )


class ComparisonError(TemplateRuntimeError):
    """A conditional compared values of incompatible categories.

    Example:
            >>> {% if items < 3 %}
        ComparisonError: Cannot compare list with int using '<'

    """

    code: ErrorCode | None = ErrorCode.INCOMPARABLE

    def __init__(self, left: Any, right: Any, operator: str, **kwargs: Any):
        self.left = left
        self.right = right
        self.operator = operator
        super().__init__(
            f"Cannot compare {type(left).__name__} with {type(right).__name__} using '{operator}'",
            values={"left": left, "right": right},
            suggestion="Compare numbers with numbers and strings with strings",
            **kwargs,
        )
