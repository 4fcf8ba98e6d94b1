"""Path nodes: variable access and call chains.

A path such as ``user.address[0].format("short")`` is a ``Var`` holding an
ordered sequence of ``Segment`` objects. Each segment carries an optional
name selector, positional argument operands and a call flag:

    user            Segment(Const("user"))
    .address        Segment(Const("address"))
    [0]             Segment(Const(0))
    .format(...)    Segment(Const("format"), args=(Const("short"),), call=True)

Selectors and arguments are operands: literal constants, interpolated
sub-documents rendered to text, or nested paths.

"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeAlias

from strata.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Const:
    """Literal scalar operand: string, number or boolean."""

    value: str | int | float | bool


@dataclass(frozen=True, slots=True)
class Interpolation:
    """Sub-document operand, rendered to text when evaluated: ``[@"item_{{ id }}"]``"""

    body: Sequence[Node]


@dataclass(frozen=True, slots=True)
class Segment:
    """One step of a path.

    Attributes:
        name: Selector for this step. ``None`` means no selector: on the
            first segment the path then denotes the context stack itself,
            or a pure call of the innermost callable scope when ``call``
            is set.
        args: Positional argument operands, evaluated strictly.
        call: True if this step is a function or method call.
    """

    name: Operand | None = None
    args: Sequence[Operand] = ()
    call: bool = False


@dataclass(frozen=True, slots=True)
class Var(Node):
    """Variable or call output: {{ user.name }}"""

    segments: Sequence[Segment]
    escape: bool = True


Operand: TypeAlias = "Const | Interpolation | Var"


def describe(var: Var) -> str:
    """Render a path back into a readable dotted form for error messages.

    Example:
        >>> describe(Var(1, (Segment(Const("user")), Segment(Const(0)))))
        'user[0]'
    """
    parts: list[str] = []
    for position, segment in enumerate(var.segments):
        name = segment.name
        if name is None:
            if position == 0 and not segment.call:
                parts.append("@")
        elif isinstance(name, Const):
            value = name.value
            if isinstance(value, str) and value.isidentifier():
                parts.append(value if position == 0 else f".{value}")
            else:
                parts.append(f"[{value!r}]")
        elif isinstance(name, Var):
            parts.append(f"[{describe(name)}]")
        else:
            parts.append("[...]")
        if segment.call:
            parts.append("(" + ", ".join("_" for _ in segment.args) + ")")
    return "".join(parts) or "@"
