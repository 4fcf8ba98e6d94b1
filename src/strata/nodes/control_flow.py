"""Control flow nodes for the strata document tree."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from strata.nodes.base import Node
from strata.nodes.path import Operand, Var


class Compare(Enum):
    """Comparison operators allowed in a conditional."""

    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="


@dataclass(frozen=True, slots=True)
class If(Node):
    """Conditional: {% if test %}...{% else %}...{% end %}

    With ``op`` set, ``test`` is compared against ``right`` instead of being
    tested for truthiness.
    """

    test: Operand
    body: Sequence[Node]
    else_: Sequence[Node] = ()
    op: Compare | None = None
    right: Operand | None = None


@dataclass(frozen=True, slots=True)
class For(Node):
    """Loop: {% for index, target in iter %}...{% empty %}...{% end %}

    ``start`` is added to every positional index, so ``start=1`` counts
    from one.
    """

    iter: Var
    target: str
    body: Sequence[Node]
    index: str = ""
    start: int = 0
    empty: Sequence[Node] = ()


@dataclass(frozen=True, slots=True)
class Return(Node):
    """Stop rendering the document: {% return %}"""


@dataclass(frozen=True, slots=True)
class Defer(Node):
    """Render now, emit after the document: {% defer %}...{% end %}"""

    body: Sequence[Node]
