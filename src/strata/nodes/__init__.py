"""Strata document tree.

Nodes are produced by a parser and consumed by the executor. Every node is
a frozen, slotted dataclass, so a parsed document can be shared freely
between concurrent runs.

Node Types:
    Output: Text, Var
    Path parts: Segment, Const, Interpolation
    Control flow: If, For, Return, Defer

"""

from strata.nodes.base import Node
from strata.nodes.control_flow import Compare, Defer, For, If, Return
from strata.nodes.output import Text
from strata.nodes.path import Const, Interpolation, Operand, Segment, Var, describe

__all__ = [
    "Compare",
    "Const",
    "Defer",
    "For",
    "If",
    "Interpolation",
    "Node",
    "Operand",
    "Return",
    "Segment",
    "Text",
    "Var",
    "describe",
]
