"""Output nodes for the strata document tree."""

from __future__ import annotations

from dataclasses import dataclass

from strata.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Literal bytes between template constructs."""

    value: bytes
