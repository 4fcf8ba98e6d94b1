"""Base node class for the strata document tree."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all document nodes.

    All nodes track their source line for error reporting.
    Nodes are immutable so a document can be shared between runs.

    """

    lineno: int
