"""Strata runtime: value model, path resolution and node execution."""

from strata.runtime.executor import Executor, TemplateConfig, render_fragment, run_nodes
from strata.runtime.resolver import evaluate, resolve
from strata.runtime.values import (
    NO_KEY,
    NO_VALUE,
    Category,
    ContextStack,
    LookupMiss,
    MissKind,
    Ref,
    category_of,
    compare,
    deref,
    invoke,
    lookup,
    probe,
    to_bytes,
    truthy,
)

__all__ = [
    "NO_KEY",
    "NO_VALUE",
    "Category",
    "ContextStack",
    "Executor",
    "LookupMiss",
    "MissKind",
    "Ref",
    "TemplateConfig",
    "category_of",
    "compare",
    "deref",
    "evaluate",
    "invoke",
    "lookup",
    "probe",
    "render_fragment",
    "resolve",
    "run_nodes",
    "to_bytes",
    "truthy",
]
