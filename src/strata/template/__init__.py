"""Strata Template package — node documents ready for running.

Re-exports the public symbols so that ``from strata.template import Template``
works without knowing the module layout.

"""

from strata.template.core import Template
from strata.template.nested import NestedTemplate

__all__ = [
    "NestedTemplate",
    "Template",
]
