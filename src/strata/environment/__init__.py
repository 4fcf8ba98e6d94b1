"""Strata environment: configuration, errors and terminal formatting."""

from strata.environment.core import Environment
from strata.environment.exceptions import (
    ArgumentMismatchError,
    ComparisonError,
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

__all__ = [
    "ArgumentMismatchError",
    "ComparisonError",
    "Environment",
    "ErrorCode",
    "InaccessibleMemberError",
    "LoopConfigError",
    "NestedTemplateError",
    "NestingDepthError",
    "NilReceiverError",
    "NotCallableError",
    "ResolutionError",
    "TemplateError",
    "TemplateRuntimeError",
    "UndefinedError",
]
