"""
ngrequire exception classes.

This package provides all exception types raised by the analysis so callers
can tell broken annotations apart from ordinary findings.
"""

from ngrequire.exceptions.core import (
    ConfigurationError,
    DuplicateComponentError,
    ExpressionSyntaxError,
    NgRequireError,
    RequiredExpressionError,
    UnknownIdentifierError,
)

__all__ = [
    "NgRequireError",
    "ConfigurationError",
    "DuplicateComponentError",
    "ExpressionSyntaxError",
    "RequiredExpressionError",
    "UnknownIdentifierError",
]
