"""
Core types and configuration for ngrequire.
"""

from ngrequire.core.config import RequirednessMode, RuleOptions
from ngrequire.core.types import (
    ComponentDeclaration,
    ElementUsage,
    ExpressionRequiredness,
    Failure,
    Finding,
    InputDeclaration,
    Requiredness,
    SourceLocation,
    SourcePosition,
    SourceSpan,
    StaticRequiredness,
)

__all__ = [
    "RequirednessMode",
    "RuleOptions",
    "ComponentDeclaration",
    "ElementUsage",
    "ExpressionRequiredness",
    "Failure",
    "Finding",
    "InputDeclaration",
    "Requiredness",
    "SourceLocation",
    "SourcePosition",
    "SourceSpan",
    "StaticRequiredness",
]
