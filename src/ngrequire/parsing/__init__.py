"""
Parsing of requiredness markers and `@required if` expressions.
"""

from ngrequire.parsing.expression import (
    CompiledExpression,
    ExpressionParser,
    compile_predicate,
    tokenize,
)
from ngrequire.parsing.markers import RequiredMarker, resolve_requiredness, scan_marker

__all__ = [
    "CompiledExpression",
    "ExpressionParser",
    "compile_predicate",
    "tokenize",
    "RequiredMarker",
    "resolve_requiredness",
    "scan_marker",
]
