"""
Requiredness markers in input member comments.

An input is tagged by writing `@required` in a comment next to it, either
before the decorator, between decorator and member, or at the end of the
member's line. `@required if <expr>` makes the requirement conditional on the
presence of sibling inputs.
"""

import re

from attrs import frozen

from ngrequire.core.config import RequirednessMode
from ngrequire.core.types import (
    ExpressionRequiredness,
    Requiredness,
    StaticRequiredness,
)

REQUIRED_MARKER_PATTERN = re.compile(r"@required\b")

# Expression runs to the end of the line or the close of a block comment
REQUIRED_EXPRESSION_PATTERN = re.compile(r"@required\s+if\s+(.*?)(\*?\*/|\n|$)")


@frozen
class RequiredMarker:
    """What the comment text around an input says about it."""

    tagged: bool
    expression: str | None = None


def scan_marker(comment_text: str) -> RequiredMarker:
    """
    Find the `@required` marker and optional condition in comment text.

    Params:
        comment_text: Source text surrounding the input member

    Returns:
        RequiredMarker, untagged when no marker is present
    """
    if not REQUIRED_MARKER_PATTERN.search(comment_text):
        return RequiredMarker(tagged=False)

    match = REQUIRED_EXPRESSION_PATTERN.search(comment_text)
    if match:
        # A trailing line comment is not part of the condition
        expression = match.group(1).split("//", 1)[0]
        return RequiredMarker(tagged=True, expression=expression.strip())
    return RequiredMarker(tagged=True)


def resolve_requiredness(
    comment_text: str, has_default: bool, mode: RequirednessMode
) -> Requiredness:
    """
    Decide the requiredness of one input.

    A marker always wins. Without one, tagged mode never requires the input
    and all-without-defaults mode requires it unless it has an initializer.

    Params:
        comment_text: Source text surrounding the input member
        has_default: Whether the member has an initializer
        mode: Configured default policy

    Returns:
        StaticRequiredness or ExpressionRequiredness
    """
    marker = scan_marker(comment_text)
    if marker.tagged:
        if marker.expression is not None:
            return ExpressionRequiredness(marker.expression)
        return StaticRequiredness(True)

    if mode == RequirednessMode.ALL_WITHOUT_DEFAULTS:
        return StaticRequiredness(not has_default)
    return StaticRequiredness(False)
