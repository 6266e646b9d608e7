"""
Template markup scanning.

Finds start tags in Angular template markup and turns each into an
`ElementUsage` carrying the names of the inputs and attributes it supplies.
This is a lightweight scanner, not an HTML parser: it only needs tag names,
attribute names and positions.
"""

import re

from ngrequire.core.types import ElementUsage, SourceSpan
from ngrequire.sources.text import LineIndex

COMMENT_PATTERN = re.compile(r"<!--.*?-->", re.DOTALL)

_ATTRIBUTE = r"""[^\s=>/"']+(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s"'>]+))?"""

START_TAG_PATTERN = re.compile(
    rf"<(?P<name>[A-Za-z][\w\-:.]*)(?P<attributes>(?:\s+{_ATTRIBUTE})*)\s*/?>"
)

ATTRIBUTE_PATTERN = re.compile(
    r"""(?P<name>[^\s=>/"']+)(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s"'>]+))?"""
)

# Bound names with these prefixes target the DOM element, not the component
NON_INPUT_BINDING_PREFIXES = ("attr.", "class.", "style.")
NON_INPUT_PREFIXES = ("(", "#", "*", "on-", "let-", "ref-")
BINDING_PREFIXES = ("bindon-", "bind-")


def binding_name(attribute: str) -> str | None:
    """
    Normalise an attribute as written in a template to the name it supplies.

    Examples:
        "[foo]" -> "foo"
        "[(foo)]" -> "foo"
        "bind-foo" -> "foo"
        "foo" -> "foo"
        "(click)" -> None
        "[attr.role]" -> None

    Params:
        attribute: Raw attribute name

    Returns:
        Supplied input or attribute name, or None for events, references,
        structural directives and DOM-only bindings
    """
    if attribute.startswith("[(") and attribute.endswith(")]"):
        return attribute[2:-2] or None

    if attribute.startswith("[") and attribute.endswith("]"):
        inner = attribute[1:-1]
        if not inner or inner.startswith(NON_INPUT_BINDING_PREFIXES):
            return None
        return inner

    if attribute.startswith(NON_INPUT_PREFIXES):
        return None

    for prefix in BINDING_PREFIXES:
        if attribute.startswith(prefix):
            return attribute[len(prefix):] or None

    return attribute


def _blank_comments(markup: str) -> str:
    return COMMENT_PATTERN.sub(lambda m: re.sub(r"[^\n]", " ", m.group()), markup)


def scan_template(
    markup: str,
    file_name: str,
    *,
    source_text: str | None = None,
    base_offset: int = 0,
) -> list[ElementUsage]:
    """
    Collect one usage per start tag in template markup.

    Inline templates are scanned with `source_text` set to the whole
    containing file and `base_offset` to where the template starts in it, so
    reported positions refer to that file.

    Params:
        markup: Template markup
        file_name: File the usages are attributed to
        source_text: Text that positions are computed against (defaults to markup)
        base_offset: Offset of `markup` within `source_text`

    Returns:
        ElementUsage objects in document order
    """
    lines = LineIndex(markup if source_text is None else source_text)
    usages = []

    for tag in START_TAG_PATTERN.finditer(_blank_comments(markup)):
        supplied = set()
        for attribute in ATTRIBUTE_PATTERN.finditer(tag.group("attributes")):
            name = binding_name(attribute.group("name"))
            if name is not None:
                supplied.add(name)

        span = SourceSpan(
            start=lines.position(base_offset + tag.start()),
            end=lines.position(base_offset + tag.end()),
        )
        usages.append(ElementUsage(file_name, tag.group("name"), span, frozenset(supplied)))

    return usages
