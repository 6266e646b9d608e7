"""
Shared test fixtures and utilities for the ngrequire test suite.
"""

import pytest

from ngrequire.core.types import (
    ComponentDeclaration,
    ElementUsage,
    ExpressionRequiredness,
    InputDeclaration,
    SourceLocation,
    SourcePosition,
    SourceSpan,
    StaticRequiredness,
)


def span_at(line: int, column: int = 1, offset: int = 0) -> SourceSpan:
    start = SourcePosition(offset=offset, line=line, column=column)
    end = SourcePosition(offset=offset + 10, line=line, column=column + 10)
    return SourceSpan(start, end)


@pytest.fixture
def make_usage():
    """Factory for element usages.

    Usage:
        def test_something(make_usage):
            usage = make_usage("foobar", {"foo"}, line=12)
    """

    def factory(tag_name, supplied=(), line=1, file="page.html"):
        return ElementUsage(file, tag_name, span_at(line), frozenset(supplied))

    return factory


@pytest.fixture
def make_declaration():
    """Factory for component declarations.

    Each input is given as `(name, requiredness)` where requiredness is a bool
    for a static flag or a string for a `@required if` expression. An optional
    third item is the alias.

    Usage:
        def test_something(make_declaration):
            declaration = make_declaration("foobar", [("foo", True), ("bar", "!foo")])
    """

    def factory(tag_name, inputs, file="foobar.component.ts"):
        declared = []
        for line, entry in enumerate(inputs, start=1):
            name, requiredness = entry[0], entry[1]
            alias = entry[2] if len(entry) > 2 else name
            if isinstance(requiredness, str):
                requiredness = ExpressionRequiredness(requiredness)
            else:
                requiredness = StaticRequiredness(requiredness)
            declared.append(
                InputDeclaration(
                    name=name,
                    alias=alias,
                    requiredness=requiredness,
                    declaration_site=SourceLocation(file, line * 10, line, 3),
                )
            )
        return ComponentDeclaration(tag_name, declared)

    return factory


@pytest.fixture
def make_span():
    """Factory for single-line source spans: `make_span(line, column=1, offset=0)`."""
    return span_at
