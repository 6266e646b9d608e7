"""
Core value types for ngrequire.

These are the observations exchanged between the source collaborators and the
correlation engine. All of them are immutable once created.
"""

from attrs import field, frozen


@frozen
class SourcePosition:
    """A point in a source file. Lines and columns are 1-based."""

    offset: int
    line: int
    column: int


@frozen
class SourceSpan:
    """Start and end positions of a construct within one file."""

    start: SourcePosition
    end: SourcePosition


@frozen
class SourceLocation:
    """Where a finding is reported."""

    file: str
    offset: int
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"


@frozen
class ElementUsage:
    """A template element instantiating some tag, with the names it supplies.

    `supplied_names` holds every property binding and attribute name found on
    the element, already normalised by the template collaborator.
    """

    source_file: str
    tag_name: str
    source_span: SourceSpan
    supplied_names: frozenset[str] = field(converter=frozenset)

    @property
    def line(self) -> int:
        return self.source_span.start.line

    @property
    def location(self) -> SourceLocation:
        start = self.source_span.start
        return SourceLocation(self.source_file, start.offset, start.line, start.column)


@frozen
class StaticRequiredness:
    """Requiredness fixed at declaration time."""

    required: bool


@frozen
class ExpressionRequiredness:
    """Requiredness conditioned on which sibling inputs are present."""

    expression: str


Requiredness = StaticRequiredness | ExpressionRequiredness


@frozen
class InputDeclaration:
    """One declared input of a component.

    Params:
        name: Member name in the component class
        alias: Public binding name, equal to `name` unless renamed
        requiredness: Static flag or `@required if` expression
        declaration_site: Location of the input decorator, used for reporting
    """

    name: str
    alias: str
    requiredness: Requiredness
    declaration_site: SourceLocation | None = None

    @property
    def binding_names(self) -> frozenset[str]:
        return frozenset({self.name, self.alias})


@frozen
class ComponentDeclaration:
    """All inputs declared by a single component, in declaration order.

    The order defines the index of each input in a presence vector.
    """

    tag_name: str
    inputs: tuple[InputDeclaration, ...] = field(converter=tuple)

    @property
    def input_names(self) -> list[str]:
        return [declared.name for declared in self.inputs]


@frozen
class Failure:
    """A single failed check, before it is anchored to a usage site."""

    input_name: str
    declaration: InputDeclaration
    message: str


@frozen
class Finding:
    """A lint finding ready for the diagnostic sink."""

    location: SourceLocation
    message: str
    tag_name: str
    input_name: str

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"
