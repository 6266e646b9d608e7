"""
Input requirement sets.

An `InputRequirementSet` is the compiled form of one `ComponentDeclaration`:
the ordered input names that define the presence vector, and one check per
input that may be required. Checks are built once, when the declaration is
registered, and then run against every usage of the component.
"""

from collections.abc import Callable, Iterable, Sequence

from ngrequire.core.types import (
    ComponentDeclaration,
    ExpressionRequiredness,
    Failure,
    InputDeclaration,
    StaticRequiredness,
)
from ngrequire.exceptions import NgRequireError, RequiredExpressionError
from ngrequire.parsing.expression import compile_predicate

Check = Callable[[Sequence[bool]], Failure | None]


def missing_input_check(index: int, declared: InputDeclaration) -> Check:
    """Check that fails when the input at `index` is not supplied."""
    message = f"is missing required input `{declared.alias}`"

    def check(presence: Sequence[bool]) -> Failure | None:
        if presence[index]:
            return None
        return Failure(input_name=declared.name, declaration=declared, message=message)

    return check


def conditional_input_check(
    tag_name: str, input_names: Sequence[str], declared: InputDeclaration
) -> Check:
    """
    Check that fails when the `@required if` expression holds.

    The expression is compiled immediately so broken annotations surface as
    soon as the component is declared, even if it is never used.

    Raises:
        RequiredExpressionError: If the expression does not compile
    """
    expression = declared.requiredness.expression
    try:
        predicate = compile_predicate(input_names, expression)
    except NgRequireError as e:
        raise RequiredExpressionError(tag_name, declared.name, expression, str(e)) from e

    message = f"is missing input `{declared.alias}` required when `{expression}`"

    def check(presence: Sequence[bool]) -> Failure | None:
        try:
            triggered = predicate(presence)
        except (ValueError, TypeError, IndexError) as e:
            raise RequiredExpressionError(
                tag_name, declared.name, expression, str(e)
            ) from e
        if not triggered:
            return None
        return Failure(input_name=declared.name, declaration=declared, message=message)

    return check


class InputRequirementSet:
    """Compiled checks for one component declaration.

    Inputs that are never required contribute no check. The remaining checks
    run in declaration order so failures come out in a stable order.
    """

    def __init__(self, declaration: ComponentDeclaration):
        self.declaration = declaration
        self.input_names = declaration.input_names
        self.checks: list[Check] = []

        for index, declared in enumerate(declaration.inputs):
            requiredness = declared.requiredness
            if isinstance(requiredness, StaticRequiredness):
                if requiredness.required:
                    self.checks.append(missing_input_check(index, declared))
            elif isinstance(requiredness, ExpressionRequiredness):
                self.checks.append(
                    conditional_input_check(
                        declaration.tag_name, self.input_names, declared
                    )
                )

    @property
    def tag_name(self) -> str:
        return self.declaration.tag_name

    def presence_for(self, supplied_names: Iterable[str]) -> list[bool]:
        """
        Build the presence vector for one usage.

        An input counts as supplied when either its member name or its alias
        appears among the supplied names.

        Params:
            supplied_names: Property and attribute names found on the element

        Returns:
            One flag per declared input, in declaration order
        """
        supplied = frozenset(supplied_names)
        return [
            bool(declared.binding_names & supplied)
            for declared in self.declaration.inputs
        ]

    def evaluate(self, supplied_names: Iterable[str]) -> list[Failure]:
        """Run every check against a usage and return the failures."""
        presence = self.presence_for(supplied_names)
        failures = []
        for check in self.checks:
            failure = check(presence)
            if failure is not None:
                failures.append(failure)
        return failures
