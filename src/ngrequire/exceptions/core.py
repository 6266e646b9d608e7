"""
Exception classes for ngrequire analysis runs.

This module defines the error types that abort an analysis run. Missing
inputs at a usage site are never exceptions; they are returned as findings.
Everything here signals that a source annotation or the configuration itself
is broken.
"""


class NgRequireError(Exception):
    """Base exception for all ngrequire errors."""

    pass


class ConfigurationError(NgRequireError):
    """Raised when rule options or a configuration file are invalid."""

    def __init__(self, message: str):
        """
        Initialize the exception.

        Params:
            message: Description of the configuration problem
        """
        super().__init__(message)


class ExpressionSyntaxError(NgRequireError):
    """Raised when a requiredness expression cannot be tokenized or parsed."""

    def __init__(self, expression: str, position: int, reason: str):
        """
        Initialize the exception.

        Params:
            expression: The full expression text
            position: Zero-based column of the offending character or token
            reason: What was expected or found at that position
        """
        self.expression = expression
        self.position = position
        self.reason = reason
        super().__init__(f"{reason} at column {position}")


class UnknownIdentifierError(NgRequireError):
    """Raised when an expression references a name that is not a sibling input."""

    def __init__(self, name: str, known_names: list[str]):
        """
        Initialize the exception.

        Params:
            name: The unresolved identifier
            known_names: Input names that are available to the expression
        """
        self.name = name
        self.known_names = known_names
        available = ", ".join(known_names) if known_names else "none"
        super().__init__(f"{name} is not defined (available inputs: {available})")


class RequiredExpressionError(NgRequireError):
    """Raised when a `@required if` directive cannot be compiled or evaluated."""

    def __init__(self, component: str, input_name: str, expression: str, reason: str):
        """
        Initialize the exception.

        Params:
            component: Selector of the component declaring the input
            input_name: Member name of the input carrying the directive
            expression: Original expression text as written in the source
            reason: Underlying cause, usually the message of the wrapped error
        """
        self.component = component
        self.input_name = input_name
        self.expression = expression
        self.reason = reason
        super().__init__(
            f"Could not evaluate @required directive on {component}.{input_name}"
            f" `{expression}`: {reason}"
        )


class DuplicateComponentError(NgRequireError):
    """Raised when a second component declaration arrives for a resolved tag."""

    def __init__(self, tag_name: str, existing_inputs: list[str], new_inputs: list[str]):
        """
        Initialize the exception.

        Params:
            tag_name: The selector declared twice
            existing_inputs: Input names of the declaration already registered
            new_inputs: Input names of the conflicting declaration
        """
        self.tag_name = tag_name
        self.existing_inputs = existing_inputs
        self.new_inputs = new_inputs
        super().__init__(
            f"Component <{tag_name}> is already declared"
            f" (existing inputs: {', '.join(existing_inputs)};"
            f" new inputs: {', '.join(new_inputs)})"
        )
