"""
Compiler for `@required if` expressions.

An expression is a boolean formula over the names of the sibling inputs of a
component, e.g. `!foo` or `foo && !bar`. Each name is bound to whether that
input is supplied at a usage site. The grammar is deliberately tiny:

    expression := or
    or         := and ("||" and)*
    and        := equality ("&&" equality)*
    equality   := relational (("==" | "!=" | "===" | "!==") relational)*
    relational := unary (("<" | "<=" | ">" | ">=") unary)*
    unary      := "!" unary | primary
    primary    := identifier | literal | "(" or ")"
    literal    := "true" | "false" | "null" | "undefined" | digits

There are no calls, member accesses or assignments, so an expression can only
read the presence vector it is evaluated against.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass

from ngrequire.exceptions import ExpressionSyntaxError, UnknownIdentifierError

Value = bool | int | None

TOKEN_PATTERN = re.compile(
    r"""
    (?P<space>\s+)
    | (?P<number>\d+)
    | (?P<identifier>[A-Za-z_$][A-Za-z0-9_$]*)
    | (?P<operator>===|!==|==|!=|<=|>=|&&|\|\||[!<>()])
    """,
    re.VERBOSE,
)

LITERALS: dict[str, Value] = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": None,
}

EQUALITY_OPERATORS = {"==", "!=", "===", "!=="}
RELATIONAL_OPERATORS = {"<", "<=", ">", ">="}


@dataclass(frozen=True)
class Token:
    """A lexical token with its zero-based column in the expression."""

    kind: str  # "number", "identifier", "operator" or "end"
    text: str
    position: int


def tokenize(expression: str) -> list[Token]:
    """
    Split an expression into tokens, terminated by an `end` token.

    Params:
        expression: Expression text as written after `@required if`

    Returns:
        Tokens in source order, whitespace dropped

    Raises:
        ExpressionSyntaxError: If a character does not start any token
    """
    tokens = []
    position = 0
    while position < len(expression):
        match = TOKEN_PATTERN.match(expression, position)
        if not match:
            raise ExpressionSyntaxError(
                expression, position, f"Unexpected character {expression[position]!r}"
            )
        kind = match.lastgroup
        if kind != "space":
            tokens.append(Token(kind, match.group(), position))
        position = match.end()

    tokens.append(Token("end", "", len(expression)))
    return tokens


def _to_number(value: Value) -> int:
    return 0 if value is None else int(value)


@dataclass(frozen=True)
class Literal:
    value: Value

    def evaluate(self, presence: Sequence[bool]) -> Value:
        return self.value


@dataclass(frozen=True)
class Variable:
    """Reference to a sibling input, resolved to its presence-vector index."""

    name: str
    index: int

    def evaluate(self, presence: Sequence[bool]) -> Value:
        return bool(presence[self.index])


@dataclass(frozen=True)
class Not:
    operand: "Node"

    def evaluate(self, presence: Sequence[bool]) -> Value:
        return not self.operand.evaluate(presence)


@dataclass(frozen=True)
class BinaryOp:
    operator: str
    left: "Node"
    right: "Node"

    def evaluate(self, presence: Sequence[bool]) -> Value:
        left = self.left.evaluate(presence)

        # Short-circuit like the host language: return the deciding operand
        if self.operator == "&&":
            return self.right.evaluate(presence) if left else left
        if self.operator == "||":
            return left if left else self.right.evaluate(presence)

        right = self.right.evaluate(presence)
        if self.operator == "==":
            return left == right
        if self.operator == "!=":
            return left != right
        if self.operator == "===":
            return type(left) is type(right) and left == right
        if self.operator == "!==":
            return not (type(left) is type(right) and left == right)

        left_number, right_number = _to_number(left), _to_number(right)
        if self.operator == "<":
            return left_number < right_number
        if self.operator == "<=":
            return left_number <= right_number
        if self.operator == ">":
            return left_number > right_number
        return left_number >= right_number


Node = Literal | Variable | Not | BinaryOp


class ExpressionParser:
    """Recursive-descent parser binding identifiers to sibling input indexes."""

    def __init__(self, sibling_names: Sequence[str]):
        self.sibling_names = list(sibling_names)
        self._indexes = {name: i for i, name in enumerate(self.sibling_names)}
        self._expression = ""
        self._tokens: list[Token] = []
        self._cursor = 0

    def parse(self, expression: str) -> Node:
        """
        Parse an expression into an evaluable tree.

        Params:
            expression: Expression text

        Returns:
            Root node of the expression tree

        Raises:
            ExpressionSyntaxError: If the text is not a valid expression
            UnknownIdentifierError: If a name is neither a literal nor a sibling input
        """
        self._expression = expression
        self._tokens = tokenize(expression)
        self._cursor = 0

        if self._peek().kind == "end":
            raise ExpressionSyntaxError(expression, 0, "Empty expression")

        node = self._parse_or()
        trailing = self._peek()
        if trailing.kind != "end":
            raise ExpressionSyntaxError(
                expression, trailing.position, f"Unexpected token {trailing.text!r}"
            )
        return node

    def _peek(self) -> Token:
        return self._tokens[self._cursor]

    def _advance(self) -> Token:
        token = self._tokens[self._cursor]
        self._cursor += 1
        return token

    def _accept(self, operators: set[str]) -> Token | None:
        token = self._peek()
        if token.kind == "operator" and token.text in operators:
            return self._advance()
        return None

    def _parse_or(self) -> Node:
        node = self._parse_and()
        while self._accept({"||"}):
            node = BinaryOp("||", node, self._parse_and())
        return node

    def _parse_and(self) -> Node:
        node = self._parse_equality()
        while self._accept({"&&"}):
            node = BinaryOp("&&", node, self._parse_equality())
        return node

    def _parse_equality(self) -> Node:
        node = self._parse_relational()
        while operator := self._accept(EQUALITY_OPERATORS):
            node = BinaryOp(operator.text, node, self._parse_relational())
        return node

    def _parse_relational(self) -> Node:
        node = self._parse_unary()
        while operator := self._accept(RELATIONAL_OPERATORS):
            node = BinaryOp(operator.text, node, self._parse_unary())
        return node

    def _parse_unary(self) -> Node:
        if self._accept({"!"}):
            return Not(self._parse_unary())
        return self._parse_primary()

    def _parse_primary(self) -> Node:
        token = self._advance()

        if token.kind == "number":
            return Literal(int(token.text))

        if token.kind == "identifier":
            if token.text in LITERALS:
                return Literal(LITERALS[token.text])
            if token.text not in self._indexes:
                raise UnknownIdentifierError(token.text, self.sibling_names)
            return Variable(token.text, self._indexes[token.text])

        if token.kind == "operator" and token.text == "(":
            node = self._parse_or()
            closing = self._advance()
            if closing.kind != "operator" or closing.text != ")":
                raise ExpressionSyntaxError(
                    self._expression, closing.position, "Expected ')'"
                )
            return node

        if token.kind == "end":
            raise ExpressionSyntaxError(
                self._expression, token.position, "Unexpected end of expression"
            )
        raise ExpressionSyntaxError(
            self._expression, token.position, f"Unexpected token {token.text!r}"
        )


class CompiledExpression:
    """A parsed expression callable with a presence vector.

    Usage:
        predicate = compile_predicate(["foo", "bar"], "foo && !bar")
        predicate([True, False])  # True
    """

    def __init__(self, sibling_names: Sequence[str], expression: str, tree: Node):
        self.sibling_names = list(sibling_names)
        self.expression = expression
        self.tree = tree

    def __call__(self, presence: Sequence[bool]) -> bool:
        if len(presence) != len(self.sibling_names):
            raise ValueError(
                f"Presence vector has {len(presence)} entries,"
                f" expected {len(self.sibling_names)}"
            )
        return bool(self.tree.evaluate(presence))

    def __repr__(self) -> str:
        return f"CompiledExpression({self.expression!r})"


def compile_predicate(sibling_names: Sequence[str], expression: str) -> CompiledExpression:
    """
    Compile an expression over sibling input names into a predicate.

    Params:
        sibling_names: Input names of the component, in declaration order
        expression: Expression text referencing those names

    Returns:
        Predicate mapping a presence vector of the same length to a bool

    Raises:
        ExpressionSyntaxError: If the expression is malformed
        UnknownIdentifierError: If the expression references an unknown name
    """
    tree = ExpressionParser(sibling_names).parse(expression)
    return CompiledExpression(sibling_names, expression, tree)
