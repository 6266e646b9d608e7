"""
Text helpers shared by the source scanners.
"""

import posixpath
import re
from bisect import bisect_right

from ngrequire.core.types import SourceLocation, SourcePosition

QUOTES = "'\"`"


class LineIndex:
    """Maps offsets in a text to 1-based line and column numbers."""

    def __init__(self, text: str):
        self._line_starts = [0] + [m.end() for m in re.finditer("\n", text)]

    def position(self, offset: int) -> SourcePosition:
        line = bisect_right(self._line_starts, offset)
        column = offset - self._line_starts[line - 1] + 1
        return SourcePosition(offset=offset, line=line, column=column)

    def location(self, file_name: str, offset: int) -> SourceLocation:
        position = self.position(offset)
        return SourceLocation(file_name, offset, position.line, position.column)


def mask_non_code(text: str) -> str:
    """
    Blank out comments and string contents, keeping offsets intact.

    Comment characters and the characters inside string literals become
    spaces (newlines are kept); string delimiters stay in place. Searching the
    masked text for brackets or keywords then only finds real code.

    Params:
        text: TypeScript source text

    Returns:
        Text of the same length with only code left visible
    """
    masked = list(text)
    i = 0
    length = len(text)

    def blank(start: int, end: int) -> None:
        for j in range(start, end):
            if masked[j] != "\n":
                masked[j] = " "

    while i < length:
        char = text[i]
        if text.startswith("//", i):
            end = text.find("\n", i)
            end = length if end == -1 else end
            blank(i, end)
            i = end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            end = length if end == -1 else end + 2
            blank(i, end)
            i = end
        elif char in QUOTES:
            end = string_end(text, i)
            blank(i + 1, end - 1)
            i = end
        else:
            i += 1

    return "".join(masked)


def string_end(text: str, start: int) -> int:
    """Offset just past the string literal whose opening quote is at `start`."""
    quote = text[start]
    i = start + 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == quote:
            return i + 1
        if text[i] == "\n" and quote != "`":
            # Unterminated single-line string
            return i
        i += 1
    return len(text)


def matching_bracket(masked: str, start: int) -> int:
    """
    Offset of the bracket closing the one at `start`, in masked text.

    Returns:
        Offset of the closing bracket, or `len(masked)` if it never closes
    """
    pairs = {"(": ")", "[": "]", "{": "}"}
    opening = masked[start]
    closing = pairs[opening]
    depth = 0
    for i in range(start, len(masked)):
        if masked[i] == opening:
            depth += 1
        elif masked[i] == closing:
            depth -= 1
            if depth == 0:
                return i
    return len(masked)


def end_of_line(text: str, offset: int) -> int:
    """Offset of the newline ending the line containing `offset` (or text end)."""
    end = text.find("\n", offset)
    return len(text) if end == -1 else end


ESCAPE_PATTERN = re.compile(r"\\(.)", re.DOTALL)
# Escapes that stand for whitespace or control characters
BLANK_ESCAPES = "nrtvfb0"


def blank_escapes(literal: str) -> str:
    """
    Neutralise backslash escapes in the contents of a string literal.

    Each escape keeps its two characters: the backslash becomes a space and
    the escaped character stays, except for whitespace escapes such as `\\n`
    which become two spaces. Offsets into the literal are unchanged.

    Examples:
        "<a title=\\'x\\'>" -> "<a title= 'x '>"
        "<a\\n[b]=\\"1\\">" -> "<a  [b]= \\"1 \\">"
    """

    def replace(match: re.Match[str]) -> str:
        char = match.group(1)
        if char in BLANK_ESCAPES:
            return "  "
        return " " + char

    return ESCAPE_PATTERN.sub(replace, literal)


def normalize_path(path: str) -> str:
    """Normalise a file name to forward slashes without `.` or `..` segments."""
    return posixpath.normpath(path.replace("\\", "/"))
