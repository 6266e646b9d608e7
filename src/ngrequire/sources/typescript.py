"""
Component source scanning.

Walks a TypeScript file once, front to back, and reports what it finds to an
`AnalysisSession`: for every class, its `@Component` selector and template
usages, then its `@Input()` members, then the end of the class.

The scanner works on a masked copy of the source in which comments and string
contents are blanked out, so brackets and keywords found there are real code.
Names, aliases and comment text are then read back from the original text at
the same offsets.
"""

import logging
import posixpath
import re
from collections.abc import Callable
from dataclasses import dataclass

from ngrequire.sources.templates import scan_template
from ngrequire.sources.text import (
    QUOTES,
    LineIndex,
    blank_escapes,
    end_of_line,
    mask_non_code,
    matching_bracket,
    normalize_path,
    string_end,
)
from ngrequire.structure.session import AnalysisSession

logger = logging.getLogger(__name__)

CLASS_PATTERN = re.compile(r"\bclass\s+(?P<name>[A-Za-z_$][\w$]*)[^{;]*\{")
COMPONENT_PATTERN = re.compile(r"@Component\s*\(")
INPUT_PATTERN = re.compile(r"@Input\s*\(")
DECORATOR_PATTERN = re.compile(r"\s*@[A-Za-z_$][\w$.]*\s*")
MEMBER_PATTERN = re.compile(
    r"\s*(?:(?:public|private|protected|readonly|declare|override|static|accessor|set|get)\s+)*"
    r"(?P<name>[A-Za-z_$][\w$]*)[ \t]*[?!]?[ \t]*"
)

# Characters after which a line break does not end a property declaration
CONTINUATION_ENDINGS = "=:|&,(<"
CONTINUATION_STARTS = "=|&.?:"

TemplateLoader = Callable[[str], str | None]


def metadata_string_pattern(key: str) -> re.Pattern[str]:
    return re.compile(rf"\b{key}\s*:\s*['\"`]")


SELECTOR_PATTERN = metadata_string_pattern("selector")
TEMPLATE_PATTERN = metadata_string_pattern("template")
TEMPLATE_URL_PATTERN = metadata_string_pattern("templateUrl")


@dataclass
class ComponentMetadata:
    """The parts of a `@Component({...})` argument the analysis needs."""

    selector: str | None = None
    template: str | None = None
    template_offset: int = 0
    template_url: str | None = None


def read_string(text: str, quote_offset: int) -> tuple[str, int]:
    """Return the contents of the string literal at `quote_offset` and where they start."""
    end = string_end(text, quote_offset)
    return text[quote_offset + 1 : end - 1], quote_offset + 1


class ComponentSourceScanner:
    """Reports component declarations and inline template usages of one file.

    Params:
        session: Session receiving the events
        template_loader: Returns the markup of a `templateUrl` path, or None
            if it cannot be read
    """

    def __init__(self, session: AnalysisSession, template_loader: TemplateLoader | None = None):
        self.session = session
        self.template_loader = template_loader

    def scan(self, file_name: str, text: str) -> None:
        """
        Scan one source file, emitting events in document order.

        Params:
            file_name: Path the findings are attributed to
            text: Full source text
        """
        masked = mask_non_code(text)
        lines = LineIndex(text)
        cursor = 0

        while match := CLASS_PATTERN.search(masked, cursor):
            open_brace = match.end() - 1
            close_brace = matching_bracket(masked, open_brace)

            self.session.on_class_start()
            metadata = self._component_metadata(text, masked, cursor, match.start())
            if metadata is not None:
                self._visit_component(file_name, text, metadata)
            self._visit_inputs(file_name, text, masked, lines, open_brace, close_brace)
            self.session.on_class_end()

            cursor = close_brace + 1

        self.session.on_file_end()

    def _component_metadata(
        self, text: str, masked: str, start: int, end: int
    ) -> ComponentMetadata | None:
        decorators = list(COMPONENT_PATTERN.finditer(masked, start, end))
        if not decorators:
            return None

        paren_open = decorators[-1].end() - 1
        paren_close = matching_bracket(masked, paren_open)
        metadata = ComponentMetadata()

        if match := SELECTOR_PATTERN.search(masked, paren_open, paren_close):
            selector, _ = read_string(text, match.end() - 1)
            metadata.selector = selector.strip()
        if match := TEMPLATE_PATTERN.search(masked, paren_open, paren_close):
            metadata.template, metadata.template_offset = read_string(text, match.end() - 1)
        if match := TEMPLATE_URL_PATTERN.search(masked, paren_open, paren_close):
            metadata.template_url, _ = read_string(text, match.end() - 1)

        return metadata

    def _visit_component(self, file_name: str, text: str, metadata: ComponentMetadata) -> None:
        if metadata.selector:
            self.session.on_component_selector(metadata.selector)

        if metadata.template is not None:
            for usage in scan_template(
                blank_escapes(metadata.template),
                file_name,
                source_text=text,
                base_offset=metadata.template_offset,
            ):
                self.session.observe_usage(usage)

        if metadata.template_url is not None:
            directory = posixpath.dirname(normalize_path(file_name))
            template_path = normalize_path(posixpath.join(directory, metadata.template_url))
            markup = self.template_loader(template_path) if self.template_loader else None
            if markup is None:
                logger.warning(
                    "Cannot read template %s referenced from %s",
                    template_path,
                    file_name,
                )
                return
            for usage in scan_template(markup, template_path):
                self.session.observe_usage(usage)

    def _visit_inputs(
        self,
        file_name: str,
        text: str,
        masked: str,
        lines: LineIndex,
        open_brace: int,
        close_brace: int,
    ) -> None:
        depth = 0
        position = open_brace + 1
        previous_end = open_brace + 1

        for decorator in INPUT_PATTERN.finditer(masked, open_brace + 1, close_brace):
            segment = masked[position : decorator.start()]
            depth += segment.count("{") - segment.count("}")
            position = decorator.start()
            if depth != 0:
                # Inside a method body or nested object
                continue

            args_open = decorator.end() - 1
            args_close = matching_bracket(masked, args_open)
            member_start = self._skip_decorators(masked, args_close + 1, close_brace)
            member = MEMBER_PATTERN.match(masked, member_start, close_brace)
            if member is None:
                logger.debug("No member after @Input at %s", lines.location(file_name, position))
                continue

            member_end, has_default = self._member_end(masked, member.end(), close_brace)
            leading_start = self._leading_start(masked, decorator.start(), previous_end)
            comment_text = text[leading_start : end_of_line(text, member_end)]

            self.session.on_input_member_visited(
                member.group("name"),
                comment_text=comment_text,
                has_default=has_default,
                alias=self._alias(text, masked, args_open + 1, args_close),
                declaration_site=lines.location(file_name, decorator.start()),
            )
            previous_end = member_end

    def _alias(self, text: str, masked: str, start: int, end: int) -> str | None:
        arguments = masked[start:end]
        stripped = arguments.lstrip()
        if not stripped or stripped[0] not in QUOTES:
            return None
        alias, _ = read_string(text, start + len(arguments) - len(stripped))
        return alias or None

    def _skip_decorators(self, masked: str, start: int, limit: int) -> int:
        """Offset past any decorators stacked between `@Input(...)` and its member."""
        while match := DECORATOR_PATTERN.match(masked, start, limit):
            start = match.end()
            if start < limit and masked[start] == "(":
                start = matching_bracket(masked, start) + 1
        return start

    def _leading_start(self, masked: str, decorator_start: int, previous_end: int) -> int:
        """
        Where the comments belonging to an input begin.

        That is after the previous statement in the class body, skipping the
        rest of its line so its trailing comment is not picked up.
        """
        boundary = max(
            masked.rfind(";", 0, decorator_start),
            masked.rfind("}", 0, decorator_start),
            masked.rfind("{", 0, decorator_start),
            previous_end - 1,
        )
        newline = masked.find("\n", boundary + 1, decorator_start)
        return boundary + 1 if newline == -1 else newline + 1

    def _member_end(self, masked: str, start: int, limit: int) -> tuple[int, bool]:
        """
        Find the end of the member declaration starting at `start`.

        Returns:
            Offset just past the member, and whether it has an initializer
        """
        if start < limit and masked[start] == "(":
            # Accessor or method: parameters, optional return type, body
            params_close = matching_bracket(masked, start)
            body_open = masked.find("{", params_close, limit)
            semicolon = masked.find(";", params_close, limit)
            if body_open == -1 or (semicolon != -1 and semicolon < body_open):
                return (params_close + 1 if semicolon == -1 else semicolon + 1), False
            return matching_bracket(masked, body_open) + 1, False

        depth = 0
        has_default = False
        i = start
        while i < limit:
            char = masked[i]
            if char in "([{":
                depth += 1
            elif char in ")]}":
                depth -= 1
            elif depth == 0:
                if char == ";":
                    return i + 1, has_default
                if char == "=" and self._is_assignment(masked, i):
                    has_default = True
                elif char == "\n" and self._ends_statement(masked, start, i, limit):
                    return i, has_default
            i += 1
        return limit, has_default

    @staticmethod
    def _is_assignment(masked: str, i: int) -> bool:
        previous = masked[i - 1] if i > 0 else ""
        following = masked[i + 1] if i + 1 < len(masked) else ""
        return previous not in "=!<>" and following not in "=>"

    @staticmethod
    def _ends_statement(masked: str, start: int, newline: int, limit: int) -> bool:
        before = masked[start:newline].rstrip()
        if before and before[-1] in CONTINUATION_ENDINGS:
            return False
        after = masked[newline:limit].lstrip()
        return not after or after[0] not in CONTINUATION_STARTS
