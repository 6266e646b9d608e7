"""
Analysis sessions.

`AnalysisSession` is the single object a source walk talks to. It owns the
tag registry and the findings sink, and exposes one callback per event the
collaborators produce. `DeclarationSession` buffers the inputs of the class
currently being walked until the class (or file) ends, so each component is
registered as one atomic declaration.
"""

import logging
from collections.abc import Iterable

from ngrequire.core.config import RequirednessMode, RuleOptions
from ngrequire.core.types import (
    ComponentDeclaration,
    ElementUsage,
    Finding,
    InputDeclaration,
    SourceLocation,
    SourceSpan,
)
from ngrequire.parsing.markers import resolve_requiredness
from ngrequire.structure.registry import TagRegistry

logger = logging.getLogger(__name__)


class DeclarationSession:
    """Collects the inputs of one component class at a time."""

    def __init__(self, registry: TagRegistry, mode: RequirednessMode = RequirednessMode.TAGGED):
        self.registry = registry
        self.mode = mode
        self.selector: str | None = None
        self.inputs: list[InputDeclaration] = []

    def begin_class(self) -> list[Finding]:
        """Start a new class, flushing anything left from the previous one."""
        findings = self._flush()
        self.selector = None
        return findings

    def set_selector(self, selector: str) -> None:
        """Record the selector the current class is registered under."""
        self.selector = selector

    def add_input(
        self,
        member_name: str,
        comment_text: str = "",
        has_default: bool = False,
        alias: str | None = None,
        declaration_site: SourceLocation | None = None,
    ) -> InputDeclaration:
        """
        Append one input member of the current class.

        Params:
            member_name: Name of the decorated member
            comment_text: Source text around the member, scanned for markers
            has_default: Whether the member has an initializer
            alias: Public name passed to the input decorator, if any
            declaration_site: Location of the decorator for reporting

        Returns:
            The InputDeclaration that was buffered
        """
        declared = InputDeclaration(
            name=member_name,
            alias=alias or member_name,
            requiredness=resolve_requiredness(comment_text, has_default, self.mode),
            declaration_site=declaration_site,
        )
        self.inputs.append(declared)
        return declared

    def end_class(self) -> list[Finding]:
        findings = self._flush()
        self.selector = None
        return findings

    def end_file(self) -> list[Finding]:
        """Flush at end of file, for classes whose end was never signalled."""
        findings = self._flush()
        self.selector = None
        return findings

    def _flush(self) -> list[Finding]:
        if not self.inputs:
            return []

        inputs, self.inputs = self.inputs, []
        if self.selector is None:
            logger.debug(
                "Discarding inputs %s of a class without a component selector",
                ", ".join(declared.name for declared in inputs),
            )
            return []

        return self.registry.observe_declaration(ComponentDeclaration(self.selector, inputs))


class AnalysisSession:
    """One independent analysis run.

    Usage:
        session = AnalysisSession(RuleOptions(mode="all-without-defaults"))
        session.on_element_visited("app.html", "foobar", span, {"bar"})
        session.on_class_start()
        session.on_component_selector("foobar")
        session.on_input_member_visited("foo", comment_text="// @required")
        session.on_class_end()
        session.findings  # every finding reported so far, in event order
    """

    def __init__(self, options: RuleOptions | None = None):
        self.options = options or RuleOptions()
        self.registry = TagRegistry.from_options(self.options)
        self.declarations = DeclarationSession(self.registry, self.options.mode)
        self.findings: list[Finding] = []

    def observe_usage(self, usage: ElementUsage) -> list[Finding]:
        return self._report(self.registry.observe_usage(usage))

    def on_element_visited(
        self,
        file_name: str,
        tag_name: str,
        source_span: SourceSpan,
        supplied_names: Iterable[str],
    ) -> list[Finding]:
        return self.observe_usage(
            ElementUsage(file_name, tag_name, source_span, frozenset(supplied_names))
        )

    def on_class_start(self) -> list[Finding]:
        return self._report(self.declarations.begin_class())

    def on_component_selector(self, selector: str) -> None:
        self.declarations.set_selector(selector)

    def on_input_member_visited(
        self,
        member_name: str,
        comment_text: str = "",
        has_default: bool = False,
        alias: str | None = None,
        declaration_site: SourceLocation | None = None,
    ) -> InputDeclaration:
        return self.declarations.add_input(
            member_name, comment_text, has_default, alias, declaration_site
        )

    def on_class_end(self) -> list[Finding]:
        return self._report(self.declarations.end_class())

    def on_file_end(self) -> list[Finding]:
        return self._report(self.declarations.end_file())

    def _report(self, findings: list[Finding]) -> list[Finding]:
        self.findings.extend(findings)
        return findings
