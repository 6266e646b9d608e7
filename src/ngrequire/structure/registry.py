"""
Correlation of component declarations with their usages.

Declarations and usages arrive in a single forward pass, in whatever order the
source walk visits them. Each tag name gets a `ComponentTracker` that buffers
usages until the component is declared (waiting list pattern) and evaluates
every usage exactly once, either when the declaration drains the buffer or
immediately when the usage arrives afterwards.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from ngrequire.core.config import RuleOptions
from ngrequire.core.types import ComponentDeclaration, ElementUsage, Failure, Finding
from ngrequire.exceptions import DuplicateComponentError
from ngrequire.structure.requirements import InputRequirementSet

logger = logging.getLogger(__name__)


@dataclass
class Unresolved:
    """No declaration seen yet; usages wait in `pending`."""

    pending: list[ElementUsage] = field(default_factory=list)


@dataclass
class Resolved:
    """Declaration registered; usages are checked as they arrive."""

    requirements: InputRequirementSet


TrackerState = Unresolved | Resolved


class ComponentTracker:
    """Tracks one tag name through the Unresolved -> Resolved transition.

    Usage:
        tracker = ComponentTracker("foobar")
        tracker.observe_usage(usage)              # buffered, returns []
        tracker.observe_declaration(declaration)  # drains, returns findings
        tracker.observe_usage(other_usage)        # checked immediately
    """

    def __init__(self, tag_name: str):
        self.tag_name = tag_name
        self.state: TrackerState = Unresolved()

    @property
    def is_resolved(self) -> bool:
        return isinstance(self.state, Resolved)

    @property
    def pending(self) -> list[ElementUsage]:
        """Usages still waiting for a declaration (empty once resolved)."""
        if isinstance(self.state, Unresolved):
            return list(self.state.pending)
        return []

    def observe_usage(self, usage: ElementUsage) -> list[Finding]:
        """
        Record a usage of this tag.

        Params:
            usage: The element observed in a template

        Returns:
            Findings for the usage if the component is already declared,
            otherwise an empty list (evaluation is deferred)
        """
        if isinstance(self.state, Resolved):
            return self._evaluate(self.state.requirements, usage, drained=False)

        self.state.pending.append(usage)
        logger.debug(
            "Deferred <%s> used in %s:%d until it is declared",
            self.tag_name,
            usage.source_file,
            usage.line,
        )
        return []

    def observe_declaration(self, declaration: ComponentDeclaration) -> list[Finding]:
        """
        Register the component declaration and drain buffered usages.

        Params:
            declaration: Inputs declared by the component for this tag

        Returns:
            Findings for every usage that was waiting for this declaration

        Raises:
            DuplicateComponentError: If the tag was already declared
            RequiredExpressionError: If a `@required if` expression is broken
        """
        if isinstance(self.state, Resolved):
            raise DuplicateComponentError(
                self.tag_name,
                self.state.requirements.input_names,
                declaration.input_names,
            )

        requirements = InputRequirementSet(declaration)
        pending = self.state.pending
        self.state = Resolved(requirements)

        if pending:
            logger.debug(
                "Declaration of <%s> drains %d pending usage(s)",
                self.tag_name,
                len(pending),
            )

        findings = []
        for usage in pending:
            findings.extend(self._evaluate(requirements, usage, drained=True))
        return findings

    def _evaluate(
        self, requirements: InputRequirementSet, usage: ElementUsage, drained: bool
    ) -> list[Finding]:
        return [
            self._to_finding(failure, usage, drained)
            for failure in requirements.evaluate(usage.supplied_names)
        ]

    def _to_finding(self, failure: Failure, usage: ElementUsage, drained: bool) -> Finding:
        # The walk is positioned at the declaration while draining
        location = usage.location
        if drained and failure.declaration.declaration_site is not None:
            location = failure.declaration.declaration_site

        message = (
            f"Component <{usage.tag_name}> {failure.message}"
            f" (used in {usage.source_file}:{usage.line})"
        )
        return Finding(
            location=location,
            message=message,
            tag_name=usage.tag_name,
            input_name=failure.input_name,
        )


class TagRegistry:
    """Maps tag names to their trackers, creating trackers on first use.

    Usages of skip-listed tags are dropped before any tracker exists. This is
    only an optimisation: a component whose selector is on the skip-list will
    never have its usages checked.
    """

    def __init__(
        self,
        skipped_elements: Iterable[str] = (),
        skipped_patterns: Iterable[re.Pattern[str]] = (),
    ):
        self.trackers: dict[str, ComponentTracker] = {}
        self.skipped_elements = frozenset(skipped_elements)
        self.skipped_patterns = list(skipped_patterns)

    @classmethod
    def from_options(cls, options: RuleOptions) -> "TagRegistry":
        return cls(options.skipped_elements(), options.skipped_patterns())

    def is_skipped(self, tag_name: str) -> bool:
        if tag_name in self.skipped_elements:
            return True
        return any(pattern.search(tag_name) for pattern in self.skipped_patterns)

    def for_tag(self, tag_name: str) -> ComponentTracker:
        """Return the tracker for `tag_name`, creating it if needed."""
        tracker = self.trackers.get(tag_name)
        if tracker is None:
            logger.debug("Tracking <%s>", tag_name)
            tracker = ComponentTracker(tag_name)
            self.trackers[tag_name] = tracker
        return tracker

    def observe_usage(self, usage: ElementUsage) -> list[Finding]:
        if self.is_skipped(usage.tag_name):
            return []
        return self.for_tag(usage.tag_name).observe_usage(usage)

    def observe_declaration(self, declaration: ComponentDeclaration) -> list[Finding]:
        return self.for_tag(declaration.tag_name).observe_declaration(declaration)

    def unresolved_tags(self) -> list[str]:
        """Tag names that were used but never declared during the run."""
        return [
            name
            for name, tracker in self.trackers.items()
            if not tracker.is_resolved and tracker.pending
        ]
