"""
The templates-require-inputs rule.

Ensures that required inputs are provided to component templates. In tagged
mode only inputs that carry `@required` in a comment are required. In
all-without-defaults mode every input without a default value is required,
though `@required` can still force an input with a default. `@required if
<expr>` makes an input required only when `<expr>` holds, where the other
inputs of the component are available as variables set to `true` when they
are supplied, e.g. `@required if !otherInput`.

Each call to `apply` is an independent run with its own session.
"""

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

from ngrequire.core.config import RuleOptions
from ngrequire.core.types import Finding
from ngrequire.sources.templates import scan_template
from ngrequire.sources.text import normalize_path
from ngrequire.sources.typescript import ComponentSourceScanner
from ngrequire.structure.session import AnalysisSession

logger = logging.getLogger(__name__)


class TemplatesRequireInputsRule:
    """Runs the analysis over a set of component sources and templates.

    Usage:
        rule = TemplatesRequireInputsRule(RuleOptions.from_rule_arguments(["tagged"]))
        findings = rule.apply({"app/foo.component.ts": source_text})
        findings = rule.apply_to_paths([Path("src/app")])
    """

    name = "templates-require-inputs"

    def __init__(self, options: RuleOptions | None = None):
        self.options = options or RuleOptions()

    def apply(self, sources: Mapping[str, str]) -> list[Finding]:
        """
        Analyse in-memory files in the given order.

        `templateUrl` references are looked up in `sources` first and on disk
        otherwise. A template that a component references is scanned once,
        even if it is also listed in `sources`.

        Params:
            sources: File name to file text, in walk order

        Returns:
            All findings, in the order they were produced
        """
        session = AnalysisSession(self.options)
        scanned_templates: set[str] = set()
        names_by_path = {normalize_path(name): name for name in sources}

        def load_template(path: str) -> str | None:
            if path in scanned_templates:
                return ""
            scanned_templates.add(path)
            if path in names_by_path:
                return sources[names_by_path[path]]
            try:
                return Path(path).read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.debug("Template %s unavailable: %s", path, e)
                return None

        scanner = ComponentSourceScanner(session, load_template)
        for file_name, text in sources.items():
            suffix = Path(file_name).suffix
            if suffix in self.options.source_extensions:
                scanner.scan(file_name, text)
            elif suffix in self.options.template_extensions:
                template_path = normalize_path(file_name)
                if template_path in scanned_templates:
                    continue
                scanned_templates.add(template_path)
                for usage in scan_template(text, file_name):
                    session.observe_usage(usage)

        for tag_name in session.registry.unresolved_tags():
            logger.debug("<%s> is used but never declared", tag_name)

        return session.findings

    def apply_to_paths(self, paths: Iterable[str | Path]) -> list[Finding]:
        """
        Analyse files and directories on disk.

        Directories are walked recursively; files are visited in sorted order
        so repeated runs produce identical output. Files that cannot be read
        as UTF-8 are skipped with a warning.
        """
        sources = {}
        for path in self.discover(paths):
            try:
                sources[str(path)] = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Skipping unreadable file %s: %s", path, e)
        return self.apply(sources)

    def discover(self, paths: Iterable[str | Path]) -> list[Path]:
        """List the source and template files under `paths`, sorted and deduplicated."""
        extensions = set(self.options.source_extensions) | set(self.options.template_extensions)
        found = set()
        for path in map(Path, paths):
            if path.is_dir():
                found.update(
                    candidate
                    for candidate in path.rglob("*")
                    if candidate.is_file()
                    and candidate.suffix in extensions
                    and "node_modules" not in candidate.parts
                )
            elif path.is_file():
                found.add(path)
            else:
                logger.warning("No such file or directory: %s", path)
        return sorted(found)
