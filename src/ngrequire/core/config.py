"""
Rule configuration for ngrequire.

Options can come from lint-rule style argument lists, plain dictionaries or a
YAML file. Invalid values raise `ConfigurationError`.
"""

import re
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ngrequire.exceptions import ConfigurationError


class RequirednessMode(Enum):
    """Policy deciding which inputs are required when no marker is present."""

    TAGGED = "tagged"  # only inputs marked @required
    ALL_WITHOUT_DEFAULTS = "all-without-defaults"  # inputs without an initializer


# An (incomplete) list of elements never worth tracking
# fmt: off
DEFAULT_SKIPPED_ELEMENTS = frozenset(
    {
        # basic HTML tags
        "div", "a", "p", "span", "em", "strong", "i", "b", "ul", "li", "ol",
        "header", "footer", "nav", "main", "aside", "br", "img", "table",
        "thead", "tbody", "td", "th", "tr",
    }
)
# fmt: on

# Built-in Angular elements
DEFAULT_SKIPPED_PATTERNS = (r"^ng\-.+",)


class RuleOptions(BaseModel):
    """Options of the templates-require-inputs rule.

    Params:
        mode: Default requiredness policy for unmarked inputs
        skip_elements: Extra literal tag names that are never tracked
        skip_patterns: Extra regular expressions of tag names never tracked
        use_default_skips: Whether the built-in skip-list applies
        template_extensions: Suffixes of standalone template files
        source_extensions: Suffixes of component source files
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    mode: RequirednessMode = RequirednessMode.TAGGED
    skip_elements: list[str] = Field(default_factory=list)
    skip_patterns: list[str] = Field(default_factory=list)
    use_default_skips: bool = True
    template_extensions: list[str] = Field(default_factory=lambda: [".html"])
    source_extensions: list[str] = Field(default_factory=lambda: [".ts"])

    @field_validator("skip_patterns")
    @classmethod
    def _validate_patterns(cls, patterns: list[str]) -> list[str]:
        for pattern in patterns:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"invalid skip pattern {pattern!r}: {e}") from e
        return patterns

    def skipped_elements(self) -> frozenset[str]:
        """Literal tag names to drop before tracking."""
        names = frozenset(self.skip_elements)
        if self.use_default_skips:
            names |= DEFAULT_SKIPPED_ELEMENTS
        return names

    def skipped_patterns(self) -> list[re.Pattern[str]]:
        """Compiled tag name patterns to drop before tracking."""
        patterns = list(self.skip_patterns)
        if self.use_default_skips:
            patterns = list(DEFAULT_SKIPPED_PATTERNS) + patterns
        return [re.compile(pattern) for pattern in patterns]

    @classmethod
    def from_rule_arguments(cls, arguments: list[Any] | None) -> "RuleOptions":
        """Build options from a lint-rule argument list.

        Only the first argument is inspected: `"all-without-defaults"` selects
        that mode, anything else (or nothing) means tagged mode.

        Params:
            arguments: Rule arguments as configured, e.g. `["tagged"]`

        Returns:
            RuleOptions with the selected mode and default skip-lists
        """
        if arguments and arguments[0] == RequirednessMode.ALL_WITHOUT_DEFAULTS.value:
            return cls(mode=RequirednessMode.ALL_WITHOUT_DEFAULTS)
        return cls(mode=RequirednessMode.TAGGED)

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "RuleOptions":
        """Build options from a mapping, rejecting unknown keys.

        Raises:
            ConfigurationError: If any value fails validation
        """
        try:
            return cls.model_validate(config)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid rule options: {e}") from e

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "RuleOptions":
        """Build options from a YAML file.

        Example YAML:
            mode: all-without-defaults
            skip_elements: [mat-icon]
            skip_patterns: ["^cdk-"]

        Raises:
            ConfigurationError: If the file cannot be read or parsed
        """
        path = Path(yaml_path)
        try:
            with path.open() as f:
                config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot read configuration {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigurationError(
                f"Configuration {path} must be a mapping, got {type(config).__name__}"
            )
        return cls.from_dict(config)
