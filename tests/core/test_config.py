"""
Tests for rule options and their loaders.
"""

import pytest

from ngrequire.core.config import (
    DEFAULT_SKIPPED_ELEMENTS,
    RequirednessMode,
    RuleOptions,
)
from ngrequire.exceptions import ConfigurationError


class TestFromRuleArguments:
    """Tests for building options from lint-rule arguments."""

    @pytest.mark.parametrize(
        "arguments,expected",
        [
            (["all-without-defaults"], RequirednessMode.ALL_WITHOUT_DEFAULTS),
            (["tagged"], RequirednessMode.TAGGED),
            (["something-else"], RequirednessMode.TAGGED),
            ([], RequirednessMode.TAGGED),
            (None, RequirednessMode.TAGGED),
            (["tagged", "all-without-defaults"], RequirednessMode.TAGGED),
        ],
    )
    def test_mode_selection(self, arguments, expected):
        """Test that only the first argument selects the mode."""
        assert RuleOptions.from_rule_arguments(arguments).mode is expected

    def test_defaults(self):
        """Test the default skip-lists and extensions."""
        options = RuleOptions.from_rule_arguments(["tagged"])

        assert options.use_default_skips is True
        assert options.template_extensions == [".html"]
        assert options.source_extensions == [".ts"]


class TestSkipLists:
    """Tests for the element skip-list."""

    def test_default_skips_included(self):
        """Test that built-in elements and the ng- pattern apply by default."""
        options = RuleOptions(skip_elements=["mat-icon"])

        assert "div" in options.skipped_elements()
        assert "mat-icon" in options.skipped_elements()
        patterns = options.skipped_patterns()
        assert any(pattern.match("ng-container") for pattern in patterns)
        assert not any(pattern.match("ng") for pattern in patterns)

    def test_default_skips_disabled(self):
        """Test that only configured entries remain without defaults."""
        options = RuleOptions(
            skip_elements=["mat-icon"], skip_patterns=["^cdk-"], use_default_skips=False
        )

        assert options.skipped_elements() == frozenset({"mat-icon"})
        assert [pattern.pattern for pattern in options.skipped_patterns()] == ["^cdk-"]

    def test_defaults_are_lower_case_html_names(self):
        """Test a sample of the built-in element names."""
        assert {"div", "span", "button", "input"} <= DEFAULT_SKIPPED_ELEMENTS


class TestFromDict:
    """Tests for building options from mappings."""

    def test_valid_mapping(self):
        """Test that a string mode is converted to the enum."""
        options = RuleOptions.from_dict({"mode": "all-without-defaults"})

        assert options.mode is RequirednessMode.ALL_WITHOUT_DEFAULTS

    def test_unknown_key_rejected(self):
        """Test that typos in option names are errors."""
        with pytest.raises(ConfigurationError, match="Invalid rule options"):
            RuleOptions.from_dict({"skip_element": ["x"]})

    def test_invalid_mode_rejected(self):
        """Test that an unknown mode is an error."""
        with pytest.raises(ConfigurationError):
            RuleOptions.from_dict({"mode": "everything"})

    def test_invalid_pattern_rejected(self):
        """Test that skip patterns must be valid regular expressions."""
        with pytest.raises(ConfigurationError, match="invalid skip pattern"):
            RuleOptions.from_dict({"skip_patterns": ["(unclosed"]})

    def test_options_are_frozen(self):
        """Test that options cannot be changed after construction."""
        options = RuleOptions()

        with pytest.raises(Exception):
            options.mode = RequirednessMode.ALL_WITHOUT_DEFAULTS


class TestFromYaml:
    """Tests for loading options from YAML files."""

    def test_load_file(self, tmp_path):
        """Test loading a complete configuration."""
        path = tmp_path / "ngrequire.yaml"
        path.write_text(
            "mode: all-without-defaults\n"
            "skip_elements: [mat-icon]\n"
            "skip_patterns: ['^cdk-']\n"
        )

        options = RuleOptions.from_yaml(path)

        assert options.mode is RequirednessMode.ALL_WITHOUT_DEFAULTS
        assert options.skip_elements == ["mat-icon"]
        assert options.skip_patterns == ["^cdk-"]

    def test_empty_file_gives_defaults(self, tmp_path):
        """Test that an empty document means default options."""
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert RuleOptions.from_yaml(path) == RuleOptions()

    def test_missing_file(self, tmp_path):
        """Test that an unreadable file is a configuration error."""
        with pytest.raises(ConfigurationError, match="Cannot read configuration"):
            RuleOptions.from_yaml(tmp_path / "missing.yaml")

    def test_malformed_yaml(self, tmp_path):
        """Test that a YAML syntax error is a configuration error."""
        path = tmp_path / "broken.yaml"
        path.write_text("mode: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Cannot read configuration"):
            RuleOptions.from_yaml(path)

    def test_non_mapping_document(self, tmp_path):
        """Test that a list document is rejected."""
        path = tmp_path / "list.yaml"
        path.write_text("- tagged\n")

        with pytest.raises(ConfigurationError, match="must be a mapping"):
            RuleOptions.from_yaml(path)
