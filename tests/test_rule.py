"""
End-to-end tests for the templates-require-inputs rule.

These scenarios run the rule over in-memory sources the way a lint run walks
a project: component files and templates in one forward pass.
"""

from textwrap import dedent

import pytest

from ngrequire import RuleOptions, TemplatesRequireInputsRule
from ngrequire.exceptions import DuplicateComponentError, RequiredExpressionError


def component_source(members: str, template: str = "<foobar></foobar>") -> str:
    return (
        "@Component({\n"
        "  selector: 'foobar',\n"
        f"  template: '{template}'\n"
        "})\n"
        "class Test {\n"
        f"{dedent(members).strip()}\n"
        "  constructor(private foo: number) {}\n"
        "}\n"
    )


def lint(source: str, arguments: list[str]) -> list[str]:
    rule = TemplatesRequireInputsRule(RuleOptions.from_rule_arguments(arguments))
    return [finding.message for finding in rule.apply({"file.ts": source})]


MISSING_FOO = "Component <foobar> is missing required input `foo` (used in file.ts:3)"


class TestTaggedOption:
    """Test tagged mode, where only marked inputs are required."""

    def test_passes_when_required_inputs_are_provided(self):
        """Test a usage that binds the required input."""
        source = component_source(
            "@Input()\npublic foo: number; // @required", template='<foobar [foo]="42"></foobar>'
        )

        assert lint(source, ["tagged"]) == []

    @pytest.mark.parametrize(
        "members,fails",
        [
            ("/** @required */\n@Input()\npublic foo: number;", True),
            ("@Input()\n/** @required */\npublic foo: number;", True),
            ("@Input()\npublic foo: number; // @required", True),
            ("@Input()\npublic foo: number;", False),
        ],
        ids=[
            "block comment before @Input",
            "block comment after @Input",
            "line comment",
            "members not required",
        ],
    )
    def test_comment_placements(self, members, fails):
        """Test that markers are found wherever the comment sits."""
        expected = [MISSING_FOO] if fails else []

        assert lint(component_source(members), ["tagged"]) == expected


class TestExpressionEvaluation:
    """Test `@required if` directives end to end."""

    MEMBERS = """
        @Input()
        public foo: number;

        @Input()
        public bar: number; // @required if !foo
    """

    def test_passes_when_expressions_pass(self):
        """Test that supplying `foo` switches the requirement off."""
        source = component_source(self.MEMBERS, template='<foobar [foo]="42"></foobar>')

        assert lint(source, ["tagged"]) == []

    def test_fails_when_expressions_fail(self):
        """Test the conditional message when neither input is supplied."""
        assert lint(component_source(self.MEMBERS), ["tagged"]) == [
            "Component <foobar> is missing input `bar` required when `!foo` (used in file.ts:3)"
        ]

    def test_broken_expression_aborts_the_run(self):
        """Test that a bad directive is an error, not a finding."""
        source = component_source("@Input()\npublic bar: number; // @required if !nope")

        with pytest.raises(RequiredExpressionError) as exc_info:
            lint(source, ["tagged"])

        assert exc_info.value.component == "foobar"
        assert exc_info.value.input_name == "bar"
        assert exc_info.value.expression == "!nope"


class TestAllWithoutDefaultsOption:
    """Test all-without-defaults mode."""

    def test_default_value_makes_input_optional(self):
        """Test that an initializer means the input is not required."""
        source = component_source("@Input()\npublic foo: number = 42;")

        assert lint(source, ["all-without-defaults"]) == []

    def test_missing_default_makes_input_required(self):
        """Test that an input without initializer is required."""
        source = component_source("@Input()\npublic foo: number;")

        assert lint(source, ["all-without-defaults"]) == [MISSING_FOO]

    def test_marker_forces_requiredness_despite_default(self):
        """Test that `@required` wins over an initializer."""
        source = component_source("@Input()\npublic foo: number = 42; // @required")

        assert lint(source, ["all-without-defaults"]) == [MISSING_FOO]


def test_uses_renamed_inputs_in_failure_messages():
    """Test that the alias is reported instead of the member name."""
    source = component_source("@Input('renamed-input')\npublic foo: number;")

    assert lint(source, ["all-without-defaults"]) == [
        "Component <foobar> is missing required input `renamed-input` (used in file.ts:3)"
    ]


class TestAcrossFiles:
    """Test correlation of declarations and usages in different files."""

    COMPONENT = dedent(
        """
        @Component({ selector: 'foobar', template: '' })
        export class FoobarComponent {
          @Input() foo: number; // @required
        }
        """
    ).lstrip()
    PAGE = '<section>\n  <foobar></foobar>\n  <foobar [foo]="1"></foobar>\n</section>\n'

    def test_usage_before_declaration(self):
        """Test a template walked before the component it uses."""
        rule = TemplatesRequireInputsRule()

        findings = rule.apply({"a/page.html": self.PAGE, "b/foobar.component.ts": self.COMPONENT})

        (finding,) = findings
        assert finding.message == (
            "Component <foobar> is missing required input `foo` (used in a/page.html:2)"
        )
        # Reported where the walk was when the failure became known
        assert finding.location.file == "b/foobar.component.ts"
        assert finding.location.line == 3

    def test_usage_after_declaration(self):
        """Test a template walked after the component it uses."""
        rule = TemplatesRequireInputsRule()

        findings = rule.apply({"b/foobar.component.ts": self.COMPONENT, "a/page.html": self.PAGE})

        (finding,) = findings
        assert finding.message == (
            "Component <foobar> is missing required input `foo` (used in a/page.html:2)"
        )
        assert finding.location.file == "a/page.html"
        assert finding.location.line == 2
        assert finding.location.column == 3

    def test_undeclared_components_are_not_checked(self):
        """Test that usages of unknown tags never produce findings."""
        rule = TemplatesRequireInputsRule()

        assert rule.apply({"page.html": "<mystery-thing></mystery-thing>"}) == []

    def test_duplicate_selector_aborts_the_run(self):
        """Test that two components with one selector are rejected."""
        rule = TemplatesRequireInputsRule()

        with pytest.raises(DuplicateComponentError):
            rule.apply({"one.ts": self.COMPONENT, "two.ts": self.COMPONENT})

    def test_template_url_scanned_once(self):
        """Test that a referenced template listed among the files is not scanned twice."""
        component = dedent(
            """
            @Component({ selector: 'foobar', templateUrl: './foobar.component.html' })
            export class FoobarComponent {
              @Input() foo: number; // @required
            }
            """
        )
        sources = {
            "app/foobar.component.html": "<foobar></foobar>",
            "app/foobar.component.ts": component,
        }

        findings = TemplatesRequireInputsRule().apply(sources)

        assert len(findings) == 1

    @pytest.mark.parametrize(
        "listed_name",
        [
            "app/../app/foobar.component.html",
            "app\\foobar.component.html",
            "./app/foobar.component.html",
        ],
    )
    def test_template_url_matches_unnormalised_names(self, listed_name):
        """Test that differently spelled paths to one template are scanned once."""
        component = dedent(
            """
            @Component({ selector: 'foobar', templateUrl: './foobar.component.html' })
            export class FoobarComponent {
              @Input() foo: number; // @required
            }
            """
        )
        sources = {
            listed_name: "<foobar></foobar>",
            "app/foobar.component.ts": component,
        }

        findings = TemplatesRequireInputsRule().apply(sources)

        assert len(findings) == 1

    def test_input_with_stacked_decorator(self):
        """Test that a required input sharing its member with another decorator is checked."""
        component = dedent(
            """
            @Component({ selector: 'foobar', template: '' })
            export class FoobarComponent {
              @Input() @HostBinding('class.active') foo: boolean; // @required
            }
            """
        )

        findings = TemplatesRequireInputsRule().apply(
            {"foobar.component.ts": component, "page.html": "<foobar></foobar>"}
        )

        assert [finding.input_name for finding in findings] == ["foo"]

    def test_skipped_tag_named_component(self):
        """Test the known limitation for components named like skipped tags."""
        component = self.COMPONENT.replace("'foobar'", "'nav'")

        findings = TemplatesRequireInputsRule().apply(
            {"nav.component.ts": component, "page.html": "<nav></nav>"}
        )

        assert findings == []


class TestPaths:
    """Test running the rule over files on disk."""

    def test_discover_and_apply(self, tmp_path):
        """Test directory walking and deterministic output."""
        app = tmp_path / "app"
        app.mkdir()
        (app / "foobar.component.ts").write_text(TestAcrossFiles.COMPONENT)
        (app / "page.html").write_text(TestAcrossFiles.PAGE)
        (app / "notes.md").write_text("<foobar></foobar>")
        modules = tmp_path / "node_modules" / "lib"
        modules.mkdir(parents=True)
        (modules / "other.html").write_text("<foobar></foobar>")

        rule = TemplatesRequireInputsRule()
        discovered = rule.discover([tmp_path])
        first = rule.apply_to_paths([tmp_path])
        second = rule.apply_to_paths([tmp_path])

        assert [p.name for p in discovered] == ["foobar.component.ts", "page.html"]
        assert first == second
        assert len(first) == 1
        assert first[0].location.file == str(app / "page.html")
