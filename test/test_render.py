"""Tests for template rendering and argument resolution."""

import pytest

from commands import ArgSpec, MalformedTemplate, MissingArgument, render
from commands.args import resolve_arguments
from commands.render import render_template

REFACTOR = "Refactor: {{target}}{{#if goal}} goal={{goal}}{{/if}}"


@pytest.fixture
def refactor_spec(make_spec):
    return make_spec(
        "refactor",
        template=REFACTOR,
        args=[ArgSpec("target", required=True), ArgSpec("goal")],
    )


class TestRender:
    def test_conditional_omitted_when_unbound(self, refactor_spec):
        assert render(refactor_spec, {"target": "main.rs"}) == "Refactor: main.rs"

    def test_conditional_rendered_when_bound(self, refactor_spec):
        result = render(refactor_spec, {"target": "main.rs", "goal": "perf"})
        assert result == "Refactor: main.rs goal=perf"

    def test_empty_value_omits_block(self, refactor_spec):
        assert render(refactor_spec, {"target": "main.rs", "goal": ""}) == "Refactor: main.rs"

    def test_missing_required_argument(self, refactor_spec):
        with pytest.raises(MissingArgument) as exc_info:
            render(refactor_spec, {})
        assert exc_info.value.argument == "target"
        assert exc_info.value.command == "refactor"

    def test_default_used_when_unbound(self, make_spec):
        spec = make_spec(
            template="Format with {{style}}",
            args=[ArgSpec("style", default="black")],
        )
        assert render(spec, {}) == "Format with black"
        assert render(spec, {"style": "ruff"}) == "Format with ruff"

    def test_default_satisfies_conditional(self, make_spec):
        spec = make_spec(
            template="{{#if depth}}depth={{depth}}{{/if}}",
            args=[ArgSpec("depth", default="2")],
        )
        assert render(spec, {}) == "depth=2"

    def test_idempotent(self, refactor_spec):
        args = {"target": "lib.rs", "goal": "clarity"}
        assert render(refactor_spec, args) == render(refactor_spec, args)

    def test_values_substituted_verbatim(self, refactor_spec):
        result = render(refactor_spec, {"target": "{{goal}} <b>&"})
        assert result == "Refactor: {{goal}} <b>&"


class TestRenderTemplate:
    def test_plain_text(self):
        assert render_template("Hello world", {}) == "Hello world"

    def test_whitespace_inside_delimiters(self):
        assert render_template("{{ name }}!", {"name": "x"}) == "x!"

    def test_unknown_placeholder_renders_empty(self):
        assert render_template("a{{missing}}b", {}) == "ab"

    def test_else_branch(self):
        template = "{{#if diff}}Has diff: {{diff}}{{else}}No diff{{/if}}"
        assert render_template(template, {"diff": "changes"}) == "Has diff: changes"
        assert render_template(template, {}) == "No diff"

    def test_multiple_sequential_blocks(self):
        template = "{{#if a}}A{{/if}}-{{#if b}}B{{/if}}"
        assert render_template(template, {"a": "1", "b": "1"}) == "A-B"
        assert render_template(template, {"b": "1"}) == "-B"

    def test_unrecognized_braces_left_alone(self):
        assert render_template("{{#each files}}", {}) == "{{#each files}}"

    def test_nested_blocks_rejected(self):
        with pytest.raises(MalformedTemplate, match="nested"):
            render_template("{{#if a}}{{#if b}}x{{/if}}{{/if}}", {"a": "1", "b": "1"})

    def test_unclosed_block_rejected(self):
        with pytest.raises(MalformedTemplate, match="unclosed"):
            render_template("{{#if a}}never closed", {})

    def test_stray_close_rejected(self):
        with pytest.raises(MalformedTemplate, match="without a matching"):
            render_template("text{{/if}}", {})

    def test_stray_else_rejected(self):
        with pytest.raises(MalformedTemplate, match="else"):
            render_template("text{{else}}", {})

    def test_malformed_even_when_condition_false(self):
        with pytest.raises(MalformedTemplate):
            render_template("{{#if a}}{{#if b}}{{/if}}", {})


class TestResolveArguments:
    def test_resolution_order(self, make_spec):
        spec = make_spec(
            args=[ArgSpec("a", required=True), ArgSpec("b", default="B"), ArgSpec("c")]
        )
        assert resolve_arguments(spec, {"a": "1"}) == {"a": "1", "b": "B"}
        assert resolve_arguments(spec, {"a": "1", "b": "2", "c": "3"}) == {
            "a": "1",
            "b": "2",
            "c": "3",
        }

    def test_extra_bound_values_pass_through(self, make_spec):
        spec = make_spec(args=[ArgSpec("a")])
        assert resolve_arguments(spec, {"extra": "x"}) == {"extra": "x"}
