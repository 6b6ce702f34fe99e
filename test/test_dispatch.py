"""Tests for the dispatch coordinator."""

import pytest

from commands import (
    ArgSpec,
    CommandRegistry,
    DispatchRequest,
    Dispatcher,
    Intent,
    MalformedTemplate,
    MissingArgument,
    OperationKind,
    PermissionDenied,
    UnknownArgument,
    UnknownCommand,
)


@pytest.fixture
def dispatcher(make_spec):
    registry = CommandRegistry(include_builtin=False)
    registry.register(
        make_spec(
            "refactor",
            hints=["refactor", "clean up"],
            template="Refactor: {{target}}{{#if goal}} goal={{goal}}{{/if}}",
            args=[ArgSpec("target", required=True), ArgSpec("goal")],
            read=True,
            write=True,
            rules=[("allow", "src/**"), ("deny", "src/secrets/**")],
        )
    )
    registry.register(
        make_spec(
            "review",
            hints=["review", "code review"],
            template="Review {{target}}",
            args=[ArgSpec("target", default=".")],
            read=True,
        )
    )
    registry.register(make_spec("broken", template="{{#if a}}oops", hints=["broken"]))
    return Dispatcher(registry)


class TestResolution:
    def test_exact_name_with_slash(self, dispatcher):
        result = dispatcher.dispatch(DispatchRequest("/refactor main.rs goal=perf"))
        assert result.spec_name == "refactor"
        assert result.rendered_text == "Refactor: main.rs goal=perf"

    def test_exact_name_without_slash(self, dispatcher):
        result = dispatcher.dispatch(DispatchRequest("review", {}))
        assert result.rendered_text == "Review ."

    def test_routed_when_no_exact_name(self, dispatcher):
        result = dispatcher.dispatch(DispatchRequest("please code review this"))
        assert result.spec_name == "review"

    def test_routed_uses_bound_args_only(self, dispatcher):
        result = dispatcher.dispatch(
            DispatchRequest("could you clean up this module", {"target": "src/app.py"})
        )
        assert result.rendered_text == "Refactor: src/app.py"

    def test_unknown_command(self, dispatcher):
        with pytest.raises(UnknownCommand) as exc_info:
            dispatcher.dispatch(DispatchRequest("bake a cake"))
        assert exc_info.value.name == "bake"

    def test_bound_args_override_invocation(self, dispatcher):
        result = dispatcher.dispatch(DispatchRequest("/refactor a.rs", {"target": "b.rs"}))
        assert result.rendered_text == "Refactor: b.rs"
        assert result.bound_args["target"] == "b.rs"

    @pytest.mark.parametrize(
        "raw_input", ["review this code", "review color=red please", "review what's up"]
    )
    def test_prose_starting_with_command_name_binds_nothing(self, dispatcher, raw_input):
        result = dispatcher.dispatch(DispatchRequest(raw_input))
        assert result.spec_name == "review"
        assert result.rendered_text == "Review ."

    def test_prose_uses_bound_args(self, dispatcher):
        result = dispatcher.dispatch(
            DispatchRequest("refactor what's left of this", {"target": "src/app.py"})
        )
        assert result.rendered_text == "Refactor: src/app.py"


class TestFailureOrdering:
    def test_missing_argument_before_permission_check(self, dispatcher):
        with pytest.raises(MissingArgument):
            dispatcher.dispatch(
                DispatchRequest("/refactor"),
                intents=[Intent(OperationKind.EXECUTE)],
            )

    def test_unknown_argument(self, dispatcher):
        with pytest.raises(UnknownArgument):
            dispatcher.dispatch(DispatchRequest("/refactor main.rs color=red"))

    def test_permission_denied_by_rule(self, dispatcher):
        with pytest.raises(PermissionDenied) as exc_info:
            dispatcher.dispatch(
                DispatchRequest("/refactor src/main.rs"),
                intents=[
                    Intent(OperationKind.READ, "src/main.rs"),
                    Intent(OperationKind.WRITE, "src/secrets/key"),
                ],
            )
        assert exc_info.value.reason == "denied by rule src/secrets/**"

    @pytest.mark.parametrize("path", ["src//secrets/key", "src/lib/../secrets/key", "../key"])
    def test_permission_denied_for_disguised_paths(self, dispatcher, path):
        with pytest.raises(PermissionDenied):
            dispatcher.dispatch(
                DispatchRequest("/refactor src/main.rs"),
                intents=[Intent(OperationKind.WRITE, path)],
            )

    def test_permission_denied_by_capability(self, dispatcher):
        with pytest.raises(PermissionDenied, match="capability disabled"):
            dispatcher.dispatch(
                DispatchRequest("/review"), intents=[Intent(OperationKind.WRITE, "a.py")]
            )

    def test_allowed_intents(self, dispatcher):
        result = dispatcher.dispatch(
            DispatchRequest("/refactor src/main.rs"),
            intents=[Intent(OperationKind.WRITE, "src/main.rs")],
        )
        assert result.rendered_text == "Refactor: src/main.rs"

    def test_malformed_template(self, dispatcher):
        with pytest.raises(MalformedTemplate):
            dispatcher.dispatch(DispatchRequest("/broken"))


def test_dispatch_sees_one_snapshot(make_spec):
    registry = CommandRegistry(include_builtin=False)
    registry.register(make_spec("greet", template="v1"))
    dispatcher = Dispatcher(registry)

    assert dispatcher.dispatch(DispatchRequest("/greet")).rendered_text == "v1"
    registry.register(make_spec("greet", template="v2"))
    assert dispatcher.dispatch(DispatchRequest("/greet")).rendered_text == "v2"


@pytest.mark.asyncio
async def test_builtin_refactor_end_to_end():
    registry = CommandRegistry()
    await registry.load()
    dispatcher = Dispatcher(registry)

    result = dispatcher.dispatch(
        DispatchRequest("/refactor src/lib.rs goal=perf"),
        intents=[Intent(OperationKind.WRITE, "src/lib.rs")],
    )
    assert result.rendered_text.startswith("Refactor: src/lib.rs goal=perf")

    with pytest.raises(PermissionDenied):
        dispatcher.dispatch(
            DispatchRequest("/refactor src/lib.rs"),
            intents=[Intent(OperationKind.WRITE, "Cargo.lock")],
        )


@pytest.mark.asyncio
async def test_builtin_explain_with_prose():
    registry = CommandRegistry()
    await registry.load()

    result = Dispatcher(registry).dispatch(DispatchRequest("explain what's going on here"))
    assert result.spec_name == "explain"
