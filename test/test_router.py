"""Tests for activation routing."""

from commands import route, suggest
from commands.router import score


def test_longer_hint_wins(make_spec):
    a = make_spec("a", hints=["review"])
    b = make_spec("b", hints=["code review"])

    assert score(a, "please code review this").total == 6
    assert score(b, "please code review this").total == 11
    assert route("please code review this", [a, b]) is b


def test_no_match_returns_none(make_spec):
    specs = [
        make_spec("review", hints=["review"]),
        make_spec("security", hints=["security"]),
        make_spec("refactor", hints=["refactor"]),
    ]
    assert route("bake a cake", specs) is None


def test_case_insensitive(make_spec):
    spec = make_spec("review", hints=["Code Review"])
    assert route("PLEASE CODE REVIEW", [spec]) is spec


def test_scores_sum_across_hints(make_spec):
    many = make_spec("many", hints=["test", "unit", "coverage"])
    one = make_spec("one", hints=["unit tests"])

    result = score(many, "improve unit test coverage")
    assert result.total == 4 + 4 + 8
    assert result.longest == 8
    assert route("improve unit test coverage", [one, many]) is many


def test_spec_without_hints_is_never_routed(make_spec):
    silent = make_spec("review")
    assert route("review", [silent]) is None


def test_tie_prefers_longest_matching_hint(make_spec):
    split = make_spec("split", hints=["ab", "cd"])
    whole = make_spec("whole", hints=["abcd"])
    assert route("abcd", [split, whole]) is whole
    assert route("abcd", [whole, split]) is whole


def test_full_tie_prefers_registration_order(make_spec):
    first = make_spec("first", hints=["lint"])
    second = make_spec("second", hints=["lint"])
    assert route("run lint", [first, second]) is first
    assert route("run lint", [second, first]) is second


def test_route_is_deterministic(make_spec):
    specs = [make_spec(str(i), hints=["fix", "bug"]) for i in range(5)]
    results = {route("fix this bug", specs).name for _ in range(10)}
    assert results == {"0"}


def test_suggest_ranks_and_limits(make_spec):
    specs = [
        make_spec("review", hints=["review"]),
        make_spec("security", hints=["security", "review"]),
        make_spec("docs", hints=["docs"]),
    ]
    ranked = suggest("security review please", specs)
    assert [entry.spec.name for entry in ranked] == ["security", "review"]
    assert [entry.total for entry in ranked] == [14, 6]
    assert len(suggest("security review please", specs, limit=1)) == 1
