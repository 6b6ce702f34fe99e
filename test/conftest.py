"""Pytest fixtures for command tests."""

import textwrap

import pytest

from commands import ArgSpec, CommandSpec, PathRule, PermissionSet, RuleEffect


@pytest.fixture
def make_spec():
    """Build a CommandSpec with sensible defaults.

    Usage:
        def test_something(make_spec):
            spec = make_spec("review", hints=["review"], write=True)
    """

    def _make(
        name="cmd",
        *,
        hints=(),
        template="",
        args=(),
        read=False,
        write=False,
        execute=False,
        rules=(),
        category="testing",
    ):
        return CommandSpec(
            name=name,
            description=f"{name} command",
            category=category,
            template=template,
            activation_hints=tuple(hints),
            permissions=PermissionSet(read_files=read, write_files=write, execute_shell=execute),
            path_rules=tuple(PathRule(pattern, RuleEffect(effect)) for effect, pattern in rules),
            args=tuple(a if isinstance(a, ArgSpec) else ArgSpec(name=a) for a in args),
        )

    return _make


@pytest.fixture
def write_command(tmp_path):
    """Write a command document into a commands directory under tmp_path."""
    commands_dir = tmp_path / "commands"
    commands_dir.mkdir()

    def _write(filename, content, directory=None):
        target = (directory or commands_dir) / filename
        target.write_text(textwrap.dedent(content).strip() + "\n", encoding="utf-8")
        return target

    _write.dir = commands_dir
    return _write
