"""Main entry point for the waypoint command dispatcher."""

import argparse
import asyncio
import importlib.metadata
from pathlib import Path

from commands import (
    CommandError,
    CommandRegistry,
    Dispatcher,
    DispatchRequest,
    Intent,
    OperationKind,
    authorize,
    suggest,
)
from commands.watcher import CommandWatcher
from config import Config, ensure_config
from utils import setup_logger, terminal_ui
from utils.runtime import ensure_runtime_dirs


def create_registry(commands_dirs=None, include_builtin=None) -> CommandRegistry:
    """Factory function to build and load the command registry.

    Args:
        commands_dirs: Extra command directories (defaults to Config.COMMANDS_DIR)
        include_builtin: Whether to load builtin commands (defaults to config)

    Returns:
        Loaded CommandRegistry
    """
    if commands_dirs is None:
        commands_dirs = [Config.COMMANDS_DIR]
    if include_builtin is None:
        include_builtin = Config.LOAD_BUILTIN_COMMANDS

    registry = CommandRegistry(
        [Path(d).expanduser() for d in commands_dirs], include_builtin=include_builtin
    )
    asyncio.run(registry.load())

    for failure in registry.failures:
        terminal_ui.print_warning(f"Skipping command {failure.source}: {failure.error}")
    return registry


def _parse_pairs(pairs: list[str]) -> dict[str, str]:
    bound: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Expected NAME=VALUE, got '{pair}'")
        bound[key.strip()] = value
    return bound


def _collect_intents(args: argparse.Namespace) -> list[Intent]:
    intents = [Intent(OperationKind.READ, path) for path in args.read]
    intents += [Intent(OperationKind.WRITE, path) for path in args.write]
    if args.execute:
        intents.append(Intent(OperationKind.EXECUTE))
    return intents


def cmd_list(registry: CommandRegistry, args: argparse.Namespace) -> int:
    specs = registry.filter_by_category(args.category) if args.category else registry.list()
    if not specs:
        terminal_ui.print_warning("No commands found.")
        return 0
    terminal_ui.print_commands_table(specs)
    return 0


def cmd_show(registry: CommandRegistry, args: argparse.Namespace) -> int:
    spec = registry.get(args.name.lstrip("/"))
    if spec is None:
        terminal_ui.print_error(f"Unknown command: '{args.name}'")
        return 1
    terminal_ui.print_command_detail(spec)
    return 0


def cmd_route(registry: CommandRegistry, args: argparse.Namespace) -> int:
    text = " ".join(args.text)
    ranked = suggest(text, registry.snapshot.specs, limit=Config.ROUTER_SUGGESTION_LIMIT)
    if not ranked:
        terminal_ui.print_warning("No command matches this input.")
        return 1
    terminal_ui.print_success(f"/{ranked[0].spec.name} (score {ranked[0].total})")
    for entry in ranked[1:]:
        terminal_ui.console.print(f"  [dim]/{entry.spec.name} (score {entry.total})[/dim]")
    return 0


def cmd_check(registry: CommandRegistry, args: argparse.Namespace) -> int:
    spec = registry.get(args.name.lstrip("/"))
    if spec is None:
        terminal_ui.print_error(f"Unknown command: '{args.name}'")
        return 1
    decision = authorize(spec, OperationKind(args.operation), args.path)
    if decision.allowed:
        terminal_ui.print_success(f"allowed: {decision.reason}")
        return 0
    terminal_ui.print_error(decision.reason, title="Denied")
    return 1


def cmd_dispatch(registry: CommandRegistry, args: argparse.Namespace) -> int:
    try:
        request = DispatchRequest(raw_input=" ".join(args.text), bound_args=_parse_pairs(args.arg))
    except ValueError as e:
        terminal_ui.print_error(str(e), title="Argument Error")
        return 2

    try:
        result = Dispatcher(registry).dispatch(request, _collect_intents(args))
    except CommandError as e:
        terminal_ui.print_error(str(e), title=type(e).__name__)
        return 1

    # Raw output for the execution backend
    print(result.rendered_text)
    return 0


def cmd_watch(registry: CommandRegistry, args: argparse.Namespace) -> int:
    def _on_reload(snapshot) -> None:
        terminal_ui.print_success(f"Reloaded {len(snapshot.specs)} commands")
        for failure in snapshot.failures:
            terminal_ui.print_warning(f"Skipping command {failure.source}: {failure.error}")

    watcher = CommandWatcher(registry, interval=Config.WATCH_INTERVAL, on_reload=_on_reload)
    terminal_ui.print_info(
        f"Watching {len(registry.commands_dirs)} directories "
        f"({len(registry.list())} commands). Ctrl+C to stop."
    )
    try:
        asyncio.run(watcher.run())
    except KeyboardInterrupt:
        pass
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Route, authorize and render developer CLI commands and agents"
    )

    try:
        version = importlib.metadata.version("waypoint-cli")
    except importlib.metadata.PackageNotFoundError:
        version = "dev"
    parser.add_argument("--version", "-V", action="version", version=f"waypoint {version}")

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging to ~/.waypoint/logs/",
    )
    parser.add_argument(
        "--commands-dir",
        "-d",
        action="append",
        default=None,
        help="Directory of command documents (repeatable; defaults to ~/.waypoint/commands)",
    )
    parser.add_argument(
        "--no-builtin",
        action="store_true",
        help="Do not load the builtin commands",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    list_parser = sub.add_parser("list", help="List registered commands")
    list_parser.add_argument("--category", "-c", help="Only show commands in this category")
    list_parser.set_defaults(handler=cmd_list)

    show_parser = sub.add_parser("show", help="Show one command in detail")
    show_parser.add_argument("name")
    show_parser.set_defaults(handler=cmd_show)

    route_parser = sub.add_parser("route", help="Show which command free text routes to")
    route_parser.add_argument("text", nargs="+")
    route_parser.set_defaults(handler=cmd_route)

    check_parser = sub.add_parser("check", help="Check one permission for a command")
    check_parser.add_argument("name")
    check_parser.add_argument("operation", choices=[k.value for k in OperationKind])
    check_parser.add_argument("path", nargs="?")
    check_parser.set_defaults(handler=cmd_check)

    dispatch_parser = sub.add_parser("dispatch", help="Resolve and render a command invocation")
    dispatch_parser.add_argument("text", nargs="+", help="Invocation or free text")
    dispatch_parser.add_argument(
        "--arg", "-a", action="append", default=[], metavar="NAME=VALUE", help="Bind an argument"
    )
    dispatch_parser.add_argument(
        "--read", action="append", default=[], metavar="PATH", help="Declare a file read"
    )
    dispatch_parser.add_argument(
        "--write", action="append", default=[], metavar="PATH", help="Declare a file write"
    )
    dispatch_parser.add_argument(
        "--execute", action="store_true", help="Declare shell execution"
    )
    dispatch_parser.set_defaults(handler=cmd_dispatch)

    watch_parser = sub.add_parser("watch", help="Reload commands as their files change")
    watch_parser.set_defaults(handler=cmd_watch)

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    # Initialize runtime directories (create logs dir only in verbose mode)
    ensure_config()
    commands_dir = Config.COMMANDS_DIR if args.commands_dir is None else None
    ensure_runtime_dirs(commands_dir, create_logs=args.verbose)

    # Initialize logging only in verbose mode
    if args.verbose:
        setup_logger()

    try:
        Config.validate()
    except ValueError as e:
        terminal_ui.print_error(str(e), title="Configuration Error")
        return 2

    registry = create_registry(args.commands_dir, include_builtin=not args.no_builtin)
    return args.handler(registry, args)


if __name__ == "__main__":
    raise SystemExit(main())
