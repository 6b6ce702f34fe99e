"""Terminal UI utilities using Rich library for CLI output."""

from dataclasses import dataclass
from typing import Iterable

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config import Config


@dataclass(frozen=True)
class ThemeColors:
    primary: str
    secondary: str
    success: str
    warning: str
    error: str
    text_secondary: str


DARK_THEME = ThemeColors(
    primary="#00D9FF",  # Bright cyan
    secondary="#A78BFA",  # Soft purple
    success="#10B981",  # Emerald green
    warning="#F59E0B",  # Amber
    error="#EF4444",  # Red
    text_secondary="#8B949E",  # Gray
)

LIGHT_THEME = ThemeColors(
    primary="#0969DA",  # Blue
    secondary="#8250DF",  # Purple
    success="#1A7F37",  # Green
    warning="#9A6700",  # Dark yellow
    error="#CF222E",  # Red
    text_secondary="#57606A",  # Gray
)

# Global console instance
console = Console()


def _get_colors() -> ThemeColors:
    return LIGHT_THEME if Config.UI_THEME == "light" else DARK_THEME


def print_error(message: str, title: str = "Error") -> None:
    """Print an error message.

    Args:
        message: Error message
        title: Error title (default: "Error")
    """
    colors = _get_colors()
    console.print(
        Panel(
            f"[{colors.error}]{message}[/{colors.error}]",
            title=f"[bold {colors.error}]{title}[/bold {colors.error}]",
            border_style=colors.error,
            box=box.ROUNDED,
        )
    )


def print_warning(message: str) -> None:
    colors = _get_colors()
    console.print(f"[{colors.warning}]{message}[/{colors.warning}]")


def print_success(message: str) -> None:
    colors = _get_colors()
    console.print(f"[{colors.success}]✓ {message}[/{colors.success}]")


def print_info(message: str) -> None:
    colors = _get_colors()
    console.print(f"[{colors.primary}]{message}[/{colors.primary}]")


def print_commands_table(specs: Iterable) -> None:
    """Print registered commands as a table.

    Args:
        specs: CommandSpec instances, in registration order
    """
    colors = _get_colors()
    table = Table(box=box.SIMPLE_HEAD, header_style=f"bold {colors.primary}")
    table.add_column("Command", style="bold")
    table.add_column("Category", style=colors.secondary)
    table.add_column("Access")
    table.add_column("Description", style=colors.text_secondary)

    for spec in specs:
        perms = spec.permissions
        access = "".join(
            flag if enabled else "-"
            for flag, enabled in (
                ("r", perms.read_files),
                ("w", perms.write_files),
                ("x", perms.execute_shell),
            )
        )
        name = f"/{spec.name}"
        if spec.is_agent:
            name += f" [dim]({spec.agent_id})[/dim]"
        table.add_row(name, spec.category, access, spec.description)

    console.print(table)


def print_command_detail(spec) -> None:
    """Print a full description of one command."""
    colors = _get_colors()
    lines = [f"[bold {colors.primary}]/{spec.name}[/bold {colors.primary}]  {spec.description}"]
    lines.append(f"[{colors.text_secondary}]category:[/{colors.text_secondary}] {spec.category}")
    if spec.is_agent:
        lines.append(f"[{colors.text_secondary}]agent:[/{colors.text_secondary}] {spec.agent_id}")
    if spec.activation_hints:
        hints = ", ".join(spec.activation_hints)
        lines.append(f"[{colors.text_secondary}]hints:[/{colors.text_secondary}] {hints}")
    for arg in spec.args:
        flag = "required" if arg.required else f"default={arg.default!r}"
        lines.append(f"  [bold]{arg.name}[/bold] ({arg.type}, {flag}) {arg.description}")
    for rule in spec.path_rules:
        effect = f"[{colors.secondary}]{rule.effect.value}[/{colors.secondary}]"
        lines.append(f"  {effect} {rule.pattern}")
    if spec.source:
        lines.append(f"[dim]{spec.source}[/dim]")

    console.print(Panel("\n".join(lines), border_style=colors.primary, box=box.ROUNDED))
