"""Configuration management for waypoint."""

import os

# Path constants are defined here to avoid importing utils (utils.terminal_ui imports Config)
_RUNTIME_DIR = os.path.join(os.path.expanduser("~"), ".waypoint")
_CONFIG_FILE = os.path.join(_RUNTIME_DIR, "config")

# Default configuration template
_DEFAULT_CONFIG = """\
# waypoint configuration

# Directory holding user command documents (*.md)
COMMANDS_DIR=~/.waypoint/commands

# Load the builtin commands shipped with waypoint
LOAD_BUILTIN_COMMANDS=true

# Number of alternative commands shown by `waypoint route`
ROUTER_SUGGESTION_LIMIT=3

# Seconds between command directory polls in watch mode
WATCH_INTERVAL=0.3

LOG_LEVEL=DEBUG
UI_THEME=dark
"""


def _load_config(path: str) -> dict[str, str]:
    """Parse a KEY=VALUE config file, skipping comments and blank lines."""
    cfg: dict[str, str] = {}
    if not os.path.isfile(path):
        return cfg
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, _, value = line.partition("=")
            # Strip inline comments (# ...) from the value
            if "#" in value:
                value = value[: value.index("#")]
            cfg[key.strip()] = value.strip()
    return cfg


def ensure_config() -> None:
    """Ensure ~/.waypoint/config exists, create with defaults if not."""
    if not os.path.exists(_CONFIG_FILE):
        os.makedirs(_RUNTIME_DIR, exist_ok=True)
        with open(_CONFIG_FILE, "w", encoding="utf-8") as f:
            f.write(_DEFAULT_CONFIG)


_cfg = _load_config(_CONFIG_FILE)


class Config:
    """Configuration for waypoint.

    All configuration is centralized here. Access config values directly via Config.XXX.
    """

    # Command catalog
    COMMANDS_DIR = os.path.expanduser(
        _cfg.get("COMMANDS_DIR") or os.path.join(_RUNTIME_DIR, "commands")
    )
    LOAD_BUILTIN_COMMANDS = _cfg.get("LOAD_BUILTIN_COMMANDS", "true").lower() == "true"

    # Routing
    ROUTER_SUGGESTION_LIMIT = int(_cfg.get("ROUTER_SUGGESTION_LIMIT", "3"))

    # Hot reload
    WATCH_INTERVAL = float(_cfg.get("WATCH_INTERVAL", "0.3"))

    # Logging Configuration
    # Note: Logging is controlled via --verbose flag
    LOG_LEVEL = _cfg.get("LOG_LEVEL", "DEBUG").upper()

    # UI Configuration
    UI_THEME = _cfg.get("UI_THEME", "dark")  # "dark" or "light"

    @classmethod
    def validate(cls):
        """Validate configuration values.

        Raises:
            ValueError: If a configuration value is out of range
        """
        if cls.ROUTER_SUGGESTION_LIMIT < 1:
            raise ValueError("ROUTER_SUGGESTION_LIMIT must be at least 1.")
        if cls.WATCH_INTERVAL <= 0:
            raise ValueError("WATCH_INTERVAL must be positive.")
        if cls.LOG_LEVEL not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown LOG_LEVEL '{cls.LOG_LEVEL}'.")
        if cls.UI_THEME not in ("dark", "light"):
            raise ValueError("UI_THEME must be 'dark' or 'light'.")
