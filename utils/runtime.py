"""Runtime directory management for waypoint.

All runtime data is stored under ~/.waypoint/ directory:
- config: Configuration file (KEY=VALUE)
- commands/: User command documents (*.md), unless COMMANDS_DIR points elsewhere
- logs/: Log files (only created with --verbose)
"""

import os
from typing import Optional

RUNTIME_DIR = os.path.join(os.path.expanduser("~"), ".waypoint")


def get_log_dir() -> str:
    return os.path.join(RUNTIME_DIR, "logs")


def ensure_runtime_dirs(commands_dir: Optional[str] = None, create_logs: bool = False) -> None:
    """Ensure runtime directories exist.

    Args:
        commands_dir: Configured user commands directory to create, if any
        create_logs: Whether to create the logs directory (for --verbose mode)
    """
    if commands_dir:
        os.makedirs(os.path.expanduser(commands_dir), exist_ok=True)

    if create_logs:
        os.makedirs(get_log_dir(), exist_ok=True)
