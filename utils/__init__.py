"""Utility modules for waypoint."""

from .logger import get_logger, setup_logger

# Note: terminal_ui is NOT imported here: it depends on config, and the
# command core must stay importable without it. Import it directly:
#   from utils import terminal_ui

__all__ = [
    "setup_logger",
    "get_logger",
]
