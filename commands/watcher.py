"""Hot reload of command documents.

Polls the registry's command directories for added, modified or removed
``*.md`` files and reloads the registry once changes have settled.
"""

from __future__ import annotations

import asyncio
import contextlib
import os
from pathlib import Path
from typing import Callable

import aiofiles.os

from utils import get_logger

from .parser import list_command_files
from .registry import CommandRegistry
from .types import CatalogSnapshot

logger = get_logger(__name__)

Fingerprint = dict[str, tuple[int, int]]


async def fingerprint(directories: tuple[Path, ...]) -> Fingerprint:
    """Map each command file to its (mtime_ns, size)."""
    result: Fingerprint = {}
    for directory in directories:
        if not await aiofiles.os.path.isdir(directory):
            continue
        for path in await list_command_files(directory):
            try:
                stat = await aiofiles.os.stat(path)
            except FileNotFoundError:
                continue
            result[str(path)] = (stat.st_mtime_ns, stat.st_size)
    return result


class CommandWatcher:
    """Reload a CommandRegistry when its command files change."""

    def __init__(
        self,
        registry: CommandRegistry,
        interval: float = 0.3,
        on_reload: Callable[[CatalogSnapshot], None] | None = None,
    ) -> None:
        self.registry = registry
        self.interval = interval
        self.on_reload = on_reload
        self._last: Fingerprint | None = None
        self._pending: Fingerprint | None = None
        self._task: asyncio.Task | None = None

    async def prime(self) -> None:
        """Record the current file state as the baseline for change detection."""
        self._last = await fingerprint(self.registry.commands_dirs)
        self._pending = None

    async def poll_once(self) -> bool:
        """Check for changes once; return True if the registry was reloaded.

        The first poll only records the baseline. A change is acted on when the
        next poll sees the same state, so a burst of writes triggers one reload.
        """
        if self._last is None:
            await self.prime()
            return False

        current = await fingerprint(self.registry.commands_dirs)
        if current == self._last:
            self._pending = None
            return False
        if current != self._pending:
            self._pending = current
            return False

        logger.info(f"Command files changed, reloading {len(current)} documents")
        snapshot = await self.registry.reload()
        self._last = current
        self._pending = None
        if self.on_reload is not None:
            self.on_reload(snapshot)
        return True

    async def run(self) -> None:
        if self._last is None:
            await self.prime()
        while True:
            try:
                await self.poll_once()
            except OSError as e:
                logger.warning(f"Command watcher poll failed: {e}")
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self._task is None:
            logger.debug(
                "Command watcher started for: "
                + os.pathsep.join(str(d) for d in self.registry.commands_dirs)
            )
            self._task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.debug("Command watcher shutting down")
