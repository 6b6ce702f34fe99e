"""Command registry implementation."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from utils import get_logger

from .errors import InvalidSpec
from .parser import list_command_files, parse_command, read_text
from .types import CatalogSnapshot, CommandSpec, LoadFailure

logger = get_logger(__name__)

# Builtin commands are bundled with waypoint
BUILTIN_COMMANDS_DIR = Path(__file__).parent / "builtin"


def parse_documents(
    documents: Iterable[tuple[str, str]],
) -> list[tuple[str, CommandSpec | InvalidSpec]]:
    """Parse ``(source, text)`` pairs, pairing each source with a spec or its error."""
    results: list[tuple[str, CommandSpec | InvalidSpec]] = []
    for source, text in documents:
        try:
            results.append((source, parse_command(text, source)))
        except InvalidSpec as e:
            results.append((source, e))
    return results


def build_snapshot(
    results: Iterable[tuple[str, CommandSpec | InvalidSpec]],
    base: CatalogSnapshot | None = None,
) -> CatalogSnapshot:
    """Fold parse results into a new snapshot.

    Later specs replace earlier ones with the same name but keep the earlier
    registration position.
    """
    specs: dict[str, CommandSpec] = {}
    failures: list[LoadFailure] = []
    if base is not None:
        specs.update(base.by_name)
        failures.extend(base.failures)

    for source, outcome in results:
        if isinstance(outcome, InvalidSpec):
            logger.warning(str(outcome))
            failures.append(LoadFailure(source=source, error=outcome.reason))
            continue
        if outcome.name in specs:
            logger.debug(f"Command '{outcome.name}' from {source} replaces an earlier definition")
        specs[outcome.name] = outcome

    return CatalogSnapshot(specs=tuple(specs.values()), failures=tuple(failures))


class CommandRegistry:
    """Catalog of command specs, published as immutable snapshots.

    Readers take ``registry.snapshot`` once and use it for the whole operation;
    ``reload`` and ``register`` build a new snapshot and swap it in with a single
    assignment, so in-flight readers never see a partially built catalog.

    Specs added with ``register`` or ``load_documents`` are kept apart from the
    directory contents and folded back over them on every reload.
    """

    def __init__(
        self,
        commands_dirs: Iterable[Path] | None = None,
        include_builtin: bool = True,
    ) -> None:
        dirs = list(commands_dirs or [])
        if include_builtin:
            # Builtins load first so user documents override them by name.
            dirs.insert(0, BUILTIN_COMMANDS_DIR)
        self.commands_dirs: tuple[Path, ...] = tuple(dirs)
        self._snapshot = CatalogSnapshot()
        self._registered: dict[str, tuple[str, CommandSpec]] = {}

    @property
    def snapshot(self) -> CatalogSnapshot:
        return self._snapshot

    @property
    def failures(self) -> tuple[LoadFailure, ...]:
        return self._snapshot.failures

    async def load(self) -> CatalogSnapshot:
        """Load every command directory and publish the result."""
        results: list[tuple[str, CommandSpec | InvalidSpec]] = []
        for commands_dir in self.commands_dirs:
            for command_file in await list_command_files(commands_dir):
                source = str(command_file)
                try:
                    text = await read_text(command_file)
                except (OSError, UnicodeDecodeError) as e:
                    results.append((source, InvalidSpec(source, f"unreadable file: {e}")))
                    continue
                try:
                    results.append((source, parse_command(text, source, path=command_file)))
                except InvalidSpec as e:
                    results.append((source, e))

        results.extend(self._registered.values())
        self._snapshot = build_snapshot(results)
        logger.info(
            f"Loaded {len(self._snapshot.specs)} commands "
            f"({len(self._snapshot.failures)} rejected) from {len(self.commands_dirs)} directories"
        )
        return self._snapshot

    async def reload(self) -> CatalogSnapshot:
        return await self.load()

    def load_documents(self, documents: Iterable[tuple[str, str]]) -> CatalogSnapshot:
        """Add specs parsed from in-memory ``(source, text)`` documents."""
        results = parse_documents(documents)
        for source, outcome in results:
            if isinstance(outcome, CommandSpec):
                self._remember(source, outcome)
        self._snapshot = build_snapshot(results, base=self._snapshot)
        return self._snapshot

    def register(self, spec: CommandSpec) -> None:
        """Register a spec, replacing any existing spec with the same name."""
        self._remember(spec.name, spec)
        self._snapshot = build_snapshot([(spec.name, spec)], base=self._snapshot)

    def _remember(self, source: str, spec: CommandSpec) -> None:
        self._registered[spec.name] = (source, spec)

    def get(self, name: str) -> CommandSpec | None:
        return self._snapshot.get(name)

    def list(self) -> list[CommandSpec]:
        return list(self._snapshot.specs)

    def filter_by_category(self, category: str) -> list[CommandSpec]:
        wanted = category.strip().lower()
        return [spec for spec in self._snapshot.specs if spec.category.lower() == wanted]
