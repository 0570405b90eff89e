"""Migration runner driving an active migration set one height at a time."""

import logging
from dataclasses import dataclass, field

from ..errors import HeightError
from ..storage import BlockStorage
from .active import ActiveMigrationSet

logger = logging.getLogger(__name__)


@dataclass
class BlockResult:
    """Outcome of running migrations for a single height."""

    height: int
    initialized: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    hotfixes: dict[str, bytes | None] = field(default_factory=dict)


class MigrationRunner:
    """Runs migrations against storage, once per height."""

    def __init__(self, migrations: ActiveMigrationSet, storage: BlockStorage):
        """
        Initialize migration runner.

        Args:
            migrations: Active migration set to drive
            storage: Storage state, also used to record the last processed height
        """
        self.migrations = migrations
        self.storage = storage

    def last_height(self) -> int | None:
        """
        Get the last processed height.

        Returns:
            Last processed height, or None if nothing has run yet
        """
        return self.storage.get_height()

    def run_block(self, height: int, payload: bytes | None = None) -> BlockResult:
        """
        Run initialize, update and (given a payload) hotfix migrations for one height.

        The height is recorded once every phase has run. If a later phase
        raises, the height can be retried; its initialize phase is not
        repeated once it has completed.

        Args:
            height: Height to process
            payload: Optional encoded payload for hotfix migrations

        Returns:
            What ran at this height

        Raises:
            HeightError: If the height is not past the last processed height
        """
        last = self.last_height()
        if last is not None and height <= last:
            raise HeightError(f"Height {height} already processed (last processed height is {last})")

        result = BlockResult(height)
        if self.storage.get_initialized_height() == height:
            # Retry of a height that failed after its initialize phase
            logger.warning("Skipping initialize at height %d: already applied", height)
        else:
            result.initialized = self.migrations.initialize_all(self.storage, height)
            self.storage.set_initialized_height(height)
        result.updated = self.migrations.update_all(self.storage, height)
        if payload is not None:
            result.hotfixes = self.migrations.hotfix_all(payload, height)

        self.storage.set_height(height)
        logger.info(
            "Processed height %d (initialized: %d, updated: %d)",
            height,
            len(result.initialized),
            len(result.updated),
        )
        return result

    def run_range(self, start: int, stop: int, payload: bytes | None = None) -> list[BlockResult]:
        """
        Run every height in [start, stop).

        Args:
            start: First height
            stop: Height to stop before
            payload: Optional encoded payload for hotfix migrations

        Returns:
            One result per height
        """
        return [self.run_block(height, payload) for height in range(start, stop)]
