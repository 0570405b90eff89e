"""Active migrations and the height gate that decides when they run."""

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from .base import HotfixMigration, Metadata, Migration, RegularMigration, Status

logger = logging.getLogger(__name__)


@dataclass
class ActiveMigration:
    """
    A migration definition bound to its activation metadata and status.

    Status only changes through enable() and disable(); height gates
    execution, never status.
    """

    definition: Migration
    metadata: Metadata = field(default_factory=Metadata)
    status: Status = Status.DISABLED

    @property
    def name(self) -> str:
        return self.definition.name

    def description(self) -> str:
        return self.definition.description()

    @property
    def is_enabled(self) -> bool:
        return self.status is Status.ENABLED

    def enable(self) -> None:
        self.status = Status.ENABLED

    def disable(self) -> None:
        self.status = Status.DISABLED

    def initialize(self, storage: Any, height: int) -> bool:
        """
        Run the definition's initialize step if enabled and height matches exactly.

        Args:
            storage: Storage state handed to the migration
            height: Current height

        Returns:
            True if the migration ran
        """
        if not isinstance(self.definition, RegularMigration):
            return False
        if not self.is_enabled or self.metadata.block_height != height:
            return False

        logger.debug("Initializing %s at height %d", self.name, height)
        self.definition.initialize(storage)
        return True

    def update(self, storage: Any, height: int) -> bool:
        """
        Run the definition's update step if enabled and height is at or past activation.

        Once the activation height is reached this fires on every call, so
        callers must invoke it once per height.

        Args:
            storage: Storage state handed to the migration
            height: Current height

        Returns:
            True if the migration ran
        """
        if not isinstance(self.definition, RegularMigration):
            return False
        if not self.is_enabled or self.metadata.block_height > height:
            return False

        logger.debug("Updating %s at height %d", self.name, height)
        self.definition.update(storage)
        return True

    def hotfix(self, data: bytes, height: int) -> bytes | None:
        """
        Transform a payload if enabled and height matches exactly.

        Args:
            data: Encoded payload
            height: Current height

        Returns:
            The transformed payload, or None if the migration did not run or
            the transform rejected the payload or raised
        """
        if not isinstance(self.definition, HotfixMigration):
            return None
        if not self.is_enabled or self.metadata.block_height != height:
            return None

        logger.debug("Applying hotfix %s at height %d", self.name, height)
        try:
            result = self.definition.transform(data)
        except Exception:
            # A raising transform counts as a rejected payload
            logger.exception("Hotfix %s failed at height %d", self.name, height)
            return None
        if result is None:
            logger.warning("Hotfix %s could not transform payload at height %d", self.name, height)
        return result


class ActiveMigrationSet(Mapping[str, ActiveMigration]):
    """
    Name-keyed set of active migrations.

    Iteration is always in lexicographic name order, independent of the
    order entries were added, so every replica runs migrations in the same
    sequence.
    """

    def __init__(self, migrations: Mapping[str, ActiveMigration] | None = None):
        self._migrations: dict[str, ActiveMigration] = dict(migrations or {})

    def __getitem__(self, name: str) -> ActiveMigration:
        return self._migrations[name]

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._migrations))

    def __len__(self) -> int:
        return len(self._migrations)

    def __repr__(self) -> str:
        entries = ", ".join(f"{name}={self[name].status.value}" for name in self)
        return f"ActiveMigrationSet({entries})"

    def enable(self, name: str) -> None:
        """
        Enable a migration.

        Raises:
            KeyError: If the name is not in the set
        """
        self._migrations[name].enable()

    def disable(self, name: str) -> None:
        """
        Disable a migration.

        Raises:
            KeyError: If the name is not in the set
        """
        self._migrations[name].disable()

    def enabled(self) -> list[str]:
        """Return the names of enabled migrations in key order."""
        return [name for name in self if self[name].is_enabled]

    def initialize_all(self, storage: Any, height: int) -> list[str]:
        """
        Run initialize for every migration activating at exactly this height.

        Args:
            storage: Storage state handed to each migration
            height: Current height

        Returns:
            Names of the migrations that ran, in key order
        """
        return [name for name in self if self[name].initialize(storage, height)]

    def update_all(self, storage: Any, height: int) -> list[str]:
        """
        Run update for every migration whose activation height has been reached.

        Args:
            storage: Storage state handed to each migration
            height: Current height

        Returns:
            Names of the migrations that ran, in key order
        """
        return [name for name in self if self[name].update(storage, height)]

    def hotfix_all(self, data: bytes, height: int) -> dict[str, bytes | None]:
        """
        Run every hotfix activating at exactly this height against the payload.

        Each hotfix receives the original payload; results are not chained.

        Args:
            data: Encoded payload
            height: Current height

        Returns:
            Mapping of every migration name to its transformed payload, or
            None where nothing was produced
        """
        return {name: self[name].hotfix(data, height) for name in self}
