"""Demo migration: One."""

from ..migrations import RegularMigration
from ..storage import BlockStorage


class One(RegularMigration[BlockStorage]):
    """Seeds key 11 when activated and keeps key 1 set afterwards."""

    name = "One"

    def description(self) -> str:
        return "The one migration"

    def initialize(self, storage: BlockStorage) -> None:
        storage.set(11, "One initialized.")

    def update(self, storage: BlockStorage) -> None:
        storage.set(1, "One")
