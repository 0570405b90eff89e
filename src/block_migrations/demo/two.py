"""Demo migration: Two."""

from ..migrations import RegularMigration
from ..storage import BlockStorage


class Two(RegularMigration[BlockStorage]):
    name = "Two"

    def description(self) -> str:
        return "The sequel!"

    def initialize(self, storage: BlockStorage) -> None:
        storage.set(22, "Two initialized.")

    def update(self, storage: BlockStorage) -> None:
        storage.set(2, "two")
