"""Base classes for height-gated migrations."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

StorageT = TypeVar("StorageT")

DEFAULT_BLOCK_HEIGHT = 1
MAX_BLOCK_HEIGHT = 2**64 - 1


class Status(str, Enum):
    """Activation status of a migration."""

    ENABLED = "Enabled"
    DISABLED = "Disabled"


class MigrationKind(str, Enum):
    """Shape of a migration definition."""

    REGULAR = "regular"
    HOTFIX = "hotfix"


class Metadata(BaseModel):
    """Per-activation settings: the block height a migration is tied to and an optional note."""

    model_config = ConfigDict(extra="ignore", strict=True)

    block_height: int = Field(default=DEFAULT_BLOCK_HEIGHT, ge=0, le=MAX_BLOCK_HEIGHT)
    issue: str | None = None


class Migration(ABC, Generic[StorageT]):
    """
    Base class for migration definitions.

    Definitions are stateless and shared by every active migration set built
    from the registry they belong to. Subclasses set ``name``, which must be
    unique within a registry.
    """

    name: str
    kind: MigrationKind

    @abstractmethod
    def description(self) -> str:
        """Return a human-readable description of this migration."""
        pass

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r} ({self.kind.value})>"


class RegularMigration(Migration[StorageT]):
    """A migration that mutates storage once at its height and on every height after."""

    kind = MigrationKind.REGULAR

    @abstractmethod
    def initialize(self, storage: StorageT) -> None:
        """
        Run once, when the current height equals the activation height.

        Args:
            storage: Storage state to mutate
        """
        pass

    @abstractmethod
    def update(self, storage: StorageT) -> None:
        """
        Run on every height at or past the activation height.

        Args:
            storage: Storage state to mutate
        """
        pass


class HotfixMigration(Migration[StorageT]):
    """A migration that rewrites an opaque byte payload at its activation height."""

    kind = MigrationKind.HOTFIX

    @abstractmethod
    def transform(self, data: bytes) -> bytes | None:
        """
        Transform a payload.

        Args:
            data: Encoded payload

        Returns:
            The transformed payload, or None if the payload could not be handled
        """
        pass
