"""Registry of all known migration definitions."""

import logging
from collections.abc import Iterable, Iterator

from ..errors import DuplicateMigrationError, MigrationError, RegistryFrozenError
from .base import Migration

logger = logging.getLogger(__name__)


class MigrationRegistry:
    """
    Name-keyed collection of migration definitions.

    The registry is filled once at startup and frozen the first time it is
    resolved against a configuration. Iteration follows registration order.
    """

    def __init__(self, migrations: Iterable[Migration] = ()):
        """
        Initialize the registry.

        Args:
            migrations: Definitions to register, in order

        Raises:
            DuplicateMigrationError: If two definitions share a name
        """
        self._migrations: dict[str, Migration] = {}
        self._frozen = False
        for migration in migrations:
            self.register(migration)

    def register(self, migration: Migration) -> None:
        """
        Add a migration definition.

        Args:
            migration: Definition to add

        Raises:
            MigrationError: If the definition has no name
            DuplicateMigrationError: If the name is already registered
            RegistryFrozenError: If the registry has already been resolved
        """
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot register '{getattr(migration, 'name', '?')}': registry is frozen"
            )

        name = getattr(migration, "name", None)
        if not isinstance(name, str) or not name:
            raise MigrationError(f"Migration {type(migration).__name__} has no name")

        if name in self._migrations:
            raise DuplicateMigrationError(f"Migration '{name}' is already registered")

        self._migrations[name] = migration
        logger.debug("Registered migration %s (%s)", name, migration.kind.value)

    def freeze(self) -> None:
        """Prevent any further registration."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> Migration | None:
        """
        Look up a definition by name.

        Args:
            name: Migration name

        Returns:
            The definition, or None if not registered
        """
        return self._migrations.get(name)

    def names(self) -> list[str]:
        """Return registered names in sorted order."""
        return sorted(self._migrations)

    def __contains__(self, name: object) -> bool:
        return name in self._migrations

    def __iter__(self) -> Iterator[Migration]:
        return iter(self._migrations.values())

    def __len__(self) -> int:
        return len(self._migrations)
