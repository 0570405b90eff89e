"""Exceptions raised by the migration registry."""


class MigrationError(Exception):
    """
    Base exception for all migration-related errors.

    Catch this to handle any failure raised while building a registry,
    resolving a configuration or driving migrations.
    """

    pass


class DuplicateMigrationError(MigrationError):
    """Raised when two migrations are registered under the same name."""

    pass


class RegistryFrozenError(MigrationError):
    """Raised when registering a migration after the registry has been resolved."""

    pass


class ConfigParseError(MigrationError):
    """
    Raised when a migration configuration document cannot be parsed.

    This exception is raised for:
    - Invalid JSON
    - A top-level value that is not a list of records
    - Records missing the ``type`` field or carrying a non-string name
    - Block heights that are not unsigned 64-bit integers
    - Unreadable configuration files
    """

    pass


class UnsupportedMigrationType(MigrationError):
    """Raised when a configuration record names a migration that is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unsupported migration type {name}")


class HeightError(MigrationError):
    """Raised when a height is processed out of order or more than once."""

    pass
