"""Resolve a migration registry against a configuration document."""

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from pydantic import ConfigDict, Field, TypeAdapter, ValidationError

from ..errors import ConfigParseError, UnsupportedMigrationType
from .active import ActiveMigration, ActiveMigrationSet
from .base import Metadata, MigrationKind, Status
from .registry import MigrationRegistry

logger = logging.getLogger(__name__)


class MigrationRecord(Metadata):
    """One entry of a migration configuration document.

    Example:
        {"type": "One", "block_height": 2, "issue": "https://..."}
    """

    model_config = ConfigDict(extra="ignore", strict=True)

    name: str = Field(alias="type")

    def metadata(self) -> Metadata:
        """Build fresh Metadata from this record."""
        return Metadata(block_height=self.block_height, issue=self.issue)


_RECORDS = TypeAdapter(list[MigrationRecord])


def parse_config(document: str | bytes | Sequence[Mapping[str, Any]]) -> list[MigrationRecord]:
    """
    Parse a configuration document into records.

    Args:
        document: JSON text, or an already decoded list of mappings

    Returns:
        Records in document order

    Raises:
        ConfigParseError: If the document is malformed
    """
    try:
        if isinstance(document, (str, bytes)):
            return _RECORDS.validate_json(document)
        if not isinstance(document, Sequence):
            raise ConfigParseError(
                f"Migration configuration must be a list, got {type(document).__name__}"
            )
        # Strict mode only accepts plain lists of dicts
        records = [dict(record) if isinstance(record, Mapping) else record for record in document]
        return _RECORDS.validate_python(records)
    except ValidationError as e:
        raise ConfigParseError(f"Invalid migration configuration: {e}") from e


def load_migrations(
    registry: MigrationRegistry,
    document: str | bytes | Sequence[Mapping[str, Any]],
) -> ActiveMigrationSet:
    """
    Build the active migration set described by a configuration document.

    Every record is enabled with the metadata it carries. If a name appears
    more than once the last record wins. Resolution is all-or-nothing.

    Args:
        registry: Registry of known definitions
        document: JSON text, or an already decoded list of mappings

    Returns:
        The active migration set

    Raises:
        ConfigParseError: If the document is malformed
        UnsupportedMigrationType: If a record names an unregistered migration
    """
    records = parse_config(document)

    active: dict[str, ActiveMigration] = {}
    for record in records:
        definition = registry.get(record.name)
        if definition is None:
            raise UnsupportedMigrationType(record.name)

        if record.name in active:
            logger.warning(
                "Migration %s is configured more than once; using the last entry", record.name
            )

        active[record.name] = ActiveMigration(definition, record.metadata(), Status.ENABLED)

    registry.freeze()
    logger.info("Loaded %d active migration(s)", len(active))
    return ActiveMigrationSet(active)


def load_migrations_file(registry: MigrationRegistry, path: Path) -> ActiveMigrationSet:
    """
    Build the active migration set from a configuration file.

    Args:
        registry: Registry of known definitions
        path: Path to a JSON configuration document

    Returns:
        The active migration set

    Raises:
        ConfigParseError: If the file cannot be read or is malformed
        UnsupportedMigrationType: If a record names an unregistered migration
    """
    try:
        with open(path, "rb") as f:
            document = f.read()
    except OSError as e:
        raise ConfigParseError(f"Cannot read migration configuration {path}: {e}") from e

    return load_migrations(registry, document)


def load_enable_all_migrations(
    registry: MigrationRegistry, include_hotfixes: bool = False
) -> ActiveMigrationSet:
    """
    Activate every registered migration with default metadata.

    Regular migrations are enabled. Hotfixes are one-off manual
    interventions, so they are added disabled unless include_hotfixes is set.

    Args:
        registry: Registry of known definitions
        include_hotfixes: Enable hotfix migrations as well

    Returns:
        The active migration set
    """
    registry.freeze()

    active = {}
    for definition in registry:
        enabled = definition.kind is MigrationKind.REGULAR or include_hotfixes
        active[definition.name] = ActiveMigration(
            definition,
            Metadata(),
            Status.ENABLED if enabled else Status.DISABLED,
        )

    logger.info("Loaded %d active migration(s) with default metadata", len(active))
    return ActiveMigrationSet(active)
