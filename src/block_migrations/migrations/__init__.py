"""Height-gated migration registry and execution."""

from .active import ActiveMigration, ActiveMigrationSet
from .base import (
    DEFAULT_BLOCK_HEIGHT,
    HotfixMigration,
    Metadata,
    Migration,
    MigrationKind,
    RegularMigration,
    Status,
)
from .loader import (
    MigrationRecord,
    load_enable_all_migrations,
    load_migrations,
    load_migrations_file,
    parse_config,
)
from .registry import MigrationRegistry
from .runner import BlockResult, MigrationRunner

__all__ = [
    "DEFAULT_BLOCK_HEIGHT",
    "ActiveMigration",
    "ActiveMigrationSet",
    "BlockResult",
    "HotfixMigration",
    "Metadata",
    "Migration",
    "MigrationKind",
    "MigrationRecord",
    "MigrationRegistry",
    "MigrationRunner",
    "RegularMigration",
    "Status",
    "load_enable_all_migrations",
    "load_migrations",
    "load_migrations_file",
    "parse_config",
]
