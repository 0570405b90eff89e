"""Demo migrations and configuration used by the CLI."""

from ..migrations import Migration, MigrationRegistry
from .four import Four
from .one import One
from .three import Three
from .two import Two

# Registry of all demo migrations
MIGRATIONS: list[Migration] = [
    One(),
    Two(),
    Three(),
    Four(),
]

DEFAULT_CONFIG = """
[
  {
    "type": "One",
    "block_height": 2,
    "issue": "https://github.com/liftedinit/many-framework/issues/190"
  },
  {
    "type": "Two",
    "block_height": 5
  },
  {
    "type": "Three",
    "block_height": 7
  },
  {
    "type": "Four",
    "block_height": 7
  }
]
"""


def build_registry() -> MigrationRegistry:
    """Build a fresh registry holding every demo migration."""
    return MigrationRegistry(MIGRATIONS)


__all__ = [
    "DEFAULT_CONFIG",
    "MIGRATIONS",
    "Four",
    "One",
    "Three",
    "Two",
    "build_registry",
]
