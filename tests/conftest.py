"""Shared fixtures for block-migrations tests."""

import pytest

from block_migrations.migrations import HotfixMigration, MigrationRegistry, RegularMigration


class Recorder(RegularMigration[list]):
    """Regular migration that appends what it did to a list storage."""

    def __init__(self, name: str):
        self.name = name

    def description(self) -> str:
        return f"Records {self.name}"

    def initialize(self, storage: list) -> None:
        storage.append(f"{self.name}:initialize")

    def update(self, storage: list) -> None:
        storage.append(f"{self.name}:update")


class Suffixer(HotfixMigration):
    """Hotfix that appends a suffix to payloads starting with b"ok"."""

    def __init__(self, name: str, suffix: bytes = b"!"):
        self.name = name
        self.suffix = suffix

    def description(self) -> str:
        return f"Suffixes {self.name}"

    def transform(self, data: bytes) -> bytes | None:
        if not data.startswith(b"ok"):
            return None
        return data + self.suffix


@pytest.fixture
def make_regular():
    """Factory for recording regular migrations."""
    return Recorder


@pytest.fixture
def make_hotfix():
    """Factory for suffixing hotfix migrations."""
    return Suffixer


@pytest.fixture
def registry() -> MigrationRegistry:
    """Registry with One and Two (regular) and Three (hotfix)."""
    return MigrationRegistry([Recorder("One"), Recorder("Two"), Suffixer("Three")])


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the CLI config at a temporary file."""
    config_path = tmp_path / "config" / "config.toml"
    monkeypatch.setenv("BLOCK_MIGRATIONS_CONFIG", str(config_path))
    return config_path
