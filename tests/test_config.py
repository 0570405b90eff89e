"""Tests for configuration loading."""

import tomllib

import pytest

from block_migrations.config import Config, get_config_path, load_config


class TestLoadConfig:
    """Tests for load_config."""

    def test_creates_default(self, tmp_path) -> None:
        """Test a missing config file is created with defaults."""
        path = tmp_path / "nested" / "config.toml"

        config = load_config(path)

        assert config.start_height == 0
        assert config.end_height == 10
        assert config.migrations_file is None
        assert config.state_file is None
        assert path.exists()
        with open(path, "rb") as f:
            saved = tomllib.load(f)
        assert saved["paths"]["state_file"] == ""
        assert saved["simulation"]["end_height"] == 10

    def test_round_trip(self, tmp_path) -> None:
        """Test a saved config loads back unchanged."""
        path = tmp_path / "config.toml"
        original = Config(
            migrations_file=(tmp_path / "migrations.json").resolve(),
            state_file=(tmp_path / "chain.json").resolve(),
            start_height=3,
            end_height=12,
            step_delay=0.5,
            enable_all=True,
        )

        original.save(path)

        assert load_config(path) == original

    def test_reads_toml(self, tmp_path) -> None:
        """Test values are read from their TOML sections."""
        path = tmp_path / "config.toml"
        path.write_text(
            "[paths]\n"
            'state_file = "~/chain.json"\n'
            "[simulation]\n"
            "end_height = 20\n"
            "[migrations]\n"
            "include_hotfixes = true\n",
            encoding="utf-8",
        )

        config = load_config(path)

        assert config.end_height == 20
        assert config.include_hotfixes is True
        assert config.enable_all is False
        assert config.state_file is not None
        assert "~" not in str(config.state_file)
        assert config.migrations_file is None

    def test_invalid_range(self, tmp_path) -> None:
        """Test an end height below the start height is rejected."""
        path = tmp_path / "config.toml"
        path.write_text("[simulation]\nstart_height = 5\nend_height = 2\n", encoding="utf-8")

        with pytest.raises(ValueError, match="end_height"):
            load_config(path)

    def test_invalid_toml(self, tmp_path) -> None:
        """Test a malformed TOML file raises ValueError."""
        path = tmp_path / "config.toml"
        path.write_text("[simulation\n", encoding="utf-8")

        with pytest.raises(ValueError):
            load_config(path)


class TestGetConfigPath:
    """Tests for get_config_path."""

    def test_env_override(self, tmp_path, monkeypatch) -> None:
        """Test the environment variable takes priority."""
        monkeypatch.setenv("BLOCK_MIGRATIONS_CONFIG", str(tmp_path / "custom.toml"))

        assert get_config_path() == (tmp_path / "custom.toml").resolve()

    def test_default(self, monkeypatch) -> None:
        """Test the default location."""
        monkeypatch.delenv("BLOCK_MIGRATIONS_CONFIG", raising=False)

        assert get_config_path().parts[-2:] == ("block-migrations", "config.toml")
