"""Tests for the command line interface."""

import json

from click.testing import CliRunner

from block_migrations import __version__
from block_migrations.cli import cli


class TestCli:
    """Tests for the CLI commands."""

    def test_version(self) -> None:
        """Test --version prints the package version."""
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_list(self) -> None:
        """Test list shows every registered migration."""
        result = CliRunner().invoke(cli, ["list"])

        assert result.exit_code == 0
        for name in ["One", "Two", "Three", "Four"]:
            assert name in result.output
        assert "hotfix" in result.output

    def test_show_json(self) -> None:
        """Test show outputs the default active set as JSON."""
        result = CliRunner().invoke(cli, ["show", "--format", "json"])

        assert result.exit_code == 0
        output = json.loads(result.output)
        assert [entry["type"] for entry in output] == ["Four", "One", "Three", "Two"]
        assert output[1]["block_height"] == 2
        assert all(entry["status"] == "Enabled" for entry in output)

    def test_show_disable(self) -> None:
        """Test --disable marks a migration disabled."""
        result = CliRunner().invoke(cli, ["show", "--format", "json", "--disable", "Three"])

        assert result.exit_code == 0
        statuses = {entry["type"]: entry["status"] for entry in json.loads(result.output)}
        assert statuses["Three"] == "Disabled"
        assert statuses["One"] == "Enabled"

    def test_show_disable_unknown(self) -> None:
        """Test disabling a name outside the active set fails."""
        result = CliRunner().invoke(cli, ["show", "--disable", "Five"])

        assert result.exit_code == 1
        assert "not in the active set" in result.output

    def test_show_enable_all(self) -> None:
        """Test --enable-all leaves hotfixes disabled by default."""
        result = CliRunner().invoke(cli, ["show", "--format", "json", "--enable-all"])

        assert result.exit_code == 0
        statuses = {entry["type"]: entry["status"] for entry in json.loads(result.output)}
        assert statuses == {
            "Four": "Disabled",
            "One": "Enabled",
            "Three": "Disabled",
            "Two": "Enabled",
        }

    def test_show_table(self) -> None:
        """Test the default table output."""
        result = CliRunner().invoke(cli, ["show"])

        assert result.exit_code == 0
        assert "Active Migrations" in result.output

    def test_show_migrations_file(self, tmp_path) -> None:
        """Test a configuration document is read from --migrations."""
        path = tmp_path / "migrations.json"
        path.write_text('[{"type": "Two", "block_height": 4}]', encoding="utf-8")

        result = CliRunner().invoke(cli, ["show", "--format", "json", "--migrations", str(path)])

        assert result.exit_code == 0
        assert json.loads(result.output) == [
            {"type": "Two", "block_height": 4, "issue": None, "status": "Enabled"}
        ]

    def test_unsupported_type(self, tmp_path) -> None:
        """Test an unknown migration name is reported as an error."""
        path = tmp_path / "migrations.json"
        path.write_text('[{"type": "Five", "block_height": 4}]', encoding="utf-8")

        result = CliRunner().invoke(cli, ["show", "--migrations", str(path)])

        assert result.exit_code == 1
        assert "Unsupported migration type Five" in result.output

    def test_malformed_document(self, tmp_path) -> None:
        """Test a malformed document is reported as an error."""
        path = tmp_path / "migrations.json"
        path.write_text("{not json", encoding="utf-8")

        result = CliRunner().invoke(cli, ["show", "--migrations", str(path)])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_run(self) -> None:
        """Test run drives the demo through its hotfix height."""
        result = CliRunner().invoke(cli, ["run", "--end", "8"])

        assert result.exit_code == 0
        assert "Height 7" in result.output
        assert "Hotfix Three result: 12345" in result.output
        assert "Hotfix Four result: 10000000000" in result.output
        assert "Simulation completed" in result.output

    def test_run_resumes_state_file(self, tmp_path) -> None:
        """Test a persisted chain cannot replay processed heights."""
        state_file = tmp_path / "chain.json"
        runner = CliRunner()

        first = runner.invoke(cli, ["run", "--end", "3", "--state-file", str(state_file)])
        replay = runner.invoke(cli, ["run", "--end", "3", "--state-file", str(state_file)])
        resumed = runner.invoke(
            cli, ["run", "--start", "3", "--end", "5", "--state-file", str(state_file)]
        )

        assert first.exit_code == 0
        assert replay.exit_code == 1
        assert "already processed" in replay.output
        assert resumed.exit_code == 0

    def test_run_invalid_range(self) -> None:
        """Test an end height below the start height is rejected."""
        result = CliRunner().invoke(cli, ["run", "--start", "5", "--end", "2"])

        assert result.exit_code == 1
        assert "below start height" in result.output

    def test_include_hotfixes_requires_enable_all(self) -> None:
        """Test --include-hotfixes on its own is rejected."""
        result = CliRunner().invoke(cli, ["show", "--include-hotfixes"])

        assert result.exit_code == 1
        assert "--include-hotfixes requires --enable-all" in result.output

    def test_include_hotfixes_with_enable_all(self) -> None:
        """Test --include-hotfixes enables hotfixes alongside --enable-all."""
        result = CliRunner().invoke(
            cli, ["show", "--format", "json", "--enable-all", "--include-hotfixes"]
        )

        assert result.exit_code == 0
        assert all(entry["status"] == "Enabled" for entry in json.loads(result.output))
