"""Unit tests for CLI commands."""

import os
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import tomli
from click.testing import CliRunner

from task_service import __version__
from task_service.cli import get_default_config, main
from task_service.config import flatten_toml_config


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


class TestMainGroup:
    """Tests for the main CLI group."""

    def test_help(self, runner: CliRunner) -> None:
        """Test CLI shows help."""
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "Task Service HTTP server" in result.output

    def test_version(self, runner: CliRunner) -> None:
        """Test --version prints the package version."""
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    @patch("task_service.cli.run_server")
    def test_runs_server_with_overrides(
        self,
        mock_run: MagicMock,
        runner: CliRunner,
        tmp_path: Path,
    ) -> None:
        """Test running without a subcommand starts the server with CLI overrides."""
        config = tmp_path / "config.toml"
        config.write_text("[server]\nhost = \"0.0.0.0\"\nport = 7000\n")

        with patch.dict(os.environ, {}, clear=True):
            result = runner.invoke(
                main,
                ["--config", str(config), "--port", "8081", "--log-level", "DEBUG"],
            )

        assert result.exit_code == 0
        settings = mock_run.call_args.args[0]
        assert settings.host == "0.0.0.0"
        assert settings.port == 8081
        assert settings.log_level == "DEBUG"

    @patch("task_service.cli.run_server")
    def test_invalid_port_rejected(self, mock_run: MagicMock, runner: CliRunner) -> None:
        """Test a non-integer port is a usage error."""
        result = runner.invoke(main, ["--port", "abc"])

        assert result.exit_code != 0
        mock_run.assert_not_called()


class TestInitConfig:
    """Tests for init-config command."""

    def test_writes_default_config(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test init-config writes a TOML file the loader understands."""
        config = tmp_path / "nested" / "config.toml"

        result = runner.invoke(main, ["--config", str(config), "init-config"])

        assert result.exit_code == 0
        assert config.exists()
        with open(config, "rb") as f:
            written = tomli.load(f)
        assert written == get_default_config()
        assert flatten_toml_config(written)["port"] == 6969

    def test_keeps_existing_when_declined(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test an existing file is kept when overwrite is declined."""
        config = tmp_path / "config.toml"
        config.write_text("[server]\nport = 1\n")

        result = runner.invoke(main, ["--config", str(config), "init-config"], input="n\n")

        assert result.exit_code == 0
        assert config.read_text() == "[server]\nport = 1\n"

    def test_overwrites_when_confirmed(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test an existing file is replaced when overwrite is confirmed."""
        config = tmp_path / "config.toml"
        config.write_text("[server]\nport = 1\n")

        result = runner.invoke(main, ["--config", str(config), "init-config"], input="y\n")

        assert result.exit_code == 0
        assert "Created config file" in result.output
        with open(config, "rb") as f:
            assert tomli.load(f)["server"]["port"] == 6969
