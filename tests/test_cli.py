"""Tests for the extension console command."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from cli.extension.cli import app
from extensions.errors import FetchFailure, NotInstalled, TaskFailure

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Run every command from an empty directory with no overrides."""
    monkeypatch.chdir(tmp_path)
    for var in ("REGISTRY_URL", "RUNTIME_ENV", "EXTENSIONS_ROOT", "TASK_RUNNER", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)


class TestExtensionCommand:
    def test_no_arguments_prints_usage(self):
        result = runner.invoke(app, [])

        assert result.exit_code == 0
        assert "Usage: extension [command] [arguments]" in result.stdout

    def test_help_for_command(self):
        result = runner.invoke(app, ["help", "uninstall"])

        assert result.exit_code == 0
        assert "Usage: extension uninstall extension_name" in result.stdout

    def test_unknown_command_exit_code(self):
        result = runner.invoke(app, ["frobnicate"])

        assert result.exit_code == 3

    def test_missing_name_exit_code(self):
        result = runner.invoke(app, ["install"])

        assert result.exit_code == 2

    @pytest.mark.parametrize(
        "error, code",
        [
            (FetchFailure("Checkout failed for tags: not found"), 7),
            (TaskFailure("Task migrate failed for tags"), 10),
        ],
    )
    def test_pipeline_errors_map_to_exit_codes(self, error, code):
        with patch("cli.extension.cli.ExtensionManager") as manager_cls:
            manager_cls.return_value.install.side_effect = error

            result = runner.invoke(app, ["install", "tags"])

        assert result.exit_code == code

    def test_policy_noop_exits_cleanly(self):
        with patch("cli.extension.cli.ExtensionManager") as manager_cls:
            manager_cls.return_value.uninstall.side_effect = NotInstalled("tags is not installed.")

            result = runner.invoke(app, ["uninstall", "tags"])

        assert result.exit_code == 0
        assert "tags is not installed." in result.stdout

    def test_config_file_is_used(self, tmp_path):
        config_file = tmp_path / "custom.toml"
        config_file.write_text('[extensions]\nroot = "site"\n')

        with patch("cli.extension.cli.ExtensionManager") as manager_cls:
            result = runner.invoke(app, ["--config", str(config_file), "install", "tags"])

        assert result.exit_code == 0
        config = manager_cls.call_args.args[0]
        assert config.extensions.root == "site"

    def test_invalid_config_file_is_reported(self, tmp_path):
        config_file = tmp_path / "custom.toml"
        config_file.write_text('[tasks]\nnamesapce = "cms"\n')

        result = runner.invoke(app, ["--config", str(config_file), "install", "tags"])

        assert result.exit_code == 12
        assert "Invalid [tasks] settings" in result.output
        assert "Traceback" not in result.output
