"""Tests for the extension script commands."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from cli.commands.script import COMMANDS, Help, Install, Script, camelize
from extensions.errors import (
    AlreadyInstalled,
    CommandNotFound,
    MissingArgument,
    NotInstalled,
)
from extensions.manager import ExtensionManager


@pytest.fixture
def manager() -> MagicMock:
    manager = MagicMock(spec=ExtensionManager)
    manager.install.return_value = Path("/srv/site/vendor/extensions/page_attachments")
    return manager


@pytest.fixture
def factory(manager) -> MagicMock:
    return MagicMock(return_value=manager)


@pytest.fixture
def script(factory) -> Script:
    return Script(manager_factory=factory)


class TestDispatch:
    def test_camelize(self):
        assert camelize("install") == "Install"
        assert camelize("page_attachments") == "PageAttachments"

    def test_registered_commands(self):
        assert set(COMMANDS) == {"Install", "Uninstall", "Help"}

    def test_defaults_to_help(self, script):
        assert isinstance(script.command_for([]), Help)

    def test_resolves_command(self, script):
        command = script.command_for(["install", "tags"])

        assert isinstance(command, Install)
        assert command.args == ["tags"]

    @pytest.mark.parametrize("command", ["bogus", "INSTALL", ""])
    def test_unknown_command(self, script, command):
        with pytest.raises(CommandNotFound):
            script.execute([command])


class TestInstall:
    def test_requires_name(self, script, factory):
        with pytest.raises(MissingArgument, match="extension to install"):
            script.execute(["install"])

        factory.assert_not_called()

    def test_installs_normalised_name(self, script, manager, capsys):
        script.execute(["install", "PageAttachments"])

        manager.install.assert_called_once_with("page_attachments")
        assert "Installed page_attachments" in capsys.readouterr().out

    def test_already_installed_is_reported(self, script, manager, capsys):
        manager.install.side_effect = AlreadyInstalled("tags is already installed.")

        script.execute(["install", "tags"])

        assert "tags is already installed." in capsys.readouterr().out


class TestUninstall:
    def test_requires_name(self, script):
        with pytest.raises(MissingArgument, match="extension to uninstall"):
            script.execute(["uninstall"])

    def test_uninstalls(self, script, manager, capsys):
        script.execute(["uninstall", "tags"])

        manager.uninstall.assert_called_once_with("tags")
        assert "Uninstalled tags" in capsys.readouterr().out

    def test_not_installed_is_reported(self, script, manager, capsys):
        manager.uninstall.side_effect = NotInstalled("tags is not installed.")

        script.execute(["uninstall", "tags"])

        assert "tags is not installed." in capsys.readouterr().out


class TestHelp:
    def test_general_usage(self, script, factory, capsys):
        script.execute(["help"])

        out = capsys.readouterr().out
        assert out.startswith("Usage: extension [command] [arguments]")
        assert "uninstall   Uninstall a previously installed extension." in out
        factory.assert_not_called()

    def test_command_usage(self, script, capsys):
        script.execute(["help", "install"])

        out = capsys.readouterr().out
        assert out.startswith("Usage: extension install extension_name")
        assert "- Installs an extension from the information in the registry." in out

    def test_unknown_topic_falls_back_to_general_usage(self, script, capsys):
        script.execute(["help", "frobnicate"])

        assert capsys.readouterr().out.startswith("Usage: extension [command] [arguments]")

    def test_usage_is_dedented(self):
        text = Help.help_text("uninstall")

        assert text.splitlines()[0] == "Usage: extension uninstall extension_name"
        assert text.splitlines()[2] == "  - Uninstalls a previously installed extension."
