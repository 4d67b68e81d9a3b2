"""Subcommands of the extension script."""

from cli.commands.script import COMMANDS, Help, Install, Script, Uninstall

__all__ = ["COMMANDS", "Help", "Install", "Script", "Uninstall"]
