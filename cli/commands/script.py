"""Subcommands of the ``extension`` script.

``extension install NAME``, ``extension uninstall NAME`` and
``extension help [COMMAND]``. The first argument selects a command class
from ``COMMANDS`` by its camelised name.
"""

from __future__ import annotations

import textwrap
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import ClassVar

from cli.extension.output import print_info, print_success, print_text
from extensions.errors import (
    AlreadyInstalled,
    CommandNotFound,
    MissingArgument,
    NotInstalled,
)
from extensions.manager import ExtensionManager
from extensions.paths import to_extension_name

ManagerFactory = Callable[[], ExtensionManager]


def camelize(command: str) -> str:
    """``install`` -> ``Install``, ``foo_bar`` -> ``FooBar``."""
    return "".join(part[:1].upper() + part[1:] for part in command.split("_"))


class ScriptCommand(ABC):
    """A subcommand of the script, run with its remaining arguments."""

    usage: ClassVar[str] = ""

    def __init__(self, args: Sequence[str], manager_factory: ManagerFactory) -> None:
        self.args = list(args)
        self._manager_factory = manager_factory
        self._manager: ExtensionManager | None = None

    @property
    def manager(self) -> ExtensionManager:
        if self._manager is None:
            self._manager = self._manager_factory()
        return self._manager

    @abstractmethod
    def run(self) -> None:
        ...

    def extension_name(self, action: str) -> str:
        if not self.args or not self.args[0].strip():
            raise MissingArgument(f"You must specify an extension to {action}.")
        return to_extension_name(self.args[0])


COMMANDS: dict[str, type[ScriptCommand]] = {}


def register_command(cls: type[ScriptCommand]) -> type[ScriptCommand]:
    if cls.__name__ in COMMANDS:
        raise ValueError(f"Command {cls.__name__} already registered")
    COMMANDS[cls.__name__] = cls
    return cls


@register_command
class Install(ScriptCommand):
    usage = """
        Usage: extension install extension_name

          - Installs an extension from the information in the registry.
    """

    def run(self) -> None:
        name = self.extension_name("install")
        try:
            path = self.manager.install(name)
        except AlreadyInstalled as e:
            print_info(e.message)
            return
        print_success(f"Installed {name} into {path}")


@register_command
class Uninstall(ScriptCommand):
    usage = """
        Usage: extension uninstall extension_name

          - Uninstalls a previously installed extension.
    """

    def run(self) -> None:
        name = self.extension_name("uninstall")
        try:
            self.manager.uninstall(name)
        except NotInstalled as e:
            print_info(e.message)
            return
        print_success(f"Uninstalled {name}")


@register_command
class Help(ScriptCommand):
    usage = """
        Usage: extension [command] [arguments]

          Commands:

            install     Install an extension from the registry.
            uninstall   Uninstall a previously installed extension.
            help        Display help for commands

        Type 'extension help [command]' for information about that
        command.
    """

    def run(self) -> None:
        print_text(self.help_text(self.args[0] if self.args else None))

    @classmethod
    def help_text(cls, topic: str | None = None) -> str:
        """Usage for ``topic``, or general usage for unknown topics."""
        command = COMMANDS.get(camelize(topic)) if topic else None
        usage = command.usage if command is not None else cls.usage
        return textwrap.dedent(usage).strip("\n")


class Script:
    """Dispatches script arguments to a command."""

    def __init__(self, manager_factory: ManagerFactory | None = None) -> None:
        self.manager_factory = manager_factory or ExtensionManager

    def command_for(self, args: Sequence[str]) -> ScriptCommand:
        args = list(args)
        command = args.pop(0) if args else "help"
        cls = COMMANDS.get(camelize(command))
        if cls is None:
            raise CommandNotFound(
                f"Unknown command '{command}'. Type 'extension help' for usage."
            )
        return cls(args, self.manager_factory)

    def execute(self, args: Sequence[str]) -> None:
        self.command_for(args).run()
