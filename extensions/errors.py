"""Errors raised by the extension install pipeline.

Every error carries the process exit code the command-line script uses
when it aborts with that error.
"""


class ExtensionError(Exception):
    """Base class for extension script errors."""

    exit_code = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingArgument(ExtensionError):
    """Raised when a command needs an extension name and none was given."""

    exit_code = 2


class CommandNotFound(ExtensionError):
    """Raised when the script is called with an unknown subcommand."""

    exit_code = 3


class UnknownInstallType(ExtensionError):
    """Raised when no fetch strategy is registered for a record."""

    exit_code = 4


class ExtensionNotFound(ExtensionError):
    """Raised when the registry has no extension with the requested name."""

    exit_code = 5


class RegistryError(ExtensionError):
    """Raised when the remote registry cannot be reached or decoded."""

    exit_code = 6


class FetchFailure(ExtensionError):
    """Raised when checking out or downloading an extension fails."""

    exit_code = 7


class FetchParseError(FetchFailure):
    """Raised when unpack output does not have the expected shape."""

    exit_code = 8


class CopyFailure(ExtensionError):
    """Raised when the fetched source cannot be copied into place."""

    exit_code = 9


class TaskFailure(ExtensionError):
    """Raised when a migration or update task exits unsuccessfully."""

    exit_code = 10


class RemoveFailure(ExtensionError):
    """Raised when an installed extension directory cannot be removed."""

    exit_code = 11


class AlreadyInstalled(ExtensionError):
    """Install requested for an extension that is already present.

    A policy outcome, reported to the user rather than treated as failure.
    """

    exit_code = 0


class NotInstalled(ExtensionError):
    """Uninstall requested for an extension that is not present."""

    exit_code = 0
