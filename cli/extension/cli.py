"""Extension CLI.

Installs and removes extensions listed in the extension registry.
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.logging import RichHandler

from cli.commands.script import Script
from cli.extension.output import error_console, print_error
from extensions.errors import ExtensionError
from extensions.manager import ExtensionManager
from pipeline.config import ConfigError, reload_config

app = typer.Typer(
    name="extension",
    help="Install and uninstall extensions from the extension registry.",
    add_completion=False,
)


def setup_logging(level: str) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=error_console,
                rich_tracebacks=True,
                show_path=False,
            )
        ],
        force=True,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


@app.command(context_settings={"ignore_unknown_options": True})
def extension(
    args: Optional[List[str]] = typer.Argument(
        None,
        help="Command and its arguments: install NAME | uninstall NAME | help [COMMAND]",
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to extension.toml (default: search current and parent directories)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging",
    ),
) -> None:
    """Manage extensions.

    Examples:
        extension install page_attachments
        extension uninstall page_attachments
        extension help install
    """
    try:
        config = reload_config(config_path)
    except ConfigError as e:
        print_error(e.message)
        raise typer.Exit(e.exit_code)
    setup_logging("DEBUG" if verbose else config.log_level)

    script = Script(manager_factory=lambda: ExtensionManager(config))
    try:
        script.execute(args or [])
    except ExtensionError as e:
        print_error(e.message)
        raise typer.Exit(e.exit_code)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
