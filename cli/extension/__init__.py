"""Extension CLI.

Command-line interface for installing registry extensions. The console
entry point is ``cli.extension.cli:main``.
"""

__version__ = "0.1.0"
