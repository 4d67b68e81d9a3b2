"""Extension installation for the host application.

This module fetches extensions listed in the remote registry, installs
them under ``vendor/extensions`` and runs their migration and update
tasks, or rolls them back and removes them.

Sources are acquired by fetch strategies:
- Git, Subversion: version control checkout
- Gem, Tarball, Zip: archive download and unpack
"""

from extensions.errors import ExtensionError
from extensions.fetchers import (
    FetchContext,
    FetchStrategy,
    build_strategy,
    register_strategy,
    registered_strategies,
)
from extensions.installer import Installer, InstallState, Uninstaller
from extensions.manager import ExtensionManager
from extensions.paths import ExtensionPaths, to_extension_name
from extensions.records import ExtensionRecord
from extensions.registry import RegistryClient

__all__ = [
    "ExtensionError",
    "ExtensionManager",
    "ExtensionPaths",
    "ExtensionRecord",
    "FetchContext",
    "FetchStrategy",
    "Installer",
    "InstallState",
    "RegistryClient",
    "Uninstaller",
    "build_strategy",
    "register_strategy",
    "registered_strategies",
    "to_extension_name",
]
