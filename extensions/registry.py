"""Client for the remote extension registry."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urljoin

import httpx
from pydantic import ValidationError

from extensions.errors import ExtensionNotFound, RegistryError
from extensions.records import ExtensionRecord
from pipeline.config import RegistryConfig

logger = logging.getLogger(__name__)


class RegistryClient:
    """Looks up extension records in the remote registry.

    Example:
        >>> client = RegistryClient(RegistryConfig(url="http://ext.example.org/"))
        >>> client.find_by_name("page_attachments").install_type
        'Git'
    """

    def __init__(
        self,
        config: RegistryConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the registry client.

        Args:
            config: Registry location and timeout.
            transport: Optional httpx transport (used by tests).
        """
        self.config = config or RegistryConfig()
        self.transport = transport

    @property
    def base_url(self) -> str:
        return self.config.url

    def _request(self, method: str, endpoint: str) -> Any:
        """Make a registry API request and return the decoded JSON body."""
        url = urljoin(self.base_url.rstrip("/") + "/", endpoint.lstrip("/"))
        logger.debug("%s %s", method, url)

        try:
            with httpx.Client(
                timeout=self.config.timeout,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                response = client.request(
                    method, url, headers={"Accept": "application/json"}
                )
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            raise RegistryError(
                f"Registry error: HTTP {e.response.status_code} from {url}"
            ) from e
        except httpx.RequestError as e:
            raise RegistryError(f"Connection error: {e}") from e
        except ValueError as e:
            raise RegistryError(f"Invalid response from {url}: {e}") from e

    def list_all(self) -> list[ExtensionRecord]:
        """List every extension in the registry.

        Returns:
            Extension records in registry order.
        """
        data = self._request("GET", "/extensions.json")
        if isinstance(data, dict):
            data = data.get("extensions", data.get("items"))
        if not isinstance(data, list):
            raise RegistryError("Registry returned an unexpected extension listing")

        try:
            return [ExtensionRecord.from_dict(entry) for entry in data]
        except (ValidationError, TypeError) as e:
            raise RegistryError(f"Registry returned an invalid extension record: {e}") from e

    def find_by_name(self, name: str) -> ExtensionRecord:
        """Get the record for an extension.

        Args:
            name: Underscored extension name.

        Raises:
            ExtensionNotFound: If the registry has no such extension.
        """
        for record in self.list_all():
            if record.name == name:
                return record
        raise ExtensionNotFound(f"Extension '{name}' was not found in the registry")
