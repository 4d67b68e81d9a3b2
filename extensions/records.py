"""Registry records describing installable extensions."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ExtensionRecord(BaseModel):
    """An extension entry from the remote registry.

    ``install_type`` names the fetch strategy used to acquire the source.
    Checkout strategies read ``repository_url``, download strategies read
    ``download_url``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    name: str = Field(..., min_length=1, description="Underscored extension name")
    install_type: str | None = Field(
        None,
        validation_alias=AliasChoices("install_type", "installType"),
        description="Fetch strategy tag, e.g. Git or Tarball",
    )
    repository_url: str | None = Field(
        None,
        validation_alias=AliasChoices("repository_url", "repositoryUrl"),
        description="Source repository for checkout strategies",
    )
    download_url: str | None = Field(
        None,
        validation_alias=AliasChoices("download_url", "downloadUrl"),
        description="Archive location for download strategies",
    )
    description: str | None = None
    author: str | None = None
    homepage: str | None = None
    version: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExtensionRecord:
        """Create from a registry payload entry.

        Entries may be wrapped in an ``{"extension": {...}}`` envelope.
        """
        if set(data) == {"extension"} and isinstance(data["extension"], dict):
            data = data["extension"]
        return cls.model_validate(data)
