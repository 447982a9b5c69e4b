"""
Pydantic data models for the per-version descriptor (version.json).
"""

from typing import Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from runtime_mappings.mappings_config import Distribution
from runtime_mappings.mappings_exceptions import FormatError


class DownloadInfo(BaseModel):
    """A downloadable file together with its published digest."""

    url: str = Field(..., description="URL to download from")
    sha1: str = Field(..., description="Hex SHA-1 digest of the file")
    size: Optional[int] = Field(None, description="Size in bytes, if published")

    class Config:
        extra = "ignore"

    @field_validator("sha1")
    @classmethod
    def _check_sha1(cls, value: str) -> str:
        if len(value) != 40 or any(ch not in "0123456789abcdefABCDEF" for ch in value):
            raise ValueError(f"not a SHA-1 hex digest: {value!r}")
        return value


class Downloads(BaseModel):
    """The downloads section of the descriptor."""

    client_mappings: Optional[DownloadInfo] = Field(None)
    server_mappings: Optional[DownloadInfo] = Field(None)

    class Config:
        extra = "ignore"


class VersionDescriptor(BaseModel):
    """
    The per-version descriptor.

    Only the official mappings downloads are modelled. Which of the two
    branches applies is decided by the active Distribution.
    """

    id: Optional[str] = Field(None)
    downloads: Downloads = Field(...)

    class Config:
        extra = "ignore"

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> "VersionDescriptor":
        """
        Parse a descriptor document.

        Raises:
            FormatError: if the document is not valid JSON or does not match the schema
        """
        try:
            return cls.model_validate_json(data)
        except ValidationError as e:
            raise FormatError(f"Malformed version descriptor: {e}") from e

    def official_mappings(self, distribution: Distribution) -> DownloadInfo:
        """
        Select the official mappings download for the distribution.

        Raises:
            FormatError: if the descriptor has no mappings for that distribution
        """
        if distribution == Distribution.CLIENT:
            info = self.downloads.client_mappings
        else:
            info = self.downloads.server_mappings
        if info is None:
            raise FormatError(f"Version descriptor has no {distribution}_mappings download")
        return info
