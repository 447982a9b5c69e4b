"""
Pydantic data models for the upstream version manifest.

The manifest lists every known runtime version together with the URL and
SHA-1 digest of its per-version descriptor.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from runtime_mappings.mappings_exceptions import FormatError


class VersionEntry(BaseModel):
    """A single `{id, url, sha1}` entry of the manifest."""

    id: str = Field(..., description="The runtime version identifier")
    url: str = Field(..., description="URL of the per-version descriptor JSON")
    sha1: str = Field(..., description="Hex SHA-1 digest of the descriptor JSON")
    type: Optional[str] = Field(None, description="Release channel, e.g. release or snapshot")

    class Config:
        extra = "ignore"


class VersionManifest(BaseModel):
    """
    The parsed version manifest.

    Only the ordered list of versions is modelled; everything else in the
    document is ignored.
    """

    versions: List[VersionEntry] = Field(default_factory=list)

    class Config:
        extra = "ignore"

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> "VersionManifest":
        """
        Parse the manifest document.

        Raises:
            FormatError: if the document is not valid JSON or does not match the schema
        """
        try:
            return cls.model_validate_json(data)
        except ValidationError as e:
            raise FormatError(f"Malformed version manifest: {e}") from e

    def find(self, version: str) -> Optional[VersionEntry]:
        """
        Find the entry for the given version.

        Args:
            version: The runtime version identifier

        Returns:
            The first matching VersionEntry or None if the version is not listed
        """
        return next((entry for entry in self.versions if entry.id == version), None)
