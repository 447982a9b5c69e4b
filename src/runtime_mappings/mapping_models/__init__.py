"""
Data models for the runtime mappings pipeline.

This package provides Pydantic schema models for the upstream version
manifest and per-version descriptor, and the immutable composed table the
pipeline publishes.
"""

from .version_manifest import VersionManifest, VersionEntry
from .version_descriptor import VersionDescriptor, Downloads, DownloadInfo
from .composed_table import ComposedMappingTable

__all__ = [
    # Upstream documents
    "VersionManifest",
    "VersionEntry",
    "VersionDescriptor",
    "Downloads",
    "DownloadInfo",
    # Output
    "ComposedMappingTable",
]
