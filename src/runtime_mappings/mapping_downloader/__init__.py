"""
Runtime mappings downloader.

This package handles:
1. Fetching the version manifest and resolving the version descriptor
2. Downloading artifacts that are missing or fail their digest check
3. Verifying freshly downloaded artifacts
"""

from .downloader import ArtifactDownloader
from .manifest_resolver import ManifestResolver

__all__ = ["ArtifactDownloader", "ManifestResolver"]
