"""
Resolves the per-version descriptor from the upstream version manifest.
"""

import logging
from typing import Optional

import requests

from runtime_mappings.mappings_config import MappingsConfig
from runtime_mappings.mappings_exceptions import UnknownVersionError
from runtime_mappings.mappings_logger import MappingsLogger
from runtime_mappings.mappings_utils import FileUtils
from runtime_mappings.mapping_cache import ArtifactKind, CacheStore
from runtime_mappings.mapping_downloader.downloader import ArtifactDownloader
from runtime_mappings.mapping_models import DownloadInfo, VersionDescriptor, VersionEntry, VersionManifest


class ManifestResolver:
    """
    Fetches the version manifest and keeps the cached version.json in sync with it.
    """

    def __init__(
        self,
        config: MappingsConfig,
        logger: MappingsLogger,
        cache_store: CacheStore,
        downloader: ArtifactDownloader,
        session: Optional[requests.Session] = None,
    ):
        self.config = config
        self.logger = logger
        self.cache_store = cache_store
        self.downloader = downloader
        self.session = session

    def fetch_manifest(self) -> VersionManifest:
        """
        Fetch and parse the version manifest. The manifest itself is never cached.
        """
        body = FileUtils.fetch_bytes(self.logger, self.config.manifest_url, self.config.timeout, self.session)
        return VersionManifest.from_json(body)

    def resolve_entry(self, manifest: VersionManifest) -> VersionEntry:
        """
        Find the manifest entry of the running runtime version.

        Raises:
            UnknownVersionError: if the manifest does not list the version
        """
        entry = manifest.find(self.config.runtime_version)
        if entry is None:
            raise UnknownVersionError(self.config.runtime_version)
        return entry

    def resolve_descriptor(self) -> VersionDescriptor:
        """
        Resolve the descriptor of the running runtime version.

        The cached version.json is refreshed when it does not match the digest
        published in the manifest, then parsed from the cache.

        Raises:
            UnknownVersionError: if the manifest does not list the version
            TransportError: if a download fails
            FormatError: if the manifest or descriptor is malformed
        """
        entry = self.resolve_entry(self.fetch_manifest())
        self.logger.log("Found version metadata from the version manifest.", logging.INFO)

        artifact = self.cache_store.artifact(ArtifactKind.VERSION_JSON, entry.sha1)
        self.downloader.ensure(artifact, entry.url)
        self.logger.log("version.json is up to date.", logging.INFO)

        return self.cache_store.read_descriptor()

    def resolve_official_download(self, descriptor: VersionDescriptor) -> DownloadInfo:
        """
        Select the official mappings URL and digest for the configured distribution.
        """
        return descriptor.official_mappings(self.config.distribution)
