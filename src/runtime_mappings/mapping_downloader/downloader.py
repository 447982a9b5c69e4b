"""
Artifact downloader implementation.

Refreshes a single cached artifact when it is missing or no longer matches
its expected digest.
"""

import logging
from typing import Dict, List, Optional

import requests

from runtime_mappings.mappings_config import MappingsConfig
from runtime_mappings.mappings_logger import MappingsLogger
from runtime_mappings.mappings_utils import FileUtils
from runtime_mappings.mapping_cache import ArtifactState, CacheArtifact


class ArtifactDownloader:
    """
    Downloads cache artifacts, skipping those that are already valid.

    Records which artifacts were fetched so callers can report on them.
    """

    def __init__(
        self,
        config: MappingsConfig,
        logger: MappingsLogger,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the artifact downloader.

        Args:
            config: The mappings configuration; supplies transport timeouts
            logger: Logger for progress and error messages
            session: Optional requests session used for every download
        """
        self.config = config
        self.logger = logger
        self.session = session
        self.downloaded: List[str] = []
        self.skipped: List[str] = []

    def ensure(self, artifact: CacheArtifact, url: str) -> bool:
        """
        Make sure the artifact is cached and valid, downloading it from url if needed.

        Args:
            artifact: The cache slot to verify or refresh
            url: Where to fetch the artifact from

        Returns:
            True if the artifact was downloaded, False if the cached copy was kept

        Raises:
            TransportError: if the download fails
            IntegrityError: if the downloaded file does not match the expected digest
        """
        state = artifact.state()
        if state == ArtifactState.VALID:
            self.skipped.append(artifact.kind.value)
            return False

        if state == ArtifactState.STALE:
            self.logger.log(f"Checksum mismatch for {artifact.kind.value}", logging.WARNING)
            self.logger.log(f"Expected: {artifact.expected_digest}", logging.WARNING)
            self.logger.log(f"Found:    {artifact.current_digest()}", logging.WARNING)

        self.logger.log(f"Downloading {artifact.kind.value} from {url}", logging.INFO)
        FileUtils.write_atomically(
            FileUtils.fetch(self.logger, url, self.config.timeout, self.session),
            artifact.path,
            artifact.expected_digest,
        )

        self.downloaded.append(artifact.kind.value)
        return True

    def get_download_summary(self) -> Dict[str, int]:
        """
        Get a summary of download results.

        Returns:
            Dictionary with counts of downloaded and skipped artifacts
        """
        return {
            "downloaded": len(self.downloaded),
            "skipped": len(self.skipped),
        }
