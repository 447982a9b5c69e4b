"""
Version-scoped cache of the mapping artifacts.

Each runtime version owns one directory under the data root holding the
descriptor snapshot, the official table and the intermediate archive.
"""

import enum
import logging
import os
import pathlib
from typing import Optional

from runtime_mappings.mappings_config import MappingsConfig
from runtime_mappings.mappings_exceptions import FormatError
from runtime_mappings.mappings_logger import MappingsLogger
from runtime_mappings.mappings_utils import DigestUtils
from runtime_mappings.mapping_models import VersionDescriptor

README = "README"
README_RESOURCE = pathlib.Path(os.path.dirname(__file__)).parent / "resources" / "cache_readme.txt"


class ArtifactKind(str, enum.Enum):
    """The three cached artifacts, valued by their file name."""

    VERSION_JSON = "version.json"
    OFFICIAL = "official.txt"
    INTERMEDIATE = "srg.zip"


class ArtifactState:
    """Enumeration of artifact states."""

    MISSING = "missing"
    STALE = "stale"
    VALID = "valid"


class CacheArtifact:
    """
    A single cached file and the digest it is expected to have.

    When no digest is expected the artifact is valid as soon as it exists.
    """

    def __init__(self, kind: ArtifactKind, path: pathlib.Path, expected_digest: Optional[str] = None):
        self.kind = kind
        self.path = path
        self.expected_digest = expected_digest

    def is_present(self) -> bool:
        return self.path.is_file()

    def state(self) -> str:
        """
        Returns the ArtifactState of the file on disk.

        Raises:
            FormatError: if the expected digest is not a hex string
        """
        if not self.is_present():
            return ArtifactState.MISSING
        if self.expected_digest is None:
            return ArtifactState.VALID
        if DigestUtils.matches(self.path, self.expected_digest):
            return ArtifactState.VALID
        return ArtifactState.STALE

    def is_valid(self) -> bool:
        return self.state() == ArtifactState.VALID

    def current_digest(self) -> Optional[str]:
        if not self.is_present():
            return None
        return DigestUtils.digest(self.path).hex()

    def __repr__(self) -> str:
        return f"CacheArtifact(kind={self.kind.value}, path={self.path}, expected={self.expected_digest})"


class CacheStore:
    """
    Maps the configured runtime version to its cache directory.

    The directory and its README are created on construction.
    """

    def __init__(self, config: MappingsConfig, logger: MappingsLogger):
        """
        Initialize the cache store.

        Args:
            config: The mappings configuration; selects the data root and runtime version
            logger: Logger for cache messages
        """
        self.config = config
        self.logger = logger
        self.cache_dir = pathlib.Path(config.data_root) / config.runtime_version
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self._write_readme()

    def _write_readme(self) -> None:
        readme = self.cache_dir / README
        if readme.exists():
            return
        readme.write_bytes(README_RESOURCE.read_bytes())
        self.logger.log(f"Created mappings cache at {self.cache_dir}", logging.INFO)

    def path(self, kind: ArtifactKind) -> pathlib.Path:
        return self.cache_dir / kind.value

    def artifact(self, kind: ArtifactKind, expected_digest: Optional[str] = None) -> CacheArtifact:
        """
        Returns the cache slot for kind, expecting the given digest.
        """
        return CacheArtifact(kind, self.path(kind), expected_digest)

    def read_descriptor(self) -> VersionDescriptor:
        """
        Parse the cached version.json.

        Raises:
            FormatError: if the file is missing or malformed
        """
        path = self.path(ArtifactKind.VERSION_JSON)
        if not path.is_file():
            raise FormatError(f"No cached version descriptor at {path}")
        return VersionDescriptor.from_json(path.read_bytes())

    def is_complete(self) -> bool:
        """
        Check whether every artifact is cached and still valid for this runtime version.

        The descriptor snapshot supplies the digest of the official table, which must
        still match. The intermediate archive is only required to be present.

        Returns:
            True if the pipeline can skip all network work
        """
        if not all(self.path(kind).is_file() for kind in ArtifactKind):
            return False

        try:
            descriptor = self.read_descriptor()
            official = descriptor.official_mappings(self.config.distribution)
            return self.artifact(ArtifactKind.OFFICIAL, official.sha1).is_valid()
        except FormatError as e:
            self.logger.log(f"Cached version descriptor is unusable: {e.message}", logging.WARNING)
            return False

    def __repr__(self) -> str:
        return f"CacheStore(version={self.config.runtime_version}, dir={self.cache_dir})"
