"""
The runtime mappings provider.

Drives the whole pipeline once on a background thread: check the cache,
refresh the artifacts that need it, compose the lookup table and publish the
outcome to every waiter.
"""

import asyncio
import enum
import logging
import threading
import time
from concurrent.futures import Future
from typing import Callable, Optional

import requests

from runtime_mappings.mappings_config import MappingsConfig
from runtime_mappings.mappings_logger import MappingsLogger
from runtime_mappings.mapping_cache import ArtifactKind, CacheStore
from runtime_mappings.mapping_composer import MappingComposer
from runtime_mappings.mapping_downloader import ArtifactDownloader, ManifestResolver
from runtime_mappings.mapping_models import ComposedMappingTable

MAPPINGS_THREAD = "Mappings Thread"


class PipelineState(str, enum.Enum):
    IDLE = "idle"
    CHECKING = "checking"
    SKIPPED = "skipped"
    FETCHING = "fetching"
    COMPOSING = "composing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class MappingsProvider:
    """
    Resolves the composed mapping table for one runtime version.

    One instance is constructed by process initialization and passed to every
    consumer. `start_mappings_setup` may be called any number of times from any
    thread; only the first call runs the pipeline. The outcome is published
    once, either as a ComposedMappingTable or as the exception that stopped the
    pipeline.
    """

    def __init__(
        self,
        config: MappingsConfig,
        logger: MappingsLogger,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the provider. Creates the cache directory of the runtime version.

        Args:
            config: The mappings configuration
            logger: Logger for progress and error messages
            session: Optional requests session used for every download
        """
        self.config = config
        self.logger = logger
        self.cache_store = CacheStore(config, logger)
        self.downloader = ArtifactDownloader(config, logger, session)
        self.resolver = ManifestResolver(config, logger, self.cache_store, self.downloader, session)
        self.composer = MappingComposer(config, logger, self.cache_store)

        self._outcome: "Future[ComposedMappingTable]" = Future()
        self._lock = threading.Lock()
        self._setup = False
        self._state = PipelineState.IDLE
        self._start_time = 0.0
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def outcome(self) -> "Future[ComposedMappingTable]":
        """The single-assignment outcome of the pipeline."""
        return self._outcome

    def start_mappings_setup(self) -> "Future[ComposedMappingTable]":
        """
        Start the pipeline on a background thread unless it was already started.

        Never raises because of a pipeline failure; failures are published through the outcome.

        Returns:
            The outcome future
        """
        with self._lock:
            if self._setup:
                return self._outcome
            self._setup = True
            self._start_time = time.monotonic()
            self.logger.log("Starting runtime mappings setup...", logging.INFO)
            self._thread = threading.Thread(target=self._run, name=MAPPINGS_THREAD, daemon=True)
            self._thread.start()
        return self._outcome

    def _transition(self, state: PipelineState) -> None:
        self.logger.log(f"Mappings pipeline: {self._state.value} -> {state.value}", logging.DEBUG)
        self._state = state

    def _run(self) -> None:
        try:
            self._transition(PipelineState.CHECKING)
            if self.cache_store.is_complete():
                self._transition(PipelineState.SKIPPED)
                self.logger.log("Mappings cache is complete, skipping downloads.", logging.INFO)
            else:
                self._transition(PipelineState.FETCHING)
                self._refresh_cache()

            self._transition(PipelineState.COMPOSING)
            table = self.composer.compose()
        except BaseException as e:
            self.logger.log(f"Caught exception while setting up mappings: {e!r}", logging.ERROR)
            self._transition(PipelineState.FAILED)
            self._outcome.set_exception(e)
            if not isinstance(e, Exception):
                raise
            return

        self._transition(PipelineState.SUCCEEDED)
        self._outcome.set_result(table)
        elapsed_ms = int((time.monotonic() - self._start_time) * 1000)
        self.logger.log(f"Finished runtime mappings setup. Loaded runtime mappings in {elapsed_ms}ms", logging.INFO)

    def _refresh_cache(self) -> None:
        descriptor = self.resolver.resolve_descriptor()

        official = self.resolver.resolve_official_download(descriptor)
        self.downloader.ensure(self.cache_store.artifact(ArtifactKind.OFFICIAL, official.sha1), official.url)
        self.logger.log("Official mappings are up to date.", logging.INFO)

        # the archive publishes no digest, so presence is all that is checked
        self.downloader.ensure(self.cache_store.artifact(ArtifactKind.INTERMEDIATE), self.config.archive_url)
        self.logger.log("Intermediate mappings are up to date.", logging.INFO)

        summary = self.downloader.get_download_summary()
        self.logger.log(
            f"Download summary: {summary['downloaded']} downloaded, {summary['skipped']} already cached",
            logging.INFO,
        )

    def is_ready(self) -> bool:
        """True once the outcome has been published, successfully or not."""
        return self._outcome.done()

    def result(self, timeout: Optional[float] = None) -> ComposedMappingTable:
        """
        Block until the outcome is published.

        Raises:
            MappingsException: the failure that stopped the pipeline
            concurrent.futures.TimeoutError: if timeout elapses first
        """
        return self._outcome.result(timeout)

    def add_done_callback(self, fn: Callable[["Future[ComposedMappingTable]"], None]) -> None:
        """
        Call fn with the outcome future once it is published; immediately if it already is.
        """
        self._outcome.add_done_callback(fn)

    async def wait(self) -> ComposedMappingTable:
        """
        Await the outcome from a running event loop.
        """
        return await asyncio.wrap_future(self._outcome)

    def try_get_mappings(self) -> Optional[ComposedMappingTable]:
        """
        Returns the table if it was published successfully, otherwise None.
        """
        if not self._outcome.done() or self._outcome.exception() is not None:
            return None
        return self._outcome.result()
