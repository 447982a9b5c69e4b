"""
Tests for the version-scoped cache store.
"""

from runtime_mappings import Distribution
from runtime_mappings.mapping_cache import ArtifactKind, ArtifactState, CacheStore
from tests.test_utils import RUNTIME_VERSION, build_upstream, create_test_context, populate_cache, sha1_hex


def test_creates_directory_and_readme():
    with create_test_context() as context:
        store = CacheStore(context.config, context.logger)

        assert store.cache_dir == context.data_root / RUNTIME_VERSION
        assert (store.cache_dir / "README").read_text().strip() != ""


def test_readme_is_written_once():
    with create_test_context() as context:
        store = CacheStore(context.config, context.logger)
        (store.cache_dir / "README").write_text("edited")

        CacheStore(context.config, context.logger)

        assert (store.cache_dir / "README").read_text() == "edited"


def test_artifact_paths():
    with create_test_context() as context:
        store = CacheStore(context.config, context.logger)

        assert store.path(ArtifactKind.VERSION_JSON).name == "version.json"
        assert store.path(ArtifactKind.OFFICIAL).name == "official.txt"
        assert store.path(ArtifactKind.INTERMEDIATE).name == "srg.zip"


def test_empty_cache_is_incomplete():
    with create_test_context() as context:
        assert not CacheStore(context.config, context.logger).is_complete()


def test_complete_cache():
    with create_test_context() as context:
        populate_cache(context.cache_dir, build_upstream())
        store = CacheStore(context.config, context.logger)

        assert store.is_complete()
        assert store.is_complete()


def test_stale_official_table_makes_cache_incomplete():
    with create_test_context() as context:
        populate_cache(context.cache_dir, build_upstream())
        (context.cache_dir / "official.txt").write_text("com.example.Foo -> z:\n")
        store = CacheStore(context.config, context.logger)

        first = store.is_complete()
        second = store.is_complete()

        assert first is False
        assert second is False


def test_missing_archive_makes_cache_incomplete():
    with create_test_context() as context:
        populate_cache(context.cache_dir, build_upstream())
        (context.cache_dir / "srg.zip").unlink()

        assert not CacheStore(context.config, context.logger).is_complete()


def test_archive_is_checked_by_presence_only():
    with create_test_context() as context:
        populate_cache(context.cache_dir, build_upstream())
        (context.cache_dir / "srg.zip").write_bytes(b"anything")

        assert CacheStore(context.config, context.logger).is_complete()


def test_malformed_descriptor_makes_cache_incomplete():
    with create_test_context() as context:
        populate_cache(context.cache_dir, build_upstream())
        (context.cache_dir / "version.json").write_text("{not json")

        assert not CacheStore(context.config, context.logger).is_complete()


def test_distribution_selects_official_digest():
    with create_test_context({"distribution": Distribution.SERVER}) as context:
        upstream = build_upstream()
        populate_cache(context.cache_dir, upstream)

        # the client table is cached but the server digest is expected
        assert not CacheStore(context.config, context.logger).is_complete()

        (context.cache_dir / "official.txt").write_bytes(upstream.server_official)
        assert CacheStore(context.config, context.logger).is_complete()


def test_artifact_state():
    with create_test_context() as context:
        store = CacheStore(context.config, context.logger)
        artifact = store.artifact(ArtifactKind.OFFICIAL, sha1_hex(b"expected"))

        assert artifact.state() == ArtifactState.MISSING

        artifact.path.write_bytes(b"something else")
        assert artifact.state() == ArtifactState.STALE
        assert artifact.current_digest() == sha1_hex(b"something else")

        artifact.path.write_bytes(b"expected")
        assert artifact.state() == ArtifactState.VALID
        assert artifact.is_valid()
