"""
Runtime mappings cache.

This package handles:
1. Locating the per-version cache directory and its artifacts
2. Checking cached artifacts against their expected digests
3. Deciding whether a warm cache lets the pipeline skip the network
"""

from .cache_store import ArtifactKind, ArtifactState, CacheArtifact, CacheStore

__all__ = ["ArtifactKind", "ArtifactState", "CacheArtifact", "CacheStore"]
