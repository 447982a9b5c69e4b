"""
Shared fixtures for the runtime mappings tests: sample tables, archives and a mocked upstream.
"""

import contextlib
import dataclasses
import hashlib
import io
import json
import logging
import pathlib
import shutil
import tempfile
import zipfile
from typing import Dict, Iterator, Optional

import responses

from runtime_mappings import MappingsConfig, MappingsLogger

RUNTIME_VERSION = "1.20.1"
BUILD_ID = "20230612.114412"
MANIFEST_URL = "https://meta.test/mc/game/version_manifest_v2.json"
DESCRIPTOR_URL = f"https://meta.test/v1/packages/{RUNTIME_VERSION}.json"
CLIENT_MAPPINGS_URL = "https://meta.test/v1/objects/client.txt"
SERVER_MAPPINGS_URL = "https://meta.test/v1/objects/server.txt"
ARCHIVE_URL_TEMPLATE = "https://maven.test/mcp_config/{runtime_version}-{build_id}/mcp_config.zip"
ARCHIVE_URL = ARCHIVE_URL_TEMPLATE.format(runtime_version=RUNTIME_VERSION, build_id=BUILD_ID)

OFFICIAL_TEXT = """\
# {"fileName":"client_mappings.txt","id":"sourceFile"}
com.example.Foo -> a:
    int value -> f
    java.lang.String name -> g
    1:3:void doThing() -> m
    4:6:void doThing(com.example.Bar) -> m
    void keep() -> k
    int count() -> c
com.example.Bar -> b:
    void run() -> r
com.example.Unmapped -> c:
    void go() -> g
"""

SERVER_OFFICIAL_TEXT = """\
com.example.Server -> d:
    void tick() -> t
"""

JOINED_TSRG = """\
tsrg2 obf srg id
a net/minecraft/src/C_1_ 1
\tf f_67890_ 67890
\tg f_11111_ 11111
\tm ()V m_12345_ 12345
\tm (Lb;)V m_54321_ 54321
\t\t0 o p_54321_0_ 0
\tk ()V k 0
\tc ()I m_22222_ 22222
\t\tstatic
b net/minecraft/src/C_2_ 2
\tr ()V m_33333_ 33333
d net/minecraft/src/C_4_ 4
\tt ()V m_44444_ 44444
"""

EXPECTED_TABLE = {
    "com.example.Foo": {
        "methods": {"doThing": ["m_12345_", "m_54321_"], "count": ["m_22222_"]},
        "fields": {"value": "f_67890_", "name": "f_11111_"},
    },
    "com.example.Bar": {
        "methods": {"run": ["m_33333_"]},
        "fields": {},
    },
}


def sha1_hex(data: bytes) -> str:
    return hashlib.sha1(data).hexdigest()


def make_zip(entries: Dict[str, str]) -> bytes:
    """Build an in-memory zip archive from entry name to text content."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, content in entries.items():
            archive.writestr(name, content)
    return buffer.getvalue()


@dataclasses.dataclass
class Upstream:
    """The bodies served by the mocked upstream."""

    manifest: bytes
    descriptor: bytes
    official: bytes
    server_official: bytes
    archive: bytes


def build_upstream(
    official: str = OFFICIAL_TEXT,
    joined: str = JOINED_TSRG,
    version: str = RUNTIME_VERSION,
) -> Upstream:
    official_bytes = official.encode("utf-8")
    server_bytes = SERVER_OFFICIAL_TEXT.encode("utf-8")
    descriptor = json.dumps(
        {
            "id": version,
            "downloads": {
                "client": {"url": "https://meta.test/client.jar", "sha1": "0" * 40, "size": 1},
                "client_mappings": {"url": CLIENT_MAPPINGS_URL, "sha1": sha1_hex(official_bytes), "size": len(official_bytes)},
                "server_mappings": {"url": SERVER_MAPPINGS_URL, "sha1": sha1_hex(server_bytes), "size": len(server_bytes)},
            },
        }
    ).encode("utf-8")
    manifest = json.dumps(
        {
            "latest": {"release": version, "snapshot": version},
            "versions": [
                {"id": "1.19.4", "type": "release", "url": "https://meta.test/v1/packages/1.19.4.json", "sha1": "1" * 40},
                {"id": version, "type": "release", "url": DESCRIPTOR_URL, "sha1": sha1_hex(descriptor)},
            ],
        }
    ).encode("utf-8")
    return Upstream(
        manifest=manifest,
        descriptor=descriptor,
        official=official_bytes,
        server_official=server_bytes,
        archive=make_zip({"config/joined.tsrg": joined}),
    )


def register_upstream(upstream: Upstream) -> None:
    """Serve the upstream through the active `responses` mock."""
    responses.add(responses.GET, MANIFEST_URL, body=upstream.manifest, status=200)
    responses.add(responses.GET, DESCRIPTOR_URL, body=upstream.descriptor, status=200)
    responses.add(responses.GET, CLIENT_MAPPINGS_URL, body=upstream.official, status=200)
    responses.add(responses.GET, SERVER_MAPPINGS_URL, body=upstream.server_official, status=200)
    responses.add(responses.GET, ARCHIVE_URL, body=upstream.archive, status=200)


def populate_cache(cache_dir: pathlib.Path, upstream: Upstream) -> None:
    """Write every artifact of the upstream into a cache directory, as a previous run would have."""
    cache_dir.mkdir(parents=True, exist_ok=True)
    (cache_dir / "version.json").write_bytes(upstream.descriptor)
    (cache_dir / "official.txt").write_bytes(upstream.official)
    (cache_dir / "srg.zip").write_bytes(upstream.archive)


def requested_urls() -> list:
    return [call.request.url for call in responses.calls]


@dataclasses.dataclass
class TestContext:
    config: MappingsConfig
    logger: MappingsLogger
    data_root: pathlib.Path

    __test__ = False

    @property
    def cache_dir(self) -> pathlib.Path:
        return self.data_root / self.config.runtime_version


@contextlib.contextmanager
def create_test_context(params: Optional[dict] = None) -> Iterator[TestContext]:
    """
    Creates a config pointing at a fresh temporary data root and the mocked upstream URLs.
    """
    data_root = pathlib.Path(tempfile.mkdtemp(prefix="runtime_mappings_"))
    values = {
        "runtime_version": RUNTIME_VERSION,
        "build_id": BUILD_ID,
        "data_root": str(data_root),
        "manifest_url": MANIFEST_URL,
        "archive_url_template": ARCHIVE_URL_TEMPLATE,
    }
    values.update(params or {})
    config = MappingsConfig.from_dict(values)
    logger = MappingsLogger()
    logger.logger.setLevel(logging.DEBUG)
    try:
        yield TestContext(config=config, logger=logger, data_root=data_root)
    finally:
        shutil.rmtree(data_root, ignore_errors=True)
