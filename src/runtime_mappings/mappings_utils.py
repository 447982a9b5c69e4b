"""
This file contains the content fetcher and integrity verifier used by the runtime mappings pipeline.
"""

import hashlib
import logging
import os
import pathlib
import tempfile
from typing import Iterable, Iterator, Optional, Tuple, Union

import requests

from runtime_mappings.mappings_exceptions import FormatError, IntegrityError, TransportError
from runtime_mappings.mappings_logger import MappingsLogger

CHUNK_SIZE = 8192


class FileUtils:
    """
    Utility functions for downloading files and writing them into the cache
    """

    @staticmethod
    def fetch(
        logger: MappingsLogger,
        url: str,
        timeout: Optional[Tuple[float, float]] = None,
        session: Optional[requests.Session] = None,
    ) -> Iterator[bytes]:
        """
        Performs a GET request for the url and returns an iterator over the decoded body.

        The request advertises gzip support; a gzip content-encoded body is decompressed
        while iterating. A non-success status raises TransportError before any byte is returned.
        """
        http = session or requests
        logger.log(f"Fetching {url}", logging.DEBUG)
        try:
            response = http.get(
                url,
                headers={"Accept-Encoding": "gzip"},
                stream=True,
                timeout=timeout,
            )
        except requests.RequestException as e:
            raise TransportError(url, reason=str(e)) from e

        if response.status_code != 200:
            response.close()
            raise TransportError(url, status_code=response.status_code)

        return FileUtils._iter_body(response, url)

    @staticmethod
    def _iter_body(response: requests.Response, url: str) -> Iterator[bytes]:
        try:
            for chunk in response.iter_content(CHUNK_SIZE):
                if chunk:
                    yield chunk
        except requests.RequestException as e:
            raise TransportError(url, reason=str(e)) from e
        finally:
            response.close()

    @staticmethod
    def fetch_bytes(
        logger: MappingsLogger,
        url: str,
        timeout: Optional[Tuple[float, float]] = None,
        session: Optional[requests.Session] = None,
    ) -> bytes:
        """
        Fetches the whole body of the url into memory.
        """
        return b"".join(FileUtils.fetch(logger, url, timeout, session))

    @staticmethod
    def write_atomically(
        chunks: Iterable[bytes],
        target_path: Union[str, pathlib.Path],
        expected_hex: Optional[str] = None,
    ) -> None:
        """
        Writes the chunks to a temporary file next to target_path and moves it into place.

        The target is only replaced once every chunk has been written and, when
        expected_hex is given, the written content matches that SHA-1 digest. A failed
        or mismatching download leaves any previous file under the final name untouched.

        Raises:
            IntegrityError: if the content does not match expected_hex
        """
        expected = DigestUtils.decode_hex(expected_hex) if expected_hex is not None else None
        sha1 = hashlib.sha1()
        target = pathlib.Path(target_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".part", dir=str(target.parent))
        try:
            with os.fdopen(fd, "wb") as out:
                for chunk in chunks:
                    sha1.update(chunk)
                    out.write(chunk)
            if expected is not None and sha1.digest() != expected:
                raise IntegrityError(str(target), expected_hex, sha1.hexdigest())
            os.replace(tmp_name, target)
        except BaseException:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise


class DigestUtils:
    """
    Utility functions for checking cached files against their published SHA-1 digests
    """

    @staticmethod
    def digest(path: Union[str, pathlib.Path]) -> bytes:
        """
        Computes the SHA-1 digest of the file, reading it in fixed-size chunks.
        """
        sha1 = hashlib.sha1()
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
                sha1.update(chunk)
        return sha1.digest()

    @staticmethod
    def decode_hex(value: str) -> bytes:
        """
        Decodes a hex string into raw bytes.

        Raises:
            FormatError: if the string has odd length or contains a non-hex character
        """
        if len(value) % 2 != 0:
            raise FormatError(f"Invalid hex string (odd length): {value!r}")
        for ch in value:
            if ch not in "0123456789abcdefABCDEF":
                raise FormatError(f"Invalid hex digit: {ch!r}")
        return bytes.fromhex(value)

    @staticmethod
    def matches(path: Union[str, pathlib.Path], expected_hex: str) -> bool:
        """
        Returns True if the file exists and its digest equals expected_hex.
        """
        if not os.path.isfile(path):
            return False
        return DigestUtils.digest(path) == DigestUtils.decode_hex(expected_hex)
