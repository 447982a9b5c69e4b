"""
This module contains the exceptions raised by the runtime mappings pipeline.
"""

from typing import Optional


class MappingsException(Exception):
    """
    Base exception for all errors raised while resolving runtime mappings.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TransportError(MappingsException):
    """
    Raised when a download fails at the network level or returns a non-success status.
    """

    def __init__(self, url: str, status_code: Optional[int] = None, reason: str = ""):
        self.url = url
        self.status_code = status_code
        if status_code is not None:
            message = f'Failed to download file from "{url}" ({status_code})'
        else:
            message = f'Failed to download file from "{url}": {reason}'
        super().__init__(message)


class FormatError(MappingsException):
    """
    Raised when a document, archive or digest string is malformed.
    """


class IntegrityError(FormatError):
    """
    Raised when a freshly downloaded artifact does not match its expected digest.
    """

    def __init__(self, path: str, expected: str, found: str):
        self.path = path
        self.expected = expected
        self.found = found
        super().__init__(
            f"Checksum mismatch for {path} after download: expected {expected}, found {found}"
        )


class UnknownVersionError(MappingsException):
    """
    Raised when the version manifest has no entry for the running runtime version.
    """

    def __init__(self, version: str):
        self.version = version
        super().__init__(f"Runtime version {version} is not listed in the version manifest")
